"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.cobalt_cms.api.http.app_data import ApplicationDependencies
from src.cobalt_cms.core.services.auto_login import AutoLoginService
from src.cobalt_cms.core.services.identity.audit import LoginAuditService
from src.cobalt_cms.core.services.identity.provisioner import IdentityProvisioner
from src.cobalt_cms.core.services.session.admin_session import AdminSessionService
from src.cobalt_cms.core.services.token.codec import ExternalTokenCodec
from src.cobalt_cms.entities.core.admin_user import AdminUserRepository


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_db_session(request: Request) -> Iterator[Session]:
    """Request-scoped database session, closed when the response is sent."""
    session = get_app_dependencies(request).database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_admin_session_service(request: Request) -> AdminSessionService:
    """Get the admin session service instance."""
    return get_app_dependencies(request).admin_session_service


def get_token_codec(request: Request) -> ExternalTokenCodec:
    """Get the external token codec instance."""
    return get_app_dependencies(request).token_codec


def get_admin_user_repository(db: Session = Depends(get_db_session)) -> AdminUserRepository:
    return AdminUserRepository(db)


def get_login_audit_service(db: Session = Depends(get_db_session)) -> LoginAuditService:
    return LoginAuditService(db)


def get_identity_provisioner(
    db: Session = Depends(get_db_session),
    audit_service: LoginAuditService = Depends(get_login_audit_service),
) -> IdentityProvisioner:
    return IdentityProvisioner(db, audit_service)


def get_auto_login_service(
    codec: ExternalTokenCodec = Depends(get_token_codec),
    provisioner: IdentityProvisioner = Depends(get_identity_provisioner),
    session_service: AdminSessionService = Depends(get_admin_session_service),
    audit_service: LoginAuditService = Depends(get_login_audit_service),
) -> AutoLoginService:
    """Get the auto-login orchestration service for this request."""
    return AutoLoginService(codec, provisioner, session_service, audit_service)
