"""Cross-domain login: accept a host-issued session token and land on the admin surface."""

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import RedirectResponse
from loguru import logger
from pydantic import BaseModel

from src.cobalt_cms.api.http.deps import get_admin_session_service, get_admin_user_repository
from src.cobalt_cms.core.exceptions import SessionTokenError
from src.cobalt_cms.core.services.session.admin_session import (
    AdminSessionService,
    secure_cookie_settings,
)
from src.cobalt_cms.core.services.token.permissions import has_cms_role
from src.cobalt_cms.entities.core.admin_user import AdminUser, AdminUserRepository
from src.cobalt_cms.runtime.context import get_config

router = APIRouter(tags=["cross-auth"])


class ValidateTokenRequest(BaseModel):
    token: str | None = None


class ValidatedUser(BaseModel):
    id: str
    username: str | None = None
    email: str
    roles: list[str]
    isCMS: bool


class ValidateTokenResponse(BaseModel):
    valid: bool
    user: ValidatedUser


def _load_user(
    token: str, session_service: AdminSessionService, user_repo: AdminUserRepository
) -> AdminUser:
    try:
        user_id = session_service.admin_user_id(token)
    except SessionTokenError:
        raise HTTPException(status_code=401, detail="Invalid token") from None

    user = user_repo.get(user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")
    return user


@router.get("/admin/auth/login")
@router.get("/cms-auth/login")
@router.get("/cross-auth")
async def cross_domain_login(
    token: str | None = Query(default=None),
    session_service: AdminSessionService = Depends(get_admin_session_service),
    user_repo: AdminUserRepository = Depends(get_admin_user_repository),
) -> RedirectResponse:
    """Set admin cookies for a host-issued token and redirect to the admin surface."""
    if not token:
        raise HTTPException(status_code=400, detail="Token is required")

    user = _load_user(token, session_service, user_repo)
    if not user.is_active:
        raise HTTPException(status_code=401, detail="User account is disabled")

    config = get_config()
    if not has_cms_role(user, config.bridge.super_admin_role_code):
        raise HTTPException(status_code=403, detail="User does not have CMS access")

    credential = session_service.issue_session(user)
    response = RedirectResponse(url=config.app.admin_path, status_code=302)
    response.set_cookie(
        key=config.bridge.cross_auth_cookie_name,
        value=credential,
        max_age=config.bridge.cross_auth_cookie_max_age_hours * 3600,
        **secure_cookie_settings(),
    )
    session_service.attach_cookie(response, credential)

    logger.info(f"Cross-domain login for {user.email}")
    return response


@router.post("/cross-auth/validate", response_model=ValidateTokenResponse)
async def validate_token(
    body: ValidateTokenRequest,
    session_service: AdminSessionService = Depends(get_admin_session_service),
    user_repo: AdminUserRepository = Depends(get_admin_user_repository),
) -> ValidateTokenResponse:
    if not body.token:
        raise HTTPException(status_code=400, detail="Token is required")

    user = _load_user(body.token, session_service, user_repo)
    return ValidateTokenResponse(
        valid=True,
        user=ValidatedUser(
            id=user.id,
            username=user.username,
            email=user.email,
            roles=user.role_codes,
            isCMS=has_cms_role(user, get_config().bridge.super_admin_role_code),
        ),
    )
