"""Orchestration of the Cobalt auto-login exchange."""

from dataclasses import dataclass

from loguru import logger

from src.cobalt_cms.core.exceptions import (
    AccessDeniedError,
    InactiveIdentityError,
    TokenExpiredError,
)
from src.cobalt_cms.core.models.claims import ExternalClaims
from src.cobalt_cms.core.services.identity.audit import LoginAuditService
from src.cobalt_cms.core.services.identity.provisioner import IdentityProvisioner
from src.cobalt_cms.core.services.session.admin_session import AdminSessionService
from src.cobalt_cms.core.services.token.codec import ExternalTokenCodec
from src.cobalt_cms.core.services.token.permissions import is_authorized
from src.cobalt_cms.entities.core.admin_user import AdminUser


@dataclass
class AutoLoginResult:
    user: AdminUser
    created: bool
    credential: str
    claims: ExternalClaims

    @property
    def message(self) -> str:
        return "User created and logged in successfully" if self.created else "Auto-login successful"


class AutoLoginService:
    """Decode, authorize, provision and issue, in that order.

    Failures surface as domain exceptions; the router maps them to HTTP statuses.
    """

    def __init__(
        self,
        codec: ExternalTokenCodec,
        provisioner: IdentityProvisioner,
        session_service: AdminSessionService,
        audit_service: LoginAuditService,
    ):
        self._codec = codec
        self._provisioner = provisioner
        self._session_service = session_service
        self._audit = audit_service

    def login(self, email: str, token: str) -> AutoLoginResult:
        claims = self._codec.decode(token)

        if claims.is_expired():
            raise TokenExpiredError("Cobalt token has expired")

        if not is_authorized(claims):
            raise AccessDeniedError("User does not have CMS permissions")

        user, created = self._provisioner.find_or_create(email, claims)

        if not user.is_active:
            raise InactiveIdentityError("User account is disabled")

        credential = self._session_service.issue_session(user)

        if not created:
            self._audit.record_login(user, claims)

        logger.info(f"Auto-login succeeded for {user.email} (created={created})")
        return AutoLoginResult(user=user, created=created, credential=credential, claims=claims)
