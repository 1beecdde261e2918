from loguru import logger
from sqlmodel import Session

from src.cobalt_cms.core.exceptions import NoRoleAvailableError, ProvisionUnauthorizedError
from src.cobalt_cms.core.models.claims import ExternalClaims
from src.cobalt_cms.core.security import generate_placeholder_password, hash_password
from src.cobalt_cms.core.services.identity.audit import LoginAuditService
from src.cobalt_cms.core.services.token.permissions import is_authorized
from src.cobalt_cms.entities.core.admin_role import AdminRole, AdminRoleRepository
from src.cobalt_cms.entities.core.admin_user import AdminUser, AdminUserRepository
from src.cobalt_cms.runtime.config.config_data import BridgeConfig
from src.cobalt_cms.runtime.context import get_config


class IdentityProvisioner:
    """Maps an email address to a local administrator, creating one when allowed."""

    def __init__(self, db_session: Session, audit_service: LoginAuditService | None = None):
        self._db_session = db_session
        self._user_repo = AdminUserRepository(db_session)
        self._role_repo = AdminRoleRepository(db_session)
        self._audit = audit_service or LoginAuditService(db_session)

    def resolve_default_role(self, bridge: BridgeConfig) -> AdminRole:
        role = self._role_repo.get_by_code(bridge.super_admin_role_code)
        if role is None:
            role = self._role_repo.find_by_name_fragment(bridge.fallback_role_name_fragment)
        if role is None:
            raise NoRoleAvailableError("No admin role available for provisioning")
        return role

    def _build_user(self, email: str, claims: ExternalClaims, role: AdminRole, bridge: BridgeConfig) -> AdminUser:
        password = generate_placeholder_password(bridge.placeholder_password_prefix)
        return AdminUser(
            email=email,
            firstname=claims.firstname or bridge.default_firstname,
            lastname=claims.lastname or bridge.default_lastname,
            username=claims.username or email.split("@")[0],
            is_active=True,
            password_hash=hash_password(password),
            registration_token=None,
            roles=[role],
        )

    def find_or_create(self, email: str, claims: ExternalClaims) -> tuple[AdminUser, bool]:
        """Return ``(administrator, created)`` for ``email``.

        Existing administrators are returned untouched. A new one is created only
        when ``claims`` authorize CMS access.

        Raises:
            ProvisionUnauthorizedError: No administrator exists and the claims are not authorized
            NoRoleAvailableError: No administrator role exists to grant
        """
        email = email.strip().lower()
        existing = self._user_repo.get_by_email(email)
        if existing:
            return existing, False

        if not is_authorized(claims):
            logger.info(f"Refusing to provision {email}: claims carry no CMS permission")
            raise ProvisionUnauthorizedError("User does not have CMS permissions")

        bridge = get_config().bridge
        role = self.resolve_default_role(bridge)

        try:
            user, created = self._user_repo.get_or_create(
                self._build_user(email, claims, role, bridge)
            )
        except Exception:
            self._db_session.rollback()
            raise

        if created:
            logger.info(f"Created new admin user {email} with role {role.code}")
            self._audit.record_provisioning(user, claims)
        return user, created
