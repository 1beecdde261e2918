from loguru import logger
from sqlmodel import Session

from src.cobalt_cms.core.models.claims import ExternalClaims
from src.cobalt_cms.entities.core.admin_user import AdminUser
from src.cobalt_cms.entities.core.login_audit import LoginAudit, LoginAuditRepository


class LoginAuditService:
    """Best-effort bookkeeping of bridge logins.

    Nothing here ever raises: audit failures are logged and rolled back so the
    surrounding login carries on.
    """

    def __init__(self, db_session: Session):
        self._db_session = db_session
        self._repo = LoginAuditRepository(db_session)

    def record_provisioning(self, user: AdminUser, claims: ExternalClaims) -> None:
        """First login for a freshly provisioned administrator (count starts at 1)."""
        if not claims.subject:
            return
        try:
            self._repo.create(
                LoginAudit(
                    cobalt_user_id=claims.subject,
                    cobalt_username=claims.username,
                    admin_user_id=user.id,
                )
            )
            self._db_session.commit()
        except Exception as e:
            self._db_session.rollback()
            logger.warning(f"Failed to create Cobalt user mapping for {user.email}: {e}")

    def record_login(self, user: AdminUser, claims: ExternalClaims) -> None:
        """Increment the login count, creating the record if none exists yet."""
        if not claims.subject:
            return
        try:
            record = self._repo.get_by_cobalt_user_id(claims.subject)
            if record is None:
                self._repo.create(
                    LoginAudit(
                        cobalt_user_id=claims.subject,
                        cobalt_username=claims.username,
                        admin_user_id=user.id,
                    )
                )
            else:
                record.record_login()
                self._repo.update(record)
            self._db_session.commit()
        except Exception as e:
            self._db_session.rollback()
            logger.warning(f"Failed to update login stats for {user.email}: {e}")
