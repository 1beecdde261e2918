"""Admin user repository."""

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from src.cobalt_cms.entities.core.admin_role import AdminRole, AdminRoleTable

from .entity import AdminUser
from .table import AdminUserRoleLinkTable, AdminUserTable


class AdminUserRepository:
    """Data access for administrators, always returning users with roles populated."""

    def __init__(self, session: Session):
        self._session = session

    def _roles_for(self, user_id: str) -> list[AdminRole]:
        rows = self._session.exec(
            select(AdminRoleTable)
            .join(AdminUserRoleLinkTable, col(AdminUserRoleLinkTable.role_id) == col(AdminRoleTable.id))
            .where(AdminUserRoleLinkTable.user_id == user_id)
        ).all()
        return [AdminRole.model_validate(row) for row in rows]

    def _to_entity(self, row: AdminUserTable) -> AdminUser:
        user = AdminUser.model_validate(row)
        user.roles = self._roles_for(row.id)
        return user

    def get(self, item_id: str) -> AdminUser | None:
        row = self._session.get(AdminUserTable, item_id)
        return self._to_entity(row) if row else None

    def get_by_email(self, email: str) -> AdminUser | None:
        row = self._session.exec(
            select(AdminUserTable).where(AdminUserTable.email == email.strip().lower())
        ).first()
        return self._to_entity(row) if row else None

    def create(self, user: AdminUser) -> AdminUser:
        """Persist ``user`` and its role links, flushing so constraint violations surface here."""
        table = AdminUserTable(**user.model_dump(exclude={"roles"}), password_hash=user.password_hash)
        self._session.add(table)
        for role in user.roles:
            self._session.add(AdminUserRoleLinkTable(user_id=user.id, role_id=role.id))
        self._session.flush()
        return user

    def get_or_create(self, user: AdminUser) -> tuple[AdminUser, bool]:
        """Insert ``user`` unless an administrator with the same email already exists.

        A conflicting concurrent insert is rolled back and resolved as a lookup,
        so exactly one administrator exists per email.
        """
        existing = self.get_by_email(user.email)
        if existing:
            return existing, False

        try:
            self.create(user)
            self._session.commit()
        except IntegrityError:
            self._session.rollback()
            logger.info("Concurrent provisioning detected for {}; using existing record", user.email)
            existing = self.get_by_email(user.email)
            if existing is None:
                raise
            return existing, False

        return user, True

    def list_all(self) -> list[AdminUser]:
        rows = self._session.exec(select(AdminUserTable)).all()
        return [self._to_entity(row) for row in rows]
