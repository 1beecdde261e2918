"""Admin role repository."""

from sqlmodel import Session, col, select

from .entity import AdminRole
from .table import AdminRoleTable


class AdminRoleRepository:
    """Data access for admin roles."""

    def __init__(self, session: Session):
        self._session = session

    def get(self, item_id: str) -> AdminRole | None:
        row = self._session.get(AdminRoleTable, item_id)
        return AdminRole.model_validate(row) if row else None

    def get_by_code(self, code: str) -> AdminRole | None:
        row = self._session.exec(
            select(AdminRoleTable).where(AdminRoleTable.code == code)
        ).first()
        return AdminRole.model_validate(row) if row else None

    def find_by_name_fragment(self, fragment: str) -> AdminRole | None:
        """Return the first role whose name contains ``fragment``."""
        row = self._session.exec(
            select(AdminRoleTable)
            .where(col(AdminRoleTable.name).contains(fragment))
            .order_by(col(AdminRoleTable.created_at))
        ).first()
        return AdminRole.model_validate(row) if row else None

    def create(self, role: AdminRole) -> AdminRole:
        self._session.add(AdminRoleTable(**role.model_dump()))
        self._session.flush()
        return role

    def list_all(self) -> list[AdminRole]:
        rows = self._session.exec(select(AdminRoleTable)).all()
        return [AdminRole.model_validate(row) for row in rows]
