"""Login audit repository."""

from sqlmodel import Session, select

from .entity import LoginAudit
from .table import LoginAuditTable


class LoginAuditRepository:
    """Data access for login audit records."""

    def __init__(self, session: Session):
        self._session = session

    def get_by_cobalt_user_id(self, cobalt_user_id: str) -> LoginAudit | None:
        row = self._session.exec(
            select(LoginAuditTable).where(LoginAuditTable.cobalt_user_id == cobalt_user_id)
        ).first()
        return LoginAudit.model_validate(row) if row else None

    def create(self, record: LoginAudit) -> LoginAudit:
        self._session.add(LoginAuditTable(**record.model_dump()))
        self._session.flush()
        return record

    def update(self, record: LoginAudit) -> LoginAudit:
        row = self._session.get(LoginAuditTable, record.id)
        if row is None:
            raise ValueError(f"Login audit record {record.id} not found")
        row.cobalt_username = record.cobalt_username
        row.admin_user_id = record.admin_user_id
        row.last_login = record.last_login
        row.login_count = record.login_count
        self._session.add(row)
        self._session.flush()
        return record
