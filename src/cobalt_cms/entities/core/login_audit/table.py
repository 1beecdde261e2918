"""Login audit database table model."""

from datetime import datetime

from sqlalchemy import Column, String
from sqlmodel import Field

from src.cobalt_cms.entities.core._base import EntityTable, utc_now


class LoginAuditTable(EntityTable, table=True):
    """Database persistence model for bridge login audit records."""

    cobalt_user_id: str = Field(
        sa_column=Column(String(512), nullable=False, unique=True, index=True)
    )
    cobalt_username: str | None = None
    admin_user_id: str = Field(foreign_key="adminusertable.id", index=True)
    last_login: datetime = Field(default_factory=utc_now)
    login_count: int = Field(default=1)
