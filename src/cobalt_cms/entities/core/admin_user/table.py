"""Admin user database table models."""

from sqlalchemy import Column, String, UniqueConstraint
from sqlmodel import Field, SQLModel

from src.cobalt_cms.entities.core._base import EntityTable


class AdminUserTable(EntityTable, table=True):
    """Database persistence model for administrators.

    The unique constraint on ``email`` is what makes provisioning safe under
    concurrent first logins for the same address.
    """

    __table_args__ = (UniqueConstraint("email", name="uq_admin_user_email"),)

    email: str = Field(sa_column=Column(String(320), nullable=False, index=True))
    username: str | None = None
    firstname: str | None = None
    lastname: str | None = None
    is_active: bool = Field(default=True)
    password_hash: str | None = None
    registration_token: str | None = None


class AdminUserRoleLinkTable(SQLModel, table=True):
    """Many-to-many link between administrators and roles."""

    user_id: str = Field(foreign_key="adminusertable.id", primary_key=True)
    role_id: str = Field(foreign_key="adminroletable.id", primary_key=True)
