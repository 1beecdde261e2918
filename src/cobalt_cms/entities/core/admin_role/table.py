"""Admin role database table model."""

from sqlalchemy import Column, String
from sqlmodel import Field

from src.cobalt_cms.entities.core._base import EntityTable


class AdminRoleTable(EntityTable, table=True):
    """Database persistence model for admin roles."""

    code: str = Field(sa_column=Column(String(255), nullable=False, unique=True, index=True))
    name: str = Field(sa_column=Column(String(255), nullable=False))
    description: str | None = None
