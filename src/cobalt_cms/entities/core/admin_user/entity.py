"""Admin user domain entity."""

from pydantic import Field, field_validator

from src.cobalt_cms.entities.core._base import Entity
from src.cobalt_cms.entities.core.admin_role import AdminRole


class AdminUser(Entity):
    """A local administrator of the CMS.

    The email is the natural key and is always stored lowercased. Roles are
    populated by the repository on every read.
    """

    email: str = Field(description="Lowercased email, unique per administrator")
    username: str | None = Field(default=None)
    firstname: str | None = Field(default=None)
    lastname: str | None = Field(default=None)
    is_active: bool = Field(default=True)
    password_hash: str | None = Field(default=None, exclude=True, repr=False)
    registration_token: str | None = Field(default=None)
    roles: list[AdminRole] = Field(default_factory=list)

    @field_validator("email")
    @classmethod
    def _lowercase_email(cls, value: str) -> str:
        return value.strip().lower()

    @property
    def role_codes(self) -> list[str]:
        return [role.code for role in self.roles]
