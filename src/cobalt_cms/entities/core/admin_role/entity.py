"""Admin role domain entity."""

from pydantic import Field

from src.cobalt_cms.entities.core._base import Entity


class AdminRole(Entity):
    """A role that can be granted to administrators of the CMS."""

    code: str = Field(description="Stable machine code, e.g. 'strapi-super-admin'")
    name: str = Field(description="Human readable role name")
    description: str | None = Field(default=None)
