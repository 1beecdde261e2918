"""Authorization decisions for external identities and local administrators."""

from collections.abc import Iterable

from src.cobalt_cms.core.models.claims import ExternalClaims
from src.cobalt_cms.entities.core.admin_user import AdminUser

CMS_MARKERS = ("cms", "admin")


def _mentions_cms(values: Iterable[str]) -> bool:
    return any(marker in value.lower() for value in values for marker in CMS_MARKERS)


def is_authorized(claims: ExternalClaims) -> bool:
    """Whether the external identity may use the CMS.

    Substring policy: any role or scope containing "cms" or "admin"
    (case-insensitive) grants access, as does a truthy CMS flag.
    """
    return _mentions_cms(claims.roles) or _mentions_cms(claims.scopes) or claims.is_cms


def has_cms_role(user: AdminUser, super_admin_code: str = "strapi-super-admin") -> bool:
    """Whether a local administrator holds a role that grants the admin surface."""
    for role in user.roles:
        name = role.name.lower()
        if role.code == super_admin_code or name == "cms" or "admin" in name:
            return True
    return False
