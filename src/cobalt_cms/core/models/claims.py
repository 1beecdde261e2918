"""Canonical claims structure for external Cobalt tokens."""

import time
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field


def _first_truthy(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = payload.get(key)
        if value or isinstance(value, list):
            return value
    return None


def _as_text(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)


_SCALARS = (str, int, float, bool)


def _normalize_roles(value: Any) -> list[str]:
    if value is None:
        return []
    entries = value if isinstance(value, list) else [value]
    roles: list[str] = []
    for entry in entries:
        if isinstance(entry, str):
            roles.append(entry)
        elif isinstance(entry, Mapping):
            label = entry.get("name") or entry.get("code")
            if label:
                roles.append(str(label))
    return roles


def _normalize_scopes(value: Any) -> list[str]:
    if isinstance(value, list):
        return [str(item) for item in value if isinstance(item, _SCALARS)]
    if isinstance(value, str):
        return [part for part in value.split(" ") if part]
    return []


def _stringify_flag(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _is_cms_flag(payload: Mapping[str, Any]) -> bool:
    for key in ("isCMS", "isCms", "is_cms"):
        value = payload.get(key)
        if value is not None:
            return bool(value) and _stringify_flag(value).lower() == "true"
    return False


class ExternalClaims(BaseModel):
    """Claims decoded from a Cobalt token, with known aliases collapsed.

    Every field is optional: missing data degrades to "not authorized"
    downstream instead of failing here. ``raw`` keeps the decoded payload
    exactly as received.
    """

    subject: str | None = Field(default=None, description="sub | id | user_id")
    email: str | None = None
    username: str | None = Field(default=None, description="username | preferred_username")
    firstname: str | None = Field(default=None, description="firstname | name | given_name")
    lastname: str | None = Field(default=None, description="lastname | family_name")
    roles: list[str] = Field(default_factory=list)
    scopes: list[str] = Field(default_factory=list)
    is_cms: bool = False
    password: str | None = Field(default=None, repr=False)
    expires_at: float | None = None
    raw: dict[str, Any] = Field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ExternalClaims":
        """Build canonical claims from a raw decoded payload."""
        exp = payload.get("exp")
        expires_at = float(exp) if isinstance(exp, (int, float)) and not isinstance(exp, bool) else None
        if expires_at is None and isinstance(exp, str):
            try:
                expires_at = float(exp)
            except ValueError:
                expires_at = None

        return cls(
            subject=_as_text(_first_truthy(payload, "sub", "id", "user_id")),
            email=_as_text(payload.get("email")) or None,
            username=_as_text(_first_truthy(payload, "username", "preferred_username")),
            firstname=_as_text(_first_truthy(payload, "firstname", "name", "given_name")),
            lastname=_as_text(_first_truthy(payload, "lastname", "family_name")),
            roles=_normalize_roles(_first_truthy(payload, "roles", "role", "authorities")),
            scopes=_normalize_scopes(_first_truthy(payload, "scope", "permissions")),
            is_cms=_is_cms_flag(payload),
            password=_as_text(_first_truthy(payload, "passWord", "password")),
            expires_at=expires_at,
            raw=dict(payload),
        )

    def is_expired(self, now: float | None = None) -> bool:
        """True when ``exp`` is present and already in the past."""
        if self.expires_at is None:
            return False
        return self.expires_at < (time.time() if now is None else now)
