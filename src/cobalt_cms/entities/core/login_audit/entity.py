"""Login audit domain entity."""

from datetime import datetime

from pydantic import Field

from src.cobalt_cms.entities.core._base import Entity, utc_now


class LoginAudit(Entity):
    """Best-effort record of bridge logins for one external identity."""

    cobalt_user_id: str = Field(description="External subject id (sub/id/user_id claim)")
    cobalt_username: str | None = Field(default=None)
    admin_user_id: str = Field(description="Local administrator the identity maps to")
    last_login: datetime = Field(default_factory=utc_now)
    login_count: int = Field(default=1, ge=0)

    def record_login(self) -> None:
        self.login_count += 1
        self.last_login = utc_now()
