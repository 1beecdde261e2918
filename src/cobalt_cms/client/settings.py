"""Tunables for the browser bridge, loaded from COBALT_BRIDGE_* variables."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BridgeClientSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="COBALT_BRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    auto_login_path: str = Field(default="/api/cobalt-auth/auto-login")
    login_path: str = Field(default="/admin/auth/login", description="Page the bridge runs on")
    admin_path: str = Field(default="/admin")
    logout_path: str = Field(default="/admin/logout")
    logout_redirect_url: str = Field(default="http://localhost:3000/auth/jwt/sign-in")
    session_cookie_name: str = Field(default="strapi-jwt")

    form_poll_attempts: int = Field(default=100, ge=1)
    form_poll_interval: float = Field(default=0.1, ge=0)
    bootstrap_delay: float = Field(default=0.5, ge=0)
    action_delay: float = Field(default=1.0, ge=0, description="Pause after each visible step")
    success_redirect_delay: float = Field(default=1.5, ge=0)
    cookie_max_age_days: int = Field(default=30, ge=1)
