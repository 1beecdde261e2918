"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, computed_field


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:1337"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(default=["GET", "POST", "OPTIONS"])
    allow_headers: list[str] = Field(default=["*"])


class RedisConfig(BaseModel):
    """Redis configuration model."""

    enabled: bool = Field(default=False, description="Enable Redis session storage")
    url: str = Field(default="", description="Redis connection URL")
    password: str | None = Field(
        default=None, description="Password for Redis authentication"
    )

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the Redis connection string with password if provided."""
        if self.password:
            if "@" in self.url:
                return self.url
            parts = self.url.split("://", 1)
            if len(parts) == 2:
                scheme, rest = parts
                return f"{scheme}://:{self.password}@{rest}"
        return self.url


class JWTConfig(BaseModel):
    """Settings for the session credentials this service mints and verifies."""

    allowed_algorithms: list[str] = Field(
        default_factory=lambda: ["HS256"],
        description="JWT algorithms allowed for session tokens",
    )
    gen_issuer: str = Field(
        default="cobalt-cms", description="Issuer name to use when generating tokens"
    )
    clock_skew: int = Field(default=60, description="Clock skew tolerance in seconds")


class BridgeConfig(BaseModel):
    """Cobalt auto-login bridge policy."""

    base_path: str = Field(
        default="/api/cobalt-auth", description="Mount point of the auto-login router"
    )
    session_cookie_name: str = Field(
        default="strapi-jwt", description="Primary admin session cookie"
    )
    session_cookie_max_age_days: int = Field(
        default=7, description="Lifetime of the primary session cookie"
    )
    session_id_cookie_name: str = Field(
        default="cms_session_id", description="Cookie referencing the server-side session slot"
    )
    cross_auth_cookie_name: str = Field(
        default="strapi_admin_token", description="Cookie set by the cross-domain login"
    )
    cross_auth_cookie_max_age_hours: int = Field(default=24)
    super_admin_role_code: str = Field(
        default="strapi-super-admin", description="Preferred role for provisioned users"
    )
    fallback_role_name_fragment: str = Field(
        default="Admin", description="Role name fragment used when no super admin role exists"
    )
    default_firstname: str = Field(default="Cobalt")
    default_lastname: str = Field(default="User")
    placeholder_password_prefix: str = Field(default="cobalt_")
    token_secret: str | None = Field(
        default=None,
        description="Shared secret for verifying Cobalt token signatures (unset = unsigned tokens accepted)",
    )
    token_algorithms: list[str] = Field(default_factory=lambda: ["HS256"])

    @property
    def session_cookie_max_age(self) -> int:
        """Primary cookie lifetime in seconds."""
        return self.session_cookie_max_age_days * 24 * 3600


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./cobalt_cms.db",
        description="Database connection URL",
    )
    environment_mode: str = Field(
        default="development", description="Environment mode: development or production"
    )
    pool_size: int = Field(default=20, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    password_env_var: str | None = Field(
        default=None,
        description="Environment variable name containing database password",
    )
    password_file: str | None = Field(
        default=None,
        description="Path to file containing database password",
    )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @computed_field
    @property
    def password(self) -> str | None:
        """
        Get the database password from the appropriate source.
        1. In development or test mode, parse it from the URL
        2. In production mode, read it from the secrets file or the named environment variable
        """
        if self.is_sqlite:
            return None

        if self.environment_mode in ("development", "test"):
            from sqlalchemy.engine import make_url

            return make_url(self.url).password

        if self.environment_mode == "production":
            if self.password_file:
                try:
                    with open(self.password_file) as f:
                        return f.read().strip()
                except OSError as e:
                    raise ValueError(
                        "Failed to read database password from file."
                    ) from e
            if self.password_env_var:
                import os

                password = os.getenv(self.password_env_var)
                if password:
                    return password
                raise ValueError(
                    f"Environment variable {self.password_env_var} not set"
                )
            raise ValueError(
                "In production mode, either password_file or password_env_var must be set"
            )

        raise ValueError(
            "Invalid environment_mode; must be 'development', 'production', or 'test'"
        )

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the database connection string with the resolved password."""
        if self.is_sqlite:
            return self.url

        from sqlalchemy.engine import make_url

        base_url = make_url(self.url)
        resolved_password = self.password

        if base_url.password:
            if self.environment_mode == "production":
                logger.warning(
                    "Database URL contains a password in production mode; "
                    "consider using a secrets file or environment variable."
                )
            if resolved_password and resolved_password != base_url.password:
                base_url = base_url.set(password=resolved_password)
        elif resolved_password:
            base_url = base_url.set(password=resolved_password)

        return base_url.render_as_string(hide_password=False)


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=1337, description="Application port")
    admin_path: str = Field(default="/admin", description="Admin surface entry point")
    session_max_age: int = Field(
        default=7 * 24 * 3600, description="Server-side session slot lifetime in seconds"
    )
    session_signing_secret: str | None = Field(
        default=None, description="Secret for signing admin session JWTs"
    )
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    bridge: BridgeConfig = Field(
        default_factory=BridgeConfig, description="Auto-login bridge configuration"
    )
    jwt: JWTConfig = Field(
        default_factory=JWTConfig, description="Session JWT configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    redis: RedisConfig = Field(
        default_factory=RedisConfig, description="Redis configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
