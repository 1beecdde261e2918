import time
from typing import Any

from authlib.common.security import generate_token
from authlib.jose import JoseError, jwt
from loguru import logger

from src.cobalt_cms.core.exceptions import SessionTokenError
from src.cobalt_cms.runtime.config.config_data import ConfigData
from src.cobalt_cms.runtime.context import get_config

RESERVED_CLAIMS = frozenset({"iss", "sub", "exp", "iat", "nbf", "jti"})


class JwtGeneratorService:
    """Mints the signed session credentials handed to administrators."""

    def generate_jwt(
        self,
        subject: str,
        claims: dict[str, Any] | None = None,
        expires_in_seconds: int = 3600,
        issuer: str | None = None,
        algorithm: str = "HS256",
        include_jti: bool = True,
        secret: str | None = None,
    ) -> str:
        """Generate a signed JWT using authlib.

        Args:
            subject: Subject (sub) claim, the administrator id
            claims: Additional claims to include
            expires_in_seconds: Token lifetime in seconds
            issuer: Issuer (iss) claim (defaults to config issuer)
            algorithm: Signing algorithm (default: HS256)
            include_jti: Whether to include a unique JWT ID claim
            secret: Signing secret (defaults to app.session_signing_secret)

        Raises:
            SessionTokenError: If the signing configuration is missing or invalid
        """
        config: ConfigData = get_config()

        secret = secret or config.app.session_signing_secret
        if not secret:
            raise SessionTokenError("Session signing secret not configured")

        if algorithm not in config.jwt.allowed_algorithms:
            logger.debug(
                f"Attempted to use disallowed algorithm: {algorithm}, only {config.jwt.allowed_algorithms} are allowed"
            )
            raise SessionTokenError(f"Algorithm {algorithm} not allowed")

        now = int(time.time())
        payload: dict[str, Any] = {
            "iss": issuer or config.jwt.gen_issuer,
            "sub": subject,
            "exp": now + expires_in_seconds,
            "iat": now,
            "nbf": now,
        }
        if include_jti:
            payload["jti"] = generate_token(16)
        if claims:
            payload.update({k: v for k, v in claims.items() if k not in RESERVED_CLAIMS})

        try:
            token = jwt.encode({"alg": algorithm, "typ": "JWT"}, payload, secret)
        except JoseError as e:
            raise SessionTokenError(f"JWT encoding failed: {e}") from e
        return token.decode() if isinstance(token, bytes) else token

    def generate_session_token(self, admin_user_id: str, expires_in_seconds: int) -> str:
        """Session credential keyed only by the administrator id."""
        return self.generate_jwt(
            subject=admin_user_id,
            claims={"id": admin_user_id},
            expires_in_seconds=expires_in_seconds,
        )
