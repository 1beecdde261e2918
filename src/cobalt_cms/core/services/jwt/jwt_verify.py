import time
from typing import Any

from authlib.jose import JoseError, JsonWebToken
from loguru import logger

from src.cobalt_cms.core.exceptions import SessionTokenError
from src.cobalt_cms.runtime.context import get_config


class JwtVerificationService:
    """Verifies session credentials minted by :class:`JwtGeneratorService`."""

    def verify_session_token(self, token: str, secret: str | None = None) -> dict[str, Any]:
        """Check signature, issuer and time claims; return the claims.

        Raises:
            SessionTokenError: On any verification failure
        """
        if not token:
            raise SessionTokenError("Missing session token")

        cfg = get_config()
        secret = secret or cfg.app.session_signing_secret
        if not secret:
            raise SessionTokenError("Session signing secret not configured")

        claims_options = {
            "iss": {"essential": True, "value": cfg.jwt.gen_issuer},
            "sub": {"essential": True},
            "exp": {"essential": True},
        }
        try:
            claims = JsonWebToken(cfg.jwt.allowed_algorithms).decode(
                token, secret, claims_options=claims_options
            )
            claims.validate(now=int(time.time()), leeway=cfg.jwt.clock_skew)
        except (JoseError, ValueError) as exc:
            logger.debug("Session token rejected: {}", type(exc).__name__)
            raise SessionTokenError("Invalid or expired session token") from exc

        return dict(claims)

    def admin_user_id(self, token: str) -> str:
        """Return the administrator id encoded in a session credential."""
        claims = self.verify_session_token(token)
        user_id = claims.get("id") or claims.get("sub")
        if not user_id:
            raise SessionTokenError("Session token carries no administrator id")
        return str(user_id)
