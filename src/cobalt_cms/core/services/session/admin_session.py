import secrets

from fastapi import Request, Response
from loguru import logger

from src.cobalt_cms.core.exceptions import SessionTokenError
from src.cobalt_cms.core.models.session import AdminSession
from src.cobalt_cms.core.services.jwt.jwt_gen import JwtGeneratorService
from src.cobalt_cms.core.services.jwt.jwt_verify import JwtVerificationService
from src.cobalt_cms.core.storage.session_storage import SessionStorage, SessionStorageError
from src.cobalt_cms.entities.core.admin_user import AdminUser
from src.cobalt_cms.runtime.context import get_config


def _session_key(session_id: str) -> str:
    return f"admin:{session_id}"


def secure_cookie_settings() -> dict:
    """Fixed cookie policy for every cookie the bridge sets."""
    return {
        "httponly": True,
        "secure": get_config().app.environment == "production",
        "samesite": "lax",
        "path": "/",
    }


class AdminSessionService:
    """Issues session credentials for administrators and resolves them back."""

    def __init__(
        self,
        session_storage: SessionStorage,
        jwt_generator: JwtGeneratorService,
        jwt_verifier: JwtVerificationService,
    ) -> None:
        self._storage = session_storage
        self._jwt_generator = jwt_generator
        self._jwt_verifier = jwt_verifier

    def issue_session(self, user: AdminUser, expires_in_seconds: int | None = None) -> str:
        """Mint a session credential that encodes only ``user.id``."""
        lifetime = expires_in_seconds or get_config().bridge.session_cookie_max_age
        return self._jwt_generator.generate_session_token(user.id, lifetime)

    def attach_cookie(self, response: Response, credential: str) -> None:
        bridge = get_config().bridge
        response.set_cookie(
            key=bridge.session_cookie_name,
            value=credential,
            max_age=bridge.session_cookie_max_age,
            **secure_cookie_settings(),
        )

    async def store_session(self, response: Response, user: AdminUser, credential: str) -> str | None:
        """Populate the server-side slot and reference it from a cookie.

        Storage problems are logged and the login proceeds on the primary cookie alone.
        """
        config = get_config()
        session = AdminSession.create(
            session_id=secrets.token_urlsafe(32),
            user_id=user.id,
            session_token=credential,
            ttl_seconds=config.app.session_max_age,
        )
        try:
            await self._storage.set(_session_key(session.id), session, config.app.session_max_age)
        except SessionStorageError as e:
            logger.warning("Could not store admin session slot: {}", e)
            return None

        response.set_cookie(
            key=config.bridge.session_id_cookie_name,
            value=session.id,
            max_age=config.app.session_max_age,
            **secure_cookie_settings(),
        )
        return session.id

    async def get_session(self, session_id: str) -> AdminSession | None:
        session = await self._storage.get(_session_key(session_id), AdminSession)
        if session is None or session.is_expired():
            return None
        return session

    async def resolve_credential(self, request: Request) -> str | None:
        """Session credential from the primary cookie, else from the server-side slot."""
        bridge = get_config().bridge
        credential = request.cookies.get(bridge.session_cookie_name)
        if credential:
            return credential

        session_id = request.cookies.get(bridge.session_id_cookie_name)
        if not session_id:
            return None
        try:
            session = await self.get_session(session_id)
        except SessionStorageError as e:
            logger.warning("Could not read admin session slot: {}", e)
            return None
        return session.session_token if session else None

    def admin_user_id(self, credential: str) -> str:
        """Verify ``credential`` and return the administrator id it encodes.

        Raises:
            SessionTokenError: If the credential is invalid or expired
        """
        return self._jwt_verifier.admin_user_id(credential)
