"""Server-side admin session slot."""

import time

from pydantic import BaseModel, Field


class AdminSession(BaseModel):
    """Server-side record backing the ``cms_session_id`` cookie."""

    id: str = Field(description="Session identifier")
    user_id: str = Field(description="Administrator id the session belongs to")
    session_token: str = Field(description="Session credential issued for the administrator", repr=False)
    created_at: int = Field(description="Creation timestamp")
    expires_at: int = Field(description="Expiration timestamp")

    @classmethod
    def create(
        cls,
        session_id: str,
        user_id: str,
        session_token: str,
        ttl_seconds: int,
    ) -> "AdminSession":
        """Create a new session slot with timestamps."""
        now = int(time.time())
        return cls(
            id=session_id,
            user_id=user_id,
            session_token=session_token,
            created_at=now,
            expires_at=now + ttl_seconds,
        )

    def is_expired(self) -> bool:
        return time.time() > self.expires_at
