"""Decoding of externally issued Cobalt tokens.

Only the middle (claims) segment of the compact token is consumed. Signature
verification happens only when a shared secret is configured.
"""

import base64
import binascii
import json
from typing import Any, Final

from authlib.jose import JoseError, JsonWebToken
from loguru import logger

from src.cobalt_cms.core.exceptions import (
    InvalidPayloadError,
    InvalidSignatureError,
    MalformedTokenError,
)
from src.cobalt_cms.core.models.claims import ExternalClaims
from src.cobalt_cms.runtime.config.config_data import BridgeConfig
from src.cobalt_cms.runtime.context import get_config

MAX_TOKEN_CHARS: Final = 16 * 1024


def _b64_decode_segment(segment: str) -> bytes:
    standard = segment.replace("-", "+").replace("_", "/").rstrip("=")
    try:
        return base64.b64decode(standard + "=" * (-len(standard) % 4), validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidPayloadError("Claims segment is not valid base64") from e


def decode_token_payload(token: str) -> dict[str, Any]:
    """Return the JSON object carried in the second segment of ``token``.

    Raises:
        MalformedTokenError: fewer than two dot-separated segments
        InvalidPayloadError: the segment is not base64 encoded JSON object
    """
    if not isinstance(token, str) or len(token) > MAX_TOKEN_CHARS:
        raise MalformedTokenError("Token is empty or too large")
    segments = token.split(".")
    if len(segments) < 2:
        raise MalformedTokenError("Token must contain at least two segments")

    raw = _b64_decode_segment(segments[1])
    try:
        payload = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
        raise InvalidPayloadError("Claims segment is not valid JSON") from e
    if not isinstance(payload, dict):
        raise InvalidPayloadError("Claims segment must be a JSON object")
    return payload


def decode_external_token(token: str) -> ExternalClaims:
    """Decode ``token`` without any signature check and normalize its claims."""
    return ExternalClaims.from_payload(decode_token_payload(token))


class ExternalTokenCodec:
    """Config-aware codec used by the auto-login flow."""

    def __init__(self, bridge_config: BridgeConfig | None = None):
        self._bridge_config = bridge_config

    @property
    def bridge_config(self) -> BridgeConfig:
        return self._bridge_config or get_config().bridge

    def verify_signature(self, token: str) -> None:
        cfg = self.bridge_config
        if not cfg.token_secret:
            return
        try:
            JsonWebToken(cfg.token_algorithms).decode(token, cfg.token_secret)
        except (JoseError, ValueError) as e:
            logger.warning("Cobalt token signature verification failed: {}", type(e).__name__)
            raise InvalidSignatureError("Token signature could not be verified") from e

    def decode(self, token: str) -> ExternalClaims:
        """Verify (when configured) and decode ``token`` into canonical claims."""
        self.verify_signature(token)
        return decode_external_token(token)
