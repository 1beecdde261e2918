from .codec import ExternalTokenCodec, decode_external_token, decode_token_payload
from .permissions import has_cms_role, is_authorized

__all__ = [
    "ExternalTokenCodec",
    "decode_external_token",
    "decode_token_payload",
    "has_cms_role",
    "is_authorized",
]
