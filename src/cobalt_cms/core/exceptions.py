"""Domain exceptions raised by the auto-login bridge.

Routers translate these into HTTP responses; services never raise HTTPException.
"""


class BridgeError(Exception):
    """Base class for all bridge failures."""


class TokenDecodeError(BridgeError):
    """Raised when an external token cannot be decoded into claims."""


class MalformedTokenError(TokenDecodeError):
    """Raised when the token does not have at least two dot-separated segments."""


class InvalidPayloadError(TokenDecodeError):
    """Raised when the claims segment is not base64 encoded JSON object."""


class InvalidSignatureError(TokenDecodeError):
    """Raised when signature verification is enabled and the token fails it."""


class TokenExpiredError(BridgeError):
    """Raised when the token carries an ``exp`` in the past."""


class AccessDeniedError(BridgeError):
    """Raised when the claims do not authorize CMS access."""


class InactiveIdentityError(BridgeError):
    """Raised when the resolved administrator account is disabled."""


class ProvisionError(BridgeError):
    """Raised when a local administrator cannot be provisioned."""


class ProvisionUnauthorizedError(ProvisionError, AccessDeniedError):
    """Raised when provisioning is attempted for claims that are not authorized."""


class NoRoleAvailableError(ProvisionError):
    """Raised when the identity store has no administrator role to grant."""


class SessionTokenError(BridgeError):
    """Raised when a session credential is missing, invalid or expired."""
