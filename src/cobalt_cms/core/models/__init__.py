from .claims import ExternalClaims
from .session import AdminSession

__all__ = ["ExternalClaims", "AdminSession"]
