"""Login audit entity module.

Links an external Cobalt identity to the local administrator it logged in as.
"""

from .entity import LoginAudit
from .repository import LoginAuditRepository
from .table import LoginAuditTable

__all__ = ["LoginAudit", "LoginAuditTable", "LoginAuditRepository"]
