from .audit import LoginAuditService
from .provisioner import IdentityProvisioner

__all__ = ["IdentityProvisioner", "LoginAuditService"]
