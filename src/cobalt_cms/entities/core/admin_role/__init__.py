"""Admin role entity module.

- AdminRole: Domain entity
- AdminRoleTable: Database persistence model
- AdminRoleRepository: Data access layer
"""

from .entity import AdminRole
from .repository import AdminRoleRepository
from .table import AdminRoleTable

__all__ = ["AdminRole", "AdminRoleTable", "AdminRoleRepository"]
