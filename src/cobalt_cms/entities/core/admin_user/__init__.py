"""Admin user entity module.

This module contains all AdminUser-related classes organized by responsibility:
- AdminUser: Domain entity, always carrying its roles
- AdminUserTable / AdminUserRoleLinkTable: Database persistence models
- AdminUserRepository: Data access layer, including the atomic get-or-insert
"""

from .entity import AdminUser
from .repository import AdminUserRepository
from .table import AdminUserRoleLinkTable, AdminUserTable

__all__ = ["AdminUser", "AdminUserTable", "AdminUserRoleLinkTable", "AdminUserRepository"]
