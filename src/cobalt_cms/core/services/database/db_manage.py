"""Schema management for the identity store."""

from loguru import logger
from sqlalchemy import Engine
from sqlmodel import SQLModel, create_engine

from src.cobalt_cms.runtime.context import get_config


class DbManageService:
    def __init__(self, engine: Engine | None = None):
        self._engine = engine or create_engine(get_config().database.connection_string, echo=False)

    def create_all(self) -> None:
        """Create all database tables."""
        from src.cobalt_cms.entities.core.admin_role import AdminRoleTable  # noqa: F401
        from src.cobalt_cms.entities.core.admin_user import (  # noqa: F401
            AdminUserRoleLinkTable,
            AdminUserTable,
        )
        from src.cobalt_cms.entities.core.login_audit import LoginAuditTable  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.")
