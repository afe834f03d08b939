"""Table bootstrap for local development databases."""

from loguru import logger
from sqlalchemy import Engine
from sqlmodel import SQLModel

from retail_api.core.services.database.db_session import DbSessionService


class DbManageService:
    def __init__(self, database_service: DbSessionService | None = None):
        self._database_service = database_service or DbSessionService()

    @property
    def engine(self) -> Engine:
        return self._database_service.engine

    def create_all(self) -> None:
        """Create all database tables that do not exist yet."""
        from retail_api.entities.service.product import ProductTable  # noqa: F401

        SQLModel.metadata.create_all(self.engine)
        logger.info("Database initialized with tables.")
