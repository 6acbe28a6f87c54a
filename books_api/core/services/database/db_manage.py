"""Table management for the books database."""

from loguru import logger
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

from books_api.entities.book.table import BookTable


class DbManageService:
    def __init__(self, engine: Engine):
        self._engine = engine

    def create_all(self) -> None:
        """Create the books table if it does not exist yet."""
        SQLModel.metadata.create_all(self._engine, tables=[BookTable.__table__])
        logger.info("Database initialized with tables.")

    def drop_all(self) -> None:
        """Drop the books table."""
        SQLModel.metadata.drop_all(self._engine, tables=[BookTable.__table__])
        logger.info("Database tables dropped.")
