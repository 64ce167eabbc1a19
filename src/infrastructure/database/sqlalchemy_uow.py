"""SQLAlchemy Unit of Work implementation."""

from typing import Any, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import StorageFailure
from infrastructure.database.repositories.sqlalchemy_todo_repo import SQLAlchemyTodoRepository

logger = structlog.get_logger()


class SQLAlchemyUnitOfWork:
    """Unit of Work implementation using SQLAlchemy.

    Database errors raised inside the block or on commit roll the session
    back and are re-raised as ``StorageFailure``.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None

    @property
    def todos(self) -> SQLAlchemyTodoRepository:
        """Get todo repository."""
        if not self._session:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return SQLAlchemyTodoRepository(self._session)

    async def commit(self) -> None:
        """Commit the current transaction."""
        if self._session:
            try:
                await self._session.commit()
            except SQLAlchemyError as e:
                raise StorageFailure(f"Commit failed: {type(e).__name__}") from e

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        if self._session:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        """Enter the context manager and create session."""
        self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Any,
    ) -> None:
        """Exit the context manager, rolling back on any exception."""
        if not self._session:
            return
        try:
            if exc_type:
                await self.rollback()
        finally:
            await self._session.close()
            self._session = None

        if isinstance(exc_val, StorageFailure):
            logger.warning("storage_failure", error=exc_val.message, cause=repr(exc_val.__cause__))
        elif isinstance(exc_val, SQLAlchemyError):
            logger.warning("storage_failure", error=str(exc_val), error_type=type(exc_val).__name__)
            raise StorageFailure(f"Storage operation failed: {type(exc_val).__name__}") from exc_val
