"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from domain.entities.todo import Todo


class FakeUnitOfWork:
    """Fake Unit of Work with a mocked todo repository for unit testing."""

    def __init__(self) -> None:
        self.todos = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, exc_type: Any, *args: Any) -> None:
        if exc_type:
            await self.rollback()


def make_snapshot(owner_id: UUID, *entries: tuple[int, int] | tuple[int, int, bool]) -> list[Todo]:
    """Build an ordered snapshot from ``(id, position[, completed])`` tuples."""
    todos = [
        Todo(
            id=entry[0],
            owner_id=owner_id,
            text=f"Task {entry[0]}",
            position=entry[1],
            completed=entry[2] if len(entry) > 2 else False,  # type: ignore[misc]
        )
        for entry in entries
    ]
    return sorted(todos, key=lambda t: t.sort_key)


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def owner_id() -> UUID:
    """A random owner ID."""
    return uuid4()
