"""Todo repository protocol."""

from collections.abc import Sequence
from typing import Protocol
from uuid import UUID

from domain.entities.todo import PositionUpdate, Todo


class ITodoRepository(Protocol):
    """Owner-scoped, ordered access to todo rows.

    Every read is filtered by ``owner_id`` and returns todos sorted by
    ``(position, id)``. Writes join the enclosing unit of work and become
    visible only when it commits.
    """

    async def fetch_owned_ordered(
        self, owner_id: UUID, for_update: bool = False
    ) -> list[Todo]:
        """Get all todos for an owner, ordered by (position, id).

        With ``for_update`` the rows are locked until the transaction ends.
        """
        ...

    async def fetch_one(self, todo_id: int, owner_id: UUID) -> Todo | None:
        """Get a todo by ID, or None if absent or owned by someone else."""
        ...

    async def insert_row(self, owner_id: UUID, text: str, position: int) -> Todo:
        """Insert a new, not completed todo and return it with its assigned id."""
        ...

    async def delete_rows(self, ids: Sequence[int]) -> int:
        """Delete rows by id and return how many were removed."""
        ...

    async def apply_position_updates(
        self, owner_id: UUID, updates: Sequence[PositionUpdate]
    ) -> None:
        """Write new positions for the given rows as one batch."""
        ...

    async def update_fields(
        self,
        todo_id: int,
        owner_id: UUID,
        text: str | None = None,
        completed: bool | None = None,
    ) -> Todo | None:
        """Patch text and/or completed; never touches position."""
        ...
