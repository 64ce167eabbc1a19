"""SQLAlchemy implementation of Todo repository."""

from collections.abc import Sequence
from datetime import datetime
from uuid import UUID

from sqlalchemy import bindparam, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import StorageFailure
from domain.entities.todo import PositionUpdate, Todo
from infrastructure.database.models import TodoModel

_todos = TodoModel.__table__


class SQLAlchemyTodoRepository:
    """SQLAlchemy implementation of ITodoRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def fetch_owned_ordered(
        self, owner_id: UUID, for_update: bool = False
    ) -> list[Todo]:
        """Get all todos for an owner, ordered by (position, id).

        ``for_update`` renders ``SELECT ... FOR UPDATE`` on backends that
        support it; SQLite ignores it and relies on its database-level lock.
        """
        stmt = (
            select(TodoModel)
            .where(TodoModel.owner_id == owner_id)
            .order_by(TodoModel.position, TodoModel.id)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def fetch_one(self, todo_id: int, owner_id: UUID) -> Todo | None:
        """Get a todo by ID, scoped to its owner."""
        model = await self._get_model(todo_id, owner_id)
        return self._to_entity(model) if model else None

    async def insert_row(self, owner_id: UUID, text: str, position: int) -> Todo:
        """Create a new todo and return it with its assigned id."""
        model = TodoModel(owner_id=owner_id, text=text, completed=False, position=position)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def delete_rows(self, ids: Sequence[int]) -> int:
        """Delete todos by id."""
        if not ids:
            return 0
        stmt = delete(TodoModel).where(TodoModel.id.in_(list(ids)))
        result = await self._session.execute(stmt)
        return result.rowcount or 0  # type: ignore[attr-defined]

    async def apply_position_updates(
        self, owner_id: UUID, updates: Sequence[PositionUpdate]
    ) -> None:
        """Write new positions in two passes.

        The first pass parks every changed row on a distinct negative
        position, the second writes the final values, so the unique
        ``(owner_id, position)`` index holds after every single-row update.

        Raises:
            StorageFailure: If a row in ``updates`` no longer exists for the
                owner; the snapshot the diff was computed from is stale.
        """
        if not updates:
            return

        stmt = (
            update(_todos)
            .where(_todos.c.id == bindparam("todo_id"))
            .where(_todos.c.owner_id == owner_id)
            .values(position=bindparam("new_position"), updated_at=bindparam("now"))
        )
        now = datetime.utcnow()
        await self._session.execute(
            stmt,
            [
                {"todo_id": u.id, "new_position": -(u.position + 1), "now": now}
                for u in updates
            ],
        )
        await self._session.execute(
            stmt,
            [{"todo_id": u.id, "new_position": u.position, "now": now} for u in updates],
        )

        # executemany rowcounts are not reliable on every driver (asyncpg)
        matched = await self._session.scalar(
            select(func.count())
            .select_from(_todos)
            .where(_todos.c.owner_id == owner_id)
            .where(_todos.c.id.in_([u.id for u in updates]))
        )
        if matched != len(updates):
            raise StorageFailure(
                f"Stale snapshot: {len(updates) - (matched or 0)} row(s) changed concurrently"
            )

    async def update_fields(
        self,
        todo_id: int,
        owner_id: UUID,
        text: str | None = None,
        completed: bool | None = None,
    ) -> Todo | None:
        """Patch text and/or completed on an owned todo."""
        model = await self._get_model(todo_id, owner_id)
        if not model:
            return None

        if text is not None:
            model.text = text
        if completed is not None:
            model.completed = completed
        model.updated_at = datetime.utcnow()

        await self._session.flush()
        return self._to_entity(model)

    async def _get_model(self, todo_id: int, owner_id: UUID) -> TodoModel | None:
        stmt = select(TodoModel).where(
            TodoModel.id == todo_id, TodoModel.owner_id == owner_id
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _to_entity(self, model: TodoModel) -> Todo:
        """Convert ORM model to domain entity."""
        return Todo(
            id=model.id,
            owner_id=model.owner_id,
            text=model.text,
            completed=model.completed,
            position=model.position,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
