"""Todo service layer with business logic."""

from collections.abc import Callable
from uuid import UUID

import structlog

from core.exceptions import StorageFailure, TodoNotFoundError, TodoValidationError
from domain.entities.todo import Todo
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services import position_engine
from domain.services.mutation_orchestrator import (
    MutationOrchestrator,
    MutationPlan,
    NewRow,
)

logger = structlog.get_logger()


class TodoService:
    """Service layer for Todo business logic.

    Every method takes the already-authenticated ``owner_id`` explicitly and
    only ever reads or writes that owner's rows.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory
        self._orchestrator = MutationOrchestrator(uow_factory)

    async def list_todos(self, owner_id: UUID) -> list[Todo]:
        """Get all todos for an owner ordered by (position, id)."""
        async with self._uow_factory() as uow:
            return await uow.todos.fetch_owned_ordered(owner_id)

    async def get(self, owner_id: UUID, todo_id: int) -> Todo:
        """Get a single owned todo."""
        async with self._uow_factory() as uow:
            todo = await uow.todos.fetch_one(todo_id, owner_id)
        if todo is None:
            raise TodoNotFoundError(todo_id)
        return todo

    async def create(self, owner_id: UUID, text: str) -> Todo:
        """Append a new todo to the end of the owner's list."""
        cleaned = _clean_text(text)

        def plan(snapshot: list[Todo]) -> MutationPlan:
            position = position_engine.insert_position(snapshot)
            return MutationPlan(insert=NewRow(text=cleaned, position=position))

        outcome = await self._orchestrator.execute(owner_id, plan)
        if outcome.inserted is None:
            raise StorageFailure("Insert returned no row")
        logger.info(
            "todo_created",
            owner_id=str(owner_id),
            todo_id=outcome.inserted.id,
            position=outcome.inserted.position,
        )
        return outcome.inserted

    async def delete(self, owner_id: UUID, todo_id: int) -> None:
        """Delete a todo and close the gap it leaves."""

        def plan(snapshot: list[Todo]) -> MutationPlan:
            target = _find(snapshot, todo_id)
            survivors = [item for item in snapshot if item.id != todo_id]
            return MutationPlan(
                delete_ids=[todo_id],
                position_updates=position_engine.delete_shift(survivors, target.position),
            )

        outcome = await self._orchestrator.execute(owner_id, plan)
        logger.info(
            "todo_deleted",
            owner_id=str(owner_id),
            todo_id=todo_id,
            shifted=len(outcome.plan.position_updates),
        )

    async def move(self, owner_id: UUID, todo_id: int, requested_position: int) -> Todo:
        """Move a todo to a new position; out-of-range targets are clamped."""
        if requested_position < 0:
            raise TodoValidationError("Todo position must be non-negative.")

        def plan(snapshot: list[Todo]) -> MutationPlan:
            return MutationPlan(
                position_updates=position_engine.move(snapshot, todo_id, requested_position)
            )

        outcome = await self._orchestrator.execute(owner_id, plan)
        moved = outcome.find(todo_id)
        if moved is None:
            raise TodoNotFoundError(todo_id)
        logger.info(
            "todo_moved",
            owner_id=str(owner_id),
            todo_id=todo_id,
            requested_position=requested_position,
            position=moved.position,
            writes=outcome.plan.write_count,
        )
        return moved

    async def clear_completed(self, owner_id: UUID) -> int:
        """Remove completed todos and renumber the rest. Returns rows removed."""

        def plan(snapshot: list[Todo]) -> MutationPlan:
            survivors = [item for item in snapshot if not item.completed]
            return MutationPlan(
                delete_ids=[item.id for item in snapshot if item.completed and item.id is not None],
                position_updates=position_engine.compact(survivors),
            )

        outcome = await self._orchestrator.execute(owner_id, plan)
        removed = len(outcome.plan.delete_ids)
        logger.info(
            "completed_todos_cleared",
            owner_id=str(owner_id),
            removed=removed,
            repositioned=len(outcome.plan.position_updates),
        )
        return removed

    async def toggle_completed(self, owner_id: UUID, todo_id: int) -> Todo:
        """Flip the completed flag; position is untouched."""
        async with self._orchestrator.transaction() as uow:
            todo = await uow.todos.fetch_one(todo_id, owner_id)
            if todo is None:
                raise TodoNotFoundError(todo_id)
            updated = await uow.todos.update_fields(
                todo_id, owner_id, completed=not todo.completed
            )
            if updated is None:
                raise TodoNotFoundError(todo_id)
        return updated

    async def update(
        self,
        owner_id: UUID,
        todo_id: int,
        text: str | None = None,
        completed: bool | None = None,
    ) -> Todo:
        """Patch text and/or completed on an owned todo."""
        cleaned = _clean_text(text) if text is not None else None
        async with self._orchestrator.transaction() as uow:
            updated = await uow.todos.update_fields(
                todo_id, owner_id, text=cleaned, completed=completed
            )
            if updated is None:
                raise TodoNotFoundError(todo_id)
        return updated


def _clean_text(text: str) -> str:
    cleaned = text.strip()
    if not cleaned:
        raise TodoValidationError("Todo text is required.")
    return cleaned


def _find(snapshot: list[Todo], todo_id: int) -> Todo:
    todo = next((item for item in snapshot if item.id == todo_id), None)
    if todo is None:
        raise TodoNotFoundError(todo_id)
    return todo
