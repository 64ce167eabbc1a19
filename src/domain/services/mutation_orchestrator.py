"""Transactional wrapper around position engine computations."""

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from uuid import UUID

import structlog

from core.exceptions import StorageFailure
from domain.entities.todo import PositionUpdate, Todo
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services import position_engine

logger = structlog.get_logger()


@dataclass(frozen=True)
class NewRow:
    """A row to insert as part of a mutation."""

    text: str
    position: int


@dataclass
class MutationPlan:
    """Everything a single mutation writes, computed from one snapshot."""

    position_updates: list[PositionUpdate] = field(default_factory=list)
    delete_ids: list[int] = field(default_factory=list)
    insert: NewRow | None = None

    @property
    def write_count(self) -> int:
        return (
            len(self.position_updates)
            + len(self.delete_ids)
            + (1 if self.insert is not None else 0)
        )


Planner = Callable[[list[Todo]], MutationPlan]


@dataclass
class MutationOutcome:
    """Snapshot read, plan applied, and the row inserted (if any)."""

    snapshot: list[Todo]
    plan: MutationPlan
    inserted: Todo | None = None

    @property
    def after(self) -> list[Todo]:
        """The owner's ordering as committed."""
        deleted = set(self.plan.delete_ids)
        survivors = [item for item in self.snapshot if item.id not in deleted]
        result = position_engine.apply_updates(survivors, self.plan.position_updates)
        if self.inserted is not None:
            result.append(self.inserted)
        return result

    def find(self, todo_id: int) -> Todo | None:
        return next((item for item in self.after if item.id == todo_id), None)


class MutationOrchestrator:
    """Runs snapshot -> plan -> minimal write -> commit inside one unit of work.

    A planner is a pure function of the owner's ordered snapshot. It may raise
    a domain error, in which case nothing is written. Storage errors surface
    from the unit of work as ``StorageFailure`` after a full rollback.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[IUnitOfWork]:
        """Open a unit of work and commit it if the block completes."""
        async with self._uow_factory() as uow:
            yield uow
            await uow.commit()

    async def execute(self, owner_id: UUID, planner: Planner) -> MutationOutcome:
        """Apply ``planner`` to the owner's locked snapshot and commit the diff.

        Deletes are written first, then position updates, then the insert, so
        a new row at the end of the list never collides with a shifted one.
        """
        async with self.transaction() as uow:
            snapshot = await uow.todos.fetch_owned_ordered(owner_id, for_update=True)
            plan = planner(snapshot)

            if plan.delete_ids:
                await uow.todos.delete_rows(plan.delete_ids)
            if plan.position_updates:
                await uow.todos.apply_position_updates(owner_id, plan.position_updates)

            inserted = None
            if plan.insert is not None:
                inserted = await uow.todos.insert_row(
                    owner_id, plan.insert.text, plan.insert.position
                )

            outcome = MutationOutcome(snapshot=snapshot, plan=plan, inserted=inserted)
            if not position_engine.is_dense(outcome.after):
                logger.error(
                    "ordering_not_dense",
                    owner_id=str(owner_id),
                    positions=[item.position for item in outcome.after],
                )
                raise StorageFailure("Ordering invariant violated; nothing was written")

        logger.debug(
            "mutation_committed",
            owner_id=str(owner_id),
            deleted=len(plan.delete_ids),
            repositioned=len(plan.position_updates),
            inserted=inserted is not None,
        )
        return outcome
