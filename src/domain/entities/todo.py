"""Todo domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass
class Todo:
    """Domain entity for a Todo.

    ``id`` is assigned by the store on insert; ``owner_id`` never changes
    after creation. ``position`` is the zero-based rank within the owner's
    list.
    """

    owner_id: UUID
    text: str
    id: int | None = None
    completed: bool = False
    position: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def sort_key(self) -> tuple[int, int]:
        """Ordering key: position, then id for tie-breaking."""
        return (self.position, self.id or 0)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at


@dataclass(frozen=True)
class PositionUpdate:
    """A single row's new position; the unit of a minimal diff."""

    id: int
    position: int
