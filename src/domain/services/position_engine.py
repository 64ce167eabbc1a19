"""Pure position arithmetic for an owner's ordered todo list.

Every function takes a snapshot of the owner's todos sorted by
``(position, id)`` and returns the positions that must change, as a list of
``PositionUpdate``. Nothing here touches storage, and rows whose position
stays the same never appear in a result.
"""

from collections.abc import Sequence

from core.exceptions import TodoNotFoundError
from domain.entities.todo import PositionUpdate, Todo


def insert_position(items: Sequence[Todo]) -> int:
    """Position for a new todo appended to the end of the list."""
    if not items:
        return 0
    return max(item.position for item in items) + 1


def delete_shift(items: Sequence[Todo], deleted_position: int) -> list[PositionUpdate]:
    """Close the gap left by a deleted row.

    ``items`` are the survivors; everything after the deleted position moves
    up by one.
    """
    return [
        PositionUpdate(id=_require_id(item), position=item.position - 1)
        for item in items
        if item.position > deleted_position
    ]


def clamp(value: int, lower: int, upper: int) -> int:
    """Bound ``value`` to the inclusive range ``[lower, upper]``."""
    return max(lower, min(value, upper))


def move(
    items: Sequence[Todo], target_id: int, requested_position: int
) -> list[PositionUpdate]:
    """Move ``target_id`` to ``requested_position``, shifting the rows between.

    Out-of-range targets are clamped to ``[0, len(items) - 1]``.

    Raises:
        TodoNotFoundError: If ``target_id`` is not in the snapshot.
    """
    target = next((item for item in items if item.id == target_id), None)
    if target is None:
        raise TodoNotFoundError(target_id)

    old_pos = target.position
    new_pos = clamp(requested_position, 0, len(items) - 1)
    if new_pos == old_pos:
        return []

    updates: list[PositionUpdate] = []
    for item in items:
        if item.id == target_id:
            continue
        if old_pos < new_pos and old_pos < item.position <= new_pos:
            updates.append(PositionUpdate(id=_require_id(item), position=item.position - 1))
        elif old_pos > new_pos and new_pos <= item.position < old_pos:
            updates.append(PositionUpdate(id=_require_id(item), position=item.position + 1))

    updates.append(PositionUpdate(id=target_id, position=new_pos))
    return updates


def compact(items: Sequence[Todo]) -> list[PositionUpdate]:
    """Renumber ``items`` to ``0..N-1`` in the order given."""
    return [
        PositionUpdate(id=_require_id(item), position=index)
        for index, item in enumerate(items)
        if item.position != index
    ]


def apply_updates(items: Sequence[Todo], updates: Sequence[PositionUpdate]) -> list[Todo]:
    """Return ``items`` with ``updates`` applied, re-sorted by ``(position, id)``.

    The input todos are not mutated.
    """
    new_positions = {update.id: update.position for update in updates}
    result = [
        Todo(
            id=item.id,
            owner_id=item.owner_id,
            text=item.text,
            completed=item.completed,
            position=new_positions.get(_require_id(item), item.position),
            created_at=item.created_at,
            updated_at=item.updated_at,
        )
        for item in items
    ]
    return sorted(result, key=lambda todo: todo.sort_key)


def is_dense(items: Sequence[Todo]) -> bool:
    """Check that positions are exactly ``0..N-1`` with no duplicates."""
    return sorted(item.position for item in items) == list(range(len(items)))


def _require_id(item: Todo) -> int:
    if item.id is None:
        raise ValueError("Snapshot todo has no store-assigned id")
    return item.id
