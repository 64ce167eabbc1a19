"""Unit tests for the pure position engine."""

from uuid import UUID

import pytest

from core.exceptions import TodoNotFoundError
from domain.entities.todo import PositionUpdate
from domain.services import position_engine
from tests.unit.conftest import make_snapshot


def _positions(snapshot, updates) -> list[tuple[int, int]]:
    """Resulting (id, position) pairs in list order."""
    return [(t.id, t.position) for t in position_engine.apply_updates(snapshot, updates)]


class TestInsertPosition:
    def test_empty_list_starts_at_zero(self) -> None:
        assert position_engine.insert_position([]) == 0

    def test_appends_after_max(self, owner_id: UUID) -> None:
        snapshot = make_snapshot(owner_id, (1, 0), (2, 1), (3, 2))

        assert position_engine.insert_position(snapshot) == 3

    def test_uses_max_not_count(self, owner_id: UUID) -> None:
        """A gapped legacy list still appends after its highest position."""
        snapshot = make_snapshot(owner_id, (1, 0), (2, 5))

        assert position_engine.insert_position(snapshot) == 6


class TestDeleteShift:
    def test_shifts_only_rows_after_deleted(self, owner_id: UUID) -> None:
        survivors = make_snapshot(owner_id, (1, 0), (3, 2), (4, 3))

        updates = position_engine.delete_shift(survivors, deleted_position=1)

        assert updates == [PositionUpdate(id=3, position=1), PositionUpdate(id=4, position=2)]

    def test_deleting_last_changes_nothing(self, owner_id: UUID) -> None:
        survivors = make_snapshot(owner_id, (1, 0), (2, 1))

        assert position_engine.delete_shift(survivors, deleted_position=2) == []

    def test_empty_survivors(self) -> None:
        assert position_engine.delete_shift([], deleted_position=0) == []


class TestClamp:
    @pytest.mark.parametrize(
        ("value", "expected"), [(-3, 0), (0, 0), (2, 2), (4, 4), (9, 4)]
    )
    def test_bounds_inclusive(self, value: int, expected: int) -> None:
        assert position_engine.clamp(value, 0, 4) == expected


class TestMove:
    def test_move_right(self, owner_id: UUID) -> None:
        snapshot = make_snapshot(owner_id, (1, 0), (2, 1), (3, 2))

        updates = position_engine.move(snapshot, target_id=1, requested_position=2)

        assert _positions(snapshot, updates) == [(2, 0), (3, 1), (1, 2)]
        assert len(updates) == 3

    def test_move_left(self, owner_id: UUID) -> None:
        snapshot = make_snapshot(owner_id, (1, 0), (2, 1), (3, 2), (4, 3))

        updates = position_engine.move(snapshot, target_id=4, requested_position=1)

        assert _positions(snapshot, updates) == [(1, 0), (4, 1), (2, 2), (3, 3)]
        # Row 1 sits before the affected range and is never rewritten
        assert {u.id for u in updates} == {2, 3, 4}

    def test_adjacent_swap_writes_two_rows(self, owner_id: UUID) -> None:
        snapshot = make_snapshot(owner_id, (1, 0), (2, 1), (3, 2))

        updates = position_engine.move(snapshot, target_id=2, requested_position=2)

        assert sorted(updates, key=lambda u: u.id) == [
            PositionUpdate(id=2, position=2),
            PositionUpdate(id=3, position=1),
        ]

    def test_same_position_is_noop(self, owner_id: UUID) -> None:
        snapshot = make_snapshot(owner_id, (1, 0), (2, 1), (3, 2))

        assert position_engine.move(snapshot, target_id=2, requested_position=1) == []

    def test_clamps_past_end(self, owner_id: UUID) -> None:
        snapshot = make_snapshot(owner_id, (1, 0), (2, 1), (3, 2))

        clamped = position_engine.move(snapshot, target_id=1, requested_position=99)
        exact = position_engine.move(snapshot, target_id=1, requested_position=2)

        assert clamped == exact

    def test_clamp_onto_current_last_is_noop(self, owner_id: UUID) -> None:
        snapshot = make_snapshot(owner_id, (1, 0), (2, 1), (3, 2))

        assert position_engine.move(snapshot, target_id=3, requested_position=50) == []

    def test_single_item_is_noop(self, owner_id: UUID) -> None:
        snapshot = make_snapshot(owner_id, (7, 0))

        assert position_engine.move(snapshot, target_id=7, requested_position=3) == []

    def test_missing_target_raises(self, owner_id: UUID) -> None:
        snapshot = make_snapshot(owner_id, (1, 0), (2, 1))

        with pytest.raises(TodoNotFoundError):
            position_engine.move(snapshot, target_id=99, requested_position=0)

    def test_empty_list_raises_not_found(self) -> None:
        with pytest.raises(TodoNotFoundError):
            position_engine.move([], target_id=1, requested_position=0)

    @pytest.mark.parametrize("target_id", [1, 2, 3, 4, 5])
    @pytest.mark.parametrize("requested", [0, 1, 2, 3, 4, 10])
    def test_every_move_keeps_list_dense(
        self, owner_id: UUID, target_id: int, requested: int
    ) -> None:
        snapshot = make_snapshot(owner_id, (1, 0), (2, 1), (3, 2), (4, 3), (5, 4))

        updates = position_engine.move(snapshot, target_id, requested)
        after = position_engine.apply_updates(snapshot, updates)

        assert position_engine.is_dense(after)
        moved = next(t for t in after if t.id == target_id)
        assert moved.position == min(requested, 4)
        # Relative order of the other rows is preserved
        others = [t.id for t in after if t.id != target_id]
        assert others == [t.id for t in snapshot if t.id != target_id]


class TestCompact:
    def test_renumbers_survivors_in_order(self, owner_id: UUID) -> None:
        survivors = make_snapshot(owner_id, (2, 1), (4, 3), (5, 4))

        updates = position_engine.compact(survivors)

        assert updates == [
            PositionUpdate(id=2, position=0),
            PositionUpdate(id=4, position=1),
            PositionUpdate(id=5, position=2),
        ]

    def test_already_dense_prefix_is_untouched(self, owner_id: UUID) -> None:
        survivors = make_snapshot(owner_id, (1, 0), (2, 1), (4, 3))

        assert position_engine.compact(survivors) == [PositionUpdate(id=4, position=2)]

    def test_dense_list_produces_no_updates(self, owner_id: UUID) -> None:
        survivors = make_snapshot(owner_id, (1, 0), (2, 1))

        assert position_engine.compact(survivors) == []


class TestIsDense:
    def test_dense(self, owner_id: UUID) -> None:
        assert position_engine.is_dense(make_snapshot(owner_id, (1, 0), (2, 1)))

    def test_gap(self, owner_id: UUID) -> None:
        assert not position_engine.is_dense(make_snapshot(owner_id, (1, 0), (2, 2)))

    def test_duplicate(self, owner_id: UUID) -> None:
        assert not position_engine.is_dense(make_snapshot(owner_id, (1, 0), (2, 0)))

    def test_empty(self) -> None:
        assert position_engine.is_dense([])


class TestApplyUpdates:
    def test_does_not_mutate_input(self, owner_id: UUID) -> None:
        snapshot = make_snapshot(owner_id, (1, 0), (2, 1))

        position_engine.apply_updates(snapshot, [PositionUpdate(id=1, position=1)])

        assert [t.position for t in snapshot] == [0, 1]
