"""Tests for capacity reconciliation."""
import pytest

from vocabplan.models.schedule_models import (
    CellStyle,
    LearningUnitRecord,
    PlanCapacity,
    UnitReviewRecord,
)
from vocabplan.services.capacity_service import (
    apply_capacity,
    derive_capacity,
    is_selectable,
    is_unused,
)
from vocabplan.services.completion_service import resolve_completion
from vocabplan.services.matrix_service import build_schedule

OFFSETS = [1, 2, 4, 7, 15]


def test_backend_estimate_wins():
    capacity = derive_capacity(3, estimated_unit_count=5, max_actual_unit_number=3, has_unused_lists=True)
    assert capacity == PlanCapacity(5, 3, True)


def test_zero_estimate_falls_back_to_pacing():
    capacity = derive_capacity(4, estimated_unit_count=0)
    assert capacity.units_count_for_structure == 4


def test_missing_signals_use_local_count():
    """Without content signals every displayed unit counts as provisioned."""
    capacity = derive_capacity(6)
    assert capacity == PlanCapacity(6, 6, False)


def test_stored_units_used_when_nothing_else_known():
    units = [LearningUnitRecord(unit_number=1), LearningUnitRecord(unit_number=4)]
    assert derive_capacity(0, learning_units=units).units_count_for_structure == 4
    assert derive_capacity(0).units_count_for_structure == 0


def test_is_unused_requires_flag():
    assert is_unused(4, PlanCapacity(5, 3, True)) is True
    assert is_unused(3, PlanCapacity(5, 3, True)) is False
    assert is_unused(4, PlanCapacity(5, 3, False)) is False


def test_unused_cells_override_completion():
    """Units 4 and 5 have no content; a stray record for unit 4 changes nothing."""
    capacity = derive_capacity(5, estimated_unit_count=5, max_actual_unit_number=3, has_unused_lists=True)
    stray = LearningUnitRecord(
        unit_number=4,
        is_learned=True,
        reviews=(UnitReviewRecord(review_order=1, is_completed=True),),
    )
    rows = resolve_completion(build_schedule(5, OFFSETS), [stray], OFFSETS)
    rows = apply_capacity(rows, capacity)

    cells = [cell for row in rows for cell in row.cells]
    for cell in cells:
        if cell.unit_number in (4, 5):
            assert cell.unused is True
            assert cell.completed is False
            assert cell.style is CellStyle.UNUSED
            assert is_selectable(cell, capacity) is False
        else:
            assert cell.unused is False
            assert is_selectable(cell, capacity) is True


def test_apply_capacity_without_unused_lists_is_identity():
    rows = resolve_completion(build_schedule(3, OFFSETS), [], OFFSETS)
    assert apply_capacity(rows, PlanCapacity(3, 1, False)) == rows


def test_cells_beyond_structure_are_not_selectable():
    rows = resolve_completion(build_schedule(4, OFFSETS), [], OFFSETS)
    cell = rows[3].cells[0]
    assert cell.unit_number == 4
    assert is_selectable(cell, PlanCapacity(3, 3, False)) is False


if __name__ == "__main__":
    pytest.main([__file__])
