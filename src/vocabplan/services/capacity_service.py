"""Reconciles the planned unit count with the units that actually have content."""
import logging
from dataclasses import replace
from typing import Iterable, List, Optional, Sequence

from vocabplan import monitoring
from vocabplan.models.schedule_models import (
    CellStyle,
    LearningUnitRecord,
    MatrixRow,
    PlanCapacity,
    ResolvedCell,
)

logger = logging.getLogger(__name__)


def derive_capacity(
    pacing_units_count: int,
    estimated_unit_count: Optional[int] = None,
    max_actual_unit_number: Optional[int] = None,
    has_unused_lists: Optional[bool] = None,
    learning_units: Iterable[LearningUnitRecord] = (),
) -> PlanCapacity:
    """Work out how many units to display and how many have content.

    A positive backend estimate wins over the local pacing count. Without
    either, the highest stored unit number is used. Missing content signals
    mean every displayed unit is treated as provisioned.
    """
    if estimated_unit_count is not None and estimated_unit_count > 0:
        units_count = estimated_unit_count
    elif pacing_units_count > 0:
        units_count = pacing_units_count
    else:
        units_count = max((unit.unit_number for unit in learning_units), default=0)

    if max_actual_unit_number is None:
        actual = units_count
    else:
        actual = max(max_actual_unit_number, 0)

    capacity = PlanCapacity(
        units_count_for_structure=units_count,
        max_actual_unit_number=actual,
        has_unused_lists=bool(has_unused_lists),
    )
    logger.debug(f"Derived capacity: {capacity}")
    return capacity


def is_unused(unit_number: int, capacity: PlanCapacity) -> bool:
    """True for slots past the last unit with content."""
    return capacity.has_unused_lists and unit_number > capacity.max_actual_unit_number


def is_selectable(cell: ResolvedCell, capacity: PlanCapacity) -> bool:
    """Whether a click on the cell should open its unit."""
    return not cell.unused and cell.unit_number <= capacity.units_count_for_structure


def apply_capacity(rows: Sequence[MatrixRow], capacity: PlanCapacity) -> List[MatrixRow]:
    """Mark cells without provisioned content as unused.

    Unused overrides whatever completion was resolved for the cell, even if a
    stray unit record exists for it.
    """
    if not capacity.has_unused_lists:
        return list(rows)

    flagged = 0
    reconciled: List[MatrixRow] = []
    for row in rows:
        cells = []
        for cell in row.cells:
            if is_unused(cell.unit_number, capacity):
                cell = replace(cell, unused=True, completed=False, style=CellStyle.UNUSED)
                flagged += 1
            cells.append(cell)
        reconciled.append(MatrixRow(day=row.day, cells=tuple(cells)))

    if flagged:
        logger.info(
            f"Flagged {flagged} unused cells beyond unit {capacity.max_actual_unit_number}"
        )
        monitoring.unused_cells.inc(flagged)
    return reconciled
