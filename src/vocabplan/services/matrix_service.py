"""Builds the day by column grid of new and review tasks."""
import logging
from typing import List, Optional, Sequence

from vocabplan.models.schedule_models import ReviewOffsets, ScheduleCell, ScheduleRow

logger = logging.getLogger(__name__)

NEW_COLUMN = 0


def column_index(interval: Optional[int], offsets: Sequence[int]) -> int:
    """Grid column of a cell: 0 for new learning, 1 + offset index for reviews."""
    if interval is None:
        return NEW_COLUMN
    return ReviewOffsets.of(offsets).round_of(interval)


def schedule_horizon(units_count: int, offsets: Sequence[int]) -> int:
    """Last day on which the last unit is reviewed."""
    return max(units_count, 0) + ReviewOffsets.of(offsets).max_offset


def build_schedule(
    units_count: int,
    offsets: Optional[Sequence[int]] = None,
    minimum_display_days: int = 0,
) -> List[ScheduleRow]:
    """Generate the schedule rows for a plan.

    Unit d is learned on day d and reviewed on day d + o for every offset o.
    Days without any task are left out, so row days can skip values past the
    point where new units stop.
    """
    review_offsets = ReviewOffsets.of(offsets)
    units_count = max(units_count or 0, 0)
    display_days = max(minimum_display_days or 0, schedule_horizon(units_count, review_offsets))

    rows: List[ScheduleRow] = []
    for day in range(1, display_days + 1):
        cells: List[ScheduleCell] = []
        if day <= units_count:
            cells.append(ScheduleCell(day=day, unit_number=day))

        for offset in review_offsets:
            origin = day - offset
            if 1 <= origin <= units_count:
                cells.append(ScheduleCell(day=day, unit_number=origin, interval=offset))

        if cells:
            rows.append(ScheduleRow(day=day, cells=tuple(cells)))

    logger.debug(f"Built schedule: {units_count} units, {display_days} days, {len(rows)} rows")
    return rows
