"""Decides which schedule cells are done from stored unit and review records."""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from vocabplan import monitoring
from vocabplan.models.schedule_models import (
    CellKind,
    CellStyle,
    LearningUnitRecord,
    MatrixRow,
    ResolvedCell,
    ReviewOffsets,
    ScheduleCell,
    ScheduleRow,
    UnitReviewRecord,
)
from vocabplan.services.matrix_service import column_index

logger = logging.getLogger(__name__)


@dataclass
class _UnitIndexEntry:
    unit: LearningUnitRecord
    reviews: Dict[int, UnitReviewRecord]
    highest_order: int


def index_units(
    learning_units: Iterable[LearningUnitRecord],
    offsets: ReviewOffsets,
) -> Dict[int, _UnitIndexEntry]:
    """Map unit numbers to their records, dropping out-of-range reviews."""
    index: Dict[int, _UnitIndexEntry] = {}
    for unit in learning_units:
        reviews: Dict[int, UnitReviewRecord] = {}
        for review in unit.reviews:
            if not offsets.is_valid_round(review.review_order):
                logger.debug(
                    f"Ignoring review order {review.review_order} of unit {unit.unit_number}"
                )
                monitoring.ignored_reviews.inc()
                continue
            # A completed duplicate wins over an open one
            existing = reviews.get(review.review_order)
            if existing is None or (review.is_completed and not existing.is_completed):
                reviews[review.review_order] = review
        index[unit.unit_number] = _UnitIndexEntry(
            unit=unit,
            reviews=reviews,
            highest_order=max(reviews, default=0),
        )
    return index


def is_review_completed(
    entry: _UnitIndexEntry,
    review_order: int,
    infer_lower_rounds: bool = True,
) -> bool:
    """Check one review round of a unit.

    A round counts as done when its own record is completed, or, with
    infer_lower_rounds, when any later round has a record at all.
    """
    review = entry.reviews.get(review_order)
    if review is not None and review.is_completed:
        return True
    if infer_lower_rounds and entry.highest_order > review_order:
        monitoring.inferred_completions.inc()
        return True
    return False


def resolve_cell(
    cell: ScheduleCell,
    entry: Optional[_UnitIndexEntry],
    offsets: ReviewOffsets,
    infer_lower_rounds: bool = True,
) -> ResolvedCell:
    """Resolve the completion state of a single cell."""
    column = column_index(cell.interval, offsets)
    kind = cell.kind

    if entry is None:
        completed = False
    elif kind is CellKind.NEW:
        completed = bool(entry.unit.is_learned)
    else:
        completed = is_review_completed(entry, column, infer_lower_rounds)

    if completed:
        style = CellStyle.COMPLETED
    elif kind is CellKind.NEW:
        style = CellStyle.NOT_STARTED
    else:
        style = CellStyle.PENDING_REVIEW

    return ResolvedCell(
        day=cell.day,
        unit_number=cell.unit_number,
        column=column,
        kind=kind,
        interval=cell.interval,
        completed=completed,
        style=style,
    )


def resolve_completion(
    rows: Sequence[ScheduleRow],
    learning_units: Iterable[LearningUnitRecord],
    offsets: Optional[Sequence[int]] = None,
    infer_lower_rounds: bool = True,
) -> List[MatrixRow]:
    """Attach completion state to every cell of a schedule.

    Missing units are not an error; their cells stay not started. The
    function only reads its arguments, so two calls with the same snapshot
    give the same result.
    """
    review_offsets = ReviewOffsets.of(offsets)
    index = index_units(learning_units, review_offsets)

    resolved: List[MatrixRow] = []
    for row in rows:
        cells = tuple(
            resolve_cell(cell, index.get(cell.unit_number), review_offsets, infer_lower_rounds)
            for cell in row.cells
        )
        resolved.append(MatrixRow(day=row.day, cells=cells))
    return resolved
