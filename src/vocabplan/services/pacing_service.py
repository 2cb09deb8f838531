"""Pacing: how many daily units a vocabulary book splits into."""
import logging
import math
from typing import List, Optional, Sequence, Tuple

from vocabplan import monitoring
from vocabplan.models.schedule_models import PacingResult, ReviewOffsets, ValidationWarning

logger = logging.getLogger(__name__)


def _normalize_total(total_item_count) -> Tuple[int, Optional[ValidationWarning]]:
    """Coerce the item total to a non-negative int."""
    if isinstance(total_item_count, bool) or not isinstance(total_item_count, (int, float)):
        return 0, ValidationWarning("total_words", "Word total is not a number, using 0", total_item_count)
    if isinstance(total_item_count, float):
        if math.isnan(total_item_count) or math.isinf(total_item_count):
            return 0, ValidationWarning("total_words", "Word total is not finite, using 0", total_item_count)
        whole = int(total_item_count)
        if whole != total_item_count and whole >= 0:
            return whole, ValidationWarning(
                "total_words", f"Word total is not a whole number, using {whole}", total_item_count
            )
        total_item_count = whole
    if total_item_count < 0:
        return 0, ValidationWarning("total_words", "Word total is negative, using 0", total_item_count)
    return total_item_count, None


def _normalize_pace(items_per_day) -> Tuple[int, Optional[ValidationWarning]]:
    """Coerce the daily pace to a positive int, clamping to 1."""
    if isinstance(items_per_day, bool) or not isinstance(items_per_day, (int, float)):
        return 1, ValidationWarning("words_per_day", "Words per day is not a number, using 1", items_per_day)
    if isinstance(items_per_day, float):
        if math.isnan(items_per_day) or math.isinf(items_per_day):
            return 1, ValidationWarning("words_per_day", "Words per day is not finite, using 1", items_per_day)
        whole = int(items_per_day)
        if whole != items_per_day and whole > 0:
            return whole, ValidationWarning(
                "words_per_day", f"Words per day is not a whole number, using {whole}", items_per_day
            )
        items_per_day = whole
    if items_per_day <= 0:
        return 1, ValidationWarning("words_per_day", "Words per day must be positive, using 1", items_per_day)
    return items_per_day, None


def units_for(total_item_count: int, items_per_day: int) -> int:
    """Integer ceiling of total / per day."""
    return -(-total_item_count // items_per_day)


def calculate_pacing(
    total_item_count,
    items_per_day,
    offsets: Optional[Sequence[int]] = None,
) -> PacingResult:
    """Split a corpus into daily units and estimate the plan length.

    Invalid input never raises: totals that are negative or not numbers count
    as 0, and a pace below 1 is clamped to 1. Fractional numbers are cut to
    whole words. Each correction is returned as a ValidationWarning so the
    caller can surface it.

    Args:
        total_item_count: Number of words in the book.
        items_per_day: Words introduced per day.
        offsets: Review offsets; the largest one sets the plan horizon.

    Returns:
        PacingResult with units_count, learning_days and total_days.
    """
    review_offsets = ReviewOffsets.of(offsets)
    warnings: List[ValidationWarning] = []

    total, total_warning = _normalize_total(total_item_count)
    if total_warning:
        logger.warning(f"{total_warning.message} (got {total_item_count!r})")
        monitoring.invalid_totals.inc()
        warnings.append(total_warning)

    pace, pace_warning = _normalize_pace(items_per_day)
    if pace_warning:
        logger.warning(f"{pace_warning.message} (got {items_per_day!r})")
        monitoring.pace_clamped.inc()
        warnings.append(pace_warning)

    units_count = units_for(total, pace)
    return PacingResult(
        units_count=units_count,
        learning_days=units_count,
        total_days=units_count + review_offsets.max_offset,
        total_words=total,
        words_per_day=pace,
        warnings=tuple(warnings),
    )
