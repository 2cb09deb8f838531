"""Models for schedule matrix data.

These are computed projections handed between the scheduler stages. None of
them are persisted; the store converts its ORM rows into the record types
defined here before the scheduler sees them.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from vocabplan.config import settings


class CellKind(Enum):
    """Kind of a schedule cell."""
    NEW = "new"  # First learning of a unit
    REVIEW = "review"  # One review round of a unit


class CellStyle(Enum):
    """Display state of a resolved cell."""
    NOT_STARTED = "not_started"  # New cell, unit not learned yet
    PENDING_REVIEW = "pending_review"  # Review cell, round not done yet
    COMPLETED = "completed"
    UNUSED = "unused"  # Slot without provisioned content, not clickable


@dataclass(frozen=True)
class ReviewOffsets:
    """Ordered review offsets in days; round k is the offset at index k-1."""
    values: Tuple[int, ...] = field(default_factory=lambda: tuple(settings.schedule.review_offsets))

    def __post_init__(self) -> None:
        values = tuple(self.values)
        if not values:
            raise ValueError("Review offsets must not be empty")
        if any(not isinstance(value, int) or isinstance(value, bool) or value <= 0 for value in values):
            raise ValueError(f"Review offsets must be positive integers: {values}")
        if any(a >= b for a, b in zip(values, values[1:])):
            raise ValueError(f"Review offsets must be strictly ascending: {values}")
        object.__setattr__(self, "values", values)

    @classmethod
    def of(cls, offsets: Optional[Sequence[int]] = None) -> "ReviewOffsets":
        """Build offsets from any sequence, falling back to the defaults."""
        if isinstance(offsets, ReviewOffsets):
            return offsets
        if offsets is None:
            return cls()
        return cls(tuple(offsets))

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[int]:
        return iter(self.values)

    @property
    def max_offset(self) -> int:
        return max(self.values)

    def round_of(self, offset: int) -> int:
        """Return the 1-based round number of an offset."""
        return self.values.index(offset) + 1

    def offset_of(self, review_order: int) -> Optional[int]:
        """Return the offset for a round, or None when the round is out of range."""
        if self.is_valid_round(review_order):
            return self.values[review_order - 1]
        return None

    def is_valid_round(self, review_order: int) -> bool:
        return 1 <= review_order <= len(self.values)


@dataclass(frozen=True)
class UnitReviewRecord:
    """Snapshot of one stored review round."""
    review_order: int
    is_completed: bool = False
    scheduled_date: Optional[date] = None
    completed_at: Optional[datetime] = None
    review_id: Optional[int] = None


@dataclass(frozen=True)
class LearningUnitRecord:
    """Snapshot of one stored learning unit and its reviews."""
    unit_number: int
    is_learned: bool = False
    learned_at: Optional[datetime] = None
    reviews: Tuple[UnitReviewRecord, ...] = ()
    unit_id: Optional[int] = None

    def review(self, review_order: int) -> Optional[UnitReviewRecord]:
        """Get the review for a round if one is stored."""
        for review in self.reviews:
            if review.review_order == review_order:
                return review
        return None


@dataclass(frozen=True)
class ValidationWarning:
    """A recoverable input problem that was corrected locally."""
    field: str
    message: str
    value: Any = None


@dataclass(frozen=True)
class PacingResult:
    """How a corpus splits into daily units."""
    units_count: int
    learning_days: int
    total_days: int
    total_words: int
    words_per_day: int
    warnings: Tuple[ValidationWarning, ...] = ()


@dataclass(frozen=True)
class ScheduleCell:
    """One task in the schedule: learn a unit, or review it after `interval` days."""
    day: int
    unit_number: int
    interval: Optional[int] = None

    @property
    def kind(self) -> CellKind:
        return CellKind.NEW if self.interval is None else CellKind.REVIEW


@dataclass(frozen=True)
class ScheduleRow:
    """All tasks of one plan day."""
    day: int
    cells: Tuple[ScheduleCell, ...]


@dataclass(frozen=True)
class PlanCapacity:
    """How many units to display against how many have content."""
    units_count_for_structure: int
    max_actual_unit_number: int
    has_unused_lists: bool = False


@dataclass(frozen=True)
class ResolvedCell:
    """A schedule cell with its completion state."""
    day: int
    unit_number: int
    column: int
    kind: CellKind
    interval: Optional[int]
    completed: bool
    style: CellStyle
    unused: bool = False

    @property
    def review_order(self) -> Optional[int]:
        """Round number of a review cell; None for new cells."""
        return self.column if self.kind is CellKind.REVIEW else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "unitNumber": self.unit_number,
            "column": self.column,
            "kind": self.kind.value,
            "completed": self.completed,
            "unused": self.unused,
        }


@dataclass(frozen=True)
class MatrixRow:
    """A resolved day row."""
    day: int
    cells: Tuple[ResolvedCell, ...]

    def cell_at(self, column: int) -> Optional[ResolvedCell]:
        for cell in self.cells:
            if cell.column == column:
                return cell
        return None


@dataclass
class MatrixRequest:
    """Everything needed to build a plan's matrix."""
    total_words: int = 0
    words_per_day: int = field(default_factory=lambda: settings.schedule.default_words_per_day)
    review_offsets: Sequence[int] = field(default_factory=lambda: list(settings.schedule.review_offsets))
    estimated_unit_count: Optional[int] = None
    max_actual_unit_number: Optional[int] = None
    has_unused_lists: Optional[bool] = None
    learning_units: Sequence[LearningUnitRecord] = field(default_factory=list)
    minimum_display_days: int = 0


@dataclass(frozen=True)
class ScheduleMatrix:
    """The rendering-ready matrix for one plan."""
    rows: Tuple[MatrixRow, ...]
    total_days: int
    units_count: int
    display_days: int
    offsets: ReviewOffsets
    capacity: PlanCapacity
    warnings: Tuple[ValidationWarning, ...] = ()

    def headers(self) -> List[str]:
        """Column labels: new learning first, then one per offset."""
        return ["0d"] + [f"{offset}d" for offset in self.offsets]

    def row(self, day: int) -> Optional[MatrixRow]:
        for row in self.rows:
            if row.day == day:
                return row
        return None

    def cell_at(self, day: int, column: int) -> Optional[ResolvedCell]:
        row = self.row(day)
        return row.cell_at(column) if row else None

    def cells(self) -> Iterator[ResolvedCell]:
        for row in self.rows:
            yield from row.cells

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rows": [
                {"day": row.day, "cells": [cell.to_dict() for cell in row.cells]}
                for row in self.rows
            ],
            "totalDays": self.total_days,
            "unitsCount": self.units_count,
        }


@dataclass(frozen=True)
class CellSelection:
    """What a click on a matrix cell points at."""
    unit_number: int
    kind: CellKind
    review_order: Optional[int] = None
    unit: Optional[LearningUnitRecord] = None

    @property
    def unit_id(self) -> Optional[int]:
        return self.unit.unit_id if self.unit else None

    @property
    def is_placeholder(self) -> bool:
        """True when the unit has no stored record yet."""
        return self.unit is None


@dataclass(frozen=True)
class DayAgenda:
    """New and review tasks of a single plan day."""
    day: int
    new_cell: Optional[ResolvedCell] = None
    review_cells: Tuple[ResolvedCell, ...] = ()

    @property
    def new_unit_number(self) -> Optional[int]:
        return self.new_cell.unit_number if self.new_cell else None

    @property
    def review_unit_numbers(self) -> List[int]:
        return [cell.unit_number for cell in self.review_cells]

    @property
    def pending_reviews(self) -> List[ResolvedCell]:
        return [cell for cell in self.review_cells if not cell.completed and not cell.unused]


@dataclass(frozen=True)
class PlanProgress:
    """Learned/remaining unit summary."""
    total: int
    learned: int
    remaining: int
