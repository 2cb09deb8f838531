"""Service that runs the full pacing -> schedule -> completion -> capacity pipeline."""
import logging
from datetime import date
from typing import Iterable, List, Optional, Sequence

from vocabplan import monitoring
from vocabplan.config import settings
from vocabplan.models.schedule_models import (
    CellKind,
    CellSelection,
    DayAgenda,
    LearningUnitRecord,
    MatrixRequest,
    PlanCapacity,
    PlanProgress,
    ReviewOffsets,
    ScheduleMatrix,
    ValidationWarning,
)
from vocabplan.services.capacity_service import (
    apply_capacity,
    derive_capacity,
    is_selectable,
    is_unused,
)
from vocabplan.services.completion_service import resolve_completion
from vocabplan.services.matrix_service import build_schedule, schedule_horizon
from vocabplan.services.pacing_service import calculate_pacing

logger = logging.getLogger(__name__)


def display_unit_number(unit_number: int) -> str:
    """Label shown to learners for a unit. Presentation only."""
    return str(unit_number)


def plan_day_number(start_date: date, today: Optional[date] = None) -> int:
    """1-based plan day for a calendar date; 0 before the plan starts."""
    today = today or date.today()
    if today < start_date:
        return 0
    return (today - start_date).days + 1


class ScheduleService:
    """Builds schedule matrices and answers questions about their cells."""

    def __init__(self, infer_lower_rounds: Optional[bool] = None):
        """Initialize the service with the review inference policy."""
        if infer_lower_rounds is None:
            infer_lower_rounds = settings.schedule.infer_lower_rounds
        self.infer_lower_rounds = infer_lower_rounds

    def _offsets_for(self, request: MatrixRequest, warnings: List[ValidationWarning]) -> ReviewOffsets:
        try:
            return ReviewOffsets.of(request.review_offsets)
        except (TypeError, ValueError) as e:
            logger.warning(f"Invalid review offsets {request.review_offsets!r}, using defaults: {e}")
            warnings.append(
                ValidationWarning("review_offsets", "Invalid review offsets, using defaults", request.review_offsets)
            )
            return ReviewOffsets.of(settings.schedule.review_offsets)

    def build_matrix(self, request: MatrixRequest) -> ScheduleMatrix:
        """Build the resolved matrix for a plan.

        Recoverable input problems are reported in ScheduleMatrix.warnings;
        the result is always a valid, possibly empty, matrix.
        """
        with monitoring.matrix_build_duration.time():
            warnings: List[ValidationWarning] = []
            offsets = self._offsets_for(request, warnings)

            pacing = calculate_pacing(request.total_words, request.words_per_day, offsets)
            warnings.extend(pacing.warnings)

            capacity = derive_capacity(
                pacing.units_count,
                estimated_unit_count=request.estimated_unit_count,
                max_actual_unit_number=request.max_actual_unit_number,
                has_unused_lists=request.has_unused_lists,
                learning_units=request.learning_units,
            )
            units_count = capacity.units_count_for_structure
            total_days = schedule_horizon(units_count, offsets)
            display_days = max(request.minimum_display_days or 0, total_days)

            schedule = build_schedule(units_count, offsets, display_days)
            rows = resolve_completion(
                schedule, request.learning_units, offsets, self.infer_lower_rounds
            )
            rows = apply_capacity(rows, capacity)

        monitoring.matrices_built.inc()
        logger.info(
            f"Built matrix: {units_count} units, {total_days} days, "
            f"{len(rows)} rows, {len(warnings)} warnings"
        )
        return ScheduleMatrix(
            rows=tuple(rows),
            total_days=total_days,
            units_count=units_count,
            display_days=display_days,
            offsets=offsets,
            capacity=capacity,
            warnings=tuple(warnings),
        )

    def select_cell(
        self,
        matrix: ScheduleMatrix,
        day: int,
        column: int,
        learning_units: Iterable[LearningUnitRecord] = (),
    ) -> Optional[CellSelection]:
        """Resolve a click on a cell.

        Returns None for empty, unused or out-of-range cells; those clicks
        must not reach the store. A unit without a stored record yields a
        placeholder selection.
        """
        cell = matrix.cell_at(day, column)
        if cell is None:
            return None
        if not is_selectable(cell, matrix.capacity):
            logger.debug(f"Ignoring click on unit {cell.unit_number} (day {day}, column {column})")
            return None

        unit = next((u for u in learning_units if u.unit_number == cell.unit_number), None)
        return CellSelection(
            unit_number=cell.unit_number,
            kind=cell.kind,
            review_order=cell.review_order,
            unit=unit,
        )

    def agenda_for_day(self, matrix: ScheduleMatrix, day: int) -> DayAgenda:
        """Tasks of one day: the unit to learn and the units to review."""
        row = matrix.row(day)
        if row is None:
            return DayAgenda(day=day)
        new_cell = next((cell for cell in row.cells if cell.kind is CellKind.NEW), None)
        reviews = tuple(cell for cell in row.cells if cell.kind is CellKind.REVIEW)
        return DayAgenda(day=day, new_cell=new_cell, review_cells=reviews)

    def agenda_for_date(self, matrix: ScheduleMatrix, start_date: date, today: Optional[date] = None) -> DayAgenda:
        """Tasks for a calendar date of a plan starting on start_date."""
        return self.agenda_for_day(matrix, plan_day_number(start_date, today))

    @staticmethod
    def plan_progress(learning_units: Sequence[LearningUnitRecord], capacity: PlanCapacity) -> PlanProgress:
        """Count learned units against the planned total.

        Units without provisioned content never count as learned, matching
        their unused cells in the matrix.
        """
        units_count = capacity.units_count_for_structure
        learned = sum(
            1 for unit in learning_units
            if unit.is_learned
            and 1 <= unit.unit_number <= units_count
            and not is_unused(unit.unit_number, capacity)
        )
        return PlanProgress(total=units_count, learned=learned, remaining=units_count - learned)
