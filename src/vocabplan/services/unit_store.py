"""Store for learning plans, units and review rounds."""
import logging
from datetime import UTC, date, datetime, timedelta
from typing import List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from vocabplan import monitoring
from vocabplan.config import settings
from vocabplan.models.models import LearningPlan, LearningUnit, UnitReview
from vocabplan.models.schedule_models import (
    LearningUnitRecord,
    MatrixRequest,
    ReviewOffsets,
    UnitReviewRecord,
)
from vocabplan.services.pacing_service import calculate_pacing

logger = logging.getLogger(__name__)


class LearningUnitStore:
    """Persists plans, units and reviews, and hands snapshots to the scheduler.

    Mutations are idempotent: marking something that is already complete is a
    no-op. Every mutation commits and refreshes on the caller's session, so a
    read that follows a write on the same store sees it.
    """

    def __init__(self, db: Session):
        """Initialize the store with a database session."""
        self.db = db

    def _commit(self, operation: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Store operation {operation} failed: {e}")
            monitoring.store_errors.labels(error_type=type(e).__name__).inc()
            raise
        monitoring.store_operations.labels(operation_type=operation).inc()

    def create_plan(
        self,
        name: str,
        total_words: int,
        words_per_day: int,
        start_date: Optional[date] = None,
        review_offsets: Optional[Sequence[int]] = None,
    ) -> LearningPlan:
        """Create a new learning plan."""
        if total_words < 0:
            raise ValueError("total_words cannot be negative")
        if words_per_day < 1:
            raise ValueError("words_per_day must be positive")
        offsets = ReviewOffsets.of(
            review_offsets if review_offsets is not None else settings.schedule.review_offsets
        )

        plan = LearningPlan(
            name=name,
            total_words=total_words,
            words_per_day=words_per_day,
            start_date=start_date or date.today(),
            review_offsets=",".join(str(offset) for offset in offsets),
            is_active=True,
        )
        self.db.add(plan)
        self._commit("create_plan")
        self.db.refresh(plan)
        logger.info(f"Created plan {plan.id} ({name}): {total_words} words, {words_per_day}/day")
        return plan

    def get_plan(self, plan_id: int) -> LearningPlan:
        """Get a plan by its ID."""
        plan = self.db.query(LearningPlan).filter(LearningPlan.id == plan_id).first()
        if not plan:
            raise ValueError(f"Plan {plan_id} not found")
        return plan

    def get_unit(self, unit_id: int) -> LearningUnit:
        """Get a learning unit by its ID."""
        unit = self.db.query(LearningUnit).filter(LearningUnit.id == unit_id).first()
        if not unit:
            raise ValueError(f"Unit {unit_id} not found")
        return unit

    def get_unit_by_number(self, plan_id: int, unit_number: int) -> Optional[LearningUnit]:
        """Get a plan's unit by its 1-based number."""
        return (
            self.db.query(LearningUnit)
            .filter(
                LearningUnit.plan_id == plan_id,
                LearningUnit.unit_number == unit_number,
            )
            .first()
        )

    def provision_units(self, plan_id: int, available_words: Optional[int] = None) -> List[LearningUnit]:
        """Create units for every daily slice that has words behind it.

        available_words caps the provisioned content, e.g. for a book that is
        only partly imported. Existing units are left untouched.
        """
        plan = self.get_plan(plan_id)
        words = plan.total_words if available_words is None else min(available_words, plan.total_words)
        pacing = calculate_pacing(words, plan.words_per_day, plan.offsets)

        existing = {unit.unit_number for unit in plan.units}
        created = []
        for unit_number in range(1, pacing.units_count + 1):
            if unit_number in existing:
                continue
            unit = LearningUnit(
                plan_id=plan.id,
                unit_number=unit_number,
                start_word_order=(unit_number - 1) * plan.words_per_day + 1,
                end_word_order=min(unit_number * plan.words_per_day, words),
                expected_learn_date=plan.start_date + timedelta(days=unit_number - 1),
                is_learned=False,
            )
            created.append(unit)

        if created:
            self.db.add_all(created)
            self._commit("provision_units")
            logger.info(f"Provisioned {len(created)} units for plan {plan_id}")
        self.db.refresh(plan)
        return list(plan.units)

    def max_actual_unit_number(self, plan_id: int) -> int:
        """Highest unit number with provisioned content."""
        result = (
            self.db.query(func.max(LearningUnit.unit_number))
            .filter(LearningUnit.plan_id == plan_id)
            .scalar()
        )
        return result or 0

    def get_learning_units(self, plan_id: int) -> List[LearningUnitRecord]:
        """Snapshot of a plan's units for the scheduler.

        Reviews whose round is outside the plan's offsets are dropped here and
        logged as a data-quality problem.
        """
        plan = self.get_plan(plan_id)
        offsets = ReviewOffsets.of(plan.offsets)

        records = []
        for unit in plan.units:
            reviews = []
            for review in unit.reviews:
                if not offsets.is_valid_round(review.review_order):
                    logger.warning(
                        f"Plan {plan_id} unit {unit.unit_number}: review {review.id} has "
                        f"order {review.review_order} outside 1..{len(offsets)}, ignoring"
                    )
                    continue
                reviews.append(
                    UnitReviewRecord(
                        review_order=review.review_order,
                        is_completed=bool(review.is_completed),
                        scheduled_date=review.review_date,
                        completed_at=review.completed_at,
                        review_id=review.id,
                    )
                )
            records.append(
                LearningUnitRecord(
                    unit_number=unit.unit_number,
                    is_learned=bool(unit.is_learned),
                    learned_at=unit.learned_at,
                    reviews=tuple(reviews),
                    unit_id=unit.id,
                )
            )
        return records

    def get_matrix_request(self, plan_id: int, minimum_display_days: int = 0) -> MatrixRequest:
        """Collect everything the scheduler needs for a plan's matrix."""
        plan = self.get_plan(plan_id)
        estimated = calculate_pacing(plan.total_words, plan.words_per_day, plan.offsets).units_count
        max_actual = self.max_actual_unit_number(plan_id)
        return MatrixRequest(
            total_words=plan.total_words,
            words_per_day=plan.words_per_day,
            review_offsets=plan.offsets,
            estimated_unit_count=estimated,
            max_actual_unit_number=max_actual,
            has_unused_lists=estimated > max_actual,
            learning_units=self.get_learning_units(plan_id),
            minimum_display_days=minimum_display_days,
        )

    def mark_unit_learned(self, unit_id: int) -> LearningUnit:
        """Mark a unit as learned. Marking a learned unit again changes nothing."""
        unit = self.get_unit(unit_id)
        if unit.is_learned:
            logger.debug(f"Unit {unit_id} already learned")
            return unit

        unit.is_learned = True
        unit.learned_at = datetime.now(UTC)
        self._commit("mark_unit_learned")
        self.db.refresh(unit)
        logger.info(f"Unit {unit.unit_number} of plan {unit.plan_id} marked learned")
        return unit

    def _review_date(self, unit: LearningUnit, offset: int) -> Optional[date]:
        if unit.learned_at is not None:
            base = unit.learned_at.date()
        else:
            base = unit.expected_learn_date
        return base + timedelta(days=offset) if base else None

    def _ensure_reviews(
        self,
        unit_id: int,
        review_order: int,
        complete: bool,
        operation: str,
        retry: bool = True,
    ) -> UnitReview:
        """Make sure rounds 1..review_order exist, earlier rounds completed.

        Missing rounds are created and earlier rounds completed in a single
        commit. With complete, round review_order itself is completed too.
        """
        unit = self.get_unit(unit_id)
        offsets = ReviewOffsets.of(unit.plan.offsets)
        if not offsets.is_valid_round(review_order):
            raise ValueError(f"Review order {review_order} outside 1..{len(offsets)}")

        stored = {review.review_order: review for review in unit.reviews}
        now = datetime.now(UTC)
        created = []
        completed = []
        for order in range(1, review_order + 1):
            review = stored.get(order)
            if review is None:
                review = UnitReview(
                    unit_id=unit.id,
                    review_order=order,
                    review_date=self._review_date(unit, offsets.offset_of(order)),
                    is_completed=False,
                )
                self.db.add(review)
                stored[order] = review
                created.append(order)
            if (order < review_order or complete) and not review.is_completed:
                review.is_completed = True
                review.completed_at = now
                completed.append(order)

        target = stored[review_order]
        if not created and not completed:
            logger.debug(f"Review {review_order} of unit {unit_id} unchanged")
            return target

        try:
            self._commit(operation)
        except IntegrityError:
            if not retry:
                raise
            # Rounds created concurrently; redo against the stored rows
            logger.info(f"Retrying {operation} for unit {unit_id} round {review_order}")
            return self._ensure_reviews(unit_id, review_order, complete, operation, retry=False)

        self.db.refresh(target)
        logger.info(f"Unit {unit_id}: created review rounds {created}, completed rounds {completed}")
        return target

    def get_or_create_review(self, unit_id: int, review_order: int) -> UnitReview:
        """Get a unit's review round, creating it on first use.

        Creating a round also creates and completes every earlier round.
        """
        return self._ensure_reviews(unit_id, review_order, complete=False, operation="create_review")

    def mark_review_completed(self, unit_id: int, review_order: int) -> UnitReview:
        """Complete a review round and every earlier round of the unit.

        Repeating the call is a no-op.
        """
        return self._ensure_reviews(
            unit_id, review_order, complete=True, operation="mark_review_completed"
        )
