"""Tests for database models."""
from datetime import date

import pytest
from faker import Faker
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from vocabplan.models.models import LearningPlan, LearningUnit, UnitReview

fake = Faker()


@pytest.fixture
def plan(db: Session) -> LearningPlan:
    """Create a test plan."""
    plan = LearningPlan(
        name=fake.catch_phrase(),
        total_words=100,
        words_per_day=20,
        start_date=date(2024, 1, 1),
        review_offsets="1,2,4,7,15",
    )
    db.add(plan)
    db.commit()
    db.refresh(plan)
    return plan


def test_plan_creation(db: Session, plan: LearningPlan) -> None:
    """Test plan creation and defaults."""
    assert plan.id is not None
    assert plan.is_active is True
    assert plan.offsets == [1, 2, 4, 7, 15]
    assert plan.created_at is not None
    assert plan.units == []


def test_unit_and_review_creation(db: Session, plan: LearningPlan) -> None:
    """Test creating a unit with a review."""
    unit = LearningUnit(plan_id=plan.id, unit_number=1)
    db.add(unit)
    db.commit()
    review = UnitReview(unit_id=unit.id, review_order=1, review_date=date(2024, 1, 2))
    db.add(review)
    db.commit()
    db.refresh(unit)

    assert unit.is_learned is False
    assert unit.learned_at is None
    assert [r.review_order for r in unit.reviews] == [1]
    assert unit.reviews[0].is_completed is False
    assert unit.plan.id == plan.id


def test_unit_number_unique_per_plan(db: Session, plan: LearningPlan) -> None:
    db.add(LearningUnit(plan_id=plan.id, unit_number=1))
    db.commit()
    db.add(LearningUnit(plan_id=plan.id, unit_number=1))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_review_order_unique_per_unit(db: Session, plan: LearningPlan) -> None:
    unit = LearningUnit(plan_id=plan.id, unit_number=1)
    db.add(unit)
    db.commit()
    db.add(UnitReview(unit_id=unit.id, review_order=2))
    db.commit()
    db.add(UnitReview(unit_id=unit.id, review_order=2))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_units_ordered_by_number(db: Session, plan: LearningPlan) -> None:
    for number in (3, 1, 2):
        db.add(LearningUnit(plan_id=plan.id, unit_number=number))
    db.commit()
    db.refresh(plan)
    assert [unit.unit_number for unit in plan.units] == [1, 2, 3]


if __name__ == "__main__":
    pytest.main([__file__])
