"""Database models for learning plans."""
from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from vocabplan.models.base import Base, TimestampMixin


class LearningPlan(Base, TimestampMixin):
    """Learning plan model."""

    __tablename__ = "learning_plans"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    total_words = Column(Integer, nullable=False, default=0)
    words_per_day = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)
    review_offsets = Column(String, nullable=False)  # e.g., "1,2,4,7,15"
    is_active = Column(Boolean, default=True)

    # Relationships
    units = relationship(
        "LearningUnit",
        back_populates="plan",
        order_by="LearningUnit.unit_number",
        cascade="all, delete-orphan",
    )

    @property
    def offsets(self) -> list[int]:
        """Review offsets as a list of ints."""
        return [int(part) for part in self.review_offsets.split(",") if part.strip()]


class LearningUnit(Base, TimestampMixin):
    """One day's slice of a plan's vocabulary."""

    __tablename__ = "learning_units"
    __table_args__ = (UniqueConstraint("plan_id", "unit_number"),)

    id = Column(Integer, primary_key=True)
    plan_id = Column(Integer, ForeignKey("learning_plans.id"), nullable=False)
    unit_number = Column(Integer, nullable=False)  # 1-based
    start_word_order = Column(Integer)
    end_word_order = Column(Integer)
    expected_learn_date = Column(Date)
    is_learned = Column(Boolean, default=False)
    learned_at = Column(DateTime(timezone=True))

    # Relationships
    plan = relationship("LearningPlan", back_populates="units")
    reviews = relationship(
        "UnitReview",
        back_populates="unit",
        order_by="UnitReview.review_order",
        cascade="all, delete-orphan",
    )


class UnitReview(Base, TimestampMixin):
    """One review round of a learning unit."""

    __tablename__ = "unit_reviews"
    __table_args__ = (UniqueConstraint("unit_id", "review_order"),)

    id = Column(Integer, primary_key=True)
    unit_id = Column(Integer, ForeignKey("learning_units.id"), nullable=False)
    review_order = Column(Integer, nullable=False)  # 1-based round number
    review_date = Column(Date)
    is_completed = Column(Boolean, default=False)
    completed_at = Column(DateTime(timezone=True))

    # Relationships
    unit = relationship("LearningUnit", back_populates="reviews")
