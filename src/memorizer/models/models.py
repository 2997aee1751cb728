"""Database models for the memorizer."""
from sqlalchemy import (
    Column,
    Date,
    Float,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import relationship

from memorizer.config import SRS_INITIAL_EASE_FACTOR
from memorizer.models.base import Base, TimestampMixin


class Word(Base, TimestampMixin):
    """Word pair with its scheduling state."""

    __tablename__ = "words"

    id = Column(String(36), primary_key=True)
    foreign_word = Column(String, nullable=False)
    # Trimmed, casefolded foreign word used for duplicate detection
    normalized_word = Column(String, nullable=False, unique=True, index=True)
    translation = Column(String, nullable=False)
    phonetic_transcription = Column(String, nullable=True)
    personal_note = Column(String, nullable=False, default="")

    # SRS fields
    due_date = Column(Date, nullable=False, index=True)
    interval_days = Column(Integer, nullable=False, default=0)
    ease_factor = Column(Float, nullable=False, default=SRS_INITIAL_EASE_FACTOR)
    repetitions = Column(Integer, nullable=False, default=0)
    last_reviewed_date = Column(Date, nullable=True)
    mastery_level = Column(Integer, nullable=False, default=0)


class Gamification(Base, TimestampMixin):
    """Daily goal streak state. A single row holds the state of the word bank."""

    __tablename__ = "gamification"

    id = Column(Integer, primary_key=True)
    current_streak = Column(Integer, nullable=False, default=0)
    last_completion_date = Column(Date, nullable=True)

    # Relationships
    completed_days = relationship(
        "CompletedDay",
        back_populates="gamification",
        order_by="CompletedDay.day",
        cascade="all, delete-orphan",
    )


class CompletedDay(Base):
    """A calendar day on which the daily goal was completed."""

    __tablename__ = "completed_days"

    id = Column(Integer, primary_key=True)
    gamification_id = Column(Integer, ForeignKey("gamification.id"), nullable=False)
    day = Column(Date, nullable=False, unique=True)

    # Relationships
    gamification = relationship("Gamification", back_populates="completed_days")
