"""Tests for database models."""
from datetime import date

import pytest
from faker import Faker
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from memorizer.models.models import CompletedDay, Gamification, Word
from memorizer.models.srs_models import new_word_id, normalize_word

fake = Faker()


def test_word_creation(db: Session, today: date) -> None:
    """Test word creation with column defaults."""
    text = fake.word()
    word = Word(
        id=new_word_id(),
        foreign_word=text,
        normalized_word=normalize_word(text),
        translation=fake.word(),
        due_date=today,
    )
    db.add(word)
    db.commit()
    db.refresh(word)

    assert word.interval_days == 0
    assert word.ease_factor == 2.5
    assert word.repetitions == 0
    assert word.mastery_level == 0
    assert word.personal_note == ""
    assert word.last_reviewed_date is None
    assert word.created_at is not None


def test_normalized_word_is_unique(db: Session, today: date) -> None:
    for text in ("Hello", "hello "):
        db.add(Word(
            id=new_word_id(),
            foreign_word=text,
            normalized_word=normalize_word(text),
            translation="привет",
            due_date=today,
        ))

    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_completed_days_relationship(db: Session) -> None:
    row = Gamification(current_streak=1, last_completion_date=date(2024, 3, 2))
    row.completed_days.append(CompletedDay(day=date(2024, 3, 2)))
    row.completed_days.append(CompletedDay(day=date(2024, 3, 1)))
    db.add(row)
    db.commit()
    db.refresh(row)

    assert [d.day for d in row.completed_days] == [date(2024, 3, 1), date(2024, 3, 2)]
    assert row.completed_days[0].gamification is row
