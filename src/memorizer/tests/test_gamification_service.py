"""Tests for gamification persistence."""
from datetime import date, timedelta

import pytest
from sqlalchemy.orm import Session

from memorizer.models.models import CompletedDay, Gamification
from memorizer.models.srs_models import GamificationState
from memorizer.services.gamification_service import GamificationService


@pytest.fixture
def gamification_service(db: Session) -> GamificationService:
    return GamificationService(db)


def test_load_empty_state(gamification_service: GamificationService, db: Session, today: date) -> None:
    state = gamification_service.load(today)

    assert state == GamificationState()
    assert db.query(Gamification).count() == 1


def test_save_and_load(gamification_service: GamificationService, db: Session, today: date) -> None:
    yesterday = today - timedelta(days=1)
    state = GamificationState(current_streak=2, last_completion_date=today, completed_dates=(yesterday, today))

    gamification_service.save(state)
    gamification_service.save(state)

    assert gamification_service.load(today) == state
    assert db.query(CompletedDay).count() == 2


def test_load_resets_broken_streak(gamification_service: GamificationService, db: Session, today: date) -> None:
    old = today - timedelta(days=2)
    gamification_service.save(GamificationState(current_streak=6, last_completion_date=old, completed_dates=(old,)))

    state = gamification_service.load(today)

    assert state.current_streak == 0
    assert state.completed_dates == (old,)
    assert db.query(Gamification).one().current_streak == 0


def test_load_keeps_streak_from_yesterday(gamification_service: GamificationService, today: date) -> None:
    yesterday = today - timedelta(days=1)
    gamification_service.save(
        GamificationState(current_streak=3, last_completion_date=yesterday, completed_dates=(yesterday,))
    )

    assert gamification_service.load(today).current_streak == 3
