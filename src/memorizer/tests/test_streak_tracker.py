"""Tests for daily goal and streak tracking."""
from datetime import date, timedelta

import pytest

from memorizer.models.srs_models import GamificationState
from memorizer.services.streak_tracker import (
    StreakTracker,
    complete_daily_goal,
    is_yesterday,
    refresh_streak,
)


def test_is_yesterday_across_month_and_year() -> None:
    assert is_yesterday(date(2024, 2, 29), date(2024, 3, 1))
    assert is_yesterday(date(2023, 12, 31), date(2024, 1, 1))
    assert not is_yesterday(date(2024, 3, 1), date(2024, 3, 1))
    assert not is_yesterday(None, date(2024, 3, 1))


def test_first_completion_starts_streak(today: date) -> None:
    state = complete_daily_goal(GamificationState(), today)

    assert state.current_streak == 1
    assert state.last_completion_date == today
    assert state.completed_dates == (today,)


def test_completion_after_yesterday_extends_streak(today: date) -> None:
    yesterday = today - timedelta(days=1)
    state = GamificationState(current_streak=4, last_completion_date=yesterday, completed_dates=(yesterday,))

    state = complete_daily_goal(state, today)

    assert state.current_streak == 5
    assert state.completed_dates == (yesterday, today)


def test_completion_after_gap_resets_to_one(today: date) -> None:
    old = today - timedelta(days=3)
    state = GamificationState(current_streak=7, last_completion_date=old, completed_dates=(old,))

    assert complete_daily_goal(state, today).current_streak == 1


def test_completion_is_idempotent_per_day(today: date) -> None:
    once = complete_daily_goal(GamificationState(), today)
    twice = complete_daily_goal(once, today)

    assert twice == once
    assert twice.completed_dates.count(today) == 1


def test_same_day_last_completion_keeps_streak(today: date) -> None:
    """A state whose last completion is today but the date list lost it."""
    state = GamificationState(current_streak=3, last_completion_date=today, completed_dates=())

    assert complete_daily_goal(state, today).current_streak == 3


@pytest.mark.parametrize(
    "days_ago, expected",
    [(0, 4), (1, 4), (2, 0), (30, 0)],
)
def test_refresh_streak(today: date, days_ago: int, expected: int) -> None:
    last = today - timedelta(days=days_ago)
    state = GamificationState(current_streak=4, last_completion_date=last, completed_dates=(last,))

    refreshed = refresh_streak(state, today)

    assert refreshed.current_streak == expected
    assert refreshed.completed_dates == state.completed_dates


def test_refresh_streak_without_history(today: date) -> None:
    assert refresh_streak(GamificationState(), today) == GamificationState()


def test_tracker_counts_each_word_once(today: date) -> None:
    tracker = StreakTracker(GamificationState(), daily_goal=3)
    tracker.start_session(today)

    assert tracker.on_correct_review("a", today) is True
    assert tracker.on_correct_review("a", today) is False
    assert tracker.words_corrected_today == 1
    assert not tracker.goal_met


def test_tracker_completes_goal(today: date) -> None:
    tracker = StreakTracker(GamificationState(), daily_goal=3)
    tracker.start_session(today)

    for word_id in ("a", "b", "c"):
        tracker.on_correct_review(word_id, today)

    assert tracker.goal_met
    assert tracker.state.current_streak == 1
    assert tracker.state.completed_dates == (today,)

    tracker.on_correct_review("d", today)
    assert tracker.state.current_streak == 1
    assert tracker.state.completed_dates == (today,)


def test_tracker_session_prefilled_when_goal_done_today(today: date) -> None:
    state = GamificationState(current_streak=2, last_completion_date=today, completed_dates=(today,))
    tracker = StreakTracker(state, daily_goal=5)

    tracker.start_session(today)

    assert tracker.goal_met
    assert tracker.words_corrected_today == 5

    tracker.on_correct_review("a", today)
    assert tracker.state.current_streak == 2
    assert tracker.state.completed_dates == (today,)


def test_new_session_forgets_counted_words(today: date) -> None:
    tracker = StreakTracker(GamificationState(), daily_goal=5)
    tracker.start_session(today)
    tracker.on_correct_review("a", today)
    tracker.end_session()

    tracker.start_session(today)

    assert tracker.words_corrected_today == 0
    assert tracker.on_correct_review("a", today) is True
