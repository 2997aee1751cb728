"""Daily goal and streak bookkeeping."""
import logging
from dataclasses import replace
from datetime import date, timedelta
from typing import Optional, Set

from memorizer.config import settings
from memorizer.models.srs_models import GamificationState

logger = logging.getLogger(__name__)


def is_yesterday(day: Optional[date], today: date) -> bool:
    return day is not None and day == today - timedelta(days=1)


def refresh_streak(state: GamificationState, today: date) -> GamificationState:
    """Drop a streak whose last completion is older than yesterday."""
    last = state.last_completion_date
    if last is not None and last != today and not is_yesterday(last, today):
        if state.current_streak:
            logger.info(f"Streak of {state.current_streak} days lost, last completion on {last}")
        return replace(state, current_streak=0)
    return state


def complete_daily_goal(state: GamificationState, today: date) -> GamificationState:
    """Record today's goal completion. Completing the same day twice is a no-op."""
    if today in state.completed_dates:
        return state

    if is_yesterday(state.last_completion_date, today):
        streak = state.current_streak + 1
    elif state.last_completion_date == today:
        streak = state.current_streak
    else:
        streak = 1

    completed_dates = tuple(sorted(set(state.completed_dates) | {today}))
    logger.info(f"Daily goal completed on {today}, streak is now {streak}")
    return GamificationState(
        current_streak=streak,
        last_completion_date=today,
        completed_dates=completed_dates,
    )


class StreakTracker:
    """Counts distinct correctly answered words per session against the daily goal."""

    def __init__(self, state: GamificationState, daily_goal: Optional[int] = None):
        """Initialize the tracker with the loaded gamification state."""
        self.state = state
        self.daily_goal = daily_goal if daily_goal is not None else settings.gamification.daily_goal
        self.words_corrected_today = 0
        self.goal_met = False
        self.session_word_ids: Set[str] = set()

    def start_session(self, today: date) -> None:
        """Reset the per-session counters when a learning mode is entered."""
        self.session_word_ids = set()
        if today in self.state.completed_dates:
            self.words_corrected_today = self.daily_goal
            self.goal_met = True
        else:
            self.words_corrected_today = 0
            self.goal_met = False
        logger.debug(
            f"Session started on {today}: {self.words_corrected_today}/{self.daily_goal}, "
            f"goal met: {self.goal_met}"
        )

    def end_session(self) -> None:
        """Discard the session's reviewed word ids."""
        self.session_word_ids = set()

    def on_correct_review(self, word_id: str, today: date) -> bool:
        """Count a correct answer toward today's goal.

        Returns True if the word was counted, False if it was already counted
        in this session.
        """
        if word_id in self.session_word_ids:
            return False

        self.session_word_ids.add(word_id)
        self.words_corrected_today += 1
        if self.words_corrected_today >= self.daily_goal and today not in self.state.completed_dates:
            self.state = complete_daily_goal(self.state, today)
            self.goal_met = True
        return True
