"""Service for persisting daily goal streak state."""
import logging
from datetime import date

from sqlalchemy.orm import Session

from memorizer.models.models import CompletedDay, Gamification
from memorizer.models.srs_models import GamificationState
from memorizer.services.streak_tracker import refresh_streak

logger = logging.getLogger(__name__)


class GamificationService:
    """Service for loading and saving the streak state."""

    def __init__(self, db: Session):
        """Initialize the service with a database session."""
        self.db = db

    def _get_row(self) -> Gamification:
        row = self.db.query(Gamification).order_by(Gamification.id).first()
        if row is None:
            row = Gamification(current_streak=0, last_completion_date=None)
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        return row

    def load(self, today: date) -> GamificationState:
        """Load the state, dropping a streak that was broken since the last run."""
        row = self._get_row()
        state = GamificationState(
            current_streak=row.current_streak or 0,
            last_completion_date=row.last_completion_date,
            completed_dates=tuple(sorted({day.day for day in row.completed_days})),
        )
        refreshed = refresh_streak(state, today)
        if refreshed != state:
            self.save(refreshed)
        return refreshed

    def save(self, state: GamificationState) -> None:
        """Persist the state."""
        row = self._get_row()
        row.current_streak = state.current_streak
        row.last_completion_date = state.last_completion_date

        stored = {day.day for day in row.completed_days}
        for day in state.completed_dates:
            if day not in stored:
                row.completed_days.append(CompletedDay(day=day))
        self.db.commit()
        logger.debug(
            f"Gamification saved: streak={state.current_streak} "
            f"last={state.last_completion_date} days={len(state.completed_dates)}"
        )
