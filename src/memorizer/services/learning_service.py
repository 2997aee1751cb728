"""Learning service for running review sessions."""
import logging
import random
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from memorizer import monitoring
from memorizer.config import Settings, settings as default_settings
from memorizer.models.srs_models import AppMode, GamificationState, ReviewOutcome, WordRecord
from memorizer.services.gamification_service import GamificationService
from memorizer.services.scheduler import is_mastered, review_word
from memorizer.services.session_selector import count_due, pick_hardcore_word, select_review_batch
from memorizer.services.streak_tracker import StreakTracker
from memorizer.services.word_service import WordService

logger = logging.getLogger(__name__)

LEARNING_MODES = (AppMode.LEARN, AppMode.HARDCORE_LEARN)


class LearningService:
    """Service for running learning sessions over an in-memory snapshot.

    The snapshot is loaded once and stays authoritative: every change is
    written through to the database, but a failed write does not undo it.
    """

    def __init__(
        self,
        db: Session,
        today: date,
        settings: Optional[Settings] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the service and load the word bank and streak state."""
        self.db = db
        self.settings = settings or default_settings
        self.rng = rng or random.Random()
        self.word_service = WordService(db, self.settings.srs)
        self.gamification_service = GamificationService(db)

        self.records: Dict[str, WordRecord] = {
            record.id: record for record in self.word_service.list_records()
        }
        self.tracker = StreakTracker(
            self.gamification_service.load(today),
            self.settings.gamification.daily_goal,
        )
        self.mode = AppMode.MANAGE_WORDS
        self.review_batch: List[WordRecord] = []
        self.current_hardcore_word: Optional[WordRecord] = None
        monitoring.current_streak.set(self.tracker.state.current_streak)

    @property
    def gamification(self) -> GamificationState:
        return self.tracker.state

    def enter_mode(self, mode: AppMode, today: date, capacity: Optional[int] = None) -> List[WordRecord]:
        """Switch application mode; learning modes start a new session.

        Returns the review batch for LEARN, the picked word for HARDCORE_LEARN
        and an empty list otherwise.
        """
        self.exit_mode()
        self.mode = mode
        if mode not in LEARNING_MODES:
            return []

        self.tracker.start_session(today)
        if mode == AppMode.LEARN:
            self.review_batch = select_review_batch(
                list(self.records.values()),
                today,
                capacity if capacity is not None else self.settings.srs.words_per_session,
            )
            logger.info(f"Learning session started with {len(self.review_batch)} words")
            return list(self.review_batch)

        self._pick_hardcore_word()
        return [self.current_hardcore_word] if self.current_hardcore_word else []

    def exit_mode(self) -> None:
        """Leave the current mode and discard the session."""
        self.mode = AppMode.MANAGE_WORDS
        self.review_batch = []
        self.current_hardcore_word = None
        self.tracker.end_session()

    def review(self, word_id: str, is_correct: bool, today: date) -> ReviewOutcome:
        """Apply a review outcome and update the daily goal state."""
        record = self.records.get(word_id)
        if record is None:
            raise ValueError(f"Word {word_id} not found")

        updated = review_word(record, is_correct, today, self.settings.srs)
        self.records[word_id] = updated
        self._persist_record(updated)
        monitoring.words_reviewed.labels(result="correct" if is_correct else "wrong").inc()

        counted = False
        goal_completed_now = False
        if is_correct:
            was_completed = today in self.tracker.state.completed_dates
            counted = self.tracker.on_correct_review(word_id, today)
            goal_completed_now = not was_completed and today in self.tracker.state.completed_dates
            if goal_completed_now:
                monitoring.daily_goals_completed.inc()
                monitoring.current_streak.set(self.tracker.state.current_streak)
                self._persist_gamification(self.tracker.state)

        return ReviewOutcome(
            record=updated,
            is_correct=is_correct,
            counted_for_goal=counted,
            goal_completed_now=goal_completed_now,
            gamification=self.tracker.state,
        )

    def complete_hardcore_word(self, today: date) -> Optional[WordRecord]:
        """Count the current hardcore word as learned and pick the next one."""
        if self.current_hardcore_word is not None:
            self.review(self.current_hardcore_word.id, True, today)
        return self._pick_hardcore_word()

    def add_word(self, foreign_word: str, translation: str, today: date, **kwargs: Any) -> Optional[WordRecord]:
        """Add a word to the bank and the snapshot."""
        record = self.word_service.add_word(foreign_word, translation, today, **kwargs)
        if record is not None:
            records = sorted([*self.records.values(), record], key=lambda r: r.foreign_word.lower())
            self.records = {r.id: r for r in records}
        return record

    def progress(self, today: date) -> Dict[str, Any]:
        """Figures shown next to a learning session."""
        records = list(self.records.values())
        return {
            "streak": self.tracker.state.current_streak,
            "completed_dates": list(self.tracker.state.completed_dates),
            "daily_goal": self.tracker.daily_goal,
            "words_corrected_today": self.tracker.words_corrected_today,
            "goal_met": self.tracker.goal_met,
            "words_due": count_due(records, today),
            "words_mastered": sum(1 for record in records if is_mastered(record, self.settings.srs)),
            "total_words": len(records),
        }

    def _pick_hardcore_word(self) -> Optional[WordRecord]:
        self.current_hardcore_word = pick_hardcore_word(list(self.records.values()), self.rng)
        return self.current_hardcore_word

    def _persist_record(self, record: WordRecord) -> None:
        try:
            self.word_service.save_record(record)
        except SQLAlchemyError as e:
            self.db.rollback()
            monitoring.db_errors.labels(error_type=type(e).__name__).inc()
            logger.error(f"Failed to save word {record.id}: {e}")

    def _persist_gamification(self, state: GamificationState) -> None:
        try:
            self.gamification_service.save(state)
        except SQLAlchemyError as e:
            self.db.rollback()
            monitoring.db_errors.labels(error_type=type(e).__name__).inc()
            logger.error(f"Failed to save gamification state: {e}")
