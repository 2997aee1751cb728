"""Models for scheduling-related data structures."""
import uuid
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional, Tuple

from memorizer.config import SRS_INITIAL_EASE_FACTOR


class AppMode(Enum):
    """Application modes. Only the learning modes open a review session."""
    MANAGE_WORDS = "MANAGE_WORDS"
    LEARN = "LEARN"
    WORD_HUNTING = "WORD_HUNTING"
    HARDCORE_LEARN = "HARDCORE_LEARN"
    SETTINGS = "SETTINGS"


class LearningGameMode(Enum):
    """Quiz variants used to review a batch."""
    CLASSIC_QUIZ = "CLASSIC_QUIZ"  # Foreign -> translation
    MATCH_MEANING = "MATCH_MEANING"  # Given foreign, choose translation
    MATCH_FOREIGN_FROM_TRANSLATION = "MATCH_FOREIGN_FROM_TRANSLATION"  # Given translation, choose foreign


def normalize_word(text: str) -> str:
    """Return the key used to compare foreign words for uniqueness."""
    return text.strip().casefold()


def new_word_id() -> str:
    """Generate a new stable word identifier."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class WordRecord:
    """Immutable snapshot of a word and its scheduling state."""
    id: str
    foreign_word: str
    translation: str
    due_date: date
    phonetic_transcription: Optional[str] = None
    personal_note: str = ""
    interval_days: int = 0
    ease_factor: float = SRS_INITIAL_EASE_FACTOR
    repetitions: int = 0
    last_reviewed_date: Optional[date] = None
    mastery_level: int = 0

    @classmethod
    def new(
        cls,
        foreign_word: str,
        translation: str,
        today: date,
        phonetic_transcription: Optional[str] = None,
        personal_note: str = "",
        initial_ease_factor: float = SRS_INITIAL_EASE_FACTOR,
        word_id: Optional[str] = None,
    ) -> "WordRecord":
        """Create a never-reviewed word that is due today."""
        return cls(
            id=word_id or new_word_id(),
            foreign_word=foreign_word.strip(),
            translation=translation.strip(),
            phonetic_transcription=phonetic_transcription,
            personal_note=personal_note or "",
            due_date=today,
            interval_days=0,
            ease_factor=initial_ease_factor,
            repetitions=0,
            last_reviewed_date=None,
            mastery_level=0,
        )

    @property
    def normalized_key(self) -> str:
        return normalize_word(self.foreign_word)


@dataclass(frozen=True)
class GamificationState:
    """Daily goal streak state."""
    current_streak: int = 0
    last_completion_date: Optional[date] = None
    completed_dates: Tuple[date, ...] = ()


@dataclass(frozen=True)
class ReviewOutcome:
    """Result of a single review event."""
    record: WordRecord
    is_correct: bool
    counted_for_goal: bool
    goal_completed_now: bool
    gamification: GamificationState


@dataclass
class ImportResult:
    """Counts of an import merge."""
    accepted: int = 0
    skipped: int = 0
    records: List[WordRecord] = field(default_factory=list)
