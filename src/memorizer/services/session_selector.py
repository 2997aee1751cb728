"""Selection of the words reviewed in a learning session."""
import logging
import random
from datetime import date
from typing import List, Optional, Sequence

from memorizer.config import settings
from memorizer.models.srs_models import WordRecord

logger = logging.getLogger(__name__)

# Words with at most this many repetitions may pad a short session
FILLER_MAX_REPETITIONS = 1


def is_due(record: WordRecord, today: date) -> bool:
    return record.due_date <= today


def _last_reviewed_key(record: WordRecord):
    # Never reviewed words come first
    if record.last_reviewed_date is None:
        return (0, date.min)
    return (1, record.last_reviewed_date)


def select_review_batch(
    records: Sequence[WordRecord],
    today: date,
    capacity: Optional[int] = None,
) -> List[WordRecord]:
    """Choose the ordered batch of words for a learning session.

    Overdue words come first, oldest due date first and less practiced words
    first on a tie. When fewer than ``capacity`` words are due, the batch is
    padded with new or barely started words that are not yet due.
    """
    if capacity is None:
        capacity = settings.srs.words_per_session
    if capacity <= 0:
        return []

    due_words = sorted(
        (record for record in records if is_due(record, today)),
        key=lambda record: (record.due_date, record.repetitions),
    )

    batch = due_words
    if len(due_words) < capacity:
        filler = sorted(
            (
                record
                for record in records
                if not is_due(record, today) and record.repetitions <= FILLER_MAX_REPETITIONS
            ),
            key=_last_reviewed_key,
        )
        batch = due_words + filler[:capacity - len(due_words)]

    batch = batch[:capacity]
    logger.info(f"Selected {len(batch)} words for review ({len(due_words)} due, capacity {capacity})")
    return batch


def count_due(records: Sequence[WordRecord], today: date) -> int:
    """Count the words due for review on ``today``."""
    return sum(1 for record in records if is_due(record, today))


def pick_hardcore_word(
    records: Sequence[WordRecord],
    rng: Optional[random.Random] = None,
) -> Optional[WordRecord]:
    """Pick a random word for the hardcore learning mode."""
    if not records:
        return None
    rng = rng or random
    return rng.choice(list(records))
