"""Spaced repetition scheduler.

A simplified SM-2 curve: the first two correct answers use fixed intervals,
later ones grow the interval by the word's ease factor. A wrong answer sends
the word back to a one-day retry and lowers its ease factor, never below the
configured floor.
"""
import logging
import math
from dataclasses import replace
from datetime import date, timedelta
from typing import Optional

from memorizer.config import SRSSettings, settings
from memorizer.models.srs_models import WordRecord

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


def next_interval(repetitions: int, interval_days: int, ease_factor: float, srs: SRSSettings) -> int:
    """Interval after a correct answer, given the already incremented repetition count.

    The result never exceeds ``srs.max_interval_days``.
    """
    if repetitions == 1:
        interval = srs.interval_after_first
    elif repetitions == 2:
        interval = srs.interval_after_second
    else:
        grown = min(interval_days, srs.max_interval_days) * ease_factor
        if grown >= srs.max_interval_days:
            return srs.max_interval_days
        interval = max(1, round_half_up(grown))
    return min(interval, srs.max_interval_days)


def review_word(
    record: WordRecord,
    is_correct: bool,
    today: date,
    srs: Optional[SRSSettings] = None,
) -> WordRecord:
    """Return the record rescheduled after a review on ``today``.

    The input record is left untouched.
    """
    srs = srs or settings.srs

    if is_correct:
        repetitions = record.repetitions + 1
        mastery_level = record.mastery_level + 1
        interval_days = next_interval(repetitions, record.interval_days, record.ease_factor, srs)
        ease_factor = record.ease_factor
    else:
        repetitions = 0
        mastery_level = record.mastery_level
        interval_days = 1
        ease_factor = max(srs.min_ease_factor, record.ease_factor - srs.ease_penalty)

    # Keep the due date representable
    interval_days = min(interval_days, (date.max - today).days)

    updated = replace(
        record,
        repetitions=repetitions,
        mastery_level=mastery_level,
        interval_days=interval_days,
        ease_factor=ease_factor,
        due_date=today + timedelta(days=interval_days),
        last_reviewed_date=today,
    )
    logger.debug(
        f"Reviewed {record.id} ({'correct' if is_correct else 'wrong'}): "
        f"reps={updated.repetitions} interval={updated.interval_days} "
        f"ease={updated.ease_factor:.2f} due={updated.due_date.isoformat()}"
    )
    return updated


def is_mastered(record: WordRecord, srs: Optional[SRSSettings] = None) -> bool:
    """Whether the word has a long enough streak and interval to count as learned."""
    srs = srs or settings.srs
    return (
        record.repetitions >= srs.mastered_repetitions
        and record.interval_days >= srs.mastered_interval_days
    )
