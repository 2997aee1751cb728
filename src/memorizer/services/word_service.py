"""Service for managing the word bank."""
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from memorizer import monitoring
from memorizer.config import SRSSettings, settings
from memorizer.models.models import Word
from memorizer.models.srs_models import ImportResult, WordRecord, normalize_word
from memorizer.services.record_codec import (
    default_export_name,
    dump_records,
    load_import_file,
    merge_import,
)

logger = logging.getLogger(__name__)


def to_record(word: Word) -> WordRecord:
    """Snapshot a database row."""
    return WordRecord(
        id=word.id,
        foreign_word=word.foreign_word,
        translation=word.translation,
        phonetic_transcription=word.phonetic_transcription,
        personal_note=word.personal_note or "",
        due_date=word.due_date,
        interval_days=word.interval_days,
        ease_factor=word.ease_factor,
        repetitions=word.repetitions,
        last_reviewed_date=word.last_reviewed_date,
        mastery_level=word.mastery_level,
    )


def apply_record(word: Word, record: WordRecord) -> Word:
    """Copy a snapshot onto a database row."""
    word.foreign_word = record.foreign_word
    word.normalized_word = record.normalized_key
    word.translation = record.translation
    word.phonetic_transcription = record.phonetic_transcription
    word.personal_note = record.personal_note
    word.due_date = record.due_date
    word.interval_days = record.interval_days
    word.ease_factor = record.ease_factor
    word.repetitions = record.repetitions
    word.last_reviewed_date = record.last_reviewed_date
    word.mastery_level = record.mastery_level
    return word


class WordService:
    """Service for managing the word bank."""

    def __init__(self, db: Session, srs: Optional[SRSSettings] = None):
        """Initialize the service with a database session."""
        self.db = db
        self.srs = srs or settings.srs

    def get_word(self, word_id: str) -> Optional[Word]:
        """Get a word by its ID."""
        return self.db.query(Word).filter(Word.id == word_id).first()

    def get_record(self, word_id: str) -> Optional[WordRecord]:
        """Get the snapshot of a word by its ID."""
        word = self.get_word(word_id)
        return to_record(word) if word else None

    def get_word_by_text(self, text: str) -> Optional[Word]:
        """Get a word by its foreign text, ignoring case and surrounding spaces."""
        return self.db.query(Word).filter(Word.normalized_word == normalize_word(text)).first()

    def list_records(self) -> List[WordRecord]:
        """All words, alphabetically by foreign word."""
        words = (
            self.db.query(Word)
            .order_by(func.lower(Word.foreign_word), Word.foreign_word)
            .all()
        )
        return [to_record(word) for word in words]

    def get_word_count(self) -> int:
        """Get the count of words in the word bank."""
        return self.db.query(Word).count()

    def add_word(
        self,
        foreign_word: str,
        translation: str,
        today: date,
        phonetic_transcription: Optional[str] = None,
        personal_note: str = "",
    ) -> Optional[WordRecord]:
        """Add a new word due today.

        Returns None when the word is rejected: blank input or a foreign word
        that is already in the bank.
        """
        if not foreign_word.strip() or not translation.strip():
            logger.info("Rejected word with empty text or translation")
            return None
        if self.get_word_by_text(foreign_word):
            logger.info(f"Rejected duplicate word: {foreign_word.strip()}")
            return None

        record = WordRecord.new(
            foreign_word,
            translation,
            today,
            phonetic_transcription=phonetic_transcription,
            personal_note=personal_note,
            initial_ease_factor=self.srs.initial_ease_factor,
        )
        self.db.add(apply_record(Word(id=record.id), record))
        self.db.commit()
        monitoring.words_added.inc()
        logger.info(f"Word added: {record.foreign_word} ({record.id})")
        return record

    def save_record(self, record: WordRecord) -> WordRecord:
        """Persist a snapshot, inserting the word if it is not stored yet."""
        word = self.get_word(record.id)
        if word is None:
            word = Word(id=record.id)
            self.db.add(word)
        apply_record(word, record)
        self.db.commit()
        return record

    def update_note(self, word_id: str, note: str) -> Optional[WordRecord]:
        """Update the personal note of a word."""
        word = self.get_word(word_id)
        if not word:
            return None

        word.personal_note = note
        self.db.commit()
        self.db.refresh(word)
        return to_record(word)

    def delete_word(self, word_id: str) -> bool:
        """Delete a word."""
        word = self.get_word(word_id)
        if not word:
            return False

        self.db.delete(word)
        self.db.commit()
        logger.info(f"Word deleted: {word_id}")
        return True

    def search_words(self, query: str, limit: int = 10) -> List[WordRecord]:
        """Search for words by foreign text or translation."""
        words = (
            self.db.query(Word)
            .filter(
                Word.foreign_word.ilike(f"%{query}%")
                | Word.translation.ilike(f"%{query}%")
            )
            .order_by(func.lower(Word.foreign_word))
            .limit(limit)
            .all()
        )
        return [to_record(word) for word in words]

    def import_words(self, rows: Iterable[Dict[str, Any]], today: date) -> ImportResult:
        """Merge imported entries into the bank, skipping known foreign words."""
        result = merge_import(self.list_records(), rows, today, self.srs)
        for record in result.records:
            self.db.add(apply_record(Word(id=record.id), record))
        self.db.commit()

        monitoring.words_imported.labels(status="accepted").inc(result.accepted)
        monitoring.words_imported.labels(status="skipped").inc(result.skipped)
        logger.info(f"Import finished. Added: {result.accepted}, skipped: {result.skipped}")
        return result

    def import_file(self, path: Path, today: date) -> ImportResult:
        """Import words from a .json or .jsonl file."""
        return self.import_words(load_import_file(path), today)

    def export_words(self, today: date, path: Optional[Path] = None) -> Path:
        """Write the whole bank to a JSON file and return its path."""
        if path is None:
            path = settings.paths.export_dir / default_export_name(today)
        records = self.list_records()
        dump_records(records, path)
        logger.info(f"Exported {len(records)} words to {path}")
        return path
