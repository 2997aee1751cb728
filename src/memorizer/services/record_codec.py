"""Conversion between JSON-shaped word records and WordRecord snapshots."""
import json
import logging
import math
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from memorizer.config import SRSSettings, settings
from memorizer.models.srs_models import ImportResult, WordRecord, new_word_id, normalize_word

logger = logging.getLogger(__name__)

# Key names written by the older app version
LEGACY_KEYS = {
    "translation": "russianTranslation",
    "dueDate": "srsDueDate",
    "intervalDays": "srsIntervalDays",
    "easeFactor": "srsEaseFactor",
    "repetitions": "srsRepetitions",
    "masteryLevel": "srsMasteryLevel",
}


def _get(raw: Dict[str, Any], key: str) -> Any:
    value = raw.get(key)
    if value is None and key in LEGACY_KEYS:
        value = raw.get(LEGACY_KEYS[key])
    return value


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            # Accept full ISO timestamps as well as plain dates
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def _non_negative_int(value: Any, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if value < 0 or (isinstance(value, float) and not math.isfinite(value)):
        return default
    return int(value)


def _ease_factor(value: Any, srs: SRSSettings) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return srs.initial_ease_factor
    try:
        ease = float(value)
    except OverflowError:
        return srs.initial_ease_factor
    if not math.isfinite(ease):
        return srs.initial_ease_factor
    return max(srs.min_ease_factor, ease)


def is_valid_candidate(raw: Any) -> bool:
    """Whether a raw entry has the fields a word cannot do without."""
    return (
        isinstance(raw, dict)
        and isinstance(raw.get("foreignWord"), str)
        and isinstance(_get(raw, "translation"), str)
        and bool(raw["foreignWord"].strip())
    )


def record_from_dict(raw: Dict[str, Any], today: date, srs: Optional[SRSSettings] = None) -> WordRecord:
    """Build a record from raw data, backfilling missing or corrupt SRS fields."""
    srs = srs or settings.srs
    word_id = raw.get("id")
    note = raw.get("personalNote")
    phonetic = raw.get("phoneticTranscription")
    return WordRecord(
        id=str(word_id) if word_id else new_word_id(),
        foreign_word=str(raw.get("foreignWord", "")).strip(),
        translation=str(_get(raw, "translation") or "").strip(),
        phonetic_transcription=phonetic if isinstance(phonetic, str) and phonetic else None,
        personal_note=note if isinstance(note, str) else "",
        due_date=_parse_date(_get(raw, "dueDate")) or today,
        interval_days=min(_non_negative_int(_get(raw, "intervalDays"), 0), srs.max_interval_days),
        ease_factor=_ease_factor(_get(raw, "easeFactor"), srs),
        repetitions=_non_negative_int(_get(raw, "repetitions"), 0),
        last_reviewed_date=_parse_date(raw.get("lastReviewedDate")),
        mastery_level=_non_negative_int(_get(raw, "masteryLevel"), 0),
    )


def record_to_dict(record: WordRecord) -> Dict[str, Any]:
    """Serializable form of a record."""
    return {
        "id": record.id,
        "foreignWord": record.foreign_word,
        "translation": record.translation,
        "phoneticTranscription": record.phonetic_transcription,
        "personalNote": record.personal_note,
        "dueDate": record.due_date.isoformat(),
        "intervalDays": record.interval_days,
        "easeFactor": record.ease_factor,
        "repetitions": record.repetitions,
        "lastReviewedDate": record.last_reviewed_date.isoformat() if record.last_reviewed_date else None,
        "masteryLevel": record.mastery_level,
    }


def merge_import(
    existing: Sequence[WordRecord],
    incoming: Iterable[Dict[str, Any]],
    today: date,
    srs: Optional[SRSSettings] = None,
) -> ImportResult:
    """Accept incoming words whose foreign word is not in the collection yet.

    Duplicates, including duplicates within ``incoming``, and entries missing
    the foreign word or translation are skipped. The returned result holds
    only the accepted records.
    """
    known_words = {record.normalized_key for record in existing}
    known_ids = {record.id for record in existing}
    result = ImportResult()

    for raw in incoming:
        if not is_valid_candidate(raw) or normalize_word(raw["foreignWord"]) in known_words:
            result.skipped += 1
            continue

        record = record_from_dict(raw, today, srs)
        if record.id in known_ids:
            record = replace(record, id=new_word_id())
        known_words.add(record.normalized_key)
        known_ids.add(record.id)
        result.records.append(record)
        result.accepted += 1

    logger.info(f"Import merge: {result.accepted} accepted, {result.skipped} skipped")
    return result


def load_import_file(path: Path) -> List[Dict[str, Any]]:
    """Read word entries from a .json array or a .jsonl file."""
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    try:
        if path.suffix.lower() == ".jsonl":
            with path.open("r", encoding="utf-8") as f:
                rows = [json.loads(line) for line in f if line.strip()]
        else:
            rows = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(rows, list):
        raise ValueError("Import file must contain a list of word objects.")
    return rows


def dump_records(records: Sequence[WordRecord], path: Path) -> Path:
    """Write records as an indented JSON array."""
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = [record_to_dict(record) for record in records]
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    return path


def default_export_name(today: date) -> str:
    return f"memorizer_word_bank_{today.isoformat()}.json"
