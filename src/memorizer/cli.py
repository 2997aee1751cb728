"""Command line interface for the memorizer word bank."""
import argparse
import itertools
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Tuple

from sqlalchemy.orm import Session

from memorizer.models.base import SessionLocal, init_db
from memorizer.models.srs_models import AppMode, LearningGameMode, WordRecord
from memorizer.services.learning_service import LearningService
from memorizer.services.word_service import WordService

logger = logging.getLogger(__name__)

ANSWER_KEYS = {"y": True, "n": False, "q": None}


def _parse_date(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid date {value!r}, expected YYYY-MM-DD") from e


def add_word(db: Session, args: argparse.Namespace) -> int:
    service = WordService(db)
    record = service.add_word(
        args.word,
        args.translation,
        args.today,
        phonetic_transcription=args.phonetic or None,
        personal_note=args.note or "",
    )
    if record is None:
        print(f'Word "{args.word.strip()}" was not added: it is empty or already in the list.')
        return 1
    print(f"Added {record.foreign_word} [{record.id}].")
    return 0


def delete_word(db: Session, args: argparse.Namespace) -> int:
    if not WordService(db).delete_word(args.id):
        print(f"Word {args.id} not found.")
        return 1
    print("Deleted 1 word.")
    return 0


def update_note(db: Session, args: argparse.Namespace) -> int:
    record = WordService(db).update_note(args.id, args.note)
    if record is None:
        print(f"Word {args.id} not found.")
        return 1
    print(f"Note updated for {record.foreign_word}.")
    return 0


def list_words(db: Session, args: argparse.Namespace) -> int:
    records = WordService(db).list_records()
    if args.due:
        records = [record for record in records if record.due_date <= args.today]

    if not records:
        print("No words.")
        return 0

    for record in records:
        print(
            f"[{record.id}] {record.foreign_word} - {record.translation} "
            f"(due {record.due_date.isoformat()}, reps={record.repetitions}, exp={record.mastery_level})"
        )
    return 0


def import_words(db: Session, args: argparse.Namespace) -> int:
    result = WordService(db).import_file(Path(args.file), args.today)
    print(f"Import finished. Added: {result.accepted}. Skipped: {result.skipped}.")
    return 0


def export_words(db: Session, args: argparse.Namespace) -> int:
    path = WordService(db).export_words(args.today, Path(args.file) if args.file else None)
    print(f"Word bank exported to {path}")
    return 0


def _prompt_answers() -> Iterator[Optional[bool]]:
    while True:
        raw = input("Did you remember it? [y/n, q to quit]: ").strip().lower()
        if raw in ANSWER_KEYS:
            yield ANSWER_KEYS[raw]
        else:
            print("Please answer y, n or q.")


def _scripted_answers(answers: str) -> Iterator[Optional[bool]]:
    answers = answers.lower()
    invalid = sorted(set(answers) - set(ANSWER_KEYS))
    if invalid:
        raise ValueError(f"Invalid answers {''.join(invalid)!r}, use only y, n or q")
    return itertools.chain((ANSWER_KEYS[char] for char in answers), itertools.repeat(None))


def _card_sides(record: WordRecord, game_mode: LearningGameMode) -> Tuple[str, str]:
    """Question and answer shown for a word in the given game mode."""
    if game_mode == LearningGameMode.MATCH_FOREIGN_FROM_TRANSLATION:
        return record.translation, record.foreign_word
    return record.foreign_word, record.translation


def review(db: Session, args: argparse.Namespace) -> int:
    game_mode = LearningGameMode(args.mode)
    answers = _scripted_answers(args.answers) if args.answers is not None else _prompt_answers()

    service = LearningService(db, args.today)
    batch = service.enter_mode(AppMode.LEARN, args.today, capacity=args.capacity)

    if not batch:
        print("Nothing to review. Add more words or come back later!")
        return 0

    reviewed = 0
    for record in batch:
        question, answer_text = _card_sides(record, game_mode)
        print(f"\n{question}")
        if args.answers is None:
            input("Press Enter to show the answer...")
        print(f"  -> {answer_text}")

        answer = next(answers)
        if answer is None:
            break
        outcome = service.review(record.id, answer, args.today)
        reviewed += 1
        print(f"Next review on {outcome.record.due_date.isoformat()}")
        if outcome.goal_completed_now:
            print(f"Daily goal reached! Streak: {outcome.gamification.current_streak} day(s).")

    service.exit_mode()
    progress = service.progress(args.today)
    print(
        f"\nReviewed {reviewed} word(s). "
        f"Today: {progress['words_corrected_today']}/{progress['daily_goal']}."
    )
    return 0


def stats(db: Session, args: argparse.Namespace) -> int:
    progress = LearningService(db, args.today).progress(args.today)
    print(f"Words: {progress['total_words']}")
    print(f"Due today: {progress['words_due']}")
    print(f"Mastered: {progress['words_mastered']}")
    print(f"Streak: {progress['streak']} day(s)")
    print(f"Days with goal completed: {len(progress['completed_dates'])}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="memorizer", description="Memorizer: spaced repetition word bank.")
    parser.add_argument(
        "--today", type=_parse_date, default=date.today(), help="Override today's date (YYYY-MM-DD)."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_add = sub.add_parser("add", help="Add one word.")
    p_add.add_argument("word", help="Foreign word.")
    p_add.add_argument("translation", help="Translation.")
    p_add.add_argument("--phonetic", default="", help="Phonetic transcription.")
    p_add.add_argument("--note", default="", help="Personal note or example.")
    p_add.set_defaults(func=add_word)

    p_delete = sub.add_parser("delete", help="Delete a word by id.")
    p_delete.add_argument("id", help="Word id.")
    p_delete.set_defaults(func=delete_word)

    p_note = sub.add_parser("note", help="Set the personal note of a word.")
    p_note.add_argument("id", help="Word id.")
    p_note.add_argument("note", help="Note text.")
    p_note.set_defaults(func=update_note)

    p_list = sub.add_parser("list", help="List words.")
    p_list.add_argument("--due", action="store_true", help="Only show due words.")
    p_list.set_defaults(func=list_words)

    p_import = sub.add_parser("import", help="Import words from a json/jsonl file.")
    p_import.add_argument("--file", required=True, help="Input file path.")
    p_import.set_defaults(func=import_words)

    p_export = sub.add_parser("export", help="Export the word bank to json.")
    p_export.add_argument("--file", default="", help="Output file path.")
    p_export.set_defaults(func=export_words)

    p_review = sub.add_parser("review", help="Run a learning session.")
    p_review.add_argument("--capacity", type=int, default=None, help="Max words in the session.")
    p_review.add_argument(
        "--mode",
        choices=[mode.value for mode in LearningGameMode],
        default=LearningGameMode.CLASSIC_QUIZ.value,
        help="Which side of the word is asked.",
    )
    p_review.add_argument(
        "--answers", default=None, help="Non-interactive answers, one y/n per word, q stops (e.g. yyn)."
    )
    p_review.set_defaults(func=review)

    p_stats = sub.add_parser("stats", help="Show progress and streak.")
    p_stats.set_defaults(func=stats)

    return parser


def main(argv: Optional[List[str]] = None, session_factory: Callable[[], Session] = SessionLocal) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    db = session_factory()
    try:
        init_db(db.get_bind())
        return args.func(db, args)
    except (ValueError, FileNotFoundError) as e:
        logger.debug(f"Command {args.command} failed", exc_info=True)
        print(f"Error: {e}")
        return 1
    finally:
        db.close()
