from __future__ import annotations

import argparse
import asyncio
import json
import sys
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Optional, TypeVar

from flashdeck.core.config import settings
from flashdeck.core.logging import setup_logging
from flashdeck.modules.study.manager import SessionManager, StudySession
from flashdeck.modules.study.models import SessionMode
from flashdeck.modules.study.navigation import Navigator, View
from flashdeck.modules.words.importer import (
    DEFAULT_SEPARATORS,
    BulkImportError,
    parse_bulk_words,
)
from flashdeck.modules.words.models import (
    Card,
    Language,
    Level,
    TranslationDirection,
    Word,
    WordCategory,
)
from flashdeck.modules.words.source import generate_words
from flashdeck.modules.words.store import (
    WordStore,
    build_backend,
    custom_words_store,
    unknown_words_store,
)

E = TypeVar("E", bound=Enum)
Ask = Callable[[str], str]
Say = Callable[[str], None]

GENERATED_CATEGORIES = [c for c in WordCategory if c != WordCategory.CUSTOM]


def _stores() -> tuple[WordStore, WordStore]:
    backend = build_backend(settings.storage)
    prefix = settings.storage.key_prefix
    return (
        unknown_words_store(backend, prefix=prefix),
        custom_words_store(backend, prefix=prefix),
    )


def _dump(words: list[Word]) -> str:
    return json.dumps([w.model_dump() for w in words], indent=2, ensure_ascii=False)


# Word list commands -------------------------------------------------------
def _load_import_text(args: argparse.Namespace) -> str:
    if args.text and args.file:
        raise SystemExit("Provide either --text or --file, not both")
    if args.file:
        return Path(args.file).read_text(encoding="utf-8")
    if args.text:
        return args.text
    return sys.stdin.read()


def _words_command(args: argparse.Namespace, say: Say) -> int:
    unknown, custom = _stores()
    store = custom if args.kind == "custom" else unknown
    language = Language(args.language)

    if args.words_cmd == "list":
        say(_dump(store.get(language)))
        return 0
    if args.words_cmd == "add":
        word, translation = args.word.strip(), args.translation.strip()
        if not word or not translation:
            say("Both word and translation are required")
            return 2
        store.add(language, [Word(word=word, translation=translation)])
        say(f"Added '{word}' ({len(store.get(language))} words)")
        return 0
    if args.words_cmd == "import":
        try:
            parsed = parse_bulk_words(_load_import_text(args), args.separators)
        except BulkImportError as e:
            say(str(e))
            return 2
        words = store.add(language, parsed)
        say(f"Imported {len(parsed)} words ({len(words)} in list)")
        return 0
    if args.words_cmd == "remove":
        before = len(store.get(language))
        after = len(store.delete(language, args.word))
        say(f"Removed {before - after} words")
        return 0
    if args.words_cmd == "clear":
        store.clear(language)
        say("Cleared")
        return 0
    return 2


# Interactive study --------------------------------------------------------
def _choose(ask: Ask, say: Say, label: str, options: Iterable[E]) -> E:
    choices = list(options)
    say(f"Choose {label}:")
    for i, opt in enumerate(choices, 1):
        say(f"  {i}. {opt.value}")
    while True:
        raw = ask(f"{label}> ").strip()
        if raw.isdigit() and 1 <= int(raw) <= len(choices):
            return choices[int(raw) - 1]
        for opt in choices:
            if raw.lower() == str(opt.value).lower():
                return opt
        say(f"Unknown {label}: {raw!r}")


def navigate(nav: Navigator, ask: Ask, say: Say) -> Navigator:
    """Prompt for whatever selections are still missing until cards can be shown."""
    while nav.view != View.FLASHCARDS:
        if nav.view == View.LANGUAGE_SELECTION:
            nav.select_language(_choose(ask, say, "language", Language))
        elif nav.view == View.LEVEL_SELECTION:
            nav.select_level(_choose(ask, say, "level", Level))
        elif nav.view == View.CATEGORY_SELECTION:
            nav.select_category(
                _choose(ask, say, "category", GENERATED_CATEGORIES)
            )
        elif nav.view == View.CUSTOM_WORDS_MANAGEMENT:
            nav.start_custom()
        elif nav.view == View.DIRECTION_SELECTION:
            nav.select_direction(_choose(ask, say, "direction", TranslationDirection))
        else:
            nav.reset()
    return nav


def _navigator_from_args(args: argparse.Namespace) -> Navigator:
    nav = Navigator()
    # Applied in screen order, stopping at the first missing selection
    steps = [
        (args.language, nav.select_language),
        (args.level, nav.select_level),
        (None if args.level == Level.CUSTOM.value else args.category, nav.select_category),
        (args.direction, nav.select_direction),
    ]
    for value, select in steps:
        if value is None:
            if nav.view == View.CUSTOM_WORDS_MANAGEMENT:
                nav.start_custom()
                continue
            break
        select(value)
    return nav


def play_session(
    manager: SessionManager, session: StudySession, ask: Ask, say: Say
) -> Optional[StudySession]:
    """Run one session to completion; returns None if the user quit."""
    scheduler = manager.scheduler
    while not session.finished:
        word = session.engine.current_word
        if word is None:
            scheduler.run_until_idle()
            continue
        card = Card.from_word(word, session.direction)
        state = session.to_state()
        say(f"[{state.current_index + 1}/{state.total}] (pass {state.pass_number})  {card.front}")
        raw = ask("known? [y]es/[n]o/[f]lip/[q]uit> ").strip().lower()
        if raw in ("q", "quit"):
            return None
        if raw in ("f", "flip"):
            manager.flip(session.id)
            shown = card.back if session.engine.is_flipped else card.front
            say(f"    {shown}")
            continue
        if raw not in ("y", "yes", "n", "no"):
            continue
        manager.judge(session.id, known=raw.startswith("y"))
        say(f"    {card.front}  =  {card.back}")
        scheduler.run_until_idle()
    return session


def _summarize(session: StudySession, say: Say) -> None:
    result = session.result
    if result is None:
        return
    if session.mode == SessionMode.REVIEW:
        say(f"Review complete after {len(result.passes)} passes. Mastered {len(result.known)} words.")
        return
    say(f"Session complete: {len(result.known)} known, {len(result.unknown)} to review.")
    for w in result.unknown:
        say(f"  {w.word}  -  {w.translation}")


def run_study(
    manager: SessionManager,
    nav: Navigator,
    ask: Ask,
    say: Say,
    *,
    review: bool = False,
    direction: Optional[TranslationDirection] = None,
) -> int:
    if review:
        if nav.language is None:
            nav.select_language(_choose(ask, say, "language", Language))
        nav.show(View.REVIEW)
        session = manager.start_review(
            language=nav.language,
            direction=direction or TranslationDirection.FOREIGN_TO_NATIVE,
        )
    else:
        navigate(nav, ask, say)
        if not nav.is_custom:
            say("Generating words... this may take a moment.")
        session = asyncio.run(
            manager.create_session(
                mode=SessionMode.CUSTOM if nav.is_custom else SessionMode.GENERATED,
                language=nav.language,
                level=nav.level,
                category=nav.category,
                direction=nav.direction,
            )
        )

    # Block a review was started from; the flow returns to its summary
    block: Optional[StudySession] = None
    while True:
        if session.finished and not session.engine.deck:
            say("No words to study.")
            return 0
        played = play_session(manager, session, ask, say)
        if played is None:
            return 0
        _summarize(session, say)
        if session.mode == SessionMode.REVIEW:
            if block is None:
                return 0
            session, block = block, None
            nav.finish_block()
        else:
            nav.finish_block()
            if session.result.unknown and ask("Review unknown words now? [y/N]> ").strip().lower().startswith("y"):
                nav.review()
                block = session
                session = manager.review_unknown(session.id)
                continue
        if session.has_more_blocks and ask("Continue with the next block? [y/N]> ").strip().lower().startswith("y"):
            nav.continue_block()
            session = manager.next_block(session.id)
            continue
        return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="flashdeck", description="Vocabulary flashcard trainer CLI"
    )
    parser.add_argument("--log-level", default=None, help="Logging level")
    sub = parser.add_subparsers(dest="cmd", required=True)

    g = sub.add_parser("generate", help="Generate a word list and print it as JSON")
    g.add_argument("--language", "-l", required=True, choices=[x.value for x in Language])
    g.add_argument("--level", required=True, choices=[x.value for x in Level if x != Level.CUSTOM])
    g.add_argument("--category", "-c", choices=[x.value for x in WordCategory if x != WordCategory.CUSTOM])

    w = sub.add_parser("words", help="Manage stored word lists")
    wsub = w.add_subparsers(dest="words_cmd", required=True)
    for name, help_text in (
        ("list", "Print a stored list as JSON"),
        ("add", "Add a single word"),
        ("import", "Bulk import 'word,translation' lines"),
        ("remove", "Remove a word by its surface form"),
        ("clear", "Delete a whole list"),
    ):
        p = wsub.add_parser(name, help=help_text)
        p.add_argument("--language", "-l", required=True, choices=[x.value for x in Language])
        p.add_argument("--kind", choices=["custom", "unknown"], default="custom")
        if name == "add":
            p.add_argument("word")
            p.add_argument("translation")
        elif name == "remove":
            p.add_argument("word")
        elif name == "import":
            p.add_argument("--text", help="Import text (default: stdin)")
            p.add_argument("--file", help="Path to a file with one pair per line")
            p.add_argument("--separators", default=DEFAULT_SEPARATORS)

    s = sub.add_parser("study", help="Interactive flashcard session")
    s.add_argument("--language", "-l", choices=[x.value for x in Language])
    s.add_argument("--level", choices=[x.value for x in Level])
    s.add_argument("--category", "-c", choices=[x.value for x in GENERATED_CATEGORIES])
    s.add_argument("--direction", "-d", choices=[x.value for x in TranslationDirection])
    s.add_argument("--review", action="store_true", help="Review stored unknown words")

    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.cmd == "generate":
        words = asyncio.run(
            generate_words(
                Language(args.language),
                Level(args.level),
                WordCategory(args.category) if args.category else None,
            )
        )
        print(_dump(words))
        return 0
    if args.cmd == "words":
        return _words_command(args, print)
    if args.cmd == "study":
        unknown, custom = _stores()
        manager = SessionManager(
            unknown_store=unknown,
            custom_store=custom,
            block_size=settings.study.block_size,
            reveal_delay=settings.study.reveal_delay_sec,
            flip_back_delay=settings.study.flip_back_delay_sec,
        )
        return run_study(
            manager,
            _navigator_from_args(args),
            input,
            print,
            review=args.review,
            direction=TranslationDirection(args.direction) if args.direction else None,
        )

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
