"""
Tests for the command-line interface.
Interactive study runs on scripted input with a zero-delay manager.
"""

import json
import random
from pathlib import Path
from typing import Iterable

import pytest

from flashdeck import cli
from flashdeck.core.config import settings
from flashdeck.modules.study.manager import SessionManager
from flashdeck.modules.study.models import SessionMode
from flashdeck.modules.study.navigation import Navigator, View
from flashdeck.modules.study.scheduler import EventQueue
from flashdeck.modules.words.models import (
    Language,
    Level,
    TranslationDirection,
    Word,
    WordCategory,
)
from flashdeck.modules.words.store import WordStore

from conftest import FakeWordSource, ManualClock, make_words

EN = Language.ENGLISH


class Script:
    """Feeds canned answers and records every prompt and line printed."""

    def __init__(self, answers: Iterable[str]) -> None:
        self.answers = list(answers)
        self.prompts: list[str] = []
        self.lines: list[str] = []

    def ask(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.answers.pop(0)

    def say(self, line: str) -> None:
        self.lines.append(line)


@pytest.fixture
def cli_manager(
    unknown_store: WordStore, custom_store: WordStore, word_source: FakeWordSource
) -> SessionManager:
    return SessionManager(
        unknown_store=unknown_store,
        custom_store=custom_store,
        scheduler=EventQueue(clock=ManualClock()),
        word_source=word_source,
        block_size=25,
        reveal_delay=0,
        flip_back_delay=0,
        rng=random.Random(1),
    )


def _ready_nav(level: Level = Level.A1) -> Navigator:
    nav = Navigator()
    nav.select_language(EN)
    nav.select_level(level)
    if level == Level.CUSTOM:
        nav.start_custom()
    else:
        nav.select_category(WordCategory.NOUN)
    nav.select_direction(TranslationDirection.FOREIGN_TO_NATIVE)
    return nav


def test_study_block_then_review(cli_manager: SessionManager, unknown_store: WordStore) -> None:
    script = Script(["n"] + ["y"] * 24 + ["y", "y", "n"])

    assert cli.run_study(cli_manager, _ready_nav(), script.ask, script.say) == 0

    assert "Session complete: 24 known, 1 to review." in script.lines
    assert any(line.startswith("Review complete after 1 passes") for line in script.lines)
    # The reviewed word was confirmed known and left the review list
    assert unknown_store.get(EN) == []
    assert not script.answers


def test_study_continues_with_next_block(cli_manager: SessionManager) -> None:
    script = Script(["y"] * 25 + ["y"] + ["y"] * 5)

    assert cli.run_study(cli_manager, _ready_nav(), script.ask, script.say) == 0

    assert "Continue with the next block? [y/N]> " in script.prompts
    assert script.lines.count("Session complete: 5 known, 0 to review.") == 1
    assert not script.answers


def test_study_review_returns_to_block_summary(
    cli_manager: SessionManager, unknown_store: WordStore
) -> None:
    script = Script(["n"] + ["y"] * 24 + ["y", "y", "y"] + ["y"] * 5)
    nav = _ready_nav()

    assert cli.run_study(cli_manager, nav, script.ask, script.say) == 0

    assert script.prompts.count("Review unknown words now? [y/N]> ") == 1
    assert script.prompts.count("Continue with the next block? [y/N]> ") == 1
    assert "Session complete: 5 known, 0 to review." in script.lines
    blocks = [s for s in cli_manager.sessions.values() if s.mode == SessionMode.GENERATED]
    assert [s.block_index for s in blocks] == [0, 1]
    assert unknown_store.get(EN) == []
    assert nav.view == View.BLOCK_SUMMARY
    assert not script.answers


def test_study_skips_unknown_answers_and_quits(cli_manager: SessionManager) -> None:
    script = Script(["maybe", "f", "q"])

    assert cli.run_study(cli_manager, _ready_nav(), script.ask, script.say) == 0
    assert "    t0" in script.lines
    assert len(cli_manager.sessions) == 1


def test_study_empty_custom_list(cli_manager: SessionManager) -> None:
    script = Script([])
    nav = _ready_nav(Level.CUSTOM)

    assert cli.run_study(cli_manager, nav, script.ask, script.say) == 0
    assert script.lines == ["No words to study."]


def test_study_custom_words(cli_manager: SessionManager, custom_store: WordStore) -> None:
    custom_store.set(EN, [Word(word="dog", translation="pies")])
    script = Script(["n", "n"])

    assert cli.run_study(cli_manager, _ready_nav(Level.CUSTOM), script.ask, script.say) == 0
    assert "    dog  =  pies" in script.lines
    assert any("(pass 1)  dog" in line for line in script.lines)


def test_review_mode_prompts_for_language(cli_manager: SessionManager, unknown_store: WordStore) -> None:
    unknown_store.set(EN, make_words(1))
    script = Script(["1", "n", "y"])

    code = cli.run_study(
        cli_manager,
        Navigator(),
        script.ask,
        script.say,
        review=True,
        direction=TranslationDirection.NATIVE_TO_FOREIGN,
    )

    assert code == 0
    assert any("(pass 2)  t0" in line for line in script.lines)
    assert unknown_store.get(EN) == []


def test_navigate_prompts_in_screen_order() -> None:
    script = Script(["spanish", "9", "B1", "2", "1"])
    nav = cli.navigate(Navigator(), script.ask, script.say)

    assert nav.view == View.FLASHCARDS
    assert nav.language == Language.SPANISH
    assert nav.level == Level.B1
    assert nav.category == WordCategory.ADJECTIVE
    assert nav.direction == TranslationDirection.FOREIGN_TO_NATIVE
    assert "Unknown level: '9'" in script.lines
    assert script.prompts == ["language> ", "level> ", "level> ", "category> ", "direction> "]


@pytest.fixture
def file_storage(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    path = tmp_path / "words.json"
    monkeypatch.setattr(settings.storage, "backend", "file")
    monkeypatch.setattr(settings.storage, "path", str(path))
    return path


def test_words_commands(file_storage: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["words", "add", "-l", "spanish", "gato", "kot"]) == 0
    assert cli.main(
        ["words", "import", "-l", "spanish", "--text", "perro,pies\nbad line"]
    ) == 0
    capsys.readouterr()

    assert cli.main(["words", "list", "-l", "spanish"]) == 0
    listed = json.loads(capsys.readouterr().out)
    assert listed == [
        {"word": "gato", "translation": "kot"},
        {"word": "perro", "translation": "pies"},
    ]

    assert cli.main(["words", "remove", "-l", "spanish", "GATO"]) == 0
    assert "Removed 1 words" in capsys.readouterr().out

    assert cli.main(["words", "clear", "-l", "spanish"]) == 0
    assert json.loads(file_storage.read_text(encoding="utf-8")) == {}


def test_words_import_rejects_empty(file_storage: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["words", "import", "-l", "english", "--text", "nothing"]) == 2
    assert "No valid" in capsys.readouterr().out


def test_unknown_list_is_separate(file_storage: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["words", "add", "-l", "english", "--kind", "unknown", "dog", "pies"])
    capsys.readouterr()

    cli.main(["words", "list", "-l", "english"])
    assert json.loads(capsys.readouterr().out) == []
    cli.main(["words", "list", "-l", "english", "--kind", "unknown"])
    assert len(json.loads(capsys.readouterr().out)) == 1


def test_words_clear_only_touches_selected_list(
    file_storage: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.main(["words", "add", "-l", "english", "dog", "pies"])
    cli.main(["words", "add", "-l", "english", "--kind", "unknown", "cat", "kot"])
    cli.main(["words", "add", "-l", "spanish", "--kind", "unknown", "gato", "kot"])
    capsys.readouterr()

    assert cli.main(["words", "clear", "-l", "english", "--kind", "unknown"]) == 0
    assert "Cleared" in capsys.readouterr().out

    cli.main(["words", "list", "-l", "english", "--kind", "unknown"])
    assert json.loads(capsys.readouterr().out) == []
    cli.main(["words", "list", "-l", "spanish", "--kind", "unknown"])
    assert len(json.loads(capsys.readouterr().out)) == 1
    cli.main(["words", "list", "-l", "english"])
    assert json.loads(capsys.readouterr().out) == [{"word": "dog", "translation": "pies"}]
