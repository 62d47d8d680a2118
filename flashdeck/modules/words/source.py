"""Word-list generator using pydantic-ai with the configured model provider.

``generate_words`` never fails: any provider, transport or validation error
(and an empty result) is logged and replaced by a small fixed list for the
language. Imports for the LLM provider are kept lazy to avoid import-time
errors when credentials are missing.
"""

from __future__ import annotations

from typing import Optional

from pydantic_ai import Agent

from flashdeck.core.config import settings
from flashdeck.core.logging import get_logger, log_extra
from flashdeck.modules.words.models import (
    Language,
    Level,
    Word,
    WordCategory,
    WordList,
)

logger = get_logger(__name__)

CATEGORY_WORD_COUNT = 100
DEFAULT_WORD_COUNT = 50

FALLBACK_WORDS: dict[Language, list[Word]] = {
    Language.ENGLISH: [
        Word(word="be", translation="być"),
        Word(word="have", translation="mieć"),
        Word(word="do", translation="robić"),
        Word(word="say", translation="powiedzieć"),
        Word(word="go", translation="iść"),
    ],
    Language.SPANISH: [
        Word(word="ser", translation="być"),
        Word(word="tener", translation="mieć"),
        Word(word="hacer", translation="robić"),
        Word(word="decir", translation="powiedzieć"),
        Word(word="ir", translation="iść"),
    ],
}


def _build_google_model():
    """Build Google Gemini model for pydantic-ai (lazy import)."""
    if not settings.gemini_api_key:
        raise RuntimeError(
            "Gemini API key not configured. Set GEMINI_API_KEY in your environment."
        )

    from pydantic_ai.models.google import GoogleModel
    from pydantic_ai.providers.google import GoogleProvider

    provider = GoogleProvider(api_key=settings.gemini_api_key)
    return GoogleModel(settings.words_model, provider=provider)


def _build_openrouter_model():
    """Build OpenRouter model via OpenAI-compatible provider (lazy import)."""
    if not settings.openrouter_api_key:
        raise RuntimeError(
            "OpenRouter API key not configured. Set OPENROUTER_API_KEY in your environment."
        )

    from pydantic_ai.models.openai import OpenAIChatModel
    from pydantic_ai.providers.openai import OpenAIProvider

    provider = OpenAIProvider(
        api_key=settings.openrouter_api_key,
        base_url="https://openrouter.ai/api/v1",
    )
    return OpenAIChatModel(settings.openrouter_model, provider=provider)


def _build_model_by_settings():
    provider = (settings.model_provider or "google").lower()
    if provider == "openrouter":
        return _build_openrouter_model()
    return _build_google_model()


SYSTEM_PROMPT = (
    "You are an experienced language teacher preparing vocabulary flashcards. "
    "Return a JSON object that validates as WordList: {words}. "
    "Each entry has: {word, translation}. Rules: "
    "- word: the foreign-language word in its basic form "
    "(infinitive for verbs, nominative singular for nouns). "
    "- translation: the most common translation into the learner's native language. "
    "- Popular, frequently used words appropriate for the given CEFR level. "
    "- No duplicates, no commentary, no markdown or code fences."
)


def _build_instruction(
    language: Language, level: Level, category: Optional[WordCategory]
) -> str:
    if category is None:
        what = f"{DEFAULT_WORD_COUNT} popular verbs"
    else:
        what = f'{CATEGORY_WORD_COUNT} popular words from the category "{category.value}"'
    return (
        f"Generate a list of {what} in {language.display_name} "
        f"at CEFR level {level.value}. "
        f"Translate each into {settings.native_language}. "
        "Return only the JSON object."
    )


def fallback_words(language: Language) -> list[Word]:
    return list(FALLBACK_WORDS.get(Language(language), []))


async def _request_words(
    language: Language, level: Level, category: Optional[WordCategory]
) -> list[Word]:
    model = _build_model_by_settings()
    agent: Agent[None, WordList] = Agent[None, WordList](
        model=model,
        output_type=WordList,
        system_prompt=SYSTEM_PROMPT,
        retries=2,
    )
    res = await agent.run(_build_instruction(language, level, category))
    return res.output.words


def _postprocess(words: list[Word]) -> list[Word]:
    out: list[Word] = []
    for w in words:
        word = (w.word or "").strip()
        translation = (w.translation or "").strip()
        if word and translation:
            out.append(Word(word=word, translation=translation))
    return out


async def generate_words(
    language: Language,
    level: Level,
    category: Optional[WordCategory] = None,
) -> list[Word]:
    """Generate a word list, falling back to a fixed list on any failure."""
    language = Language(language)
    level = Level(level)
    if category is not None:
        category = WordCategory(category)
    extra = log_extra(language=language)
    try:
        words = _postprocess(await _request_words(language, level, category))
    except Exception as e:
        logger.warning(
            f"Word generation failed for {language.value}/{level.value}: {e}",
            extra=extra,
        )
        words = []

    if not words:
        logger.warning(
            f"Falling back to predefined word list for {language.value} {level.value}",
            extra=extra,
        )
        return fallback_words(language)

    logger.info(f"Generated {len(words)} words", extra=extra)
    return words
