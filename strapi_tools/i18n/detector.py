"""
Heuristic language detector

Scores a text against a fixed list of function words per language (articles,
prepositions, conjunctions, auxiliaries). It is a bounded heuristic, not an NLP
model: short texts, proper nouns and languages sharing function words (es/ca,
es/it, fr/ca) all produce weak or ambiguous signals. Callers treat
"no detection" as a normal outcome.

Scoring:
- score(lang) = number of whole-word, case-insensitive matches of lang's words
- word count  = whitespace-separated tokens
- winner      = highest score; ties go to the first language in Language order
- confidence  = min(100, round(score / words * 100))
"""

import math
import re
from enum import Enum

from strapi_tools.i18n.schemas import DetectionResult, MixedLanguageResult


class Language(str, Enum):
    """Supported languages; member order is the tie-break order"""

    ES = "es"
    EN = "en"
    CA = "ca"
    FR = "fr"
    DE = "de"
    IT = "it"


_FUNCTION_WORDS: dict[Language, tuple[str, ...]] = {
    Language.ES: (
        "el", "la", "los", "las", "un", "una", "de", "del", "en", "por", "para", "con",
        "que", "como", "pero", "más", "muy", "esto", "esta", "este", "estos", "estas",
        "son", "está", "están", "hay", "ser", "fue", "sido",
    ),
    Language.EN: (
        "the", "a", "an", "of", "in", "on", "at", "to", "for", "with", "and", "or", "but",
        "is", "are", "was", "were", "be", "been", "have", "has", "had", "this", "that",
        "these", "those",
    ),
    Language.CA: (
        "el", "la", "els", "les", "un", "una", "de", "del", "en", "per", "amb", "que",
        "com", "però", "més", "molt", "això", "aquesta", "aquest", "aquests", "aquestes",
        "són", "està", "estan", "hi", "ser", "fou", "estat",
    ),
    Language.FR: (
        "le", "la", "les", "un", "une", "de", "du", "des", "en", "dans", "sur", "pour",
        "avec", "et", "ou", "mais", "est", "sont", "être", "été", "avoir", "a", "eu", "ce",
        "cette", "ces",
    ),
    Language.DE: (
        "der", "die", "das", "den", "dem", "des", "ein", "eine", "einem", "eines", "und",
        "oder", "aber", "ist", "sind", "war", "waren", "sein", "gewesen", "haben", "hat",
        "hatte",
    ),
    Language.IT: (
        "il", "lo", "la", "i", "gli", "le", "un", "uno", "una", "di", "da", "in", "su",
        "per", "con", "e", "o", "ma", "è", "sono", "era", "erano", "essere", "stato",
        "avere", "ha", "questo", "questa",
    ),
}

_PATTERNS: dict[Language, re.Pattern[str]] = {
    lang: re.compile(r"\b(?:" + "|".join(map(re.escape, words)) + r")\b", re.IGNORECASE)
    for lang, words in _FUNCTION_WORDS.items()
}

DEFAULT_MIXED_THRESHOLD = 0.15


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def count_words(text: str) -> int:
    return len(text.split())


def score_languages(text: str) -> dict[str, int]:
    """Function-word hits per language, in Language order"""
    return {lang.value: len(pattern.findall(text)) for lang, pattern in _PATTERNS.items()}


def detect_language(text: str | None) -> DetectionResult:
    """Detect the primary language of a text. Never raises."""
    if not text or not text.strip():
        return DetectionResult()

    scores = score_languages(text)
    word_count = count_words(text)

    # max() keeps the first maximal entry, i.e. Language order on ties
    top_language, top_score = max(scores.items(), key=lambda item: item[1])
    if top_score == 0:
        return DetectionResult(language_scores=scores)

    confidence = min(100, _round_half_up(top_score / word_count * 100))
    return DetectionResult(
        detected_language=top_language,
        confidence=confidence,
        language_scores=scores,
    )


def detect_mixed_languages(
    text: str | None,
    threshold: float = DEFAULT_MIXED_THRESHOLD,
) -> MixedLanguageResult:
    """Flag text where two or more languages each reach `threshold` of the words"""
    if not text or not text.strip():
        return MixedLanguageResult()

    detection = detect_language(text)
    word_count = count_words(text)

    significant = sorted(
        (
            (lang, count)
            for lang, count in detection.language_scores.items()
            if count / word_count >= threshold
        ),
        key=lambda item: item[1],
        reverse=True,
    )

    if len(significant) > 1:
        shares = ", ".join(
            f"{lang.upper()} ({_round_half_up(count / word_count * 100)}%)"
            for lang, count in significant
        )
        return MixedLanguageResult(
            is_mixed=True,
            languages=[lang for lang, _ in significant],
            scores=detection.language_scores,
            warning=f"⚠️ Mixed-language content detected: {shares}",
        )

    return MixedLanguageResult(
        is_mixed=False,
        languages=[detection.detected_language] if detection.detected_language else [],
        scores=detection.language_scores,
    )
