"""
Language detector + mixed-language analyzer
"""

import pytest

from strapi_tools.i18n.detector import (
    Language,
    count_words,
    detect_language,
    detect_mixed_languages,
    score_languages,
)


class TestDetectLanguage:
    """Primary language detection"""

    def test_english_sentence(self):
        result = detect_language("the quick brown fox and the lazy dog")

        assert result.detected_language == "en"
        # 3 hits / 8 words = 37.5 -> 38
        assert result.confidence == 38
        assert result.language_scores["en"] == 3

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_text_has_no_detection(self, text):
        result = detect_language(text)

        assert result.detected_language is None
        assert result.confidence == 0
        assert result.language_scores == {}

    def test_no_function_words(self):
        result = detect_language("xyzzy qwerty plugh")

        assert result.detected_language is None
        assert result.confidence == 0
        assert set(result.language_scores) == {lang.value for lang in Language}
        assert all(score == 0 for score in result.language_scores.values())

    def test_tie_goes_to_first_language_in_order(self):
        # el / de / la are both Spanish and Catalan
        result = detect_language("el de la")

        assert result.language_scores["es"] == result.language_scores["ca"] == 3
        assert result.detected_language == "es"

    def test_case_insensitive(self):
        assert detect_language("THE DOG AND THE CAT").detected_language == "en"

    def test_whole_words_only(self):
        # "theater" must not count as "the"
        assert score_languages("theater")["en"] == 0

    def test_confidence_is_capped(self):
        # one whitespace token, two matches
        result = detect_language("de-la")

        assert result.confidence == 100

    def test_scores_keep_language_order(self):
        scores = score_languages("hello")

        assert list(scores) == ["es", "en", "ca", "fr", "de", "it"]

    @pytest.mark.parametrize(
        "text,language",
        [
            ("el de los para con", "es"),
            ("the of and with", "en"),
            ("els amb però molt", "ca"),
            ("le du des avec", "fr"),
            ("der die und oder", "de"),
            ("il gli di questo", "it"),
        ],
    )
    def test_pure_function_words(self, text, language):
        result = detect_language(text)

        assert result.detected_language == language
        assert result.confidence > 0

    def test_word_count_is_whitespace_split(self):
        assert count_words("  one two\tthree\nfour ") == 4


class TestDetectMixedLanguages:
    """Mixed-language analysis"""

    def test_english_and_spanish(self):
        result = detect_mixed_languages("the gato is muy nice today")

        assert result.is_mixed is True
        assert result.languages == ["en", "es"]
        assert result.warning == "⚠️ Mixed-language content detected: EN (33%), ES (17%)"

    def test_single_language_not_mixed(self):
        result = detect_mixed_languages("The cat is on the mat with a hat")

        assert result.is_mixed is False
        assert result.languages == ["en"]
        assert result.warning is None

    def test_empty_text(self):
        result = detect_mixed_languages("")

        assert result.is_mixed is False
        assert result.languages == []
        assert result.scores == {}

    def test_no_signal_gives_empty_languages(self):
        result = detect_mixed_languages("xyzzy plugh")

        assert result.is_mixed is False
        assert result.languages == []

    def test_threshold_controls_significance(self):
        text = "the gato is muy nice today"

        # es is 1/6 of the words, below a 0.2 threshold
        assert detect_mixed_languages(text, threshold=0.2).is_mixed is False
        assert detect_mixed_languages(text, threshold=0.1).is_mixed is True

    def test_lowering_threshold_never_drops_languages(self):
        text = "the gato is muy nice today le chat est ici"
        previous: set[str] = set()

        for threshold in (0.5, 0.3, 0.2, 0.15, 0.1, 0.05):
            flagged = set(detect_mixed_languages(text, threshold).languages)
            assert previous <= flagged
            previous = flagged
