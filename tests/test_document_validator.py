"""
Document language validator
"""

import pytest

from strapi_tools.i18n.schemas import ValidationOptions
from strapi_tools.i18n.validator import (
    expected_language_for,
    extract_text_fields,
    format_validation_results,
    validate_content_language,
    validate_document_language,
)


class TestExpectedLanguage:
    @pytest.mark.parametrize(
        "locale,language",
        [("es-ES", "es"), ("en-GB", "en"), ("ca", "ca"), ("pt-BR", "pt"), ("ja", "ja")],
    )
    def test_locale_to_language(self, locale, language):
        assert expected_language_for(locale) == language


class TestValidateContentLanguage:
    """Single-field check"""

    def test_matching_language(self):
        result = validate_content_language("The history of the city and the river", "en-US")

        assert result.is_valid is True
        assert result.expected_language == "en"
        assert result.detected_language == "en"

    def test_confident_mismatch(self):
        result = validate_content_language("The history of the city and the river", "es")

        assert result.is_valid is False
        assert result.detected_language == "en"
        assert "expected ES but detected EN" in result.warning

    def test_low_confidence_mismatch_is_accepted(self):
        result = validate_content_language(
            "The history of the city and the river", "es", minimum_confidence=90
        )

        assert result.is_valid is True
        assert result.warning is None

    def test_undetectable_text_is_accepted(self):
        result = validate_content_language("Lorem ipsum dolor sit amet", "fr")

        assert result.is_valid is True
        assert result.detected_language is None


class TestExtractTextFields:
    def test_only_long_top_level_strings(self):
        data = {
            "title": "A long enough title",
            "slug": "short",
            "exactly_ten": "0123456789",
            "count": 42,
            "nested": {"body": "A long nested string here"},
        }

        assert extract_text_fields(data) == {"title": "A long enough title"}

    def test_non_dict_input(self):
        assert extract_text_fields(None) == {}
        assert extract_text_fields(["a long string value"]) == {}


class TestValidateDocumentLanguage:
    """Aggregated document validation"""

    def test_clean_document_is_valid(self, english_document):
        result = validate_document_language(english_document, "en")

        assert result.is_valid is True
        assert result.warnings == []
        assert result.locale == "en"
        assert set(result.details.field_validations) == {"title"}
        assert set(result.details.mixed_language_checks) == {"title"}

    def test_field_mismatch_warning(self, english_document):
        english_document["locale"] = "es"

        result = validate_document_language(english_document, "es")

        assert result.is_valid is False
        assert len(result.warnings) == 1
        assert result.warnings[0].startswith('Field "title": ⚠️ Language mismatch')

    def test_fallback_non_strict_still_checks_fields(self, spanish_fallback_document):
        result = validate_document_language(
            spanish_fallback_document, "ca", ValidationOptions(check_mixed_languages=False)
        )

        assert result.is_valid is False
        assert result.locale == "es"
        assert result.warnings[0].startswith('⚠️ Requested locale "ca" not found.')
        assert "title" in result.details.field_validations

    def test_fallback_strict_stops_before_fields(self, spanish_fallback_document):
        result = validate_document_language(
            spanish_fallback_document, "ca", ValidationOptions(strict_mode=True)
        )

        assert result.is_valid is False
        assert len(result.warnings) == 2
        assert result.warnings[1].startswith("❌ STRICT MODE")
        assert result.details.field_validations == {}
        assert result.details.mixed_language_checks == {}
        assert result.details.localization_status.inherited_from == "es"

    def test_mixed_language_field(self):
        document = {"documentId": "d1", "locale": "en", "title": "the gato is muy nice today"}

        result = validate_document_language(document, "en")

        assert result.is_valid is False
        assert any("Mixed-language content detected" in w for w in result.warnings)
        assert result.details.mixed_language_checks["title"].languages == ["en", "es"]

    def test_mixed_check_can_be_disabled(self):
        document = {"documentId": "d1", "locale": "en", "title": "the gato is muy nice today"}

        result = validate_document_language(
            document, "en", ValidationOptions(check_mixed_languages=False)
        )

        assert result.is_valid is True
        assert result.details.mixed_language_checks == {}

    def test_short_fields_are_skipped(self):
        document = {"documentId": "d1", "locale": "en", "title": "el la de"}

        result = validate_document_language(document, "en")

        assert result.is_valid is True
        assert result.details.field_validations == {}

    def test_options_reject_out_of_range_confidence(self):
        with pytest.raises(ValueError):
            ValidationOptions(minimum_confidence=150)


class TestFormatValidationResults:
    def test_valid_narrative(self, english_document):
        text = format_validation_results(validate_document_language(english_document, "en"))

        assert "Current locale: en" in text
        assert "✅ Valid" in text
        assert "Available locales: en, es, ca" in text
        assert "Warnings" not in text

    def test_fallback_narrative(self, spanish_fallback_document):
        text = format_validation_results(
            validate_document_language(spanish_fallback_document, "ca", ValidationOptions(strict_mode=True))
        )

        assert "⚠️ Warnings detected" in text
        assert "Inherited from: es" in text
        assert "STRICT MODE" in text
