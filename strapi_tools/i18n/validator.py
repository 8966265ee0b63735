"""
Document language validator

validate_document_language runs, in order:
1. Localization status (fallback detection) against the expected locale
2. Strict mode: a fallback document is rejected immediately, no field checks
3. Per substantial text field (string > 10 chars): language vs expected locale
4. Per substantial text field: mixed-language check (optional)

is_valid == no warnings. Nothing here talks to Strapi.
"""

from typing import Any

from strapi_tools.i18n.detector import detect_language, detect_mixed_languages
from strapi_tools.i18n.localization import analyze_localization_status
from strapi_tools.i18n.schemas import (
    ContentLanguageValidation,
    DocumentValidationResult,
    MixedLanguageResult,
    ValidationDetails,
    ValidationOptions,
)
from strapi_tools.observability.metrics import LANGUAGE_WARNING_TOTAL

# Shorter strings are codes, slugs, enum values: not worth checking
MIN_TEXT_FIELD_LENGTH = 10

LOCALE_TO_LANGUAGE: dict[str, str] = {
    "es": "es",
    "es-ES": "es",
    "en": "en",
    "en-US": "en",
    "en-GB": "en",
    "ca": "ca",
    "ca-ES": "ca",
    "fr": "fr",
    "fr-FR": "fr",
    "de": "de",
    "de-DE": "de",
    "it": "it",
    "it-IT": "it",
}


def expected_language_for(locale: str) -> str:
    """Locale code -> language code (exact map first, then the base prefix)"""
    return LOCALE_TO_LANGUAGE.get(locale) or locale.split("-")[0]


def validate_content_language(
    content: str,
    expected_locale: str,
    minimum_confidence: int = 30,
) -> ContentLanguageValidation:
    """
    Check one text against the expected locale.

    Only a confident detection of a *different* language is a failure;
    an undetectable text is accepted.
    """
    expected_language = expected_language_for(expected_locale)
    detection = detect_language(content)

    if not detection.detected_language:
        return ContentLanguageValidation(is_valid=True, expected_language=expected_language)

    mismatch = (
        detection.detected_language != expected_language
        and detection.confidence >= minimum_confidence
    )
    if mismatch:
        return ContentLanguageValidation(
            is_valid=False,
            expected_language=expected_language,
            detected_language=detection.detected_language,
            confidence=detection.confidence,
            warning=(
                f"⚠️ Language mismatch: expected {expected_language.upper()} "
                f"but detected {detection.detected_language.upper()} "
                f"(confidence: {detection.confidence}%)"
            ),
        )

    return ContentLanguageValidation(
        is_valid=True,
        expected_language=expected_language,
        detected_language=detection.detected_language,
        confidence=detection.confidence,
    )


def extract_text_fields(data: Any) -> dict[str, str]:
    """Top-level string attributes long enough to carry language"""
    if not isinstance(data, dict):
        return {}
    return {
        key: value
        for key, value in data.items()
        if isinstance(value, str) and len(value) > MIN_TEXT_FIELD_LENGTH
    }


def validate_document_language(
    document: dict[str, Any],
    expected_locale: str,
    options: ValidationOptions | None = None,
) -> DocumentValidationResult:
    """Validate every substantial text field of a document against expected_locale"""
    options = options or ValidationOptions()
    warnings: list[str] = []
    field_validations: dict[str, ContentLanguageValidation] = {}
    mixed_language_checks: dict[str, MixedLanguageResult] = {}

    status = analyze_localization_status(document, expected_locale)
    if status.warning:
        warnings.append(status.warning)

    if options.strict_mode and status.inherited_from:
        warnings.append(
            f'❌ STRICT MODE: inherited content is not allowed. '
            f'Locale "{expected_locale}" has no translation of its own.'
        )
        return DocumentValidationResult(
            is_valid=False,
            locale=status.current_locale,
            warnings=warnings,
            details=ValidationDetails(
                field_validations=field_validations,
                mixed_language_checks=mixed_language_checks,
                localization_status=status,
            ),
        )

    for field_name, value in extract_text_fields(document).items():
        validation = validate_content_language(value, expected_locale, options.minimum_confidence)
        field_validations[field_name] = validation
        if not validation.is_valid and validation.warning:
            warnings.append(f'Field "{field_name}": {validation.warning}')

        if options.check_mixed_languages:
            mixed = detect_mixed_languages(value, options.mixed_threshold)
            mixed_language_checks[field_name] = mixed
            if mixed.is_mixed and mixed.warning:
                warnings.append(f'Field "{field_name}": {mixed.warning}')

    return DocumentValidationResult(
        is_valid=not warnings,
        locale=status.current_locale,
        warnings=warnings,
        details=ValidationDetails(
            field_validations=field_validations,
            mixed_language_checks=mixed_language_checks,
            localization_status=status,
        ),
    )


def record_warning_metrics(result: DocumentValidationResult, strict_mode: bool = False) -> None:
    """Count warnings by kind for /metrics"""
    details = result.details
    if details.localization_status.inherited_from:
        LANGUAGE_WARNING_TOTAL.labels(kind="strict" if strict_mode else "fallback").inc()
    for validation in details.field_validations.values():
        if not validation.is_valid:
            LANGUAGE_WARNING_TOTAL.labels(kind="mismatch").inc()
    for mixed in details.mixed_language_checks.values():
        if mixed.is_mixed:
            LANGUAGE_WARNING_TOTAL.labels(kind="mixed").inc()


def format_validation_results(result: DocumentValidationResult) -> str:
    """Human-readable narrative appended to tool output"""
    lines = [
        "",
        "📋 Language validation:",
        f"   Current locale: {result.locale}",
        f"   Status: {'✅ Valid' if result.is_valid else '⚠️ Warnings detected'}",
    ]

    status = result.details.localization_status
    lines += [
        "",
        "🌐 Localization status:",
        f"   Own translation: {'Yes' if status.is_own_translation else 'No'}",
        f"   Available locales: {', '.join(status.available_locales)}",
    ]
    if status.inherited_from:
        lines.append(f"   ⚠️ Inherited from: {status.inherited_from}")

    if result.warnings:
        lines += ["", "⚠️ Warnings:"]
        lines += [f"   {warning}" for warning in result.warnings]

    return "\n".join(lines)
