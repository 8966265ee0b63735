"""
Multilingual content consistency: language detection, localization status,
document validation and locale reconciliation
"""

from strapi_tools.i18n.detector import Language, detect_language, detect_mixed_languages
from strapi_tools.i18n.localization import analyze_localization_status
from strapi_tools.i18n.reconciler import (
    EmptyLocalizationDataError,
    LocaleError,
    LocaleNotAvailableError,
    LocalesUnavailableError,
    LocaleVariant,
    parse_locale_codes,
    reconcile_locale,
    reconcile_localizations,
)
from strapi_tools.i18n.schemas import (
    DetectionResult,
    DocumentValidationResult,
    LocalizationStatus,
    MixedLanguageResult,
    ValidationOptions,
)
from strapi_tools.i18n.validator import (
    extract_text_fields,
    format_validation_results,
    validate_content_language,
    validate_document_language,
)

__all__ = [
    "DetectionResult",
    "DocumentValidationResult",
    "EmptyLocalizationDataError",
    "Language",
    "LocaleError",
    "LocaleNotAvailableError",
    "LocaleVariant",
    "LocalesUnavailableError",
    "LocalizationStatus",
    "MixedLanguageResult",
    "ValidationOptions",
    "analyze_localization_status",
    "detect_language",
    "detect_mixed_languages",
    "extract_text_fields",
    "format_validation_results",
    "parse_locale_codes",
    "reconcile_locale",
    "reconcile_localizations",
    "validate_content_language",
    "validate_document_language",
]
