"""
i18n data structures

All models are transient: computed per tool invocation, never persisted.
"""

from pydantic import BaseModel, Field


class DetectionResult(BaseModel):
    """Primary language of a text"""
    detected_language: str | None = None               # None = no signal
    confidence: int = 0                                # 0-100
    language_scores: dict[str, int] = Field(default_factory=dict)


class MixedLanguageResult(BaseModel):
    """Languages with significant presence in a text"""
    is_mixed: bool = False
    languages: list[str] = Field(default_factory=list)  # descending score
    scores: dict[str, int] = Field(default_factory=dict)
    warning: str | None = None


class LocalizationStatus(BaseModel):
    """Which locale a fetched document really is, and which variants it links to"""
    document_id: str | int | None = None
    current_locale: str
    is_own_translation: bool
    available_locales: list[str] = Field(default_factory=list)
    inherited_from: str | None = None                  # set only on fallback
    warning: str | None = None


class ValidationOptions(BaseModel):
    """Document validation knobs"""
    check_mixed_languages: bool = True
    minimum_confidence: int = Field(default=30, ge=0, le=100)
    strict_mode: bool = False
    mixed_threshold: float = Field(default=0.15, gt=0, le=1)


class ContentLanguageValidation(BaseModel):
    """Per-field language check"""
    is_valid: bool
    expected_language: str
    detected_language: str | None = None
    confidence: int = 0
    warning: str | None = None


class ValidationDetails(BaseModel):
    field_validations: dict[str, ContentLanguageValidation] = Field(default_factory=dict)
    mixed_language_checks: dict[str, MixedLanguageResult] = Field(default_factory=dict)
    localization_status: LocalizationStatus


class DocumentValidationResult(BaseModel):
    """Aggregated language validation of one document"""
    is_valid: bool
    locale: str
    warnings: list[str] = Field(default_factory=list)
    details: ValidationDetails
