"""
strapi-update: partial update of one entry, optionally in a specific locale

With a locale and validate_before_update (default):
1. pre-update: mixed-language check on the incoming text fields;
   strict_mode rejects here, before anything is written
2. update
3. post-update: full document validation (never strict, the write already
   happened); reported only when it found warnings
"""

from typing import Any

import structlog
from pydantic import BaseModel, Field

from strapi_tools.i18n.detector import detect_mixed_languages
from strapi_tools.i18n.validator import (
    extract_text_fields,
    format_validation_results,
    record_warning_metrics,
    validate_document_language,
)
from strapi_tools.observability.metrics import LANGUAGE_WARNING_TOTAL
from strapi_tools.strapi.client import StrapiClient, StrapiError
from strapi_tools.tools.base import BaseTool, ToolResult
from strapi_tools.tools.builtin_tools._shared import (
    CONTENT_TYPE_DESCRIPTION,
    POPULATE_DESCRIPTION,
    entry_id,
    locale_suffix,
    pretty,
    validation_options,
)

log = structlog.get_logger()


class UpdateParams(BaseModel):
    content_type: str = Field(description=CONTENT_TYPE_DESCRIPTION)
    document_id: str = Field(
        description=(
            "REQUIRED: documentId of the entry to update. ALWAYS ask the user for this id "
            "before updating. Example: 'abc123xyz'"
        ),
    )
    data: dict[str, Any] = Field(description="Fields to change (partial update)")
    populate: list[str] | None = Field(default=None, description=POPULATE_DESCRIPTION)
    locale: str | None = Field(
        default=None,
        description='Locale of the localization to update (e.g. "en", "es", "ca")',
    )
    validate_before_update: bool = Field(default=True, description="Check languages before and after updating")
    strict_mode: bool = Field(default=False, description="Refuse the update on language inconsistencies")


class StrapiUpdateTool(BaseTool):
    """Update an entry by documentId"""

    def __init__(self, client: StrapiClient):
        self._client = client

    @property
    def name(self) -> str:
        return "strapi-update"

    @property
    def description(self) -> str:
        return (
            "Update an existing Strapi entry by documentId (partial update). With a locale, "
            "only that localization is changed and the new text is checked for mixed languages."
        )

    @property
    def params_model(self) -> type[BaseModel]:
        return UpdateParams

    @property
    def risk_level(self) -> str:
        return "write"

    def _pre_update_warnings(self, data: dict[str, Any]) -> list[str]:
        threshold = validation_options().mixed_threshold
        warnings = []
        for field_name, value in extract_text_fields(data).items():
            mixed = detect_mixed_languages(value, threshold)
            if mixed.is_mixed and mixed.warning:
                warnings.append(f'Field "{field_name}": {mixed.warning}')
                LANGUAGE_WARNING_TOTAL.labels(kind="mixed").inc()
        return warnings

    async def execute(self, args: dict) -> ToolResult:
        params: UpdateParams = self.parse(args)
        log.info("update entry", content_type=params.content_type, document_id=params.document_id, locale=params.locale)

        checks_enabled = params.validate_before_update and params.locale
        pre_warnings = self._pre_update_warnings(params.data) if checks_enabled else []
        for warning in pre_warnings:
            log.warning("pre-update language warning", document_id=params.document_id, warning=warning)

        if params.strict_mode and pre_warnings:
            return ToolResult.fail(
                "❌ Strict mode: update refused because of language inconsistencies:\n\n"
                + "\n".join(pre_warnings)
                + "\n\nPlease fix the content before updating.",
                pre_update_warnings=pre_warnings,
            )

        try:
            response = await self._client.update(
                params.content_type,
                params.document_id,
                params.data,
                populate=params.populate,
                locale=params.locale,
            )
        except StrapiError as e:
            return ToolResult.fail(
                f"Error updating entry {params.document_id} in {params.content_type}: {e.message}"
            )

        entry = response.get("data") or {}
        validation = None
        validation_message = ""
        if checks_enabled:
            validation = validate_document_language(entry, params.locale, validation_options(strict_mode=False))
            record_warning_metrics(validation)
            if not validation.is_valid:
                validation_message = format_validation_results(validation)

        warnings_message = ""
        if pre_warnings:
            warnings_message = "\n\n⚠️ Pre-update warnings:\n" + "\n".join(pre_warnings)

        output = {
            "data": entry,
            "document_id": entry_id(entry) or params.document_id,
            "validation": validation.model_dump() if validation else None,
            "pre_update_warnings": pre_warnings or None,
        }
        return ToolResult.success(
            summary=(
                f"Successfully updated entry {params.document_id} in {params.content_type}"
                f"{locale_suffix(params.locale)}{warnings_message}{validation_message}\n\n{pretty(output)}"
            ),
            **output,
        )
