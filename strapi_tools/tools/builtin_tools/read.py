"""
strapi-read: read one entry, with language validation when a locale is given

strict_mode turns any validation warning (fallback locale, language mismatch,
mixed languages) into an error result.
"""

import structlog
from pydantic import BaseModel, Field

from strapi_tools.i18n.validator import (
    format_validation_results,
    record_warning_metrics,
    validate_document_language,
)
from strapi_tools.strapi.client import StrapiClient, StrapiError
from strapi_tools.tools.base import BaseTool, ToolResult
from strapi_tools.tools.builtin_tools._shared import (
    CONTENT_TYPE_DESCRIPTION,
    LOCALE_DESCRIPTION,
    POPULATE_DESCRIPTION,
    locale_suffix,
    pretty,
    validation_options,
)

log = structlog.get_logger()


class ReadParams(BaseModel):
    content_type: str = Field(description=CONTENT_TYPE_DESCRIPTION)
    document_id: str = Field(description="documentId of the entry (Strapi v5 string id)")
    fields: list[str] | None = Field(default=None, description="Only return these fields")
    populate: list[str] | None = Field(default=None, description=POPULATE_DESCRIPTION)
    locale: str | None = Field(default=None, description=LOCALE_DESCRIPTION)
    validate_language: bool = Field(
        default=True,
        description="Check that the content is in the requested locale's language",
    )
    strict_mode: bool = Field(
        default=False,
        description="Fail when the entry has no translation of its own and a fallback is returned",
    )


class StrapiReadTool(BaseTool):
    """Read one entry by documentId"""

    def __init__(self, client: StrapiClient):
        self._client = client

    @property
    def name(self) -> str:
        return "strapi-read"

    @property
    def description(self) -> str:
        return (
            "Read one Strapi entry by documentId. With a locale, the content is checked "
            "for fallback translations and language mismatches."
        )

    @property
    def params_model(self) -> type[BaseModel]:
        return ReadParams

    async def execute(self, args: dict) -> ToolResult:
        params: ReadParams = self.parse(args)
        log.info("read entry", content_type=params.content_type, document_id=params.document_id, locale=params.locale)

        try:
            response = await self._client.read(
                params.content_type,
                params.document_id,
                fields=params.fields,
                populate=params.populate,
                locale=params.locale,
            )
        except StrapiError as e:
            return ToolResult.fail(
                f"Error reading entry {params.document_id} from {params.content_type}: {e.message}"
            )

        entry = response.get("data") or {}
        validation = None
        validation_message = ""

        if params.validate_language and params.locale:
            validation = validate_document_language(
                entry, params.locale, validation_options(strict_mode=params.strict_mode)
            )
            record_warning_metrics(validation, strict_mode=params.strict_mode)

            if params.strict_mode and not validation.is_valid:
                log.warning(
                    "strict read rejected",
                    document_id=params.document_id,
                    requested_locale=params.locale,
                    returned_locale=validation.locale,
                )
                return ToolResult.fail(
                    f"❌ Strict mode error reading {params.document_id} from {params.content_type}:"
                    f"{format_validation_results(validation)}",
                    validation=validation.model_dump(),
                )

            validation_message = format_validation_results(validation)

        output = {
            "data": entry,
            "validation": validation.model_dump() if validation else None,
        }
        return ToolResult.success(
            summary=(
                f"Successfully read entry {params.document_id} from {params.content_type}"
                f"{locale_suffix(params.locale)}{validation_message}\n\n{pretty(output)}"
            ),
            **output,
        )
