"""
strapi-create-with-locales: one entry, several locale variants, one documentId

Thin adapter over MultiLocaleCreation. On failure the result is an error that
still carries `partial`: whatever the workflow committed before failing (base
entry and applied locales) stays in Strapi and is reported, not rolled back.
"""

from typing import Any

import structlog
from pydantic import BaseModel, Field

from strapi_tools.i18n.reconciler import LocaleVariant
from strapi_tools.strapi.client import StrapiClient
from strapi_tools.tools.base import BaseTool, ToolResult
from strapi_tools.tools.builtin_tools._shared import CONTENT_TYPE_DESCRIPTION, POPULATE_DESCRIPTION, pretty
from strapi_tools.workflows.create_with_locales import (
    LocaleWorkflowError,
    MultiLocaleCreation,
    WorkflowState,
)

log = structlog.get_logger()

# the rest of the registry timeout is left for reporting partial state
_WORKFLOW_BUDGET_SHARE = 0.8

_UNIQUE_FIELD_HINT = (
    "💡 HINTS:\n"
    '1. "This attribute must be unique": in Strapi v5 i18n, UNIQUE fields (often "name" '
    'or "slug") must be IDENTICAL in every locale. Keep them equal in data and in '
    'localizations and only translate fields such as "description".\n'
    "2. Use strapi-get-schema to see which fields are UNIQUE.\n"
    '3. Locales adapt to what Strapi has: "es-ES" becomes "es" when only "es" exists; '
    "unknown or duplicate locales are skipped."
)


class LocalizationParams(BaseModel):
    locale: str = Field(description='Locale code (e.g. "en", "ca")')
    data: dict[str, Any] = Field(description="Entry data in this locale")


class CreateWithLocalesParams(BaseModel):
    content_type: str = Field(description=CONTENT_TYPE_DESCRIPTION)
    default_locale: str = Field(description='Default locale (e.g. "es-ES")')
    data: dict[str, Any] = Field(description="Entry data in the default locale")
    localizations: list[LocalizationParams] | None = Field(
        default=None,
        description="Additional locales with their data",
    )
    populate: list[str] | None = Field(default=None, description=POPULATE_DESCRIPTION)


class StrapiCreateWithLocalesTool(BaseTool):
    """Create a multilingual entry"""

    def __init__(self, client: StrapiClient):
        self._client = client
        self._workflow = MultiLocaleCreation(client)

    @property
    def name(self) -> str:
        return "strapi-create-with-locales"

    @property
    def description(self) -> str:
        return (
            "Create ONE Strapi entry with several locales sharing the same documentId. "
            "The entry is created in the default locale, then updated once per extra locale. "
            "Requested locales are adapted to the ones configured in Strapi "
            '(e.g. "es-ES" -> "es"); unknown or duplicate locales are skipped. '
            "UNIQUE fields must have the same value in every locale."
        )

    @property
    def params_model(self) -> type[BaseModel]:
        return CreateWithLocalesParams

    @property
    def risk_level(self) -> str:
        return "write"

    @property
    def timeout_ms(self) -> int:
        # one request per locale plus the locale listing
        return super().timeout_ms * 2

    async def execute(self, args: dict) -> ToolResult:
        params: CreateWithLocalesParams = self.parse(args)
        variants = [LocaleVariant(locale=loc.locale, data=loc.data) for loc in params.localizations or []]

        try:
            result = await self._workflow.run(
                params.content_type,
                params.default_locale,
                params.data,
                localizations=variants,
                populate=params.populate,
                budget_s=self.timeout_ms / 1000 * _WORKFLOW_BUDGET_SHARE,
            )
        except LocaleWorkflowError as e:
            log.warning(
                "create-with-locales failed",
                content_type=params.content_type,
                failed_state=e.failed_state.value,
                committed_locales=e.partial.used_locales,
                timed_out=e.timed_out,
            )
            partial = e.partial.to_dict()
            committed = ""
            if e.partial.document_id:
                committed = (
                    f"\n\n⚠️ Already committed in Strapi (not rolled back): entry "
                    f"{e.partial.document_id} in locales {', '.join(e.partial.used_locales)}"
                )
            hint = f"\n\n{_UNIQUE_FIELD_HINT}" if not e.timed_out and e.failed_state in (
                WorkflowState.CREATE_BASE,
                WorkflowState.UPDATE_EACH_LOCALE,
            ) else ""
            return ToolResult.fail(
                f"Error creating entry with locales in {params.content_type}:\n\n{e.message}{committed}{hint}",
                failed_state=e.failed_state.value,
                timed_out=e.timed_out,
                partial=partial,
            )

        output = {
            "default_locale": result.default_locale,
            "message": "Entry created successfully with all localizations",
            "locales_created": result.locales_created,
            "available_locales": result.available_locales,
            "used_locales": result.used_locales,
            "main_entry": {
                "document_id": result.document_id,
                "locale": result.default_locale,
                "data": result.main_entry,
            },
            "localizations": [
                {"locale": loc.locale, "document_id": loc.document_id, "data": loc.data}
                for loc in result.localizations
            ],
            "skipped": result.skipped,
            "notices": result.notices,
        }
        return ToolResult.success(
            summary=f"✅ Successfully created entry with locales in {params.content_type}\n\n{pretty(output)}",
            **output,
        )
