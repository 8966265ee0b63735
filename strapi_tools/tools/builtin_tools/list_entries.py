"""
strapi-list: list entries with filters / sort / pagination, plus a per-entry
localization summary
"""

from typing import Any

import structlog
from pydantic import BaseModel, Field

from strapi_tools.i18n.localization import analyze_localization_status
from strapi_tools.strapi.client import StrapiClient, StrapiError
from strapi_tools.tools.base import BaseTool, ToolResult
from strapi_tools.tools.builtin_tools._shared import (
    CONTENT_TYPE_DESCRIPTION,
    LOCALE_DESCRIPTION,
    POPULATE_DESCRIPTION,
    Pagination,
    entry_id,
    locale_suffix,
    pretty,
)

log = structlog.get_logger()


class ListParams(BaseModel):
    content_type: str = Field(description=CONTENT_TYPE_DESCRIPTION)
    filters: dict[str, Any] | None = Field(default=None, description="Strapi filters")
    sort: list[str] | None = Field(default=None, description='Sort fields (e.g. ["createdAt:desc"])')
    pagination: Pagination | None = Field(default=None, description="Pagination")
    fields: list[str] | None = Field(default=None, description="Only return these fields")
    populate: list[str] | None = Field(default=None, description=POPULATE_DESCRIPTION)
    locale: str | None = Field(default=None, description=LOCALE_DESCRIPTION)
    show_localization_summary: bool = Field(
        default=True,
        description="Add the available locales of each entry to the output",
    )


class StrapiListTool(BaseTool):
    """List entries of a content type"""

    def __init__(self, client: StrapiClient):
        self._client = client

    @property
    def name(self) -> str:
        return "strapi-list"

    @property
    def description(self) -> str:
        return (
            "List entries of a Strapi content type with optional filters, sorting and "
            "pagination. Shows which locales each entry has and flags fallback content."
        )

    @property
    def params_model(self) -> type[BaseModel]:
        return ListParams

    async def execute(self, args: dict) -> ToolResult:
        params: ListParams = self.parse(args)
        log.info("list entries", content_type=params.content_type, locale=params.locale)

        try:
            response = await self._client.list_entries(
                params.content_type,
                filters=params.filters,
                sort=params.sort,
                pagination=params.pagination.to_strapi() if params.pagination else None,
                fields=params.fields,
                populate=params.populate,
                locale=params.locale,
            )
        except StrapiError as e:
            return ToolResult.fail(f"Error listing entries from {params.content_type}: {e.message}")

        entries = response.get("data") or []
        summaries = []
        summary_text = ""

        if params.show_localization_summary and entries:
            lines = ["", "", "🌐 Localization summary:"]
            for index, item in enumerate(entries):
                status = analyze_localization_status(item, params.locale)
                item_id = entry_id(item) or index
                summaries.append({"id": item_id, **status.model_dump()})
                lines.append(
                    f"\n📄 Entry {item_id}:"
                    f"\n   Current locale: {status.current_locale}"
                    f"\n   Available translations: {', '.join(status.available_locales)}"
                    f"\n   Own translation: {'✅ Yes' if status.is_own_translation else '⚠️ No (inherited)'}"
                    + (f"\n   ⚠️ Inherited from: {status.inherited_from}" if status.inherited_from else "")
                )
            summary_text = "\n".join(lines)

        output = {
            "data": entries,
            "meta": response.get("meta"),
            "count": len(entries),
            "localization_summary": summaries,
        }
        return ToolResult.success(
            summary=(
                f"Successfully listed {len(entries)} entries from {params.content_type}"
                f"{locale_suffix(params.locale)}{summary_text}\n\n{pretty(output)}"
            ),
            **output,
        )
