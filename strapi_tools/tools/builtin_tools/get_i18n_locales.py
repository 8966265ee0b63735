"""
strapi-get-i18n-locales: locales configured in the Strapi i18n plugin
"""

from pydantic import BaseModel

from strapi_tools.i18n.reconciler import LocalesUnavailableError, parse_locale_entries
from strapi_tools.strapi.client import StrapiClient, StrapiError
from strapi_tools.tools.base import BaseTool, ToolResult
from strapi_tools.tools.builtin_tools._shared import pretty


class GetI18nLocalesParams(BaseModel):
    pass


class StrapiGetI18nLocalesTool(BaseTool):
    """Available i18n locales"""

    def __init__(self, client: StrapiClient):
        self._client = client

    @property
    def name(self) -> str:
        return "strapi-get-i18n-locales"

    @property
    def description(self) -> str:
        return "List the locales configured in Strapi's i18n plugin (code, name, default flag)."

    @property
    def params_model(self) -> type[BaseModel]:
        return GetI18nLocalesParams

    async def execute(self, args: dict) -> ToolResult:
        try:
            entries = parse_locale_entries(await self._client.get_i18n_locales())
        except (StrapiError, LocalesUnavailableError) as e:
            return ToolResult.fail(f"Error retrieving i18n locales: {e}")

        locales = [
            {
                "id": entry.get("id"),
                "code": entry.get("code"),
                "name": entry.get("name"),
                "is_default": bool(entry.get("isDefault")),
            }
            for entry in entries
        ]
        output = {"count": len(locales), "locales": locales}
        return ToolResult.success(
            summary=f"Successfully retrieved {len(locales)} i18n locales\n\n{pretty(output)}",
            **output,
        )
