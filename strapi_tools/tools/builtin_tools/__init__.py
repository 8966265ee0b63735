"""
Strapi tool set: registers every tool against one shared StrapiClient

Usage:
    from strapi_tools.tools.builtin_tools import create_strapi_registry
    registry = create_strapi_registry(client)
"""

from strapi_tools.strapi.client import StrapiClient
from strapi_tools.tools.builtin_tools.create import StrapiCreateTool
from strapi_tools.tools.builtin_tools.create_with_locales import StrapiCreateWithLocalesTool
from strapi_tools.tools.builtin_tools.delete import StrapiDeleteTool
from strapi_tools.tools.builtin_tools.get_i18n_locales import StrapiGetI18nLocalesTool
from strapi_tools.tools.builtin_tools.list_entries import StrapiListTool
from strapi_tools.tools.builtin_tools.media import (
    StrapiGetMediaTool,
    StrapiSearchMediaTool,
    StrapiUploadMediaTool,
)
from strapi_tools.tools.builtin_tools.read import StrapiReadTool
from strapi_tools.tools.builtin_tools.schema_tools import (
    StrapiAddFieldTool,
    StrapiGetSchemaTool,
    StrapiListContentTypesTool,
)
from strapi_tools.tools.builtin_tools.update import StrapiUpdateTool
from strapi_tools.tools.registry import ToolRegistry


def create_strapi_registry(client: StrapiClient) -> ToolRegistry:
    """Registry with all Strapi tools bound to ``client``"""
    registry = ToolRegistry()

    # ── Entries ──
    registry.register(StrapiCreateTool(client))
    registry.register(StrapiCreateWithLocalesTool(client))
    registry.register(StrapiReadTool(client))
    registry.register(StrapiListTool(client))
    registry.register(StrapiUpdateTool(client))
    registry.register(StrapiDeleteTool(client))

    # ── Schema / i18n ──
    registry.register(StrapiGetSchemaTool(client))
    registry.register(StrapiListContentTypesTool(client))
    registry.register(StrapiAddFieldTool(client))
    registry.register(StrapiGetI18nLocalesTool(client))

    # ── Media library ──
    registry.register(StrapiSearchMediaTool(client))
    registry.register(StrapiGetMediaTool(client))
    registry.register(StrapiUploadMediaTool(client))

    return registry
