"""
Tool registry + Strapi tools over a fake client
"""

import asyncio
import json

import pytest
import structlog
from pydantic import BaseModel

from strapi_tools.config import get_settings
from strapi_tools.strapi.client import StrapiError
from strapi_tools.tools.base import BaseTool, ToolResult
from strapi_tools.tools.builtin_tools import create_strapi_registry
from strapi_tools.tools.registry import ToolRegistry

EXPECTED_TOOLS = {
    "strapi-create",
    "strapi-create-with-locales",
    "strapi-read",
    "strapi-list",
    "strapi-update",
    "strapi-delete",
    "strapi-get-schema",
    "strapi-list-content-types",
    "strapi-add-field",
    "strapi-get-i18n-locales",
    "strapi-search-media",
    "strapi-get-media",
    "strapi-upload-media",
}


@pytest.fixture
def registry(fake_client) -> ToolRegistry:
    return create_strapi_registry(fake_client)


# ── Registry ──

class _NoParams(BaseModel):
    pass


class _SlowTool(BaseTool):
    name = "slow"
    description = "sleeps"
    params_model = _NoParams

    @property
    def timeout_ms(self) -> int:
        return 10

    async def execute(self, args: dict) -> ToolResult:
        await asyncio.sleep(1)
        return ToolResult.success()


class _BrokenTool(BaseTool):
    name = "broken"
    description = "raises"
    params_model = _NoParams

    async def execute(self, args: dict) -> ToolResult:
        raise RuntimeError("kaboom")


class _ContextTool(BaseTool):
    name = "context"
    description = "reports bound log context"
    params_model = _NoParams

    async def execute(self, args: dict) -> ToolResult:
        return ToolResult.success(bound=structlog.contextvars.get_contextvars())


class _CancelledTool(BaseTool):
    name = "cancelled"
    description = "cancelled"
    params_model = _NoParams

    async def execute(self, args: dict) -> ToolResult:
        raise asyncio.CancelledError()


class TestToolRegistry:
    """Registration, schemas, dispatch"""

    def test_all_tools_registered(self, registry):
        assert set(registry.tool_names) == EXPECTED_TOOLS
        assert registry.tool_count == len(EXPECTED_TOOLS)

    def test_schemas_are_function_calling_format(self, registry):
        schema = next(
            s for s in registry.get_all_schemas() if s["function"]["name"] == "strapi-read"
        )

        parameters = schema["function"]["parameters"]
        assert schema["type"] == "function"
        assert parameters["required"] == ["content_type", "document_id"]
        assert "title" not in parameters["properties"]["locale"]

    def test_nested_models_keep_defs(self, registry):
        schema = registry.get_schemas(["strapi-create-with-locales"])[0]

        assert "LocalizationParams" in schema["function"]["parameters"]["$defs"]

    def test_get_schemas_ignores_unknown(self, registry):
        assert len(registry.get_schemas(["strapi-read", "nope"])) == 1

    @pytest.mark.asyncio
    async def test_unknown_tool(self, registry):
        result = await registry.execute("strapi-nope", {})

        assert result.status == "error"
        assert result.error == "Unknown tool: strapi-nope"

    @pytest.mark.asyncio
    async def test_invalid_arguments(self, registry):
        result = await registry.execute("strapi-read", {"content_type": "articles"})

        assert result.status == "error"
        assert result.error.startswith("Invalid arguments for strapi-read")

    @pytest.mark.asyncio
    async def test_timeout(self):
        registry = ToolRegistry()
        registry.register(_SlowTool())

        result = await registry.execute("slow", {})

        assert result.status == "error"
        assert "timed out" in result.error

    @pytest.mark.asyncio
    async def test_unexpected_exception(self):
        registry = ToolRegistry()
        registry.register(_BrokenTool())

        result = await registry.execute("broken", None)

        assert result.error == "Tool execution failed: kaboom"

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self):
        registry = ToolRegistry()
        registry.register(_CancelledTool())

        with pytest.raises(asyncio.CancelledError):
            await registry.execute("cancelled", {})

    @pytest.mark.asyncio
    async def test_tool_name_bound_to_log_context_during_call(self):
        registry = ToolRegistry()
        registry.register(_ContextTool())

        result = await registry.execute("context", {})

        assert result.data["bound"]["tool"] == "context"
        assert "tool" not in structlog.contextvars.get_contextvars()

    @pytest.mark.asyncio
    async def test_execute_json(self, registry, fake_client):
        fake_client.delete.return_value = {}

        payload = json.loads(
            await registry.execute_json("strapi-delete", {"content_type": "articles", "document_id": "d1"})
        )

        assert payload["status"] == "success"
        assert payload["deleted_document_id"] == "d1"


# ── Entry tools ──

class TestReadTool:
    @pytest.mark.asyncio
    async def test_strict_mode_rejects_fallback(self, registry, fake_client, spanish_fallback_document):
        fake_client.read.return_value = {"data": spanish_fallback_document}

        result = await registry.execute(
            "strapi-read",
            {"content_type": "articles", "document_id": "doc-es", "locale": "ca", "strict_mode": True},
        )

        assert result.status == "error"
        assert "Strict mode" in result.error
        assert "Inherited from: es" in result.error
        assert result.data["validation"]["is_valid"] is False

    @pytest.mark.asyncio
    async def test_fallback_is_reported_without_strict_mode(self, registry, fake_client, spanish_fallback_document):
        fake_client.read.return_value = {"data": spanish_fallback_document}

        result = await registry.execute(
            "strapi-read", {"content_type": "articles", "document_id": "doc-es", "locale": "ca"}
        )

        assert result.ok
        assert result.data["validation"]["details"]["localization_status"]["inherited_from"] == "es"
        assert "Inherited from: es" in result.data["summary"]
        assert fake_client.read.await_args.kwargs["locale"] == "ca"

    @pytest.mark.asyncio
    async def test_without_locale_skips_validation(self, registry, fake_client, english_document):
        fake_client.read.return_value = {"data": english_document}

        result = await registry.execute("strapi-read", {"content_type": "articles", "document_id": "doc-en"})

        assert result.ok
        assert result.data["validation"] is None
        assert result.data["data"] == english_document

    @pytest.mark.asyncio
    async def test_backend_error(self, registry, fake_client):
        fake_client.read.side_effect = StrapiError("Not Found", status_code=404)

        result = await registry.execute("strapi-read", {"content_type": "articles", "document_id": "x"})

        assert result.status == "error"
        assert result.error == "Error reading entry x from articles: Not Found"


class TestListTool:
    @pytest.mark.asyncio
    async def test_localization_summary(self, registry, fake_client, english_document, spanish_fallback_document):
        fake_client.list_entries.return_value = {
            "data": [english_document, spanish_fallback_document],
            "meta": {"pagination": {"total": 2}},
        }

        result = await registry.execute(
            "strapi-list",
            {"content_type": "articles", "locale": "en", "pagination": {"page": 1, "page_size": 5}},
        )

        assert result.ok
        assert result.data["count"] == 2
        summary = result.data["localization_summary"]
        assert summary[0]["available_locales"] == ["en", "es", "ca"]
        assert summary[1]["inherited_from"] == "es"
        assert fake_client.list_entries.await_args.kwargs["pagination"] == {"page": 1, "pageSize": 5}

    @pytest.mark.asyncio
    async def test_summary_can_be_disabled(self, registry, fake_client, english_document):
        fake_client.list_entries.return_value = {"data": [english_document], "meta": {}}

        result = await registry.execute(
            "strapi-list", {"content_type": "articles", "show_localization_summary": False}
        )

        assert result.data["localization_summary"] == []


class TestUpdateTool:
    @pytest.mark.asyncio
    async def test_strict_mode_rejects_mixed_payload_before_writing(self, registry, fake_client):
        result = await registry.execute(
            "strapi-update",
            {
                "content_type": "articles",
                "document_id": "doc-en",
                "locale": "en",
                "strict_mode": True,
                "data": {"description": "the gato is muy nice today"},
            },
        )

        assert result.status == "error"
        assert len(result.data["pre_update_warnings"]) == 1
        fake_client.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_non_strict_update_reports_warnings(self, registry, fake_client):
        fake_client.update.return_value = {
            "data": {"documentId": "doc-en", "locale": "en", "description": "the gato is muy nice today"}
        }

        result = await registry.execute(
            "strapi-update",
            {
                "content_type": "articles",
                "document_id": "doc-en",
                "locale": "en",
                "data": {"description": "the gato is muy nice today"},
            },
        )

        assert result.ok
        assert result.data["pre_update_warnings"][0].startswith('Field "description"')
        assert result.data["validation"]["is_valid"] is False
        assert fake_client.update.await_args.kwargs["locale"] == "en"

    @pytest.mark.asyncio
    async def test_without_locale_no_checks(self, registry, fake_client):
        fake_client.update.return_value = {"data": {"documentId": "d1"}}

        result = await registry.execute(
            "strapi-update",
            {"content_type": "articles", "document_id": "d1", "data": {"description": "the gato is muy nice today"}},
        )

        assert result.ok
        assert result.data["validation"] is None
        assert result.data["pre_update_warnings"] is None


class TestCreateTool:
    @pytest.mark.asyncio
    async def test_missing_required_fields(self, registry, fake_client):
        fake_client.get_content_type.return_value = {
            "data": {"schema": {"attributes": {
                "name": {"type": "string", "required": True},
                "price": {"type": "decimal", "required": True, "min": 0},
                "notes": {"type": "text"},
            }}}
        }

        result = await registry.execute("strapi-create", {"content_type": "products", "data": {"name": "Silla"}})

        assert result.status == "error"
        assert result.data["missing_required_fields"] == ["price"]
        fake_client.get_content_type.assert_awaited_with("api::product.product")
        fake_client.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_schema_unavailable_still_creates(self, registry, fake_client):
        fake_client.get_content_type.side_effect = StrapiError("Forbidden", status_code=403)
        fake_client.create.return_value = {"data": {"documentId": "doc1", "name": "Silla"}}

        result = await registry.execute(
            "strapi-create", {"content_type": "products", "data": {"name": "Silla"}, "locale": "es"}
        )

        assert result.ok
        assert result.data["document_id"] == "doc1"
        assert fake_client.create.await_args.kwargs["locale"] == "es"

    @pytest.mark.asyncio
    async def test_validation_error_hint(self, registry, fake_client):
        fake_client.create.side_effect = StrapiError("2 errors occurred", status_code=400)

        result = await registry.execute("strapi-create", {"content_type": "products", "data": {"name": "Silla"}})

        assert result.status == "error"
        assert "strapi-get-schema" in result.error


class TestCreateWithLocalesTool:
    @pytest.mark.asyncio
    async def test_success_output(self, registry, fake_client):
        fake_client.create.return_value = {"data": {"documentId": "doc1", "locale": "es", "name": "Silla"}}
        fake_client.update.return_value = {"data": {"documentId": "doc1", "locale": "en", "name": "Chair"}}

        result = await registry.execute(
            "strapi-create-with-locales",
            {
                "content_type": "products",
                "default_locale": "es-ES",
                "data": {"name": "Silla"},
                "localizations": [{"locale": "en", "data": {"name": "Chair"}}, {"locale": "xx-XX", "data": {"a": 1}}],
            },
        )

        assert result.ok
        assert result.data["default_locale"] == "es"
        assert result.data["used_locales"] == ["es", "en"]
        assert result.data["locales_created"] == 2
        assert result.data["main_entry"]["document_id"] == "doc1"
        assert len(result.data["skipped"]) == 1

    @pytest.mark.asyncio
    async def test_failure_carries_partial_state(self, registry, fake_client):
        fake_client.create.return_value = {"data": {"documentId": "doc1", "locale": "es"}}
        fake_client.update.side_effect = StrapiError("This attribute must be unique", status_code=400)

        result = await registry.execute(
            "strapi-create-with-locales",
            {
                "content_type": "products",
                "default_locale": "es",
                "data": {"name": "Silla"},
                "localizations": [{"locale": "en", "data": {"name": "Chair"}}],
            },
        )

        assert result.status == "error"
        assert result.data["failed_state"] == "update_each_locale"
        assert result.data["partial"]["document_id"] == "doc1"
        assert result.data["partial"]["used_locales"] == ["es"]
        assert "not rolled back" in result.error
        assert "UNIQUE" in result.error

    @pytest.mark.asyncio
    async def test_slow_locale_write_still_reports_partial(self, registry, fake_client, monkeypatch):
        monkeypatch.setenv("DEFAULT_TOOL_TIMEOUT_MS", "100")
        get_settings.cache_clear()
        fake_client.create.return_value = {"data": {"documentId": "doc1", "locale": "es"}}

        async def update(content_type, document_id, data, populate=None, locale=None):
            if locale == "ca":
                await asyncio.sleep(1)
            return {"data": {"documentId": document_id, "locale": locale, **data}}

        fake_client.update.side_effect = update

        result = await registry.execute(
            "strapi-create-with-locales",
            {
                "content_type": "products",
                "default_locale": "es",
                "data": {"name": "Silla"},
                "localizations": [
                    {"locale": "en", "data": {"name": "Chair"}},
                    {"locale": "ca", "data": {"name": "Cadira"}},
                ],
            },
        )

        assert result.status == "error"
        assert result.data["timed_out"] is True
        assert result.data["failed_state"] == "update_each_locale"
        assert result.data["partial"]["document_id"] == "doc1"
        assert result.data["partial"]["used_locales"] == ["es", "en"]
        assert "UNIQUE" not in result.error


# ── Schema / i18n / media tools ──

class TestSchemaTools:
    @pytest.mark.asyncio
    async def test_get_schema_splits_fields(self, registry, fake_client):
        fake_client.get_content_type.return_value = {
            "data": {"schema": {
                "displayName": "Product",
                "pluralName": "products",
                "singularName": "product",
                "attributes": {
                    "name": {"type": "string", "required": True, "unique": True},
                    "color": {"type": "enumeration", "enum": ["red", "blue"]},
                },
            }}
        }

        result = await registry.execute("strapi-get-schema", {"content_type": "api::product.product"})

        assert result.ok
        assert [f["name"] for f in result.data["required_fields"]] == ["name"]
        assert result.data["required_fields"][0]["unique"] is True
        assert result.data["optional_fields"][0]["enum"] == ["red", "blue"]
        assert result.data["total_fields"] == 2

    @pytest.mark.asyncio
    async def test_get_schema_not_found(self, registry, fake_client):
        fake_client.get_content_type.return_value = {"data": {}}

        result = await registry.execute("strapi-get-schema", {"content_type": "api::nope.nope"})

        assert result.status == "error"
        assert "strapi-list-content-types" in result.error

    @pytest.mark.asyncio
    async def test_add_field_rejects_unknown_type(self, registry, fake_client):
        result = await registry.execute(
            "strapi-add-field",
            {"content_type": "api::product.product", "field_name": "x", "field_type": "hologram"},
        )

        assert result.status == "error"
        fake_client.add_field_to_content_type.assert_not_awaited()


class TestI18nLocalesTool:
    @pytest.mark.asyncio
    async def test_lists_locales(self, registry):
        result = await registry.execute("strapi-get-i18n-locales", {})

        assert result.ok
        assert result.data["count"] == 3
        assert result.data["locales"][0] == {"id": 1, "code": "es", "name": "Spanish (es)", "is_default": True}

    @pytest.mark.asyncio
    async def test_unexpected_shape(self, registry, fake_client):
        fake_client.get_i18n_locales.return_value = {"weird": 1}

        result = await registry.execute("strapi-get-i18n-locales", {})

        assert result.status == "error"


class TestMediaTools:
    @pytest.mark.asyncio
    async def test_search_accepts_bare_list(self, registry, fake_client):
        fake_client.search_media.return_value = [
            {"id": 2, "name": "chair.png", "mime": "image/png", "size": 12.5, "url": "/uploads/chair.png"}
        ]

        result = await registry.execute("strapi-search-media", {"search": "chair"})

        assert result.ok
        assert result.data["count"] == 1
        assert "chair.png" in result.data["summary"]

    @pytest.mark.asyncio
    async def test_get_media_by_numeric_id(self, registry, fake_client):
        fake_client.get_media.return_value = {"id": 2, "name": "chair.png"}

        result = await registry.execute("strapi-get-media", {"id": 2})

        assert result.ok
        fake_client.get_media.assert_awaited_once_with(2)

    @pytest.mark.asyncio
    async def test_upload_error(self, registry, fake_client):
        fake_client.upload_media.side_effect = StrapiError("File not found: /tmp/nope.png")

        result = await registry.execute("strapi-upload-media", {"file_path": "/tmp/nope.png"})

        assert result.status == "error"
        assert "File not found" in result.error
