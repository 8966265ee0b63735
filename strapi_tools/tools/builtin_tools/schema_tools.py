"""
Content-type builder tools: strapi-get-schema / strapi-list-content-types / strapi-add-field
"""

from typing import Any, Literal

import structlog
from pydantic import BaseModel, Field

from strapi_tools.strapi.client import StrapiClient, StrapiError
from strapi_tools.tools.base import BaseTool, ToolResult
from strapi_tools.tools.builtin_tools._shared import pretty

log = structlog.get_logger()

_FIELD_KEYS = ("type", "required", "unique", "default", "min", "max", "enum", "relation", "target")

FieldType = Literal[
    "string", "text", "richtext", "email", "password", "integer", "biginteger", "float",
    "decimal", "date", "time", "datetime", "timestamp", "boolean", "enumeration", "json", "uid",
]


def _field_info(name: str, config: dict[str, Any]) -> dict[str, Any]:
    info: dict[str, Any] = {"name": name}
    for key in _FIELD_KEYS:
        if config.get(key) is not None:
            info[key] = config[key]
    info.setdefault("required", False)
    info.setdefault("unique", False)
    return info


def _field_line(field: dict[str, Any], show_default: bool) -> str:
    detail = f"- {field['name']} ({field.get('type')})"
    if show_default and field.get("default") is not None:
        detail += f" - default: {field['default']}"
    if field.get("enum"):
        detail += f" - values: {', '.join(map(str, field['enum']))}"
    if not show_default and field.get("min") is not None:
        detail += f" - min: {field['min']}"
    if not show_default and field.get("max") is not None:
        detail += f" - max: {field['max']}"
    if field.get("relation"):
        detail += f" - relation {field['relation']} with {field.get('target')}"
    return detail


# ── strapi-get-schema ──

class GetSchemaParams(BaseModel):
    content_type: str = Field(description='Full content type UID (e.g. "api::product.product")')


class StrapiGetSchemaTool(BaseTool):
    """Required / optional fields of a content type"""

    def __init__(self, client: StrapiClient):
        self._client = client

    @property
    def name(self) -> str:
        return "strapi-get-schema"

    @property
    def description(self) -> str:
        return (
            "Get the schema of a Strapi content type: required and optional fields, types, "
            "enumerations, relations and UNIQUE constraints. Use before creating entries."
        )

    @property
    def params_model(self) -> type[BaseModel]:
        return GetSchemaParams

    async def execute(self, args: dict) -> ToolResult:
        params: GetSchemaParams = self.parse(args)
        hint = (
            '\n\n💡 Use the full UID, for example "api::product.product". '
            "To see every UID use strapi-list-content-types."
        )

        try:
            response = await self._client.get_content_type(params.content_type)
        except StrapiError as e:
            return ToolResult.fail(f"Error fetching schema for {params.content_type}: {e.message}{hint}")

        schema = (response.get("data") or {}).get("schema")
        if not schema:
            return ToolResult.fail(f"Error fetching schema for {params.content_type}: Schema not found{hint}")

        attributes = schema.get("attributes") or {}
        fields = [_field_info(name, config) for name, config in attributes.items()]
        required = [f for f in fields if f["required"]]
        optional = [f for f in fields if not f["required"]]

        output = {
            "content_type": params.content_type,
            "display_name": schema.get("displayName"),
            "plural_name": schema.get("pluralName"),
            "singular_name": schema.get("singularName"),
            "description": schema.get("description"),
            "required_fields": required,
            "optional_fields": optional,
            "total_fields": len(attributes),
        }
        summary = "\n".join([
            f"Schema of {schema.get('displayName')} ({params.content_type})",
            "",
            "📋 General:",
            f"- Plural name: {schema.get('pluralName')}",
            f"- Singular name: {schema.get('singularName')}",
            f"- Description: {schema.get('description') or 'N/A'}",
            f"- Total fields: {len(attributes)}",
            "",
            f"✅ Required fields ({len(required)}):",
            *[_field_line(f, show_default=False) for f in required],
            "",
            f"⚪ Optional fields ({len(optional)}):",
            *[_field_line(f, show_default=True) for f in optional],
            "",
            "💡 Provide the required fields above when creating an entry.",
        ])
        return ToolResult.success(summary=summary, **output)


# ── strapi-list-content-types ──

class ListContentTypesParams(BaseModel):
    pass


class StrapiListContentTypesTool(BaseTool):
    """Every content type known to Strapi"""

    def __init__(self, client: StrapiClient):
        self._client = client

    @property
    def name(self) -> str:
        return "strapi-list-content-types"

    @property
    def description(self) -> str:
        return "List all Strapi content types with their UID, API names and attribute names."

    @property
    def params_model(self) -> type[BaseModel]:
        return ListContentTypesParams

    async def execute(self, args: dict) -> ToolResult:
        try:
            response = await self._client.get_content_types()
        except StrapiError as e:
            return ToolResult.fail(f"Error fetching content types: {e.message}")

        content_types = []
        for ct in response.get("data") or []:
            schema = ct.get("schema") or {}
            content_types.append({
                "uid": ct.get("uid"),
                "api_id": ct.get("apiID"),
                "kind": ct.get("kind"),
                "display_name": schema.get("displayName") or ct.get("apiID"),
                "singular_name": schema.get("singularName"),
                "plural_name": schema.get("pluralName"),
                "attributes": list((schema.get("attributes") or {}).keys()),
            })

        output = {"count": len(content_types), "content_types": content_types}
        return ToolResult.success(
            summary=f"Successfully fetched {len(content_types)} content types\n\n{pretty(output)}",
            **output,
        )


# ── strapi-add-field ──

class AddFieldParams(BaseModel):
    content_type: str = Field(description='Content type UID (e.g. "api::product.product")')
    field_name: str = Field(description='Name of the new field (e.g. "title", "price")')
    field_type: FieldType = Field(description="Field type")
    options: dict[str, Any] | None = Field(
        default=None,
        description="Extra attribute options (required, unique, minLength, maxLength, ...)",
    )


class StrapiAddFieldTool(BaseTool):
    """Add an attribute to a content type"""

    def __init__(self, client: StrapiClient):
        self._client = client

    @property
    def name(self) -> str:
        return "strapi-add-field"

    @property
    def description(self) -> str:
        return "Add a field to a Strapi content type schema. Strapi may need a restart afterwards."

    @property
    def params_model(self) -> type[BaseModel]:
        return AddFieldParams

    @property
    def risk_level(self) -> str:
        return "critical"

    @property
    def timeout_ms(self) -> int:
        # schema read, then schema write
        return super().timeout_ms * 2

    async def execute(self, args: dict) -> ToolResult:
        params: AddFieldParams = self.parse(args)
        try:
            await self._client.add_field_to_content_type(
                params.content_type, params.field_name, params.field_type, params.options
            )
        except StrapiError as e:
            return ToolResult.fail(f"Error adding field to {params.content_type}: {e.message}")
        log.info("field added", content_type=params.content_type, field_name=params.field_name)

        output = {
            "message": f"Field '{params.field_name}' added successfully to {params.content_type}",
            "field_name": params.field_name,
            "field_type": params.field_type,
            "options": params.options,
        }
        return ToolResult.success(
            summary=(
                f"Successfully added field '{params.field_name}' ({params.field_type}) to "
                f"{params.content_type}\n\n{pretty(output)}\n\n"
                "NOTE: You may need to restart Strapi for changes to take effect."
            ),
            **output,
        )
