"""
strapi-create: create one entry, optionally in a specific locale

Before creating, the content type schema is fetched (best effort) so missing
required fields are reported up front instead of as Strapi's generic
"2 errors occurred". If the schema cannot be fetched the create still runs.
"""

from typing import Any

import structlog
from pydantic import BaseModel, Field

from strapi_tools.strapi.client import StrapiClient, StrapiError
from strapi_tools.tools.base import BaseTool, ToolResult
from strapi_tools.tools.builtin_tools._shared import (
    CONTENT_TYPE_DESCRIPTION,
    POPULATE_DESCRIPTION,
    entry_id,
    locale_suffix,
    pretty,
    singular_uid,
)

log = structlog.get_logger()

_VALIDATION_MARKERS = ("errors occurred", "required", "Invalid")


class CreateParams(BaseModel):
    content_type: str = Field(description=CONTENT_TYPE_DESCRIPTION)
    data: dict[str, Any] = Field(description="Field values of the new entry")
    populate: list[str] | None = Field(default=None, description=POPULATE_DESCRIPTION)
    locale: str | None = Field(
        default=None,
        description='Locale to create the entry in (e.g. "en", "es-ES", "ca")',
    )


def _describe_field(name: str, config: dict[str, Any]) -> str:
    info = f"  - {name} ({config.get('type')})"
    if config.get("enum"):
        info += f" - values: {', '.join(map(str, config['enum']))}"
    if config.get("min") is not None:
        info += f" - min: {config['min']}"
    if config.get("relation"):
        info += f" - relation to {config.get('target')}"
    return info


class StrapiCreateTool(BaseTool):
    """Create an entry in a Strapi collection"""

    def __init__(self, client: StrapiClient):
        self._client = client

    @property
    def name(self) -> str:
        return "strapi-create"

    @property
    def description(self) -> str:
        return (
            "Create a new entry in a Strapi content type. "
            "Use strapi-get-schema first to see required fields. "
            "For entries with several languages use strapi-create-with-locales."
        )

    @property
    def params_model(self) -> type[BaseModel]:
        return CreateParams

    @property
    def risk_level(self) -> str:
        return "write"

    @property
    def timeout_ms(self) -> int:
        # required-field schema lookup, then the create
        return super().timeout_ms * 2

    async def _missing_required_fields(self, params: CreateParams) -> tuple[list[str], str]:
        """(missing field names, help text); empty when the schema is unavailable"""
        uid = singular_uid(params.content_type)
        try:
            schema = await self._client.get_content_type(uid)
        except StrapiError as e:
            log.info("schema unavailable, skipping required-field check", uid=uid, error=e.message)
            return [], ""

        attributes = ((schema.get("data") or {}).get("schema") or {}).get("attributes") or {}
        missing = [
            name for name, config in attributes.items()
            if config.get("required") and name not in params.data
        ]
        if not missing:
            return [], ""

        required_info = "\n".join(
            _describe_field(name, config)
            for name, config in attributes.items()
            if config.get("required")
        )
        help_text = (
            f"\n\n⚠️ Missing required fields: {', '.join(missing)}"
            f"\n\n📋 All required fields for {params.content_type}:\n{required_info}"
            "\n\n💡 Add these fields to the request to create the entry."
        )
        return missing, help_text

    async def execute(self, args: dict) -> ToolResult:
        params: CreateParams = self.parse(args)
        log.info("create entry", content_type=params.content_type, locale=params.locale)

        missing, help_text = await self._missing_required_fields(params)
        if missing:
            log.warning("missing required fields", content_type=params.content_type, fields=missing)
            return ToolResult.fail(
                f"Cannot create entry in {params.content_type}{help_text}",
                missing_required_fields=missing,
            )

        try:
            response = await self._client.create(
                params.content_type,
                params.data,
                populate=params.populate,
                locale=params.locale,
            )
        except StrapiError as e:
            message = e.message
            if any(marker in message for marker in _VALIDATION_MARKERS):
                uid = singular_uid(params.content_type)
                message = (
                    f"Validation error in {params.content_type}: {e.message}\n\n"
                    "💡 Possible causes:\n"
                    "- Missing required fields\n"
                    "- Invalid enumeration values\n"
                    "- Relations pointing to documentIds that do not exist\n"
                    "- Wrong data format\n\n"
                    f'To see the exact required fields use strapi-get-schema with "{uid}"'
                )
            return ToolResult.fail(f"Error creating entry in {params.content_type}:\n\n{message}")

        entry = response.get("data") or {}
        output = {"data": entry, "document_id": entry_id(entry)}
        return ToolResult.success(
            summary=(
                f"Successfully created entry in {params.content_type}"
                f"{locale_suffix(params.locale)}\n\n{pretty(output)}"
            ),
            **output,
        )
