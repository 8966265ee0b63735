"""
Helpers shared by the Strapi tools
"""

import json
from typing import Any

from pydantic import BaseModel, Field

from strapi_tools.config import get_settings
from strapi_tools.i18n.schemas import ValidationOptions

CONTENT_TYPE_DESCRIPTION = 'PLURAL API name of the content type (e.g. "products", "articles")'
LOCALE_DESCRIPTION = 'i18n locale code (e.g. "en", "es", "ca")'
POPULATE_DESCRIPTION = "Relations to populate"


class Pagination(BaseModel):
    page: int | None = Field(default=None, ge=1)
    page_size: int | None = Field(default=None, ge=1, description="Entries per page")

    def to_strapi(self) -> dict[str, int]:
        params = {"page": self.page, "pageSize": self.page_size}
        return {k: v for k, v in params.items() if v is not None}


def singular_uid(content_type: str) -> str:
    """Best-effort UID from a plural API name: "products" -> "api::product.product" """
    singular = content_type[:-1] if content_type.endswith("s") else content_type
    return f"api::{singular}.{singular}"


def entry_id(entry: dict[str, Any]) -> Any:
    return entry.get("documentId") or entry.get("id")


def locale_suffix(locale: str | None) -> str:
    return f" (locale: {locale})" if locale else ""


def pretty(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2, default=str)


def validation_options(strict_mode: bool = False) -> ValidationOptions:
    """ValidationOptions with the configured thresholds"""
    settings = get_settings()
    return ValidationOptions(
        check_mixed_languages=True,
        minimum_confidence=settings.I18N_MIN_CONFIDENCE,
        strict_mode=strict_mode,
        mixed_threshold=settings.I18N_MIXED_THRESHOLD,
    )
