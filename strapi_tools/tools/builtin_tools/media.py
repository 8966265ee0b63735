"""
Media library tools: strapi-search-media / strapi-get-media / strapi-upload-media

The upload endpoints answer with bare arrays / objects rather than the usual
{data, meta} envelope; both are accepted.
"""

from typing import Any

import structlog
from pydantic import BaseModel, Field

from strapi_tools.strapi.client import StrapiClient, StrapiError
from strapi_tools.tools.base import BaseTool, ToolResult
from strapi_tools.tools.builtin_tools._shared import Pagination, pretty

log = structlog.get_logger()


def _size_kb(item: dict[str, Any]) -> str:
    # upload plugin stores size in KB
    size = item.get("size")
    return f"{size:.2f} KB" if isinstance(size, (int, float)) else "N/A"


def _describe_media(item: dict[str, Any]) -> list[str]:
    lines = [f"   📌 ID: {item.get('id')}"]
    if item.get("documentId"):
        lines.append(f"   🆔 documentId: {item['documentId']}")
    lines.append(f"   📊 Size: {_size_kb(item)}")
    lines.append(f"   🎨 Type: {item.get('mime') or 'N/A'}")
    if item.get("width") and item.get("height"):
        lines.append(f"   📐 Dimensions: {item['width']}x{item['height']}px")
    if item.get("alternativeText"):
        lines.append(f"   🏷️ Alternative text: {item['alternativeText']}")
    if item.get("url"):
        lines.append(f"   🔗 URL: {item['url']}")
    for format_name, fmt in (item.get("formats") or {}).items():
        lines.append(f"   • {format_name}: {fmt.get('width')}x{fmt.get('height')}px {fmt.get('url', '')}".rstrip())
    return lines


# ── strapi-search-media ──

class SearchMediaParams(BaseModel):
    search: str | None = Field(default=None, description="Search term (matches file name and alternative text)")
    mime: str | None = Field(default=None, description='MIME filter (e.g. "image", "image/png")')
    pagination: Pagination | None = Field(default=None, description="Pagination")
    sort: list[str] | None = Field(default=None, description='Sort fields (e.g. ["createdAt:desc"])')


class StrapiSearchMediaTool(BaseTool):
    def __init__(self, client: StrapiClient):
        self._client = client

    @property
    def name(self) -> str:
        return "strapi-search-media"

    @property
    def description(self) -> str:
        return "Search files in the Strapi media library by name, alternative text or MIME type."

    @property
    def params_model(self) -> type[BaseModel]:
        return SearchMediaParams

    async def execute(self, args: dict) -> ToolResult:
        params: SearchMediaParams = self.parse(args)
        try:
            response = await self._client.search_media(
                search=params.search,
                mime=params.mime,
                pagination=params.pagination.to_strapi() if params.pagination else None,
                sort=params.sort,
            )
        except StrapiError as e:
            return ToolResult.fail(f"Error searching media: {e.message}")

        items = response if isinstance(response, list) else (response.get("data") or [])
        meta = response.get("meta", {}) if isinstance(response, dict) else {}

        lines = []
        if items:
            lines.append("\n\n📁 Files found:")
            for index, item in enumerate(items, start=1):
                lines.append(f"\n{index}. {item.get('name')}")
                lines.extend(_describe_media(item))

        output = {"data": items, "meta": meta, "count": len(items)}
        matching = f' matching "{params.search}"' if params.search else ""
        return ToolResult.success(
            summary=f"Successfully found {len(items)} media items{matching}{chr(10).join(lines)}\n\n{pretty(output)}",
            **output,
        )


# ── strapi-get-media ──

class GetMediaParams(BaseModel):
    id: str | int = Field(description='Numeric id (e.g. 2) or documentId of the file')


class StrapiGetMediaTool(BaseTool):
    def __init__(self, client: StrapiClient):
        self._client = client

    @property
    def name(self) -> str:
        return "strapi-get-media"

    @property
    def description(self) -> str:
        return "Get one file from the Strapi media library with its URL, dimensions and formats."

    @property
    def params_model(self) -> type[BaseModel]:
        return GetMediaParams

    async def execute(self, args: dict) -> ToolResult:
        params: GetMediaParams = self.parse(args)
        try:
            item = await self._client.get_media(params.id)
        except StrapiError as e:
            return ToolResult.fail(f"Error retrieving media file: {e.message}")

        details = "\n".join([f"\n\n📄 {item.get('name')}", *_describe_media(item)]) if item else ""
        return ToolResult.success(
            summary=f"Successfully retrieved media file{details}\n\n{pretty(item)}",
            data=item,
        )


# ── strapi-upload-media ──

class UploadMediaParams(BaseModel):
    file_path: str = Field(description="Absolute path of the local file to upload")
    alternative_text: str | None = Field(default=None, description="Alternative text (accessibility)")
    caption: str | None = Field(default=None, description="Caption")
    name: str | None = Field(default=None, description="Custom file name")
    folder: str | None = Field(default=None, description="Folder id to store the file in")


class StrapiUploadMediaTool(BaseTool):
    def __init__(self, client: StrapiClient):
        self._client = client

    @property
    def name(self) -> str:
        return "strapi-upload-media"

    @property
    def description(self) -> str:
        return "Upload a local file to the Strapi media library."

    @property
    def params_model(self) -> type[BaseModel]:
        return UploadMediaParams

    @property
    def risk_level(self) -> str:
        return "write"

    async def execute(self, args: dict) -> ToolResult:
        params: UploadMediaParams = self.parse(args)
        try:
            response = await self._client.upload_media(
                params.file_path,
                alternative_text=params.alternative_text,
                caption=params.caption,
                name=params.name,
                folder=params.folder,
            )
        except StrapiError as e:
            log.warning("media upload failed", file_path=params.file_path, error=e.message)
            return ToolResult.fail(f"Error uploading file: {e.message}")

        files = response if isinstance(response, list) else [response]
        details = ""
        if files and files[0]:
            details = "\n".join(["\n\n✅ File uploaded:", f"   📝 Name: {files[0].get('name')}", *_describe_media(files[0])])

        output = {"data": files, "count": len(files)}
        return ToolResult.success(
            summary=f"File uploaded successfully!{details}\n\n{pretty(output)}",
            **output,
        )
