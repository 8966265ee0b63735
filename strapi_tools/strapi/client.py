"""
Strapi REST client: one shared httpx.AsyncClient per process

Responsibilities:
1. Marshal tool parameters into Strapi's bracketed query string
   (fields[] / populate[] / filters[key] / sort[] / pagination[...] / locale)
2. Inject the Bearer API token
3. Unwrap backend failures into StrapiError with a readable message:
   JSON error.message -> raw body text -> "HTTP <status>: <reason>"

Every method returns the decoded JSON body as-is; callers decide how to read it.
"""

import json
import time
from pathlib import Path
from typing import Any

import httpx
import structlog

from strapi_tools.config import get_settings
from strapi_tools.observability.metrics import STRAPI_CALL_DURATION, STRAPI_CALL_TOTAL

log = structlog.get_logger()


class StrapiError(Exception):
    """Any failure talking to Strapi, transport or backend side"""

    def __init__(self, message: str, status_code: int | None = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


def build_query_params(
    fields: list[str] | None = None,
    populate: list[str] | str | None = None,
    filters: dict[str, Any] | None = None,
    sort: list[str] | None = None,
    pagination: dict[str, int] | None = None,
    publication_state: str | None = None,
    locale: str | None = None,
) -> list[tuple[str, str]]:
    """Build Strapi query params as an ordered list of pairs (keys may repeat)"""
    params: list[tuple[str, str]] = []

    for field in fields or []:
        params.append(("fields[]", field))

    if isinstance(populate, str):
        params.append(("populate", populate))
    elif populate:
        for relation in populate:
            params.append(("populate[]", relation))

    for key, value in (filters or {}).items():
        params.append((f"filters[{key}]", json.dumps(value, ensure_ascii=False)))

    for sort_field in sort or []:
        params.append(("sort[]", sort_field))

    if pagination:
        for key in ("page", "pageSize", "start", "limit"):
            if pagination.get(key) is not None:
                params.append((f"pagination[{key}]", str(pagination[key])))

    if publication_state:
        params.append(("publicationState", publication_state))

    if locale:
        params.append(("locale", locale))

    return params


def _error_message(response: httpx.Response) -> tuple[str, Any]:
    """Extract the most useful error message from a failed response"""
    text = response.text
    try:
        body = response.json()
    except ValueError:
        return (text or f"HTTP {response.status_code}: {response.reason_phrase}"), None

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return error["message"], error.get("details")
    return (text or f"HTTP {response.status_code}: {response.reason_phrase}"), None


class StrapiClient:
    """Async Strapi API client"""

    def __init__(
        self,
        base_url: str | None = None,
        api_token: str | None = None,
        timeout: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.STRAPI_URL).rstrip("/")
        self.timeout = timeout or settings.STRAPI_TIMEOUT
        token = settings.STRAPI_API_TOKEN if api_token is None else api_token

        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: list[tuple[str, str]] | None = None,
        **kwargs: Any,
    ) -> Any:
        """Send one request; raise StrapiError on transport failure or non-2xx"""
        start = time.monotonic()
        try:
            response = await self._http.request(method, endpoint, params=params, **kwargs)
        except httpx.TimeoutException as e:
            STRAPI_CALL_TOTAL.labels(method=method, status="transport_error").inc()
            log.error("strapi request timed out", method=method, endpoint=endpoint, timeout=self.timeout)
            raise StrapiError(f"Strapi request timed out ({self.timeout}s): {method} {endpoint}") from e
        except httpx.HTTPError as e:
            STRAPI_CALL_TOTAL.labels(method=method, status="transport_error").inc()
            log.error("strapi unreachable", method=method, endpoint=endpoint, error=str(e))
            raise StrapiError(f"Could not reach Strapi at {self.base_url}: {e}") from e

        STRAPI_CALL_DURATION.labels(method=method).observe((time.monotonic() - start) * 1000)
        STRAPI_CALL_TOTAL.labels(method=method, status=str(response.status_code)).inc()

        if response.is_error:
            message, details = _error_message(response)
            log.error(
                "strapi request failed",
                method=method,
                endpoint=endpoint,
                status_code=response.status_code,
                error=message,
            )
            raise StrapiError(message, status_code=response.status_code, details=details)

        # DELETE in Strapi v5 answers 204 without a body
        if response.status_code == 204 or not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise StrapiError(f"Strapi returned a non-JSON body for {method} {endpoint}") from e

    # ── Content entries ──

    async def create(
        self,
        content_type: str,
        data: dict[str, Any],
        populate: list[str] | None = None,
        locale: str | None = None,
    ) -> dict[str, Any]:
        log.debug("strapi create", content_type=content_type, locale=locale)
        return await self._request(
            "POST",
            f"/api/{content_type}",
            params=build_query_params(populate=populate, locale=locale),
            json={"data": data},
        )

    async def read(
        self,
        content_type: str,
        document_id: str,
        fields: list[str] | None = None,
        populate: list[str] | None = None,
        locale: str | None = None,
    ) -> dict[str, Any]:
        log.debug("strapi read", content_type=content_type, document_id=document_id, locale=locale)
        return await self._request(
            "GET",
            f"/api/{content_type}/{document_id}",
            params=build_query_params(fields=fields, populate=populate, locale=locale),
        )

    async def list_entries(
        self,
        content_type: str,
        filters: dict[str, Any] | None = None,
        sort: list[str] | None = None,
        pagination: dict[str, int] | None = None,
        fields: list[str] | None = None,
        populate: list[str] | None = None,
        locale: str | None = None,
    ) -> dict[str, Any]:
        log.debug("strapi list", content_type=content_type, locale=locale)
        return await self._request(
            "GET",
            f"/api/{content_type}",
            params=build_query_params(
                fields=fields,
                populate=populate,
                filters=filters,
                sort=sort,
                pagination=pagination,
                locale=locale,
            ),
        )

    async def update(
        self,
        content_type: str,
        document_id: str,
        data: dict[str, Any],
        populate: list[str] | None = None,
        locale: str | None = None,
    ) -> dict[str, Any]:
        log.debug("strapi update", content_type=content_type, document_id=document_id, locale=locale)
        return await self._request(
            "PUT",
            f"/api/{content_type}/{document_id}",
            params=build_query_params(populate=populate, locale=locale),
            json={"data": data},
        )

    async def delete(self, content_type: str, document_id: str) -> dict[str, Any]:
        log.debug("strapi delete", content_type=content_type, document_id=document_id)
        return await self._request("DELETE", f"/api/{content_type}/{document_id}")

    # ── Content-type builder ──

    async def get_content_types(self) -> dict[str, Any]:
        return await self._request("GET", "/api/content-type-builder/content-types")

    async def get_content_type(self, uid: str) -> dict[str, Any]:
        return await self._request("GET", f"/api/content-type-builder/content-types/{uid}")

    async def add_field_to_content_type(
        self,
        content_type: str,
        field_name: str,
        field_type: str,
        options: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Add an attribute by rewriting the content type's schema"""
        current = await self.get_content_type(content_type)
        schema = (current.get("data") or {}).get("schema") or {}

        updated_schema = {
            **schema,
            "attributes": {
                **(schema.get("attributes") or {}),
                field_name: {"type": field_type, **(options or {})},
            },
        }
        log.info("strapi add field", content_type=content_type, field=field_name, type=field_type)
        return await self._request(
            "PUT",
            f"/api/content-type-builder/content-types/{content_type}",
            json={"contentType": updated_schema, "components": []},
        )

    # ── i18n ──

    async def get_i18n_locales(self) -> Any:
        """Raw locales response; the shape varies between Strapi versions"""
        return await self._request("GET", "/api/i18n/locales")

    # ── Media library ──

    async def search_media(
        self,
        search: str | None = None,
        mime: str | None = None,
        pagination: dict[str, int] | None = None,
        sort: list[str] | None = None,
    ) -> Any:
        params: list[tuple[str, str]] = []
        if search:
            params.append(("filters[$or][0][name][$contains]", search))
            params.append(("filters[$or][1][alternativeText][$contains]", search))
        if mime:
            params.append(("filters[mime][$contains]", mime))
        params.extend(build_query_params(pagination=pagination, sort=sort))
        return await self._request("GET", "/api/upload/files", params=params)

    async def get_media(self, media_id: str | int) -> Any:
        return await self._request("GET", f"/api/upload/files/{media_id}")

    async def upload_media(
        self,
        file_path: str,
        alternative_text: str | None = None,
        caption: str | None = None,
        name: str | None = None,
        folder: str | None = None,
    ) -> Any:
        path = Path(file_path)
        if not path.is_file():
            raise StrapiError(f"File not found: {file_path}")

        form: dict[str, str] = {}
        file_info = {
            k: v
            for k, v in (("alternativeText", alternative_text), ("caption", caption), ("name", name))
            if v
        }
        if file_info:
            form["fileInfo"] = json.dumps(file_info, ensure_ascii=False)
        if folder:
            form["folder"] = folder

        log.info("strapi upload", file=str(path), size=path.stat().st_size)
        with path.open("rb") as fh:
            return await self._request(
                "POST",
                "/api/upload",
                files={"files": (name or path.name, fh)},
                data=form,
            )
