"""
Health check: liveness + Strapi reachability
"""

import structlog
from fastapi import APIRouter, Request

from strapi_tools.strapi.client import StrapiError

router = APIRouter(tags=["health"])
log = structlog.get_logger()


@router.get("/health")
async def health_check(request: Request):
    """Liveness; status is "degraded" when Strapi cannot be reached"""
    status = {"status": "ok", "strapi": "ok", "tools": request.app.state.registry.tool_count}

    try:
        await request.app.state.strapi_client.get_i18n_locales()
    except StrapiError as e:
        status["strapi"] = f"error: {e.message}"
        status["status"] = "degraded"
        log.error("strapi health check failed", error=e.message, status_code=e.status_code)

    return status
