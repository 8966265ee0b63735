"""
FastAPI entry point: exposes the Strapi tool set over HTTP
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from prometheus_client import make_asgi_app

from strapi_tools.config import get_settings
from strapi_tools.observability.logging_config import setup_logging
from strapi_tools.observability.metrics_middleware import MetricsMiddleware
from strapi_tools.observability.request_logger import RequestLoggerMiddleware
from strapi_tools.strapi.client import StrapiClient
from strapi_tools.tools.builtin_tools import create_strapi_registry

settings = get_settings()

# logging is configured at import time
setup_logging(env=settings.ENV)
log = structlog.get_logger()


@asynccontextmanager
async def lifespan(application: FastAPI):
    """Create the shared Strapi client + tool registry; close the client on shutdown"""
    client = StrapiClient()
    registry = create_strapi_registry(client)
    application.state.strapi_client = client
    application.state.registry = registry
    log.info(
        "application started",
        env=settings.ENV,
        app=settings.APP_NAME,
        strapi_url=settings.STRAPI_URL,
        tools=registry.tool_count,
    )

    yield

    await client.aclose()
    log.info("application stopped, Strapi client closed")


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

# ── Middleware (registered bottom-up, executed top-down) ──
app.add_middleware(RequestLoggerMiddleware)
app.add_middleware(MetricsMiddleware)

# ── Prometheus endpoint ──
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)

# ── Routers ──
from strapi_tools.api.health import router as health_router  # noqa: E402
from strapi_tools.api.tools import router as tools_router  # noqa: E402

app.include_router(health_router)
app.include_router(tools_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("strapi_tools.main:app", host="0.0.0.0", port=settings.APP_PORT, reload=settings.ENV != "production")
