"""
Request logging middleware: trace_id per request + one start/finish pair of
log events. Probe endpoints (/health, /metrics) log at debug level only.
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from strapi_tools.observability.context import new_trace_id, trace_id_var

log = structlog.get_logger()

_PROBE_PREFIXES = ("/health", "/metrics")
_TOOL_PREFIX = "/tools/"


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """Binds trace_id for the request and logs its outcome"""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        trace_id = request.headers.get("X-Trace-ID") or new_trace_id()
        trace_id_var.set(trace_id)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(trace_id=trace_id)

        path = request.url.path
        fields = {"method": request.method, "path": path}
        if path.startswith(_TOOL_PREFIX):
            fields["tool"] = path[len(_TOOL_PREFIX):]
        emit = log.debug if path.startswith(_PROBE_PREFIXES) else log.info

        emit(
            "request started",
            client_ip=request.client.host if request.client else "unknown",
            **fields,
        )
        start = time.monotonic()
        try:
            response = await call_next(request)
        except Exception:
            log.error(
                "request crashed",
                duration_ms=int((time.monotonic() - start) * 1000),
                exc_info=True,
                **fields,
            )
            raise

        duration_ms = int((time.monotonic() - start) * 1000)
        emit("request finished", status_code=response.status_code, duration_ms=duration_ms, **fields)

        response.headers["X-Trace-ID"] = trace_id
        response.headers["X-Duration-Ms"] = str(duration_ms)
        return response
