"""
Prometheus metric definitions

All metrics live here; middleware and business code import what they need.
"""

from prometheus_client import Counter, Histogram

# ── HTTP ──

REQUEST_TOTAL = Counter(
    "strapi_tools_request_total",
    "HTTP requests",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "strapi_tools_request_duration_ms",
    "HTTP request duration (ms)",
    ["method", "endpoint"],
    buckets=[50, 100, 200, 500, 1000, 2000, 5000, 10000],
)

# ── Tools ──

TOOL_CALL_TOTAL = Counter(
    "strapi_tools_tool_call_total",
    "Tool invocations",
    ["tool_name", "status"],  # status: success/error/timeout
)

# ── Strapi backend ──

STRAPI_CALL_TOTAL = Counter(
    "strapi_tools_backend_call_total",
    "Requests sent to Strapi",
    ["method", "status"],  # status: HTTP code or "transport_error"
)

STRAPI_CALL_DURATION = Histogram(
    "strapi_tools_backend_call_duration_ms",
    "Strapi request duration (ms)",
    ["method"],
    buckets=[20, 50, 100, 200, 500, 1000, 2000, 5000],
)

# ── i18n ──

LOCALE_WORKFLOW_TOTAL = Counter(
    "strapi_tools_locale_workflow_total",
    "Multi-locale creation outcomes",
    ["outcome", "failed_state"],  # outcome: done/failed
)

LANGUAGE_WARNING_TOTAL = Counter(
    "strapi_tools_language_warning_total",
    "Language validation warnings",
    ["kind"],  # fallback/mismatch/mixed/strict
)
