"""
Trace context: trace_id carried across coroutines via contextvars

The tool name is bound per call by ToolRegistry through structlog contextvars.
"""

import contextvars
import uuid

trace_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("trace_id", default="")


def new_trace_id() -> str:
    return str(uuid.uuid4())


def get_trace_id() -> str:
    return trace_id_var.get()
