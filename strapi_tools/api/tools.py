"""
/tools endpoints: tool discovery and invocation for LLM agents

Endpoints:
- GET  /tools         — function-calling schemas of every registered tool
- POST /tools/{name}  — run one tool; body is the argument object

Invocation always answers 200 with the standardized result; a failed tool is
status="error" in the body, not an HTTP error. Unknown tools are the one 404.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Body, HTTPException, Request

from strapi_tools.observability.context import get_trace_id
from strapi_tools.tools.registry import ToolRegistry

router = APIRouter(prefix="/tools", tags=["tools"])
log = structlog.get_logger()


def _registry(request: Request) -> ToolRegistry:
    return request.app.state.registry


@router.get("")
async def list_tools(request: Request):
    registry = _registry(request)
    return {"count": registry.tool_count, "tools": registry.get_all_schemas()}


@router.post("/{name}")
async def call_tool(name: str, request: Request, arguments: dict[str, Any] | None = Body(default=None)):
    registry = _registry(request)
    if not registry.has_tool(name):
        raise HTTPException(status_code=404, detail=f"Unknown tool: {name}")

    result = await registry.execute(name, arguments)
    log.info("tool call finished", tool=name, status=result.status)
    return {**result.to_dict(), "trace_id": get_trace_id()}
