"""
Tool registry: registration, schema listing and execution dispatch

execute() always returns a ToolResult; nothing a tool raises reaches the
transport. Argument validation errors, timeouts and unexpected exceptions all
become status="error" results.
"""

import asyncio

import structlog
from pydantic import ValidationError

from strapi_tools.observability.metrics import TOOL_CALL_TOTAL
from strapi_tools.tools.base import BaseTool, ToolResult

log = structlog.get_logger()


class ToolRegistry:
    """Tool registry"""

    def __init__(self):
        self._tools: dict[str, BaseTool] = {}

    def register(self, tool: BaseTool) -> None:
        self._tools[tool.name] = tool
        log.debug("tool registered", tool=tool.name, risk_level=tool.risk_level, timeout_ms=tool.timeout_ms)

    def has_tool(self, name: str) -> bool:
        return name in self._tools

    def get_all_schemas(self) -> list[dict]:
        return [tool.schema() for tool in self._tools.values()]

    def get_schemas(self, allowed_tools: list[str]) -> list[dict]:
        return [
            self._tools[name].schema()
            for name in allowed_tools
            if name in self._tools
        ]

    async def execute(self, name: str, arguments: dict | None) -> ToolResult:
        """
        Run a tool and return its standardised result.

        The registry timeout is a fallback; tools bound their own backend calls
        with shorter timeouts and report those errors themselves.
        """
        tool = self._tools.get(name)
        if not tool:
            TOOL_CALL_TOTAL.labels(tool_name="unknown", status="error").inc()
            return ToolResult.fail(f"Unknown tool: {name}")

        structlog.contextvars.bind_contextvars(tool=name)
        try:
            result = await asyncio.wait_for(
                tool.execute(arguments or {}),
                timeout=tool.timeout_ms / 1000,
            )
        except ValidationError as e:
            log.warning("invalid tool arguments", tool=name, errors=e.error_count())
            result = ToolResult.fail(f"Invalid arguments for {name}: {e}")
        except asyncio.TimeoutError:
            log.warning("tool timed out (registry fallback)", tool=name, timeout_ms=tool.timeout_ms)
            TOOL_CALL_TOTAL.labels(tool_name=name, status="timeout").inc()
            return ToolResult.fail(f"Tool {name} timed out ({tool.timeout_ms}ms)")
        except asyncio.CancelledError:
            # transport-level cancellation must propagate
            log.warning("tool cancelled", tool=name)
            raise
        except Exception as e:
            log.error("tool raised", tool=name, error=str(e), exc_info=True)
            result = ToolResult.fail(f"Tool execution failed: {e}")
        finally:
            structlog.contextvars.unbind_contextvars("tool")

        TOOL_CALL_TOTAL.labels(tool_name=name, status=result.status).inc()
        return result

    async def execute_json(self, name: str, arguments: dict | None) -> str:
        """JSON string form, for agents that feed results straight back to the LLM"""
        return (await self.execute(name, arguments)).to_json()

    @property
    def tool_names(self) -> list[str]:
        return list(self._tools.keys())

    @property
    def tool_count(self) -> int:
        return len(self._tools)
