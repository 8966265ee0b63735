"""
Tool base class + standardised result

BaseTool contract:
1. name / description / params_model define the tool schema (generated by
   Pydantic, never hand-written dicts)
2. execute returns a ToolResult (standard status + data, so the calling agent
   can rely on structured fields)

ToolResult:
- status: "success" | "error"
- data: tool-specific payload; `summary` carries the human-readable narrative
- error: description, only when status="error" (data may still hold partial state)
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from strapi_tools.config import get_settings


@dataclass
class ToolResult:
    """Standardised tool result"""

    status: str  # "success" | "error"
    data: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "success"

    def to_dict(self) -> dict[str, Any]:
        if self.status == "error":
            return {"status": "error", "error": self.error, **self.data}
        return {"status": "success", **self.data}

    def to_json(self) -> str:
        """JSON string handed back to the LLM as the tool result"""
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)

    @classmethod
    def success(cls, **data: Any) -> "ToolResult":
        return cls(status="success", data=data)

    @classmethod
    def fail(cls, error: str, **data: Any) -> "ToolResult":
        return cls(status="error", error=error, data=data)


class BaseTool(ABC):
    """Abstract base class for every tool"""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique tool name"""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Description shown to the LLM"""
        ...

    @property
    @abstractmethod
    def params_model(self) -> type[BaseModel]:
        """Pydantic params model, source of the JSON schema"""
        ...

    @abstractmethod
    async def execute(self, args: dict) -> ToolResult:
        """Run the tool"""
        ...

    @property
    def timeout_ms(self) -> int:
        """Registry fallback timeout; tools keep their own backend timeouts shorter"""
        return get_settings().DEFAULT_TOOL_TIMEOUT_MS

    @property
    def risk_level(self) -> str:
        """read / write / critical"""
        return "read"

    def parse(self, args: dict) -> Any:
        """Validate raw arguments against params_model (raises pydantic.ValidationError)"""
        return self.params_model.model_validate(args or {})

    def schema(self) -> dict:
        """OpenAI function-calling schema"""
        json_schema = self.params_model.model_json_schema()

        required = json_schema.get("required", [])

        # drop the "title" keys Pydantic adds to every property
        properties = {}
        for key, prop in json_schema.get("properties", {}).items():
            properties[key] = {k: v for k, v in prop.items() if k != "title"}

        parameters: dict[str, Any] = {
            "type": "object",
            "properties": properties,
            "required": required,
        }
        if "$defs" in json_schema:
            parameters["$defs"] = json_schema["$defs"]

        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": parameters,
            },
        }
