"""
Tool system: BaseTool + ToolRegistry + the Strapi tool set
"""

from strapi_tools.tools.base import BaseTool, ToolResult
from strapi_tools.tools.registry import ToolRegistry

__all__ = ["BaseTool", "ToolResult", "ToolRegistry"]
