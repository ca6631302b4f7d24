"""Tool handlers."""

from .tool_handler import RETRIEVE_TOOL_NAME, ToolHandler

__all__ = ["RETRIEVE_TOOL_NAME", "ToolHandler"]
