"""Data models for the knowledge base retrieval server."""

from .requests import RetrievalRequest
from .responses import (
    JsonContent,
    RAGSource,
    RetrievalOutcome,
    TextContent,
    ToolDefinition,
    ToolResponse,
)
from .results import RawResult

__all__ = [
    "JsonContent",
    "RAGSource",
    "RawResult",
    "RetrievalOutcome",
    "RetrievalRequest",
    "TextContent",
    "ToolDefinition",
    "ToolResponse",
]
