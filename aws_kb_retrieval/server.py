"""MCP stdio server exposing the knowledge base retrieval tool."""

import json
import sys
from typing import Any, Dict, List, Optional, Tuple, Union

import anyio
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from . import __version__
from .handlers.tool_handler import ToolHandler
from .models.responses import ToolResponse
from .services.bedrock_service import BedrockService
from .services.retrieval_service import RetrievalService
from .utils.config import Config
from .utils.exceptions import ConfigurationError, RAGError
from .utils.logger import get_logger

logger = get_logger()

SERVER_NAME = "aws-kb-retrieval-server"

McpToolResult = Union[
    List[types.TextContent], Tuple[List[types.TextContent], Dict[str, Any]]
]


def render_response(response: ToolResponse) -> McpToolResult:
    """
    Convert a ToolResponse into MCP content.

    JSON items are serialized into a text block and also returned as
    structured content.

    Raises:
        RAGError: If the response is an error, so the MCP server flags it
    """
    payload = response.to_dict()

    if payload["isError"]:
        message = "\n".join(item["text"] for item in payload["content"] if item["type"] == "text")
        raise RAGError(message)

    blocks: List[types.TextContent] = []
    structured: Optional[Dict[str, Any]] = None

    for item in payload["content"]:
        if item["type"] == "json":
            blocks.append(types.TextContent(type="text", text=json.dumps(item["json"])))
            structured = {**(structured or {}), **item["json"]}
        else:
            blocks.append(types.TextContent(type="text", text=item["text"]))

    if structured is None:
        return blocks
    return blocks, structured


def create_server(handler: ToolHandler) -> Server:
    """Register the list/call handlers on a low-level MCP server."""
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return [
            types.Tool(
                name=tool.name,
                description=tool.description,
                inputSchema=tool.input_schema,
            )
            for tool in handler.list_tools()
        ]

    # Arguments are validated by the handler so that a missing
    # knowledgeBaseId gets its own message
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> McpToolResult:
        logger.info(f"{name} called", extra={"arguments": arguments})
        response = await anyio.to_thread.run_sync(handler.call_tool, name, arguments)
        return render_response(response)

    return server


def build_handler(config: Config) -> ToolHandler:
    bedrock_service = BedrockService(config)
    return ToolHandler(config, RetrievalService(bedrock_service))


async def serve(handler: ToolHandler) -> None:
    server = create_server(handler)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("AWS KB Retrieval Server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    """Console entry point."""
    try:
        config = Config.from_env()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e.message}", extra={"details": e.details})
        sys.exit(1)

    try:
        anyio.run(serve, build_handler(config))
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logger.error(f"Fatal error running server: {str(e)}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
