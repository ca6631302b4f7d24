"""MCP server for retrieval from AWS Bedrock knowledge bases."""

__version__ = "0.2.0"
