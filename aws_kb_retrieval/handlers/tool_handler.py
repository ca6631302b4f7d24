"""Tool catalog and dispatch for knowledge base retrieval."""

from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from ..models.requests import DEFAULT_RESULT_COUNT, RetrievalRequest
from ..models.responses import JsonContent, TextContent, ToolDefinition, ToolResponse
from ..services.retrieval_service import RetrievalService
from ..utils.config import Config
from ..utils.exceptions import MissingIdentifierError, UnknownToolError, ValidationError
from ..utils.logger import get_logger

logger = get_logger()

RETRIEVE_TOOL_NAME = "retrieve_from_aws_kb"

NO_RESULTS_MESSAGE = "Retrieval failed or returned no results."
MISSING_ID_MESSAGE = (
    "No knowledge base ID provided. Either include a knowledgeBaseId in your request "
    "or configure AWS_KB_IDS in the environment."
)


def build_retrieve_tool(config: Config) -> ToolDefinition:
    """
    Describe the retrieval tool.

    knowledgeBaseId is only required when no default IDs are configured.
    """
    has_defaults = bool(config.knowledge_base_ids)

    return ToolDefinition(
        name=RETRIEVE_TOOL_NAME,
        description=(
            "Performs retrieval from the AWS Knowledge Base using the provided query "
            "and Knowledge Base ID."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "The query to perform retrieval on"},
                "knowledgeBaseId": {
                    "type": "string",
                    "description": (
                        "The ID of the AWS Knowledge Base (optional if configured via AWS_KB_IDS)"
                        if has_defaults
                        else "The ID of the AWS Knowledge Base"
                    ),
                },
                "n": {
                    "type": "number",
                    "default": DEFAULT_RESULT_COUNT,
                    "description": "Number of results to retrieve",
                },
            },
            "required": ["query"] if has_defaults else ["query", "knowledgeBaseId"],
        },
    )


class ToolHandler:
    """Lists the available tools and routes tool calls."""

    def __init__(self, config: Config, retrieval_service: RetrievalService):
        self.config = config
        self.retrieval_service = retrieval_service
        self._tools = [build_retrieve_tool(config)]

    def list_tools(self) -> List[ToolDefinition]:
        return list(self._tools)

    def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResponse:
        """
        Invoke a tool by name.

        Every failure is converted into a ToolResponse; nothing is raised.

        Args:
            name: Tool name from the caller
            arguments: Named tool arguments

        Returns:
            ToolResponse with the tool output or an error message
        """
        try:
            if name != RETRIEVE_TOOL_NAME:
                raise UnknownToolError(f"Unknown tool: {name}", {"tool": name})
            return self.retrieve(arguments or {})

        except ValidationError as e:
            logger.warning(f"Rejected {name} call: {e.message}", extra={"details": e.details})
            return ToolResponse.text(e.message, is_error=True)

        except UnknownToolError as e:
            logger.warning(e.message)
            return ToolResponse.text(e.message, is_error=True)

        except Exception as e:
            logger.error(f"Unexpected error in {name}: {str(e)}", exc_info=True)
            return ToolResponse.text(f"Error occurred: {e}")

    def retrieve(self, arguments: Dict[str, Any]) -> ToolResponse:
        """
        Run the retrieval tool.

        Raises:
            ValidationError: If the arguments are malformed
            MissingIdentifierError: If no knowledge base ID can be resolved
        """
        try:
            request = RetrievalRequest.model_validate(arguments)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid arguments: {_describe_errors(e)}", {"arguments": arguments}
            )

        knowledge_base_id = self.resolve_knowledge_base_id(request.knowledge_base_id)

        outcome = self.retrieval_service.retrieve_context(
            request.query, knowledge_base_id, request.n
        )
        if not outcome.is_rag_working:
            return ToolResponse.text(NO_RESULTS_MESSAGE)

        return ToolResponse(
            content=[
                TextContent(text=outcome.context),
                JsonContent(
                    data={
                        "ragSources": [
                            source.model_dump(by_alias=True) for source in outcome.rag_sources
                        ]
                    }
                ),
            ]
        )

    def resolve_knowledge_base_id(self, requested: Optional[str]) -> str:
        """Explicit ID wins, else the first configured default."""
        if requested:
            return requested

        default = self.config.default_knowledge_base_id
        if default:
            logger.info(f"Using configured knowledge base ID: {default}")
            return default

        raise MissingIdentifierError(MISSING_ID_MESSAGE)


def _describe_errors(error: PydanticValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in item['loc']) or 'arguments'}: {item['msg']}"
        for item in error.errors()
    )
