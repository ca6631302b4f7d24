"""Bedrock service wrapper for knowledge base retrieval."""

from typing import Any, Dict, Optional, Union

import boto3
from botocore.exceptions import ClientError
from tenacity import Retrying, retry_if_exception, stop_after_attempt, wait_exponential

from ..utils.config import Config
from ..utils.exceptions import KnowledgeBaseError
from ..utils.logger import get_logger

logger = get_logger()

# Transient errors that are worth retrying
TRANSIENT_ERROR_CODES = frozenset({
    "ThrottlingException",
    "InternalServerException",
    "ServiceUnavailableException",
    "LimitExceededException",
})


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "")


def _is_transient(error: BaseException) -> bool:
    return isinstance(error, ClientError) and _error_code(error) in TRANSIENT_ERROR_CODES


def create_bedrock_client(config: Config):
    """
    Create a bedrock-agent-runtime client for the configured credentials.

    Static credentials are used only when configured; otherwise the
    session resolves credentials through the default provider chain.
    """
    if config.credentials:
        session = boto3.Session(
            aws_access_key_id=config.credentials.access_key_id,
            aws_secret_access_key=config.credentials.secret_access_key,
            aws_session_token=config.credentials.session_token,
            region_name=config.aws_region,
        )
    else:
        session = boto3.Session(region_name=config.aws_region)

    return session.client("bedrock-agent-runtime")


class BedrockService:
    """Service for querying Bedrock knowledge bases."""

    def __init__(self, config: Config, client: Optional[Any] = None):
        """
        Initialize Bedrock service.

        Args:
            config: Resolved application configuration
            client: Optional bedrock-agent-runtime client. Built from config if not provided.
        """
        self.bedrock_agent_runtime = client or create_bedrock_client(config)
        self._retrying = Retrying(
            stop=stop_after_attempt(config.retry_attempts),
            wait=wait_exponential(multiplier=1, min=2, max=10),
            retry=retry_if_exception(_is_transient),
            before_sleep=lambda retry_state: logger.warning(
                f"Retrying Bedrock retrieval (attempt {retry_state.attempt_number})"
            ),
            reraise=True,
        )

    def retrieve(
        self, query: str, knowledge_base_id: str, max_results: Union[int, float]
    ) -> Dict[str, Any]:
        """
        Retrieve relevant chunks from a knowledge base.

        Args:
            query: The search query
            knowledge_base_id: The knowledge base to search
            max_results: Number of results to request, passed through unchanged

        Returns:
            Dict containing Bedrock retrieval response with 'retrievalResults' key

        Raises:
            KnowledgeBaseError: If retrieval fails
        """
        params = {
            "knowledgeBaseId": knowledge_base_id,
            "retrievalQuery": {
                "text": query,
            },
            "retrievalConfiguration": {
                "vectorSearchConfiguration": {
                    "numberOfResults": max_results,
                }
            },
        }

        try:
            logger.info(f"Retrieving from knowledge base: {knowledge_base_id}")

            response = self._retrying(self.bedrock_agent_runtime.retrieve, **params)

            logger.info(f"Retrieved {len(response.get('retrievalResults') or [])} results")

            return response

        except ClientError as e:
            error_code = _error_code(e)
            logger.error(f"Bedrock error {error_code}: {str(e)}")
            raise KnowledgeBaseError(
                f"Bedrock API error: {str(e)}",
                {
                    "error_code": error_code,
                    "query": query,
                    "knowledge_base_id": knowledge_base_id,
                },
            )

        except Exception as e:
            # Parameter validation, network and credential errors
            error_msg = f"Failed to retrieve from knowledge base: {str(e)}"
            logger.error(error_msg, exc_info=True)
            raise KnowledgeBaseError(
                error_msg, {"query": query, "knowledge_base_id": knowledge_base_id}
            )
