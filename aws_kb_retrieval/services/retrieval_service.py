"""Retrieval service that shapes knowledge base results for tool output."""

import posixpath
from typing import List, Optional

from ..models.responses import RAGSource, RetrievalOutcome
from ..models.results import RawResult
from ..utils.exceptions import KnowledgeBaseError
from ..utils.logger import get_logger
from .bedrock_service import BedrockService

logger = get_logger()

# Display limit for sources, independent of how many results were requested
MAX_RAG_SOURCES = 3
CONTEXT_SEPARATOR = "\n\n"


def derive_file_name(uri: Optional[str], index: int) -> str:
    """
    Readable document name for a source location.

    Takes the last path segment (``Source-<index>.txt`` when there is none),
    replaces underscores with spaces and strips a trailing extension, so
    ``s3://bucket/docs/My_File.txt`` becomes ``My File``.
    """
    file_name = (uri or "").split("/")[-1] or f"Source-{index}.txt"
    stem, _ = posixpath.splitext(file_name)
    return stem.replace("_", " ")


def to_rag_source(result: RawResult, index: int) -> RAGSource:
    return RAGSource(
        id=result.chunk_id or f"chunk-{index}",
        file_name=derive_file_name(result.uri, index),
        snippet=result.text or "",
        score=result.score or 0,
    )


def build_outcome(results: List[RawResult]) -> RetrievalOutcome:
    """Join the text of all results into context and list the first sources."""
    with_text = [result for result in results if result.has_text]

    context = CONTEXT_SEPARATOR.join(result.text for result in with_text)
    sources = [to_rag_source(result, index) for index, result in enumerate(with_text)]

    return RetrievalOutcome(
        context=context,
        is_rag_working=True,
        rag_sources=sources[:MAX_RAG_SOURCES],
    )


class RetrievalService:
    """Runs a knowledge base query and shapes the results."""

    def __init__(self, bedrock_service: BedrockService):
        self.bedrock_service = bedrock_service

    def retrieve_context(self, query: str, knowledge_base_id: str, n: int) -> RetrievalOutcome:
        """
        Retrieve context for a query.

        Backend failures are logged and reported as an outcome with
        ``is_rag_working`` set to False rather than raised.

        Args:
            query: The search query
            knowledge_base_id: The knowledge base to search
            n: Number of results to request

        Returns:
            RetrievalOutcome with context text and at most three sources
        """
        try:
            response = self.bedrock_service.retrieve(query, knowledge_base_id, n)
        except KnowledgeBaseError as e:
            logger.error(f"RAG error: {e.message}", extra={"details": e.details})
            return RetrievalOutcome(is_rag_working=False)

        raw_results = [
            RawResult.from_bedrock(item) for item in response.get("retrievalResults") or []
        ]
        outcome = build_outcome(raw_results)

        logger.debug(
            f"Built context from {len(raw_results)} results",
            extra={"knowledge_base_id": knowledge_base_id, "sources": len(outcome.rag_sources)},
        )
        return outcome
