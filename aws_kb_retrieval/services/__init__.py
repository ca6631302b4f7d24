"""Service layer for business logic."""

from .bedrock_service import BedrockService
from .retrieval_service import RetrievalService

__all__ = ["BedrockService", "RetrievalService"]
