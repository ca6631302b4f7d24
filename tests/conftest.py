"""Shared fixtures: a fake bedrock-agent-runtime client and wired-up handlers."""

from typing import Any, Dict, List, Optional, Sequence

import pytest
from botocore.exceptions import ClientError

from aws_kb_retrieval.handlers.tool_handler import ToolHandler
from aws_kb_retrieval.services.bedrock_service import BedrockService
from aws_kb_retrieval.services.retrieval_service import RetrievalService
from aws_kb_retrieval.utils.config import Config


class FakeBedrockClient:
    """Records retrieve() calls and replays queued errors, then a fixed response."""

    def __init__(
        self,
        results: Optional[List[Dict[str, Any]]] = None,
        errors: Sequence[Exception] = (),
    ) -> None:
        self.response = {"retrievalResults": results or []}
        self.errors = list(errors)
        self.calls: List[Dict[str, Any]] = []

    def retrieve(self, **params: Any) -> Dict[str, Any]:
        self.calls.append(params)
        if self.errors:
            raise self.errors.pop(0)
        return self.response


def client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": f"{code} raised"}}, "Retrieve")


def make_result(
    text: Optional[str],
    uri: Optional[str] = None,
    score: Optional[float] = None,
    chunk_id: Optional[str] = None,
) -> Dict[str, Any]:
    result: Dict[str, Any] = {"content": {"type": "TEXT"}}
    if text is not None:
        result["content"]["text"] = text
    if uri:
        result["location"] = {"type": "S3", "s3Location": {"uri": uri}}
    if score is not None:
        result["score"] = score
    if chunk_id:
        result["metadata"] = {"x-amz-bedrock-kb-chunk-id": chunk_id}
    return result


def make_handler(client: FakeBedrockClient, config: Optional[Config] = None) -> ToolHandler:
    config = config or Config(aws_region="us-east-1")
    bedrock_service = BedrockService(config, client=client)
    return ToolHandler(config, RetrievalService(bedrock_service))


@pytest.fixture
def fake_client() -> FakeBedrockClient:
    return FakeBedrockClient()
