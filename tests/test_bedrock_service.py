import pytest
from tenacity import wait_none

from aws_kb_retrieval.services import bedrock_service
from aws_kb_retrieval.services.bedrock_service import BedrockService, create_bedrock_client
from aws_kb_retrieval.utils.config import Config, StaticCredentials
from aws_kb_retrieval.utils.exceptions import KnowledgeBaseError

from conftest import FakeBedrockClient, client_error, make_result


class RecordingSession:
    instances = []

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.clients = []
        RecordingSession.instances.append(self)

    def client(self, service_name):
        self.clients.append(service_name)
        return object()


@pytest.fixture
def recording_session(monkeypatch):
    RecordingSession.instances = []
    monkeypatch.setattr(bedrock_service.boto3, "Session", RecordingSession)
    return RecordingSession


def _without_backoff(service: BedrockService) -> BedrockService:
    service._retrying = service._retrying.copy(wait=wait_none())
    return service


def test_retrieve_builds_single_query():
    client = FakeBedrockClient(results=[make_result("A")])
    service = BedrockService(Config(), client=client)

    response = service.retrieve("what is X", "kb-1", 2)

    assert response["retrievalResults"][0]["content"]["text"] == "A"
    assert client.calls == [{
        "knowledgeBaseId": "kb-1",
        "retrievalQuery": {"text": "what is X"},
        "retrievalConfiguration": {"vectorSearchConfiguration": {"numberOfResults": 2}},
    }]


def test_result_count_is_passed_through_unchanged():
    client = FakeBedrockClient()
    service = BedrockService(Config(), client=client)

    service.retrieve("q", "kb-1", 0)
    service.retrieve("q", "kb-1", 50)

    counts = [
        call["retrievalConfiguration"]["vectorSearchConfiguration"]["numberOfResults"]
        for call in client.calls
    ]
    assert counts == [0, 50]


def test_permanent_client_error_is_wrapped_without_retry():
    client = FakeBedrockClient(errors=[client_error("ResourceNotFoundException")])
    service = BedrockService(Config(retry_attempts=3), client=client)

    with pytest.raises(KnowledgeBaseError) as exc_info:
        service.retrieve("q", "missing-kb", 3)

    assert len(client.calls) == 1
    assert exc_info.value.details == {
        "error_code": "ResourceNotFoundException",
        "query": "q",
        "knowledge_base_id": "missing-kb",
    }


def test_transient_error_not_retried_by_default():
    client = FakeBedrockClient(errors=[client_error("ThrottlingException")])
    service = BedrockService(Config(), client=client)

    with pytest.raises(KnowledgeBaseError) as exc_info:
        service.retrieve("q", "kb-1", 3)

    assert len(client.calls) == 1
    assert exc_info.value.details["error_code"] == "ThrottlingException"


def test_transient_errors_retried_when_configured():
    client = FakeBedrockClient(
        results=[make_result("A")],
        errors=[client_error("ThrottlingException"), client_error("ServiceUnavailableException")],
    )
    service = _without_backoff(BedrockService(Config(retry_attempts=3), client=client))

    response = service.retrieve("q", "kb-1", 3)

    assert len(client.calls) == 3
    assert len(response["retrievalResults"]) == 1


def test_retries_exhausted_raise_knowledge_base_error():
    client = FakeBedrockClient(errors=[client_error("ThrottlingException")] * 2)
    service = _without_backoff(BedrockService(Config(retry_attempts=2), client=client))

    with pytest.raises(KnowledgeBaseError):
        service.retrieve("q", "kb-1", 3)

    assert len(client.calls) == 2


def test_non_client_errors_are_wrapped():
    client = FakeBedrockClient(errors=[ConnectionError("network unreachable")])
    service = BedrockService(Config(retry_attempts=3), client=client)

    with pytest.raises(KnowledgeBaseError) as exc_info:
        service.retrieve("q", "kb-1", 3)

    assert "network unreachable" in exc_info.value.message
    assert len(client.calls) == 1


def test_client_uses_static_credentials(recording_session):
    config = Config(
        aws_region="eu-central-1",
        credentials=StaticCredentials(
            access_key_id="AKIAEXAMPLE", secret_access_key="secret", session_token="token"
        ),
    )

    create_bedrock_client(config)

    session = recording_session.instances[0]
    assert session.kwargs == {
        "aws_access_key_id": "AKIAEXAMPLE",
        "aws_secret_access_key": "secret",
        "aws_session_token": "token",
        "region_name": "eu-central-1",
    }
    assert session.clients == ["bedrock-agent-runtime"]


def test_client_defers_to_ambient_credentials(recording_session):
    BedrockService(Config(aws_region="us-west-2"))

    session = recording_session.instances[0]
    assert session.kwargs == {"region_name": "us-west-2"}
    assert session.clients == ["bedrock-agent-runtime"]
