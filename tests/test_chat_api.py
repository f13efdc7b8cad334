"""
Integration tests for POST /api/chat.

Uses a fake knowledge-base client so tests do not require AWS.
"""

import pytest
from fastapi.testclient import TestClient

from hrkb.core.config import Settings
from hrkb.core.errors import ConfigurationError, RemoteServiceError
from hrkb.main import create_app


@pytest.fixture
def client(settings: Settings, fake_client) -> TestClient:
    return TestClient(create_app(settings, client=fake_client))


def test_chat_returns_answer_and_citations(client: TestClient, fake_client) -> None:
    citations = [{"generatedResponsePart": {"textResponsePart": {"text": "20 days"}}, "retrievedReferences": []}]
    fake_client.response = {"output": {"text": "You get 20 days of PTO."}, "citations": citations}
    response = client.post(
        "/api/chat",
        json={"messages": [
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hello"},
            {"role": "user", "content": "How much PTO do I get?"},
        ]},
    )
    assert response.status_code == 200
    assert response.json() == {"answer": "You get 20 days of PTO.", "citations": citations}


def test_chat_sends_last_user_turn_to_configured_kb_and_model(
    client: TestClient, fake_client, settings: Settings
) -> None:
    fake_client.response = {"output": {"text": "ok"}}
    client.post("/api/chat", json={"messages": [{"role": "user", "content": "What is the dress code?"}]})
    assert len(fake_client.calls) == 1
    operation, request = fake_client.calls[0]
    assert operation == "retrieve_and_generate"
    assert request["input"] == {"text": "What is the dress code?"}
    kb_config = request["retrieveAndGenerateConfiguration"]
    assert kb_config["type"] == "KNOWLEDGE_BASE"
    assert kb_config["knowledgeBaseConfiguration"] == {
        "knowledgeBaseId": "KB123",
        "modelArn": settings.chat_model_arn,
    }


def test_chat_missing_output_text_uses_placeholder(client: TestClient, fake_client) -> None:
    fake_client.response = {}
    response = client.post("/api/chat", json={"messages": [{"role": "user", "content": "Anything?"}]})
    assert response.status_code == 200
    assert response.json() == {"answer": "(No answer returned)", "citations": []}


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"messages": None},
        {"messages": []},
        {"messages": "hello"},
        {"messages": {"role": "user", "content": "hi"}},
        ["not", "an", "object"],
    ],
)
def test_chat_missing_or_empty_messages_returns_400(
    client: TestClient, fake_client, body: object
) -> None:
    response = client.post("/api/chat", json=body)
    assert response.status_code == 400
    assert response.json() == {"error": "messages array is required"}
    assert fake_client.calls == []


def test_chat_invalid_json_returns_400(client: TestClient, fake_client) -> None:
    response = client.post("/api/chat", content=b"{not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert fake_client.calls == []


@pytest.mark.parametrize(
    "messages",
    [
        [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "hello"}],
        [{"role": "system", "content": "be nice"}],
        [{"content": "no role"}],
        ["just a string"],
    ],
)
def test_chat_last_message_not_from_user_returns_400(
    client: TestClient, fake_client, messages: list
) -> None:
    response = client.post("/api/chat", json={"messages": messages})
    assert response.status_code == 400
    assert response.json() == {"error": "last message must be from the user"}
    assert fake_client.calls == []


def test_chat_non_string_content_returns_400(client: TestClient, fake_client) -> None:
    response = client.post("/api/chat", json={"messages": [{"role": "user", "content": 42}]})
    assert response.status_code == 400
    assert fake_client.calls == []


def test_chat_remote_failure_returns_500_with_message(client: TestClient, fake_client) -> None:
    fake_client.error = RemoteServiceError("Throttled by Bedrock", operation="retrieve_and_generate")
    response = client.post("/api/chat", json={"messages": [{"role": "user", "content": "PTO?"}]})
    assert response.status_code == 500
    assert response.json() == {"error": "Throttled by Bedrock"}


def test_chat_unexpected_exception_without_message_returns_fallback(
    client: TestClient, fake_client
) -> None:
    fake_client.error = RuntimeError()
    response = client.post("/api/chat", json={"messages": [{"role": "user", "content": "PTO?"}]})
    assert response.status_code == 500
    assert response.json() == {"error": "Unknown error"}


def test_server_keeps_serving_after_failure(client: TestClient, fake_client) -> None:
    fake_client.error = RuntimeError("boom")
    assert client.post("/api/chat", json={"messages": [{"role": "user", "content": "a"}]}).status_code == 500
    fake_client.error = None
    fake_client.response = {"output": {"text": "fine"}}
    response = client.post("/api/chat", json={"messages": [{"role": "user", "content": "b"}]})
    assert response.status_code == 200
    assert response.json()["answer"] == "fine"


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"ok": True}


def test_create_app_without_kb_id_fails_at_startup(fake_client) -> None:
    with pytest.raises(ConfigurationError):
        create_app(Settings(knowledge_base_id=""), client=fake_client)


def test_static_files_served_from_public_dir(tmp_path, fake_client) -> None:
    (tmp_path / "index.html").write_text("<h1>HR chat</h1>")
    app = create_app(Settings(knowledge_base_id="KB123", static_dir=str(tmp_path)), client=fake_client)
    client = TestClient(app)
    assert "HR chat" in client.get("/").text
    fake_client.response = {"output": {"text": "ok"}}
    assert client.post("/api/chat", json={"messages": [{"role": "user", "content": "q"}]}).status_code == 200
