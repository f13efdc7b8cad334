"""Shared fixtures: settings and a recording fake knowledge-base client."""

from typing import Any

import pytest

from hrkb.core.config import Settings


class FakeKnowledgeBaseClient:
    """Records each request; returns the canned response or raises the canned error."""

    def __init__(self, response: dict[str, Any] | None = None, error: Exception | None = None) -> None:
        self.response = response if response is not None else {}
        self.error = error
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def _handle(self, operation: str, request: dict[str, Any]) -> dict[str, Any]:
        self.calls.append((operation, request))
        if self.error is not None:
            raise self.error
        return self.response

    def retrieve_and_generate(self, request: dict[str, Any]) -> dict[str, Any]:
        return self._handle("retrieve_and_generate", request)

    def retrieve(self, request: dict[str, Any]) -> dict[str, Any]:
        return self._handle("retrieve", request)

    def start_ingestion_job(self, request: dict[str, Any]) -> dict[str, Any]:
        return self._handle("start_ingestion_job", request)


@pytest.fixture
def settings() -> Settings:
    return Settings(knowledge_base_id="KB123", data_source_id="DS456", static_dir="does-not-exist")


@pytest.fixture
def fake_client() -> FakeKnowledgeBaseClient:
    return FakeKnowledgeBaseClient()
