"""
Knowledge-base client: the three managed Bedrock operations the adapters need.

Responsibility: Hide boto3 behind a small capability interface so the chat,
retrieval and ingestion adapters can be exercised against a test double.
"""

import logging
from typing import Any, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from hrkb.core.errors import RemoteServiceError, error_message

logger = logging.getLogger(__name__)

SIMILARITY_THRESHOLD_KEY = "overrideSimilarityThreshold"


class KnowledgeBaseClient(Protocol):
    """Minimal capability interface over the managed knowledge-base API."""

    def retrieve_and_generate(self, request: dict[str, Any]) -> dict[str, Any]: ...

    def retrieve(self, request: dict[str, Any]) -> dict[str, Any]: ...

    def start_ingestion_job(self, request: dict[str, Any]) -> dict[str, Any]: ...


class BedrockKnowledgeBaseClient:
    """
    KnowledgeBaseClient backed by boto3 `bedrock-agent-runtime` (retrieve,
    retrieve-and-generate) and `bedrock-agent` (ingestion jobs).

    boto3 clients are created lazily on first use and reused; credentials come
    from the normal AWS chain (env, profile, instance role).
    """

    def __init__(
        self,
        region: str,
        runtime_client: Any = None,
        agent_client: Any = None,
    ) -> None:
        self.region = region
        self._runtime_client = runtime_client
        self._agent_client = agent_client

    def _runtime(self) -> Any:
        if self._runtime_client is None:
            self._runtime_client = boto3.client("bedrock-agent-runtime", region_name=self.region)
            logger.info("Bedrock agent runtime client created (region=%s)", self.region)
        return self._runtime_client

    def _agent(self) -> Any:
        if self._agent_client is None:
            self._agent_client = boto3.client("bedrock-agent", region_name=self.region)
            logger.info("Bedrock agent client created (region=%s)", self.region)
        return self._agent_client

    def _call(self, operation: str, fn: Any, request: dict[str, Any]) -> dict[str, Any]:
        try:
            return fn(**request)
        except (ClientError, BotoCoreError) as e:
            logger.warning("[knowledge_base:%s] failed: %s", operation, e)
            raise RemoteServiceError(error_message(e), operation=operation) from e

    def retrieve_and_generate(self, request: dict[str, Any]) -> dict[str, Any]:
        return self._call("retrieve_and_generate", self._runtime().retrieve_and_generate, request)

    def retrieve(self, request: dict[str, Any]) -> dict[str, Any]:
        """
        Call Retrieve and return the response untouched. The API has no
        similarity-threshold member, so an `overrideSimilarityThreshold` in the
        vector search configuration is left out of the outbound call; the
        retrieval service applies it to the chunks it ranks.
        """
        return self._call("retrieve", self._runtime().retrieve, _without_similarity_threshold(request))

    def start_ingestion_job(self, request: dict[str, Any]) -> dict[str, Any]:
        return self._call("start_ingestion_job", self._agent().start_ingestion_job, request)


def _without_similarity_threshold(request: dict[str, Any]) -> dict[str, Any]:
    """Copy of the request without the threshold key. Input is not mutated."""
    retrieval_config = request.get("retrievalConfiguration") or {}
    vector_config = retrieval_config.get("vectorSearchConfiguration") or {}
    if SIMILARITY_THRESHOLD_KEY not in vector_config:
        return request
    vector_config = {k: v for k, v in vector_config.items() if k != SIMILARITY_THRESHOLD_KEY}
    return {
        **request,
        "retrievalConfiguration": {**retrieval_config, "vectorSearchConfiguration": vector_config},
    }
