"""
Scheduled knowledge-base sync: Lambda-style handler for a scheduler event.

Deploy with handler `hrkb.ingest.scheduled_sync.handler`. The event payload is
not inspected; every invocation starts one ingestion job. Never raises.
"""

import logging
from functools import lru_cache
from typing import Any

from hrkb.core.config import Settings
from hrkb.core.errors import ConfigurationError, error_message
from hrkb.schemas.ingestion import SyncResponseBody
from hrkb.services.ingestion_service import start_ingestion
from hrkb.services.knowledge_base import BedrockKnowledgeBaseClient, KnowledgeBaseClient

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


@lru_cache(maxsize=None)
def _default_client(region: str) -> BedrockKnowledgeBaseClient:
    """One client per region, reused across warm invocations."""
    return BedrockKnowledgeBaseClient(region=region)


def _response(status_code: int, body: SyncResponseBody) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "body": body.model_dump_json(by_alias=True, exclude_none=True),
    }


def handler(
    event: Any,
    context: Any = None,
    *,
    settings: Settings | None = None,
    client: KnowledgeBaseClient | None = None,
) -> dict[str, Any]:
    """
    Start an ingestion job and return {statusCode, body}.

    200 with ingestionJobId/status on success; 500 with message (and error, when a
    call failed) otherwise.
    """
    settings = settings or Settings.from_env()
    try:
        job = start_ingestion(settings=settings, client=client or _default_client(settings.aws_region))
    except ConfigurationError as e:
        return _response(500, SyncResponseBody(message=e.message))
    except Exception as e:
        logger.exception("Error starting ingestion job")
        return _response(
            500,
            SyncResponseBody(message="Failed to start ingestion job", error=error_message(e)),
        )
    return _response(
        200,
        SyncResponseBody(
            message="Ingestion job started",
            ingestion_job_id=job.ingestion_job_id,
            status=job.status,
        ),
    )
