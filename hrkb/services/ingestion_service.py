"""
Ingestion: start a knowledge-base sync job for the HR data source.

Responsibility: Check the knowledge-base / data-source ids and call
StartIngestionJob. The scheduled handler turns the outcome into a response.
"""

import json
import logging

from hrkb.core.config import Settings
from hrkb.core.errors import ConfigurationError
from hrkb.schemas.ingestion import IngestionJobStatus
from hrkb.services.knowledge_base import KnowledgeBaseClient

logger = logging.getLogger(__name__)


def start_ingestion(*, settings: Settings, client: KnowledgeBaseClient) -> IngestionJobStatus:
    """
    Start an ingestion job and return its id and initial status.

    Raises:
        ConfigurationError: HR_KB_ID or HR_KB_DATASOURCE_ID is missing (no remote call is made).
        Any exception from the client is propagated.
    """
    if not settings.knowledge_base_id or not settings.data_source_id:
        logger.error("Missing env vars HR_KB_ID or HR_KB_DATASOURCE_ID")
        raise ConfigurationError("Missing knowledge base configuration")

    logger.info(
        "Starting ingestion job for KB: %s data source: %s",
        settings.knowledge_base_id, settings.data_source_id,
    )
    response = client.start_ingestion_job(
        {"knowledgeBaseId": settings.knowledge_base_id, "dataSourceId": settings.data_source_id}
    )
    job = response.get("ingestionJob") or {}
    logger.info("Ingestion job started: %s", json.dumps(job, indent=2, default=str))
    return IngestionJobStatus(ingestion_job_id=job.get("ingestionJobId"), status=job.get("status"))
