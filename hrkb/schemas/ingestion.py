"""Schemas for the scheduled ingestion trigger."""

from pydantic import BaseModel, ConfigDict, Field


class IngestionJobStatus(BaseModel):
    """Job id and initial status as reported by the knowledge base."""

    ingestion_job_id: str | None = None
    status: str | None = None


class SyncResponseBody(BaseModel):
    """JSON body returned by the scheduled handler. None fields are omitted on output."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    ingestion_job_id: str | None = Field(None, alias="ingestionJobId")
    status: str | None = None
    error: str | None = None
