"""Schemas for the retrieve_hr_policy tool."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RetrievalQuery(BaseModel):
    """Tool input. Field names on the wire are camelCase (topK, scoreThreshold)."""

    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(..., min_length=1, description="The HR question or search query.")
    top_k: int | None = Field(
        None,
        alias="topK",
        gt=0,
        le=50,
        description="Maximum number of results to return (default from env).",
    )
    score_threshold: float | None = Field(
        None,
        alias="scoreThreshold",
        ge=0,
        le=1,
        description="Minimum similarity score (0-1) for a result to be included.",
    )


class RetrievalHit(BaseModel):
    """One ranked chunk. score/text/location/metadata are passed through untouched."""

    rank: int
    score: float | None = None
    text: str | None = None
    location: dict[str, Any] | None = None
    metadata: dict[str, Any] | None = None


class RetrievalResult(BaseModel):
    """Structured tool output."""

    model_config = ConfigDict(populate_by_name=True)

    query: str
    hit_count: int = Field(..., alias="hitCount")
    results: list[RetrievalHit] = Field(default_factory=list)
