"""Schemas for the chat endpoint."""

from typing import Any

from pydantic import BaseModel, Field


class ChatResponse(BaseModel):
    """Response for POST /api/chat."""

    answer: str = Field(..., description="Generated answer, or a placeholder when none was returned.")
    citations: list[Any] = Field(default_factory=list, description="Citations exactly as returned by the knowledge base.")


class ChatError(BaseModel):
    """Error body for POST /api/chat (400 and 500)."""

    error: str
