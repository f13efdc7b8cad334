"""
Chat: answer the last user turn with retrieve-and-generate over the HR knowledge base.

Responsibility: Validate the conversation shape, build the RetrieveAndGenerate
request, and reshape the response. Called by the API; no HTTP here.
"""

import logging
from typing import Any

from hrkb.core.config import Settings
from hrkb.core.errors import InvalidInputError
from hrkb.schemas.chat import ChatResponse
from hrkb.services.knowledge_base import KnowledgeBaseClient

logger = logging.getLogger(__name__)

NO_ANSWER_PLACEHOLDER = "(No answer returned)"


def extract_question(messages: Any) -> str:
    """
    Return the text of the final turn.

    Raises:
        InvalidInputError: messages is missing, not a list, empty, the last turn is
            not from the user, or its content is not a string.
    """
    if not messages or not isinstance(messages, list):
        raise InvalidInputError("messages array is required")
    last = messages[-1]
    role = last.get("role") if isinstance(last, dict) else None
    if role != "user":
        raise InvalidInputError("last message must be from the user")
    content = last.get("content")
    if not isinstance(content, str):
        raise InvalidInputError("last message content must be a string")
    return content


def build_chat_request(question: str, settings: Settings) -> dict[str, Any]:
    """RetrieveAndGenerate request against the configured knowledge base and model."""
    return {
        "input": {"text": question},
        "retrieveAndGenerateConfiguration": {
            "type": "KNOWLEDGE_BASE",
            "knowledgeBaseConfiguration": {
                "knowledgeBaseId": settings.knowledge_base_id,
                "modelArn": settings.chat_model_arn,
            },
        },
    }


def answer_chat(messages: Any, *, settings: Settings, client: KnowledgeBaseClient) -> ChatResponse:
    """
    Validate the conversation, ask the knowledge base, return answer + citations.

    InvalidInputError is raised before any remote call. Remote failures propagate
    to the caller (the API layer maps them to 500).
    """
    question = extract_question(messages)
    logger.info("[chat:answer_chat] IN  turns=%d question=%r", len(messages), question[:200])
    response = client.retrieve_and_generate(build_chat_request(question, settings))
    answer = (response.get("output") or {}).get("text")
    if answer is None:
        answer = NO_ANSWER_PLACEHOLDER
    citations = response.get("citations")
    if citations is None:
        citations = []
    logger.info("[chat:answer_chat] OUT answer_len=%d citations=%d", len(answer), len(citations))
    return ChatResponse(answer=answer, citations=citations)
