"""
API handlers: call services, map results/errors to HTTP.

Responsibility: Bridge HTTP types and services. Exception-to-HTTP mapping lives
here so services stay free of FastAPI types.
"""

import asyncio
import logging
from typing import Any

from fastapi.responses import JSONResponse

from hrkb.core.config import Settings
from hrkb.core.errors import InvalidInputError, error_message
from hrkb.schemas.chat import ChatError
from hrkb.services.chat_service import answer_chat
from hrkb.services.knowledge_base import KnowledgeBaseClient

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ChatError(error=message).model_dump())


async def handle_chat(messages: Any, settings: Settings, client: KnowledgeBaseClient) -> JSONResponse:
    """
    Answer the conversation. 400 on malformed input (no remote call made),
    500 with the remote error message when the knowledge-base call fails.
    """
    try:
        # boto3 is blocking; keep it off the event loop
        result = await asyncio.to_thread(answer_chat, messages, settings=settings, client=client)
    except InvalidInputError as e:
        logger.info("[api:handle_chat] rejected: %s", e.message)
        return _error(400, e.message)
    except Exception as e:
        logger.exception("Error in /api/chat")
        return _error(500, error_message(e))
    return JSONResponse(content=result.model_dump(mode="json"))
