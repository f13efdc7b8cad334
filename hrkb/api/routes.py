"""
API route aggregator: register endpoints; no logic, only delegate to handlers.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from hrkb.api.handlers import handle_chat
from hrkb.schemas.chat import ChatError, ChatResponse

logger = logging.getLogger(__name__)
router = APIRouter()


# --- System ---

@router.get("/health", tags=["system"])
def health():
    return {"ok": True}


# --- Chat ---

@router.post(
    "/api/chat",
    tags=["chat"],
    summary="Ask the HR knowledge base",
    description="Body: {messages: [{role, content}, ...]}; the last message must be from the user. "
    "Returns answer and citations. 400 on malformed input, 500 when the knowledge base call fails.",
    responses={
        200: {"model": ChatResponse},
        400: {"model": ChatError},
        500: {"model": ChatError},
    },
)
async def post_chat(request: Request) -> JSONResponse:
    # Body is parsed by hand so malformed input yields 400 {error}, not 422.
    try:
        payload = await request.json()
    except ValueError:
        payload = None
    messages = payload.get("messages") if isinstance(payload, dict) else None
    return await handle_chat(messages, request.app.state.settings, request.app.state.kb_client)
