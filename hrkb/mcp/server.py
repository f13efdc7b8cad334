"""
MCP tool server: exposes HR knowledge-base retrieval as the `retrieve_hr_policy` tool.

Two transports share one tool implementation:
- stdio, via the MCP SDK low-level server (`hrkb-mcp`, for MCP hosts / inspectors);
- HTTP, as `mcp_router` mounted by the chat server under /mcp.
"""

import asyncio
import logging
import sys
from typing import Any

import mcp.types as types
from fastapi import APIRouter, HTTPException, Request
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from hrkb.core.config import Settings
from hrkb.core.errors import ConfigurationError, RemoteServiceError
from hrkb.schemas.retrieval import RetrievalQuery
from hrkb.services.knowledge_base import BedrockKnowledgeBaseClient, KnowledgeBaseClient
from hrkb.services.retrieval_service import RetrievalToolOutput, retrieve_hr_policy

logger = logging.getLogger(__name__)

SERVER_NAME = "esi-hr-kb-server"
SERVER_VERSION = "0.1.0"
TOOL_NAME = "retrieve_hr_policy"
TOOL_DESCRIPTION = (
    "Searches the ESI HR knowledge base (handbook, PTO, benefits, etc.) "
    "and returns ranked chunks + scores."
)


def tool_definition() -> types.Tool:
    """Tool metadata for discovery; the input schema comes from RetrievalQuery."""
    return types.Tool(
        name=TOOL_NAME,
        description=TOOL_DESCRIPTION,
        inputSchema=RetrievalQuery.model_json_schema(by_alias=True),
    )


def tool_payload(output: RetrievalToolOutput) -> dict[str, Any]:
    """Tool result as plain JSON: structured content, text summary, raw response in _meta."""
    return {
        "structuredContent": output.result.model_dump(by_alias=True),
        "content": [{"type": "text", "text": output.summary}],
        "_meta": {"bedrockRawResponse": output.raw_response},
    }


def call_tool(
    name: str, arguments: dict[str, Any] | None, settings: Settings, client: KnowledgeBaseClient
) -> types.CallToolResult:
    """
    Run a tool call. pydantic ValidationError (bad input), ValueError (unknown
    tool) and remote errors propagate; the MCP server reports them as tool errors.
    """
    logger.info("MCP tool called: %s", name)
    if name != TOOL_NAME:
        raise ValueError(f"Unknown tool: {name}")
    query = RetrievalQuery.model_validate(arguments or {})
    output = retrieve_hr_policy(query, settings=settings, client=client)
    return types.CallToolResult.model_validate(tool_payload(output))


def create_server(settings: Settings, client: KnowledgeBaseClient) -> Server:
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def _list_tools() -> list[types.Tool]:
        return [tool_definition()]

    @server.call_tool()
    async def _call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        return await asyncio.to_thread(call_tool, name, arguments, settings, client)

    return server


async def serve(settings: Settings, client: KnowledgeBaseClient) -> None:
    """Serve the tool over stdio until the host closes the stream."""
    server = create_server(settings, client)
    async with stdio_server() as (read_stream, write_stream):
        # stdout carries the protocol; logging goes to stderr
        logger.info("%s MCP up on stdio", SERVER_NAME)
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run() -> None:
    """Console entry point (hrkb-mcp). Exits with status 1 on startup failure."""
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level, stream=sys.stderr)
    try:
        settings.require_knowledge_base()
    except ConfigurationError as e:
        logger.error(e.message)
        sys.exit(1)
    try:
        asyncio.run(serve(settings, BedrockKnowledgeBaseClient(region=settings.aws_region)))
    except Exception:
        logger.exception("Fatal error starting MCP server")
        sys.exit(1)


# --- HTTP transport ---

mcp_router = APIRouter(tags=["mcp"])


@mcp_router.get("/tools", summary="MCP tool discovery")
def mcp_list_tools() -> dict[str, list[dict[str, Any]]]:
    return {"tools": [tool_definition().model_dump(by_alias=True, exclude_none=True)]}


@mcp_router.post(
    f"/tools/{TOOL_NAME}",
    summary=f"MCP tool: {TOOL_NAME}",
    description="Same tool as the stdio server. 422 on invalid input, 502 when the knowledge base call fails.",
)
def mcp_retrieve_hr_policy(body: RetrievalQuery, request: Request) -> dict[str, Any]:
    logger.info("MCP tool called: %s (http)", TOOL_NAME)
    try:
        output = retrieve_hr_policy(
            body,
            settings=request.app.state.settings,
            client=request.app.state.kb_client,
        )
    except RemoteServiceError as e:
        raise HTTPException(status_code=502, detail=e.message) from e
    return tool_payload(output)


if __name__ == "__main__":
    run()
