# Run from project root: hrkb-chat   (or: uvicorn hrkb.main:create_app --factory)

import logging
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from hrkb.api.routes import router
from hrkb.core.config import Settings
from hrkb.mcp.server import mcp_router
from hrkb.services.knowledge_base import BedrockKnowledgeBaseClient, KnowledgeBaseClient

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, client: KnowledgeBaseClient | None = None) -> FastAPI:
    """
    Build the HR KB chat server. Raises ConfigurationError when HR_KB_ID is missing.
    """
    settings = settings or Settings.from_env()
    settings.require_knowledge_base()

    app = FastAPI(title="HR KB Chat Server")
    app.state.settings = settings
    app.state.kb_client = client or BedrockKnowledgeBaseClient(region=settings.aws_region)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    app.include_router(mcp_router, prefix="/mcp")

    # Mounted last so API routes take precedence over files in the public dir.
    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="public")
    else:
        logger.info("Static dir %s not found; serving API only", static_dir)

    logger.info(
        "HR KB chat server ready (region: %s, KB: %s)",
        settings.aws_region, settings.knowledge_base_id,
    )
    return app


def run() -> None:
    """Console entry point: load settings, build the app, serve with uvicorn."""
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level)
    app = create_app(settings)
    logger.info("HR KB demo chat server running on http://localhost:%d", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
