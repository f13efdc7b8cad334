"""
Application configuration (env, settings, constants).

Responsibility: Centralize config loading and environment variables. A single
Settings object is built at startup and handed to each adapter, so the rest of
the app never reads os.environ directly.
"""

import logging
import math
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from hrkb.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_REGION: str = "us-east-1"
DEFAULT_CHAT_MODEL_ARN: str = (
    "arn:aws:bedrock:us-east-1::foundation-model/anthropic.claude-3-sonnet-20240229-v1:0"
)
DEFAULT_TOP_K: int = 8
DEFAULT_SCORE_THRESHOLD: float = 0.0
DEFAULT_PORT: int = 3000
DEFAULT_STATIC_DIR: str = "public"


def _env_str(name: str, default: str = "") -> str:
    return os.getenv(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("[config] %s=%r is not an integer, using %d", name, raw, default)
        return default


def _env_float_or_nan(name: str, default: float) -> float:
    """Parse a float; an unparseable value becomes NaN rather than the default."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("[config] %s=%r is not a number", name, raw)
        return math.nan


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration for the chat server, tool server and ingestion trigger."""

    aws_region: str = DEFAULT_REGION
    knowledge_base_id: str = ""
    chat_model_arn: str = DEFAULT_CHAT_MODEL_ARN
    default_top_k: int = DEFAULT_TOP_K
    # May be NaN when the env value does not parse; the retrieval tool then
    # sends no threshold at all.
    default_score_threshold: float = DEFAULT_SCORE_THRESHOLD
    data_source_id: str = ""
    port: int = DEFAULT_PORT
    static_dir: str = DEFAULT_STATIC_DIR
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            aws_region=_env_str("AWS_REGION", DEFAULT_REGION),
            knowledge_base_id=_env_str("HR_KB_ID"),
            chat_model_arn=_env_str("HR_CHAT_MODEL_ARN", DEFAULT_CHAT_MODEL_ARN),
            default_top_k=_env_int("HR_KB_DEFAULT_TOP_K", DEFAULT_TOP_K),
            default_score_threshold=_env_float_or_nan(
                "HR_KB_DEFAULT_SCORE_THRESHOLD", DEFAULT_SCORE_THRESHOLD
            ),
            data_source_id=_env_str("HR_KB_DATASOURCE_ID"),
            port=_env_int("PORT", DEFAULT_PORT),
            static_dir=_env_str("HR_CHAT_STATIC_DIR", DEFAULT_STATIC_DIR),
            log_level=_env_str("LOG_LEVEL", "INFO").upper(),
        )

    def require_knowledge_base(self) -> None:
        """Raise ConfigurationError when HR_KB_ID is not set."""
        if not self.knowledge_base_id:
            raise ConfigurationError("HR_KB_ID env var is required")
