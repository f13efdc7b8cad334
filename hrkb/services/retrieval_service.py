"""
Retrieval: the retrieve_hr_policy tool.

Responsibility: Resolve topK / score threshold against configured defaults,
call Retrieve on the HR knowledge base, rank the returned chunks in response
order, and produce structured + one-line text output.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any

from hrkb.core.config import Settings
from hrkb.schemas.retrieval import RetrievalHit, RetrievalQuery, RetrievalResult
from hrkb.services.knowledge_base import SIMILARITY_THRESHOLD_KEY, KnowledgeBaseClient

logger = logging.getLogger(__name__)


@dataclass
class RetrievalToolOutput:
    """Everything a tool host needs: structured result, summary line, raw response."""

    result: RetrievalResult
    summary: str
    raw_response: dict[str, Any]


def resolve_top_k(query: RetrievalQuery, settings: Settings) -> int:
    return query.top_k if query.top_k is not None else settings.default_top_k


def resolve_score_threshold(query: RetrievalQuery, settings: Settings) -> float | None:
    """Explicit value wins; else the configured default, or None when that default is NaN."""
    if query.score_threshold is not None:
        return query.score_threshold
    if math.isnan(settings.default_score_threshold):
        return None
    return settings.default_score_threshold


def build_retrieve_request(query: RetrievalQuery, settings: Settings) -> dict[str, Any]:
    vector_config: dict[str, Any] = {"numberOfResults": resolve_top_k(query, settings)}
    threshold = resolve_score_threshold(query, settings)
    if threshold is not None:
        vector_config[SIMILARITY_THRESHOLD_KEY] = threshold
    return {
        "knowledgeBaseId": settings.knowledge_base_id,
        "retrievalQuery": {"text": query.query},
        "retrievalConfiguration": {"vectorSearchConfiguration": vector_config},
    }


def apply_score_threshold(
    raw_results: list[dict[str, Any]], threshold: float | None
) -> list[dict[str, Any]]:
    """Keep chunks scoring at least `threshold`. Unscored chunks are kept; None keeps all."""
    if threshold is None:
        return raw_results
    return [r for r in raw_results if r.get("score") is None or r["score"] >= threshold]


def rank_results(raw_results: list[dict[str, Any]]) -> list[RetrievalHit]:
    """1-based rank in response order; nothing is re-sorted."""
    return [
        RetrievalHit(
            rank=i,
            score=r.get("score"),
            text=(r.get("content") or {}).get("text"),
            location=r.get("location"),
            metadata=r.get("metadata"),
        )
        for i, r in enumerate(raw_results, start=1)
    ]


def summarize(query: str, hit_count: int) -> str:
    if hit_count == 0:
        return f'No HR knowledge-base results found for: "{query}".'
    return f'Retrieved {hit_count} HR knowledge-base chunks for: "{query}".'


def retrieve_hr_policy(
    query: RetrievalQuery, *, settings: Settings, client: KnowledgeBaseClient
) -> RetrievalToolOutput:
    """
    Run one retrieval. Zero hits is a normal result; remote failures propagate.
    The score threshold applies to the ranked chunks only; raw_response is what
    the knowledge base returned.
    """
    request = build_retrieve_request(query, settings)
    vector_config = request["retrievalConfiguration"]["vectorSearchConfiguration"]
    logger.info(
        "[retrieval:retrieve_hr_policy] IN  query=%r top_k=%d threshold=%s",
        query.query, vector_config["numberOfResults"], vector_config.get(SIMILARITY_THRESHOLD_KEY),
    )
    response = client.retrieve(request)
    raw_results = response.get("retrievalResults") or []
    kept = apply_score_threshold(raw_results, vector_config.get(SIMILARITY_THRESHOLD_KEY))
    if len(kept) != len(raw_results):
        logger.info(
            "[retrieval:retrieve_hr_policy] threshold dropped %d of %d results",
            len(raw_results) - len(kept), len(raw_results),
        )
    hits = rank_results(kept)
    result = RetrievalResult(query=query.query, hit_count=len(hits), results=hits)
    logger.info("[retrieval:retrieve_hr_policy] OUT hits=%d", len(hits))
    return RetrievalToolOutput(result=result, summary=summarize(query.query, len(hits)), raw_response=response)
