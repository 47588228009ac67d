# src/skytask/functions/search.py

from __future__ import annotations

import logging
from typing import Any

from ..core.ports import LLMClient, SimilarityIndex
from ..errors import BadRequestError

logger = logging.getLogger(__name__)

SIMILARITY_THRESHOLD = 0.7
MATCH_COUNT = 2


def require_query(payload: Any) -> tuple[str, str | None]:
    """Validate a search request body; returns (query, user_id)."""
    if not isinstance(payload, dict):
        raise BadRequestError("Query is required")
    query = payload.get("query")
    if not isinstance(query, str) or not query.strip():
        raise BadRequestError("Query is required")
    user_id = payload.get("userId")
    return query, (str(user_id) if user_id else None)


def semantic_search(
    llm: LLMClient,
    index: SimilarityIndex,
    query: str,
    *,
    user_id: str | None = None,
) -> list[dict[str, Any]]:
    """
    Embed `query` and return the tasks the similarity procedure matches.

    Threshold and result cap are fixed; `user_id` narrows the search to one owner.
    """
    embedding = llm.embed(query)
    rows = index.search_similar(
        embedding,
        threshold=SIMILARITY_THRESHOLD,
        limit=MATCH_COUNT,
        user_id=user_id,
    )
    logger.info("Semantic search returned %d rows (user_filter=%s)", len(rows or []), bool(user_id))
    return list(rows or [])
