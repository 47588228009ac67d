# src/skytask/functions/app.py

"""
WSGI app exposing the two server-side functions.

Both exist only to keep the provider API key off the client:
- POST /generate-subtasks  {"taskTitle": str}          -> {"subtasks": [str]}
- POST /semantic-search    {"query": str, "userId"?}   -> {"results": [...]}

Errors are always {"error": str[, "details": str]} with 400 (bad input) or 500.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from ..config import get_settings
from ..core.ports import LLMClient, SimilarityIndex
from ..errors import ConfigurationError, FunctionError
from ..llm.client import OpenAILLMClient
from ..logging_setup import quiet_http_libraries, setup_logging
from ..storage.supabase_store import SupabaseSimilarityIndex, create_backend_client
from .search import require_query, semantic_search
from .subtasks import generate_subtasks, require_task_title

logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization", "X-Client-Info", "Apikey"]

LLMFactory = Callable[[], LLMClient]
IndexFactory = Callable[[], SimilarityIndex]


def _default_llm_factory(settings: Any) -> LLMFactory:
    def build() -> LLMClient:
        return OpenAILLMClient(settings)

    return build


def _default_index_factory(settings: Any) -> IndexFactory:
    def build() -> SimilarityIndex:
        key = getattr(settings, "supabase_service_role_key", None)
        if not key:
            raise ConfigurationError("Backend service role key not configured")
        return SupabaseSimilarityIndex(create_backend_client(settings.supabase_url, key))

    return build


def create_app(
    settings: Any = None,
    *,
    llm_factory: LLMFactory | None = None,
    index_factory: IndexFactory | None = None,
) -> Flask:
    """
    Build the functions app.

    Clients are created per request so a missing credential is reported as a
    500 on the request that needs it rather than at import/startup time.
    """
    if settings is None:
        settings = get_settings()
    if llm_factory is None:
        llm_factory = _default_llm_factory(settings)
    if index_factory is None:
        index_factory = _default_index_factory(settings)

    app = Flask(__name__)
    CORS(app, origins="*", send_wildcard=True, methods=CORS_METHODS, allow_headers=CORS_HEADERS)

    @app.errorhandler(FunctionError)
    def _function_error(e: FunctionError):
        if e.status >= 500:
            logger.error("Function error: %s details=%s", e.message, e.details)
        return jsonify(e.to_payload()), e.status

    @app.errorhandler(Exception)
    def _unexpected_error(e: Exception):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error in %s", request.path)
        return jsonify({"error": str(e) or "An error occurred"}), 500

    @app.get("/healthz")
    def healthz():
        return jsonify({"ok": True})

    @app.post("/generate-subtasks")
    def generate_subtasks_route():
        payload = request.get_json(force=True, silent=True)
        task_title = require_task_title(payload)
        llm = llm_factory()
        subtasks = generate_subtasks(llm, task_title)
        return jsonify({"subtasks": subtasks})

    @app.post("/semantic-search")
    def semantic_search_route():
        payload = request.get_json(force=True, silent=True)
        query, user_id = require_query(payload)
        llm = llm_factory()
        index = index_factory()
        results = semantic_search(llm, index, query, user_id=user_id)
        return jsonify({"results": results})

    return app


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    setup_logging(log_dir=settings.data_dir, console_level=getattr(logging, level_name, logging.INFO))
    quiet_http_libraries()

    app = create_app(settings)
    logger.info("Starting functions server on %s:%s", settings.functions_host, settings.functions_port)
    app.run(host=settings.functions_host, port=settings.functions_port)


if __name__ == "__main__":
    main()
