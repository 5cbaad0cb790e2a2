from __future__ import annotations

from flask import Blueprint, jsonify, request

from core.logging_utils import get_logger, log_event

from .processor import SAMPLE_QUESTIONS, QueryProcessor

log = get_logger(__name__)


def create_bikeshare_blueprint(processor: QueryProcessor) -> Blueprint:
    bp = Blueprint("bikeshare", __name__)

    @bp.post("/query")
    def query():
        payload = request.get_json(silent=True) or {}
        question = payload.get("question") if isinstance(payload, dict) else None
        if not isinstance(question, str) or not question.strip():
            log_event(log, "http", "query.bad_request", {"payload_type": type(payload).__name__})
            return jsonify({"ok": False, "error": "question required"}), 400

        outcome = processor.process_query(question)
        body = {"sql": outcome.sql, "result": outcome.result, "error": outcome.error}
        if payload.get("explain"):
            body["explanation"] = outcome.explanation
            body["execution_time"] = outcome.execution_time
        return jsonify(body)

    @bp.get("/sample-questions")
    def sample_questions():
        return jsonify({"questions": list(SAMPLE_QUESTIONS)})

    return bp


__all__ = ["create_bikeshare_blueprint"]
