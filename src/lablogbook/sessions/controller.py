from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok, query_date, query_int, query_role
from ..common.validators import require_positive_id
from ..container import Container
from ..core.constants import DEFAULT_SESSION_LOG_LIMIT


def register(app: Flask, container: Container) -> None:
    @app.route("/api/sessions", methods=["POST"], endpoint="open_session")
    def open_session():
        data = json_body()
        user_id = require_positive_id(data.get("user_id"), "user_id")
        session_id = container.session_tracker.open_session(user_id, data.get("workstation_id"))
        return ok({"session_id": session_id}, 201)

    @app.route("/api/sessions/close", methods=["POST"], endpoint="close_session")
    def close_session():
        data = json_body()
        user_id = require_positive_id(data.get("user_id"), "user_id")
        closed = container.session_tracker.close_session(user_id)
        return ok(closed.to_dict())

    @app.route("/api/users/<int:user_id>/sessions", methods=["GET"], endpoint="list_user_sessions")
    def list_user_sessions(user_id: int):
        sessions = container.session_tracker.list_sessions(
            user_id,
            start_date=query_date("start"),
            end_date=query_date("end"),
        )
        return ok([s.to_dict() for s in sessions])

    @app.route("/api/sessions", methods=["GET"], endpoint="list_recent_sessions")
    def list_recent_sessions():
        rows = container.session_tracker.list_recent(
            role=query_role(),
            search=request.args.get("q"),
            limit=query_int("limit", DEFAULT_SESSION_LOG_LIMIT),
        )
        return ok([r.to_dict() for r in rows])
