from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok, query_int
from ..common.validators import require_positive_id
from ..container import Container
from ..core.constants import DEFAULT_REPORT_LIMIT
from ..core.enums import ReportStatus
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/feedback", methods=["POST"], endpoint="submit_feedback")
    def submit_feedback():
        data = json_body()
        conditions = data.get("conditions")
        if not isinstance(conditions, dict):
            raise ValidationError("conditions must be an object", fields=("conditions",))
        report_id = container.feedback_workflow.submit(
            require_positive_id(data.get("student_id"), "student_id"),
            data.get("workstation_id") or "",
            conditions,
            data.get("comments"),
        )
        return ok({"report_id": report_id, "status": ReportStatus.PENDING.value}, 201)

    @app.route("/api/feedback/<int:report_id>/forward", methods=["POST"], endpoint="forward_feedback")
    def forward_feedback(report_id: int):
        data = json_body()
        container.feedback_workflow.forward(
            report_id,
            require_positive_id(data.get("actor_id"), "actor_id"),
            data.get("notes"),
        )
        return ok({"report_id": report_id, "status": ReportStatus.FORWARDED.value})

    @app.route("/api/feedback/pending", methods=["GET"], endpoint="list_pending_feedback")
    def list_pending_feedback():
        reports = container.feedback_workflow.list_pending(limit=query_int("limit", None))
        return ok([r.to_dict() for r in reports])

    @app.route("/api/feedback", methods=["GET"], endpoint="list_feedback")
    def list_feedback():
        raw = (request.args.get("status") or "").strip()
        try:
            status = ReportStatus(raw) if raw else None
        except ValueError:
            raise ValidationError(f"Unknown status: {raw}", fields=("status",))
        reports = container.feedback_workflow.list_reports(status=status, limit=query_int("limit", DEFAULT_REPORT_LIMIT))
        return ok([r.to_dict() for r in reports])

    @app.route("/api/feedback/<int:report_id>", methods=["GET"], endpoint="get_feedback")
    def get_feedback(report_id: int):
        return ok(container.feedback_workflow.get_report(report_id).to_dict())
