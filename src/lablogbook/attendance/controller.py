from __future__ import annotations

from flask import Flask

from ..common.http import ok, query_date
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/users/<int:user_id>/attendance", methods=["POST"], endpoint="record_attendance")
    def record_attendance(user_id: int):
        return ok(container.attendance_service.record_attendance(user_id).to_dict())

    @app.route("/api/users/<int:user_id>/attendance", methods=["GET"], endpoint="attendance_history")
    def attendance_history(user_id: int):
        records = container.attendance_service.history(user_id, start=query_date("start"), end=query_date("end"))
        return ok([r.to_dict() for r in records])

    @app.route("/api/users/<int:user_id>/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    def attendance_summary(user_id: int):
        summary = container.attendance_service.summarize(user_id, start=query_date("start"), end=query_date("end"))
        return ok(summary.to_dict())
