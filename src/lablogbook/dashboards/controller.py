from __future__ import annotations

from flask import Flask

from ..common.http import ok, query_date
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/dashboard/admin", methods=["GET"], endpoint="admin_dashboard")
    def admin_dashboard():
        return ok(container.dashboard_service.admin(day=query_date("date")).to_dict())

    @app.route("/api/dashboard/working-student", methods=["GET"], endpoint="working_student_dashboard")
    def working_student_dashboard():
        return ok(container.dashboard_service.working_student().to_dict())

    @app.route("/api/dashboard/instructor/<int:instructor_id>", methods=["GET"], endpoint="instructor_dashboard")
    def instructor_dashboard(instructor_id: int):
        return ok(container.dashboard_service.instructor(instructor_id, day=query_date("date")).to_dict())
