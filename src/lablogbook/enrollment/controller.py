from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok
from ..common.validators import require_positive_id
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/classes", methods=["POST"], endpoint="create_class")
    def create_class():
        data = json_body()
        instructor_id = data.get("instructor_id")
        class_id = container.class_service.create_class(
            code=data.get("code") or "",
            subject_name=data.get("subject_name") or "",
            instructor_id=require_positive_id(instructor_id, "instructor_id") if instructor_id is not None else None,
            room=data.get("room"),
            section=data.get("section"),
            year_level=data.get("year_level"),
            schedule=data.get("schedule"),
        )
        return ok({"class_id": class_id}, 201)

    @app.route("/api/classes", methods=["GET"], endpoint="list_classes")
    def list_classes():
        instructor_id = request.args.get("instructor_id", type=int)
        return ok([c.to_dict() for c in container.class_service.list_classes(instructor_id=instructor_id)])

    @app.route("/api/classes/<int:class_id>", methods=["GET"], endpoint="get_class")
    def get_class(class_id: int):
        return ok(container.class_service.get_class(class_id).to_dict())

    @app.route("/api/classes/<int:class_id>/roster", methods=["GET"], endpoint="class_roster")
    def class_roster(class_id: int):
        return ok([u.to_dict() for u in container.class_service.list_roster(class_id)])

    @app.route("/api/classes/<int:class_id>/enrollments", methods=["GET"], endpoint="class_enrollments")
    def class_enrollments(class_id: int):
        return ok([e.to_dict() for e in container.class_service.list_enrollments(class_id)])

    @app.route("/api/classes/<int:class_id>/available", methods=["GET"], endpoint="available_students")
    def available_students(class_id: int):
        rows = container.enrollment_manager.list_available_for_enrollment(class_id)
        return ok([r.to_dict() for r in rows])

    @app.route("/api/classes/<int:class_id>/enrollments", methods=["POST"], endpoint="enroll_students")
    def enroll_students(class_id: int):
        data = json_body()
        student_ids = data.get("student_ids")
        if not isinstance(student_ids, list):
            raise ValidationError("student_ids must be a list", fields=("student_ids",))
        actor_id = data.get("actor_id")
        result = container.enrollment_manager.enroll_many(
            student_ids,
            class_id,
            require_positive_id(actor_id, "actor_id") if actor_id is not None else None,
        )
        return ok(result.to_dict())

    @app.route(
        "/api/classes/<int:class_id>/enrollments/<int:student_id>",
        methods=["DELETE"],
        endpoint="unenroll_student",
    )
    def unenroll_student(class_id: int, student_id: int):
        container.enrollment_manager.unenroll(student_id, class_id)
        return ok()
