from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok, query_role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/users", methods=["POST"], endpoint="create_user")
    def create_user():
        data = json_body()
        role = data.pop("role", None)
        user_id = container.user_service.create_account(role=role or "", fields=data)
        return ok({"user_id": user_id}, 201)

    @app.route("/api/users", methods=["GET"], endpoint="list_users")
    def list_users():
        users = container.user_service.list_users(role=query_role(), search=request.args.get("q"))
        return ok([u.to_dict() for u in users])

    @app.route("/api/users/<int:user_id>", methods=["GET"], endpoint="get_user")
    def get_user(user_id: int):
        return ok(container.user_service.get_user(user_id).to_dict())

    @app.route("/api/users/<int:user_id>", methods=["PATCH"], endpoint="update_user")
    def update_user(user_id: int):
        return ok(container.user_service.update_user(user_id, json_body()).to_dict())

    @app.route("/api/users/<int:user_id>/password", methods=["POST"], endpoint="change_password")
    def change_password(user_id: int):
        data = json_body()
        container.user_service.change_password(
            user_id,
            current_password=str(data.get("current_password") or ""),
            new_password=str(data.get("new_password") or ""),
        )
        return ok()

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="delete_user")
    def delete_user(user_id: int):
        container.user_service.delete_user(user_id)
        return ok()

