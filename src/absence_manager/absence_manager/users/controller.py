from __future__ import annotations

from flask import Flask, g

from ..api.responses import created, json_body, ok
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    admin_only = container.gate.authorize(Role.ADMIN)
    users = container.user_service

    @app.route("/api/users", methods=["GET"], endpoint="users_list")
    @admin_only
    def list_users():
        return ok([u.to_public() for u in users.list_users()])

    @app.route("/api/users", methods=["POST"], endpoint="users_create")
    @admin_only
    def create_user():
        data = json_body()
        user = users.create(
            name=data.get("name"),
            email=data.get("email"),
            password=data.get("password"),
            role=data.get("role"),
        )
        return created(user.to_public(), message="User created")

    @app.route("/api/users/<user_id>", methods=["GET"], endpoint="users_get")
    @admin_only
    def get_user(user_id: str):
        return ok(users.get(user_id).to_public())

    @app.route("/api/users/<user_id>", methods=["PUT"], endpoint="users_update")
    @admin_only
    def update_user(user_id: str):
        return ok(users.update(user_id, json_body()).to_public(), message="User updated")

    @app.route("/api/users/<user_id>", methods=["DELETE"], endpoint="users_delete")
    @admin_only
    def delete_user(user_id: str):
        users.delete(user_id, current_user_id=g.principal.principal_id)
        return ok(message="User removed")
