from __future__ import annotations

from flask import Flask, g

from ..api.responses import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    gate = container.gate

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        data = json_body()
        result = container.auth_service.login(data.get("email"), data.get("password"))
        return ok({"token": result.token, "user": result.user}, message="Login successful")

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    @gate.authenticated
    def logout():
        # Tokens are stateless; the client drops its copy.
        return ok(message="Logged out successfully")

    @app.route("/api/auth/change-password", methods=["POST"], endpoint="auth_change_password")
    @gate.authenticated
    def change_password():
        data = json_body()
        container.auth_service.change_password(
            g.principal,
            current_password=data.get("current_password"),
            new_password=data.get("new_password"),
            new_password_confirmation=data.get("new_password_confirmation"),
        )
        return ok(message="Password changed successfully")

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @gate.authenticated
    def me():
        return ok(container.auth_service.profile(g.principal))
