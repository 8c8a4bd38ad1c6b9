from __future__ import annotations

from flask import Flask, request

from ..api.responses import created, json_body, ok
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    gate = container.gate
    teachers = container.teacher_service

    @app.route("/api/teachers", methods=["GET"], endpoint="teachers_list")
    @gate.authorize(Role.ADMIN, Role.SG)
    def list_teachers():
        return ok([teachers.to_public(t) for t in teachers.list_teachers()])

    @app.route("/api/teachers", methods=["POST"], endpoint="teachers_create")
    @gate.authorize(Role.ADMIN)
    def create_teacher():
        data = json_body()
        teacher = teachers.create(
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
            email=data.get("email"),
            matricule=data.get("matricule"),
            password=data.get("password"),
        )
        return created(teachers.to_public(teacher), message="Teacher created")

    @app.route("/api/teachers/<teacher_id>", methods=["GET"], endpoint="teachers_get")
    @gate.authorize(Role.ADMIN, Role.SG)
    def get_teacher(teacher_id: str):
        return ok(teachers.to_public(teachers.get(teacher_id)))

    @app.route("/api/teachers/<teacher_id>", methods=["PUT"], endpoint="teachers_update")
    @gate.authorize(Role.ADMIN)
    def update_teacher(teacher_id: str):
        return ok(teachers.to_public(teachers.update(teacher_id, json_body())), message="Teacher updated")

    @app.route("/api/teachers/<teacher_id>", methods=["DELETE"], endpoint="teachers_delete")
    @gate.authorize(Role.ADMIN)
    def delete_teacher(teacher_id: str):
        teachers.delete(teacher_id)
        return ok(message="Teacher deleted")

    @app.route("/api/teachers/<teacher_id>/schedule", methods=["POST"], endpoint="teachers_upload_schedule")
    @gate.authorize(Role.ADMIN)
    def upload_schedule(teacher_id: str):
        teacher = teachers.upload_schedule(teacher_id, request.files.get("schedule") or request.files.get("file"))
        return ok(teachers.to_public(teacher), message="Schedule uploaded successfully")
