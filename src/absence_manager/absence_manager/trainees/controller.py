from __future__ import annotations

import io

from flask import Flask, request

from ..api.responses import created, json_body, ok
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import BadRequestError

READERS = (Role.ADMIN, Role.SG, Role.TEACHER)
WRITERS = (Role.ADMIN, Role.SG)


def register(app: Flask, container: Container) -> None:
    gate = container.gate
    trainees = container.trainee_service

    @app.route("/api/trainees", methods=["GET"], endpoint="trainees_list")
    @gate.authorize(*READERS)
    def list_trainees():
        return ok(trainees.list_trainees(group_name=request.args.get("group") or None))

    @app.route("/api/trainees/with-stats", methods=["GET"], endpoint="trainees_with_stats")
    @gate.authorize(*READERS)
    def list_with_stats():
        return ok(trainees.list_with_stats())

    @app.route("/api/trainees", methods=["POST"], endpoint="trainees_create")
    @gate.authorize(*WRITERS)
    def create_trainee():
        data = json_body()
        trainee = trainees.create(
            cef=data.get("cef"),
            name=data.get("name"),
            first_name=data.get("first_name"),
            group_name=data.get("groupe"),
            phone=data.get("phone"),
        )
        return created(trainee.to_dict(), message="Trainee created")

    @app.route("/api/trainees/import", methods=["POST"], endpoint="trainees_import")
    @gate.authorize(*WRITERS)
    def import_trainees():
        upload = request.files.get("file")
        if upload is None or not upload.filename:
            raise BadRequestError("No file uploaded")
        result = trainees.import_file(io.BytesIO(upload.read()), upload.filename)
        return ok(result, message=f"{result['imported']} stagiaires importés")

    @app.route("/api/trainees/delete-all", methods=["DELETE"], endpoint="trainees_delete_all")
    @gate.authorize(*WRITERS)
    def delete_all():
        result = trainees.delete_all()
        return ok(result, message="Tous les stagiaires et leurs absences ont été supprimés")

    @app.route("/api/trainees/<cef>", methods=["GET"], endpoint="trainees_get")
    @gate.authorize(*READERS)
    def get_trainee(cef: str):
        return ok(trainees.detail(cef))

    @app.route("/api/trainees/<cef>", methods=["PUT"], endpoint="trainees_update")
    @gate.authorize(*WRITERS)
    def update_trainee(cef: str):
        return ok(trainees.update(cef, json_body()).to_dict(), message="Trainee updated")

    @app.route("/api/trainees/<cef>", methods=["DELETE"], endpoint="trainees_delete")
    @gate.authorize(*WRITERS)
    def delete_trainee(cef: str):
        trainees.delete(cef)
        return ok(message="Trainee deleted")

    @app.route("/api/trainees/<cef>/absences", methods=["GET"], endpoint="trainees_absences")
    @gate.authorize(*READERS)
    def trainee_absences(cef: str):
        return ok(trainees.absences(cef))

    @app.route("/api/trainees/<cef>/statistics", methods=["GET"], endpoint="trainees_statistics")
    @gate.authorize(*READERS)
    def trainee_statistics(cef: str):
        return ok(trainees.statistics(cef))
