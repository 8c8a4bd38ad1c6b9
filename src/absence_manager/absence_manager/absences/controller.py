from __future__ import annotations

from flask import Flask, g, request

from ..api.responses import created, json_body, ok
from ..container import Container
from ..core.enums import Role

ALL_ROLES = (Role.ADMIN, Role.SG, Role.TEACHER)
SUPERVISORS = (Role.ADMIN, Role.SG)


def register(app: Flask, container: Container) -> None:
    gate = container.gate
    absences = container.absence_service

    @app.route("/api/absences", methods=["GET"], endpoint="absences_list")
    @gate.authorize(*ALL_ROLES)
    def list_records():
        return ok(
            absences.list_records(
                group_id=request.args.get("group_id"),
                on_date=request.args.get("date"),
                start_date=request.args.get("start_date"),
                end_date=request.args.get("end_date"),
            )
        )

    @app.route("/api/absences", methods=["POST"], endpoint="absences_create")
    @gate.authorize(*ALL_ROLES)
    def create_record():
        data = json_body()
        record = absences.create(
            record_date=data.get("date"),
            group_id=data.get("group_id"),
            teacher_id=data.get("teacher_id"),
            start_time=data.get("start_time"),
            end_time=data.get("end_time"),
            students=data.get("students", []),
        )
        return created(record, message="Absence record created")

    @app.route("/api/absences/stats", methods=["GET"], endpoint="absences_stats")
    @gate.authorize(*ALL_ROLES)
    def stats():
        return ok(
            absences.stats(
                group_id=request.args.get("group_id"),
                start_date=request.args.get("start_date"),
                end_date=request.args.get("end_date"),
            )
        )

    @app.route("/api/absences/group/<group_id>", methods=["GET"], endpoint="absences_by_group")
    @gate.authorize(*ALL_ROLES)
    def records_for_group(group_id: str):
        return ok(absences.list_records(group_id=group_id))

    @app.route("/api/absences/validate", methods=["POST"], endpoint="absences_validate")
    @gate.authorize(*SUPERVISORS)
    def validate():
        return ok(absences.validate(json_body(), validated_by=g.principal.principal_id))

    @app.route("/api/absences/validate-displayed", methods=["POST"], endpoint="absences_validate_displayed")
    @gate.authorize(*SUPERVISORS)
    def validate_displayed():
        result = absences.validate_displayed(json_body(), validated_by=g.principal.principal_id)
        return ok(result, message=f"{result['validated_count']} absences validées avec succès")

    @app.route("/api/absences/justify", methods=["POST"], endpoint="absences_justify")
    @gate.authorize(*SUPERVISORS)
    def justify():
        return ok(absences.justify(json_body()))

    @app.route("/api/absences/<record_id>", methods=["GET"], endpoint="absences_get")
    @gate.authorize(*ALL_ROLES)
    def get_record(record_id: str):
        return ok(absences.get(record_id))

    @app.route("/api/absences/<record_id>", methods=["PUT"], endpoint="absences_update")
    @gate.authorize(*SUPERVISORS)
    def update_record(record_id: str):
        return ok(absences.update(record_id, json_body()), message="Absence record updated")

    @app.route("/api/absences/<record_id>", methods=["DELETE"], endpoint="absences_delete")
    @gate.authorize(*SUPERVISORS)
    def delete_record(record_id: str):
        absences.delete(record_id)
        return ok(message="Absence record deleted")

    @app.route("/api/absences/<absence_id>/billet-entree", methods=["PATCH"], endpoint="absences_billet_entree")
    @gate.authorize(*SUPERVISORS)
    def billet_entree(absence_id: str):
        return ok(absences.mark_billet_entree(absence_id).to_dict())

    @app.route("/api/absences/trainee-absences/<absence_id>", methods=["PATCH"], endpoint="absences_update_entry")
    @gate.authorize(*SUPERVISORS)
    def update_entry(absence_id: str):
        entry = absences.update_status(absence_id, json_body().get("status"))
        return ok(entry.to_dict(), message="Trainee absence status updated successfully")

    @app.route(
        "/api/absences/trainee-absences/<absence_id>/update-column",
        methods=["PATCH"],
        endpoint="absences_update_entry_column",
    )
    @gate.authorize(*SUPERVISORS)
    def update_entry_column(absence_id: str):
        data = json_body()
        entry = absences.update_column(absence_id, data.get("column"), data.get("value"))
        return ok(entry.to_dict(), message="Trainee absence updated successfully")
