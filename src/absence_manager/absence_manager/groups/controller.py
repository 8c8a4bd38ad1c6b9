from __future__ import annotations

from flask import Flask, g, request

from ..api.responses import created, json_body, ok
from ..container import Container
from ..core.enums import Role

ALL_ROLES = (Role.ADMIN, Role.SG, Role.TEACHER)


def register(app: Flask, container: Container) -> None:
    gate = container.gate
    groups = container.group_service

    @app.route("/api/groups", methods=["GET"], endpoint="groups_list")
    @gate.authorize(*ALL_ROLES)
    def list_groups():
        return ok([grp.to_dict() for grp in groups.list_groups()])

    @app.route("/api/groups", methods=["POST"], endpoint="groups_create")
    @gate.authorize(Role.ADMIN)
    def create_group():
        data = json_body()
        group = groups.create(
            name=data.get("name"),
            filiere=data.get("filiere"),
            annee=data.get("annee"),
            created_by=g.principal.principal_id,
        )
        return created(group.to_dict(), message="Group created")

    @app.route("/api/groups/<group_id>", methods=["GET"], endpoint="groups_get")
    @gate.authorize(*ALL_ROLES)
    def get_group(group_id: str):
        return ok(groups.get(group_id).to_dict())

    @app.route("/api/groups/<group_id>", methods=["PUT"], endpoint="groups_update")
    @gate.authorize(Role.ADMIN)
    def update_group(group_id: str):
        return ok(groups.update(group_id, json_body()).to_dict(), message="Group updated")

    @app.route("/api/groups/<group_id>", methods=["DELETE"], endpoint="groups_delete")
    @gate.authorize(Role.ADMIN)
    def delete_group(group_id: str):
        groups.delete(group_id)
        return ok(message="Group deleted")

    @app.route("/api/groups/<name>/trainees", methods=["GET"], endpoint="groups_trainees")
    @gate.authorize(*ALL_ROLES)
    def group_trainees(name: str):
        group = groups.get_by_name(name)
        return ok(container.trainee_service.list_trainees(group_name=group.name))

    @app.route("/api/groups/<name>/absences", methods=["GET"], endpoint="groups_absences")
    @gate.authorize(*ALL_ROLES)
    def group_absences(name: str):
        records = container.absence_service.list_for_group_name(
            name,
            on_date=request.args.get("date"),
            start_date=request.args.get("start_date"),
            end_date=request.args.get("end_date"),
        )
        return ok(records)

    @app.route("/api/groups/<name>/weekly-report", methods=["GET"], endpoint="groups_weekly_report")
    @gate.authorize(*ALL_ROLES)
    def weekly_report(name: str):
        report = container.weekly_report_service.build(
            name,
            start_date=request.args.get("start_date"),
            end_date=request.args.get("end_date"),
        )
        return ok(report)
