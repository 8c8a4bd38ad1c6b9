from __future__ import annotations

from typing import Optional

from flask import Flask, request

from ..api.responses import created, json_body, ok
from ..container import Container
from ..core.enums import Role

ALL_ROLES = (Role.ADMIN, Role.SG, Role.TEACHER)


def _int_arg(name: str) -> Optional[int]:
    value = request.args.get(name)
    return int(value) if value and value.isdigit() else None


def _bool_arg(name: str) -> Optional[bool]:
    value = request.args.get(name)
    if value is None:
        return None
    return value.lower() == "true"


def register(app: Flask, container: Container) -> None:
    gate = container.gate
    schedules = container.schedule_service

    @app.route("/api/schedules", methods=["GET"], endpoint="schedules_list")
    @gate.authorize(Role.ADMIN, Role.SG)
    def list_schedules():
        found = schedules.list_all(
            teacher_id=request.args.get("teacher_id"),
            academic_year=request.args.get("academic_year"),
            week_number=_int_arg("week_number"),
            is_active=_bool_arg("is_active"),
        )
        return ok([s.to_dict() for s in found], count=len(found))

    @app.route("/api/schedules", methods=["POST"], endpoint="schedules_create")
    @gate.authorize(Role.ADMIN)
    def create_schedule():
        data = json_body()
        schedule = schedules.create(
            teacher_id=data.get("teacher_id"),
            sessions=data.get("sessions"),
            week_number=data.get("week_number"),
            academic_year=data.get("academic_year"),
        )
        return created(schedule.to_dict(), message="Emploi du temps créé avec succès")

    @app.route("/api/schedules/stats", methods=["GET"], endpoint="schedules_stats")
    @gate.authorize(Role.ADMIN)
    def stats():
        return ok(schedules.stats(academic_year=request.args.get("academic_year")))

    @app.route("/api/schedules/check-conflicts", methods=["POST"], endpoint="schedules_check_conflicts")
    @gate.authorize(Role.ADMIN)
    def check_conflicts():
        data = json_body()
        report = schedules.check_conflicts(
            teacher_id=data.get("teacher_id"),
            day=data.get("day"),
            time_slot=data.get("time_slot"),
            room=data.get("room"),
            group_id=data.get("group_id"),
            exclude_schedule_id=data.get("schedule_id"),
        )
        return ok(report.to_dict())

    @app.route("/api/schedules/teacher/<teacher_id>", methods=["GET"], endpoint="schedules_by_teacher")
    @gate.authorize(*ALL_ROLES)
    def schedule_for_teacher(teacher_id: str):
        schedule = schedules.get_for_teacher(
            teacher_id,
            academic_year=request.args.get("academic_year"),
            week_number=_int_arg("week_number"),
        )
        return ok(schedule.to_dict())

    @app.route("/api/schedules/<schedule_id>", methods=["GET"], endpoint="schedules_get")
    @gate.authorize(*ALL_ROLES)
    def get_schedule(schedule_id: str):
        return ok(schedules.get(schedule_id).to_dict())

    @app.route("/api/schedules/<schedule_id>", methods=["PUT"], endpoint="schedules_update")
    @gate.authorize(Role.ADMIN)
    def update_schedule(schedule_id: str):
        data = json_body()
        schedule = schedules.update(
            schedule_id,
            sessions=data.get("sessions"),
            week_number=data.get("week_number"),
            academic_year=data.get("academic_year"),
            is_active=data.get("is_active"),
        )
        return ok(schedule.to_dict(), message="Emploi du temps mis à jour avec succès")

    @app.route("/api/schedules/<schedule_id>", methods=["DELETE"], endpoint="schedules_delete")
    @gate.authorize(Role.ADMIN)
    def delete_schedule(schedule_id: str):
        schedules.delete(schedule_id)
        return ok(message="Emploi du temps supprimé avec succès")
