from __future__ import annotations

from dataclasses import replace

import pytest

from src.absence_manager.absence_manager.core.enums import Role
from src.absence_manager.absence_manager.groups.model import Group
from src.absence_manager.absence_manager.main import create_app

from tests.fakes import build_test_container, make_teacher, make_user


@pytest.fixture()
def container(tmp_path):
    return build_test_container(
        users=[
            make_user(user_id="u1"),
            make_user(user_id="u2", email="sg@example.com", password="sg123456", role=Role.SG),
        ],
        teachers=[make_teacher(teacher_id="tA", group_ids=("g1",))],
        groups=[Group(group_id="g1", name="DEV101"), Group(group_id="g2", name="DEV102")],
        upload_folder=str(tmp_path / "uploads"),
    )


@pytest.fixture()
def client(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=container)
    return app.test_client()


def _token(client, email: str, password: str) -> str:
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return resp.get_json()["data"]["token"]


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def test_health(client):
    assert client.get("/health").get_json() == {"success": True, "data": {"status": "ok"}}


def test_login_and_me(client):
    token = _token(client, "admin@example.com", "admin123")

    resp = client.get("/api/auth/me", headers=_auth(token))

    assert resp.status_code == 200
    assert resp.get_json()["data"]["role"] == "admin"


def test_login_failure_has_no_token(client):
    resp = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "bad"})

    body = resp.get_json()
    assert resp.status_code == 401
    assert body["success"] is False
    assert "data" not in body


def test_teacher_profile_lists_group_names(client):
    token = _token(client, "prof@example.com", "prof12345")
    assert client.get("/api/auth/me", headers=_auth(token)).get_json()["data"]["groups"] == ["DEV101"]


def test_missing_token_is_401_and_wrong_role_is_403(client):
    assert client.get("/api/users").status_code == 401

    sg = _token(client, "sg@example.com", "sg123456")
    resp = client.get("/api/users", headers=_auth(sg))
    assert resp.status_code == 403
    assert resp.get_json()["success"] is False


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Route /api/nope not found"


def test_absence_flow(client, container):
    admin = _token(client, "admin@example.com", "admin123")
    resp = client.post(
        "/api/trainees",
        json={"cef": "C1", "name": "Alami", "first_name": "Ali", "groupe": "DEV101"},
        headers=_auth(admin),
    )
    assert resp.status_code == 201
    trainee_id = resp.get_json()["data"]["id"]

    teacher = _token(client, "prof@example.com", "prof12345")
    resp = client.post(
        "/api/absences",
        json={
            "date": "2025-01-06",
            "group_id": "g1",
            "teacher_id": "tA",
            "start_time": "08:30",
            "end_time": "11:00",
            "students": [{"trainee_id": trainee_id, "status": "absent"}],
        },
        headers=_auth(teacher),
    )
    assert resp.status_code == 201
    record = resp.get_json()["data"]
    assert record["teacher_id"] == "tA"
    absence_id = record["trainee_absences"][0]["id"]

    # teachers may record but not justify
    resp = client.post("/api/absences/justify", json={"trainee_absence_id": absence_id}, headers=_auth(teacher))
    assert resp.status_code == 403

    resp = client.post(
        "/api/absences/justify",
        json={"trainee_absence_ids": [absence_id], "is_justified": True},
        headers=_auth(admin),
    )
    assert resp.get_json()["data"]["justified_count"] == 1

    stats = client.get("/api/trainees/C1/statistics", headers=_auth(admin)).get_json()["data"]
    assert stats["total_absence_hours"] == 0.0
    assert stats["disciplinary_note"] == 20.0


def test_schedule_conflict_returns_409_with_conflicts(client):
    admin = _token(client, "admin@example.com", "admin123")
    session = {
        "day": "Lundi",
        "time_slot": "08:30-11:00",
        "subject": "Python",
        "group_id": "g1",
        "room": "S1",
        "type": "TP",
    }
    resp = client.post("/api/schedules", json={"teacher_id": "tA", "sessions": [session]}, headers=_auth(admin))
    assert resp.status_code == 201

    resp = client.post(
        "/api/schedules",
        json={"teacher_id": "tA", "sessions": [{**session, "room": "S2", "group_id": "g2"}]},
        headers=_auth(admin),
    )

    body = resp.get_json()
    assert resp.status_code == 409
    assert [c["type"] for c in body["conflicts"]] == ["teacher"]


def test_validation_error_is_422_with_field_errors(client):
    admin = _token(client, "admin@example.com", "admin123")
    resp = client.post(
        "/api/schedules",
        json={"teacher_id": "tA", "sessions": [{"day": "Dimanche"}]},
        headers=_auth(admin),
    )

    assert resp.status_code == 422
    assert any(e["field"] == "sessions[0].day" for e in resp.get_json()["errors"])


@pytest.mark.parametrize(
    "email,password,repo,key",
    [("prof@example.com", "prof12345", "teachers_repo", "tA"), ("sg@example.com", "sg123456", "users_repo", "u2")],
)
def test_token_stops_working_once_account_is_deactivated(client, container, email, password, repo, key):
    token = _token(client, email, password)
    assert client.get("/api/groups", headers=_auth(token)).status_code == 200

    items = getattr(container, repo).items
    items[key] = replace(items[key], is_active=False)

    resp = client.get("/api/groups", headers=_auth(token))
    assert resp.status_code == 403
    assert resp.get_json() == {"success": False, "message": "This account is inactive"}


def test_inactive_admin_is_still_authorized(client, container):
    token = _token(client, "admin@example.com", "admin123")
    container.users_repo.items["u1"] = replace(container.users_repo.items["u1"], is_active=False)

    assert client.get("/api/users", headers=_auth(token)).status_code == 200
    assert client.get("/api/groups", headers=_auth(token)).status_code == 200
