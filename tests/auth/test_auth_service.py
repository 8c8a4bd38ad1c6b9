from __future__ import annotations

import pytest

from src.absence_manager.absence_manager.auth.model import Principal
from src.absence_manager.absence_manager.core.enums import Role
from src.absence_manager.absence_manager.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BadRequestError,
)

from tests.fakes import build_test_container, make_teacher, make_user


def _container():
    return build_test_container(
        users=[
            make_user(user_id="u1"),
            make_user(user_id="u2", email="sg@example.com", role=Role.SG, is_active=False),
        ],
        teachers=[make_teacher(teacher_id="tA")],
    )


def test_admin_login_returns_token_for_admin():
    c = _container()
    result = c.auth_service.login("Admin@Example.com", "admin123")

    assert result.user["role"] == "admin"
    assert c.gate.resolve(f"Bearer {result.token}").principal_id == "u1"


def test_teacher_login_falls_back_to_teachers():
    result = _container().auth_service.login("prof@example.com", "prof12345")
    assert result.user["role"] == "teacher"
    assert result.user["must_change_password"] is True


def test_wrong_password_is_rejected():
    with pytest.raises(AuthenticationError) as exc:
        _container().auth_service.login("admin@example.com", "nope")
    assert exc.value.errors[0]["field"] == "email"


def test_inactive_non_admin_cannot_login():
    with pytest.raises(AuthorizationError):
        _container().auth_service.login("sg@example.com", "admin123")


def test_missing_credentials():
    with pytest.raises(BadRequestError):
        _container().auth_service.login("", None)


def test_teacher_change_password_clears_flag():
    c = _container()
    principal = Principal.from_teacher(c.teachers_repo.get_by_id("tA"))

    c.auth_service.change_password(
        principal,
        current_password="prof12345",
        new_password="newsecret1",
        new_password_confirmation="newsecret1",
    )

    assert c.teachers_repo.get_by_id("tA").must_change_password is False
    assert c.auth_service.login("prof@example.com", "newsecret1").token


@pytest.mark.parametrize(
    "current,new,confirmation",
    [
        ("prof12345", "newsecret1", "different1"),
        ("prof12345", "short", "short"),
        ("wrong-current", "newsecret1", "newsecret1"),
    ],
)
def test_change_password_rejections(current, new, confirmation):
    c = _container()
    principal = Principal.from_teacher(c.teachers_repo.get_by_id("tA"))
    with pytest.raises(BadRequestError):
        c.auth_service.change_password(
            principal,
            current_password=current,
            new_password=new,
            new_password_confirmation=confirmation,
        )


def test_gate_rejects_bad_tokens_and_wrong_roles():
    c = _container()
    with pytest.raises(AuthenticationError):
        c.gate.resolve(None)
    with pytest.raises(AuthenticationError):
        c.gate.resolve("Bearer not-a-jwt")

    teacher = c.gate.resolve(f"Bearer {c.auth_service.login('prof@example.com', 'prof12345').token}")
    with pytest.raises(AuthorizationError):
        c.gate.check(teacher, (Role.ADMIN, Role.SG))
    c.gate.check(teacher, (Role.TEACHER,))
