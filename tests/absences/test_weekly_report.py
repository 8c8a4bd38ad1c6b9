from __future__ import annotations

import pytest

from src.absence_manager.absence_manager.core.exceptions import BadRequestError, NotFoundError
from src.absence_manager.absence_manager.groups.model import Group
from src.absence_manager.absence_manager.trainees.model import Trainee

from tests.fakes import build_test_container


def _container():
    return build_test_container(
        groups=[Group(group_id="g1", name="DEV101")],
        trainees=[
            Trainee(trainee_id="t1", cef="C1", name="Alami", first_name="Ali", group_name="DEV101", group_id="g1")
        ],
    )


def test_weekly_report_marks_absent_and_late_days():
    c = _container()
    for day, status in (("2025-01-06", "absent"), ("2025-01-08", "late")):
        c.absence_service.create(
            record_date=day,
            group_id="g1",
            start_time="08:30",
            end_time="11:00",
            students=[{"trainee_id": "t1", "status": status}],
        )

    report = c.weekly_report_service.build("DEV101", start_date="2025-01-06", end_date="2025-01-12")

    assert [d["name"] for d in report["days"]] == ["LUN", "MAR", "MERC", "JEU", "VEN", "SAM"]
    week = {w["date"]: w for w in report["trainees"][0]["week_absences"]}
    assert week["2025-01-06"]["is_absent"] is True
    assert week["2025-01-08"]["is_late"] is True
    assert week["2025-01-07"]["absences"] == []
    assert not week["2025-01-07"]["is_absent"] and not week["2025-01-07"]["is_late"]
    assert report["formatted_start"] == "06/01/2025"


def test_weekly_report_requires_group_and_dates():
    c = _container()
    with pytest.raises(NotFoundError):
        c.weekly_report_service.build("NOPE", start_date="2025-01-06", end_date="2025-01-12")
    with pytest.raises(BadRequestError):
        c.weekly_report_service.build("DEV101", start_date=None, end_date="2025-01-12")
