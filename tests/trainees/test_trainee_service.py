from __future__ import annotations

import io

import pytest

from src.absence_manager.absence_manager.absences.model import AbsenceRecord
from src.absence_manager.absence_manager.core.exceptions import BadRequestError, DuplicateError, ValidationError
from src.absence_manager.absence_manager.groups.model import Group

from tests.fakes import build_test_container

ROSTER_CSV = (
    "OFPPT\n"
    "Liste des stagiaires\n"
    "2024-2025\n"
    "CEF,Nom,Prénom,Groupe,Téléphone\n"
    "C100,Alami,Ali,DEV101,0600000001\n"
    "C101,Bennani,Sara,DEV102,\n"
    "C102,,Omar,DEV101,\n"
)


def test_create_rejects_duplicate_cef_without_writing():
    c = build_test_container()
    c.trainee_service.create(cef="C1", name="Alami", first_name="Ali", group_name="DEV101")

    with pytest.raises(DuplicateError):
        c.trainee_service.create(cef="C1", name="Other", first_name="Name", group_name="DEV102")

    assert len(c.trainees_repo.items) == 1
    assert [g.name for g in c.groups_repo.list_all()] == ["DEV101"]


def test_create_reports_every_missing_field():
    c = build_test_container()
    with pytest.raises(ValidationError) as exc:
        c.trainee_service.create(cef="", name="", first_name="Ali", group_name=None)

    assert {e["field"] for e in exc.value.errors} == {"cef", "name", "groupe"}


def test_create_reuses_existing_group():
    c = build_test_container(groups=[Group(group_id="g1", name="DEV101")])
    trainee = c.trainee_service.create(cef="C1", name="Alami", first_name="Ali", group_name="DEV101")
    assert trainee.group_id == "g1"


def test_delete_all_cascades_entries_but_keeps_records():
    c = build_test_container(groups=[Group(group_id="g1", name="DEV101")])
    trainee = c.trainee_service.create(cef="C1", name="Alami", first_name="Ali", group_name="DEV101")
    record = c.absence_service.create(
        record_date="2025-01-06",
        group_id="g1",
        start_time="08:30",
        end_time="11:00",
        students=[{"trainee_id": trainee.trainee_id, "status": "absent"}],
    )

    result = c.trainee_service.delete_all()

    assert result == {"deleted_trainees": 1, "deleted_absences": 1}
    assert c.trainees_repo.items == {}
    assert c.entries_repo.items == {}
    assert isinstance(c.records_repo.get_by_id(record["id"]), AbsenceRecord)
    assert c.groups_repo.get_by_name("DEV101") is not None


def test_detail_reports_history_and_note():
    c = build_test_container(groups=[Group(group_id="g1", name="DEV101")])
    trainee = c.trainee_service.create(cef="C1", name="Alami", first_name="Ali", group_name="DEV101")
    for day in ("2025-01-06", "2025-01-07"):
        c.absence_service.create(
            record_date=day,
            group_id="g1",
            start_time="08:30",
            end_time="13:30",
            students=[{"trainee_id": trainee.trainee_id, "status": "absent"}],
        )

    detail = c.trainee_service.detail("C1")

    assert detail["total_absence_hours"] == 10.0
    assert detail["disciplinary_note"] == 18.0
    assert detail["disciplinary_status"]["label"] == "2ème AVERT (SC)"
    assert detail["absence_stats"] == {"absent": 2, "late": 0, "justified": 0}
    assert {h["source"] for h in detail["absence_history"]} == {"Non justifié"}


def test_import_csv_upserts_and_reports_bad_rows():
    c = build_test_container()
    c.trainee_service.create(cef="C100", name="Old", first_name="Name", group_name="DEV999")

    result = c.trainee_service.import_file(io.StringIO(ROSTER_CSV), "roster.csv")

    assert result["imported"] == 2
    assert result["errors"] == [{"row": 7, "error": "Champs obligatoires manquants"}]
    ali = c.trainees_repo.get_by_cef("C100")
    assert (ali.name, ali.group_name, ali.phone) == ("Alami", "DEV101", "0600000001")
    assert c.trainees_repo.get_by_cef("C101").group_name == "DEV102"
    assert len(c.trainees_repo.items) == 2


def test_import_rejects_unknown_extension_and_short_files():
    c = build_test_container()
    with pytest.raises(BadRequestError):
        c.trainee_service.import_file(io.StringIO(ROSTER_CSV), "roster.pdf")
    with pytest.raises(BadRequestError):
        c.trainee_service.import_file(io.StringIO("a\nb\nc\nCEF,Nom\n"), "roster.csv")


def test_import_csv_tolerates_rows_wider_than_header():
    c = build_test_container()
    roster = (
        "OFPPT\n"
        "Liste des stagiaires\n"
        "2024-2025\n"
        "CEF,Nom,Prénom,Groupe\n"
        "C100,Alami,Ali,DEV101,0600000001\n"
        "C101,Bennani,Sara,DEV102\n"
    )

    result = c.trainee_service.import_file(io.StringIO(roster), "roster.csv")

    assert result == {"imported": 2, "errors": []}
    ali = c.trainees_repo.get_by_cef("C100")
    assert (ali.name, ali.first_name, ali.group_name, ali.phone) == ("Alami", "Ali", "DEV101", None)
    assert c.trainees_repo.get_by_cef("C101").group_name == "DEV102"
