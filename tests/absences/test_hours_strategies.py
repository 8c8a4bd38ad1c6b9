from __future__ import annotations

from datetime import date

from src.absence_manager.absence_manager.absences.factory import AbsenceHoursStrategyFactory
from src.absence_manager.absence_manager.absences.model import AbsenceRecord
from src.absence_manager.absence_manager.absences.strategies.absent_strategy import AbsentStrategy
from src.absence_manager.absence_manager.absences.strategies.late_strategy import LateStrategy
from src.absence_manager.absence_manager.absences.strategies.present_strategy import PresentStrategy
from src.absence_manager.absence_manager.core.enums import AbsenceStatus


def _record(start: str, end: str) -> AbsenceRecord:
    return AbsenceRecord(record_id="r1", record_date=date(2025, 1, 6), group_id="g1", start_time=start, end_time=end)


def test_factory_picks_strategy_by_status():
    factory = AbsenceHoursStrategyFactory()
    assert isinstance(factory.for_status(AbsenceStatus.ABSENT), AbsentStrategy)
    assert isinstance(factory.for_status(AbsenceStatus.LATE), LateStrategy)
    assert isinstance(factory.for_status(AbsenceStatus.PRESENT), PresentStrategy)


def test_absent_counts_whole_session():
    factory = AbsenceHoursStrategyFactory()
    assert factory.hours_for(AbsenceStatus.ABSENT, _record("08:30", "11:00")) == 2.5
    assert factory.hours_for(AbsenceStatus.ABSENT, _record("08:30", "13:30")) == 5.0


def test_absent_hours_round_half_up_to_one_decimal():
    # 08:00-08:45 is 0.75h
    assert AbsentStrategy().hours(record=_record("08:00", "08:45")) == 0.8
    # 08:00-08:20 is 0.333...h
    assert AbsentStrategy().hours(record=_record("08:00", "08:20")) == 0.3


def test_absent_without_record_is_zero():
    assert AbsentStrategy().hours(record=None) == 0.0


def test_late_is_one_hour_and_present_is_zero():
    record = _record("08:30", "11:00")
    factory = AbsenceHoursStrategyFactory()
    assert factory.hours_for(AbsenceStatus.LATE, record) == 1.0
    assert factory.hours_for(AbsenceStatus.PRESENT, record) == 0.0
