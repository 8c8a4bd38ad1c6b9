from __future__ import annotations

from dataclasses import dataclass

from .absences.factory import AbsenceHoursStrategyFactory
from .absences.mysql_absence_repository import MySQLAbsenceRecordRepository, MySQLTraineeAbsenceRepository
from .absences.report import WeeklyReportService
from .absences.repository import AbsenceRecordRepository, TraineeAbsenceRepository
from .absences.service import AbsenceService
from .auth.gate import AccessGate
from .auth.service import AuthService
from .auth.tokens import TokenService
from .database.connection import DBConfig, DatabaseConnection
from .discipline.service import DisciplineService
from .groups.mysql_group_repository import MySQLGroupRepository
from .groups.repository import GroupRepository
from .groups.service import GroupService
from .schedules.conflicts import ScheduleConflictChecker
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService
from .teachers.mysql_teacher_repository import MySQLTeacherRepository
from .teachers.repository import TeacherRepository
from .teachers.service import TeacherService
from .trainees.mysql_trainee_repository import MySQLTraineeRepository
from .trainees.repository import TraineeRepository
from .trainees.service import TraineeService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    teachers_repo: TeacherRepository
    groups_repo: GroupRepository
    trainees_repo: TraineeRepository
    records_repo: AbsenceRecordRepository
    entries_repo: TraineeAbsenceRepository
    schedules_repo: ScheduleRepository

    gate: AccessGate
    auth_service: AuthService
    user_service: UserService
    teacher_service: TeacherService
    group_service: GroupService
    trainee_service: TraineeService
    absence_service: AbsenceService
    weekly_report_service: WeeklyReportService
    discipline_service: DisciplineService
    schedule_service: ScheduleService


def assemble(
    *,
    users_repo: UserRepository,
    teachers_repo: TeacherRepository,
    groups_repo: GroupRepository,
    trainees_repo: TraineeRepository,
    records_repo: AbsenceRecordRepository,
    entries_repo: TraineeAbsenceRepository,
    schedules_repo: ScheduleRepository,
    jwt_secret: str,
    jwt_expires_hours: int,
    upload_folder: str,
) -> Container:
    """Wire services around any set of repositories (MySQL in production, in-memory in tests)."""
    tokens = TokenService(jwt_secret, expires_hours=jwt_expires_hours)
    discipline_service = DisciplineService(entries_repo)

    return Container(
        users_repo=users_repo,
        teachers_repo=teachers_repo,
        groups_repo=groups_repo,
        trainees_repo=trainees_repo,
        records_repo=records_repo,
        entries_repo=entries_repo,
        schedules_repo=schedules_repo,
        gate=AccessGate(users_repo, teachers_repo, tokens),
        auth_service=AuthService(users_repo, teachers_repo, groups_repo, tokens),
        user_service=UserService(users_repo),
        teacher_service=TeacherService(teachers_repo, groups_repo, upload_folder=upload_folder),
        group_service=GroupService(groups_repo),
        trainee_service=TraineeService(trainees_repo, groups_repo, records_repo, entries_repo, discipline_service),
        absence_service=AbsenceService(
            records_repo,
            entries_repo,
            trainees_repo,
            groups_repo,
            strategy_factory=AbsenceHoursStrategyFactory(),
        ),
        weekly_report_service=WeeklyReportService(records_repo, entries_repo, trainees_repo, groups_repo),
        discipline_service=discipline_service,
        schedule_service=ScheduleService(
            schedules_repo,
            teachers_repo,
            groups_repo,
            checker=ScheduleConflictChecker(schedules_repo, teachers_repo, groups_repo),
        ),
    )


def build_container(*, db_config: dict, jwt_secret: str, jwt_expires_hours: int, upload_folder: str) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return assemble(
        users_repo=MySQLUserRepository(conn),
        teachers_repo=MySQLTeacherRepository(conn),
        groups_repo=MySQLGroupRepository(conn),
        trainees_repo=MySQLTraineeRepository(conn),
        records_repo=MySQLAbsenceRecordRepository(conn),
        entries_repo=MySQLTraineeAbsenceRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        jwt_secret=jwt_secret,
        jwt_expires_hours=jwt_expires_hours,
        upload_folder=upload_folder,
    )
