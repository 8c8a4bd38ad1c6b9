"""Use the service layer directly, without Flask.

Prints each trainee of a group with their disciplinary note and status.
"""

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.absence_manager.absence_manager.container import build_container


def main(group_name: str) -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        jwt_secret=settings.JWT_SECRET,
        jwt_expires_hours=settings.JWT_EXPIRES_HOURS,
        upload_folder=settings.UPLOAD_FOLDER,
    )
    for trainee in container.trainees_repo.list_all(group_name=group_name):
        summary = container.discipline_service.for_trainee(trainee.trainee_id)
        print(
            f"{trainee.cef:<12} {trainee.name} {trainee.first_name:<20} "
            f"{summary.total_absence_hours:>5}h  note={summary.note:<4}  {summary.status.label}"
        )


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else "DEV101")
