"""Example: drive the service layer directly, without Flask.

Controllers are thin; every rule lives in the services, so a script can call them
with an explicit RequestContext.
"""

import importlib
import json
import sys

from school_attendance.config import get_settings_module
from school_attendance.container import build_container
from school_attendance.core.context import RequestContext
from school_attendance.core.enums import Role


def main(class_id: int, academic_year: str) -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        start_month=settings.ACADEMIC_YEAR_START_MONTH,
        window_days=settings.ADMIN_EDIT_WINDOW_DAYS,
    )
    admin = RequestContext(user_id=1, role=Role.ADMIN, school_id=1)
    report = container.report_service.class_yearly_report(admin, class_id=class_id, academic_year=academic_year)
    print(json.dumps(report, indent=2))


if __name__ == "__main__":
    main(int(sys.argv[1]), sys.argv[2])
