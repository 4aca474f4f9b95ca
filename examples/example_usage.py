"""Ví dụ: dùng service layer (không qua Flask).

Check an employee in and out, then list today's records.
"""

import sys

from src.attendance_api.attendance_api.container import build_container
from src.attendance_api.attendance_api.main import load_settings


def main(employee_id: str):
    settings = load_settings()
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)
    svc = container.attendance_service

    for outcome in (svc.check_in(employee_id), svc.check_out(employee_id)):
        print(outcome.kind.value, outcome.message or outcome.value)

    print(svc.find_all(employee_id=employee_id).value)


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else "2f56f85a-f8e4-4c03-82a2-b723bcf6e1f4")
