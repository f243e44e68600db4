"""Drive the permit workflow through the service layer (no Flask).

Controllers are thin; the rules live in the services, so the same calls work
from a script.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.ops_portal.container import build_container
from src.ops_portal.core.enums import Role


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    try:
        today = date.today().isoformat()
        print("can submit:", container.permit_service.can_submit("T000000002", date.today()))

        handle = container.permit_service.submit(
            current_role=Role.RECEPTIONIST,
            employee_id="T000000002",
            permit_date=today,
            leave_time="09:00",
            security_on_duty="Ahmad Subarjo",
            purpose="Ke bank",
        )
        result = handle.wait(timeout=10)
        print("submitted:", result.value if result.ok else result.error)

        queues = container.permit_service.queues(month=today[:7])
        print("admin queue:", [p.permit_id for p in queues.admin])
    finally:
        container.close()


if __name__ == "__main__":
    main()
