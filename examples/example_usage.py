"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the leave lifecycle lives in the services.
"""

import importlib

from config import get_settings_module

from src.hostel_pass.hostel_pass.container import build_container
from src.hostel_pass.hostel_pass.core.enums import Role
from src.hostel_pass.hostel_pass.leaves.model import Actor


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    warden = Actor(role=Role.WARDEN, email="warden@example.com")
    for req in container.leave_service.list_for(actor=warden, status="pending"):
        print(req.to_dict())


if __name__ == "__main__":
    main()
