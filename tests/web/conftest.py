from __future__ import annotations

import pytest
from flask import Flask

from src.brigade_portal.brigade_portal.attendance.controller import register as register_attendance
from src.brigade_portal.brigade_portal.container import wire_container
from src.brigade_portal.brigade_portal.sync.controller import register as register_sync
from src.brigade_portal.brigade_portal.sync.dlb_client import DlbConfig
from src.brigade_portal.brigade_portal.training.controller import register as register_training
from tests.fakes import (
    FakeAttendanceRepo,
    FakeDlbClient,
    FakeMemberRepo,
    FakeSyncLogRepo,
    FakeSyncStateRepo,
    mapping,
)

WEBHOOK_SECRET = "hook-secret"

TRAINING_CONFIG = {"region": "auckland", "weekday": 0, "time": "19:00", "duration_hours": 2, "generate_months_ahead": 3}


@pytest.fixture
def dlb_client():
    return FakeDlbClient(
        [
            {
                "muster": {"id": 800, "call_date": "2024-01-15", "call_type": "Training"},
                "attendance": [{"member_id": 45, "status": "I", "position": "Crew", "truck": "551"}],
            }
        ]
    )


@pytest.fixture
def container(dlb_client):
    return wire_container(
        conn=None,
        dlb=DlbConfig(base_url="", api_token="", webhook_secret=WEBHOOK_SECRET, brigade_id=1),
        training_config=TRAINING_CONFIG,
        members_repo=FakeMemberRepo({1: [mapping(7, 45)]}),
        attendance_repo=FakeAttendanceRepo(),
        sync_state_repo=FakeSyncStateRepo(),
        sync_log_repo=FakeSyncLogRepo(),
        dlb_client=dlb_client,
    )


@pytest.fixture
def client(container):
    app = Flask(__name__)
    app.config["TESTING"] = True
    register_sync(app, container)
    register_attendance(app, container)
    register_training(app, container)
    return app.test_client()

