from __future__ import annotations

import copy
from datetime import date, datetime

import pytest

from src.brigade_portal.brigade_portal.attendance.reconciler import AttendanceReconciler
from src.brigade_portal.brigade_portal.core.enums import EventType, RecordSource, SyncLogStatus, SyncStatus
from src.brigade_portal.brigade_portal.core.exceptions import AuthError, ValidationError
from src.brigade_portal.brigade_portal.members.identity_map import MemberDirectory
from src.brigade_portal.brigade_portal.sync.model import SyncState
from src.brigade_portal.brigade_portal.sync.webhook import WebhookIngestor, verify_webhook_secret
from tests.fakes import FakeAttendanceRepo, FakeMemberRepo, FakeSyncLogRepo, FakeSyncStateRepo, mapping

SECRET = "s3cret"
NOW = datetime(2024, 1, 15, 22, 5, 0)
BRIGADE = 1

PAYLOAD = {
    "event": "callout.updated",
    "callout": {"id": 123, "call_date": "2024-01-15", "call_type": "Structure Fire", "icad_number": "F4412"},
    "attendance": [
        {"member_id": 45, "status": "L"},
        {"member_id": 99, "status": "I"},
    ],
}


@pytest.fixture
def deps():
    return {
        "attendance": FakeAttendanceRepo(),
        "states": FakeSyncStateRepo(),
        "logs": FakeSyncLogRepo(),
    }


def _ingestor(deps, secret=SECRET):
    return WebhookIngestor(
        secret,
        BRIGADE,
        MemberDirectory(FakeMemberRepo({BRIGADE: [mapping(7, 45)]})),
        AttendanceReconciler(deps["attendance"]),
        deps["states"],
        deps["logs"],
        clock=lambda: NOW,
    )


def test_callout_with_one_mapped_member(deps):
    result = _ingestor(deps).ingest(f"Bearer {SECRET}", copy.deepcopy(PAYLOAD))

    assert result.to_dict() == {
        "success": True,
        "event": "callout.updated",
        "callout_id": 123,
        "created": 1,
        "updated": 0,
        "unchanged": 0,
        "skipped": 1,
        "failed": 0,
    }
    row = deps["attendance"].get_by_key(local_member_id=7, external_muster_id=123)
    assert row.event_type == EventType.CALLOUT
    assert row.source == RecordSource.WEBHOOK
    assert row.call_type == "Structure Fire"

    log = deps["logs"].entries[0]
    assert (log.operation, log.reference_id, log.status) == ("webhook", 123, SyncLogStatus.SUCCESS)
    assert log.details["event"] == "callout.updated"


def test_replay_is_unchanged(deps):
    ingestor = _ingestor(deps)
    ingestor.ingest(f"Bearer {SECRET}", copy.deepcopy(PAYLOAD))

    result = ingestor.ingest(f"Bearer {SECRET}", copy.deepcopy(PAYLOAD))

    assert (result.counts.created, result.counts.updated, result.counts.unchanged) == (0, 0, 1)
    assert deps["attendance"].updates == 0


def test_changed_status_is_updated(deps):
    ingestor = _ingestor(deps)
    ingestor.ingest(f"Bearer {SECRET}", copy.deepcopy(PAYLOAD))
    payload = copy.deepcopy(PAYLOAD)
    payload["attendance"][0]["status"] = "I"

    result = ingestor.ingest(None, payload, SECRET)

    assert result.counts.updated == 1


def test_training_muster_is_classified(deps):
    payload = copy.deepcopy(PAYLOAD)
    payload["callout"].update({"call_type": None, "icad_number": "Muster 2024-01-15"})

    _ingestor(deps).ingest(f"Bearer {SECRET}", payload)

    row = deps["attendance"].get_by_key(local_member_id=7, external_muster_id=123)
    assert row.event_type == EventType.TRAINING


def test_sync_state_touched_but_window_kept(deps):
    deps["states"].states[BRIGADE] = SyncState(
        BRIGADE, SyncStatus.FAILED, sync_from_date=date(2023, 1, 1), sync_to_date=date(2024, 1, 1), error_message="x"
    )

    _ingestor(deps).ingest(f"Bearer {SECRET}", copy.deepcopy(PAYLOAD))

    state = deps["states"].get_state(BRIGADE)
    assert state.status == SyncStatus.COMPLETED
    assert state.last_sync_at == NOW
    assert state.sync_to_date == date(2024, 1, 1)
    assert state.error_message is None


@pytest.mark.parametrize(
    "auth,secret_header",
    [
        (None, None),
        ("Bearer wrong", None),
        ("Basic czNjcmV0", None),
        (None, "wrong"),
        # a Bearer token is authoritative even when the other header is right
        ("Bearer wrong", SECRET),
    ],
)
def test_bad_secret_is_rejected_without_mutation(deps, auth, secret_header):
    with pytest.raises(AuthError):
        _ingestor(deps).ingest(auth, copy.deepcopy(PAYLOAD), secret_header)

    assert deps["attendance"].rows == {}
    assert deps["states"].states == {}
    assert deps["logs"].entries == []


def test_empty_configured_secret_rejects_everything(deps):
    with pytest.raises(AuthError):
        _ingestor(deps, secret="").ingest("Bearer ", copy.deepcopy(PAYLOAD), "")


def test_secret_check_accepts_either_header():
    assert verify_webhook_secret(SECRET, f"bearer   {SECRET}")
    assert verify_webhook_secret(SECRET, None, SECRET)
    assert not verify_webhook_secret(SECRET, f"Bearer {SECRET}x")


@pytest.mark.parametrize(
    "payload",
    [
        None,
        {},
        ["not", "an", "object"],
        {"callout": {"call_date": "2024-01-15"}},
        {"callout": {"id": 0, "call_date": "2024-01-15"}},
        {"callout": {"id": 12.9, "call_date": "2024-01-15"}},
        {"callout": {"id": 123}},
        {"callout": {"id": 123, "call_date": "15/01/2024"}},
        {"callout": {"id": 123, "call_date": "2024-01-15"}, "attendance": "nope"},
    ],
)
def test_invalid_payload_is_rejected_without_mutation(deps, payload):
    with pytest.raises(ValidationError):
        _ingestor(deps).ingest(f"Bearer {SECRET}", payload)

    assert deps["attendance"].rows == {}
    assert deps["logs"].entries == []


def test_callout_without_attendance_still_logs(deps):
    result = _ingestor(deps).ingest(f"Bearer {SECRET}", {"event": "callout.created", "callout": {"id": 5, "call_date": "2024-01-15"}})

    assert result.counts.total == 0
    assert deps["logs"].entries[0].reference_id == 5
