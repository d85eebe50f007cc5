from __future__ import annotations

from datetime import date, datetime

import pytest

from src.brigade_portal.brigade_portal.attendance.classification import classify_event_type
from src.brigade_portal.brigade_portal.attendance.reconciler import AttendanceReconciler
from src.brigade_portal.brigade_portal.core.enums import AttendanceStatus, EventType, ReconcileOutcome, RecordSource
from tests.fakes import FakeAttendanceRepo

NOW = datetime(2024, 1, 15, 21, 0, 0)
LATER = datetime(2024, 1, 16, 8, 0, 0)


def _apply(reconciler, *, status=AttendanceStatus.PRESENT, position="OIC", truck="551", notes=None,
           source=RecordSource.PULL, now=NOW, **kwargs):
    return reconciler.apply(
        local_member_id=kwargs.get("member", 1),
        external_muster_id=kwargs.get("muster", 123),
        event_date=date(2024, 1, 15),
        event_type=EventType.CALLOUT,
        status=status,
        position=position,
        truck=truck,
        notes=notes,
        source=source,
        icad_number="F123",
        call_type="Structure Fire",
        now=now,
    )


def test_new_line_is_created():
    repo = FakeAttendanceRepo()

    assert _apply(AttendanceReconciler(repo)) == ReconcileOutcome.CREATED
    row = repo.get_by_key(local_member_id=1, external_muster_id=123)
    assert row.status == AttendanceStatus.PRESENT
    assert row.icad_number == "F123"
    assert row.updated_at == NOW


def test_identical_line_is_unchanged_without_write():
    repo = FakeAttendanceRepo()
    reconciler = AttendanceReconciler(repo)
    _apply(reconciler)

    assert _apply(reconciler, source=RecordSource.WEBHOOK, now=LATER) == ReconcileOutcome.UNCHANGED
    assert repo.updates == 0
    assert repo.get_by_key(local_member_id=1, external_muster_id=123).updated_at == NOW


@pytest.mark.parametrize(
    "change",
    [
        {"status": AttendanceStatus.LEAVE},
        {"position": "Driver"},
        {"truck": "552"},
        {"notes": "Left early"},
    ],
)
def test_any_mutable_difference_updates(change):
    repo = FakeAttendanceRepo()
    reconciler = AttendanceReconciler(repo)
    _apply(reconciler)

    assert _apply(reconciler, source=RecordSource.WEBHOOK, now=LATER, **change) == ReconcileOutcome.UPDATED
    row = repo.get_by_key(local_member_id=1, external_muster_id=123)
    assert row.source == RecordSource.WEBHOOK
    assert row.updated_at == LATER
    assert repo.updates == 1


def test_concurrent_insert_is_applied_as_update():
    repo = FakeAttendanceRepo()
    repo.race_on_insert[(1, 123)] = AttendanceStatus.ABSENT

    assert _apply(AttendanceReconciler(repo)) == ReconcileOutcome.UPDATED
    assert repo.get_by_key(local_member_id=1, external_muster_id=123).status == AttendanceStatus.PRESENT


def test_concurrent_identical_insert_is_unchanged():
    repo = FakeAttendanceRepo()
    repo.race_on_insert[(1, 123)] = AttendanceStatus.PRESENT

    assert _apply(AttendanceReconciler(repo)) == ReconcileOutcome.UNCHANGED
    assert repo.updates == 0


def test_storage_errors_propagate():
    repo = FakeAttendanceRepo()
    repo.fail_for_member.add(1)

    with pytest.raises(RuntimeError):
        _apply(AttendanceReconciler(repo))


@pytest.mark.parametrize(
    "call_type,icad,expected",
    [
        ("Training", None, EventType.TRAINING),
        ("Weekly TRAINING night", "F1", EventType.TRAINING),
        (None, "MUSTER-2024-01", EventType.TRAINING),
        ("Structure Fire", "F4412", EventType.CALLOUT),
        (None, None, EventType.CALLOUT),
    ],
)
def test_classify_event_type(call_type, icad, expected):
    assert classify_event_type(call_type, icad) == expected


def test_dlb_status_codes():
    assert AttendanceStatus.from_dlb_code("I") == AttendanceStatus.PRESENT
    assert AttendanceStatus.from_dlb_code("l") == AttendanceStatus.LEAVE
    assert AttendanceStatus.ABSENT.dlb_code == "A"
    with pytest.raises(ValueError):
        AttendanceStatus.from_dlb_code("X")
