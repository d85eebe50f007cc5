from __future__ import annotations

from datetime import date, datetime

import pytest

from src.brigade_portal.brigade_portal.attendance.model import AttendanceRecord
from src.brigade_portal.brigade_portal.attendance.service import (
    AttendanceStatsService,
    format_event_type,
    format_position,
    format_status,
)
from src.brigade_portal.brigade_portal.core.enums import AttendanceStatus, EventType, RecordSource
from src.brigade_portal.brigade_portal.core.exceptions import ValidationError
from tests.fakes import FakeAttendanceRepo

TODAY = date(2024, 6, 30)

P = AttendanceStatus.PRESENT
L = AttendanceStatus.LEAVE
A = AttendanceStatus.ABSENT


def _record(rid, day, event_type, status, *, member=1, position=None, truck=None):
    return AttendanceRecord(
        record_id=rid,
        local_member_id=member,
        external_muster_id=1000 + rid,
        event_date=day,
        event_type=event_type,
        status=status,
        source=RecordSource.PULL,
        updated_at=datetime(2024, 6, 30, 12, 0),
        position=position,
        truck=truck,
    )


@pytest.fixture
def repo():
    r = FakeAttendanceRepo()
    rows = [
        _record(1, date(2024, 6, 3), EventType.TRAINING, P, position="Crew", truck="551"),
        _record(2, date(2024, 6, 10), EventType.TRAINING, P, position="Driver", truck="551"),
        _record(3, date(2024, 6, 17), EventType.TRAINING, L),
        _record(4, date(2024, 6, 24), EventType.TRAINING, A),
        _record(5, date(2024, 5, 2), EventType.CALLOUT, P, position="OIC", truck="552"),
        _record(6, date(2024, 5, 9), EventType.CALLOUT, A),
        _record(7, date(2024, 5, 20), EventType.CALLOUT, A),
        # outside the rolling window
        _record(8, date(2023, 6, 1), EventType.CALLOUT, P, position="OIC", truck="551"),
        # someone else
        _record(9, date(2024, 6, 3), EventType.TRAINING, P, member=2),
    ]
    for row in rows:
        r.add(row)
    return r


def test_member_stats_rolling_window(repo):
    stats = AttendanceStatsService(repo).member_stats(1, today=TODAY)

    assert stats["training"] == {
        "percent": 67,
        "threshold": 20,
        "above_threshold": True,
        "total": 4,
        "attended": 2,
        "leave": 1,
        "absent": 1,
    }
    assert stats["callout"]["percent"] == 33
    assert stats["callout"]["above_threshold"] is False
    assert stats["callout"]["total"] == 3
    assert stats["positions"]["counts"] == {"OIC": 1, "driver": 1, "crew": 1}
    assert stats["positions"]["percents"] == {"OIC": 33, "driver": 33, "crew": 33}
    assert stats["trucks"] == {"551": 2, "552": 1}
    assert list(stats["trucks"]) == ["551", "552"]
    assert stats["period"] == {"from": "2023-06-30", "to": "2024-06-30", "label": "Last 12 months"}


def test_member_without_records_gets_zeroes(repo):
    stats = AttendanceStatsService(repo).member_stats(42, today=TODAY)

    assert stats["training"]["percent"] == 0
    assert stats["callout"]["percent"] == 0
    assert stats["positions"]["percents"] == {"OIC": 0, "driver": 0, "crew": 0}
    assert stats["trucks"] == {}


def test_only_leave_does_not_divide_by_zero():
    repo = FakeAttendanceRepo()
    repo.add(_record(1, date(2024, 6, 3), EventType.TRAINING, L))

    stats = AttendanceStatsService(repo).member_stats(1, today=TODAY)

    assert stats["training"]["percent"] == 0
    assert stats["training"]["leave"] == 1


def test_recent_events_newest_first_with_labels(repo):
    events = AttendanceStatsService(repo).recent_events(1, limit=2)

    assert [e["event_date"] for e in events] == ["2024-06-24", "2024-06-17"]
    assert events[0]["status_label"] == "Absent"
    assert events[1]["status_label"] == "On Leave"
    assert events[0]["event_type_label"] == "Training"
    assert events[0]["position_label"] == "N/A"


def test_recent_events_rejects_non_positive_limit(repo):
    with pytest.raises(ValidationError):
        AttendanceStatsService(repo).recent_events(1, limit=0)


def test_format_helpers():
    assert format_status(AttendanceStatus.PRESENT) == "Attended"
    assert format_status("bogus") == "Unknown"
    assert format_event_type(EventType.CALLOUT) == "Callout"
    assert format_position("Station Officer") == "OIC"
    assert format_position("driver 551") == "Driver"
    assert format_position("Pump operator") == "Crew"
    assert format_position(None) == "N/A"
