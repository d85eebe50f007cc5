from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.reconciler import AttendanceReconciler
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceStatsService
from .database.connection import DBConfig, DatabaseConnection
from .holidays.service import HolidayCalendar
from .members.identity_map import MemberDirectory
from .members.mysql_member_repository import MySQLMemberRepository
from .members.repository import MemberRepository
from .sync.dlb_client import DlbClient, DlbConfig
from .sync.mysql_sync_repository import MySQLSyncLogRepository, MySQLSyncStateRepository
from .sync.pull import PullSyncEngine
from .sync.repository import SyncLogRepository, SyncStateRepository
from .sync.webhook import WebhookIngestor
from .training.service import TrainingSchedule, TrainingScheduleGenerator


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    brigade_id: int

    members_repo: MemberRepository
    attendance_repo: AttendanceRepository
    sync_state_repo: SyncStateRepository
    sync_log_repo: SyncLogRepository

    dlb_client: Optional[DlbClient]
    holiday_calendar: HolidayCalendar
    training_schedule: TrainingSchedule
    member_directory: MemberDirectory
    reconciler: AttendanceReconciler
    attendance_stats_service: AttendanceStatsService
    pull_sync_engine: PullSyncEngine
    webhook_ingestor: WebhookIngestor


def build_container(*, db_config: dict, dlb_config: dict, training_config: dict) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))

    members_repo = MySQLMemberRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    sync_state_repo = MySQLSyncStateRepository(conn)
    sync_log_repo = MySQLSyncLogRepository(conn)

    return wire_container(
        conn=conn,
        dlb=DlbConfig.from_mapping(dlb_config),
        training_config=training_config,
        members_repo=members_repo,
        attendance_repo=attendance_repo,
        sync_state_repo=sync_state_repo,
        sync_log_repo=sync_log_repo,
    )


def wire_container(
    *,
    conn: Optional[DatabaseConnection],
    dlb: DlbConfig,
    training_config: dict,
    members_repo: MemberRepository,
    attendance_repo: AttendanceRepository,
    sync_state_repo: SyncStateRepository,
    sync_log_repo: SyncLogRepository,
    dlb_client: Optional[DlbClient] = None,
) -> Container:
    """Assemble services over the given repositories (MySQL in the app, fakes in tests)."""

    if dlb_client is None and dlb.is_configured:
        dlb_client = DlbClient.from_config(dlb)

    holiday_calendar = HolidayCalendar()
    training_schedule = TrainingSchedule.from_config(TrainingScheduleGenerator(holiday_calendar), training_config)
    # Fail at startup rather than on the first schedule request
    holiday_calendar.ensure_supported(training_schedule.region)

    member_directory = MemberDirectory(members_repo)
    reconciler = AttendanceReconciler(attendance_repo)
    attendance_stats_service = AttendanceStatsService(attendance_repo)
    pull_sync_engine = PullSyncEngine(dlb_client, member_directory, reconciler, sync_state_repo, sync_log_repo)
    webhook_ingestor = WebhookIngestor(
        dlb.webhook_secret,
        dlb.brigade_id,
        member_directory,
        reconciler,
        sync_state_repo,
        sync_log_repo,
    )

    return Container(
        conn=conn,
        brigade_id=dlb.brigade_id,
        members_repo=members_repo,
        attendance_repo=attendance_repo,
        sync_state_repo=sync_state_repo,
        sync_log_repo=sync_log_repo,
        dlb_client=dlb_client,
        holiday_calendar=holiday_calendar,
        training_schedule=training_schedule,
        member_directory=member_directory,
        reconciler=reconciler,
        attendance_stats_service=attendance_stats_service,
        pull_sync_engine=pull_sync_engine,
        webhook_ingestor=webhook_ingestor,
    )
