"""Cron entry point: pull attendance from DLB for the configured brigade.

    */30 * * * * cd /srv/brigade-portal && python scripts/sync_attendance.py
    0 3 * * 0    cd /srv/brigade-portal && python scripts/sync_attendance.py --full
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.brigade_portal.brigade_portal.common.logging_setup import setup_logging
from src.brigade_portal.brigade_portal.container import build_container

logger = logging.getLogger("sync_attendance")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Pull attendance records from DLB")
    parser.add_argument("--full", action="store_true", help="re-sync the last 12 months instead of resuming")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(
        db_config=settings.DB_CONFIG,
        dlb_config=settings.DLB_CONFIG,
        training_config=settings.TRAINING_CONFIG,
    )
    result = container.pull_sync_engine.sync_recent(container.brigade_id, full_sync=args.full)
    if not result.success:
        logger.error(f"Attendance sync failed: {result.error}")
        return 1

    logger.info(f"Attendance sync finished: {result.to_dict()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
