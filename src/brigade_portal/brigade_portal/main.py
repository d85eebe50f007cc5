from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.logging_setup import setup_logging
from .database.bootstrap import apply_schema, list_tables

from .container import build_container
from .attendance.controller import register as register_attendance
from .sync.controller import register as register_sync
from .training.controller import register as register_training

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    logger.info(
        f"settings={settings_module} "
        f"db={db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )

    # Idempotent: schema.sql only uses CREATE ... IF NOT EXISTS
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        logger.info(f"schema ready (tables={len(list_tables(db_config))})")

    container = build_container(
        db_config=db_config,
        dlb_config=getattr(settings, "DLB_CONFIG"),
        training_config=getattr(settings, "TRAINING_CONFIG"),
    )

    register_sync(app, container)
    register_attendance(app, container)
    register_training(app, container)

    return app
