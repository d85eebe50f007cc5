from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..core.exceptions import AuthError, ValidationError
from ..container import Container
from .model import SyncState

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/webhook/attendance", methods=["POST"], endpoint="webhook_attendance")
    def webhook_attendance():
        payload = request.get_json(silent=True)
        try:
            result = container.webhook_ingestor.ingest(
                request.headers.get("Authorization"),
                payload,
                request.headers.get("X-Webhook-Secret"),
            )
        except AuthError as e:
            logger.warning(f"Rejected webhook from {request.remote_addr}: {e}")
            return jsonify({"error": str(e)}), 401
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        except Exception as e:
            logger.exception("Webhook processing failed")
            return jsonify({"success": False, "error": "Failed to process webhook", "message": str(e)}), 500
        return jsonify(result.to_dict()), 200

    @app.route("/api/attendance/sync", methods=["POST"], endpoint="attendance_sync")
    def attendance_sync():
        body = request.get_json(silent=True) or {}
        full_sync = bool(body.get("full_sync", False)) if isinstance(body, dict) else False

        try:
            result = container.pull_sync_engine.sync_recent(container.brigade_id, full_sync=full_sync)
        except Exception as e:
            logger.exception("Manual attendance sync failed")
            return jsonify({"success": False, "error": "Failed to sync attendance", "message": str(e)}), 500
        if not result.success:
            return jsonify(result.to_dict()), 502
        return jsonify(result.to_dict()), 200

    @app.route("/api/sync/status", methods=["GET"], endpoint="sync_status")
    def sync_status():
        state = container.sync_state_repo.get_state(container.brigade_id) or SyncState(container.brigade_id)
        latest = container.sync_log_repo.latest_by_operation()
        return jsonify(
            {
                "success": True,
                "sync": state.to_dict(),
                "latest_logs": {op: entry.to_dict() for op, entry in latest.items()},
            }
        )
