from __future__ import annotations

from flask import Flask, jsonify, request

from ..core.constants import DEFAULT_RECENT_EVENTS_LIMIT
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/members/<int:member_id>/attendance", methods=["GET"], endpoint="member_attendance_stats")
    def member_attendance_stats(member_id: int):
        stats = container.attendance_stats_service.member_stats(member_id)
        return jsonify({"success": True, "member_id": member_id, "stats": stats})

    @app.route(
        "/api/members/<int:member_id>/attendance/recent",
        methods=["GET"],
        endpoint="member_attendance_recent",
    )
    def member_attendance_recent(member_id: int):
        try:
            limit = request.args.get("limit", DEFAULT_RECENT_EVENTS_LIMIT, type=int)
            events = container.attendance_stats_service.recent_events(member_id, limit)
        except ValidationError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        return jsonify({"success": True, "member_id": member_id, "events": events})
