from __future__ import annotations

from flask import Flask, jsonify, request

from ..core.exceptions import ValidationError
from ..container import Container

MAX_PREVIEW_MONTHS = 24


def register(app: Flask, container: Container) -> None:
    @app.route("/api/trainings/upcoming", methods=["GET"], endpoint="trainings_upcoming")
    def trainings_upcoming():
        schedule = container.training_schedule
        months = request.args.get("months", schedule.months_ahead, type=int)
        if not 1 <= months <= MAX_PREVIEW_MONTHS:
            return jsonify({"success": False, "error": f"months must be between 1 and {MAX_PREVIEW_MONTHS}"}), 400

        try:
            events = schedule.upcoming_events(months)
        except ValidationError as e:
            return jsonify({"success": False, "error": str(e)}), 400

        next_training = schedule.next_training()
        return jsonify(
            {
                "success": True,
                "region": schedule.region,
                "months": months,
                "next_training": next_training.to_event(title=schedule.title) if next_training else None,
                "events": events,
            }
        )
