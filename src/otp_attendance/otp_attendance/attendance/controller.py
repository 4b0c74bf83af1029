from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.validators import require_positive_int, sanitize_name, sanitize_username
from ..container import Container
from ..core.enums import MarkOutcome
from ..core.exceptions import PersistenceError, ValidationError
from ..reports.service import event_to_dict

logger = logging.getLogger(__name__)

_OUTCOME_STATUS = {
    MarkOutcome.ARRIVAL_RECORDED: 200,
    MarkOutcome.DEPARTURE_RECORDED: 200,
    MarkOutcome.INVALID_FORMAT: 400,
    MarkOutcome.INVALID_OR_EXPIRED: 400,
    MarkOutcome.ALREADY_COMPLETE: 409,
}

MSG_SYSTEM_ERROR = "❌ Terjadi kesalahan saat memproses absensi. Silakan coba lagi."


def register(app: Flask, container: Container) -> None:
    tz = container.tz

    @app.route("/api/attendance", methods=["POST"], endpoint="mark_attendance")
    def mark_attendance():
        """Submit an OTP; the server decides between check-in and check-out."""
        data = request.get_json(silent=True) or {}
        try:
            user_id = require_positive_int(data.get("user_id"), "User ID")
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400

        first_name = sanitize_name(data.get("first_name")) or f"user_{user_id}"
        last_name = sanitize_name(data.get("last_name")) or None
        username = sanitize_username(data.get("username")) or f"user_{user_id}"

        try:
            result = container.attendance_service.mark_attendance(
                user_id,
                username,
                first_name,
                last_name,
                str(data.get("code") or ""),
            )
        except PersistenceError:
            logger.exception("Failed to mark attendance for user_id=%s", user_id)
            return jsonify({"success": False, "message": MSG_SYSTEM_ERROR}), 500

        body = {
            "success": result.success,
            "outcome": result.outcome.value,
            "message": result.message,
            "record": event_to_dict(result.record, tz) if result.record else None,
        }
        if result.duration is not None:
            body["duration_minutes"] = int(result.duration.total_seconds() // 60)
        return jsonify(body), _OUTCOME_STATUS[result.outcome]

    @app.route("/api/attendance/<int:user_id>/status", methods=["GET"], endpoint="attendance_status")
    def attendance_status(user_id: int):
        try:
            status = container.attendance_service.get_status(user_id)
        except PersistenceError:
            logger.exception("Failed to get attendance status for user_id=%s", user_id)
            return jsonify({"success": False, "message": "❌ Terjadi kesalahan saat mengecek status."}), 500

        return jsonify(
            {
                "success": True,
                "state": status.state.value,
                "has_arrived": status.has_arrived,
                "has_departed": status.has_departed,
                "arrival": event_to_dict(status.arrival, tz) if status.arrival else None,
                "departure": event_to_dict(status.departure, tz) if status.departure else None,
                "text": container.report_service.render_status(status),
            }
        )

    @app.route("/api/attendance/<int:user_id>/history", methods=["GET"], endpoint="attendance_history")
    def attendance_history(user_id: int):
        days = request.args.get("days", default=container.history_days, type=int)
        try:
            events = container.report_service.history(user_id, days)
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except PersistenceError:
            logger.exception("Failed to get attendance history for user_id=%s", user_id)
            return jsonify({"success": False, "message": "❌ Terjadi kesalahan saat mengambil riwayat."}), 500

        return jsonify(
            {
                "success": True,
                "days": days,
                "events": [event_to_dict(e, tz) for e in events],
                "text": container.report_service.render_history(events, days),
            }
        )

    @app.route("/api/aliases/<int:user_id>", methods=["PUT"], endpoint="set_alias")
    def set_alias(user_id: int):
        data = request.get_json(silent=True) or {}
        try:
            alias = container.attendance_service.set_alias(
                user_id,
                sanitize_name(data.get("first_name")),
                sanitize_name(data.get("last_name")) or None,
            )
        except ValidationError as e:
            return jsonify({"success": False, "message": f"❌ {e}"}), 400
        except PersistenceError:
            logger.exception("Failed to set alias for user_id=%s", user_id)
            return jsonify({"success": False, "message": "❌ Gagal menyimpan alias. Silakan coba lagi."}), 500

        return jsonify(
            {
                "success": True,
                "message": f"✅ Alias berhasil diatur: {alias.full_name}",
                "alias": {"user_id": alias.user_id, "first_name": alias.first_name, "last_name": alias.last_name},
            }
        )
