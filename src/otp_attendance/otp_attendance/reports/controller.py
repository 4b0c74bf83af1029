from __future__ import annotations

import csv
import io
import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.security import make_admin_required
from ..container import Container
from ..core.exceptions import PersistenceError, ValidationError
from .service import EXPORT_HEADER, ExportRow

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    admin_required = make_admin_required(lambda: container.admin_password_hash)

    def _write_report_csv(*, rows: list[ExportRow], filename: str):
        out = io.StringIO()
        writer = csv.writer(out)
        writer.writerow(EXPORT_HEADER)
        for row in rows:
            writer.writerow(row.as_list())

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/reports/daily", methods=["GET"], endpoint="daily_report")
    def daily_report():
        raw = request.args.get("date")
        try:
            work_date = parse_iso_date(raw) if raw else None
        except ValueError:
            return jsonify({"success": False, "message": "❌ Tanggal tidak valid (YYYY-MM-DD)."}), 400

        try:
            summary = container.report_service.daily_summary(work_date)
        except PersistenceError:
            logger.exception("Failed to build daily report for %s", raw or "today")
            return jsonify({"success": False, "message": "❌ Terjadi kesalahan saat membuat laporan."}), 500

        return jsonify(
            {
                "success": True,
                "date": summary.work_date.strftime("%Y-%m-%d"),
                "total_users": summary.total_users,
                "arrival_count": summary.arrival_count,
                "departure_count": summary.departure_count,
                "rows": [
                    {
                        "user_id": r.user_id,
                        "name": r.display_name,
                        "check_in": r.arrival_time,
                        "check_out": r.departure_time,
                        "late": r.is_late,
                        "duration": r.duration,
                    }
                    for r in summary.rows
                ],
                "text": container.report_service.render_daily_summary(summary),
            }
        )

    @app.route("/api/reports/export", methods=["GET"], endpoint="export_report")
    @admin_required
    def export_report():
        try:
            start = parse_iso_date(request.args.get("start", ""))
            end = parse_iso_date(request.args.get("end", ""))
        except ValueError:
            return jsonify({"success": False, "message": "❌ Format tanggal tidak valid (YYYY-MM-DD)."}), 400

        try:
            rows = container.report_service.range_export(start, end)
        except ValidationError as e:
            return jsonify({"success": False, "message": f"❌ {e}"}), 400
        except PersistenceError:
            logger.exception("Failed to export attendance %s..%s", start, end)
            return jsonify({"success": False, "message": "❌ Terjadi kesalahan saat mengambil data absensi."}), 500

        if not rows:
            return jsonify(
                {"success": False, "message": "📭 Tidak ada data absensi dalam rentang tanggal yang ditentukan."}
            ), 404

        filename = f"attendance_report_{start:%Y-%m-%d}_to_{end:%Y-%m-%d}.csv"
        return _write_report_csv(rows=rows, filename=filename)
