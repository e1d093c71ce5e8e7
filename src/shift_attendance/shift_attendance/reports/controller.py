from __future__ import annotations

import io

from flask import Flask, request, send_file

from ..common.http import json_errors, ok, query_date
from ..container import Container
from ..core.exceptions import ValidationError
from ..workers.spreadsheet import XLSX_MIMETYPE
from .exporter import ATTENDANCE_DAYS_COLUMNS, HISTORY_COLUMNS, to_csv, to_xlsx


def _query_int(name: str):
    value = request.args.get(name)
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{name} must be a number")


def _export_name(ext: str) -> str:
    start = request.args.get("start") or "all"
    end = request.args.get("end") or "all"
    return f"Attendance_History_{start}_{end}.{ext}"


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard")
    @json_errors
    def dashboard():
        return ok(dashboard=reports.dashboard(today=query_date("date")))

    @app.route("/api/reports/attendance-days", methods=["GET"], endpoint="attendance_days")
    @json_errors
    def attendance_days():
        rows = reports.attendance_days(start=query_date("start"), end=query_date("end"))
        return ok(rows=rows)

    @app.route("/api/reports/periods", methods=["GET"], endpoint="period_report")
    @json_errors
    def period_report():
        rows = reports.period_report(year=_query_int("year"), month=_query_int("month"))
        return ok(rows=rows)

    @app.route("/api/reports/history.csv", methods=["GET"], endpoint="history_csv")
    @json_errors
    def history_csv():
        data = reports.build_history_report(start=query_date("start"), end=query_date("end"))
        return send_file(
            io.BytesIO(to_csv(data.rows, HISTORY_COLUMNS)),
            mimetype="text/csv",
            as_attachment=True,
            download_name=_export_name("csv"),
        )

    @app.route("/api/reports/history.xlsx", methods=["GET"], endpoint="history_xlsx")
    @json_errors
    def history_xlsx():
        data = reports.build_history_report(start=query_date("start"), end=query_date("end"))
        payload = to_xlsx(
            {
                "Riwayat Absensi": (data.rows, HISTORY_COLUMNS),
                "Jumlah Hari": (data.summary, ATTENDANCE_DAYS_COLUMNS),
            }
        )
        return send_file(
            io.BytesIO(payload),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=_export_name("xlsx"),
        )
