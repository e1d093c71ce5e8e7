from __future__ import annotations

from flask import Flask

from ..common.http import json_body, json_errors, ok, parse_datetime
from ..container import Container
from .divisions import DIVISIONS, SHIFT_ID_OPTIONS, shift_time_options


def register(app: Flask, container: Container) -> None:
    manager = container.session_manager
    service = container.attendance_service

    # ----- open session -----

    @app.route("/api/session/options", methods=["GET"], endpoint="session_options")
    def session_options():
        return ok(
            divisions=list(DIVISIONS),
            shiftTimes=shift_time_options(),
            shiftIds=list(SHIFT_ID_OPTIONS),
        )

    @app.route("/api/session", methods=["GET"], endpoint="current_session")
    def current_session():
        return ok(session=manager.summary())

    @app.route("/api/session", methods=["POST"], endpoint="start_session")
    @json_errors
    def start_session():
        data = json_body()
        manager.start(
            session_date=data.get("date"),
            division=data.get("division"),
            shift_time=data.get("shiftTime"),
            shift_id=data.get("shiftId"),
            plan_mpp=data.get("planMpp"),
        )
        return ok(201, session=manager.summary())

    @app.route("/api/session", methods=["DELETE"], endpoint="cancel_session")
    @json_errors
    def cancel_session():
        manager.cancel()
        return ok(message="Attendance session cancelled")

    @app.route("/api/session/scan", methods=["POST"], endpoint="scan")
    @json_errors
    def scan():
        entry = manager.scan(str(json_body().get("opsId") or ""))
        return ok(
            message=f"{entry.full_name} checked in",
            entry={"workerId": entry.worker_id, "opsId": entry.ops_id, "fullName": entry.full_name},
            session=manager.summary(),
        )

    @app.route("/api/session/entries/<worker_id>", methods=["DELETE"], endpoint="remove_entry")
    @json_errors
    def remove_entry(worker_id: str):
        manager.remove(worker_id)
        return ok(session=manager.summary())

    @app.route("/api/session/end", methods=["POST"], endpoint="end_session")
    @json_errors
    def end_session():
        session_id = manager.end()
        return ok(sessionId=session_id)

    # ----- history and corrections -----

    @app.route("/api/sessions", methods=["GET"], endpoint="list_sessions")
    @json_errors
    def list_sessions():
        return ok(sessions=service.history_views())

    @app.route("/api/sessions/<session_id>", methods=["GET"], endpoint="get_session")
    @json_errors
    def get_session(session_id: str):
        return ok(session=service.session_view(session_id))

    @app.route("/api/sessions/<session_id>", methods=["DELETE"], endpoint="delete_session")
    @json_errors
    def delete_session(session_id: str):
        service.delete_session(session_id)
        return ok(message="Attendance session deleted")

    @app.route("/api/sessions/<session_id>/records", methods=["POST"], endpoint="manual_add")
    @json_errors
    def manual_add(session_id: str):
        data = json_body()
        record = service.manual_add(
            session_id,
            str(data.get("opsId") or ""),
            manual_status=data.get("manualStatus"),
        )
        return ok(201, record=service.record_view(record))

    @app.route("/api/sessions/<session_id>/workers/<worker_id>", methods=["DELETE"], endpoint="remove_worker_from_session")
    @json_errors
    def remove_worker_from_session(session_id: str, worker_id: str):
        service.remove_worker_from_session(session_id, worker_id)
        return ok(message="Worker removed from session")

    @app.route("/api/records/<int:record_id>/checkout", methods=["POST"], endpoint="checkout_record")
    @json_errors
    def checkout_record(record_id: int):
        at = parse_datetime(json_body().get("at"), "at")
        record = service.checkout(record_id, at=at)
        return ok(record=service.record_view(record))

    @app.route("/api/records/<int:record_id>/takeout", methods=["PUT"], endpoint="takeout_record")
    @json_errors
    def takeout_record(record_id: int):
        record = service.set_takeout(record_id, bool(json_body().get("isTakeout")))
        return ok(record=service.record_view(record))

    @app.route("/api/records/<int:record_id>/status", methods=["PUT"], endpoint="record_status")
    @json_errors
    def record_status(record_id: int):
        record = service.set_manual_status(record_id, json_body().get("manualStatus"))
        return ok(record=service.record_view(record))

    @app.route("/api/records/<int:record_id>", methods=["DELETE"], endpoint="delete_record")
    @json_errors
    def delete_record(record_id: int):
        service.delete_record(record_id)
        return ok(message="Attendance record deleted")
