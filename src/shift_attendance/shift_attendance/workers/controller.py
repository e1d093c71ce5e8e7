from __future__ import annotations

import io

from flask import Flask, request, send_file

from ..common.http import fail, json_body, json_errors, ok
from ..container import Container
from .spreadsheet import XLSX_MIMETYPE, build_template, export_workers


def register(app: Flask, container: Container) -> None:
    service = container.worker_service

    @app.route("/api/workers", methods=["GET"], endpoint="list_workers")
    @json_errors
    def list_workers():
        return ok(workers=[w.to_row() for w in service.list_workers()])

    @app.route("/api/workers", methods=["POST"], endpoint="create_worker")
    @json_errors
    def create_worker():
        worker = service.create(json_body())
        return ok(201, worker=worker.to_row())

    @app.route("/api/workers/<worker_id>", methods=["GET"], endpoint="get_worker")
    @json_errors
    def get_worker(worker_id: str):
        return ok(worker=service.get(worker_id).to_row())

    @app.route("/api/workers/<worker_id>", methods=["PUT"], endpoint="update_worker")
    @json_errors
    def update_worker(worker_id: str):
        worker = service.update(worker_id, json_body())
        return ok(worker=worker.to_row())

    @app.route("/api/workers/<worker_id>", methods=["DELETE"], endpoint="delete_worker")
    @json_errors
    def delete_worker(worker_id: str):
        service.delete(worker_id)
        return ok(message="Worker deleted")

    @app.route("/api/workers/template.xlsx", methods=["GET"], endpoint="worker_template")
    def worker_template():
        return send_file(
            io.BytesIO(build_template()),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name="Template_Database_Worker.xlsx",
        )

    @app.route("/api/workers/export.xlsx", methods=["GET"], endpoint="export_workers")
    def export_workers_xlsx():
        return send_file(
            io.BytesIO(export_workers(service.list_workers())),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name="Database_Worker_Export.xlsx",
        )

    @app.route("/api/workers/import", methods=["POST"], endpoint="import_workers")
    @json_errors
    def import_workers():
        if "file" not in request.files:
            return fail("Missing spreadsheet file")

        result = service.import_file(request.files["file"].stream)
        return ok(
            imported=result.imported,
            skipped=result.skipped,
            errors=result.errors,
            message=f"Successfully imported: {result.imported}. Skipped (duplicates or invalid data): {result.skipped}",
        )
