"""Excel template, export and bulk import of the worker registry."""
from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import BinaryIO, Iterable
from zipfile import BadZipFile

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from ..core.constants import CONTRACT_TYPE
from ..core.exceptions import ValidationError
from .model import Worker, WorkerDraft, ops_key
from .validation import validate_draft

TEMPLATE_COLUMNS = ["opsId", "fullName", "nik", "phone", "contractType", "department", "status"]

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass
class ImportResult:
    drafts: list[WorkerDraft] = field(default_factory=list)
    skipped: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def imported(self) -> int:
        return len(self.drafts)


def _to_xlsx(df: pd.DataFrame, sheet_name: str) -> bytes:
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    return output.getvalue()


def build_template() -> bytes:
    sample = {
        "opsId": "NEX999",
        "fullName": "John Doe",
        "nik": "3201010101010001",
        "phone": "081298765432",
        "contractType": CONTRACT_TYPE,
        "department": "SOC Operator",
        "status": "Active",
    }
    return _to_xlsx(pd.DataFrame([sample], columns=TEMPLATE_COLUMNS), "Template")


def export_workers(workers: Iterable[Worker]) -> bytes:
    rows = []
    for w in workers:
        row = w.to_row()
        rows.append({col: row[col] for col in TEMPLATE_COLUMNS})
    return _to_xlsx(pd.DataFrame(rows, columns=TEMPLATE_COLUMNS), "Workers")


def parse_import(stream: BinaryIO, *, existing_keys: Iterable[str] = ()) -> ImportResult:
    """Validate every row of the first sheet.

    Rows with a missing field, a value outside the enumerations, or an opsId
    already registered (or repeated earlier in the file) are skipped.
    """
    try:
        df = pd.read_excel(stream, sheet_name=0, dtype=str).fillna("")
    except (ValueError, KeyError, BadZipFile, InvalidFileException):
        raise ValidationError("File is not a readable .xlsx spreadsheet")
    seen = set(existing_keys)
    result = ImportResult()

    for index, record in enumerate(df.to_dict(orient="records"), start=2):
        data = {k: str(v).strip() for k, v in record.items()}
        try:
            draft = validate_draft(data, default_status=None)
        except ValidationError as e:
            result.skipped += 1
            result.errors.append(f"row {index}: {e}")
            continue

        key = ops_key(draft.ops_id)
        if key in seen:
            result.skipped += 1
            result.errors.append(f"row {index}: duplicate OpsID {draft.ops_id}")
            continue

        seen.add(key)
        result.drafts.append(draft)

    return result

