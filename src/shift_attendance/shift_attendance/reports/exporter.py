"""CSV and XLSX writers for report rows."""
from __future__ import annotations

import csv
import io
from typing import Mapping, Sequence

import pandas as pd

HISTORY_COLUMNS: dict[str, str] = {
    "date": "Tanggal",
    "division": "Divisi",
    "shift_time": "Shift Jam",
    "shift_id": "Shift ID",
    "ops_id": "Ops ID",
    "full_name": "Nama Lengkap",
    "check_in": "Waktu Absen",
    "check_out": "Waktu Pulang",
    "work_duration": "Durasi Kerja",
    "status": "Status",
}

ATTENDANCE_DAYS_COLUMNS: dict[str, str] = {
    "ops_id": "Ops ID",
    "full_name": "Nama Lengkap",
    "days": "Jumlah Hari",
}


def to_csv(rows: Sequence[Mapping], columns: Mapping[str, str]) -> bytes:
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=list(columns.values()))
    writer.writeheader()
    for row in rows:
        writer.writerow({label: row.get(key, "") for key, label in columns.items()})
    # BOM so spreadsheet apps pick UTF-8.
    return out.getvalue().encode("utf-8-sig")


def to_xlsx(sheets: Mapping[str, tuple[Sequence[Mapping], Mapping[str, str]]]) -> bytes:
    """One worksheet per entry: {sheet name: (rows, columns)}."""
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        for sheet_name, (rows, columns) in sheets.items():
            df = pd.DataFrame(list(rows), columns=list(columns.keys())).rename(columns=dict(columns))
            df.to_excel(writer, index=False, sheet_name=sheet_name)
    return output.getvalue()
