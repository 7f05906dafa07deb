from __future__ import annotations

import csv
import io
from typing import Any, Dict, Iterable, Sequence

from flask import Response, current_app


def write_csv(rows: Iterable[Dict[str, Any]], fieldnames: Sequence[str]) -> bytes:
    """Rows -> CSV bytes, UTF-8 with BOM so spreadsheet apps detect the encoding."""
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=list(fieldnames), extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return out.getvalue().encode("utf-8-sig")


def csv_response(rows: Iterable[Dict[str, Any]], fieldnames: Sequence[str], *, filename: str) -> Response:
    return current_app.response_class(
        write_csv(rows, fieldnames),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
