from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import Any, Dict, List

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ingest.coerce import is_blank
from ingest.errors import ReportReadError

log = logging.getLogger("dosedash.ingest.spreadsheet")

Row = List[Any]


def _trim(row: Row) -> Row:
    out = list(row)
    while out and is_blank(out[-1]):
        out.pop()
    return out


def _read_xlsx(path: Path) -> List[Row]:
    wb = load_workbook(str(path), read_only=True, data_only=True)
    try:
        if not wb.worksheets:
            return []
        ws = wb.worksheets[0]
        return [_trim(row) for row in ws.iter_rows(values_only=True)]
    finally:
        wb.close()


def read_sheet_rows(path: str | Path) -> List[Row]:
    """
    Read the first worksheet as a list of rows (header row included, if any).

    openpyxl hands back numbers, strings and decoded date cells as Python values.
    Anything that is not an Excel workbook (CSV included) is rejected.
    """
    p = Path(path)
    try:
        rows = _read_xlsx(p)
    except (InvalidFileException, zipfile.BadZipFile, KeyError) as e:
        raise ReportReadError(f"Could not read spreadsheet {p.name}: {e}") from e
    except OSError as e:
        raise ReportReadError(f"Could not open {p.name}: {e}") from e

    log.debug("sheet_read", extra={"extra": {"file": p.name, "rows": len(rows)}})
    return rows


def header_keys(header: Row) -> List[str | None]:
    """Column keys for record-oriented reading; repeated labels get a `_1`, `_2` suffix."""
    seen: Dict[str, int] = {}
    keys: List[str | None] = []
    for cell in header:
        if is_blank(cell):
            keys.append(None)
            continue
        label = str(cell).strip()
        n = seen.get(label, 0)
        seen[label] = n + 1
        keys.append(label if n == 0 else f"{label}_{n}")
    return keys


def rows_as_records(rows: List[Row]) -> List[Dict[str, Any]]:
    """Turn header + data rows into dicts keyed by header label, dropping blank cells and blank rows."""
    if not rows:
        return []
    keys = header_keys(rows[0])
    records: List[Dict[str, Any]] = []
    for row in rows[1:]:
        rec = {}
        for key, value in zip(keys, row):
            if key is None or is_blank(value):
                continue
            rec[key] = value
        if rec:
            records.append(rec)
    return records
