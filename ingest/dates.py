from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

# Spreadsheet serial 25569 is 1970-01-01 in the 1899-12-30 epoch convention.
UNIX_EPOCH_SERIAL = 25569
_UNIX_EPOCH = date(1970, 1, 1)


def excel_serial_to_iso(serial: Any) -> Optional[str]:
    """
    Convert a spreadsheet serial date to `YYYY-MM-DD` (UTC, date part only).

    Readers that already decode date cells pass `datetime`/`date` objects; those
    are truncated to their calendar date. Blank or non-numeric input returns
    None so callers can skip the row.
    """
    if serial is None or isinstance(serial, bool):
        return None
    if isinstance(serial, datetime):
        if serial.tzinfo is not None:
            serial = serial.astimezone(timezone.utc)
        return serial.date().isoformat()
    if isinstance(serial, date):
        return serial.isoformat()
    if isinstance(serial, str):
        s = serial.strip()
        if not s:
            return None
        try:
            serial = float(s)
        except ValueError:
            return None
    try:
        value = float(serial)
    except (TypeError, ValueError):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    days = math.floor(value) - UNIX_EPOCH_SERIAL
    try:
        return (_UNIX_EPOCH + timedelta(days=days)).isoformat()
    except OverflowError:
        return None


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
