from __future__ import annotations

import time
import uuid


def _base36(n: int) -> str:
    chars = "0123456789abcdefghijklmnopqrstuvwxyz"
    if n == 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, 36)
        out.append(chars[r])
    return "".join(reversed(out))


def new_record_id() -> str:
    # Millisecond timestamp prefix keeps ids roughly ordered by creation; the uuid tail makes them unique.
    return f"{_base36(int(time.time() * 1000))}{uuid.uuid4().hex[:9]}"
