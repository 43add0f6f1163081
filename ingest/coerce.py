from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional

# Leading numeric prefix, the way spreadsheet exports tend to be read ("12 mL" -> 12).
_NUM_RE = re.compile(r"^\s*[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")


@dataclass
class IngestWarnings:
    """Per-file list of soft row-level problems (zero-coerced numbers and the like)."""

    limit: int = 200
    messages: List[str] = field(default_factory=list)
    count: int = 0

    def add(self, message: str) -> None:
        self.count += 1
        if len(self.messages) < self.limit:
            self.messages.append(message)

    def as_dict(self) -> dict:
        return {"warnings": list(self.messages), "warning_count": self.count}


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return False


def parse_number(value: Any) -> Optional[float]:
    """Finite float for a cell, or None when the cell holds no usable number."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        try:
            f = float(value)
        except OverflowError:
            return None
    else:
        m = _NUM_RE.match(str(value))
        if not m:
            return None
        # "1e400" matches the prefix but overflows to inf
        f = float(m.group(0))
    return None if math.isnan(f) or math.isinf(f) else f


def to_float(value: Any, warnings: Optional[IngestWarnings] = None, where: str = "") -> float:
    """Lenient float parse: blanks are 0, unparsable cells are 0 and recorded as a warning."""
    if is_blank(value):
        return 0.0
    num = parse_number(value)
    if num is None:
        if warnings is not None:
            warnings.add(f"{where}: non-numeric value {value!r} counted as 0" if where else f"non-numeric value {value!r} counted as 0")
        return 0.0
    return num


def to_int(value: Any, warnings: Optional[IngestWarnings] = None, where: str = "") -> int:
    """Like `to_float` but truncates toward zero."""
    return int(to_float(value, warnings, where))


def to_text(value: Any, default: str = "") -> str:
    if is_blank(value):
        return default
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()
