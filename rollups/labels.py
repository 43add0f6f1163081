from __future__ import annotations

PRIORITY_LABELS = {
    10: "STAT",
    20: "ASAP",
    30: "Urgent",
    40: "Routine",
    45: "Standard",
    50: "Low",
    55: "Batch",
}


def format_hour(hour: int) -> str:
    if hour == 0:
        return "12 AM"
    if hour == 12:
        return "12 PM"
    return f"{hour} AM" if hour < 12 else f"{hour - 12} PM"


def priority_label(priority: int) -> str:
    return PRIORITY_LABELS.get(priority, f"Priority {priority}")
