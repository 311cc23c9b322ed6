from __future__ import annotations

from datetime import datetime


def format_timestamp(value: datetime) -> str:
    """Format an event timestamp for display (second precision)."""
    return value.strftime("%Y-%m-%d %H:%M:%S")
