from __future__ import annotations

import re
from datetime import date
from typing import Dict, Optional, Tuple

import pandas as pd


PRESET_OFFSETS: Dict[str, pd.DateOffset] = {
    "week": pd.DateOffset(days=7),
    "month": pd.DateOffset(months=1),
    "year": pd.DateOffset(years=1),
}

_ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


def _parse_iso_date(value: str) -> date:
    if not isinstance(value, str) or not _ISO_DATE_RE.fullmatch(value):
        raise ValueError(f"Invalid date format (expected YYYY-MM-DD): {value}")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValueError(f"Invalid date format (expected YYYY-MM-DD): {value}") from exc


def preset_range(kind: str, reference: Optional[date] = None) -> Tuple[str, str]:
    """Return ``(start, end)`` ISO dates ending at ``reference`` (default today)."""
    if kind not in PRESET_OFFSETS:
        raise ValueError(f"Unknown preset: {kind} (expected one of {', '.join(PRESET_OFFSETS)})")
    end = pd.Timestamp(reference or date.today())
    start = end - PRESET_OFFSETS[kind]
    return start.date().isoformat(), end.date().isoformat()


def validate_range(start: str, end: str) -> Tuple[date, date]:
    start_date = _parse_iso_date(start)
    end_date = _parse_iso_date(end)
    if start_date > end_date:
        raise ValueError("start must be <= end")
    return start_date, end_date
