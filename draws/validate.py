from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Tuple

import pandas as pd
from pydantic import ValidationError

from draws.schema import DrawRecord


logger = logging.getLogger(__name__)

DRAWS_KEY = "draws"


def has_required_fields(entry: Any) -> bool:
    """Mirror of the response contract: ``game`` and ``date`` set, ``numbers`` a list."""
    if not isinstance(entry, dict):
        return False
    return bool(entry.get("game")) and bool(entry.get("date")) and isinstance(entry.get("numbers"), list)


def parse_draw_date(value: str) -> Optional[pd.Timestamp]:
    # Words such as "today" or "now" would otherwise parse as the current time.
    if not isinstance(value, str) or not any(ch.isdigit() for ch in value):
        return None
    parsed = pd.to_datetime(value, errors="coerce", format="mixed")
    if pd.isna(parsed):
        return None
    return parsed


def _sort_key(record: DrawRecord) -> Tuple[int, int]:
    parsed = parse_draw_date(record.date)
    if parsed is None:
        return (0, 0)
    return (1, parsed.value)


def sort_draws(records: Iterable[DrawRecord]) -> List[DrawRecord]:
    """Newest first; equal dates keep input order; unparsable dates go last."""
    return sorted(records, key=_sort_key, reverse=True)


def validate_draws(payload: Any, key: str = DRAWS_KEY) -> List[DrawRecord]:
    if not isinstance(payload, dict):
        logger.info("Parsed payload is %s, not an object; no draws", type(payload).__name__)
        return []
    entries = payload.get(key)
    if not isinstance(entries, list):
        logger.info("Parsed payload has no %r list; no draws", key)
        return []

    kept: List[DrawRecord] = []
    for index, entry in enumerate(entries):
        if not has_required_fields(entry):
            logger.debug("Dropping draw %d: missing game, date or numbers", index)
            continue
        try:
            kept.append(DrawRecord.model_validate(entry))
        except ValidationError as exc:
            first = exc.errors()[0] if exc.errors() else {}
            logger.debug("Dropping draw %d: %s", index, first.get("msg", str(exc)))

    dropped = len(entries) - len(kept)
    logger.info("Kept %d of %d draws (%d dropped)", len(kept), len(entries), dropped)
    return sort_draws(kept)
