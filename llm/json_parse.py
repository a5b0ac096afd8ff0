from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

from llm.json_repair import remove_trailing_commas, repair_truncated_json


logger = logging.getLogger(__name__)

_OPEN_FENCE_RE = re.compile(r"^```[\w-]*[ \t]*\r?\n?")
_CLOSE_FENCE_RE = re.compile(r"\r?\n?```$")


class JsonRecoveryError(ValueError):
    def __init__(self, reason: str, excerpt: str = ""):
        super().__init__(reason)
        self.reason = reason
        self.excerpt = excerpt


@dataclass(frozen=True)
class RecoveredJson:
    value: Any
    text: str
    repaired: bool


def strip_fences(raw_text: str) -> str:
    cleaned = raw_text.strip()
    if cleaned.startswith("```"):
        cleaned = _OPEN_FENCE_RE.sub("", cleaned, count=1)
    if cleaned.endswith("```"):
        cleaned = _CLOSE_FENCE_RE.sub("", cleaned, count=1)
    return cleaned.strip()


def normalize_json_text(raw_text: str) -> str:
    return remove_trailing_commas(strip_fences(raw_text))


def _skip_leading_prose(text: str) -> str:
    if not text or text[0] in "{[":
        return text
    # Prefer an object start; fall back to an array.
    start = text.find("{")
    if start == -1:
        start = text.find("[")
    if start == -1:
        return text
    return text[start:]


def repair_json_text(normalized: str) -> str:
    """Return ``normalized`` if it parses, otherwise its repaired form."""
    try:
        json.loads(normalized)
        return normalized
    except json.JSONDecodeError:
        pass
    candidate = _skip_leading_prose(normalized)
    # Closing a container right after a comma leaves ",]"; elide it again.
    return remove_trailing_commas(repair_truncated_json(candidate))


def recover_json(raw_text: str, empty_default: Optional[Any] = None) -> RecoveredJson:
    normalized = normalize_json_text(raw_text or "")
    if not normalized:
        if empty_default is None:
            raise JsonRecoveryError("empty_json_text")
        return RecoveredJson(value=empty_default, text="", repaired=False)

    try:
        return RecoveredJson(value=json.loads(normalized), text=normalized, repaired=False)
    except json.JSONDecodeError as exc:
        logger.debug("Strict parse failed at pos %d (%s); repairing", exc.pos, exc.msg)

    repaired = repair_json_text(normalized)
    try:
        value = json.loads(repaired)
    except json.JSONDecodeError as exc:
        excerpt = sanitize_excerpt(repaired[-200:])
        logger.warning("Repaired JSON still invalid: %s (tail: %s)", exc.msg, excerpt)
        raise JsonRecoveryError("unrecoverable_json", excerpt=excerpt) from exc
    return RecoveredJson(value=value, text=repaired, repaired=True)


def parse_llm_json(raw_text: str, empty_default: Optional[Any] = None) -> Any:
    return recover_json(raw_text, empty_default=empty_default).value


def sanitize_excerpt(raw_text: str, limit: int = 400) -> str:
    cleaned = raw_text.replace("\n", " ").strip()
    if len(cleaned) <= limit:
        return cleaned
    return cleaned[:limit] + "..."
