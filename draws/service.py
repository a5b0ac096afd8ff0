from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from config import Config, load_config
from draws.schema import GAME_NAMES, DrawRecord, draws_response_schema
from draws.validate import validate_draws
from llm.json_parse import JsonRecoveryError, recover_json
from llm.provider import GroundingSource, LLMError, generate_content, is_rate_limited


logger = logging.getLogger(__name__)

PROMPT_PATH = Path(__file__).parent / "prompts" / "lottery_results.md"
EMPTY_PAYLOAD: Dict[str, Any] = {"draws": []}

MSG_MISSING_KEY = "API Key is missing."
MSG_RATE_LIMITED = "Too many requests. Slow down."
MSG_INTERRUPTED = "Data stream was interrupted. Try a smaller date range."
MSG_NO_RESULTS = "No official results found for this date range."


class Outcome(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    UPSTREAM_FAILURE = "upstream_failure"
    UNRECOVERABLE_PARSE = "unrecoverable_parse"


@dataclass(frozen=True)
class ScrapedResult:
    outcome: Outcome
    draws: List[DrawRecord] = field(default_factory=list)
    sources: List[GroundingSource] = field(default_factory=list)
    error_detail: Optional[str] = None
    repaired: bool = False

    @property
    def ok(self) -> bool:
        return self.error_detail is None

    @property
    def advisory(self) -> Optional[str]:
        if self.outcome is Outcome.EMPTY:
            return MSG_NO_RESULTS
        return None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "draws": [draw.to_dict() for draw in self.draws],
            "sources": [source.to_dict() for source in self.sources],
        }
        if self.error_detail is not None:
            data["errorDetail"] = self.error_detail
        return data


def build_prompt(start_date: str, end_date: str, max_draws: int = 40) -> str:
    template = PROMPT_PATH.read_text(encoding="utf-8")
    return (
        template.replace("{start_date}", start_date)
        .replace("{end_date}", end_date)
        .replace("{games}", ", ".join(GAME_NAMES))
        .replace("{max_draws}", str(max_draws))
        .strip()
    )


def upstream_failure_detail(exc: LLMError) -> str:
    reason = str(exc)
    if reason == "missing_llm_key":
        return MSG_MISSING_KEY
    if is_rate_limited(reason):
        return MSG_RATE_LIMITED
    return f"Connection failed ({reason})."


def build_result(raw_text: Optional[str], sources: Iterable[GroundingSource] = ()) -> ScrapedResult:
    """Normalize, repair, validate and sort one payload from the source."""
    sources = list(sources)
    try:
        recovered = recover_json(raw_text or "", empty_default=EMPTY_PAYLOAD)
    except JsonRecoveryError as exc:
        logger.warning("Could not recover JSON from response (%s)", exc.reason)
        return ScrapedResult(
            outcome=Outcome.UNRECOVERABLE_PARSE,
            sources=sources,
            error_detail=MSG_INTERRUPTED,
            repaired=True,
        )

    if recovered.repaired:
        logger.info("Response was truncated or malformed; repaired before parsing")
    draws = validate_draws(recovered.value)
    return ScrapedResult(
        outcome=Outcome.OK if draws else Outcome.EMPTY,
        draws=draws,
        sources=sources,
        repaired=recovered.repaired,
    )


def fetch_lottery_data(start_date: str, end_date: str, *, config: Optional[Config] = None) -> ScrapedResult:
    config = config or load_config()
    if not config.has_key:
        return ScrapedResult(outcome=Outcome.UPSTREAM_FAILURE, error_detail=MSG_MISSING_KEY)

    prompt = build_prompt(start_date, end_date, config.max_draws)
    logger.info("Requesting draws %s to %s (model=%s)", start_date, end_date, config.model)
    try:
        response = generate_content(prompt, draws_response_schema(), config=config)
    except LLMError as exc:
        logger.warning("Draw request failed: %s", exc)
        return ScrapedResult(outcome=Outcome.UPSTREAM_FAILURE, error_detail=upstream_failure_detail(exc))

    return build_result(response.text, response.sources)
