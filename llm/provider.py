from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from config import Config, load_config


class LLMError(Exception):
    pass


_RATE_LIMIT_MARKERS = ("429", "rate_limit", "resource_exhausted")


@dataclass(frozen=True)
class GroundingSource:
    uri: str
    title: str

    def to_dict(self) -> Dict[str, str]:
        return {"uri": self.uri, "title": self.title}


@dataclass(frozen=True)
class LLMResponse:
    text: str
    sources: List[GroundingSource] = field(default_factory=list)
    usage: Dict[str, Any] = field(default_factory=dict)
    model: str = ""


def is_rate_limited(error: Union[LLMError, str]) -> bool:
    reason = str(error).lower()
    return any(marker in reason for marker in _RATE_LIMIT_MARKERS)


def provider_name() -> str:
    return "gemini"


def model_name(config: Optional[Config] = None) -> str:
    return (config or load_config()).model


def has_llm_key(config: Optional[Config] = None) -> bool:
    return (config or load_config()).has_key


def generate_content(
    prompt: str,
    response_schema: Optional[Dict[str, Any]] = None,
    *,
    config: Optional[Config] = None,
) -> LLMResponse:
    from llm import gemini_provider

    return gemini_provider.generate_content(prompt, response_schema, config=config)
