import os
from dataclasses import dataclass
from typing import Dict, Optional


class ConfigError(Exception):
    pass


DEFAULT_MODEL = "gemini-3-flash-preview"
DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"


def _strip_quotes(value: str) -> str:
    if (value.startswith('"') and value.endswith('"')) or (
        value.startswith("'") and value.endswith("'")
    ):
        return value[1:-1]
    return value


def load_env_file(path: str, override: bool = False) -> None:
    if not path or not os.path.exists(path):
        return
    with open(path, "r", encoding="utf-8") as handle:
        for line in handle:
            raw = line.strip()
            if not raw or raw.startswith("#") or "=" not in raw:
                continue
            key, value = raw.split("=", 1)
            key = key.strip()
            value = _strip_quotes(value.strip())
            if override or key not in os.environ:
                os.environ[key] = value


def mask_secret(value: Optional[str], show_last: int = 4) -> str:
    if not value:
        return ""
    if len(value) <= show_last:
        return "*" * len(value)
    return "*" * (len(value) - show_last) + value[-show_last:]


@dataclass(frozen=True)
class Config:
    api_key: str
    model: str = DEFAULT_MODEL
    api_base: str = DEFAULT_API_BASE
    timeout_seconds: int = 60
    max_retries: int = 2
    max_draws: int = 40

    @property
    def has_key(self) -> bool:
        return bool(self.api_key)


def safe_config_summary(config: Config) -> Dict[str, str]:
    return {
        "GEMINI_API_KEY": mask_secret(config.api_key),
        "GEMINI_MODEL": config.model,
        "GEMINI_API_BASE": config.api_base,
        "LLM_TIMEOUT_SECONDS": str(config.timeout_seconds),
        "LLM_MAX_RETRIES": str(config.max_retries),
        "LOTTO_MAX_DRAWS": str(config.max_draws),
    }


def _int_env(env: Dict[str, str], key: str, default: int, minimum: int = 0) -> int:
    raw = env.get(key, "")
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from exc
    if value < minimum:
        raise ConfigError(f"{key} must be >= {minimum}, got {value}")
    return value


def load_config(env_path: str = ".env") -> Config:
    load_env_file(env_path)

    env = {
        "GEMINI_API_KEY": (os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or "").strip().strip('"').strip("'"),
        "GEMINI_MODEL": os.getenv("GEMINI_MODEL", "").strip(),
        "GEMINI_API_BASE": os.getenv("GEMINI_API_BASE", "").strip(),
        "LLM_TIMEOUT_SECONDS": os.getenv("LLM_TIMEOUT_SECONDS", "").strip(),
        "LLM_MAX_RETRIES": os.getenv("LLM_MAX_RETRIES", "").strip(),
        "LOTTO_MAX_DRAWS": os.getenv("LOTTO_MAX_DRAWS", "").strip(),
    }

    # Placeholder keys copied from a template count as missing.
    api_key = env["GEMINI_API_KEY"]
    if api_key.lower().startswith("your_"):
        api_key = ""

    return Config(
        api_key=api_key,
        model=env["GEMINI_MODEL"] or DEFAULT_MODEL,
        api_base=(env["GEMINI_API_BASE"] or DEFAULT_API_BASE).rstrip("/"),
        timeout_seconds=_int_env(env, "LLM_TIMEOUT_SECONDS", 60, minimum=1),
        max_retries=_int_env(env, "LLM_MAX_RETRIES", 2),
        max_draws=_int_env(env, "LOTTO_MAX_DRAWS", 40, minimum=1),
    )
