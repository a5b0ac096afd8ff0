from __future__ import annotations

import http.client
import json
import logging
import socket
import time
from typing import Any, Dict, List, Optional
from urllib import error, parse, request

from config import Config, load_config
from llm.provider import GroundingSource, LLMError, LLMResponse


logger = logging.getLogger(__name__)

_RETRYABLE_STATUS = (429, 500, 502, 503, 504)


def _classify_url_error(exc: error.URLError) -> str:
    reason = getattr(exc, "reason", exc)
    if isinstance(reason, socket.gaierror):
        return "llm_dns_error"
    if isinstance(reason, (socket.timeout, TimeoutError)):
        return "llm_timeout"

    msg = str(reason).lower()
    if "nodename nor servname" in msg or "name or service not known" in msg:
        return "llm_dns_error"
    if "temporary failure in name resolution" in msg:
        return "llm_dns_error"
    if "timed out" in msg or "timeout" in msg:
        return "llm_timeout"
    if "connection refused" in msg:
        return "llm_connection_refused"
    if "certificate verify failed" in msg or "ssl" in msg:
        return "llm_ssl_error"
    return "llm_network_error"


def _is_retryable_network_reason(reason: str) -> bool:
    return reason in ("llm_timeout", "llm_network_error", "llm_dns_error")


def _extract_error_message(body: str) -> str:
    if not body:
        return ""
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError:
        return body[:300]
    err = parsed.get("error", {}) if isinstance(parsed, dict) else {}
    if isinstance(err, dict):
        parts = [str(err.get(key)) for key in ("message", "status") if err.get(key)]
        return " | ".join(parts)
    return body[:300]


def _headers(api_key: str) -> Dict[str, str]:
    return {
        "Content-Type": "application/json",
        "x-goog-api-key": api_key,
    }


def _request_json(
    url: str,
    headers: Dict[str, str],
    timeout: int,
    max_retries: int,
    payload: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    data = json.dumps(payload).encode("utf-8") if payload is not None else None
    method = "POST" if data is not None else "GET"
    for attempt in range(max_retries + 1):
        try:
            req = request.Request(url, data=data, headers=headers, method=method)
            with request.urlopen(req, timeout=timeout) as resp:
                return json.loads(resp.read().decode("utf-8"))
        except error.HTTPError as exc:
            status = exc.code
            body = ""
            try:
                body = exc.read().decode("utf-8")
            except Exception:
                body = ""
            if status in _RETRYABLE_STATUS and attempt < max_retries:
                logger.info("Gemini returned HTTP %d; retry %d/%d", status, attempt + 1, max_retries)
                time.sleep(1.0 * (attempt + 1))
                continue
            detail = _extract_error_message(body)
            if detail:
                logger.warning("Gemini HTTP %d: %s", status, detail)
            if status in (401, 403):
                raise LLMError(f"llm_http_{status}_invalid_key") from exc
            raise LLMError(f"llm_http_{status}") from exc
        except error.URLError as exc:
            reason = _classify_url_error(exc)
            if _is_retryable_network_reason(reason) and attempt < max_retries:
                logger.info("Gemini request failed (%s); retry %d/%d", reason, attempt + 1, max_retries)
                time.sleep(1.0 * (attempt + 1))
                continue
            raise LLMError(reason) from exc
        except (socket.timeout, OSError, http.client.HTTPException) as exc:
            # Errors raised while reading the body are not wrapped in URLError.
            reason = "llm_timeout" if isinstance(exc, (socket.timeout, TimeoutError)) else "llm_network_error"
            if attempt < max_retries:
                logger.info("Gemini response read failed (%s); retry %d/%d", reason, attempt + 1, max_retries)
                time.sleep(1.0 * (attempt + 1))
                continue
            raise LLMError(reason) from exc
        except json.JSONDecodeError as exc:
            raise LLMError("invalid_llm_output") from exc
    raise LLMError("llm_unknown")


def _request_payload(prompt: str, response_schema: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    generation_config: Dict[str, Any] = {"responseMimeType": "application/json"}
    if response_schema:
        generation_config["responseSchema"] = response_schema
    return {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "tools": [{"google_search": {}}],
        "generationConfig": generation_config,
    }


def _extract_text(parsed: Dict[str, Any]) -> str:
    candidates = parsed.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        return ""
    content = candidates[0].get("content") or {}
    text = ""
    for part in content.get("parts") or []:
        if isinstance(part, dict) and isinstance(part.get("text"), str):
            text += part["text"]
    return text


def _extract_sources(parsed: Dict[str, Any]) -> List[GroundingSource]:
    candidates = parsed.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        return []
    metadata = candidates[0].get("groundingMetadata") or {}
    sources: List[GroundingSource] = []
    for chunk in metadata.get("groundingChunks") or []:
        web = chunk.get("web") if isinstance(chunk, dict) else None
        if not web:
            continue
        sources.append(GroundingSource(uri=str(web.get("uri", "")), title=str(web.get("title", ""))))
    return sources


def list_models(config: Optional[Config] = None) -> List[str]:
    config = config or load_config()
    if not config.has_key:
        raise LLMError("missing_llm_key")

    parsed = _request_json(
        f"{config.api_base}/models",
        _headers(config.api_key),
        config.timeout_seconds,
        config.max_retries,
    )
    models = []
    for entry in parsed.get("models", []):
        name = entry.get("name", "")
        if name:
            models.append(name.split("/", 1)[-1])
    return models


def generate_content(
    prompt: str,
    response_schema: Optional[Dict[str, Any]] = None,
    *,
    config: Optional[Config] = None,
) -> LLMResponse:
    config = config or load_config()
    if not config.has_key:
        raise LLMError("missing_llm_key")

    model = parse.quote(config.model, safe="-._")
    url = f"{config.api_base}/models/{model}:generateContent"
    parsed = _request_json(
        url,
        _headers(config.api_key),
        config.timeout_seconds,
        config.max_retries,
        payload=_request_payload(prompt, response_schema),
    )

    text = _extract_text(parsed)
    sources = _extract_sources(parsed)
    logger.debug("Gemini returned %d chars and %d grounding sources", len(text), len(sources))
    return LLMResponse(
        text=text,
        sources=sources,
        usage=parsed.get("usageMetadata", {}) or {},
        model=config.model,
    )
