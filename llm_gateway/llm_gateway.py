"""Single-shot gateway to an OpenAI-compatible chat-completions endpoint.

Each call sends one request and validates the reply against a pydantic
schema. There are no retries; any failure surfaces as ``LlmGatewayError``.
"""
from __future__ import annotations

import json
import logging
import os
import re
from typing import Any, Dict, List, Optional, Protocol, Sequence, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from config import LlmRoute


logger = logging.getLogger(__name__)

_FENCE = re.compile(r"^```[\w-]*\s*\n(?P<body>.*?)\n?\s*```$", re.DOTALL)
_PREVIEW_CHARS = 120


class HttpResponse(Protocol):  # What the gateway reads from a response
    @property
    def status_code(self) -> int: ...

    def json(self) -> Any: ...


class HttpClient(Protocol):  # Injectable transport, httpx.Client by default
    def post(self, url: str, *, json: Dict[str, Any], headers: Dict[str, str], timeout: float) -> HttpResponse: ...


class LlmGatewayError(RuntimeError):
    pass


T = TypeVar("T", bound=BaseModel)


def call(
    task: str,
    schema: Type[T],
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
    options: Optional[Dict[str, Any]] = None,
) -> T:  # One user prompt in, one validated object out
    return chat([{"role": "user", "content": task}], schema, cfg=cfg, client=client, options=options)


def chat(
    messages: Sequence[Dict[str, str]],
    schema: Type[T],
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
    options: Optional[Dict[str, Any]] = None,
) -> T:
    payload = _build_payload(messages, schema, cfg, options)
    logger.info("LLM request route=%s model=%s preview=%s", cfg.name, cfg.model, _preview(payload["messages"]))
    response = _send(cfg, payload, client)
    parsed = _parse_response(response, schema)
    logger.info("LLM response route=%s schema=%s", cfg.name, schema.__name__)
    return parsed


def _build_payload(
    messages: Sequence[Dict[str, str]],
    schema: Type[BaseModel],
    cfg: LlmRoute,
    options: Optional[Dict[str, Any]],
) -> Dict[str, Any]:
    request_messages: List[Dict[str, str]] = []
    if cfg.enforce_json:
        schema_json = json.dumps(schema.model_json_schema(), indent=2)
        request_messages.append(
            {"role": "system", "content": "Reply with a single JSON object matching this schema:\n" + schema_json}
        )
    for message in messages:
        role = str(message.get("role", "")).strip()
        if not role:
            raise ValueError("Chat message missing role")
        request_messages.append({"role": role, "content": str(message.get("content", ""))})

    payload: Dict[str, Any] = {"model": cfg.model, "messages": request_messages}
    if cfg.temperature is not None:
        payload["temperature"] = cfg.temperature
    if cfg.response_format:
        payload["response_format"] = {"type": cfg.response_format}
    payload.update(options or {})
    return payload


def _headers(cfg: LlmRoute) -> Dict[str, str]:
    headers = {"Content-Type": "application/json"}
    api_key = os.getenv(cfg.api_key_env) if cfg.api_key_env else None
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    headers.update(cfg.extra_headers)
    return headers


def _send(cfg: LlmRoute, payload: Dict[str, Any], client: Optional[HttpClient]) -> HttpResponse:
    url = f"{cfg.base_url.rstrip('/')}{cfg.endpoint}"
    try:
        if client is not None:
            return client.post(url, json=payload, headers=_headers(cfg), timeout=cfg.timeout_s)
        with httpx.Client(timeout=cfg.timeout_s) as http_client:
            return http_client.post(url, json=payload, headers=_headers(cfg))
    except Exception as exc:  # noqa: BLE001
        logger.error("LLM transport failure route=%s: %s", cfg.name, exc)
        raise LlmGatewayError("LLM transport failed") from exc


def _parse_response(response: HttpResponse, schema: Type[T]) -> T:
    if response.status_code >= 400:
        logger.error("LLM error status: %s", response.status_code)
        raise LlmGatewayError(f"LLM returned status {response.status_code}")
    try:
        data = response.json()
    except ValueError as exc:
        logger.error("Invalid JSON payload from LLM: %s", exc)
        raise LlmGatewayError("LLM payload was not JSON") from exc
    content = _extract_content(data)
    try:
        return schema.model_validate_json(_strip_code_fences(content))
    except ValidationError as exc:
        logger.warning("LLM output validation failed schema=%s: %s", schema.__name__, exc)
        raise LlmGatewayError("LLM output validation failed") from exc


def _extract_content(data: Any) -> str:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise LlmGatewayError("LLM response missing content") from exc
    if not isinstance(content, str):
        raise LlmGatewayError("LLM response missing content")
    return content


def _preview(messages: Sequence[Dict[str, str]]) -> str:  # First user-visible line, for logs
    for message in messages:
        text = message["content"].strip()
        if message["role"] != "system" and text:
            line = text.splitlines()[0]
            return line if len(line) <= _PREVIEW_CHARS else line[: _PREVIEW_CHARS - 3] + "..."
    return ""


def _strip_code_fences(content: str) -> str:  # Models sometimes wrap JSON in ```json fences
    text = content.strip()
    match = _FENCE.match(text)
    return match.group("body").strip() if match else text


__all__ = ["HttpClient", "HttpResponse", "LlmGatewayError", "call", "chat"]
