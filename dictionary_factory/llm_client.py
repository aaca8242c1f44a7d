"""Client for OpenAI-compatible chat completion endpoints."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import requests

from dictionary_factory import logging_manager as log_mgr
from dictionary_factory.config_manager.constants import (
    DEFAULT_CHAT_LLM_MODEL,
    DEFAULT_CHAT_LLM_URL,
)

logger = log_mgr.get_logger().getChild("llm_client")

DEFAULT_REQUEST_TIMEOUT = 90.0


@dataclass(frozen=True)
class ClientSettings:
    model: str = DEFAULT_CHAT_LLM_MODEL
    api_url: str = DEFAULT_CHAT_LLM_URL
    api_key: Optional[str] = None
    debug: bool = False


@dataclass
class LLMResponse:
    """Outcome of :meth:`LLMClient.send_chat_request`.

    ``status_code`` is ``0`` when no HTTP response was received. ``error`` is
    set whenever ``text`` should not be used.
    """

    text: str
    status_code: int
    error: Optional[str] = None
    usage: Dict[str, int] = field(default_factory=dict)


def _is_retryable(status_code: int) -> bool:
    return status_code == 0 or status_code == 408 or status_code >= 500


def _error_detail(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return (response.text or "")[:300]
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        if isinstance(error, str):
            return error
    return (response.text or "")[:300]


def _first_choice_content(data: Dict[str, Any]) -> str:
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return ""
    message = (choices[0] or {}).get("message") or {}
    content = message.get("content")
    return content if isinstance(content, str) else ""


class LLMClient:
    """Post chat-completion payloads with bounded retries on transient failures."""

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        *,
        session: Optional[requests.Session] = None,
        sleeper: Callable[[float], None] = time.sleep,
    ) -> None:
        self._settings = settings or ClientSettings()
        self._session = session or requests.Session()
        self._sleep = sleeper

    @property
    def model(self) -> str:
        return self._settings.model

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._settings.api_key:
            headers["Authorization"] = f"Bearer {self._settings.api_key}"
        return headers

    def _post_once(self, payload: Dict[str, Any], timeout: float) -> LLMResponse:
        if self._settings.debug:
            logger.debug(
                "Chat request to %s: %s",
                self._settings.api_url,
                json.dumps(payload, ensure_ascii=False),
            )
        try:
            response = self._session.post(
                self._settings.api_url, json=payload, headers=self._headers(), timeout=timeout
            )
        except requests.RequestException as exc:
            return LLMResponse(text="", status_code=0, error=f"network error: {exc}")

        if response.status_code != 200:
            return LLMResponse(
                text="",
                status_code=response.status_code,
                error=f"HTTP {response.status_code}: {_error_detail(response)}",
            )
        try:
            data = response.json()
        except ValueError as exc:
            return LLMResponse(text="", status_code=200, error=f"invalid JSON body: {exc}")
        if not isinstance(data, dict):
            return LLMResponse(text="", status_code=200, error="unexpected response shape")

        usage = {
            key: value
            for key, value in (data.get("usage") or {}).items()
            if key in ("prompt_tokens", "completion_tokens") and isinstance(value, int)
        }
        text = _first_choice_content(data).strip()
        if not text:
            return LLMResponse(text="", status_code=200, error="empty completion", usage=usage)
        return LLMResponse(text=text, status_code=200, usage=usage)

    def send_chat_request(
        self,
        payload: Dict[str, Any],
        *,
        max_attempts: int = 1,
        timeout: Optional[float] = None,
        backoff_seconds: float = 1.0,
    ) -> LLMResponse:
        """Send ``payload``; retry network errors, 408 and 5xx up to ``max_attempts``."""

        body = dict(payload)
        body.setdefault("model", self.model)
        attempts = max(1, max_attempts)
        result = LLMResponse(text="", status_code=0, error="not sent")

        for attempt in range(1, attempts + 1):
            result = self._post_once(body, timeout or DEFAULT_REQUEST_TIMEOUT)
            if not result.error:
                return result
            logger.debug(
                "Chat attempt %s/%s failed: %s",
                attempt,
                attempts,
                result.error,
                extra={"event": "llm.attempt.failed", "console_suppress": True},
            )
            if not _is_retryable(result.status_code) or attempt == attempts:
                break
            self._sleep(backoff_seconds * attempt)
        return result


def create_client(
    *,
    model: Optional[str] = None,
    api_url: Optional[str] = None,
    api_key: Optional[str] = None,
    debug: bool = False,
    session: Optional[requests.Session] = None,
) -> LLMClient:
    settings = ClientSettings(
        model=model or DEFAULT_CHAT_LLM_MODEL,
        api_url=api_url or DEFAULT_CHAT_LLM_URL,
        api_key=api_key,
        debug=debug,
    )
    return LLMClient(settings, session=session)


__all__ = ["ClientSettings", "LLMClient", "LLMResponse", "create_client"]
