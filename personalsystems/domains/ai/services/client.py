"""Completion API client and JSON extraction for model replies."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

import requests
from flask import current_app

logger = logging.getLogger(__name__)

DEFAULT_AI_API_URL = "https://api.openai.com/v1/chat/completions"


class AIServiceError(Exception):
    """Base exception for completion API failures."""

    pass


class AIConfigurationError(AIServiceError):
    """Raised when the completion API is not configured."""

    pass


class AIResponseParseError(AIServiceError):
    """Raised when a reply carries no usable JSON."""

    pass


def extract_json(text: Optional[str]) -> Any:
    """
    Parse the first balanced JSON object or array embedded in ``text``.

    Whichever of ``{`` or ``[`` appears first opens the span. Brackets inside
    string literals (including escaped quotes) do not count toward balance.

    Raises:
        AIResponseParseError: If no balanced span exists or it is not valid JSON
    """
    if not text:
        raise AIResponseParseError("Empty response")

    start = -1
    for idx, ch in enumerate(text):
        if ch in "{[":
            start = idx
            break
    if start < 0:
        raise AIResponseParseError("No JSON found in response")

    stack: List[str] = []
    in_string = False
    escaped = False
    for idx in range(start, len(text)):
        ch = text[idx]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in "{[":
            stack.append("}" if ch == "{" else "]")
        elif ch in "}]":
            if not stack or stack.pop() != ch:
                raise AIResponseParseError("Mismatched brackets in response")
            if not stack:
                try:
                    return json.loads(text[start : idx + 1])
                except ValueError as e:
                    raise AIResponseParseError(f"Invalid JSON in response: {e}") from e

    raise AIResponseParseError("Unbalanced JSON in response")


class CompletionClient:
    """Thin wrapper over an OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        api_key: Optional[str],
        *,
        api_url: str = DEFAULT_AI_API_URL,
        model: str = "gpt-4o-mini",
        timeout: float = 30,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.model = model
        self.timeout = timeout

    @classmethod
    def from_config(cls) -> "CompletionClient":
        cfg = current_app.config
        return cls(
            cfg.get("AI_API_KEY"),
            api_url=cfg.get("AI_API_URL") or DEFAULT_AI_API_URL,
            model=cfg.get("AI_MODEL") or "gpt-4o-mini",
            timeout=float(cfg.get("AI_TIMEOUT_SECONDS", 30)),
        )

    def complete(self, system: str, prompt: str, *, temperature: float = 0.3) -> str:
        """
        Send one system + user message pair and return the reply text.

        Raises:
            AIConfigurationError: If no API key is configured
            AIServiceError: On transport failure or a non-200 response
        """
        if not self.api_key:
            raise AIConfigurationError("AI_API_KEY is not configured")

        payload: Dict[str, Any] = {
            "model": self.model,
            "temperature": temperature,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            resp = requests.post(self.api_url, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Completion request failed: {e}")
            raise AIServiceError(f"Completion request failed: {e}") from e

        if resp.status_code != 200:
            logger.error(f"Completion API returned {resp.status_code}: {resp.text[:500]}")
            raise AIServiceError(f"Completion API returned {resp.status_code}")

        try:
            body = resp.json()
            return body["choices"][0]["message"]["content"] or ""
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error(f"Unexpected completion payload: {e}")
            raise AIResponseParseError("Unexpected completion payload") from e
