"""Gemini generateContent client.

Sends one request per call to the REST endpoint and translates failures into
the application's error kinds. There is no retry; callers show the error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from core.config import DEFAULT_MODEL_NAME, AppSettings, validate_api_key
from core.errors import ConfigurationError, RemoteRequestError
from core.logging_utils import get_logger, looks_like_auth_error, preview_text, safe_key_fingerprint
from core.models import ModelRequest


LOGGER = get_logger()

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

DOCUMENT_ERROR_MARKERS = ("file", "document")


@dataclass(frozen=True)
class GeminiConfig:
    api_key: str
    model_name: str = DEFAULT_MODEL_NAME
    temperature: float = 0.7
    top_k: int = 40
    top_p: float = 0.95
    max_output_tokens: int = 8192
    timeout_s: float = 120.0
    base_url: str = DEFAULT_BASE_URL

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "GeminiConfig":
        return cls(
            api_key=settings.api_key,
            model_name=settings.model_name,
            temperature=settings.temperature,
            max_output_tokens=settings.max_output_tokens,
            timeout_s=settings.timeout_s,
        )


class GeminiClient:
    """Thin wrapper over ``POST models/<model>:generateContent``."""

    def __init__(self, cfg: GeminiConfig, session: Optional[requests.Session] = None):
        self._api_key = validate_api_key(cfg.api_key)
        self.cfg = cfg
        self.session = session or requests.Session()

    def endpoint_url(self) -> str:
        base = self.cfg.base_url.rstrip("/")
        return f"{base}/models/{self.cfg.model_name}:generateContent"

    def build_body(self, request: ModelRequest) -> Dict[str, Any]:
        return {
            "contents": request.to_contents(),
            "generationConfig": {
                "temperature": float(self.cfg.temperature),
                "topK": int(self.cfg.top_k),
                "topP": float(self.cfg.top_p),
                "maxOutputTokens": int(self.cfg.max_output_tokens),
            },
        }

    def generate(self, request: ModelRequest) -> str:
        """Send the request and return the raw text of the first candidate."""
        body = self.build_body(request)
        LOGGER.info(
            "Sending request to Gemini model=%s parts=%d inline_data=%s key=%s",
            self.cfg.model_name,
            len(request.parts),
            request.has_inline_data,
            safe_key_fingerprint(self._api_key),
        )
        LOGGER.debug("Prompt: %s", preview_text(request.prompt_text))

        try:
            resp = self.session.post(
                self.endpoint_url(),
                params={"key": self._api_key},
                json=body,
                timeout=self.cfg.timeout_s,
            )
        except requests.Timeout as e:
            LOGGER.warning("Gemini request timed out after %ss", self.cfg.timeout_s)
            raise RemoteRequestError(RemoteRequestError.TIMEOUT, f"Request timed out: {e}") from e
        except requests.RequestException as e:
            LOGGER.warning("Gemini request failed: %s", e)
            raise RemoteRequestError(RemoteRequestError.NETWORK, f"Request failed: {e}") from e

        if resp.status_code != 200:
            raise self._error_for_response(resp)

        try:
            payload = resp.json()
        except ValueError as e:
            LOGGER.error("Gemini returned a non-JSON body (HTTP %s)", resp.status_code)
            raise RemoteRequestError(
                RemoteRequestError.SERVER, "Gemini response was not JSON", status_code=resp.status_code
            ) from e

        text = extract_candidate_text(payload)
        LOGGER.info("Gemini responded with %d characters", len(text))
        return text

    def _error_for_response(self, resp: requests.Response) -> Exception:
        status = resp.status_code
        message = _error_message(resp)
        LOGGER.warning("Gemini error HTTP %s: %s", status, message)

        if status in (401, 403) or looks_like_auth_error(message):
            return ConfigurationError(
                f"Gemini rejected the API key (HTTP {status}): {message}",
                user_message="Invalid API key. Please check your Google Gemini API key configuration.",
            )
        if status == 429:
            return RemoteRequestError(RemoteRequestError.RATE_LIMITED, message, status_code=status)
        lowered = message.lower()
        if any(marker in lowered for marker in DOCUMENT_ERROR_MARKERS):
            return RemoteRequestError(RemoteRequestError.DOCUMENT_REJECTED, message, status_code=status)
        if status == 400:
            return RemoteRequestError(RemoteRequestError.BAD_REQUEST, message, status_code=status)
        return RemoteRequestError(
            RemoteRequestError.SERVER, message or f"HTTP {status}", status_code=status
        )


def _error_message(resp: requests.Response) -> str:
    try:
        payload = resp.json()
    except ValueError:
        return (resp.text or "").strip()
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict):
            parts = [str(error.get("message") or "")]
            # API_KEY_INVALID and similar codes live under details[].reason
            for detail in error.get("details") or []:
                if isinstance(detail, dict) and detail.get("reason"):
                    parts.append(str(detail["reason"]))
            return " ".join(p for p in parts if p).strip()
    return str(payload)


def extract_candidate_text(payload: Any) -> str:
    """Join the text parts of the first candidate; empty when none came back."""
    if not isinstance(payload, dict):
        return ""

    candidates = payload.get("candidates") or []
    if not candidates:
        feedback = payload.get("promptFeedback") or {}
        reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
        if reason:
            raise RemoteRequestError(RemoteRequestError.BLOCKED, f"Prompt blocked: {reason}")
        return ""

    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return ""
    return "".join(p.get("text", "") for p in parts if isinstance(p, dict))
