"""Application configuration and session state management."""

import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
from dotenv import load_dotenv

from core.errors import ConfigurationError

# Load environment variables from .env file
load_dotenv()

DEFAULT_MODEL_NAME = "gemini-2.5-flash"
PLACEHOLDER_API_KEY = "your_actual_api_key_here"

MB = 1024 * 1024


@dataclass(frozen=True)
class AppSettings:
    api_key: str
    model_name: str = DEFAULT_MODEL_NAME
    temperature: float = 0.7
    max_output_tokens: int = 8192
    timeout_s: float = 120.0
    max_document_bytes: int = 25 * MB
    max_image_bytes: int = 5 * MB


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be a number, got {raw!r}",
            user_message=f"Configuration value {name} is invalid.",
        )


def load_settings(env: Optional[Mapping[str, str]] = None) -> AppSettings:
    """Build settings from the environment (or an explicit mapping).

    The API key is read but not validated here; the Gemini client validates it
    when constructed so that a missing key is reported before any request.
    """
    if env is None:
        env = os.environ
    return AppSettings(
        api_key=(env.get("GEMINI_API_KEY") or "").strip(),
        model_name=(env.get("GEMINI_MODEL") or "").strip() or DEFAULT_MODEL_NAME,
        temperature=_env_float(env, "QUIZGEN_TEMPERATURE", 0.7),
        max_output_tokens=int(_env_float(env, "QUIZGEN_MAX_OUTPUT_TOKENS", 8192)),
        timeout_s=_env_float(env, "QUIZGEN_TIMEOUT_S", 120.0),
        max_document_bytes=int(_env_float(env, "QUIZGEN_MAX_DOCUMENT_MB", 25) * MB),
        max_image_bytes=int(_env_float(env, "QUIZGEN_MAX_IMAGE_MB", 5) * MB),
    )


def validate_api_key(key: Any) -> str:
    """Return the stripped key or raise ConfigurationError."""
    if not isinstance(key, str) or not key.strip():
        raise ConfigurationError("Missing GEMINI_API_KEY")
    key = key.strip()
    if key == PLACEHOLDER_API_KEY:
        raise ConfigurationError(
            "GEMINI_API_KEY is still the placeholder value",
            user_message="Please replace the placeholder API key with your actual key.",
        )
    if not key.startswith("AIza"):
        raise ConfigurationError(
            "GEMINI_API_KEY has an invalid format",
            user_message="API key format is invalid. Gemini keys start with 'AIza'.",
        )
    return key


def get_session_state_defaults() -> Dict[str, Any]:
    """Return default values for all session state variables."""
    settings = load_settings()
    return {
        # Quiz flow
        'quiz': None,
        'quiz_result': None,
        'source_label': None,
        'generation_session': None,
        'generation_error': None,
        'quiz_started_at': None,

        # API configuration
        'api_key_valid': False,
        'api_key': settings.api_key,

        # Model settings
        'model_name': settings.model_name,
        'temperature': settings.temperature,
        'max_tokens': settings.max_output_tokens,

        # Quiz options
        'question_count': 10,
        'quiz_type': 'comprehensive',
        'difficulty': 'medium',
        'topic': '',

        # Report details
        'student_name': '',
        'course': '',
    }


def initialize_session_state() -> None:
    """Initialize all session state variables with default values."""
    import streamlit as st

    defaults = get_session_state_defaults()

    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value
