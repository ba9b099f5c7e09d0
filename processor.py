"""Quiz generation pipeline: extract -> build prompt -> call Gemini -> parse.

Each step completes before the next one starts. Validation and configuration
errors are raised before any network request is made.
"""

from __future__ import annotations

import enum
import threading
from typing import Optional

from core.config import AppSettings
from core.errors import GenerationInProgressError, QuizGenError, ValidationError
from core.logging_utils import get_logger
from core.models import FilePayload, Quiz, QuizRequestConfig, SourceContent, TextContent
from core.validation import validate_text_length
from extraction.content import extract_from_text, extract_from_upload
from extraction.gemini import GeminiClient, GeminiConfig
from extraction.parser import parse_quiz
from extraction.prompts import build_request_for_config


LOGGER = get_logger()


def build_client(settings: AppSettings) -> GeminiClient:
    """Create the Gemini client; raises ConfigurationError for a bad key."""
    return GeminiClient(GeminiConfig.from_settings(settings))


def submit_content(source: SourceContent, config: QuizRequestConfig, client: GeminiClient) -> Quiz:
    """Generate a quiz from already-normalized source content."""
    if isinstance(source, TextContent):
        validate_text_length(source.value)
        source_desc = f"text ({len(source.value)} chars)"
    elif isinstance(source, FilePayload):
        source_desc = f"file {source.file_name} ({source.mime_type}, {source.size_bytes} bytes)"
    else:
        raise ValidationError(
            ValidationError.UNSUPPORTED_TYPE, f"unsupported source content {type(source).__name__}"
        )

    LOGGER.info("Generating %d questions from %s", config.question_count, source_desc)
    request = build_request_for_config(source, config)
    raw = client.generate(request)
    quiz = parse_quiz(raw, config.question_count)
    LOGGER.info("Quiz ready: %d questions (fallback=%s)", len(quiz), quiz.is_fallback)
    return quiz


def generate_quiz_from_text(text: str, config: QuizRequestConfig, client: GeminiClient) -> Quiz:
    return submit_content(extract_from_text(text), config, client)


def generate_quiz_from_upload(
    data: bytes,
    file_name: str,
    mime_type: Optional[str],
    config: QuizRequestConfig,
    client: GeminiClient,
    settings: AppSettings,
) -> Quiz:
    source = extract_from_upload(data, file_name, mime_type, settings=settings)
    return submit_content(source, config, client)


class GenerationState(enum.Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class QuizGenerationSession:
    """Allows one generation request at a time.

    IDLE -> REQUESTING -> SUCCEEDED | FAILED. A submit while REQUESTING raises
    GenerationInProgressError instead of queueing.
    """

    def __init__(self, client: GeminiClient):
        self.client = client
        self.state = GenerationState.IDLE
        self.last_quiz: Optional[Quiz] = None
        self.last_error: Optional[Exception] = None
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self.state is GenerationState.REQUESTING

    def _begin(self) -> None:
        with self._lock:
            if self.state is GenerationState.REQUESTING:
                raise GenerationInProgressError("generation already in progress")
            self.state = GenerationState.REQUESTING
            self.last_error = None

    def _finish(self, quiz: Optional[Quiz], error: Optional[Exception]) -> None:
        with self._lock:
            self.last_quiz = quiz if error is None else self.last_quiz
            self.last_error = error
            self.state = GenerationState.FAILED if error is not None else GenerationState.SUCCEEDED

    def submit(self, source: SourceContent, config: QuizRequestConfig) -> Quiz:
        self._begin()
        try:
            quiz = submit_content(source, config, self.client)
        except QuizGenError as e:
            self._finish(None, e)
            raise
        except Exception as e:
            LOGGER.exception("Unexpected error during quiz generation")
            self._finish(None, e)
            raise
        self._finish(quiz, None)
        return quiz

    def reset(self) -> None:
        with self._lock:
            if self.state is GenerationState.REQUESTING:
                raise GenerationInProgressError("cannot reset while a request is in progress")
            self.state = GenerationState.IDLE
            self.last_quiz = None
            self.last_error = None
