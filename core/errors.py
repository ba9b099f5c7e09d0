"""Error taxonomy for quiz generation.

Every error carries a ``user_message`` that the UI can show as-is.
"""

from typing import Optional


class QuizGenError(Exception):
    """Base class for all quiz generation errors."""

    default_message = "Failed to generate quiz. Please try again."

    def __init__(self, message: str = "", *, user_message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self._user_message = user_message

    @property
    def user_message(self) -> str:
        return self._user_message or self.default_message


class ValidationError(QuizGenError):
    """Input failed a local precondition (too short, too large, wrong type)."""

    TOO_SHORT = "too short"
    TOO_LARGE = "file too large"
    UNSUPPORTED_TYPE = "unsupported type"
    INVALID_SETTINGS = "invalid settings"

    _MESSAGES = {
        TOO_SHORT: "Please provide at least 10 characters of content.",
        TOO_LARGE: "File size too large. Please upload a smaller file.",
        UNSUPPORTED_TYPE: "Unsupported file format. Please upload a PDF, DOCX, TXT or image file.",
        INVALID_SETTINGS: "Invalid quiz settings.",
    }

    def __init__(self, reason: str, message: str = "", *, user_message: Optional[str] = None):
        self.reason = reason
        super().__init__(message or reason, user_message=user_message or self._MESSAGES.get(reason))


class ExtractionError(QuizGenError):
    """Local parsing of a document produced no usable text."""

    default_message = (
        "The document appears to be empty or unsupported. "
        "Please try another file or paste the content directly."
    )


class ConfigurationError(QuizGenError):
    """API key missing, malformed or rejected by the service."""

    default_message = "API key is not configured. Please check your Gemini API key settings."


class RemoteRequestError(QuizGenError):
    """The generation endpoint rejected the request or could not be reached."""

    BAD_REQUEST = "bad_request"
    RATE_LIMITED = "rate_limited"
    DOCUMENT_REJECTED = "document_rejected"
    BLOCKED = "blocked"
    NETWORK = "network"
    TIMEOUT = "timeout"
    SERVER = "server"

    _MESSAGES = {
        BAD_REQUEST: "Invalid request to Gemini API. Please try with different content.",
        RATE_LIMITED: "API rate limit exceeded. Please wait a moment and try again.",
        DOCUMENT_REJECTED: (
            "Gemini couldn't process the document. "
            "Please try a text file or paste the content directly."
        ),
        BLOCKED: "The AI service declined to process this content. Please try different content.",
        NETWORK: "Network error. Please check your internet connection and try again.",
        TIMEOUT: "The AI service took too long to respond. Please try again.",
        SERVER: "Failed to generate quiz. Please try again.",
    }

    def __init__(self, kind: str, message: str = "", *, status_code: Optional[int] = None):
        self.kind = kind
        self.status_code = status_code
        super().__init__(message or kind, user_message=self._MESSAGES.get(kind))


class ParseError(QuizGenError):
    """The model response could not be coerced into the quiz JSON shape."""


class GenerationInProgressError(QuizGenError):
    """A quiz generation request is already outstanding."""

    default_message = "A quiz is already being generated. Please wait for it to finish."
