"""Data model shared by the extraction, prompt, client and parser stages."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from core.errors import ValidationError


QUIZ_TYPES = ("comprehensive", "conceptual", "detailed", "application")
DIFFICULTIES = ("easy", "medium", "hard", "expert")

MIN_QUESTIONS = 5
MAX_QUESTIONS = 100

OPTION_LABELS = ("A", "B", "C", "D")


@dataclass(frozen=True)
class TextContent:
    """Text extracted locally or pasted by the user."""

    value: str
    kind: str = field(default="text", init=False)


@dataclass(frozen=True)
class FilePayload:
    """Raw file bytes shipped to the model for remote document understanding."""

    data: bytes
    mime_type: str
    file_name: str
    size_bytes: int
    is_image: bool = False
    kind: str = field(default="file", init=False)

    @property
    def base64_data(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


SourceContent = Union[TextContent, FilePayload]


@dataclass(frozen=True)
class QuizRequestConfig:
    question_count: int
    topic: Optional[str] = None
    quiz_type: Optional[str] = None
    difficulty: Optional[str] = None

    def __post_init__(self) -> None:
        count = self.question_count
        if isinstance(count, bool) or not isinstance(count, int):
            raise ValidationError(
                ValidationError.INVALID_SETTINGS,
                f"question_count must be an integer, got {count!r}",
                user_message="Number of questions must be a whole number.",
            )
        if not MIN_QUESTIONS <= count <= MAX_QUESTIONS:
            raise ValidationError(
                ValidationError.INVALID_SETTINGS,
                f"question_count {count} outside [{MIN_QUESTIONS}, {MAX_QUESTIONS}]",
                user_message=f"Number of questions must be between {MIN_QUESTIONS} and {MAX_QUESTIONS}.",
            )
        if self.quiz_type is not None and self.quiz_type not in QUIZ_TYPES:
            raise ValidationError(
                ValidationError.INVALID_SETTINGS,
                f"unknown quiz_type {self.quiz_type!r}",
                user_message=f"Quiz type must be one of: {', '.join(QUIZ_TYPES)}.",
            )
        if self.difficulty is not None and self.difficulty not in DIFFICULTIES:
            raise ValidationError(
                ValidationError.INVALID_SETTINGS,
                f"unknown difficulty {self.difficulty!r}",
                user_message=f"Difficulty must be one of: {', '.join(DIFFICULTIES)}.",
            )


@dataclass(frozen=True)
class TextPart:
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text}


@dataclass(frozen=True)
class InlineDataPart:
    mime_type: str
    data: str  # base64

    def to_dict(self) -> Dict[str, Any]:
        return {"inline_data": {"mime_type": self.mime_type, "data": self.data}}


Part = Union[TextPart, InlineDataPart]


@dataclass(frozen=True)
class ModelRequest:
    """One generateContent request: an instruction plus optional inline file."""

    parts: Tuple[Part, ...]

    @property
    def has_inline_data(self) -> bool:
        return any(isinstance(p, InlineDataPart) for p in self.parts)

    @property
    def prompt_text(self) -> str:
        return "\n".join(p.text for p in self.parts if isinstance(p, TextPart))

    def to_contents(self) -> List[Dict[str, Any]]:
        return [{"parts": [p.to_dict() for p in self.parts]}]


@dataclass(frozen=True)
class QuizQuestion:
    question: str
    options: Tuple[str, ...]
    answer: str

    def option_for_answer(self) -> Optional[str]:
        for opt in self.options:
            if opt[:1].upper() == self.answer:
                return opt
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {"question": self.question, "options": list(self.options), "answer": self.answer}


@dataclass(frozen=True)
class Quiz:
    """Ordered questions; ``is_fallback`` marks a synthetic placeholder quiz."""

    questions: Tuple[QuizQuestion, ...]
    is_fallback: bool = False

    def __len__(self) -> int:
        return len(self.questions)

    def __iter__(self) -> Iterator[QuizQuestion]:
        return iter(self.questions)

    def __getitem__(self, index: int) -> QuizQuestion:
        return self.questions[index]

    def to_dict(self) -> Dict[str, Any]:
        return {"quiz": [q.to_dict() for q in self.questions], "is_fallback": self.is_fallback}
