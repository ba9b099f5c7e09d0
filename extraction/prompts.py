"""Prompt construction for quiz generation requests."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from core.models import (
    DIFFICULTIES,
    QUIZ_TYPES,
    FilePayload,
    InlineDataPart,
    ModelRequest,
    QuizRequestConfig,
    SourceContent,
    TextContent,
    TextPart,
)


DEFAULT_QUIZ_TYPE = "comprehensive"
DEFAULT_DIFFICULTY = "medium"


RESPONSE_FORMAT = """
RESPONSE FORMAT (JSON only):
{
  "quiz": [
    {
      "question": "Clear question based on the content",
      "options": ["A) Option 1", "B) Option 2", "C) Option 3", "D) Option 4"],
      "answer": "A"
    }
  ]
}

Return ONLY valid JSON. No markdown. No extra text.
"answer" must be the single letter of the correct option.
""".strip()


FILE_PROMPT_TEMPLATE = """
Analyze this document and create {count} multiple-choice questions that test understanding of the key content.

Generate questions that cover:
- Main concepts and ideas
- Important facts and details
- Practical applications
- Relationships between concepts

Create {count} questions with 4 options each (A, B, C, D) and exactly one correct answer.

{response_format}
""".strip()


STRUCTURED_PROMPT_TEMPLATE = """
Create a {count}-question multiple-choice quiz about "{topic}".

QUIZ SPECIFICATIONS:
- Type: {quiz_type} quiz
- Difficulty: {difficulty} level
- Questions should test understanding of the specific content provided
- Focus on key concepts, facts, and applications mentioned
- Make questions challenging but fair

CONTENT TO BASE QUESTIONS ON:
{content}

QUESTION REQUIREMENTS:
- {count} questions total
- 4 options per question (A, B, C, D)
- Only one correct answer per question
- Options should be plausible but distinct
- Questions should cover different aspects of the content
- Use only the content above; do not rely on outside knowledge

{response_format}

Ensure questions are directly based on the provided content and appropriate for {difficulty} difficulty.
""".strip()


BASIC_PROMPT_TEMPLATE = """
Create {count} multiple-choice questions based strictly on the following text. The questions should test comprehension of key concepts, facts, and details.

TEXT:
{content}

Generate {count} questions with 4 options each (A, B, C, D) and exactly one correct answer.

{response_format}
""".strip()


_TOPIC_RE = re.compile(r"^\s*TOPIC:\s*(.+)$", re.IGNORECASE | re.MULTILINE)
_TYPE_RE = re.compile(r"^\s*QUIZ TYPE:\s*(.+)$", re.IGNORECASE | re.MULTILINE)
_DIFFICULTY_RE = re.compile(r"^\s*DIFFICULTY:\s*(.+)$", re.IGNORECASE | re.MULTILINE)
_CONTENT_RE = re.compile(r"^\s*CONTENT:\s*(.*)", re.IGNORECASE | re.MULTILINE | re.DOTALL)


@dataclass(frozen=True)
class StructuredText:
    topic: str
    quiz_type: str
    difficulty: str
    content: str


def _choice(value: Optional[str], allowed, default: str) -> str:
    v = (value or "").strip().lower()
    return v if v in allowed else default


def parse_structured_text(text: str) -> Optional[StructuredText]:
    """Parse TOPIC / QUIZ TYPE / DIFFICULTY / CONTENT markers out of text.

    Returns None unless both a topic and a content block are present.
    """
    topic = _TOPIC_RE.search(text)
    content = _CONTENT_RE.search(text)
    if not topic or not content:
        return None

    quiz_type = _TYPE_RE.search(text)
    difficulty = _DIFFICULTY_RE.search(text)
    return StructuredText(
        topic=topic.group(1).strip(),
        quiz_type=_choice(quiz_type.group(1) if quiz_type else None, QUIZ_TYPES, DEFAULT_QUIZ_TYPE),
        difficulty=_choice(difficulty.group(1) if difficulty else None, DIFFICULTIES, DEFAULT_DIFFICULTY),
        content=content.group(1).strip(),
    )


def compose_structured_text(
    topic: str,
    content: str,
    quiz_type: Optional[str] = None,
    difficulty: Optional[str] = None,
) -> str:
    """Embed topic metadata into pasted text the way the input form does."""
    return (
        f"TOPIC: {topic.strip()}\n"
        f"QUIZ TYPE: {quiz_type or DEFAULT_QUIZ_TYPE}\n"
        f"DIFFICULTY: {difficulty or DEFAULT_DIFFICULTY}\n"
        f"CONTENT:\n{content.strip()}"
    )


def file_prompt(question_count: int) -> str:
    return FILE_PROMPT_TEMPLATE.format(count=question_count, response_format=RESPONSE_FORMAT)


def structured_prompt(data: StructuredText, question_count: int) -> str:
    return STRUCTURED_PROMPT_TEMPLATE.format(
        count=question_count,
        topic=data.topic,
        quiz_type=data.quiz_type,
        difficulty=data.difficulty,
        content=data.content,
        response_format=RESPONSE_FORMAT,
    )


def basic_prompt(text: str, question_count: int) -> str:
    return BASIC_PROMPT_TEMPLATE.format(count=question_count, content=text, response_format=RESPONSE_FORMAT)


def build_request(
    content: SourceContent,
    question_count: int,
    *,
    topic: Optional[str] = None,
    quiz_type: Optional[str] = None,
    difficulty: Optional[str] = None,
) -> ModelRequest:
    """Build the generateContent request for the given source content."""
    if isinstance(content, FilePayload):
        return ModelRequest(parts=(
            TextPart(file_prompt(question_count)),
            InlineDataPart(mime_type=content.mime_type, data=content.base64_data),
        ))

    if isinstance(content, TextContent):
        structured = parse_structured_text(content.value)
        if structured is None and topic and topic.strip():
            structured = StructuredText(
                topic=topic.strip(),
                quiz_type=_choice(quiz_type, QUIZ_TYPES, DEFAULT_QUIZ_TYPE),
                difficulty=_choice(difficulty, DIFFICULTIES, DEFAULT_DIFFICULTY),
                content=content.value,
            )

        if structured is not None:
            prompt = structured_prompt(structured, question_count)
        else:
            prompt = basic_prompt(content.value, question_count)
        return ModelRequest(parts=(TextPart(prompt),))

    raise TypeError(f"Unsupported source content: {type(content).__name__}")


def build_request_for_config(content: SourceContent, config: QuizRequestConfig) -> ModelRequest:
    return build_request(
        content,
        config.question_count,
        topic=config.topic,
        quiz_type=config.quiz_type,
        difficulty=config.difficulty,
    )
