"""Parse and repair the model's quiz JSON.

A response that cannot be parsed never fails the request: the caller gets a
placeholder quiz flagged with ``is_fallback`` and the failure is logged.
"""

from __future__ import annotations

import json
import random
import re
from typing import Any, Dict, List, Optional, Tuple

from core.errors import ParseError
from core.logging_utils import get_logger, preview_text
from core.models import OPTION_LABELS, Quiz, QuizQuestion


LOGGER = get_logger()

FALLBACK_TOPICS = [
    "Artificial Intelligence",
    "Machine Learning",
    "Web Development",
    "Data Science",
    "Computer Programming",
]

# "A) text", "A. text", "(A) text", "A: text", "A - text"
_LABEL_PREFIX_RE = re.compile(r"^\s*\(?([A-Da-d])\s*[).:\-]\s*")
_ANSWER_RE = re.compile(r"^\s*(?:option\s+)?\(?([A-Da-d])(?:\s*[).:\-]|\s*$)", re.IGNORECASE)
_FENCE_LINE_RE = re.compile(r"^[ \t]*```[A-Za-z]*[ \t]*$", re.MULTILINE)
_LEADING_FENCE_RE = re.compile(r"^```(?:json)?", re.IGNORECASE)
_TRAILING_FENCE_RE = re.compile(r"```$")

# Balanced spans tried before giving up on the scan
MAX_SPAN_ATTEMPTS = 50


def strip_code_fences(raw: str) -> str:
    """Drop markdown fences that wrap the reply or sit on their own line."""
    text = _FENCE_LINE_RE.sub("", raw or "").strip()
    text = _LEADING_FENCE_RE.sub("", text)
    return _TRAILING_FENCE_RE.sub("", text).strip()


def _balanced_spans(text: str) -> List[Tuple[int, int]]:
    """Return (start, end) of every matched ``{...}`` pair, ordered by start.

    Single pass with a stack. Quotes only open strings inside braces.
    """
    spans = []
    stack: List[int] = []
    in_string = False
    escaped = False
    for i, c in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif c == "\\":
                escaped = True
            elif c == '"':
                in_string = False
        elif c == '"':
            in_string = bool(stack)
        elif c == "{":
            stack.append(i)
        elif c == "}" and stack:
            spans.append((stack.pop(), i + 1))
    spans.sort()
    return spans


def find_json_object(text: str) -> dict:
    """Return the first JSON object embedded in free text.

    Raises:
        ParseError: no parseable object was found.
    """
    for start, end in _balanced_spans(text)[:MAX_SPAN_ATTEMPTS]:
        try:
            data = json.loads(text[start:end])
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data

    first, last = text.find("{"), text.rfind("}")
    if first != -1 and last > first:
        try:
            data = json.loads(text[first:last + 1])
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid JSON in model response: {e}") from e
        if isinstance(data, dict):
            return data

    raise ParseError("No JSON object found in model response")


def load_quiz_payload(raw: str) -> List[Any]:
    data = find_json_object(strip_code_fences(raw))
    items = data.get("quiz")
    if not isinstance(items, list):
        raise ParseError("Model response JSON has no 'quiz' list")
    return items


def _labelled_options(options: Any) -> List[Tuple[str, str]]:
    """Pair each non-blank option with the letter the model used for it.

    The letter is the option's own label prefix when it has one, otherwise
    its mapping key or its position in the original list.
    """
    if isinstance(options, dict):
        entries = sorted(((str(k).strip().upper(), v) for k, v in options.items()), key=lambda kv: kv[0])
    elif isinstance(options, list):
        entries = [
            (OPTION_LABELS[i] if i < len(OPTION_LABELS) else "", o) for i, o in enumerate(options)
        ]
    else:
        return []

    labelled = []
    for key, value in entries:
        if value is None or not str(value).strip():
            continue
        text = str(value)
        match = _LABEL_PREFIX_RE.match(text)
        labelled.append((match.group(1).upper() if match else key, text))
    return labelled


def _repair_options(options: Any) -> Tuple[Tuple[str, ...], Dict[str, str]]:
    """Relabel options positionally and map each original letter to its new one."""
    labelled = _labelled_options(options)[:len(OPTION_LABELS)]
    normalized = []
    relabel: Dict[str, str] = {}
    for label, (original, text) in zip(OPTION_LABELS, labelled):
        body = _LABEL_PREFIX_RE.sub("", text, count=1).strip() or f"Option {label}"
        normalized.append(f"{label}) {body}")
        if original:
            relabel.setdefault(original, label)
    for label in OPTION_LABELS[len(normalized):]:
        normalized.append(f"{label}) Option {label}")
    return tuple(normalized), relabel


def normalize_options(options: Any) -> Tuple[str, ...]:
    """Relabel options positionally as "A) ..." to "D) ...", padding to four."""
    return _repair_options(options)[0]


def normalize_answer(answer: Any, options: Tuple[str, ...], relabel: Optional[Dict[str, str]] = None) -> str:
    """Reduce the model's answer field to a single option letter (default "A").

    ``relabel`` translates the model's letters to the repaired option labels.
    """
    if not isinstance(answer, str) or not answer.strip():
        return OPTION_LABELS[0]
    s = answer.strip()

    match = _ANSWER_RE.match(s)
    if match:
        letter = match.group(1).upper()
        return (relabel or {}).get(letter, letter)

    # Full option text, with or without its label
    body = _LABEL_PREFIX_RE.sub("", s, count=1).strip().lower()
    for opt in options:
        if _LABEL_PREFIX_RE.sub("", opt, count=1).strip().lower() == body:
            return opt[0]

    return OPTION_LABELS[0]


def normalize_question(item: Any, index: int) -> QuizQuestion:
    """Backfill missing fields so every record is structurally complete."""
    if not isinstance(item, dict):
        item = {}

    question = item.get("question")
    if not isinstance(question, str) or not question.strip():
        question = f"Question {index + 1} about the content"

    options, relabel = _repair_options(item.get("options"))
    answer = item.get("answer")
    if answer is None:
        answer = item.get("correctAnswer")
    return QuizQuestion(
        question=question.strip(),
        options=options,
        answer=normalize_answer(answer, options, relabel),
    )


def generate_fallback_quiz(question_count: int) -> Quiz:
    """Obviously-placeholder questions used when the response is unusable."""
    topic = random.choice(FALLBACK_TOPICS)
    questions = tuple(
        QuizQuestion(
            question=f"Question {i + 1}: What is a key aspect of {topic}?",
            options=(
                "A) Understanding algorithms",
                "B) Data analysis techniques",
                "C) Problem-solving methods",
                "D) All of the above",
            ),
            answer="D",
        )
        for i in range(max(question_count, 0))
    )
    return Quiz(questions=questions, is_fallback=True)


def parse_quiz(raw: str, question_count: int) -> Quiz:
    """Turn raw model text into a quiz of at most ``question_count`` questions."""
    try:
        items = load_quiz_payload(raw)
        if not items:
            raise ParseError("Model response contained an empty quiz")
    except ParseError as e:
        LOGGER.warning("Could not parse quiz response (%s). Raw response: %s", e, preview_text(raw))
        return generate_fallback_quiz(question_count)

    questions = [normalize_question(item, i) for i, item in enumerate(items[:question_count])]
    if len(items) < question_count:
        LOGGER.info("Model returned %d of %d requested questions", len(items), question_count)
    return Quiz(questions=tuple(questions))
