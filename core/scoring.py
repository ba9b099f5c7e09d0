"""Quiz grading.

Answers are compared by option label letter: the first character of the
selected option against the question's answer letter.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from core.models import Quiz


@dataclass(frozen=True)
class QuestionOutcome:
    index: int
    selected: Optional[str]
    correct: str
    is_correct: bool


@dataclass(frozen=True)
class QuizResult:
    score: int
    total: int
    percentage: int
    time_taken_s: int
    outcomes: Tuple[QuestionOutcome, ...]

    @property
    def incorrect(self) -> int:
        return self.total - self.score


def choice_letter(value: Optional[str]) -> str:
    return value.strip()[:1].upper() if isinstance(value, str) else ""


def grade_quiz(quiz: Quiz, answers: Dict[int, str], time_taken_s: int = 0) -> QuizResult:
    """Grade ``answers`` (question index -> selected option) against ``quiz``."""
    outcomes = []
    score = 0
    for i, q in enumerate(quiz):
        selected = answers.get(i)
        correct = choice_letter(q.answer)
        is_correct = bool(selected) and choice_letter(selected) == correct
        if is_correct:
            score += 1
        outcomes.append(QuestionOutcome(index=i, selected=selected, correct=correct, is_correct=is_correct))

    total = len(quiz)
    percentage = round(score / total * 100) if total else 0
    return QuizResult(
        score=score,
        total=total,
        percentage=percentage,
        time_taken_s=int(time_taken_s),
        outcomes=tuple(outcomes),
    )


def performance_message(percentage: int) -> str:
    if percentage >= 90:
        return "Outstanding!"
    if percentage >= 80:
        return "Excellent!"
    if percentage >= 70:
        return "Great job!"
    if percentage >= 60:
        return "Good work!"
    if percentage >= 50:
        return "Not bad!"
    return "Keep practicing!"


def format_duration(seconds: int) -> str:
    mins, secs = divmod(max(int(seconds), 0), 60)
    return f"{mins:02d}:{secs:02d}"
