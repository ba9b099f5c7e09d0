"""Result reports: per-question table, CSV, JSON and plain-text exports."""

import json
from datetime import datetime
from typing import Optional

import pandas as pd

from core.models import Quiz
from core.scoring import QuizResult, format_duration, performance_message


def results_dataframe(quiz: Quiz, result: QuizResult) -> pd.DataFrame:
    """One row per question with the selected and correct options."""
    rows = []
    for q, outcome in zip(quiz, result.outcomes):
        rows.append({
            'Question #': outcome.index + 1,
            'Question': q.question,
            'Your Answer': outcome.selected or '(not answered)',
            'Correct Answer': q.option_for_answer() or q.answer,
            'Result': 'Correct' if outcome.is_correct else 'Incorrect',
        })
    return pd.DataFrame(rows, columns=['Question #', 'Question', 'Your Answer', 'Correct Answer', 'Result'])


def report_csv(quiz: Quiz, result: QuizResult) -> str:
    return results_dataframe(quiz, result).to_csv(index=False)


def report_json(
    quiz: Quiz,
    result: QuizResult,
    *,
    student_name: Optional[str] = None,
    course: Optional[str] = None,
) -> str:
    payload = {
        'student': student_name or None,
        'course': course or None,
        'score': result.score,
        'total': result.total,
        'percentage': result.percentage,
        'timeTaken': result.time_taken_s,
        'isFallback': quiz.is_fallback,
        'questions': [
            {
                **q.to_dict(),
                'selected': outcome.selected,
                'isCorrect': outcome.is_correct,
            }
            for q, outcome in zip(quiz, result.outcomes)
        ],
    }
    return json.dumps(payload, indent=2)


def render_text_report(
    quiz: Quiz,
    result: QuizResult,
    *,
    student_name: Optional[str] = None,
    course: Optional[str] = None,
    generated_at: Optional[datetime] = None,
) -> str:
    generated_at = generated_at or datetime.now()
    lines = [
        "QUIZ RESULTS REPORT",
        "=" * 40,
        f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}",
    ]
    if student_name:
        lines.append(f"Name: {student_name}")
    if course:
        lines.append(f"Course: {course}")
    lines += [
        "",
        f"Score: {result.score}/{result.total} ({result.percentage}%)",
        f"Correct: {result.score}  Incorrect: {result.incorrect}",
        f"Time taken: {format_duration(result.time_taken_s)}",
        f"Performance: {performance_message(result.percentage)}",
    ]
    if quiz.is_fallback:
        lines.append("Note: placeholder questions were used because the AI response could not be read.")

    lines += ["", "QUESTION REVIEW", "-" * 40]
    for q, outcome in zip(quiz, result.outcomes):
        mark = "[correct]" if outcome.is_correct else "[incorrect]"
        lines.append(f"{outcome.index + 1}. {q.question} {mark}")
        for opt in q.options:
            lines.append(f"   {opt}")
        lines.append(f"   Your answer: {outcome.selected or '(not answered)'}")
        lines.append(f"   Correct answer: {q.option_for_answer() or q.answer}")
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"
