"""Tests for parsing and repairing model responses."""
import json
import time

import pytest

from core.errors import ParseError
from extraction.parser import (
    find_json_object,
    generate_fallback_quiz,
    normalize_answer,
    normalize_options,
    parse_quiz,
    strip_code_fences,
)


FRANCE_REPLY = (
    '{"quiz":[{"question":"What is the capital of France?",'
    '"options":["A) London","B) Paris","C) Berlin","D) Madrid"],"answer":"B"}]}'
)


def _reply(n):
    return json.dumps({"quiz": [
        {"question": f"Question number {i}?", "options": ["A) w", "B) x", "C) y", "D) z"], "answer": "C"}
        for i in range(n)
    ]})


def test_france_scenario():
    quiz = parse_quiz(FRANCE_REPLY, 1)
    assert len(quiz) == 1
    assert not quiz.is_fallback
    q = quiz[0]
    assert q.question == "What is the capital of France?"
    assert q.options == ("A) London", "B) Paris", "C) Berlin", "D) Madrid")
    assert q.answer == "B"
    assert q.option_for_answer() == "B) Paris"


def test_fenced_reply_with_commentary():
    raw = "Here is your quiz:\n```json\n" + FRANCE_REPLY + "\n```\nGood luck!"
    quiz = parse_quiz(raw, 5)
    assert not quiz.is_fallback
    assert len(quiz) == 1
    assert quiz[0].answer == "B"


def test_commentary_containing_braces_is_skipped():
    raw = "Note {this is not json} and then " + FRANCE_REPLY
    assert find_json_object(raw)["quiz"][0]["answer"] == "B"


def test_braces_inside_strings_do_not_confuse_the_scan():
    raw = 'prefix {"quiz": [{"question": "Which set is {1, 2}?", "options": [], "answer": "A"}]} suffix'
    assert find_json_object(raw)["quiz"][0]["question"] == "Which set is {1, 2}?"


def test_strip_code_fences():
    assert strip_code_fences("```json\n{}\n```") == "{}"
    assert strip_code_fences("```\n{}\n```") == "{}"
    assert strip_code_fences('```json{"a": 1}```') == '{"a": 1}'


def test_fences_inside_string_values_are_kept():
    raw = (
        '```json\n{"quiz": [{"question": "What does ```python start in Markdown?",'
        ' "options": ["A) A code block", "B) A table"], "answer": "A"}]}\n```'
    )
    assert parse_quiz(raw, 5)[0].question == "What does ```python start in Markdown?"


def test_find_json_object_raises_parse_error():
    with pytest.raises(ParseError):
        find_json_object("no json here at all")
    with pytest.raises(ParseError):
        find_json_object('{"quiz": [')


def test_truncates_to_requested_count():
    quiz = parse_quiz(_reply(8), 5)
    assert len(quiz) == 5


def test_never_pads_short_responses():
    quiz = parse_quiz(_reply(3), 10)
    assert len(quiz) == 3
    assert not quiz.is_fallback


def test_malformed_json_yields_fallback_within_ceiling():
    quiz = parse_quiz("Sorry, I cannot help with that {oops", 7)
    assert quiz.is_fallback
    assert len(quiz) == 7
    assert all(q.answer == "D" for q in quiz)


def test_missing_quiz_key_and_empty_quiz_fall_back():
    assert parse_quiz('{"questions": []}', 5).is_fallback
    assert parse_quiz('{"quiz": []}', 5).is_fallback


def test_fallback_generator_respects_count():
    assert len(generate_fallback_quiz(0)) == 0
    assert len(generate_fallback_quiz(12)) == 12


def test_missing_fields_are_backfilled():
    quiz = parse_quiz('{"quiz": [{}, "not an object", {"question": "Only a question?"}]}', 5)
    assert len(quiz) == 3
    assert quiz[0].question == "Question 1 about the content"
    assert quiz[1].question == "Question 2 about the content"
    assert quiz[0].options == ("A) Option A", "B) Option B", "C) Option C", "D) Option D")
    assert quiz[2].question == "Only a question?"
    assert all(q.answer == "A" for q in quiz)


def test_options_relabelled_and_padded():
    assert normalize_options(["London", "B. Paris", "(C) Berlin"]) == (
        "A) London", "B) Paris", "C) Berlin", "D) Option D",
    )
    assert normalize_options({"B": "Paris", "A": "London", "C": "Rome", "D": "Oslo", "E": "Extra"}) == (
        "A) London", "B) Paris", "C) Rome", "D) Oslo",
    )


@pytest.mark.parametrize("raw, expected", [
    ("B", "B"),
    ("b", "B"),
    ("B) Paris", "B"),
    ("Option C", "C"),
    ("(D)", "D"),
    ("Paris", "B"),
    ("", "A"),
    (None, "A"),
    (3, "A"),
    ("Z", "A"),
    ("Answer unknown", "A"),
])
def test_answer_repaired_to_single_letter(raw, expected):
    options = ("A) London", "B) Paris", "C) Berlin", "D) Madrid")
    assert normalize_answer(raw, options) == expected


def test_every_answer_matches_exactly_one_option():
    raw = json.dumps({"quiz": [
        {"question": "q1", "options": ["x", "y"], "answer": "Banana"},
        {"question": "q2", "options": "not a list", "answer": "BB"},
        {"question": "q3", "options": ["A) a", "B) b", "C) c", "D) d"], "correctAnswer": "d"},
    ]})
    for q in parse_quiz(raw, 5):
        assert len(q.answer) == 1
        assert q.answer in "ABCD"
        assert sum(1 for opt in q.options if opt[0] == q.answer) == 1
    assert parse_quiz(raw, 5)[2].answer == "D"


def test_parsing_is_idempotent():
    raw = "```json\n" + _reply(4) + "\n```"
    assert parse_quiz(raw, 4) == parse_quiz(raw, 4)


def test_unbalanced_reply_is_scanned_quickly():
    started = time.monotonic()
    quiz = parse_quiz("{" * 20000, 5)
    assert time.monotonic() - started < 1.0
    assert quiz.is_fallback


def test_reordered_labels_keep_the_answer_on_its_option():
    raw = json.dumps({"quiz": [{
        "question": "What is the capital of France?",
        "options": ["B) Paris", "A) London", "C) Berlin", "D) Madrid"],
        "answer": "B",
    }]})
    question = parse_quiz(raw, 5)[0]
    assert question.options == ("A) Paris", "B) London", "C) Berlin", "D) Madrid")
    assert question.option_for_answer() == "A) Paris"


def test_blank_option_does_not_shift_the_answer():
    raw = json.dumps({"quiz": [{
        "question": "What is the capital of France?",
        "options": ["A) London", "", "C) Paris", "D) Madrid"],
        "answer": "C",
    }]})
    question = parse_quiz(raw, 5)[0]
    assert question.options == ("A) London", "B) Paris", "C) Madrid", "D) Option D")
    assert question.option_for_answer() == "B) Paris"


def test_blank_unlabelled_option_does_not_shift_the_answer():
    raw = json.dumps({"quiz": [{
        "question": "What is the capital of France?",
        "options": ["London", None, "Paris", "Madrid"],
        "answer": "C",
    }]})
    assert parse_quiz(raw, 5)[0].option_for_answer() == "B) Paris"
