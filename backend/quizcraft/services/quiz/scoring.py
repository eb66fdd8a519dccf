"""
Quiz scoring.

A question counts toward the score iff the set of selected option indexes
equals the set of indexes marked ``isCorrect``: same members, order and
duplicates irrelevant. Selecting a superset or subset of the correct
options scores nothing for that question.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Set, Tuple


def correct_indexes(question: dict) -> Set[int]:
    return {i for i, opt in enumerate(question.get("options", [])) if opt.get("isCorrect")}


def is_question_correct(question: dict, selected: Iterable[int]) -> bool:
    return set(selected) == correct_indexes(question)


def score_answers(
    questions: Sequence[dict],
    answers: Sequence[Iterable[int]],
) -> Tuple[int, int]:
    """
    Return ``(score, total)`` for *answers* against *questions*.

    Missing trailing answers count as empty selections, so an unanswered
    question never scores (every saved question has at least one correct
    option).
    """
    score = 0
    for idx, question in enumerate(questions):
        selected = answers[idx] if idx < len(answers) else ()
        if is_question_correct(question, selected):
            score += 1
    return score, len(questions)


def review(questions: Sequence[dict], answers: Sequence[Iterable[int]]) -> List[dict]:
    """Per-question breakdown used by the result view."""
    rows = []
    for idx, question in enumerate(questions):
        selected = sorted(set(answers[idx])) if idx < len(answers) else []
        correct = sorted(correct_indexes(question))
        rows.append(
            {
                "index":          idx,
                "text":           question.get("text", ""),
                "options":        [opt.get("text", "") for opt in question.get("options", [])],
                "allow_multiple": bool(question.get("allowMultiple")),
                "correct":        correct,
                "selected":       selected,
                "is_correct":     selected == correct,
            }
        )
    return rows
