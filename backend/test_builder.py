import random

import pytest

from quizcraft.config import Config
from quizcraft.services.quiz.builder import (
    MAX_OPTIONS,
    MIN_OPTIONS,
    MIN_TIMER_SECONDS,
    QuizDraft,
    QuizValidationError,
    validate_quiz,
)


def _n_correct(question):
    return sum(1 for opt in question["options"] if opt["isCorrect"])


def _assert_single_answer_invariant(draft):
    for q in draft.questions:
        assert MIN_OPTIONS <= len(q["options"]) <= MAX_OPTIONS
        if not q["allowMultiple"]:
            assert _n_correct(q) == 1


# ── QuizDraft ─────────────────────────────────────────────────────────────────

def test_new_draft_has_one_valid_question():
    draft = QuizDraft()
    assert len(draft.questions) == 1
    _assert_single_answer_invariant(draft)


def test_set_correct_single_moves_the_answer():
    draft = QuizDraft()
    draft.set_correct(0, 2)
    assert [o["isCorrect"] for o in draft.questions[0]["options"]] == [False, False, True]


def test_unchecking_single_answer_is_noop():
    draft = QuizDraft()
    draft.set_correct(0, 0, checked=False)
    assert _n_correct(draft.questions[0]) == 1


def test_multiple_allows_several_correct():
    draft = QuizDraft()
    draft.set_allow_multiple(0, True)
    draft.set_correct(0, 1)
    draft.set_correct(0, 2)
    assert _n_correct(draft.questions[0]) == 3


def test_switching_back_to_single_keeps_first_correct():
    draft = QuizDraft()
    draft.set_allow_multiple(0, True)
    draft.set_correct(0, 0, checked=False)
    draft.set_correct(0, 1)
    draft.set_correct(0, 2)
    draft.set_allow_multiple(0, False)
    assert [o["isCorrect"] for o in draft.questions[0]["options"]] == [False, True, False]


def test_switching_to_single_with_nothing_correct_marks_first():
    draft = QuizDraft()
    draft.set_allow_multiple(0, True)
    draft.set_correct(0, 0, checked=False)
    draft.set_allow_multiple(0, False)
    assert draft.questions[0]["options"][0]["isCorrect"]


def test_option_bounds():
    draft = QuizDraft()
    assert not draft.remove_option(0, 0)
    assert draft.add_option(0)
    assert draft.add_option(0)
    assert not draft.add_option(0)
    assert len(draft.questions[0]["options"]) == MAX_OPTIONS


def test_removing_correct_option_reassigns_answer():
    draft = QuizDraft()
    draft.add_option(0)
    draft.set_correct(0, 3)
    assert draft.remove_option(0, 3)
    assert _n_correct(draft.questions[0]) == 1


def test_cannot_remove_last_question():
    draft = QuizDraft()
    assert not draft.remove_question(0)
    draft.add_question()
    assert draft.remove_question(0)
    assert len(draft.questions) == 1


def test_unknown_timer_type_rejected():
    with pytest.raises(QuizValidationError):
        QuizDraft().set_details(timer_type="perMinute")


def test_from_document_repairs_single_answer_questions():
    doc = {
        "title": "t",
        "timerType": "perQuiz",
        "timer": 60,
        "questions": [
            {"text": "q", "options": [{"text": "a", "isCorrect": True},
                                      {"text": "b", "isCorrect": True},
                                      {"text": "c", "isCorrect": False}]},
        ],
    }
    draft = QuizDraft.from_document(doc)
    _assert_single_answer_invariant(draft)
    assert draft.questions[0]["options"][0]["isCorrect"]


def test_random_edit_sequences_keep_single_answer_invariant():
    rng = random.Random(1234)
    for _ in range(50):
        draft = QuizDraft()
        for _ in range(60):
            q = rng.randrange(len(draft.questions))
            o = rng.randrange(len(draft.questions[q]["options"]))
            op = rng.choice(
                ["add_q", "rm_q", "add_o", "rm_o", "correct", "uncorrect", "multi", "single"]
            )
            if op == "add_q":
                draft.add_question()
            elif op == "rm_q":
                draft.remove_question(q)
            elif op == "add_o":
                draft.add_option(q)
            elif op == "rm_o":
                draft.remove_option(q, o)
            elif op == "correct":
                draft.set_correct(q, o, True)
            elif op == "uncorrect":
                draft.set_correct(q, o, False)
            elif op == "multi":
                draft.set_allow_multiple(q, True)
            else:
                draft.set_allow_multiple(q, False)
            _assert_single_answer_invariant(draft)


# ── validate_quiz ─────────────────────────────────────────────────────────────

def test_validate_normalises(quiz_doc):
    quiz_doc["title"] = "  Capitals  "
    quiz_doc["timer"] = "90"
    doc = validate_quiz(quiz_doc)
    assert doc["title"] == "Capitals"
    assert doc["timer"] == 90


@pytest.mark.parametrize(
    "mutate, message",
    [
        (lambda d: d.update(title=" "), "title is required"),
        (lambda d: d.update(timerType="perDay"), "timerType"),
        (lambda d: d.update(timer=5), "at least 10 seconds"),
        (lambda d: d.update(timer="soon"), "whole number"),
        (lambda d: d.update(timer=float("inf")), "whole number"),
        (lambda d: d.update(timer=float("nan")), "whole number"),
        (lambda d: d.update(timer=10**9), "at most"),
        (lambda d: d.update(timer=12.5), "whole number"),
        (lambda d: d.update(questions=[]), "at least one question"),
        (lambda d: d["questions"][0].update(text=""), "question 1: text is required"),
        (lambda d: d["questions"][0]["options"].pop(), "between 3 and 5 options"),
        (lambda d: d["questions"][0]["options"][1].update(isCorrect=True), "exactly one"),
        (lambda d: d["questions"][1]["options"][0].update(isCorrect=False)
         or d["questions"][1]["options"][2].update(isCorrect=False), "at least one correct"),
        (lambda d: d["questions"][1]["options"][3].update(text="  "), "option 4 text"),
    ],
)
def test_validate_rejects(quiz_doc, mutate, message):
    mutate(quiz_doc)
    with pytest.raises(QuizValidationError, match=message):
        validate_quiz(quiz_doc)


def test_validate_per_question_timer(quiz_doc):
    quiz_doc["timerType"] = "perQuestion"
    quiz_doc["questions"][0]["timer"] = 3
    with pytest.raises(QuizValidationError, match="question 1: timer"):
        validate_quiz(quiz_doc)
    quiz_doc["questions"][0]["timer"] = 15
    assert validate_quiz(quiz_doc)["questions"][0]["timer"] == 15


def test_draft_document_validates_once_filled():
    draft = QuizDraft(title="Filled", timer=60)
    draft.set_question_text(0, "2 + 2?")
    for i, text in enumerate(["4", "5", "22"]):
        draft.set_option_text(0, i, text)
    doc = validate_quiz(draft.to_document())
    assert doc["questions"][0]["options"][0]["isCorrect"]


def test_unusable_question_timer_dropped_under_per_quiz(quiz_doc):
    quiz_doc["questions"][0]["timer"] = float("inf")
    quiz_doc["questions"][1]["timer"] = -4
    doc = validate_quiz(quiz_doc)
    assert [q["timer"] for q in doc["questions"]] == [None, None]


def test_timer_defaults_come_from_config():
    draft = QuizDraft()
    assert draft.timer == Config.DEFAULT_QUIZ_TIMER
    assert draft.questions[0]["timer"] == Config.DEFAULT_QUESTION_TIMER
    assert MIN_TIMER_SECONDS == Config.MIN_TIMER_SECONDS
