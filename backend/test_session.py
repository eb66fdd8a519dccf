import pytest

from quizcraft.services.quiz.session import (
    STATE_ACTIVE,
    STATE_DONE,
    STATE_ERROR,
    STATE_LOADING,
    QuizSession,
    SessionError,
)


def _question(text, correct=(0,), multiple=False, timer=None):
    return {
        "text": text,
        "options": [{"text": f"opt{i}", "isCorrect": i in correct} for i in range(3)],
        "allowMultiple": multiple,
        "timer": timer,
    }


def _quiz(timer_type="perQuiz", timer=5, questions=None):
    return {
        "title": "Q",
        "timerType": timer_type,
        "timer": timer,
        "questions": questions or [_question("one"), _question("two", correct=(1,))],
    }


class Recorder:
    def __init__(self):
        self.outcomes = []

    def __call__(self, outcome):
        self.outcomes.append(outcome)


# ── Loading ───────────────────────────────────────────────────────────────────

def test_new_session_is_loading():
    assert QuizSession().state == STATE_LOADING


def test_start_activates_with_quiz_timer():
    s = QuizSession.start(_quiz(timer=5))
    assert s.state == STATE_ACTIVE
    assert s.time_left == 5
    assert s.answers == [set(), set()]


def test_quiz_without_questions_is_an_error():
    s = QuizSession.start({"title": "empty", "timerType": "perQuiz", "timer": 10, "questions": []})
    assert s.state == STATE_ERROR
    assert s.error


def test_cannot_load_twice():
    s = QuizSession.start(_quiz())
    with pytest.raises(SessionError):
        s.load(_quiz())


# ── Answers ───────────────────────────────────────────────────────────────────

def test_single_answer_replaces_selection():
    s = QuizSession.start(_quiz())
    assert s.select(0, 1)
    assert s.select(0, 2)
    assert s.answers[0] == {2}


def test_multiple_answer_toggles():
    s = QuizSession.start(_quiz(questions=[_question("m", correct=(0, 2), multiple=True)]))
    s.select(0, 0)
    s.select(0, 2)
    s.select(0, 1)
    s.select(0, 1, checked=False)
    assert s.answers[0] == {0, 2}


def test_out_of_range_selection_rejected():
    s = QuizSession.start(_quiz())
    assert not s.select(0, 7)
    assert not s.select(9, 0)
    assert s.answers == [set(), set()]


# ── Per-quiz timer ────────────────────────────────────────────────────────────

def test_per_quiz_expiry_submits_collected_answers():
    # 2 questions, 5 s: Q1 answered correctly, Q2 left blank
    rec = Recorder()
    s = QuizSession.start(_quiz(timer=5))
    s.select(0, 0)
    for _ in range(4):
        s.tick(rec)
    assert s.state == STATE_ACTIVE and s.time_left == 1
    s.tick(rec)
    assert s.state == STATE_DONE
    assert rec.outcomes == [
        {"score": 1, "total": 2, "answers": [[0], []], "auto_submitted": True}
    ]


def test_timer_and_manual_submit_write_once():
    rec = Recorder()
    s = QuizSession.start(_quiz(timer=2))
    s.elapse(2, rec)
    assert s.submit(rec) == rec.outcomes[0]
    s.tick(rec)
    assert len(rec.outcomes) == 1


def test_manual_submit_then_timer_writes_once():
    rec = Recorder()
    s = QuizSession.start(_quiz(timer=2))
    s.submit(rec)
    s.elapse(10, rec)
    assert len(rec.outcomes) == 1
    assert rec.outcomes[0]["auto_submitted"] is False


def test_no_selection_after_submit():
    s = QuizSession.start(_quiz())
    s.submit()
    assert not s.select(0, 0)


def test_elapse_stops_once_submitted():
    s = QuizSession.start(_quiz(timer=3))
    assert s.elapse(100) == 3
    assert s.state == STATE_DONE


# ── Per-question timer ────────────────────────────────────────────────────────

def test_per_question_uses_own_timer_then_default():
    questions = [_question("a", timer=3), _question("b")]
    s = QuizSession.start(_quiz("perQuestion", timer=7, questions=questions))
    assert s.time_left == 3
    s.elapse(3)
    assert s.current == 1
    assert s.time_left == 7


def test_per_question_expiry_freezes_and_advances_once():
    questions = [_question("a", timer=2), _question("b", timer=2), _question("c", timer=2)]
    s = QuizSession.start(_quiz("perQuestion", timer=10, questions=questions))
    s.select(0, 0)
    s.elapse(2)
    assert s.frozen == [True, False, False]
    assert s.current == 1
    assert not s.select(0, 1)
    assert s.answers[0] == {0}
    s.tick()
    assert s.current == 1


def test_only_running_question_accepts_answers():
    s = QuizSession.start(_quiz("perQuestion", timer=10))
    assert not s.select(1, 1)
    assert s.select(0, 0)


def test_last_question_expiry_submits():
    rec = Recorder()
    questions = [_question("a", timer=2), _question("b", correct=(1,), timer=2)]
    s = QuizSession.start(_quiz("perQuestion", timer=10, questions=questions))
    s.select(0, 0)
    s.elapse(2, rec)
    s.select(1, 1)
    s.elapse(2, rec)
    assert s.state == STATE_DONE
    assert rec.outcomes[0]["score"] == 2
    assert rec.outcomes[0]["auto_submitted"] is True


def test_manual_advance():
    rec = Recorder()
    s = QuizSession.start(_quiz("perQuestion", timer=10))
    s.elapse(4)
    assert s.advance(rec)
    assert s.current == 1 and s.time_left == 10
    assert s.advance(rec)
    assert s.state == STATE_DONE
    assert rec.outcomes[0]["auto_submitted"] is False


def test_advance_not_available_per_quiz():
    s = QuizSession.start(_quiz())
    assert not s.advance()


# ── Failure & storage ─────────────────────────────────────────────────────────

def test_persist_failure_moves_to_error_without_retry():
    calls = []

    def broken(outcome):
        calls.append(outcome)
        raise RuntimeError("store offline")

    s = QuizSession.start(_quiz(timer=1))
    assert s.submit(broken) is None
    assert s.state == STATE_ERROR
    assert "store offline" in s.error
    s.submit(broken)
    s.tick(broken)
    assert len(calls) == 1


def test_snapshot_roundtrip_preserves_behaviour():
    s = QuizSession.start(_quiz("perQuestion", timer=10))
    s.select(0, 2)
    s.elapse(3)
    restored = QuizSession.restore(s.snapshot())
    assert restored.answers == [{2}, set()]
    assert restored.time_left == 7
    restored.elapse(7)
    assert restored.current == 1
    assert restored.frozen == [True, False]
