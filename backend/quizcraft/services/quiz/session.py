"""
Quiz-taking state machine.

    loading ──start──▶ active ──submit / timer──▶ submitting ──▶ done
       │                                              │
       └──────────── error ◀──────── persist failed ──┘

Timer policies
--------------
perQuiz      one countdown for the whole attempt; reaching 0 submits with
             whatever answers have been collected.
perQuestion  a countdown per question (the question's own ``timer``, falling
             back to the quiz default). Reaching 0 freezes the current
             question and moves to the next one, resetting the countdown;
             expiry on the last question submits.

``tick()`` is one second of wall-clock time. Nothing in here reads a clock:
the caller decides how many ticks have elapsed (see services/quiz/attempts.py),
which keeps the machine deterministic and easy to drive from tests.

Submission is guarded by ``submitted``: whichever of the manual submit and
the timer gets there first wins, the other is a no-op, so one attempt can
never produce two results.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Set

from quizcraft.db.models.quiz import TIMER_PER_QUESTION, TIMER_PER_QUIZ
from quizcraft.services.quiz.scoring import score_answers

log = logging.getLogger(__name__)

STATE_LOADING = "loading"
STATE_ACTIVE = "active"
STATE_SUBMITTING = "submitting"
STATE_DONE = "done"
STATE_ERROR = "error"
TERMINAL_STATES = (STATE_DONE, STATE_ERROR)

Persist = Callable[[dict], None]


class SessionError(Exception):
    """Raised for actions that make no sense in the session's current state."""


class QuizSession:
    def __init__(self):
        self.state: str = STATE_LOADING
        self.timer_type: str = TIMER_PER_QUIZ
        self.timer: int = 0
        self.questions: List[dict] = []
        self.answers: List[Set[int]] = []
        self.frozen: List[bool] = []
        self.current: int = 0
        self.time_left: int = 0
        self.submitted: bool = False
        self.auto_submitted: bool = False
        self.score: Optional[int] = None
        self.total: Optional[int] = None
        self.error: Optional[str] = None

    # ── Loading ──────────────────────────────────────────────────────────────

    @classmethod
    def start(cls, quiz_doc: dict) -> "QuizSession":
        session = cls()
        session.load(quiz_doc)
        return session

    def load(self, quiz_doc: dict) -> None:
        if self.state != STATE_LOADING:
            raise SessionError("session is already loaded")

        questions = list(quiz_doc.get("questions") or [])
        if not questions:
            self.state = STATE_ERROR
            self.error = "This quiz has no questions."
            return

        self.timer_type = quiz_doc.get("timerType") or TIMER_PER_QUIZ
        self.timer = int(quiz_doc.get("timer") or 0)
        self.questions = questions
        self.answers = [set() for _ in questions]
        self.frozen = [False] * len(questions)
        self.current = 0
        self.time_left = self.countdown_for(0)
        self.state = STATE_ACTIVE

    # ── Introspection ────────────────────────────────────────────────────────

    @property
    def per_question(self) -> bool:
        return self.timer_type == TIMER_PER_QUESTION

    @property
    def is_active(self) -> bool:
        return self.state == STATE_ACTIVE and not self.submitted

    def countdown_for(self, q_idx: int) -> int:
        """Seconds on the clock when *q_idx* becomes the running question."""
        if not self.per_question:
            return self.timer
        own = self.questions[q_idx].get("timer")
        return int(own) if own else self.timer

    def can_select(self, q_idx: int) -> bool:
        if not self.is_active or not 0 <= q_idx < len(self.questions):
            return False
        if self.frozen[q_idx]:
            return False
        return not self.per_question or q_idx == self.current

    # ── Answers ──────────────────────────────────────────────────────────────

    def select(self, q_idx: int, o_idx: int, checked: bool = True) -> bool:
        """
        Record a selection. Returns False (and changes nothing) when the
        question is not open for answers or the option does not exist.
        """
        if not self.can_select(q_idx):
            return False
        question = self.questions[q_idx]
        if not 0 <= o_idx < len(question.get("options", [])):
            return False

        if question.get("allowMultiple"):
            if checked:
                self.answers[q_idx].add(o_idx)
            else:
                self.answers[q_idx].discard(o_idx)
        elif checked:
            self.answers[q_idx] = {o_idx}
        else:
            self.answers[q_idx].discard(o_idx)
        return True

    # ── Timer ────────────────────────────────────────────────────────────────

    def tick(self, persist: Optional[Persist] = None) -> None:
        """Advance the countdown by one second."""
        if not self.is_active:
            return
        self.time_left = max(0, self.time_left - 1)
        if self.time_left > 0:
            return
        if self.per_question:
            log.debug("question %d timed out", self.current)
            self._close_current(persist, auto=True)
        else:
            self.submit(persist, auto=True)

    def elapse(self, seconds: int, persist: Optional[Persist] = None) -> int:
        """Apply *seconds* ticks; stops early once the session leaves ``active``."""
        applied = 0
        for _ in range(max(0, int(seconds))):
            if not self.is_active:
                break
            self.tick(persist)
            applied += 1
        return applied

    def advance(self, persist: Optional[Persist] = None) -> bool:
        """Manual "next question" under a per-question policy."""
        if not self.is_active or not self.per_question:
            return False
        self._close_current(persist, auto=False)
        return True

    def _close_current(self, persist: Optional[Persist], auto: bool) -> None:
        self.frozen[self.current] = True
        if self.current >= len(self.questions) - 1:
            self.submit(persist, auto=auto)
            return
        self.current += 1
        self.time_left = self.countdown_for(self.current)

    # ── Submission ───────────────────────────────────────────────────────────

    def submit(self, persist: Optional[Persist] = None, auto: bool = False) -> Optional[dict]:
        """
        Score the attempt and hand the outcome to *persist*.

        Only the first call does anything; later calls return the existing
        outcome (or None when the first one failed). A failing *persist*
        moves the session to ``error`` and is not retried.
        """
        if self.submitted:
            return self.outcome() if self.state == STATE_DONE else None
        if self.state != STATE_ACTIVE:
            return None

        self.submitted = True
        self.auto_submitted = auto
        self.state = STATE_SUBMITTING
        self.frozen = [True] * len(self.questions)
        self.score, self.total = score_answers(self.questions, self.answers)
        outcome = self.outcome()

        if persist is not None:
            try:
                persist(outcome)
            except Exception as exc:
                log.warning("quiz submission failed: %s", exc)
                self.state = STATE_ERROR
                self.error = f"Failed to submit quiz: {exc}"
                return None

        self.state = STATE_DONE
        return outcome

    def outcome(self) -> dict:
        return {
            "score": self.score,
            "total": self.total,
            "answers": [sorted(selected) for selected in self.answers],
            "auto_submitted": self.auto_submitted,
        }

    # ── Storage ──────────────────────────────────────────────────────────────

    def snapshot(self) -> dict:
        return {
            "state": self.state,
            "timerType": self.timer_type,
            "timer": self.timer,
            "questions": self.questions,
            "answers": [sorted(selected) for selected in self.answers],
            "frozen": list(self.frozen),
            "current": self.current,
            "timeLeft": self.time_left,
            "submitted": self.submitted,
            "autoSubmitted": self.auto_submitted,
            "score": self.score,
            "total": self.total,
            "error": self.error,
        }

    @classmethod
    def restore(cls, data: dict) -> "QuizSession":
        session = cls()
        session.state = data["state"]
        session.timer_type = data["timerType"]
        session.timer = data["timer"]
        session.questions = data["questions"]
        session.answers = [set(selected) for selected in data["answers"]]
        session.frozen = list(data["frozen"])
        session.current = data["current"]
        session.time_left = data["timeLeft"]
        session.submitted = data["submitted"]
        session.auto_submitted = data.get("autoSubmitted", False)
        session.score = data.get("score")
        session.total = data.get("total")
        session.error = data.get("error")
        return session
