"""
Server-side driving of QuizSession.

Every attempt request goes through the same cycle:

    1. restore the session snapshot stored on the QuizAttempt row
    2. apply the whole seconds elapsed since ``last_tick_at`` as ticks
       (the fractional remainder carries over to the next request)
    3. apply the requested action (select / advance / submit)
    4. write the snapshot back and commit

A Result row is written at most once per attempt: the session's
``submitted`` guard stops a second submission within one request, and the
unique ``results.attempt_id`` constraint stops a second request that raced
past the guard. The loser of that race gets the winner's state back.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from quizcraft.db.models.attempt import QuizAttempt
from quizcraft.db.models.quiz import Quiz
from quizcraft.db.models.result import Result
from quizcraft.db.models.user import User
from quizcraft.extensions import db
from quizcraft.services.quiz.session import STATE_DONE, QuizSession, SessionError

log = logging.getLogger(__name__)

MAX_NAME_LENGTH = 100


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _aware(dt: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone=True columns
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


class _ResultWriter:
    """Persist callback handed to QuizSession.submit()."""

    def __init__(self, attempt: QuizAttempt):
        self.attempt = attempt
        self.result: Optional[Result] = None
        self.conflict = False

    def __call__(self, outcome: dict) -> None:
        attempt = self.attempt
        result = Result(
            quiz_id=attempt.quiz_id,
            attempt_id=attempt.id,
            user_id=attempt.user_id,
            participant_name=attempt.participant_name,
            quiz_title=attempt.quiz.title,
            score=outcome["score"],
            total=outcome["total"],
            answers=outcome["answers"],
            questions=attempt.session["questions"],
            auto_submitted=outcome["auto_submitted"],
        )
        db.session.add(result)
        try:
            db.session.flush()
        except IntegrityError:
            db.session.rollback()
            self.conflict = True
            raise
        except SQLAlchemyError:
            db.session.rollback()
            raise
        self.result = result
        log.info(
            "attempt %s submitted (%s) score=%d/%d",
            attempt.id,
            "timer" if outcome["auto_submitted"] else "manual",
            outcome["score"],
            outcome["total"],
        )


# ── Lifecycle ─────────────────────────────────────────────────────────────────

def start_attempt(
    quiz: Quiz,
    user: Optional[User] = None,
    participant_name: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Tuple[QuizAttempt, QuizSession]:
    """Create an attempt for *quiz*. Anonymous participants must give a name."""
    name = (participant_name or "").strip()
    if not name and user is not None:
        name = user.name
    if not name:
        raise SessionError("participant_name is required")
    if len(name) > MAX_NAME_LENGTH:
        raise SessionError(f"participant_name must be at most {MAX_NAME_LENGTH} characters")

    session = QuizSession.start(quiz.to_document())
    if session.error:
        raise SessionError(session.error)

    now = now or utcnow()
    attempt = QuizAttempt(
        quiz_id=quiz.id,
        user_id=user.id if user else None,
        participant_name=name,
        status=session.state,
        session=session.snapshot(),
        started_at=now,
        last_tick_at=now,
    )
    db.session.add(attempt)
    db.session.commit()
    log.info("attempt %s started on quiz %s by %r", attempt.id, quiz.id, name)
    return attempt, session


def _run(
    attempt: QuizAttempt,
    action: Optional[Callable[[QuizSession, _ResultWriter], object]],
    now: Optional[datetime],
):
    session = QuizSession.restore(attempt.session)
    writer = _ResultWriter(attempt)

    last = _aware(attempt.last_tick_at)
    elapsed = int(((now or utcnow()) - last).total_seconds())
    if elapsed > 0:
        session.elapse(elapsed, persist=writer)
        last = last + timedelta(seconds=elapsed)

    value = action(session, writer) if action is not None else None

    if writer.conflict:
        # another request submitted this attempt first
        db.session.refresh(attempt)
        return QuizSession.restore(attempt.session), value

    attempt.session = session.snapshot()
    attempt.status = session.state
    attempt.last_tick_at = last
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        db.session.refresh(attempt)
        return QuizSession.restore(attempt.session), value
    return session, value


def sync_attempt(attempt: QuizAttempt, now: Optional[datetime] = None) -> QuizSession:
    """Bring the attempt's timers up to *now*; may auto-submit."""
    session, _ = _run(attempt, None, now)
    return session


def select_answer(
    attempt: QuizAttempt,
    question_index: int,
    option_index: int,
    checked: bool = True,
    now: Optional[datetime] = None,
) -> Tuple[QuizSession, bool]:
    return _run(
        attempt,
        lambda session, _writer: session.select(question_index, option_index, checked),
        now,
    )


def advance_attempt(attempt: QuizAttempt, now: Optional[datetime] = None) -> Tuple[QuizSession, bool]:
    return _run(attempt, lambda session, writer: session.advance(persist=writer), now)


def submit_attempt(attempt: QuizAttempt, now: Optional[datetime] = None) -> QuizSession:
    session, _ = _run(attempt, lambda session, writer: session.submit(persist=writer), now)
    return session


# ── Serialisation ─────────────────────────────────────────────────────────────

def attempt_to_dict(attempt: QuizAttempt, session: QuizSession) -> dict:
    """Participant view: correctness is never exposed here."""
    questions = [
        {
            "index":          i,
            "text":           q.get("text", ""),
            "options":        [opt.get("text", "") for opt in q.get("options", [])],
            "allow_multiple": bool(q.get("allowMultiple")),
            "frozen":         session.frozen[i],
        }
        for i, q in enumerate(session.questions)
    ]
    d = {
        "id":               attempt.id,
        "quiz_id":          attempt.quiz_id,
        "participant_name": attempt.participant_name,
        "status":           session.state,
        "timer_type":       session.timer_type,
        "time_left":        session.time_left,
        "countdown":        session.countdown_for(session.current) if session.questions else 0,
        "current_question": session.current,
        "questions":        questions,
        "answers":          [sorted(selected) for selected in session.answers],
        "submitted":        session.submitted,
        "error":            session.error,
        "result_id":        None,
    }
    if session.state == STATE_DONE:
        d["score"] = session.score
        d["total"] = session.total
        d["auto_submitted"] = session.auto_submitted
        d["result_id"] = attempt.result.id if attempt.result else None
    return d
