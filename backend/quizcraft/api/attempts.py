"""
Quiz-taking API

Endpoints
---------
POST  /api/quizzes/<quiz_id>/attempts    – start an attempt
GET   /api/attempts/<attempt_id>         – current state (timers applied)
POST  /api/attempts/<attempt_id>/answers – select / deselect an option
POST  /api/attempts/<attempt_id>/next    – leave the current question (perQuestion)
POST  /api/attempts/<attempt_id>/submit  – submit; repeat calls are harmless

A JWT is optional. Anonymous participants identify themselves with a
``participant_name``; the attempt id itself is the participant's handle on
the attempt. Every call first applies the time elapsed since the previous
call, so a GET after the clock ran out returns the auto-submitted attempt.
"""

from __future__ import annotations

import logging

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from quizcraft.db.models.attempt import QuizAttempt
from quizcraft.db.models.quiz import Quiz
from quizcraft.db.models.user import User
from quizcraft.extensions import db
from quizcraft.services.quiz import attempts as attempt_service
from quizcraft.services.quiz.session import STATE_ERROR, SessionError

log = logging.getLogger(__name__)

attempts_bp = Blueprint("attempts", __name__, url_prefix="/api")


def _get_attempt(attempt_id: str):
    attempt = db.session.get(QuizAttempt, attempt_id)
    if not attempt:
        return None, (jsonify({"error": "attempt not found"}), 404)
    return attempt, None


def _int_field(data: dict, key: str):
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer")
    return value


# ── POST /api/quizzes/<quiz_id>/attempts ──────────────────────────────────────

@attempts_bp.post("/quizzes/<quiz_id>/attempts")
@jwt_required(optional=True)
def start_attempt(quiz_id: str):
    quiz = db.session.get(Quiz, quiz_id)
    if not quiz:
        return jsonify({"error": "quiz not found"}), 404

    user_id = get_jwt_identity()
    user = db.session.get(User, user_id) if user_id else None
    data = request.get_json(silent=True) or {}

    try:
        attempt, session = attempt_service.start_attempt(
            quiz,
            user=user,
            participant_name=data.get("participant_name"),
            now=attempt_service.utcnow(),
        )
    except SessionError as exc:
        return jsonify({"error": str(exc)}), 400

    return jsonify(attempt_service.attempt_to_dict(attempt, session)), 201


# ── GET /api/attempts/<attempt_id> ────────────────────────────────────────────

@attempts_bp.get("/attempts/<attempt_id>")
def get_attempt(attempt_id: str):
    attempt, error = _get_attempt(attempt_id)
    if error:
        return error
    session = attempt_service.sync_attempt(attempt, now=attempt_service.utcnow())
    return jsonify(attempt_service.attempt_to_dict(attempt, session)), 200


# ── POST /api/attempts/<attempt_id>/answers ───────────────────────────────────

@attempts_bp.post("/attempts/<attempt_id>/answers")
def select_answer(attempt_id: str):
    """
    Request body (JSON):
        question_index : int
        option_index   : int
        checked        : bool (default true) – false removes the option

    ``accepted`` is false when the question is frozen, not the running
    question, or the attempt is already submitted.
    """
    attempt, error = _get_attempt(attempt_id)
    if error:
        return error

    data = request.get_json(silent=True) or {}
    try:
        q_idx = _int_field(data, "question_index")
        o_idx = _int_field(data, "option_index")
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    checked = bool(data.get("checked", True))

    session, accepted = attempt_service.select_answer(
        attempt, q_idx, o_idx, checked, now=attempt_service.utcnow()
    )
    body = attempt_service.attempt_to_dict(attempt, session)
    body["accepted"] = bool(accepted)
    return jsonify(body), 200


# ── POST /api/attempts/<attempt_id>/next ──────────────────────────────────────

@attempts_bp.post("/attempts/<attempt_id>/next")
def next_question(attempt_id: str):
    attempt, error = _get_attempt(attempt_id)
    if error:
        return error

    session, moved = attempt_service.advance_attempt(attempt, now=attempt_service.utcnow())
    if session.state == STATE_ERROR:
        return jsonify({"error": session.error}), 503
    if not moved and not session.submitted:
        return jsonify({"error": "this quiz does not use per-question timing"}), 409
    return jsonify(attempt_service.attempt_to_dict(attempt, session)), 200


# ── POST /api/attempts/<attempt_id>/submit ────────────────────────────────────

@attempts_bp.post("/attempts/<attempt_id>/submit")
def submit_attempt(attempt_id: str):
    attempt, error = _get_attempt(attempt_id)
    if error:
        return error

    session = attempt_service.submit_attempt(attempt, now=attempt_service.utcnow())
    if session.state == STATE_ERROR:
        return jsonify({"error": session.error or "quiz could not be submitted"}), 503
    return jsonify(attempt_service.attempt_to_dict(attempt, session)), 200
