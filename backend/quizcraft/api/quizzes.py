"""
Quiz API

Endpoints
---------
GET     /api/quizzes               – list the caller's quizzes, newest first
POST    /api/quizzes               – create a quiz
GET     /api/quizzes/<quiz_id>     – owner: full quiz; anyone else: participant view
PUT     /api/quizzes/<quiz_id>     – replace a quiz (owner only)
DELETE  /api/quizzes/<quiz_id>     – delete a quiz (owner only); results are kept

Request bodies use the quiz document shape described in
services/quiz/builder.py. Every write is run through validate_quiz().
"""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from sqlalchemy import func

from quizcraft.db.models.quiz import Quiz
from quizcraft.db.models.result import Result
from quizcraft.extensions import db
from quizcraft.services.quiz.builder import QuizValidationError, validate_quiz

log = logging.getLogger(__name__)

quizzes_bp = Blueprint("quizzes", __name__, url_prefix="/api/quizzes")


# ── Helpers ───────────────────────────────────────────────────────────────────

def share_url(quiz_id: str) -> str:
    base = current_app.config["FRONTEND_BASE_URL"].rstrip("/")
    return f"{base}/Take_Quiz?quiz_id={quiz_id}"


def _public_questions(questions: list) -> list:
    """Questions as a participant may see them: no isCorrect flags."""
    return [
        {
            "text":          q["text"],
            "options":       [{"text": opt["text"]} for opt in q["options"]],
            "allowMultiple": q.get("allowMultiple", False),
            "timer":         q.get("timer"),
        }
        for q in questions
    ]


def quiz_to_dict(quiz: Quiz, include_answers: bool = True, result_count: int = None) -> dict:
    d = {
        "id":             quiz.id,
        "creator_id":     quiz.creator_id,
        "creator_name":   quiz.creator.name if quiz.creator else None,
        "title":          quiz.title,
        "description":    quiz.description,
        "timerType":      quiz.timer_type,
        "timer":          quiz.timer,
        "question_count": len(quiz.questions),
        "questions":      quiz.questions if include_answers else _public_questions(quiz.questions),
        "share_url":      share_url(quiz.id),
        "created_at":     quiz.created_at.isoformat(),
        "updated_at":     quiz.updated_at.isoformat(),
    }
    if result_count is not None:
        d["result_count"] = result_count
    return d


def _apply(quiz: Quiz, doc: dict) -> None:
    quiz.title = doc["title"]
    quiz.description = doc["description"]
    quiz.timer_type = doc["timerType"]
    quiz.timer = doc["timer"]
    quiz.questions = doc["questions"]


def _validated_body():
    data = request.get_json(silent=True)
    return validate_quiz(
        data,
        min_timer=current_app.config["MIN_TIMER_SECONDS"],
        default_timer=current_app.config["DEFAULT_QUIZ_TIMER"],
    )


def _owned_quiz(quiz_id: str, user_id: str):
    """Return (quiz, None) or (None, error response)."""
    quiz = db.session.get(Quiz, quiz_id)
    if not quiz:
        return None, (jsonify({"error": "quiz not found"}), 404)
    if quiz.creator_id != user_id:
        return None, (jsonify({"error": "you do not own this quiz"}), 403)
    return quiz, None


# ── GET /api/quizzes ──────────────────────────────────────────────────────────

@quizzes_bp.get("")
@jwt_required()
def list_quizzes():
    user_id = get_jwt_identity()
    quizzes = (
        Quiz.query
        .filter_by(creator_id=user_id)
        .order_by(Quiz.created_at.desc())
        .all()
    )
    counts = dict(
        db.session.query(Result.quiz_id, func.count(Result.id))
        .filter(Result.quiz_id.in_([q.id for q in quizzes]))
        .group_by(Result.quiz_id)
        .all()
    ) if quizzes else {}
    return jsonify([quiz_to_dict(q, result_count=counts.get(q.id, 0)) for q in quizzes]), 200


# ── POST /api/quizzes ─────────────────────────────────────────────────────────

@quizzes_bp.post("")
@jwt_required()
def create_quiz():
    user_id = get_jwt_identity()
    try:
        doc = _validated_body()
    except QuizValidationError as exc:
        return jsonify({"error": str(exc)}), 400

    quiz = Quiz(creator_id=user_id)
    _apply(quiz, doc)
    db.session.add(quiz)
    db.session.commit()
    log.info("quiz %s created by %s (%d questions)", quiz.id, user_id, len(quiz.questions))

    return jsonify(quiz_to_dict(quiz, result_count=0)), 201


# ── GET /api/quizzes/<quiz_id> ────────────────────────────────────────────────

@quizzes_bp.get("/<quiz_id>")
@jwt_required(optional=True)
def get_quiz(quiz_id: str):
    quiz = db.session.get(Quiz, quiz_id)
    if not quiz:
        return jsonify({"error": "quiz not found"}), 404
    is_owner = quiz.creator_id == get_jwt_identity()
    return jsonify(quiz_to_dict(quiz, include_answers=is_owner)), 200


# ── PUT /api/quizzes/<quiz_id> ────────────────────────────────────────────────

@quizzes_bp.put("/<quiz_id>")
@jwt_required()
def update_quiz(quiz_id: str):
    quiz, error = _owned_quiz(quiz_id, get_jwt_identity())
    if error:
        return error
    try:
        doc = _validated_body()
    except QuizValidationError as exc:
        return jsonify({"error": str(exc)}), 400

    _apply(quiz, doc)
    db.session.commit()
    log.info("quiz %s updated", quiz.id)
    return jsonify(quiz_to_dict(quiz)), 200


# ── DELETE /api/quizzes/<quiz_id> ─────────────────────────────────────────────

@quizzes_bp.delete("/<quiz_id>")
@jwt_required()
def delete_quiz(quiz_id: str):
    quiz, error = _owned_quiz(quiz_id, get_jwt_identity())
    if error:
        return error

    # Results outlive the quiz; they carry their own question snapshot.
    Result.query.filter_by(quiz_id=quiz.id).update(
        {"quiz_id": None, "attempt_id": None}, synchronize_session=False
    )
    db.session.delete(quiz)
    db.session.commit()
    log.info("quiz %s deleted", quiz_id)
    return jsonify({"message": "Quiz deleted", "id": quiz_id}), 200
