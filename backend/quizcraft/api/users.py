"""
Users & profiles API

Endpoints
---------
GET     /api/users/<user_id>          – public profile ("me" for the caller)
PATCH   /api/users/me                 – edit display name, photo, bio
POST    /api/users/<user_id>/follow   – follow (idempotent)
DELETE  /api/users/<user_id>/follow   – unfollow (idempotent)
GET     /api/users/<user_id>/quizzes  – a user's quizzes, newest first
GET     /api/users/me/results         – the caller's submitted results
"""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from sqlalchemy import func

from quizcraft.api.quizzes import quiz_to_dict
from quizcraft.api.results import result_to_dict
from quizcraft.db.models.quiz import Quiz
from quizcraft.db.models.result import Result
from quizcraft.db.models.user import User
from quizcraft.extensions import db
from quizcraft.services.profile.badges import earned_badges

log = logging.getLogger(__name__)

users_bp = Blueprint("users", __name__, url_prefix="/api/users")

_EDITABLE_FIELDS = {"display_name": 100, "photo_url": 500, "bio": 2000}


# ── Helpers ───────────────────────────────────────────────────────────────────

def _resolve(user_id: str):
    if user_id == "me":
        user_id = get_jwt_identity()
    return db.session.get(User, user_id) if user_id else None


def user_stats(user: User) -> dict:
    taken = Result.query.filter(Result.user_id == user.id)
    return {
        "quizzes_created": Quiz.query.filter_by(creator_id=user.id).count(),
        "quizzes_taken":   taken.count(),
        "total_score": (
            db.session.query(func.coalesce(func.sum(Result.score), 0))
            .filter(Result.user_id == user.id)
            .scalar()
        ),
        "perfect_scores": taken.filter(Result.total > 0, Result.score == Result.total).count(),
        "followers":      user.followers.count(),
        "following":      user.following.count(),
    }


def profile_dict(user: User, viewer: User = None) -> dict:
    stats = user_stats(user)
    base = current_app.config["FRONTEND_BASE_URL"].rstrip("/")
    return {
        "id":           user.id,
        "display_name": user.name,
        "photo_url":    user.photo_url,
        "bio":          user.bio,
        "created_at":   user.created_at.isoformat(),
        "stats":        stats,
        "badges":       earned_badges(stats),
        "is_own":       viewer is not None and viewer.id == user.id,
        "is_following": viewer is not None and viewer.id != user.id and viewer.is_following(user),
        "profile_url":  f"{base}/Profile?user_id={user.id}",
    }


# ── GET /api/users/<user_id> ──────────────────────────────────────────────────

@users_bp.get("/<user_id>")
@jwt_required(optional=True)
def get_profile(user_id: str):
    user = _resolve(user_id)
    if not user:
        return jsonify({"error": "user not found"}), 404
    viewer_id = get_jwt_identity()
    viewer = db.session.get(User, viewer_id) if viewer_id else None
    return jsonify(profile_dict(user, viewer)), 200


# ── PATCH /api/users/me ───────────────────────────────────────────────────────

@users_bp.patch("/me")
@jwt_required()
def update_profile():
    user = _resolve("me")
    if not user:
        return jsonify({"error": "user not found"}), 404

    data = request.get_json(silent=True) or {}
    for field, max_len in _EDITABLE_FIELDS.items():
        if field not in data:
            continue
        value = data[field]
        if value is not None and not isinstance(value, str):
            return jsonify({"error": f"{field} must be a string"}), 400
        value = (value or "").strip()
        if len(value) > max_len:
            return jsonify({"error": f"{field} must be at most {max_len} characters"}), 400
        setattr(user, field, value or None)

    db.session.commit()
    return jsonify(profile_dict(user, user)), 200


# ── POST/DELETE /api/users/<user_id>/follow ───────────────────────────────────

def _follow_targets(user_id: str):
    """Return (me, target, None) or (None, None, error response)."""
    me = _resolve("me")
    target = db.session.get(User, user_id)
    if not me or not target:
        return None, None, (jsonify({"error": "user not found"}), 404)
    if me.id == target.id:
        return None, None, (jsonify({"error": "you cannot follow yourself"}), 400)
    return me, target, None


@users_bp.post("/<user_id>/follow")
@jwt_required()
def follow(user_id: str):
    me, target, error = _follow_targets(user_id)
    if error:
        return error
    me.follow(target)
    db.session.commit()
    log.info("user %s follows %s", me.id, target.id)
    return jsonify(profile_dict(target, me)), 200


@users_bp.delete("/<user_id>/follow")
@jwt_required()
def unfollow(user_id: str):
    me, target, error = _follow_targets(user_id)
    if error:
        return error
    me.unfollow(target)
    db.session.commit()
    return jsonify(profile_dict(target, me)), 200


# ── GET /api/users/<user_id>/quizzes ──────────────────────────────────────────

@users_bp.get("/<user_id>/quizzes")
@jwt_required(optional=True)
def user_quizzes(user_id: str):
    user = _resolve(user_id)
    if not user:
        return jsonify({"error": "user not found"}), 404
    is_owner = user.id == get_jwt_identity()
    return jsonify([quiz_to_dict(q, include_answers=is_owner) for q in user.quizzes]), 200


# ── GET /api/users/me/results ─────────────────────────────────────────────────

@users_bp.get("/me/results")
@jwt_required()
def my_results():
    user_id = get_jwt_identity()
    results = (
        Result.query
        .filter_by(user_id=user_id)
        .order_by(Result.submitted_at.desc())
        .all()
    )
    return jsonify([result_to_dict(r) for r in results]), 200
