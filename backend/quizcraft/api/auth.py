from flask import Blueprint, request, jsonify
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    jwt_required,
    get_jwt_identity,
)
from quizcraft.extensions import db
from quizcraft.db.models.user import User
import logging
import uuid

log = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")

_MIN_PASSWORD_LENGTH = 8


# ── Register ────────────────────────────────────────────────────────────────

@auth_bp.post("/register")
def register():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password", "")
    display_name = (data.get("display_name") or "").strip()[:100] or None

    # Validation
    if not email or not password:
        return jsonify({"error": "email and password are required"}), 400
    if "@" not in email:
        return jsonify({"error": "email address is not valid"}), 400
    if len(password) < _MIN_PASSWORD_LENGTH:
        return jsonify({"error": "password must be at least 8 characters"}), 400

    if User.query.filter_by(email=email).first():
        return jsonify({"error": "email already registered"}), 409

    user = User(
        id=str(uuid.uuid4()),
        email=email,
        display_name=display_name,
    )
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    log.info("registered user %s", user.id)

    return jsonify(
        {
            "message": "Account created",
            "access_token": create_access_token(identity=user.id),
            "refresh_token": create_refresh_token(identity=user.id),
            "user": user_dict(user),
        }
    ), 201


# ── Login ────────────────────────────────────────────────────────────────────

@auth_bp.post("/login")
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password", "")

    if not email or not password:
        return jsonify({"error": "email and password are required"}), 400

    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(password):
        return jsonify({"error": "invalid credentials"}), 401
    if not user.is_active:
        return jsonify({"error": "account is disabled"}), 403

    return jsonify(
        {
            "access_token": create_access_token(identity=user.id),
            "refresh_token": create_refresh_token(identity=user.id),
            "user": user_dict(user),
        }
    ), 200


# ── Refresh ──────────────────────────────────────────────────────────────────

@auth_bp.post("/refresh")
@jwt_required(refresh=True)
def refresh():
    user_id = get_jwt_identity()
    access_token = create_access_token(identity=user_id)
    return jsonify({"access_token": access_token}), 200


# ── Me ───────────────────────────────────────────────────────────────────────

@auth_bp.get("/me")
@jwt_required()
def me():
    user_id = get_jwt_identity()
    user = db.session.get(User, user_id)
    if not user:
        return jsonify({"error": "user not found"}), 404
    return jsonify({"user": user_dict(user)}), 200


# ── Helpers ──────────────────────────────────────────────────────────────────

def user_dict(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "display_name": user.name,
        "photo_url": user.photo_url,
        "bio": user.bio,
        "created_at": user.created_at.isoformat(),
        "is_active": user.is_active,
    }
