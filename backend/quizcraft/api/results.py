"""
Results API

Endpoints
---------
GET  /api/quizzes/<quiz_id>/results      – results + summary (quiz owner)
GET  /api/quizzes/<quiz_id>/results.csv  – CSV export (quiz owner)
GET  /api/results/<result_id>            – one result with answer review
"""

from __future__ import annotations

from flask import Blueprint, Response, jsonify
from flask_jwt_extended import get_jwt_identity, jwt_required

from quizcraft.db.models.quiz import Quiz
from quizcraft.db.models.result import Result
from quizcraft.extensions import db
from quizcraft.services.export.csv_export import results_to_csv
from quizcraft.services.quiz.scoring import review

results_bp = Blueprint("results", __name__, url_prefix="/api")


# ── Helpers ───────────────────────────────────────────────────────────────────

def result_to_dict(result: Result, include_review: bool = False) -> dict:
    d = {
        "id":               result.id,
        "quiz_id":          result.quiz_id,
        "quiz_title":       result.quiz_title,
        "user_id":          result.user_id,
        "participant_name": result.participant_name,
        "score":            result.score,
        "total":            result.total,
        "percentage":       result.percentage,
        "answers":          result.answers,
        "auto_submitted":   result.auto_submitted,
        "submitted_at":     result.submitted_at.isoformat(),
    }
    if include_review:
        d["review"] = review(result.questions, result.answers)
    return d


def summarize(results: list) -> dict:
    if not results:
        return {"count": 0, "average_percentage": None, "best_score": None}
    return {
        "count":              len(results),
        "average_percentage": round(sum(r.percentage for r in results) / len(results), 1),
        "best_score":         max(r.score for r in results),
    }


def _owned_results(quiz_id: str):
    """Return (quiz, results, None) or (None, None, error response)."""
    quiz = db.session.get(Quiz, quiz_id)
    if not quiz:
        return None, None, (jsonify({"error": "quiz not found"}), 404)
    if quiz.creator_id != get_jwt_identity():
        return None, None, (jsonify({"error": "you do not own this quiz"}), 403)
    results = (
        Result.query
        .filter_by(quiz_id=quiz_id)
        .order_by(Result.submitted_at.desc())
        .all()
    )
    return quiz, results, None


# ── GET /api/quizzes/<quiz_id>/results ────────────────────────────────────────

@results_bp.get("/quizzes/<quiz_id>/results")
@jwt_required()
def list_results(quiz_id: str):
    quiz, results, error = _owned_results(quiz_id)
    if error:
        return error
    return jsonify(
        {
            "quiz_id": quiz.id,
            "summary": summarize(results),
            "results": [result_to_dict(r) for r in results],
        }
    ), 200


# ── GET /api/quizzes/<quiz_id>/results.csv ────────────────────────────────────

@results_bp.get("/quizzes/<quiz_id>/results.csv")
@jwt_required()
def export_results(quiz_id: str):
    quiz, results, error = _owned_results(quiz_id)
    if error:
        return error
    resp = Response(results_to_csv(results))
    resp.headers["Content-Type"] = "text/csv; charset=utf-8"
    resp.headers["Content-Disposition"] = f"attachment; filename=quiz_{quiz.id}_results.csv"
    return resp


# ── GET /api/results/<result_id> ──────────────────────────────────────────────

@results_bp.get("/results/<result_id>")
def get_result(result_id: str):
    # anonymous participants have no token: the result id is the credential
    result = db.session.get(Result, result_id)
    if not result:
        return jsonify({"error": "result not found"}), 404
    return jsonify(result_to_dict(result, include_review=True)), 200
