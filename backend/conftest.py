"""
Shared pytest fixtures.

Each test gets a fresh app on in-memory SQLite (TestingConfig) and a Flask
test client; no server or external database is needed.
"""

import copy
from datetime import datetime, timedelta, timezone

import pytest

from quizcraft import create_app
from quizcraft.extensions import db


SAMPLE_QUIZ = {
    "title": "Capitals",
    "description": "European capitals",
    "timerType": "perQuiz",
    "timer": 60,
    "questions": [
        {
            "text": "Capital of France?",
            "options": [
                {"text": "Paris", "isCorrect": True},
                {"text": "Lyon", "isCorrect": False},
                {"text": "Nice", "isCorrect": False},
            ],
            "allowMultiple": False,
            "timer": None,
        },
        {
            "text": "Which are in Spain?",
            "options": [
                {"text": "Madrid", "isCorrect": True},
                {"text": "Porto", "isCorrect": False},
                {"text": "Seville", "isCorrect": True},
                {"text": "Turin", "isCorrect": False},
            ],
            "allowMultiple": True,
            "timer": None,
        },
    ],
}


@pytest.fixture
def quiz_doc():
    return copy.deepcopy(SAMPLE_QUIZ)


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def register(client, email="owner@quiz.local", password="password123", display_name=None):
    r = client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "display_name": display_name},
    )
    assert r.status_code == 201, r.get_json()
    body = r.get_json()
    return {"Authorization": f"Bearer {body['access_token']}"}, body["user"]


@pytest.fixture
def owner(client):
    return register(client, "owner@quiz.local", display_name="Owner")


@pytest.fixture
def created_quiz(client, owner, quiz_doc):
    headers, _ = owner
    r = client.post("/api/quizzes", json=quiz_doc, headers=headers)
    assert r.status_code == 201, r.get_json()
    return r.get_json()


class FakeClock:
    """Stands in for attempts.utcnow so tests decide how much time passes."""

    def __init__(self):
        self.now = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock(monkeypatch):
    fake = FakeClock()
    monkeypatch.setattr("quizcraft.services.quiz.attempts.utcnow", fake)
    return fake
