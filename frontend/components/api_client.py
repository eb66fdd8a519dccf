"""
api_client.py — single HTTP client for all frontend → Flask communication.
Reads API_BASE_URL from .env (falls back to localhost:5000).
Attaches the JWT access token from st.session_state when one is passed in;
quiz-taking calls work without one.
"""
import os
import requests
from dotenv import load_dotenv

load_dotenv()

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:5000")


class APIError(Exception):
    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code


def _headers(token: str | None = None) -> dict:
    h = {"Content-Type": "application/json"}
    if token:
        h["Authorization"] = f"Bearer {token}"
    return h


def _raise(resp: requests.Response) -> None:
    if not resp.ok:
        try:
            msg = resp.json().get("error") or resp.json().get("msg") or resp.text
        except ValueError:
            msg = resp.text
        raise APIError(msg, resp.status_code)


def _request(method: str, path: str, token: str | None = None, timeout: int = 10, **kwargs):
    try:
        resp = requests.request(
            method,
            f"{API_BASE_URL}{path}",
            headers=_headers(token),
            timeout=timeout,
            **kwargs,
        )
    except requests.RequestException as exc:
        raise APIError(f"Could not reach the quiz server: {exc}") from exc
    _raise(resp)
    return resp


# ── Auth ─────────────────────────────────────────────────────────────────────

def register(email: str, password: str, display_name: str | None = None) -> dict:
    return _request(
        "POST",
        "/api/auth/register",
        json={"email": email, "password": password, "display_name": display_name},
    ).json()


def login(email: str, password: str) -> dict:
    return _request("POST", "/api/auth/login", json={"email": email, "password": password}).json()


def refresh_token(refresh_tok: str) -> str:
    return _request("POST", "/api/auth/refresh", token=refresh_tok).json()["access_token"]


def get_me(access_token: str) -> dict:
    return _request("GET", "/api/auth/me", token=access_token).json()["user"]


# ── Quizzes ──────────────────────────────────────────────────────────────────

def list_quizzes(access_token: str) -> list:
    return _request("GET", "/api/quizzes", token=access_token).json()


def get_quiz(quiz_id: str, access_token: str | None = None) -> dict:
    return _request("GET", f"/api/quizzes/{quiz_id}", token=access_token).json()


def create_quiz(access_token: str, quiz: dict) -> dict:
    return _request("POST", "/api/quizzes", token=access_token, json=quiz).json()


def update_quiz(access_token: str, quiz_id: str, quiz: dict) -> dict:
    return _request("PUT", f"/api/quizzes/{quiz_id}", token=access_token, json=quiz).json()


def delete_quiz(access_token: str, quiz_id: str) -> dict:
    return _request("DELETE", f"/api/quizzes/{quiz_id}", token=access_token).json()


def quiz_results(access_token: str, quiz_id: str) -> dict:
    return _request("GET", f"/api/quizzes/{quiz_id}/results", token=access_token).json()


def quiz_results_csv(access_token: str, quiz_id: str) -> bytes:
    return _request("GET", f"/api/quizzes/{quiz_id}/results.csv", token=access_token, timeout=30).content


# ── Attempts ─────────────────────────────────────────────────────────────────

def start_attempt(quiz_id: str, participant_name: str | None, access_token: str | None = None) -> dict:
    return _request(
        "POST",
        f"/api/quizzes/{quiz_id}/attempts",
        token=access_token,
        json={"participant_name": participant_name},
    ).json()


def get_attempt(attempt_id: str) -> dict:
    return _request("GET", f"/api/attempts/{attempt_id}").json()


def select_answer(attempt_id: str, question_index: int, option_index: int, checked: bool = True) -> dict:
    return _request(
        "POST",
        f"/api/attempts/{attempt_id}/answers",
        json={"question_index": question_index, "option_index": option_index, "checked": checked},
    ).json()


def next_question(attempt_id: str) -> dict:
    return _request("POST", f"/api/attempts/{attempt_id}/next").json()


def submit_attempt(attempt_id: str) -> dict:
    return _request("POST", f"/api/attempts/{attempt_id}/submit").json()


def get_result(result_id: str) -> dict:
    return _request("GET", f"/api/results/{result_id}").json()


# ── Users ────────────────────────────────────────────────────────────────────

def get_profile(user_id: str, access_token: str | None = None) -> dict:
    return _request("GET", f"/api/users/{user_id}", token=access_token).json()


def update_profile(access_token: str, fields: dict) -> dict:
    return _request("PATCH", "/api/users/me", token=access_token, json=fields).json()


def follow(access_token: str, user_id: str) -> dict:
    return _request("POST", f"/api/users/{user_id}/follow", token=access_token).json()


def unfollow(access_token: str, user_id: str) -> dict:
    return _request("DELETE", f"/api/users/{user_id}/follow", token=access_token).json()


def user_quizzes(user_id: str, access_token: str | None = None) -> list:
    return _request("GET", f"/api/users/{user_id}/quizzes", token=access_token).json()


def my_results(access_token: str) -> list:
    return _request("GET", "/api/users/me/results", token=access_token).json()
