"""
Quiz builder.

``QuizDraft`` holds the in-progress form state of the three-step builder
(details → questions → review & save) and applies every edit through
methods that keep a single-answer question at exactly one correct option.
``validate_quiz`` is the gate every create/update request passes through
before a quiz document is stored.

Quiz document shape (also the JSON wire format):

    {
        "title":       str,
        "description": str,
        "timerType":   "perQuiz" | "perQuestion",
        "timer":       int,              – seconds
        "questions": [
            {
                "text":          str,
                "options":       [{"text": str, "isCorrect": bool}, ...],  – 3..5
                "allowMultiple": bool,
                "timer":         int | None  – per-question override
            },
        ],
    }
"""

from __future__ import annotations

import copy
from typing import List, Optional

from quizcraft.config import Config
from quizcraft.db.models.quiz import TIMER_PER_QUESTION, TIMER_PER_QUIZ, TIMER_TYPES

MIN_OPTIONS = 3
MAX_OPTIONS = 5
DEFAULT_QUIZ_TIMER = Config.DEFAULT_QUIZ_TIMER
DEFAULT_QUESTION_TIMER = Config.DEFAULT_QUESTION_TIMER
MIN_TIMER_SECONDS = Config.MIN_TIMER_SECONDS
MAX_TIMER_SECONDS = 24 * 60 * 60
MAX_TITLE_LENGTH = 255


class QuizValidationError(Exception):
    """Raised when a quiz document cannot be saved as given."""


# ── Defaults ──────────────────────────────────────────────────────────────────

def new_option(is_correct: bool = False) -> dict:
    return {"text": "", "isCorrect": is_correct}


def new_question(timer: Optional[int] = DEFAULT_QUESTION_TIMER) -> dict:
    return {
        "text": "",
        "options": [new_option(True), new_option(), new_option()],
        "allowMultiple": False,
        "timer": timer,
    }


def _keep_single_correct(question: dict, preferred: Optional[int] = None) -> None:
    options = question["options"]
    if preferred is None:
        preferred = next((i for i, opt in enumerate(options) if opt.get("isCorrect")), 0)
    for i, opt in enumerate(options):
        opt["isCorrect"] = i == preferred


# ── Draft ─────────────────────────────────────────────────────────────────────

class QuizDraft:
    def __init__(
        self,
        title: str = "",
        description: str = "",
        timer_type: str = TIMER_PER_QUIZ,
        timer: int = DEFAULT_QUIZ_TIMER,
        questions: Optional[List[dict]] = None,
        question_timer: int = DEFAULT_QUESTION_TIMER,
    ):
        self.title = title
        self.description = description
        self.timer_type = timer_type
        self.timer = timer
        self.question_timer = question_timer
        self.questions = questions or [new_question(question_timer)]

    @classmethod
    def from_document(cls, doc: dict, question_timer: int = DEFAULT_QUESTION_TIMER) -> "QuizDraft":
        questions = copy.deepcopy(doc.get("questions") or [])
        for q in questions:
            q.setdefault("allowMultiple", False)
            q.setdefault("timer", question_timer)
            if not q["allowMultiple"] and q.get("options"):
                _keep_single_correct(q)
        return cls(
            title=doc.get("title") or "",
            description=doc.get("description") or "",
            timer_type=doc.get("timerType") or TIMER_PER_QUIZ,
            timer=doc.get("timer") or DEFAULT_QUIZ_TIMER,
            questions=questions,
            question_timer=question_timer,
        )

    def to_document(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "timerType": self.timer_type,
            "timer": self.timer,
            "questions": copy.deepcopy(self.questions),
        }

    # Step 1: details

    def set_details(self, title=None, description=None, timer_type=None, timer=None) -> None:
        if title is not None:
            self.title = title
        if description is not None:
            self.description = description
        if timer_type is not None:
            if timer_type not in TIMER_TYPES:
                raise QuizValidationError(f"unknown timer type {timer_type!r}")
            self.timer_type = timer_type
        if timer is not None:
            self.timer = timer

    # Step 2: questions

    def add_question(self) -> int:
        self.questions.append(new_question(self.question_timer))
        return len(self.questions) - 1

    def remove_question(self, q_idx: int) -> bool:
        if len(self.questions) <= 1:
            return False
        del self.questions[q_idx]
        return True

    def set_question_text(self, q_idx: int, text: str) -> None:
        self.questions[q_idx]["text"] = text

    def set_question_timer(self, q_idx: int, seconds: Optional[int]) -> None:
        self.questions[q_idx]["timer"] = seconds

    def add_option(self, q_idx: int) -> bool:
        options = self.questions[q_idx]["options"]
        if len(options) >= MAX_OPTIONS:
            return False
        options.append(new_option())
        return True

    def remove_option(self, q_idx: int, o_idx: int) -> bool:
        question = self.questions[q_idx]
        if len(question["options"]) <= MIN_OPTIONS:
            return False
        del question["options"][o_idx]
        if not question["allowMultiple"]:
            _keep_single_correct(question)
        return True

    def set_option_text(self, q_idx: int, o_idx: int, text: str) -> None:
        self.questions[q_idx]["options"][o_idx]["text"] = text

    def set_correct(self, q_idx: int, o_idx: int, checked: bool = True) -> None:
        question = self.questions[q_idx]
        if question["allowMultiple"]:
            question["options"][o_idx]["isCorrect"] = bool(checked)
        elif checked:
            _keep_single_correct(question, preferred=o_idx)
        # unchecking a radio is not possible: the single answer stays put

    def set_allow_multiple(self, q_idx: int, allow: bool) -> None:
        question = self.questions[q_idx]
        question["allowMultiple"] = bool(allow)
        if not allow:
            _keep_single_correct(question)


# ── Validation ────────────────────────────────────────────────────────────────

def _as_seconds(value, field: str, min_timer: int) -> int:
    if isinstance(value, bool):
        raise QuizValidationError(f"{field} must be a whole number of seconds")
    try:
        seconds = int(value)
    except (TypeError, ValueError, OverflowError):
        raise QuizValidationError(f"{field} must be a whole number of seconds")
    if seconds < min_timer:
        raise QuizValidationError(f"{field} must be at least {min_timer} seconds")
    if seconds > MAX_TIMER_SECONDS:
        raise QuizValidationError(f"{field} must be at most {MAX_TIMER_SECONDS} seconds")
    if seconds != float(value):
        raise QuizValidationError(f"{field} must be a whole number of seconds")
    return seconds


def _clean_text(value) -> str:
    return value.strip() if isinstance(value, str) else ""


def validate_quiz(
    doc: dict,
    min_timer: int = MIN_TIMER_SECONDS,
    default_timer: int = DEFAULT_QUIZ_TIMER,
) -> dict:
    """
    Check *doc* against the quiz rules and return a normalised copy.

    Raises QuizValidationError naming the first problem found.
    """
    if not isinstance(doc, dict):
        raise QuizValidationError("quiz must be a JSON object")

    title = _clean_text(doc.get("title"))
    if not title:
        raise QuizValidationError("title is required")
    if len(title) > MAX_TITLE_LENGTH:
        raise QuizValidationError(f"title must be at most {MAX_TITLE_LENGTH} characters")

    timer_type = doc.get("timerType", TIMER_PER_QUIZ)
    if timer_type not in TIMER_TYPES:
        raise QuizValidationError(f"timerType must be one of {', '.join(TIMER_TYPES)}")
    timer = _as_seconds(doc.get("timer", default_timer), "timer", min_timer)

    raw_questions = doc.get("questions")
    if not isinstance(raw_questions, list) or not raw_questions:
        raise QuizValidationError("a quiz needs at least one question")

    questions = []
    for n, raw in enumerate(raw_questions, start=1):
        if not isinstance(raw, dict):
            raise QuizValidationError(f"question {n}: must be an object")
        text = _clean_text(raw.get("text"))
        if not text:
            raise QuizValidationError(f"question {n}: text is required")

        raw_options = raw.get("options")
        if not isinstance(raw_options, list) or not MIN_OPTIONS <= len(raw_options) <= MAX_OPTIONS:
            raise QuizValidationError(
                f"question {n}: needs between {MIN_OPTIONS} and {MAX_OPTIONS} options"
            )
        options = []
        for m, opt in enumerate(raw_options, start=1):
            opt_text = _clean_text(opt.get("text")) if isinstance(opt, dict) else ""
            if not opt_text:
                raise QuizValidationError(f"question {n}: option {m} text is required")
            options.append({"text": opt_text, "isCorrect": bool(opt.get("isCorrect"))})

        allow_multiple = bool(raw.get("allowMultiple"))
        n_correct = sum(opt["isCorrect"] for opt in options)
        if allow_multiple and n_correct < 1:
            raise QuizValidationError(f"question {n}: mark at least one correct option")
        if not allow_multiple and n_correct != 1:
            raise QuizValidationError(f"question {n}: exactly one option must be marked correct")

        q_timer = raw.get("timer")
        if q_timer in (None, ""):
            q_timer = None
        elif timer_type == TIMER_PER_QUESTION:
            q_timer = _as_seconds(q_timer, f"question {n}: timer", min_timer)
        else:
            # per-question timers are kept but unused under a per-quiz policy
            try:
                q_timer = int(q_timer)
            except (TypeError, ValueError, OverflowError):
                q_timer = None
            if q_timer is not None and not 0 < q_timer <= MAX_TIMER_SECONDS:
                q_timer = None

        questions.append(
            {
                "text": text,
                "options": options,
                "allowMultiple": allow_multiple,
                "timer": q_timer,
            }
        )

    return {
        "title": title,
        "description": _clean_text(doc.get("description")),
        "timerType": timer_type,
        "timer": timer,
        "questions": questions,
    }
