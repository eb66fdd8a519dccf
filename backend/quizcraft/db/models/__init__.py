from quizcraft.db.models.user import User, follows
from quizcraft.db.models.quiz import Quiz
from quizcraft.db.models.attempt import QuizAttempt
from quizcraft.db.models.result import Result

__all__ = [
    "User",
    "follows",
    "Quiz",
    "QuizAttempt",
    "Result",
]
