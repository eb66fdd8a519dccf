import uuid
from datetime import datetime, timezone
from quizcraft.extensions import db


TIMER_PER_QUIZ = "perQuiz"
TIMER_PER_QUESTION = "perQuestion"
TIMER_TYPES = (TIMER_PER_QUIZ, TIMER_PER_QUESTION)


class Quiz(db.Model):
    __tablename__ = "quizzes"

    id = db.Column(
        db.String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    creator_id = db.Column(
        db.String(36),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    # "perQuiz" | "perQuestion"
    timer_type = db.Column(db.String(20), nullable=False, default=TIMER_PER_QUIZ)
    # per-quiz countdown, or the default countdown of each question
    timer = db.Column(db.Integer, nullable=False)
    # [{"text", "options": [{"text", "isCorrect"}], "allowMultiple", "timer"}]
    questions = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # Relationships
    creator = db.relationship("User", back_populates="quizzes")
    attempts = db.relationship(
        "QuizAttempt",
        back_populates="quiz",
        lazy="dynamic",
        cascade="all, delete-orphan",
    )

    def to_document(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "timerType": self.timer_type,
            "timer": self.timer,
            "questions": self.questions,
        }

    def __repr__(self):
        return f"<Quiz id={self.id} creator={self.creator_id}>"
