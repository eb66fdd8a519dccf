import uuid
from datetime import datetime, timezone
from quizcraft.extensions import db


class Result(db.Model):
    """
    One participant's scored attempt. Append-only: rows are written once on
    submission and never updated. The question snapshot keeps the answer
    review meaningful after the quiz is edited or deleted.
    """
    __tablename__ = "results"

    id = db.Column(
        db.String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    quiz_id = db.Column(
        db.String(36),
        db.ForeignKey("quizzes.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    # at most one result per attempt
    attempt_id = db.Column(
        db.String(36),
        db.ForeignKey("quiz_attempts.id", ondelete="SET NULL"),
        nullable=True,
        unique=True,
    )
    user_id = db.Column(
        db.String(36),
        db.ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    participant_name = db.Column(db.String(100), nullable=False)
    quiz_title = db.Column(db.String(255), nullable=False)
    score = db.Column(db.Integer, nullable=False)
    total = db.Column(db.Integer, nullable=False)
    # one sorted list of selected option indexes per question
    answers = db.Column(db.JSON, nullable=False)
    questions = db.Column(db.JSON, nullable=False)
    auto_submitted = db.Column(db.Boolean, default=False, nullable=False)
    submitted_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )

    # Relationships
    attempt = db.relationship("QuizAttempt", back_populates="result")

    @property
    def percentage(self) -> int:
        if not self.total:
            return 0
        # halves round up: 1/8 is 13%
        return (self.score * 200 + self.total) // (2 * self.total)

    def __repr__(self):
        return f"<Result id={self.id} quiz={self.quiz_id} score={self.score}/{self.total}>"
