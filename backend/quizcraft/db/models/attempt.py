import uuid
from datetime import datetime, timezone
from quizcraft.extensions import db


class QuizAttempt(db.Model):
    """
    One participant's in-flight run through a quiz.

    ``session`` holds the JSON snapshot of the QuizSession state machine,
    including a frozen copy of the questions taken when the attempt started,
    so later edits to the quiz never change a running attempt.
    """
    __tablename__ = "quiz_attempts"

    id = db.Column(
        db.String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    quiz_id = db.Column(
        db.String(36),
        db.ForeignKey("quizzes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = db.Column(
        db.String(36),
        db.ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    participant_name = db.Column(db.String(100), nullable=False)
    # mirrors QuizSession.state
    status = db.Column(db.String(20), nullable=False)
    session = db.Column(db.JSON, nullable=False)
    started_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    # wall-clock instant up to which timer ticks have been applied
    last_tick_at = db.Column(db.DateTime(timezone=True), nullable=False)

    # Relationships
    quiz = db.relationship("Quiz", back_populates="attempts")
    result = db.relationship("Result", back_populates="attempt", uselist=False)

    def __repr__(self):
        return f"<QuizAttempt id={self.id} quiz={self.quiz_id} status={self.status}>"
