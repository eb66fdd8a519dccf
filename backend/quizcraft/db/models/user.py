import uuid
from datetime import datetime, timezone
from werkzeug.security import generate_password_hash, check_password_hash
from quizcraft.extensions import db


# follower_id follows followed_id
follows = db.Table(
    "follows",
    db.Column(
        "follower_id",
        db.String(36),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    db.Column(
        "followed_id",
        db.String(36),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(
        db.String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    email = db.Column(db.String(255), unique=True, nullable=False)
    display_name = db.Column(db.String(100), nullable=True)
    photo_url = db.Column(db.String(500), nullable=True)
    bio = db.Column(db.Text, nullable=True)
    password_hash = db.Column(db.Text, nullable=False)
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    # Relationships
    quizzes = db.relationship(
        "Quiz",
        back_populates="creator",
        lazy="dynamic",
        cascade="all, delete-orphan",
        order_by="Quiz.created_at.desc()",
    )
    following = db.relationship(
        "User",
        secondary=follows,
        primaryjoin=lambda: User.id == follows.c.follower_id,
        secondaryjoin=lambda: User.id == follows.c.followed_id,
        backref=db.backref("followers", lazy="dynamic"),
        lazy="dynamic",
    )

    # ── password helpers ─────────────────────────────────────────────────────

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    # ── follow helpers ───────────────────────────────────────────────────────

    def is_following(self, other: "User") -> bool:
        return self.following.filter(User.id == other.id).count() > 0

    def follow(self, other: "User") -> None:
        if not self.is_following(other):
            self.following.append(other)

    def unfollow(self, other: "User") -> None:
        if self.is_following(other):
            self.following.remove(other)

    @property
    def name(self) -> str:
        return self.display_name or self.email.split("@")[0]

    def __repr__(self):
        return f"<User {self.email}>"
