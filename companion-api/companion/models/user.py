import uuid
from datetime import datetime
from sqlalchemy import JSON, String, DateTime, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column
from companion.core.db import Base

ROLES = ("guest", "user", "admin")


def default_profile() -> dict:
    return {
        "level": 1,
        "platform": "PC",
        "playtime": 0,
        "favorite_builds": [],
        "completed_quests": [],
        "farming_progress": [],
    }


def default_preferences() -> dict:
    return {"theme": "classic", "notifications": True, "public_profile": True}


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    username: Mapped[str] = mapped_column(String(30), unique=True, index=True, nullable=False)
    # Guests and OAuth-only accounts have no password
    password_hash: Mapped[str | None] = mapped_column(String, nullable=True)
    avatar: Mapped[str] = mapped_column(String, default="", nullable=False)
    role: Mapped[str] = mapped_column(String(16), default="user", nullable=False)

    google_id: Mapped[str | None] = mapped_column(String, unique=True, nullable=True)
    discord_id: Mapped[str | None] = mapped_column(String, unique=True, nullable=True)

    profile: Mapped[dict] = mapped_column(JSON, default=default_profile, nullable=False)
    preferences: Mapped[dict] = mapped_column(JSON, default=default_preferences, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    @property
    def is_guest(self) -> bool:
        return self.role == "guest"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
