import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from companion.core.db import Base

if TYPE_CHECKING:
    from .user import User

SPECIAL_STATS = ("strength", "perception", "endurance", "charisma", "intelligence", "agility", "luck")
BUILD_TYPES = ("PvP", "PvE", "Solo", "Team", "Stealth", "Tank", "DPS", "Support", "Hybrid")
PLAY_STYLES = ("Melee", "Ranged", "Heavy Weapons", "Energy Weapons", "Explosives", "Stealth", "Mixed")


def default_special() -> dict:
    return {stat: 1 for stat in SPECIAL_STATS}


class Build(Base):
    """
    User-authored character build: SPECIAL statline, perk cards and loadout.
    likes holds user ids as strings; comments hold {id, author, content, created_at}.
    """
    __tablename__ = "builds"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(String(500))
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    level: Mapped[int] = mapped_column(Integer, nullable=False)
    special: Mapped[dict] = mapped_column(JSON, default=default_special, nullable=False)
    perks: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    equipment: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)

    build_type: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    play_style: Mapped[str | None] = mapped_column(String(32), index=True)
    tags: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    is_public: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    likes: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    comments: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    version: Mapped[str] = mapped_column(String(16), default="1.0.0", nullable=False)
    game_version: Mapped[str] = mapped_column(String(32), default="current", nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    author: Mapped["User"] = relationship("User", lazy="joined")
