import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Float, Integer, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from companion.core.db import Base

ITEM_TYPES = (
    "weapon", "armor", "aid", "misc", "junk", "ammo", "mod", "plan",
    "apparel", "consumable", "holotape", "note", "key", "powerarmor",
)
# Ordered lowest to highest
RARITIES = ("common", "uncommon", "rare", "epic", "legendary")
FARMING_DIFFICULTIES = ("easy", "medium", "hard", "very_hard")
ITEM_SOURCES = ("wiki", "manual", "api", "community")


def default_farming_info() -> dict:
    return {"renewable": True, "respawn_time": None, "difficulty": "medium", "notes": None}


class Item(Base):
    """
    Game item catalog (weapons, armor, aid, junk, plans...).
    Nested blocks (stats, effects, vendors, farming info, ratings) are JSON documents.
    """
    __tablename__ = "items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    subcategory: Mapped[str | None] = mapped_column(String(100))
    description: Mapped[str | None] = mapped_column(Text)

    rarity: Mapped[str] = mapped_column(String(16), default="common", nullable=False, index=True)
    level: Mapped[int | None] = mapped_column(Integer, comment="1-50")
    weight: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    value: Mapped[float] = mapped_column(Float, default=0, nullable=False)

    weapon_stats: Mapped[dict | None] = mapped_column(JSON)
    armor_stats: Mapped[dict | None] = mapped_column(JSON)
    effects: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    craftable: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    materials: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    workbench: Mapped[str | None] = mapped_column(String(100))

    locations: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    drop_sources: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    vendors: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    wiki_url: Mapped[str | None] = mapped_column(String(500))
    image_url: Mapped[str | None] = mapped_column(String(500))

    farming_info: Mapped[dict] = mapped_column(JSON, default=default_farming_info, nullable=False)

    popularity: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # [{"user": "<uuid>", "rating": 1-5}]
    user_ratings: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    source: Mapped[str] = mapped_column(String(16), default="manual", nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    @property
    def average_rating(self) -> float:
        if not self.user_ratings:
            return 0
        total = sum(r["rating"] for r in self.user_ratings)
        return round(total / len(self.user_ratings), 1)
