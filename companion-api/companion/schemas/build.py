from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

BuildType = Literal["PvP", "PvE", "Solo", "Team", "Stealth", "Tank", "DPS", "Support", "Hybrid"]
PlayStyle = Literal["Melee", "Ranged", "Heavy Weapons", "Energy Weapons", "Explosives", "Stealth", "Mixed"]
SpecialName = Literal["strength", "perception", "endurance", "charisma", "intelligence", "agility", "luck"]


# ═══════════════════════════════════════════════════════════
# BUILD DOCUMENT PARTS
# ═══════════════════════════════════════════════════════════

class Special(BaseModel):
    """SPECIAL statline, each attribute 1-15"""
    strength: int = Field(default=1, ge=1, le=15)
    perception: int = Field(default=1, ge=1, le=15)
    endurance: int = Field(default=1, ge=1, le=15)
    charisma: int = Field(default=1, ge=1, le=15)
    intelligence: int = Field(default=1, ge=1, le=15)
    agility: int = Field(default=1, ge=1, le=15)
    luck: int = Field(default=1, ge=1, le=15)


class Perk(BaseModel):
    name: str | None = None
    category: SpecialName | None = None
    rank: int | None = Field(default=None, ge=1, le=5)
    cost: int | None = None


class ArmorSlots(BaseModel):
    head: str | None = None
    chest: str | None = None
    left_arm: str | None = None
    right_arm: str | None = None
    left_leg: str | None = None
    right_leg: str | None = None


class PowerArmorSlots(ArmorSlots):
    frame: str | None = None


class Equipment(BaseModel):
    weapon1: str | None = None
    weapon2: str | None = None
    weapon3: str | None = None
    armor: ArmorSlots = ArmorSlots()
    power_armor: PowerArmorSlots = PowerArmorSlots()


# ═══════════════════════════════════════════════════════════
# INPUT
# ═══════════════════════════════════════════════════════════

class BuildCreateIn(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    level: int = Field(ge=1, le=1000)
    special: Special = Special()
    perks: list[Perk] = []
    equipment: Equipment = Equipment()
    build_type: BuildType
    play_style: PlayStyle | None = None
    tags: list[str] = []
    is_public: bool = True
    game_version: str = "current"

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class BuildUpdateIn(BaseModel):
    # None = not provided
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    level: int | None = Field(default=None, ge=1, le=1000)
    special: Special | None = None
    perks: list[Perk] | None = None
    equipment: Equipment | None = None
    build_type: BuildType | None = None
    play_style: PlayStyle | None = None
    tags: list[str] | None = None
    is_public: bool | None = None
    version: str | None = Field(default=None, max_length=16)
    game_version: str | None = Field(default=None, max_length=32)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class CommentIn(BaseModel):
    content: str = Field(min_length=1, max_length=500)

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("content cannot be empty")
        return v


# ═══════════════════════════════════════════════════════════
# OUTPUT
# ═══════════════════════════════════════════════════════════

class AuthorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    avatar: str = ""


class CommentOut(BaseModel):
    id: UUID
    author: AuthorOut | None
    content: str
    created_at: datetime


class BuildOut(BaseModel):
    id: UUID
    name: str
    description: str | None
    author: AuthorOut
    level: int
    special: Special
    perks: list[Perk]
    equipment: Equipment
    build_type: str
    play_style: str | None
    tags: list[str]
    is_public: bool
    likes: list[UUID]
    like_count: int
    views: int
    comments: list[CommentOut]
    version: str
    game_version: str
    created_at: datetime
    updated_at: datetime


class BuildListOut(BaseModel):
    builds: list[BuildOut]
    total_pages: int
    current_page: int
    total: int


class LikeOut(BaseModel):
    message: str
    liked: bool
    likes: int


class CommentsOut(BaseModel):
    message: str
    comments: list[CommentOut]
