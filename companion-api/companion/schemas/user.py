from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

Platform = Literal["PC", "PlayStation", "Xbox"]
Theme = Literal["classic", "amber", "blue"]


class FarmingProgressEntry(BaseModel):
    item: str
    collected: int = 0
    target: int = 1
    completed: bool = False


class ProfileData(BaseModel):
    level: int = 1
    platform: Platform = "PC"
    playtime: int = 0
    favorite_builds: list[UUID] = []
    completed_quests: list[str] = []
    farming_progress: list[FarmingProgressEntry] = []


class PreferencesData(BaseModel):
    theme: Theme = "classic"
    notifications: bool = True
    public_profile: bool = True


class UserOut(BaseModel):
    """Never carries the password hash or OAuth ids."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    # Plain str: guest addresses live under a .local domain
    email: str
    avatar: str = ""
    role: str
    profile: ProfileData
    preferences: PreferencesData
    created_at: datetime


# ===== Profile =====

class FavoriteBuildOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    build_type: str
    play_style: str | None
    level: int


class ProfileOut(UserOut):
    build_count: int
    favorite_builds: list[FavoriteBuildOut]


class ProfilePatchIn(BaseModel):
    level: int | None = Field(default=None, ge=1, le=1000)
    platform: Platform | None = None
    playtime: int | None = Field(default=None, ge=0)
    completed_quests: list[str] | None = None


class PreferencesPatchIn(BaseModel):
    theme: Theme | None = None
    notifications: bool | None = None
    public_profile: bool | None = None


class ProfileUpdateIn(BaseModel):
    profile: ProfilePatchIn | None = None
    preferences: PreferencesPatchIn | None = None


# ===== Farming progress =====

class FarmingProgressIn(BaseModel):
    item: str = Field(min_length=1, max_length=200)
    collected: int = Field(ge=0)
    target: int = Field(ge=1)

    @field_validator("item")
    @classmethod
    def strip_item(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("item cannot be empty")
        return v


class FarmingProgressOut(BaseModel):
    progress: list[FarmingProgressEntry]


# ===== Public profile =====

class PublicBuildOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    build_type: str
    play_style: str | None
    level: int
    like_count: int
    views: int
    created_at: datetime


class PublicUserOut(BaseModel):
    id: UUID
    username: str
    avatar: str
    level: int
    platform: str
    playtime: int
    build_count: int


class PublicProfileOut(BaseModel):
    user: PublicUserOut
    recent_builds: list[PublicBuildOut]


class MessageOut(BaseModel):
    message: str
