"""
Item catalog schemas
"""
from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

ItemType = Literal[
    "weapon", "armor", "aid", "misc", "junk", "ammo", "mod", "plan",
    "apparel", "consumable", "holotape", "note", "key", "powerarmor",
]
Rarity = Literal["common", "uncommon", "rare", "epic", "legendary"]
Difficulty = Literal["easy", "medium", "hard", "very_hard"]
Source = Literal["wiki", "manual", "api", "community"]


class WeaponStats(BaseModel):
    damage: float | None = None
    fire_rate: float | None = None
    range: float | None = None
    accuracy: float | None = None
    ammo_type: str | None = None
    ammo_capacity: int | None = None


class ArmorStats(BaseModel):
    damage_resist: float | None = None
    energy_resist: float | None = None
    radiation_resist: float | None = None
    durability: float | None = None


class Effect(BaseModel):
    type: str | None = None
    value: float | None = None
    duration: float | None = None
    description: str | None = None


class Material(BaseModel):
    name: str
    quantity: int = 1


class Vendor(BaseModel):
    name: str
    price: float | None = None
    currency: str | None = None


class FarmingInfo(BaseModel):
    renewable: bool = True
    respawn_time: str | None = None
    difficulty: Difficulty = "medium"
    notes: str | None = None


class ItemCreateIn(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    type: ItemType
    category: str = Field(min_length=1, max_length=100)
    subcategory: str | None = None
    description: str | None = None
    rarity: Rarity = "common"
    level: int | None = Field(default=None, ge=1, le=50)
    weight: float = 0
    value: float = 0
    weapon_stats: WeaponStats | None = None
    armor_stats: ArmorStats | None = None
    effects: list[Effect] = []
    craftable: bool = False
    materials: list[Material] = []
    workbench: str | None = None
    locations: list[str] = []
    drop_sources: list[str] = []
    vendors: list[Vendor] = []
    wiki_url: str | None = None
    image_url: str | None = None
    farming_info: FarmingInfo = FarmingInfo()
    source: Source = "manual"


class ItemUpdateIn(BaseModel):
    # None = not provided
    name: str | None = Field(default=None, min_length=1, max_length=200)
    type: ItemType | None = None
    category: str | None = Field(default=None, min_length=1, max_length=100)
    subcategory: str | None = None
    description: str | None = None
    rarity: Rarity | None = None
    level: int | None = Field(default=None, ge=1, le=50)
    weight: float | None = None
    value: float | None = None
    weapon_stats: WeaponStats | None = None
    armor_stats: ArmorStats | None = None
    effects: list[Effect] | None = None
    craftable: bool | None = None
    materials: list[Material] | None = None
    workbench: str | None = None
    locations: list[str] | None = None
    drop_sources: list[str] | None = None
    vendors: list[Vendor] | None = None
    wiki_url: str | None = None
    image_url: str | None = None
    farming_info: FarmingInfo | None = None
    source: Source | None = None


class RatingOut(BaseModel):
    user: UUID
    username: str | None = None
    rating: int


class ItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    type: str
    category: str
    subcategory: str | None
    description: str | None
    rarity: str
    level: int | None
    weight: float
    value: float
    weapon_stats: WeaponStats | None
    armor_stats: ArmorStats | None
    effects: list[Effect]
    craftable: bool
    materials: list[Material]
    workbench: str | None
    locations: list[str]
    drop_sources: list[str]
    vendors: list[Vendor]
    wiki_url: str | None
    image_url: str | None
    farming_info: FarmingInfo
    popularity: int
    source: str
    average_rating: float
    created_at: datetime
    updated_at: datetime


class ItemDetailOut(ItemOut):
    user_ratings: list[RatingOut]


class ItemListOut(BaseModel):
    items: list[ItemOut]
    total_pages: int
    current_page: int
    total: int


class FarmingItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    type: str
    category: str
    rarity: str
    farming_info: FarmingInfo
    locations: list[str]
    image_url: str | None


class FarmingChecklistOut(BaseModel):
    items: list[FarmingItemOut]


class RateIn(BaseModel):
    rating: int = Field(ge=1, le=5)


class RateOut(BaseModel):
    message: str
    average_rating: float


class FilterOptionsOut(BaseModel):
    types: list[str]
    categories: list[str]
    rarities: list[str]
