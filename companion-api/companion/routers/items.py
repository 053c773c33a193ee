"""
Items router - item database browsing, farming checklist and ratings.
"""
import logging
import math
import uuid
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import case, or_
from sqlalchemy.orm import Session

from companion.core.policy import Action, enforce
from companion.deps import get_db, get_current_user
from companion.models.item import Item, RARITIES
from companion.models.user import User
from companion.schemas.item import (
    Difficulty,
    FarmingChecklistOut,
    FarmingItemOut,
    FilterOptionsOut,
    ItemCreateIn,
    ItemDetailOut,
    ItemListOut,
    ItemOut,
    ItemType,
    ItemUpdateIn,
    Rarity,
    RateIn,
    RateOut,
    RatingOut,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/items", tags=["items"])

SORT_COLUMNS = {
    "name": Item.name,
    "level": Item.level,
    "value": Item.value,
    "weight": Item.weight,
    # Tier order, not alphabetical
    "rarity": case({r: i for i, r in enumerate(RARITIES)}, value=Item.rarity),
    "created_at": Item.created_at,
}
LEVEL_WINDOW = 5

_REQUIRED_FIELDS = {"name", "type", "category", "rarity", "weight", "value", "effects", "craftable",
                    "materials", "locations", "drop_sources", "vendors", "farming_info", "source"}


def _contains_pattern(text: str) -> str:
    """LIKE pattern matching text literally; use with escape="\\"."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _get_item_or_404(db: Session, item_id: uuid.UUID) -> Item:
    item = db.get(Item, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")
    return item


# =====================================================
# READ
# =====================================================

@router.get("", response_model=ItemListOut)
def list_items(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=200),
    type: ItemType | None = Query(None),
    category: str | None = Query(None, description="Case-insensitive substring"),
    rarity: Rarity | None = Query(None),
    level: int | None = Query(None, ge=1, le=50, description="Matches items within +/-5 levels"),
    search: str | None = Query(None, description="Name or description"),
    sort_by: Literal["name", "level", "value", "weight", "rarity", "created_at"] = Query("name"),
    sort_order: Literal["asc", "desc"] = Query("asc"),
    db: Session = Depends(get_db),
):
    """List items (with filters and pagination)."""
    query = db.query(Item)

    if type is not None:
        query = query.filter(Item.type == type)

    if category:
        query = query.filter(Item.category.ilike(_contains_pattern(category), escape="\\"))

    if rarity is not None:
        query = query.filter(Item.rarity == rarity)

    if level is not None:
        query = query.filter(Item.level.between(level - LEVEL_WINDOW, level + LEVEL_WINDOW))

    if search:
        pattern = _contains_pattern(search)
        query = query.filter(or_(
            Item.name.ilike(pattern, escape="\\"),
            Item.description.ilike(pattern, escape="\\"),
        ))

    total = query.count()

    column = SORT_COLUMNS[sort_by]
    order = column.desc() if sort_order == "desc" else column.asc()
    items = query.order_by(order, Item.id).offset((page - 1) * limit).limit(limit).all()

    return ItemListOut(
        items=[ItemOut.model_validate(i) for i in items],
        total_pages=math.ceil(total / limit),
        current_page=page,
        total=total,
    )


@router.get("/meta/filters", response_model=FilterOptionsOut)
def filter_options(db: Session = Depends(get_db)):
    types = [t for (t,) in db.query(Item.type).distinct().all()]
    categories = [c for (c,) in db.query(Item.category).distinct().all()]
    return FilterOptionsOut(
        types=sorted(types),
        categories=sorted(categories),
        rarities=list(RARITIES),
    )


@router.get("/farming/checklist", response_model=FarmingChecklistOut)
def farming_checklist(
    difficulty: Difficulty | None = Query(None),
    renewable: bool = Query(True),
    db: Session = Depends(get_db),
):
    """Items worth farming, sorted by name. Renewable items unless renewable=false."""
    # farming_info is a JSON document, filtered after load
    items = db.query(Item).order_by(Item.name).all()
    checklist = [
        item for item in items
        if bool(item.farming_info.get("renewable", True)) == renewable
        and (difficulty is None or item.farming_info.get("difficulty", "medium") == difficulty)
    ]
    return FarmingChecklistOut(items=[FarmingItemOut.model_validate(i) for i in checklist])


@router.get("/{item_id}", response_model=ItemDetailOut)
def get_item(item_id: uuid.UUID, db: Session = Depends(get_db)):
    item = _get_item_or_404(db, item_id)

    rater_ids = [uuid.UUID(r["user"]) for r in item.user_ratings]
    names = {}
    if rater_ids:
        names = {str(u.id): u.username for u in db.query(User).filter(User.id.in_(rater_ids)).all()}

    return ItemDetailOut(
        **ItemOut.model_validate(item).model_dump(),
        user_ratings=[
            RatingOut(user=r["user"], username=names.get(r["user"]), rating=r["rating"])
            for r in item.user_ratings
        ],
    )


# =====================================================
# WRITE
# =====================================================

@router.post("", response_model=ItemOut, status_code=201)
def create_item(
    payload: ItemCreateIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    enforce(user, Action.CREATE_ITEM)

    if db.query(Item).filter(Item.name == payload.name).first():
        raise HTTPException(status_code=400, detail="Item name already used")

    item = Item(**payload.model_dump())
    db.add(item)
    db.commit()
    db.refresh(item)

    logger.info(f"[Items] {user.username} created item {item.name}")
    return item


@router.put("/{item_id}", response_model=ItemOut)
def update_item(
    item_id: uuid.UUID,
    payload: ItemUpdateIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    enforce(user, Action.UPDATE_ITEM)
    item = _get_item_or_404(db, item_id)

    updates = payload.model_dump(exclude_unset=True)
    if updates.get("name") and updates["name"] != item.name:
        if db.query(Item).filter(Item.name == updates["name"]).first():
            raise HTTPException(status_code=400, detail="Item name already used")

    for field, value in updates.items():
        if value is None and field in _REQUIRED_FIELDS:
            continue
        setattr(item, field, value)

    db.commit()
    db.refresh(item)
    return item


@router.post("/{item_id}/rate", response_model=RateOut)
def rate_item(
    item_id: uuid.UUID,
    payload: RateIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Rate an item 1-5. A second rating from the same user replaces the first."""
    item = _get_item_or_404(db, item_id)
    enforce(user, Action.RATE_ITEM)

    user_key = str(user.id)
    ratings = [r for r in item.user_ratings if r["user"] != user_key]
    ratings.append({"user": user_key, "rating": payload.rating})
    item.user_ratings = ratings

    db.commit()
    db.refresh(item)

    return RateOut(message="Rating added successfully", average_rating=item.average_rating)
