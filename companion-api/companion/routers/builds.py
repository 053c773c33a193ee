"""
Builds router - community character builds (CRUD, likes, comments).
"""
import logging
import math
import uuid
from datetime import datetime, timezone
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from companion.core.policy import Action, enforce
from companion.deps import get_db, get_current_user
from companion.models.build import Build
from companion.models.user import User
from companion.schemas.build import (
    AuthorOut,
    BuildCreateIn,
    BuildListOut,
    BuildOut,
    BuildType,
    BuildUpdateIn,
    CommentIn,
    CommentOut,
    CommentsOut,
    LikeOut,
    PlayStyle,
)
from companion.schemas.user import MessageOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/builds", tags=["builds"])

SORT_COLUMNS = {
    "created_at": Build.created_at,
    "updated_at": Build.updated_at,
    "level": Build.level,
    "views": Build.views,
    "name": Build.name,
    "likes": func.json_array_length(Build.likes),
}
LEVEL_WINDOW = 10

# Columns that can't be cleared through an update
_REQUIRED_FIELDS = {"name", "level", "build_type", "special", "perks", "equipment", "tags", "is_public",
                    "version", "game_version"}


def _get_build_or_404(db: Session, build_id: uuid.UUID) -> Build:
    build = db.get(Build, build_id)
    if not build:
        raise HTTPException(status_code=404, detail="Build not found")
    return build


def _matches_search(build: Build, needle: str) -> bool:
    fields = [build.name, build.description or "", *(build.tags or [])]
    return any(needle in str(f).lower() for f in fields)


def _authors_by_id(db: Session, builds: list[Build]) -> dict[str, User]:
    ids = {c["author"] for b in builds for c in (b.comments or []) if c.get("author")}
    if not ids:
        return {}
    users = db.query(User).filter(User.id.in_([uuid.UUID(i) for i in ids])).all()
    return {str(u.id): u for u in users}


def _comment_out(comment: dict, authors: dict[str, User]) -> CommentOut:
    author = authors.get(comment.get("author"))
    return CommentOut(
        id=comment["id"],
        author=AuthorOut.model_validate(author) if author else None,
        content=comment["content"],
        created_at=comment["created_at"],
    )


def _build_out(build: Build, authors: dict[str, User]) -> BuildOut:
    return BuildOut(
        id=build.id,
        name=build.name,
        description=build.description,
        author=AuthorOut.model_validate(build.author),
        level=build.level,
        special=build.special,
        perks=build.perks,
        equipment=build.equipment,
        build_type=build.build_type,
        play_style=build.play_style,
        tags=build.tags,
        is_public=build.is_public,
        likes=build.likes,
        like_count=len(build.likes),
        views=build.views,
        comments=[_comment_out(c, authors) for c in build.comments],
        version=build.version,
        game_version=build.game_version,
        created_at=build.created_at,
        updated_at=build.updated_at,
    )


def _serialize(db: Session, builds: list[Build]) -> list[BuildOut]:
    authors = _authors_by_id(db, builds)
    return [_build_out(b, authors) for b in builds]


# =====================================================
# READ
# =====================================================

@router.get("", response_model=BuildListOut)
def list_builds(
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    build_type: BuildType | None = Query(None),
    play_style: PlayStyle | None = Query(None),
    level: int | None = Query(None, ge=1, le=1000, description="Matches builds within +/-10 levels"),
    search: str | None = Query(None, description="Name, description or tag"),
    sort_by: Literal["created_at", "updated_at", "level", "views", "name", "likes"] = Query("created_at"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
    db: Session = Depends(get_db),
):
    """List public builds (with filters and pagination)."""
    query = db.query(Build).filter(Build.is_public.is_(True))

    if build_type is not None:
        query = query.filter(Build.build_type == build_type)

    if play_style is not None:
        query = query.filter(Build.play_style == play_style)

    if level is not None:
        query = query.filter(Build.level.between(level - LEVEL_WINDOW, level + LEVEL_WINDOW))

    column = SORT_COLUMNS[sort_by]
    order = column.desc() if sort_order == "desc" else column.asc()
    query = query.order_by(order, Build.id)

    if search:
        # tags is a JSON list: match each tag, filtered after load
        matched = [b for b in query.all() if _matches_search(b, search.lower())]
        total = len(matched)
        builds = matched[(page - 1) * limit:page * limit]
    else:
        total = query.count()
        builds = query.offset((page - 1) * limit).limit(limit).all()

    return BuildListOut(
        builds=_serialize(db, builds),
        total_pages=math.ceil(total / limit),
        current_page=page,
        total=total,
    )


@router.get("/my-builds", response_model=list[BuildOut])
def list_my_builds(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    builds = (
        db.query(Build)
        .filter(Build.author_id == user.id)
        .order_by(Build.created_at.desc())
        .all()
    )
    return _serialize(db, builds)


@router.get("/{build_id}", response_model=BuildOut)
def get_build(build_id: uuid.UUID, db: Session = Depends(get_db)):
    build = _get_build_or_404(db, build_id)

    build.views += 1
    db.commit()
    db.refresh(build)

    return _serialize(db, [build])[0]


# =====================================================
# WRITE
# =====================================================

@router.post("", response_model=BuildOut, status_code=201)
def create_build(
    payload: BuildCreateIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    enforce(user, Action.CREATE_BUILD)

    build = Build(author_id=user.id, **payload.model_dump())
    db.add(build)
    db.commit()
    db.refresh(build)

    logger.info(f"[Builds] {user.username} created build {build.id}")
    return _serialize(db, [build])[0]


@router.put("/{build_id}", response_model=BuildOut)
def update_build(
    build_id: uuid.UUID,
    payload: BuildUpdateIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    build = _get_build_or_404(db, build_id)
    enforce(user, Action.UPDATE_BUILD, owner_id=build.author_id)

    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field in _REQUIRED_FIELDS:
            continue
        setattr(build, field, value)

    db.commit()
    db.refresh(build)
    return _serialize(db, [build])[0]


@router.delete("/{build_id}", response_model=MessageOut)
def delete_build(
    build_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    build = _get_build_or_404(db, build_id)
    enforce(user, Action.DELETE_BUILD, owner_id=build.author_id)

    db.delete(build)
    db.commit()

    logger.info(f"[Builds] {user.username} deleted build {build_id}")
    return MessageOut(message="Build deleted successfully")


@router.post("/{build_id}/like", response_model=LikeOut)
def toggle_like(
    build_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Like the build, or remove the like if this user already liked it."""
    build = _get_build_or_404(db, build_id)
    enforce(user, Action.LIKE_BUILD)

    user_key = str(user.id)
    liked = user_key not in build.likes
    if liked:
        build.likes = [*build.likes, user_key]
    else:
        build.likes = [uid for uid in build.likes if uid != user_key]

    db.commit()

    return LikeOut(
        message="Build liked" if liked else "Build unliked",
        liked=liked,
        likes=len(build.likes),
    )


@router.post("/{build_id}/comments", response_model=CommentsOut, status_code=201)
def add_comment(
    build_id: uuid.UUID,
    payload: CommentIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    build = _get_build_or_404(db, build_id)
    enforce(user, Action.COMMENT_BUILD)

    comment = {
        "id": str(uuid.uuid4()),
        "author": str(user.id),
        "content": payload.content,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    build.comments = [*build.comments, comment]
    db.commit()
    db.refresh(build)

    authors = _authors_by_id(db, [build])
    return CommentsOut(
        message="Comment added successfully",
        comments=[_comment_out(c, authors) for c in build.comments],
    )
