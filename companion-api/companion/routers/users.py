import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from companion.core.policy import Action, enforce
from companion.deps import get_current_user, get_db
from companion.models.build import Build
from companion.models.user import User
from companion.schemas.user import (
    FarmingProgressIn,
    FarmingProgressOut,
    FavoriteBuildOut,
    MessageOut,
    ProfileOut,
    ProfileUpdateIn,
    PublicBuildOut,
    PublicProfileOut,
    PublicUserOut,
    UserOut,
)

router = APIRouter(prefix="/users", tags=["users"])

RECENT_PUBLIC_BUILDS = 10


def _profile_out(db: Session, user: User) -> ProfileOut:
    favorite_ids = [uuid.UUID(b) for b in user.profile.get("favorite_builds", [])]
    favorites = []
    if favorite_ids:
        favorites = db.query(Build).filter(Build.id.in_(favorite_ids)).all()

    build_count = db.query(Build).filter(Build.author_id == user.id).count()

    return ProfileOut(
        **UserOut.model_validate(user).model_dump(),
        build_count=build_count,
        favorite_builds=[FavoriteBuildOut.model_validate(b) for b in favorites],
    )


# ===== Profile =====

@router.get("/profile", response_model=ProfileOut)
def get_profile(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return _profile_out(db, user)


@router.put("/profile", response_model=ProfileOut)
def update_profile(
    payload: ProfileUpdateIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    enforce(user, Action.UPDATE_OWN_PROFILE)

    # Only update fields that are provided
    if payload.profile is not None:
        user.profile = {**user.profile, **payload.profile.model_dump(exclude_none=True)}
    if payload.preferences is not None:
        user.preferences = {**user.preferences, **payload.preferences.model_dump(exclude_none=True)}

    db.commit()
    db.refresh(user)
    return _profile_out(db, user)


# ===== Favorites =====

@router.post("/favorites/{build_id}", response_model=MessageOut)
def add_favorite(
    build_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    enforce(user, Action.UPDATE_OWN_PROFILE)

    if not db.get(Build, build_id):
        raise HTTPException(status_code=404, detail="Build not found")

    favorites = user.profile.get("favorite_builds", [])
    if str(build_id) in favorites:
        raise HTTPException(status_code=400, detail="Build already in favorites")

    user.profile = {**user.profile, "favorite_builds": [*favorites, str(build_id)]}
    db.commit()
    return MessageOut(message="Build added to favorites")


@router.delete("/favorites/{build_id}", response_model=MessageOut)
def remove_favorite(
    build_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    enforce(user, Action.UPDATE_OWN_PROFILE)

    favorites = user.profile.get("favorite_builds", [])
    user.profile = {**user.profile, "favorite_builds": [b for b in favorites if b != str(build_id)]}
    db.commit()
    return MessageOut(message="Build removed from favorites")


# ===== Farming progress =====

@router.get("/farming-progress", response_model=FarmingProgressOut)
def get_farming_progress(user: User = Depends(get_current_user)):
    return FarmingProgressOut(progress=user.profile.get("farming_progress", []))


@router.put("/farming-progress", response_model=FarmingProgressOut)
def update_farming_progress(
    payload: FarmingProgressIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Upsert the counter for one item; completed once collected reaches target."""
    enforce(user, Action.UPDATE_OWN_PROFILE)

    entry = {
        "item": payload.item,
        "collected": payload.collected,
        "target": payload.target,
        "completed": payload.collected >= payload.target,
    }

    progress = list(user.profile.get("farming_progress", []))
    for i, existing in enumerate(progress):
        if existing["item"] == payload.item:
            progress[i] = entry
            break
    else:
        progress.append(entry)

    user.profile = {**user.profile, "farming_progress": progress}
    db.commit()
    db.refresh(user)
    return FarmingProgressOut(progress=user.profile["farming_progress"])


# ===== Public profile =====

@router.get("/{user_id}/public", response_model=PublicProfileOut)
def get_public_profile(user_id: uuid.UUID, db: Session = Depends(get_db)):
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    if not user.preferences.get("public_profile", True):
        raise HTTPException(status_code=403, detail="Profile is private")

    public_builds = db.query(Build).filter(Build.author_id == user.id, Build.is_public.is_(True))
    recent = public_builds.order_by(Build.created_at.desc()).limit(RECENT_PUBLIC_BUILDS).all()

    return PublicProfileOut(
        user=PublicUserOut(
            id=user.id,
            username=user.username,
            avatar=user.avatar,
            level=user.profile.get("level", 1),
            platform=user.profile.get("platform", "PC"),
            playtime=user.profile.get("playtime", 0),
            build_count=public_builds.count(),
        ),
        recent_builds=[
            PublicBuildOut(
                id=b.id,
                name=b.name,
                build_type=b.build_type,
                play_style=b.play_style,
                level=b.level,
                like_count=len(b.likes),
                views=b.views,
                created_at=b.created_at,
            )
            for b in recent
        ],
    )
