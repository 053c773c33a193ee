"""
In-process game knowledge used to ground assistant answers.

- Snapshot: immutable copy of all items and public builds
- KnowledgeBase: owns the current snapshot, loads it lazily, swaps it on refresh
- search(): case-insensitive substring filter over a snapshot
- format_context(): renders matched records as a prompt block

The snapshot is not kept in sync with the database. Writes made after it was
loaded stay invisible to the assistant until refresh() is called.
"""
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from companion.models.build import Build
from companion.models.item import Item

logger = logging.getLogger(__name__)

MAX_ITEMS = 10
MAX_BUILDS = 5


@dataclass(frozen=True)
class ItemRecord:
    name: str
    type: str
    category: str
    description: str | None = None
    effects: tuple = ()
    locations: tuple[str, ...] = ()


@dataclass(frozen=True)
class BuildRecord:
    name: str
    build_type: str
    description: str | None = None
    play_style: str | None = None
    special: tuple = ()
    perks: tuple = ()


@dataclass(frozen=True)
class Snapshot:
    items: tuple[ItemRecord, ...] = ()
    builds: tuple[BuildRecord, ...] = ()
    # Excluded from equality so two loads of unchanged data compare equal
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc), compare=False)


@dataclass(frozen=True)
class Matches:
    items: tuple[ItemRecord, ...] = ()
    builds: tuple[BuildRecord, ...] = ()


def _freeze(value):
    if isinstance(value, dict):
        return tuple(sorted((k, _freeze(v)) for k, v in value.items()))
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def load_snapshot(db: Session) -> Snapshot:
    # No ORDER BY: records keep the store's natural order
    items = tuple(
        ItemRecord(
            name=item.name,
            type=item.type,
            category=item.category,
            description=item.description,
            effects=_freeze(item.effects or []),
            locations=tuple(item.locations or []),
        )
        for item in db.query(Item).all()
    )
    builds = tuple(
        BuildRecord(
            name=build.name,
            build_type=build.build_type,
            description=build.description,
            play_style=build.play_style,
            special=_freeze(build.special or {}),
            perks=_freeze(build.perks or []),
        )
        for build in db.query(Build).filter(Build.is_public.is_(True)).all()
    )
    return Snapshot(items=items, builds=builds)


class KnowledgeBase:
    """Holds the current snapshot reference. Readers never see a partial snapshot."""

    def __init__(self, loader=load_snapshot):
        self._loader = loader
        self._snapshot: Snapshot | None = None
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._snapshot is not None

    def snapshot(self, db: Session) -> Snapshot:
        current = self._snapshot
        if current is not None:
            return current
        with self._lock:
            if self._snapshot is None:
                self._snapshot = self._loader(db)
                logger.info(
                    f"[Knowledge] Snapshot loaded: {len(self._snapshot.items)} items, "
                    f"{len(self._snapshot.builds)} builds"
                )
            return self._snapshot

    def refresh(self, db: Session) -> Snapshot:
        fresh = self._loader(db)
        with self._lock:
            self._snapshot = fresh
        logger.info(f"[Knowledge] Snapshot refreshed: {len(fresh.items)} items, {len(fresh.builds)} builds")
        return fresh


def _contains(value: str | None, needle: str) -> bool:
    return value is not None and needle in value.lower()


def search(query: str, snapshot: Snapshot) -> Matches:
    needle = (query or "").strip().lower()
    if not needle:
        return Matches()

    items = [
        item for item in snapshot.items
        if _contains(item.name, needle)
        or _contains(item.description, needle)
        or _contains(item.type, needle)
        or _contains(item.category, needle)
    ][:MAX_ITEMS]

    builds = [
        build for build in snapshot.builds
        if _contains(build.name, needle)
        or _contains(build.description, needle)
        or _contains(build.build_type, needle)
        or _contains(build.play_style, needle)
    ][:MAX_BUILDS]

    return Matches(items=tuple(items), builds=tuple(builds))


def format_context(matches: Matches) -> str:
    lines = ["Here's relevant Fallout 76 game data:", ""]

    if matches.items:
        lines.append("ITEMS:")
        for item in matches.items:
            lines.append(f"- {item.name} ({item.type}/{item.category}): {item.description or 'No description'}")
            if item.locations:
                lines.append(f"  Locations: {', '.join(item.locations)}")
        lines.append("")

    if matches.builds:
        lines.append("BUILDS:")
        for build in matches.builds:
            lines.append(
                f"- {build.name} ({build.build_type}/{build.play_style}): {build.description or 'No description'}"
            )
        lines.append("")

    return "\n".join(lines) + "\n"
