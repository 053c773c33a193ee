"""
Seed the item catalog with starter Fallout 76 items.
Run this script from the project root: python scripts/seed_items.py [items.json]

Without an argument the built-in STARTER_ITEMS list is used. Items whose name
already exists are skipped, so the script can be re-run safely.
"""
import json
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'companion-api'))

from pydantic import ValidationError

from companion import models  # noqa: F401
from companion.core.db import Base, SessionLocal, engine
from companion.models.item import Item
from companion.schemas.item import ItemCreateIn

# Format: (name, type, category, rarity, description, locations, renewable, difficulty)
STARTER_ITEMS = [
    # === AID ===
    ('Stimpak', 'aid', 'Medicine', 'common', 'Restores a portion of lost health.',
     ['Vault 76', 'Flatwoods'], True, 'easy'),
    ('RadAway', 'aid', 'Medicine', 'common', 'Removes accumulated radiation damage.',
     ['Morgantown Airport'], True, 'easy'),
    ('Rad-X', 'aid', 'Medicine', 'uncommon', 'Temporarily increases radiation resistance.',
     ['Charleston Fire Department'], True, 'medium'),

    # === JUNK ===
    ('Lead', 'junk', 'Crafting Material', 'common', 'Used to craft ammunition and weights.',
     ['Lakeside Cabins', 'Hemlock Holes'], True, 'easy'),
    ('Ultracite', 'junk', 'Crafting Material', 'rare', 'Used to craft Ultracite ammo and power armor.',
     ['Blood Eagle Outpost'], True, 'hard'),
    ('Fluorescent Flux', 'junk', 'Flux', 'rare', 'Harvested from nuked flora, stabilized with Hardened Mass.',
     ['Nuke zones'], True, 'very_hard'),

    # === WEAPONS ===
    ('Gauss Rifle', 'weapon', 'Rifle', 'epic', 'Electromagnetic rifle that charges shots for extra damage.',
     ['Enclave Bunker'], False, 'hard'),
    ('Super Sledge', 'weapon', 'Two-Handed Melee', 'rare', 'Rocket-powered sledgehammer.',
     ['Watoga'], False, 'medium'),

    # === PLANS ===
    ('Plan: T-65 Power Armor Helmet', 'plan', 'Power Armor Plan', 'legendary', 'Teaches the T-65 helmet recipe.',
     ['Fort Atlas'], False, 'very_hard'),
]


def _starter_payloads():
    for name, type_, category, rarity, description, locations, renewable, difficulty in STARTER_ITEMS:
        yield {
            'name': name,
            'type': type_,
            'category': category,
            'rarity': rarity,
            'description': description,
            'locations': locations,
            'farming_info': {'renewable': renewable, 'difficulty': difficulty},
            'source': 'manual',
        }


def _file_payloads(path):
    with open(path, encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise SystemExit(f"{path}: expected a JSON list of items")
    return data


def seed_items(path=None):
    """Insert items that aren't in the catalog yet."""
    print("Creating tables if needed...")
    Base.metadata.create_all(bind=engine)

    payloads = list(_file_payloads(path) if path else _starter_payloads())

    db = SessionLocal()
    created = 0
    skipped = 0
    try:
        existing = {name for (name,) in db.query(Item.name).all()}
        print(f"Current items in database: {len(existing)}")

        for raw in payloads:
            try:
                payload = ItemCreateIn.model_validate(raw)
            except ValidationError as e:
                print(f"  INVALID: {raw.get('name', '?')} - {e.error_count()} error(s)")
                skipped += 1
                continue

            if payload.name in existing:
                print(f"  SKIP: {payload.name} - already exists")
                skipped += 1
                continue

            db.add(Item(**payload.model_dump()))
            existing.add(payload.name)
            created += 1
            print(f"  OK: {payload.name} ({payload.type}/{payload.category})")

        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

    # Summary
    print(f"\n=== Summary ===")
    print(f"Created: {created} items")
    print(f"Skipped: {skipped} items")
    print("\nDone! Call POST /chat/refresh-data so the assistant sees the new items.")
    return created


if __name__ == '__main__':
    seed_items(sys.argv[1] if len(sys.argv) > 1 else None)
