"""Roster import and export.

Supports:
1. JSON in the exported roster shape (one object per champion)
2. A flat CSV, one row per champion
3. Writing the roster back out as JSON

Entries referencing an unknown champion are skipped and counted; unknown legacy
pieces are dropped from the entry.
"""

import json
import logging
import os

import pandas as pd

import config
from models.champion import Champion, GearLoadout, LegacyPiece
from models.reference import ReferenceData
from optimizer.roster import build_champion

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["champion_id", "star_color_tier", "force_level", *config.GEAR_SLOTS,
               "legacy_piece_id", "legacy_star_color_tier"]


def resolve_legacy_piece(reference: ReferenceData, piece_id, star_color_tier) -> LegacyPiece | None:
    if not piece_id:
        return None
    definition = reference.legacy_pieces.get(str(piece_id))
    if definition is None:
        logger.warning("Unknown legacy piece %r, dropping it from the entry", piece_id)
        return None
    return LegacyPiece(
        id=definition.id,
        name=definition.name,
        rarity=definition.base_rarity,
        star_color_tier=star_color_tier or "Unlocked",
        description=definition.description,
    )


def champion_from_record(record: dict, reference: ReferenceData) -> Champion | None:
    """Resolve one exported roster record against the reference data."""
    definition = reference.champions.get(str(record.get("dbChampionId")))
    if definition is None:
        return None

    legacy = record.get("legacyPiece") or {}
    return build_champion(
        definition,
        star_color_tier=record.get("starColorTier") or "Unlocked",
        force_level=int(record.get("forceLevel") or 0),
        gear=GearLoadout.from_mapping(record.get("gear")),
        legacy_piece=resolve_legacy_piece(reference, legacy.get("id"), legacy.get("starColorTier")),
    )


def champion_to_record(champion: Champion) -> dict:
    legacy = champion.legacy_piece
    return {
        "dbChampionId": champion.definition_id,
        "starColorTier": champion.star_color_tier,
        "forceLevel": champion.force_level,
        "gear": champion.gear.to_dict(),
        "legacyPiece": {
            "id": legacy.id if legacy else None,
            "starColorTier": legacy.star_color_tier if legacy else "Unlocked",
        },
    }


def load_roster_from_json(filepath: str, reference: ReferenceData) -> tuple[list[Champion], int]:
    """Load an exported roster.

    Returns:
        (roster, number of records skipped)
    """
    with open(filepath, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"Invalid roster format in {filepath}: expected a list")

    roster = []
    skipped = 0
    for record in data:
        champion = champion_from_record(record, reference)
        if champion is None:
            skipped += 1
            continue
        roster.append(champion)

    print(f"Loaded {len(roster)} champions from {filepath}")
    return roster, skipped


def load_roster_from_csv(filepath: str, reference: ReferenceData) -> tuple[list[Champion], int]:
    """Load a roster from a flat CSV.

    Expected columns: champion_id [, star_color_tier, force_level, head, arms,
    legs, chest, waist, legacy_piece_id, legacy_star_color_tier]
    """
    df = pd.read_csv(filepath, dtype=str).fillna("")
    if "champion_id" not in df.columns:
        raise ValueError(f"{filepath} has no champion_id column")

    roster = []
    skipped = 0
    for _, row in df.iterrows():
        record = {
            "dbChampionId": row["champion_id"].strip(),
            "starColorTier": row.get("star_color_tier", "").strip(),
            "forceLevel": row.get("force_level", "").strip() or 0,
            "gear": {slot: row.get(slot, "").strip() for slot in config.GEAR_SLOTS},
            "legacyPiece": {
                "id": row.get("legacy_piece_id", "").strip(),
                "starColorTier": row.get("legacy_star_color_tier", "").strip(),
            },
        }
        champion = champion_from_record(record, reference)
        if champion is None:
            skipped += 1
            continue
        roster.append(champion)

    print(f"Loaded {len(roster)} champions from {filepath}")
    return roster, skipped


def save_roster_to_json(roster: list[Champion], filepath: str):
    """Export the roster in the shape load_roster_from_json reads."""
    data = [champion_to_record(c) for c in roster]

    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    print(f"Saved roster to {filepath}")
