"""Reference data ingestion.

Loads the three read-only collections the optimizer needs (champions, synergies,
legacy pieces) from JSON files or over HTTP. Each collection is either a mapping
{id: record} or a list of records carrying an "id" field. Field names follow the
document store's camelCase shape; missing optional fields are defaulted here so
the scoring code never has to.
"""

import json
import os

import requests

import config
from models.reference import ChampionDefinition, LegacyPieceDefinition, ReferenceData
from models.synergy import BONUS_TYPES, FLAT, SynergyDefinition, SynergyTier

DATA_DIR = os.path.join(os.path.dirname(__file__), "..", "data", "raw")

COLLECTION_FILES = {
    "champions": "champions.json",
    "synergies": "synergies.json",
    "legacy_pieces": "legacy_pieces.json",
}


def parse_champion(champion_id: str, record: dict) -> ChampionDefinition:
    name = record.get("name")
    if not name:
        raise ValueError(f"Champion {champion_id!r} has no name")
    return ChampionDefinition(
        id=str(champion_id),
        name=name,
        base_rarity=record.get("baseRarity", "Epic"),
        champion_class=record.get("class") or config.NO_CLASS,
        is_healer=record.get("isHealer") is True,
        inherent_synergies=tuple(record.get("inherentSynergies") or ()),
        can_upgrade=bool(record.get("canUpgrade")),
        upgrade_synergy=record.get("upgradeSynergy") or None,
    )


def parse_synergy(synergy_id: str, record: dict) -> SynergyDefinition:
    name = record.get("name")
    if not name:
        raise ValueError(f"Synergy {synergy_id!r} has no name")

    bonus_type = record.get("bonusType", FLAT)
    if bonus_type not in BONUS_TYPES:
        raise ValueError(f"Synergy {name!r} has unknown bonus type {bonus_type!r}")

    tiers = []
    for tier in record.get("tiers") or []:
        tiers.append(SynergyTier(
            count_required=int(tier.get("countRequired", 0)),
            description=tier.get("tierDescription") or tier.get("description") or "",
        ))

    return SynergyDefinition(
        id=str(synergy_id),
        name=name,
        bonus_type=bonus_type,
        bonus_value=float(record.get("bonusValue") or 0),
        description=record.get("description") or "",
        tiers=tuple(tiers),
    )


def parse_legacy_piece(piece_id: str, record: dict) -> LegacyPieceDefinition:
    name = record.get("name")
    if not name:
        raise ValueError(f"Legacy piece {piece_id!r} has no name")
    return LegacyPieceDefinition(
        id=str(piece_id),
        name=name,
        base_rarity=record.get("baseRarity") or "None",
        description=record.get("description") or "",
    )


def _records(collection) -> list[tuple[str, dict]]:
    """Normalize a collection into (id, record) pairs."""
    if isinstance(collection, dict):
        return [(str(k), v) for k, v in collection.items()]
    pairs = []
    for record in collection:
        if "id" not in record:
            raise ValueError(f"Record without an id: {record!r}")
        pairs.append((str(record["id"]), record))
    return pairs


def parse_reference_data(champions, synergies, legacy_pieces) -> ReferenceData:
    """Build ReferenceData from raw collections."""
    reference = ReferenceData()
    for cid, record in _records(champions):
        reference.champions[cid] = parse_champion(cid, record)
    for sid, record in _records(synergies):
        reference.synergies[sid] = parse_synergy(sid, record)
    for pid, record in _records(legacy_pieces):
        reference.legacy_pieces[pid] = parse_legacy_piece(pid, record)
    return reference


def load_reference_data(directory: str) -> ReferenceData:
    """Load champions.json, synergies.json and legacy_pieces.json from a directory.

    A missing legacy_pieces.json is treated as an empty collection.
    """
    raw = {}
    for key, filename in COLLECTION_FILES.items():
        path = os.path.join(directory, filename)
        if key == "legacy_pieces" and not os.path.exists(path):
            raw[key] = {}
            continue
        with open(path, "r", encoding="utf-8") as f:
            raw[key] = json.load(f)

    reference = parse_reference_data(raw["champions"], raw["synergies"], raw["legacy_pieces"])
    print(f"Loaded reference data from {directory}: {reference}")
    return reference


def fetch_reference_data(base_url: str, save: bool = True) -> ReferenceData:
    """Download the three collections from `<base_url>/<collection file>`.

    Args:
        base_url: URL prefix serving champions.json, synergies.json, legacy_pieces.json
        save: Whether to keep copies under data/raw/
    """
    raw = {}
    for key, filename in COLLECTION_FILES.items():
        url = f"{base_url.rstrip('/')}/{filename}"
        print(f"Fetching {key} from {url}...")

        resp = requests.get(url, timeout=30)
        resp.raise_for_status()
        raw[key] = resp.json()

        if save:
            os.makedirs(DATA_DIR, exist_ok=True)
            with open(os.path.join(DATA_DIR, filename), "w", encoding="utf-8") as f:
                json.dump(raw[key], f, indent=2)

    if save:
        print(f"Saved to {DATA_DIR}")

    return parse_reference_data(raw["champions"], raw["synergies"], raw["legacy_pieces"])
