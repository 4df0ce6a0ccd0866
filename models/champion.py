"""Roster champion data model."""

from dataclasses import dataclass, field, replace

import config
from models.constants import GameConstants


@dataclass(frozen=True)
class GearLoadout:
    # Gear rarity per slot; "None" means the slot is empty
    head: str = "None"
    arms: str = "None"
    legs: str = "None"
    chest: str = "None"
    waist: str = "None"

    def rarities(self) -> tuple[str, ...]:
        """Rarities in slot order (head, arms, legs, chest, waist)."""
        return tuple(getattr(self, slot) for slot in config.GEAR_SLOTS)

    def equipped(self) -> list[str]:
        """Rarities of the slots that actually hold a piece."""
        return [r for r in self.rarities() if r and r != "None"]

    @classmethod
    def from_mapping(cls, gear: dict | None) -> "GearLoadout":
        """Build a loadout from {slot: rarity} or {slot: {"rarity": rarity}}."""
        gear = gear or {}
        values = {}
        for slot in config.GEAR_SLOTS:
            piece = gear.get(slot)
            if isinstance(piece, dict):
                piece = piece.get("rarity")
            values[slot] = piece or "None"
        return cls(**values)

    def to_dict(self) -> dict[str, dict[str, str]]:
        return {slot: {"rarity": getattr(self, slot)} for slot in config.GEAR_SLOTS}


@dataclass(frozen=True)
class LegacyPiece:
    id: str
    name: str
    rarity: str = "None"
    star_color_tier: str = "Unlocked"
    description: str = ""

    @property
    def is_active(self) -> bool:
        return bool(self.id) and self.rarity != "None"


@dataclass(frozen=True)
class Champion:
    id: str  # roster entry id
    definition_id: str  # id of the champion definition this entry was built from
    name: str
    base_rarity: str
    champion_class: str = config.NO_CLASS
    is_healer: bool = False
    inherent_synergies: tuple[str, ...] = ()
    star_color_tier: str = "Unlocked"
    force_level: int = 0
    gear: GearLoadout = field(default_factory=GearLoadout)
    legacy_piece: LegacyPiece | None = None
    can_upgrade: bool = False
    upgrade_synergy: str | None = None
    # Cached score plus the inputs and constants it was computed from
    individual_score: float | None = field(default=None, compare=False)
    scored_key: tuple | None = field(default=None, compare=False, repr=False)
    scored_with: GameConstants | None = field(default=None, compare=False, repr=False)

    def __str__(self):
        return f"{self.name} ({self.base_rarity}, {self.star_color_tier})"

    def scoring_key(self) -> tuple:
        """Every champion field the individual score depends on."""
        legacy = None
        if self.legacy_piece is not None:
            legacy = (self.legacy_piece.id, self.legacy_piece.rarity, self.legacy_piece.star_color_tier)
        return (
            self.base_rarity,
            self.star_color_tier,
            self.force_level,
            self.gear.rarities(),
            legacy,
            self.inherent_synergies,
        )

    @property
    def has_fresh_score(self) -> bool:
        return self.individual_score is not None and self.scored_key == self.scoring_key()

    def is_scored_under(self, constants: GameConstants) -> bool:
        """True if the cached score is fresh and was computed with `constants`.

        A score cached without recording its constants is trusted under any.
        """
        if not self.has_fresh_score:
            return False
        return self.scored_with is None or self.scored_with == constants

    def with_score(self, score: float, constants: GameConstants | None = None) -> "Champion":
        """Return a copy carrying `score` as its cached individual score."""
        return replace(self, individual_score=score, scored_key=self.scoring_key(), scored_with=constants)

    def without_score(self) -> "Champion":
        return replace(self, individual_score=None, scored_key=None, scored_with=None)
