"""Read-only reference collections: champion, synergy and legacy piece definitions."""

from dataclasses import dataclass, field

import config
from models.synergy import SynergyDefinition


@dataclass(frozen=True)
class ChampionDefinition:
    id: str
    name: str
    base_rarity: str
    champion_class: str = config.NO_CLASS
    is_healer: bool = False
    inherent_synergies: tuple[str, ...] = ()
    can_upgrade: bool = False
    upgrade_synergy: str | None = None


@dataclass(frozen=True)
class LegacyPieceDefinition:
    id: str
    name: str
    base_rarity: str = "None"
    description: str = ""  # usually a class restriction


@dataclass
class ReferenceData:
    champions: dict[str, ChampionDefinition] = field(default_factory=dict)
    synergies: dict[str, SynergyDefinition] = field(default_factory=dict)
    legacy_pieces: dict[str, LegacyPieceDefinition] = field(default_factory=dict)

    def __str__(self):
        return (f"{len(self.champions)} champions, {len(self.synergies)} synergies, "
                f"{len(self.legacy_pieces)} legacy pieces")

    def synergy_list(self) -> list[SynergyDefinition]:
        return list(self.synergies.values())
