"""Synergy definitions.

A synergy is a tag shared by champions. A team activates it when enough members
carry the tag, either against a single global minimum (simple synergies) or
against a list of member-count tiers.
"""

from dataclasses import dataclass

FLAT = "flat"
PERCENTAGE = "percentage"
BONUS_TYPES = (FLAT, PERCENTAGE)


@dataclass(frozen=True)
class SynergyTier:
    count_required: int
    description: str = ""


@dataclass(frozen=True)
class SynergyDefinition:
    id: str
    name: str  # matched against champion synergy tags
    bonus_type: str = FLAT
    bonus_value: float = 0.0
    description: str = ""
    tiers: tuple[SynergyTier, ...] = ()

    @property
    def is_tiered(self) -> bool:
        return len(self.tiers) > 0

    def applicable_tier(self, member_count: int) -> SynergyTier | None:
        """Highest tier whose threshold is met, or None."""
        met = [t for t in self.tiers if t.count_required <= member_count]
        if not met:
            return None
        return max(met, key=lambda t: t.count_required)

    def min_activation_count(self, global_min: int) -> int:
        """Member count at which this synergy first activates."""
        if self.is_tiered:
            return min(t.count_required for t in self.tiers)
        return global_min
