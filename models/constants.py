"""Game-balance constants used by the scoring model."""

from dataclasses import dataclass, field

import config


@dataclass(frozen=True)
class GameConstants:
    rarity_base_score: dict[str, float] = field(
        default_factory=lambda: dict(config.CHAMPION_BASE_RARITY_SCORE))
    gear_rarity_modifier: dict[str, float] = field(
        default_factory=lambda: dict(config.STANDARD_GEAR_RARITY_MODIFIER))
    legacy_rarity_modifier: dict[str, float] = field(
        default_factory=lambda: dict(config.LEGACY_PIECE_BASE_RARITY_MODIFIER))
    star_tier_multiplier: dict[str, float] = field(
        default_factory=lambda: dict(config.STAR_COLOR_TIERS))
    legacy_star_tier_modifier: dict[str, float] = field(
        default_factory=lambda: dict(config.LEGACY_PIECE_STAR_TIER_MODIFIER))
    force_level_modifier: dict[int, float] = field(
        default_factory=lambda: dict(config.FORCE_LEVEL_MODIFIER))
    synergy_count_modifier: float = config.SYNERGY_COUNT_MODIFIER
    class_diversity_multiplier: float = config.CLASS_DIVERSITY_MULTIPLIER
    class_diversity_min_classes: int = config.CLASS_DIVERSITY_MIN_CLASSES
    synergy_activation_count: int = config.SYNERGY_ACTIVATION_COUNT
    synergy_depth_bonus: float = config.SYNERGY_DEPTH_BONUS
    individual_score_weight: float = config.INDIVIDUAL_SCORE_WEIGHT

    @classmethod
    def default(cls) -> "GameConstants":
        """Constants with every table taken from config."""
        return cls()

    @classmethod
    def bare(cls, **overrides) -> "GameConstants":
        """Constants with no modifiers configured.

        Every table is empty and every scalar bonus is neutral, so callers only
        get the contributions they pass in explicitly.
        """
        values = dict(
            rarity_base_score={},
            gear_rarity_modifier={},
            legacy_rarity_modifier={},
            star_tier_multiplier={},
            legacy_star_tier_modifier={},
            force_level_modifier={},
            synergy_count_modifier=0.0,
            class_diversity_multiplier=1.0,
            synergy_depth_bonus=0.0,
            individual_score_weight=0.0,
        )
        values.update(overrides)
        return cls(**values)
