"""Champion and team scoring.

A champion's score is its rarity base score times its star multiplier, scaled by
a single equipment multiplier that sums every other bonus source (gear, legacy
piece, force level, synergy tags). A team's score adds synergy bonuses, a depth
bonus for members beyond each synergy's activation count, and a class-diversity
bonus on top of the members' summed scores.
"""

import logging
import math
import warnings
from collections import Counter

import config
from models.champion import Champion
from models.constants import GameConstants
from models.synergy import FLAT, PERCENTAGE, SynergyDefinition
from models.team import ActiveSynergy, ScoreBreakdown, TeamEvaluation
from optimizer.errors import InvalidTeamError, UnknownReferenceDataWarning

logger = logging.getLogger(__name__)

# Tiers that are neutral by definition, so a missing table entry is not suspicious
NEUTRAL_STAR_TIERS = {"Unlocked", "White 1-Star"}


def _warn_unknown(message: str):
    logger.warning(message)
    warnings.warn(message, UnknownReferenceDataWarning, stacklevel=3)


def compute_individual_score(champion: Champion, constants: GameConstants) -> float:
    """Compute a single champion's score from its current fields.

    Args:
        champion: A roster champion
        constants: Game-balance tables

    Returns:
        core score (base * star multiplier) times the summed equipment multiplier
    """
    base_score = constants.rarity_base_score.get(champion.base_rarity)
    if base_score is None:
        _warn_unknown(f"Unknown base rarity {champion.base_rarity!r} for {champion.name}, scoring as 0")
        base_score = 0

    star_multiplier = constants.star_tier_multiplier.get(champion.star_color_tier)
    if star_multiplier is None:
        if champion.star_color_tier not in NEUTRAL_STAR_TIERS:
            _warn_unknown(f"Unknown starColorTier {champion.star_color_tier!r} for {champion.name}, "
                          f"defaulting to multiplier 1.0")
        star_multiplier = 1.0

    core_score = base_score * star_multiplier

    equipment_multiplier = 1.0

    for rarity in champion.gear.equipped():
        modifier = constants.gear_rarity_modifier.get(rarity)
        if modifier is None:
            _warn_unknown(f"Unknown gear rarity {rarity!r} for {champion.name}, ignoring")
            modifier = 0.0
        equipment_multiplier += modifier

    legacy = champion.legacy_piece
    if legacy is not None and legacy.is_active:
        rarity_modifier = constants.legacy_rarity_modifier.get(legacy.rarity)
        if rarity_modifier is None:
            _warn_unknown(f"Unknown legacy piece rarity {legacy.rarity!r} for {champion.name}, ignoring")
            rarity_modifier = 0.0
        star_modifier = constants.legacy_star_tier_modifier.get(legacy.star_color_tier)
        if star_modifier is None:
            if legacy.star_color_tier != "Unlocked":
                _warn_unknown(f"Unknown legacy piece starColorTier {legacy.star_color_tier!r} "
                              f"for {champion.name}, ignoring")
            star_modifier = 0.0
        equipment_multiplier += rarity_modifier + star_modifier

    force_modifier = constants.force_level_modifier.get(champion.force_level)
    if force_modifier is None:
        if champion.force_level:
            _warn_unknown(f"Unknown force level {champion.force_level!r} for {champion.name}, ignoring")
        force_modifier = 0.0
    equipment_multiplier += force_modifier

    equipment_multiplier += len(champion.inherent_synergies) * constants.synergy_count_modifier

    return core_score * equipment_multiplier


def ensure_scored(champion: Champion, constants: GameConstants) -> Champion:
    """Return the champion with a score computed from its current fields and `constants`."""
    if champion.is_scored_under(constants):
        return champion
    return champion.with_score(compute_individual_score(champion, constants), constants)


def ensure_scores(members, constants: GameConstants) -> list[Champion]:
    return [ensure_scored(m, constants) for m in members]


class TeamScorer:
    """Evaluates five-member teams against a set of synergy definitions."""

    def __init__(self, synergies: list[SynergyDefinition], constants: GameConstants | None = None):
        # Percentage synergies compound on a running subtotal, so they go first.
        # sorted() is stable: relative order within each group is preserved.
        self.synergies = sorted(synergies, key=lambda s: s.bonus_type != PERCENTAGE)
        self.constants = constants or GameConstants.default()
        self._by_name: dict[str, SynergyDefinition] = {}
        for synergy in self.synergies:
            self._by_name.setdefault(synergy.name, synergy)

    def definition_for(self, tag: str) -> SynergyDefinition | None:
        return self._by_name.get(tag)

    def check_synergy_tags(self, champions) -> set[str]:
        """Warn once for every champion synergy tag with no definition.

        Returns:
            The unknown tags
        """
        unknown = set()
        for champion in champions:
            unknown.update(t for t in champion.inherent_synergies if t not in self._by_name)
        for tag in sorted(unknown):
            _warn_unknown(f"No synergy definition named {tag!r}; it will never activate")
        return unknown

    def evaluate_team(self, members) -> TeamEvaluation:
        """Score a five-member team.

        Members whose cached score is missing or stale are rescored first.

        Raises:
            InvalidTeamError: if the team is not exactly five distinct champions
        """
        members = tuple(ensure_scores(members, self.constants))
        if len(members) != config.TEAM_SIZE:
            raise InvalidTeamError(f"A team needs exactly {config.TEAM_SIZE} champions, got {len(members)}")
        if len({m.id for m in members}) != len(members):
            raise InvalidTeamError("A team cannot contain the same champion twice")
        return self.evaluate_scored(members)

    def evaluate_scored(self, members: tuple[Champion, ...]) -> TeamEvaluation:
        """Score a team whose members are already validated and scored."""
        constants = self.constants

        # fsum keeps the result independent of member order
        base_score_sum = math.fsum(m.individual_score for m in members)
        score_after_percentage = base_score_sum
        percentage_bonus_total = 0.0
        flat_bonus_total = 0.0
        active: list[ActiveSynergy] = []

        tag_counts = Counter(tag for m in members for tag in set(m.inherent_synergies))

        for synergy in self.synergies:
            member_count = tag_counts.get(synergy.name, 0)
            if member_count == 0:
                continue

            if synergy.is_tiered:
                tier = synergy.applicable_tier(member_count)
                if tier is None:
                    continue
                # Tiered bonuses are always flat, scaled by the tier threshold
                bonus = synergy.bonus_value * tier.count_required
                flat_bonus_total += bonus
                description = tier.description or synergy.description
            else:
                if not synergy.bonus_value or member_count < constants.synergy_activation_count:
                    continue
                if synergy.bonus_type == PERCENTAGE:
                    bonus = score_after_percentage * (synergy.bonus_value / 100)
                    percentage_bonus_total += bonus
                    score_after_percentage += bonus
                elif synergy.bonus_type == FLAT:
                    bonus = synergy.bonus_value
                    flat_bonus_total += bonus
                else:
                    continue
                description = synergy.description

            active.append(ActiveSynergy(
                name=synergy.name,
                description=description,
                member_count=member_count,
                bonus_type=synergy.bonus_type,
                bonus_value=synergy.bonus_value,
                calculated_bonus=bonus,
            ))

        subtotal = score_after_percentage + flat_bonus_total

        depth_bonus = 0.0
        for name, synergy in self._by_name.items():
            member_count = tag_counts.get(name, 0)
            min_count = synergy.min_activation_count(constants.synergy_activation_count)
            if member_count > min_count:
                depth_bonus += (member_count - min_count) * constants.synergy_depth_bonus
        subtotal += depth_bonus

        unique_classes = {m.champion_class for m in members
                          if m.champion_class and m.champion_class != config.NO_CLASS}
        diversity_bonus = 0.0
        diversity_applied = len(unique_classes) >= constants.class_diversity_min_classes
        if diversity_applied:
            diversity_bonus = subtotal * (constants.class_diversity_multiplier - 1)

        total_score = subtotal + diversity_bonus
        comparison_score = total_score + base_score_sum * constants.individual_score_weight

        return TeamEvaluation(
            members=members,
            total_score=total_score,
            comparison_score=comparison_score,
            active_synergies=tuple(active),
            base_score_sum=base_score_sum,
            unique_class_count=len(unique_classes),
            class_diversity_bonus_applied=diversity_applied,
            breakdown=ScoreBreakdown(
                base=base_score_sum,
                percentage_synergy_bonus=percentage_bonus_total,
                flat_synergy_bonus=flat_bonus_total,
                synergy_depth_bonus=depth_bonus,
                subtotal_after_synergies=subtotal,
                class_diversity_bonus=diversity_bonus,
            ),
        )
