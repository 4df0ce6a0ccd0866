"""Shared fixtures: constants, synergy definitions and a champion factory."""

import itertools

import pytest

from models.champion import Champion, GearLoadout, LegacyPiece
from models.constants import GameConstants
from models.synergy import FLAT, PERCENTAGE, SynergyDefinition, SynergyTier
from models.team import SavedTeam
from optimizer.scorer import TeamScorer


@pytest.fixture
def constants():
    return GameConstants.default()


@pytest.fixture
def make_champion():
    """Factory for roster champions with unique ids."""
    counter = itertools.count(1)

    def _make(name=None, base_rarity="Epic", champion_class="Might", is_healer=False,
              synergies=(), star_color_tier="Unlocked", force_level=0, gear=None,
              legacy_piece=None, **kwargs):
        n = next(counter)
        return Champion(
            id=kwargs.pop("id", f"entry-{n}"),
            definition_id=kwargs.pop("definition_id", f"champ-{n}"),
            name=name or f"Champion {n}",
            base_rarity=base_rarity,
            champion_class=champion_class,
            is_healer=is_healer,
            inherent_synergies=tuple(synergies),
            star_color_tier=star_color_tier,
            force_level=force_level,
            gear=gear or GearLoadout(),
            legacy_piece=legacy_piece,
            **kwargs,
        )

    return _make


@pytest.fixture
def justice_league():
    return SynergyDefinition(id="syn-jl", name="Justice League", bonus_type=FLAT, bonus_value=50)


@pytest.fixture
def synergies(justice_league):
    return [
        justice_league,
        SynergyDefinition(id="syn-gotham", name="Gotham", bonus_type=PERCENTAGE, bonus_value=10,
                          description="Gotham's finest"),
        SynergyDefinition(id="syn-titans", name="Titans", bonus_type=FLAT, bonus_value=100,
                          tiers=(SynergyTier(2, "Two Titans"), SynergyTier(4, "Four Titans"))),
    ]


@pytest.fixture
def scorer(synergies, constants):
    return TeamScorer(synergies, constants)


@pytest.fixture
def legacy_piece():
    return LegacyPiece(id="lp-1", name="Lasso of Truth", rarity="Mythic", star_color_tier="White 2-Star")


@pytest.fixture
def save_team(scorer):
    def _save(name, members):
        return SavedTeam(name=name, evaluation=scorer.evaluate_team(members))
    return _save
