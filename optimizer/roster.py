"""Roster and saved-team maintenance: entries, rarity upgrades, team refresh."""

import logging
import uuid
from dataclasses import replace

import config
from models.champion import Champion, GearLoadout, LegacyPiece
from models.reference import ChampionDefinition, ReferenceData
from models.team import SavedTeam, TeamEvaluation
from optimizer.scorer import TeamScorer

logger = logging.getLogger(__name__)


def new_entry_id() -> str:
    return uuid.uuid4().hex


def build_champion(definition: ChampionDefinition,
                   star_color_tier: str = "Unlocked",
                   force_level: int = 0,
                   gear: GearLoadout | None = None,
                   legacy_piece: LegacyPiece | None = None,
                   entry_id: str | None = None) -> Champion:
    """Create a roster entry from a champion definition plus the player's progress."""
    return Champion(
        id=entry_id or new_entry_id(),
        definition_id=definition.id,
        name=definition.name,
        base_rarity=definition.base_rarity,
        champion_class=definition.champion_class or config.NO_CLASS,
        is_healer=definition.is_healer,
        inherent_synergies=tuple(definition.inherent_synergies),
        star_color_tier=star_color_tier or "Unlocked",
        force_level=force_level or 0,
        gear=gear or GearLoadout(),
        legacy_piece=legacy_piece,
        can_upgrade=definition.can_upgrade,
        upgrade_synergy=definition.upgrade_synergy,
    )


def prefill_roster(reference: ReferenceData) -> list[Champion]:
    """One unlocked, ungeared entry for every known champion."""
    roster = [build_champion(d) for d in reference.champions.values()]
    logger.info("Pre-filled roster with %d champions", len(roster))
    return roster


def find_roster_entry(roster: list[Champion], key: str) -> Champion | None:
    """Look up an entry by roster id, champion definition id, or name (case-insensitive)."""
    for champion in roster:
        if champion.id == key:
            return champion
    for champion in roster:
        if champion.definition_id == key:
            return champion
    lowered = key.strip().lower()
    for champion in roster:
        if champion.name.lower() == lowered:
            return champion
    return None


# Fields a player changes as a champion progresses; everything else comes from the definition
PROGRESS_FIELDS = ("star_color_tier", "force_level", "gear", "legacy_piece")


def add_champion(roster: list[Champion], champion: Champion) -> list[Champion]:
    """New roster list with `champion` appended.

    Raises:
        ValueError: if the roster already holds an entry for the same champion
    """
    if any(c.definition_id == champion.definition_id for c in roster):
        raise ValueError(f"{champion.name} is already in the roster.")
    logger.info("Added %s to the roster", champion.name)
    return [*roster, champion]


def update_champion(roster: list[Champion], entry_id: str, **progress) -> tuple[list[Champion], Champion]:
    """Change the progress fields of one roster entry.

    Args:
        roster: Current roster
        entry_id: Roster id of the entry to change
        **progress: New values for any of PROGRESS_FIELDS

    Returns:
        (new roster, updated entry); the entry's cached score is dropped

    Raises:
        ValueError: if the entry is missing or a field is not a progress field
    """
    unknown = sorted(set(progress) - set(PROGRESS_FIELDS))
    if unknown:
        raise ValueError(f"Cannot change {', '.join(unknown)} on a roster entry")
    champion = next((c for c in roster if c.id == entry_id), None)
    if champion is None:
        raise ValueError(f"No roster entry with id {entry_id!r}")

    updated = replace(champion, **progress).without_score()
    logger.debug("Updated %s: %s", updated.name, progress)
    return replace_in_roster(roster, updated), updated


def remove_champion(roster: list[Champion], entry_id: str) -> tuple[list[Champion], Champion]:
    """New roster list without the entry; also returns the removed entry."""
    champion = next((c for c in roster if c.id == entry_id), None)
    if champion is None:
        raise ValueError(f"No roster entry with id {entry_id!r}")
    logger.info("Removed %s from the roster", champion.name)
    return [c for c in roster if c.id != entry_id], champion


def upgrade_champion(champion: Champion) -> Champion:
    """Upgrade a Legendary champion to Mythic.

    The champion gains its upgrade synergy tag (if it has one and lacks it),
    restarts at the Mythic entry star tier and can no longer be upgraded. The
    cached score is dropped since the rarity changed.

    Raises:
        ValueError: if the champion is not an upgradeable Legendary
    """
    if champion.base_rarity != config.UPGRADE_FROM_RARITY or not champion.can_upgrade:
        raise ValueError(f"{champion.name} cannot be upgraded to {config.UPGRADE_TO_RARITY}")

    synergies = champion.inherent_synergies
    if champion.upgrade_synergy and champion.upgrade_synergy not in synergies:
        synergies = synergies + (champion.upgrade_synergy,)

    return replace(
        champion,
        base_rarity=config.UPGRADE_TO_RARITY,
        star_color_tier=config.UPGRADE_STAR_COLOR_TIER,
        inherent_synergies=synergies,
        can_upgrade=False,
    ).without_score()


def replace_in_roster(roster: list[Champion], champion: Champion) -> list[Champion]:
    """New roster list with the entry sharing `champion.id` replaced."""
    return [champion if c.id == champion.id else c for c in roster]


def refresh_team(evaluation: TeamEvaluation, champion: Champion, scorer: TeamScorer) -> TeamEvaluation:
    """Re-evaluate a team with `champion` standing in for the member built from the same definition.

    A team without that champion is returned as is.
    """
    if champion.definition_id not in {m.definition_id for m in evaluation.members}:
        return evaluation
    members = [champion if m.definition_id == champion.definition_id else m
               for m in evaluation.members]
    return scorer.evaluate_team(members)


def refresh_saved_teams(saved_teams: list[SavedTeam], champion: Champion,
                        scorer: TeamScorer) -> tuple[list[SavedTeam], int]:
    """Re-evaluate saved teams that contain the given champion.

    Members matching the champion's definition are replaced by `champion`;
    teams without it are returned unchanged.

    Returns:
        (all saved teams, number of teams updated)
    """
    refreshed = []
    updated = 0
    for team in saved_teams:
        evaluation = refresh_team(team.evaluation, champion, scorer)
        if evaluation is team.evaluation:
            refreshed.append(team)
            continue
        refreshed.append(replace(team, evaluation=evaluation))
        updated += 1

    if updated:
        logger.info("Re-evaluated %d saved team(s) containing %s", updated, champion.name)
    return refreshed, updated


def find_saved_team(saved_teams: list[SavedTeam], key: str) -> SavedTeam | None:
    """Look up a saved team by id, then by name."""
    for team in saved_teams:
        if team.id is not None and team.id == key:
            return team
    for team in saved_teams:
        if team.name == key:
            return team
    return None


def _clean_team_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValueError("Team name cannot be empty.")
    return name


def save_team(saved_teams: list[SavedTeam], name: str, evaluation: TeamEvaluation) -> list[SavedTeam]:
    """Add a team under `name`, replacing any saved team with that name."""
    name = _clean_team_name(name)
    kept = [t for t in saved_teams if t.name != name]
    return [*kept, SavedTeam(name=name, evaluation=evaluation, id=new_entry_id())]


def rename_saved_team(saved_teams: list[SavedTeam], key: str, new_name: str) -> list[SavedTeam]:
    """Rename the saved team matching `key` (id or name).

    Raises:
        ValueError: if no team matches, or the new name is blank or taken
    """
    team = find_saved_team(saved_teams, key)
    if team is None:
        raise ValueError(f"No saved team matches {key!r}.")
    new_name = _clean_team_name(new_name)
    if new_name == team.name:
        return list(saved_teams)
    if any(t.name == new_name for t in saved_teams):
        raise ValueError(f"A saved team named {new_name!r} already exists.")
    return [replace(t, name=new_name) if t is team else t for t in saved_teams]


def delete_saved_team(saved_teams: list[SavedTeam], key: str) -> tuple[list[SavedTeam], SavedTeam]:
    """Saved teams without the one matching `key`; also returns the deleted team."""
    team = find_saved_team(saved_teams, key)
    if team is None:
        raise ValueError(f"No saved team matches {key!r}.")
    return [t for t in saved_teams if t is not team], team
