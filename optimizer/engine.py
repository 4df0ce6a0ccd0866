"""Core team optimization engine.

Exhaustive search over every valid five-member team in a roster:
1. Validate the roster against the constraints (size, healer, exclusions)
2. Enumerate candidate teams lazily (all 5-combinations, or healer + 4)
3. Score candidates in time-boxed batches, yielding to the event loop between
   batches so a caller's UI or I/O keeps running during long searches

The best team is the one with the highest comparison score; on ties the first
candidate found wins.
"""

import asyncio
import logging
import math
import time
from itertools import combinations
from typing import Callable, Iterable, Iterator

import config
from models.champion import Champion
from models.team import SavedTeam, TeamEvaluation
from optimizer.errors import (
    InsufficientRosterError,
    InvalidTeamError,
    NoHealerAvailableError,
    NoValidCombinationsError,
    SearchCancelledError,
)
from optimizer.scorer import TeamScorer, ensure_scored

logger = logging.getLogger(__name__)

ProgressSink = Callable[[str, int], None]


def _no_progress(status: str, percent: int):
    pass


def exclude_saved_teams(roster: list[Champion], saved_teams: Iterable[SavedTeam]) -> list[Champion]:
    """Drop roster entries whose champion is a member of any of the saved teams."""
    excluded: set[str] = set()
    for team in saved_teams:
        excluded |= team.definition_ids()
    return [c for c in roster if c.definition_id not in excluded]


def count_candidates(roster: list[Champion], require_healer: bool = False) -> int:
    """Number of teams generate_candidates will yield."""
    size = config.TEAM_SIZE
    if not require_healer:
        return math.comb(len(roster), size)
    healers = sum(1 for c in roster if c.is_healer)
    return healers * math.comb(len(roster) - 1, size - 1)


def generate_candidates(roster: list[Champion],
                        require_healer: bool = False) -> Iterator[tuple[Champion, ...]]:
    """Lazily enumerate candidate teams.

    Without a healer requirement this is every 5-combination of the roster in
    lexicographic order. With it, each healer is paired with every 4-combination
    of the rest of the roster, so a team holding two healers shows up once per
    healer; those duplicates are scored independently.
    """
    size = config.TEAM_SIZE
    if not require_healer:
        yield from combinations(roster, size)
        return

    for healer in roster:
        if not healer.is_healer:
            continue
        others = [c for c in roster if c.id != healer.id]
        for combo in combinations(others, size - 1):
            yield (healer, *combo)


def _check_roster(roster: list[Champion], require_healer: bool):
    if require_healer:
        if not any(c.is_healer for c in roster):
            raise NoHealerAvailableError("No healers found to meet the 'Require Healer' criteria.")
        if len(roster) < config.TEAM_SIZE:
            raise InsufficientRosterError(
                f"Not enough champions to form a team of {config.TEAM_SIZE} with a healer.")
    elif len(roster) < config.TEAM_SIZE:
        raise InsufficientRosterError(
            f"Need at least {config.TEAM_SIZE} champions in roster, got {len(roster)}.")


async def find_optimal_team(roster: list[Champion],
                            scorer: TeamScorer,
                            require_healer: bool = False,
                            excluded_teams: Iterable[SavedTeam] = (),
                            on_progress: ProgressSink | None = None,
                            time_slice: float = config.SEARCH_TIME_SLICE,
                            should_cancel: Callable[[], bool] | None = None) -> TeamEvaluation:
    """Find the highest-ranked five-member team in a roster.

    Args:
        roster: Roster champions; the list is copied, and stale scores recomputed
        scorer: Team scorer holding the synergy definitions and constants
        require_healer: Every candidate must include at least one healer
        excluded_teams: Saved teams whose members may not be used
        on_progress: Called with (status text, percent complete) between batches
        time_slice: Seconds of evaluation per batch before yielding
        should_cancel: Checked at every batch boundary; True stops the search

    Returns:
        Evaluation of the best team found

    Raises:
        InsufficientRosterError, NoHealerAvailableError, NoValidCombinationsError,
        SearchCancelledError
    """
    report = on_progress or _no_progress
    roster = [ensure_scored(c, scorer.constants) for c in roster]

    excluded_teams = list(excluded_teams)
    if excluded_teams:
        roster = exclude_saved_teams(roster, excluded_teams)
        if len(roster) < config.TEAM_SIZE:
            raise InsufficientRosterError("Not enough champions remaining after exclusion.")

    _check_roster(roster, require_healer)
    scorer.check_synergy_tags(roster)

    report("Generating potential team combinations...", config.PROGRESS_GENERATING)
    if require_healer:
        report("Generating combinations with healers...", config.PROGRESS_GENERATED)
    else:
        report("Generating general combinations...", config.PROGRESS_GENERATED)

    total = count_candidates(roster, require_healer)
    if total == 0:
        raise NoValidCombinationsError("Could not generate any valid teams with the current criteria.")

    logger.info("Evaluating %d candidate teams from %d champions (require_healer=%s)",
                total, len(roster), require_healer)
    report(f"Generated {total} combinations. Evaluating...", config.PROGRESS_EVALUATING)

    candidates = generate_candidates(roster, require_healer)
    best: TeamEvaluation | None = None
    evaluated = 0
    batches = 0

    while evaluated < total:
        if should_cancel is not None and should_cancel():
            logger.info("Search cancelled after %d of %d candidates", evaluated, total)
            raise SearchCancelledError(f"Search cancelled after {evaluated} of {total} candidates.")

        deadline = time.perf_counter() + time_slice
        for team in candidates:
            result = scorer.evaluate_scored(team)
            if best is None or result.comparison_score > best.comparison_score:
                best = result
            evaluated += 1
            if time.perf_counter() >= deadline:
                break
        else:
            # Generator exhausted
            total = evaluated

        batches += 1
        logger.debug("Batch %d done: %d/%d evaluated", batches, evaluated, total)
        if evaluated < total:
            progress = config.PROGRESS_EVALUATING + round(
                evaluated / total * config.PROGRESS_EVALUATION_SPAN)
            report(f"Evaluating team {evaluated} of {total}...", progress)
            await asyncio.sleep(0)

    if best is None:
        raise NoValidCombinationsError("Could not generate any valid teams with the current criteria.")

    report("Finalizing best team...", config.PROGRESS_FINALIZING)
    logger.info("Best team scored %.1f (comparison %.1f) after %d candidates in %d batches",
                best.total_score, best.comparison_score, evaluated, batches)
    return best


def optimize(roster: list[Champion], scorer: TeamScorer, **kwargs) -> TeamEvaluation:
    """Blocking wrapper around find_optimal_team for scripts and the CLI."""
    return asyncio.run(find_optimal_team(roster, scorer, **kwargs))


def swap_member(team: TeamEvaluation, index: int, replacement: Champion,
                scorer: TeamScorer) -> TeamEvaluation:
    """Replace one member of a team and re-evaluate it.

    Args:
        team: An evaluated team
        index: Position (0-4) of the member to replace
        replacement: The incoming champion; rescored if its cached score is stale
        scorer: Team scorer used for the re-evaluation

    Returns:
        A new evaluation; `team` is left untouched
    """
    if not 0 <= index < len(team.members):
        raise InvalidTeamError(f"Swap index {index} is out of range for a team of {len(team.members)}")
    members = list(team.members)
    members[index] = ensure_scored(replacement, scorer.constants)
    return scorer.evaluate_team(members)
