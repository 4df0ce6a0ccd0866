"""Tests for the team search and member swaps."""

import asyncio
import itertools
from dataclasses import replace

import pytest

from optimizer import engine
from optimizer.engine import (
    count_candidates,
    exclude_saved_teams,
    find_optimal_team,
    generate_candidates,
    optimize,
    swap_member,
)
from optimizer.errors import (
    InsufficientRosterError,
    InvalidTeamError,
    NoHealerAvailableError,
    NoValidCombinationsError,
    SearchCancelledError,
)


@pytest.fixture
def mixed_roster(make_champion):
    return [
        make_champion(base_rarity="Mythic", synergies=("Gotham",), champion_class="Might"),
        make_champion(base_rarity="Legendary", synergies=("Gotham", "Titans"), champion_class="Tech"),
        make_champion(synergies=("Gotham",), champion_class="Magic", is_healer=True),
        make_champion(base_rarity="Limited Mythic", champion_class="Cosmic", star_color_tier="Gold 3-Star"),
        make_champion(synergies=("Titans", "Justice League"), champion_class="Might"),
        make_champion(base_rarity="Legendary", synergies=("Justice League",), champion_class="Tech",
                      is_healer=True),
        make_champion(synergies=("Justice League", "Titans"), champion_class="N/A", force_level=4),
        make_champion(base_rarity="Mythic", champion_class="Magic"),
    ]


# ============================================================================
# CANDIDATE GENERATION
# ============================================================================


@pytest.mark.unit
class TestCandidates:

    def test_all_five_combinations(self, mixed_roster):
        candidates = list(generate_candidates(mixed_roster))
        assert len(candidates) == count_candidates(mixed_roster) == 56
        assert len({frozenset(c.id for c in team) for team in candidates}) == 56

    def test_healer_combinations(self, mixed_roster):
        candidates = list(generate_candidates(mixed_roster, require_healer=True))
        # 2 healers x C(7, 4); teams holding both healers appear twice
        assert len(candidates) == count_candidates(mixed_roster, require_healer=True) == 70
        assert all(team[0].is_healer for team in candidates)
        assert all(len({c.id for c in team}) == 5 for team in candidates)

    def test_exclude_saved_teams(self, mixed_roster, save_team):
        saved = save_team("Raid", mixed_roster[:5])
        remaining = exclude_saved_teams(mixed_roster, [saved])
        assert [c.id for c in remaining] == [c.id for c in mixed_roster[5:]]


# ============================================================================
# SEARCH
# ============================================================================


@pytest.mark.search
class TestFindOptimalTeam:

    @pytest.mark.asyncio
    async def test_roster_of_five_returns_everyone(self, make_champion, scorer):
        roster = [make_champion(synergies=("Gotham",)) for _ in range(5)]
        best = await find_optimal_team(roster, scorer)
        assert set(best.member_ids()) == {c.id for c in roster}
        assert best.comparison_score == pytest.approx(scorer.evaluate_team(roster).comparison_score)

    @pytest.mark.asyncio
    async def test_matches_brute_force(self, mixed_roster, scorer):
        best = await find_optimal_team(mixed_roster, scorer)
        expected = max(scorer.evaluate_team(team).comparison_score
                       for team in itertools.combinations(mixed_roster, 5))
        assert best.comparison_score == pytest.approx(expected)

    @pytest.mark.asyncio
    async def test_ties_keep_first_found(self, make_champion, scorer):
        roster = [make_champion() for _ in range(7)]
        best = await find_optimal_team(roster, scorer, time_slice=0)
        assert best.member_ids() == [c.id for c in roster[:5]]

    @pytest.mark.asyncio
    async def test_require_healer(self, make_champion, scorer):
        roster = [make_champion(base_rarity="Mythic") for _ in range(6)]
        healer = make_champion(base_rarity="Epic", is_healer=True)
        roster.append(healer)

        unconstrained = await find_optimal_team(roster, scorer)
        assert healer.id not in unconstrained.member_ids()

        constrained = await find_optimal_team(roster, scorer, require_healer=True)
        assert healer.id in constrained.member_ids()

    @pytest.mark.asyncio
    async def test_no_healer_available(self, make_champion, scorer):
        roster = [make_champion() for _ in range(6)]
        with pytest.raises(NoHealerAvailableError):
            await find_optimal_team(roster, scorer, require_healer=True)

    @pytest.mark.asyncio
    async def test_no_candidates_counted(self, mixed_roster, scorer, monkeypatch):
        monkeypatch.setattr(engine, "count_candidates", lambda roster, require_healer=False: 0)
        with pytest.raises(NoValidCombinationsError):
            await find_optimal_team(mixed_roster, scorer)

    @pytest.mark.asyncio
    async def test_no_candidates_generated(self, mixed_roster, scorer, monkeypatch):
        monkeypatch.setattr(engine, "generate_candidates", lambda roster, require_healer=False: iter(()))
        with pytest.raises(NoValidCombinationsError):
            await find_optimal_team(mixed_roster, scorer)

    @pytest.mark.asyncio
    async def test_roster_too_small(self, make_champion, scorer):
        with pytest.raises(InsufficientRosterError):
            await find_optimal_team([make_champion() for _ in range(4)], scorer)

    @pytest.mark.asyncio
    async def test_roster_too_small_with_healer(self, make_champion, scorer):
        roster = [make_champion(is_healer=True) for _ in range(4)]
        with pytest.raises(InsufficientRosterError):
            await find_optimal_team(roster, scorer, require_healer=True)

    @pytest.mark.asyncio
    async def test_excluded_team_members_not_used(self, mixed_roster, make_champion, scorer, save_team):
        roster = mixed_roster + [make_champion(base_rarity="Mythic"), make_champion()]
        saved = save_team("Raid", mixed_roster[:5])
        best = await find_optimal_team(roster, scorer, excluded_teams=[saved])
        assert set(best.member_ids()) == {c.id for c in roster[5:]}

    @pytest.mark.asyncio
    async def test_exclusion_leaves_too_few(self, mixed_roster, scorer, save_team):
        saved = save_team("Raid", mixed_roster[:5])
        with pytest.raises(InsufficientRosterError, match="remaining after exclusion"):
            await find_optimal_team(mixed_roster, scorer, excluded_teams=[saved])

    @pytest.mark.asyncio
    async def test_progress_is_monotonic(self, mixed_roster, scorer):
        updates = []
        await find_optimal_team(mixed_roster, scorer, time_slice=0,
                                on_progress=lambda status, pct: updates.append((status, pct)))
        percents = [pct for _, pct in updates]
        assert percents == sorted(percents)
        assert percents[0] == 12
        assert updates[-1] == ("Finalizing best team...", 98)
        assert any(status.startswith("Evaluating team") for status, _ in updates)

    @pytest.mark.asyncio
    async def test_yields_to_event_loop(self, mixed_roster, scorer):
        ticks = 0

        async def ticker():
            nonlocal ticks
            while True:
                ticks += 1
                await asyncio.sleep(0)

        task = asyncio.create_task(ticker())
        await find_optimal_team(mixed_roster, scorer, time_slice=0)
        task.cancel()
        assert ticks > 1

    @pytest.mark.asyncio
    async def test_cancel_at_batch_boundary(self, mixed_roster, scorer):
        checks = []

        def should_cancel():
            checks.append(1)
            return len(checks) > 2

        with pytest.raises(SearchCancelledError):
            await find_optimal_team(mixed_roster, scorer, time_slice=0, should_cancel=should_cancel)

    @pytest.mark.asyncio
    async def test_roster_is_not_mutated(self, mixed_roster, scorer):
        before = list(mixed_roster)
        await find_optimal_team(mixed_roster, scorer)
        assert mixed_roster == before
        assert all(c.individual_score is None for c in mixed_roster)

    def test_blocking_wrapper(self, mixed_roster, scorer):
        best = optimize(mixed_roster, scorer, require_healer=True)
        assert any(m.is_healer for m in best.members)


# ============================================================================
# SWAP
# ============================================================================


@pytest.mark.unit
class TestSwapMember:

    def test_swap_matches_direct_evaluation(self, mixed_roster, scorer):
        team = scorer.evaluate_team(mixed_roster[:5])
        swapped = swap_member(team, 2, mixed_roster[6], scorer)

        members = list(mixed_roster[:5])
        members[2] = mixed_roster[6]
        assert swapped.total_score == pytest.approx(scorer.evaluate_team(members).total_score)
        assert swapped.members[2].id == mixed_roster[6].id
        assert team.members[2].id == mixed_roster[2].id

    def test_swap_rescores_stale_replacement(self, mixed_roster, scorer):
        team = scorer.evaluate_team(mixed_roster[:5])
        stale = replace(mixed_roster[7].with_score(1.0), star_color_tier="Red 5-Star")
        swapped = swap_member(team, 0, stale, scorer)
        assert swapped.members[0].individual_score == pytest.approx(220 * 2.2)

    def test_swap_index_out_of_range(self, mixed_roster, scorer):
        team = scorer.evaluate_team(mixed_roster[:5])
        with pytest.raises(InvalidTeamError):
            swap_member(team, 5, mixed_roster[6], scorer)

    def test_swap_in_existing_member_rejected(self, mixed_roster, scorer):
        team = scorer.evaluate_team(mixed_roster[:5])
        with pytest.raises(InvalidTeamError):
            swap_member(team, 0, mixed_roster[1], scorer)
