"""Smoke tests for the tabulated output."""

import pytest

from output.printer import print_roster, print_saved_teams, print_team


@pytest.mark.unit
def test_print_team(make_champion, scorer, capsys):
    members = [make_champion(name=f"Hero {i}", synergies=("Justice League",)) for i in range(5)]
    print_team(scorer.evaluate_team(members))

    out = capsys.readouterr().out
    assert "OPTIMAL TEAM" in out
    assert "Hero 4" in out
    assert "Justice League" in out
    assert "TOTAL" in out


@pytest.mark.unit
def test_print_team_without_synergies(make_champion, scorer, capsys):
    print_team(scorer.evaluate_team([make_champion() for _ in range(5)]), title="CURRENT TEAM")
    out = capsys.readouterr().out
    assert "No synergies active." in out
    assert "not applied" in out


@pytest.mark.unit
def test_print_roster_sorted_by_score(make_champion, constants, capsys):
    from optimizer.scorer import ensure_scores

    roster = ensure_scores([make_champion(name="Weak"), make_champion(name="Strong", base_rarity="Mythic")],
                           constants)
    print_roster(roster)
    out = capsys.readouterr().out
    assert out.index("Strong") < out.index("Weak")


@pytest.mark.unit
def test_print_saved_teams(make_champion, save_team, capsys):
    print_saved_teams([])
    print_saved_teams([save_team("Raid", [make_champion() for _ in range(5)])])
    out = capsys.readouterr().out
    assert "No saved teams." in out
    assert "Raid" in out
