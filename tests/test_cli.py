"""End-to-end run through the CLI commands with a temporary state file."""

import json
import sys

import pytest

import cli

CHAMPIONS = {
    f"hero-{i}": {"name": f"Hero {i}", "class": cls, "baseRarity": rarity, "isHealer": i == 5,
                  "inherentSynergies": tags, "canUpgrade": rarity == "Legendary"}
    for i, (cls, rarity, tags) in enumerate([
        ("Might", "Mythic", ["Justice League"]),
        ("Tech", "Legendary", ["Justice League"]),
        ("Magic", "Epic", ["Justice League"]),
        ("Cosmic", "Legendary", []),
        ("Might", "Epic", []),
        ("Magic", "Epic", []),
    ])
}
SYNERGIES = {"jl": {"name": "Justice League", "bonusType": "flat", "bonusValue": 50}}


@pytest.fixture
def run(tmp_path, monkeypatch):
    monkeypatch.setattr(cli, "DATA_DIR", str(tmp_path))
    monkeypatch.setattr(cli, "STATE_FILE", str(tmp_path / "state.pkl"))

    raw = tmp_path / "raw"
    raw.mkdir()
    (raw / "champions.json").write_text(json.dumps(CHAMPIONS))
    (raw / "synergies.json").write_text(json.dumps(SYNERGIES))

    def _run(*argv):
        monkeypatch.setattr(sys, "argv", ["cli.py", *argv])
        cli.main()
        return cli.load_state()

    _run("load-data", "--dir", str(raw))
    return _run


@pytest.mark.search
def test_optimize_save_and_exclude(run, capsys):
    state = run("prefill")
    assert len(state["roster"]) == 6

    state = run("optimize", "--require-healer")
    assert any(m.is_healer for m in state["current_team"].members)

    state = run("save-team", "Raid")
    assert [t.name for t in state["saved_teams"]] == ["Raid"]

    run("optimize", "--exclude-team", "Raid")
    assert "remaining after exclusion" in capsys.readouterr().out


@pytest.mark.search
def test_swap_member(run):
    run("prefill")
    state = run("optimize")
    outsider = next(c for c in state["roster"]
                    if c.id not in state["current_team"].member_ids())

    state = run("swap", "0", outsider.name)
    assert state["current_team"].members[0].id == outsider.id


def test_optimize_without_roster(run, capsys):
    run("optimize")
    assert "No roster loaded" in capsys.readouterr().out


def test_add_edit_remove(run, capsys):
    state = run("add", "Hero 0", "--star", "Gold 2-Star", "--gear", "head=Epic")
    (hero,) = state["roster"]
    assert hero.definition_id == "hero-0"
    assert hero.star_color_tier == "Gold 2-Star"
    assert hero.gear.head == "Epic"

    run("add", "hero-0")
    assert "already in the roster" in capsys.readouterr().out

    state = run("edit", "Hero 0", "--force", "3", "--gear", "arms=Mythic")
    (edited,) = state["roster"]
    assert edited.force_level == 3
    assert edited.gear.equipped() == ["Epic", "Mythic"]
    assert edited.individual_score > hero.individual_score

    state = run("remove", "Hero 0")
    assert state["roster"] == []


def test_edit_rejects_bad_gear(run, capsys):
    run("prefill")
    state = run("edit", "Hero 1", "--gear", "cape=Epic")
    assert "Bad gear" in capsys.readouterr().out
    assert all(c.gear.equipped() == [] for c in state["roster"])


@pytest.mark.search
def test_reset_after_swap(run):
    run("prefill")
    state = run("optimize")
    best = state["current_team"].member_ids()
    outsider = next(c for c in state["roster"] if c.id not in best)

    run("swap", "0", outsider.name)
    state = run("reset")
    assert state["current_team"].member_ids() == best


@pytest.mark.search
def test_upgrade_refreshes_current_team(run):
    run("prefill")
    state = run("optimize")
    before = state["current_team"].total_score
    legendary = next(m for m in state["current_team"].members if m.base_rarity == "Legendary")

    state = run("upgrade", legendary.name)
    member = next(m for m in state["current_team"].members if m.definition_id == legendary.definition_id)
    assert member.base_rarity == "Mythic"
    assert member.star_color_tier == "Blue 5-Star"
    assert state["current_team"].total_score > before
    assert next(m for m in state["original_team"].members
                if m.definition_id == legendary.definition_id).base_rarity == "Mythic"


@pytest.mark.search
def test_rename_and_delete_team(run, capsys):
    run("prefill")
    run("optimize")
    run("save-team", "Raid")

    state = run("rename-team", "Raid", "Strike")
    assert [t.name for t in state["saved_teams"]] == ["Strike"]

    run("rename-team", "Raid", "Other")
    assert "No saved team matches" in capsys.readouterr().out

    state = run("delete-team", state["saved_teams"][0].id)
    assert state["saved_teams"] == []
