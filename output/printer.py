"""Pretty-print teams, rosters and saved teams."""

from tabulate import tabulate

from models.champion import Champion
from models.team import SavedTeam, TeamEvaluation


def _score(value: float | None) -> str:
    return "-" if value is None else f"{value:,.0f}"


def print_team(team: TeamEvaluation, title: str = "OPTIMAL TEAM"):
    """Print a team's members, active synergies and score breakdown."""
    print("\n" + "=" * 60)
    print(f"           {title}")
    print("=" * 60 + "\n")

    rows = []
    for i, member in enumerate(team.members):
        rows.append([
            i,
            member.name,
            member.champion_class,
            "yes" if member.is_healer else "",
            member.star_color_tier,
            _score(member.individual_score),
        ])
    print(tabulate(rows, headers=["#", "Champion", "Class", "Healer", "Stars", "Score"], tablefmt="simple"))

    if team.active_synergies:
        print("\n=== ACTIVE SYNERGIES ===\n")
        rows = []
        for synergy in team.active_synergies:
            value = f"{synergy.bonus_value:g}%" if synergy.bonus_type == "percentage" else f"{synergy.bonus_value:g}"
            rows.append([synergy.name, synergy.member_count, value, _score(synergy.calculated_bonus),
                         synergy.description])
        print(tabulate(rows, headers=["Synergy", "Members", "Bonus", "Added", "Description"],
                       tablefmt="simple"))
    else:
        print("\nNo synergies active.")

    b = team.breakdown
    rows = [
        ["Base score", _score(b.base)],
        ["Percentage synergies", _score(b.percentage_synergy_bonus)],
        ["Flat synergies", _score(b.flat_synergy_bonus)],
        ["Synergy depth", _score(b.synergy_depth_bonus)],
        ["Subtotal", _score(b.subtotal_after_synergies)],
        [f"Class diversity ({team.unique_class_count} classes)",
         _score(b.class_diversity_bonus) if team.class_diversity_bonus_applied else "not applied"],
        ["TOTAL", _score(team.total_score)],
    ]
    print("\n=== SCORE BREAKDOWN ===\n")
    print(tabulate(rows, tablefmt="simple"))
    print("\n" + "=" * 60)


def print_roster(roster: list[Champion]):
    """Print the roster sorted by individual score, highest first."""
    ordered = sorted(roster, key=lambda c: c.individual_score or 0, reverse=True)
    rows = []
    for champ in ordered:
        legacy = champ.legacy_piece
        rows.append([
            champ.name,
            champ.base_rarity,
            champ.champion_class,
            "yes" if champ.is_healer else "",
            champ.star_color_tier,
            champ.force_level,
            len(champ.gear.equipped()),
            f"{legacy.name} ({legacy.star_color_tier})" if legacy else "",
            _score(champ.individual_score),
        ])
    headers = ["Champion", "Rarity", "Class", "Healer", "Stars", "Force", "Gear", "Legacy", "Score"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))


def print_saved_teams(saved_teams: list[SavedTeam]):
    if not saved_teams:
        print("No saved teams.")
        return
    rows = []
    for team in saved_teams:
        rows.append([
            team.name,
            _score(team.evaluation.total_score),
            ", ".join(m.name for m in team.evaluation.members),
        ])
    print(tabulate(rows, headers=["Team", "Score", "Members"], tablefmt="simple"))
