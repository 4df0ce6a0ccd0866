"""Champion Team Optimizer - CLI entry point.

Usage:
    python cli.py load-data [--dir path | --url base-url]
    python cli.py prefill
    python cli.py load-roster --file roster.json|roster.csv
    python cli.py export-roster [--output path]
    python cli.py roster
    python cli.py add CHAMPION [--star TIER] [--force N] [--gear SLOT=RARITY ...] [--legacy-piece ID] [--legacy-star TIER]
    python cli.py edit CHAMPION [same options as add]
    python cli.py remove CHAMPION
    python cli.py optimize [--require-healer] [--exclude-team NAME ...]
    python cli.py show
    python cli.py swap INDEX CHAMPION
    python cli.py reset
    python cli.py save-team NAME
    python cli.py teams
    python cli.py rename-team TEAM NEW_NAME
    python cli.py delete-team TEAM
    python cli.py upgrade CHAMPION
"""

import argparse
import logging
import os
import pickle
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from tqdm import tqdm

import config
from models.constants import GameConstants
from optimizer.errors import TeamOptimizerError

DATA_DIR = os.path.join(os.path.dirname(__file__), "data")
RAW_DIR = os.path.join(DATA_DIR, "raw")
STATE_FILE = os.path.join(DATA_DIR, "state.pkl")


def save_state(state: dict):
    """Save intermediate state to disk."""
    os.makedirs(DATA_DIR, exist_ok=True)
    with open(STATE_FILE, "wb") as f:
        pickle.dump(state, f)


def load_state() -> dict:
    """Load intermediate state from disk."""
    if os.path.exists(STATE_FILE):
        with open(STATE_FILE, "rb") as f:
            return pickle.load(f)
    return {}


def _scorer(state: dict):
    from optimizer.scorer import TeamScorer
    return TeamScorer(state["reference"].synergy_list(), GameConstants.default())


def _scored_roster(roster, constants):
    from optimizer.scorer import ensure_scores
    return ensure_scores(roster, constants)


def _find_definition(reference, key: str):
    """Champion definition by id, or by name (case-insensitive)."""
    if key in reference.champions:
        return reference.champions[key]
    lowered = key.strip().lower()
    for definition in reference.champions.values():
        if definition.name.lower() == lowered:
            return definition
    return None


def _parse_gear(pairs) -> dict:
    gear = {}
    for pair in pairs or []:
        slot, sep, rarity = pair.partition("=")
        slot = slot.strip().lower()
        if not sep or slot not in config.GEAR_SLOTS:
            raise ValueError(f"Bad gear {pair!r}, expected SLOT=RARITY with SLOT one of "
                             f"{', '.join(config.GEAR_SLOTS)}")
        gear[slot] = rarity.strip() or "None"
    return gear


def _progress_changes(args, reference, current=None) -> dict:
    """Progress fields given on the command line, applied on top of `current`."""
    from dataclasses import replace

    from ingestion.roster_loader import resolve_legacy_piece
    from models.champion import GearLoadout

    changes = {}
    if args.star:
        changes["star_color_tier"] = args.star
    if args.force is not None:
        changes["force_level"] = args.force

    gear = _parse_gear(args.gear)
    if gear:
        changes["gear"] = replace(current.gear if current else GearLoadout(), **gear)

    current_piece = current.legacy_piece if current else None
    if args.legacy_piece is not None:
        if args.legacy_piece and args.legacy_piece not in reference.legacy_pieces:
            raise ValueError(f"Unknown legacy piece {args.legacy_piece!r}")
        star = args.legacy_star or (current_piece.star_color_tier if current_piece else None)
        changes["legacy_piece"] = resolve_legacy_piece(reference, args.legacy_piece, star)
    elif args.legacy_star:
        if current_piece is None:
            raise ValueError("No legacy piece equipped; pass --legacy-piece as well")
        changes["legacy_piece"] = replace(current_piece, star_color_tier=args.legacy_star)
    return changes


def _refresh_teams(state: dict, champion) -> int:
    """Re-evaluate the current, original and saved teams that hold `champion`."""
    from optimizer.roster import refresh_saved_teams, refresh_team

    scorer = _scorer(state)
    for key in ("current_team", "original_team"):
        if state.get(key):
            state[key] = refresh_team(state[key], champion, scorer)
    state["saved_teams"], updated = refresh_saved_teams(state.get("saved_teams", []), champion, scorer)
    return updated


class ProgressBar:
    """Progress sink that renders (status, percent) updates as a tqdm bar."""

    def __init__(self):
        self.bar = tqdm(total=config.PROGRESS_DONE, desc="Initializing", unit="%")

    def __call__(self, status: str, percent: int):
        self.bar.set_description(status)
        self.bar.update(max(0, percent - self.bar.n))

    def close(self, status: str = "Calculation complete!"):
        self(status, config.PROGRESS_DONE)
        self.bar.close()


# --- Commands ---

def cmd_load_data(args):
    """Load champion, synergy and legacy piece definitions."""
    state = load_state()

    if args.url:
        from ingestion.reference_loader import fetch_reference_data
        reference = fetch_reference_data(args.url)
    else:
        from ingestion.reference_loader import load_reference_data
        reference = load_reference_data(args.dir or RAW_DIR)

    state["reference"] = reference
    save_state(state)
    print(f"\nReference data: {reference}")


def cmd_prefill(args):
    """Replace the roster with every known champion, unlocked and ungeared."""
    state = load_state()
    if not state.get("reference"):
        print("ERROR: No reference data. Run 'python cli.py load-data' first.")
        return

    from optimizer.roster import prefill_roster
    state["roster"] = _scored_roster(prefill_roster(state["reference"]), GameConstants.default())
    save_state(state)
    print(f"\nRoster pre-filled with {len(state['roster'])} champions.")


def cmd_load_roster(args):
    """Import a roster from JSON or CSV."""
    state = load_state()
    if not state.get("reference"):
        print("ERROR: No reference data. Run 'python cli.py load-data' first.")
        return

    if args.file.lower().endswith(".csv"):
        from ingestion.roster_loader import load_roster_from_csv
        roster, skipped = load_roster_from_csv(args.file, state["reference"])
    else:
        from ingestion.roster_loader import load_roster_from_json
        roster, skipped = load_roster_from_json(args.file, state["reference"])

    state["roster"] = _scored_roster(roster, GameConstants.default())
    save_state(state)

    if skipped:
        print(f"Imported with {skipped} champion(s) skipped.")
    else:
        print("Roster imported!")


def cmd_export_roster(args):
    """Export the roster to JSON."""
    state = load_state()
    roster = state.get("roster")
    if not roster:
        print("Roster empty.")
        return

    from ingestion.roster_loader import save_roster_to_json
    save_roster_to_json(roster, args.output or os.path.join(DATA_DIR, "roster.json"))


def cmd_roster(args):
    """Display the roster."""
    state = load_state()
    roster = state.get("roster")
    if not roster:
        print("Roster empty. Run 'python cli.py load-roster' or 'python cli.py prefill' first.")
        return

    from output.printer import print_roster
    print_roster(_scored_roster(roster, GameConstants.default()))


def cmd_add(args):
    """Add one champion to the roster."""
    state = load_state()
    if not state.get("reference"):
        print("ERROR: No reference data. Run 'python cli.py load-data' first.")
        return

    definition = _find_definition(state["reference"], args.champion)
    if definition is None:
        print(f"ERROR: No champion definition matches {args.champion!r}.")
        return

    from optimizer.roster import add_champion, build_champion
    from optimizer.scorer import ensure_scored

    try:
        champion = build_champion(definition, **_progress_changes(args, state["reference"]))
        champion = ensure_scored(champion, GameConstants.default())
        state["roster"] = add_champion(state.get("roster", []), champion)
    except ValueError as e:
        print(f"ERROR: {e}")
        return

    save_state(state)
    print(f"{champion.name} added (score {champion.individual_score:,.0f}).")


def cmd_edit(args):
    """Change a roster champion's stars, force level, gear or legacy piece."""
    state = load_state()
    if not state.get("reference"):
        print("ERROR: No reference data. Run 'python cli.py load-data' first.")
        return

    from optimizer.roster import find_roster_entry, replace_in_roster, update_champion
    from optimizer.scorer import ensure_scored

    roster = state.get("roster", [])
    champion = find_roster_entry(roster, args.champion)
    if champion is None:
        print(f"ERROR: No roster champion matches {args.champion!r}.")
        return

    try:
        changes = _progress_changes(args, state["reference"], current=champion)
        if not changes:
            print("Nothing to change.")
            return
        roster, updated = update_champion(roster, champion.id, **changes)
    except ValueError as e:
        print(f"ERROR: {e}")
        return

    updated = ensure_scored(updated, GameConstants.default())
    state["roster"] = replace_in_roster(roster, updated)
    teams_updated = _refresh_teams(state, updated)
    save_state(state)

    print(f"{updated.name} updated (score {updated.individual_score:,.0f}).")
    if teams_updated:
        print(f"{teams_updated} saved team(s) updated.")


def cmd_remove(args):
    """Remove a champion from the roster."""
    state = load_state()

    from optimizer.roster import find_roster_entry, remove_champion

    roster = state.get("roster", [])
    champion = find_roster_entry(roster, args.champion)
    if champion is None:
        print(f"ERROR: No roster champion matches {args.champion!r}.")
        return

    state["roster"], removed = remove_champion(roster, champion.id)
    save_state(state)
    print(f"{removed.name} removed.")


def cmd_optimize(args):
    """Find the best team in the roster."""
    state = load_state()

    if not state.get("reference"):
        print("ERROR: No reference data. Run 'python cli.py load-data' first.")
        return
    roster = state.get("roster")
    if not roster:
        print("ERROR: No roster loaded. Run 'python cli.py load-roster' first.")
        return

    excluded = []
    saved_teams = state.get("saved_teams", [])
    for name in args.exclude_team or []:
        matches = [t for t in saved_teams if t.name == name]
        if not matches:
            print(f"ERROR: No saved team named {name!r}.")
            return
        excluded.extend(matches)

    from optimizer.engine import optimize
    progress = ProgressBar()
    try:
        best = optimize(
            roster,
            _scorer(state),
            require_healer=args.require_healer,
            excluded_teams=excluded,
            on_progress=progress,
        )
    except TeamOptimizerError as e:
        progress.close(f"Error: {e.message}")
        print(f"ERROR: {e.message}")
        return
    progress.close()

    state["current_team"] = best
    state["original_team"] = best
    save_state(state)

    from output.printer import print_team
    print_team(best)


def cmd_show(args):
    """Display the current team."""
    state = load_state()

    team = state.get("current_team")
    if not team:
        print("ERROR: No team calculated. Run 'python cli.py optimize' first.")
        return

    from output.printer import print_team
    print_team(team, title="CURRENT TEAM")


def cmd_swap(args):
    """Swap one member of the current team for another roster champion."""
    state = load_state()

    team = state.get("current_team")
    if not team:
        print("ERROR: No team calculated. Run 'python cli.py optimize' first.")
        return

    from optimizer.engine import swap_member
    from optimizer.roster import find_roster_entry

    replacement = find_roster_entry(state.get("roster", []), args.champion)
    if replacement is None:
        print(f"ERROR: No roster champion matches {args.champion!r}.")
        return

    try:
        swapped = swap_member(team, args.index, replacement, _scorer(state))
    except TeamOptimizerError as e:
        print(f"ERROR: {e.message}")
        return

    state["current_team"] = swapped
    save_state(state)

    from output.printer import print_team
    print_team(swapped, title="CURRENT TEAM")


def cmd_reset(args):
    """Undo swaps: restore the team found by the last optimize run."""
    state = load_state()

    original = state.get("original_team")
    if not original:
        print("ERROR: No team calculated. Run 'python cli.py optimize' first.")
        return

    state["current_team"] = original
    save_state(state)

    from output.printer import print_team
    print_team(original, title="CURRENT TEAM")


def cmd_save_team(args):
    """Save the current team under a name."""
    state = load_state()

    team = state.get("current_team")
    if not team:
        print("No team to save.")
        return

    from optimizer.roster import save_team
    try:
        state["saved_teams"] = save_team(state.get("saved_teams", []), args.name, team)
    except ValueError as e:
        print(f"ERROR: {e}")
        return
    save_state(state)
    print(f"Saved team {args.name.strip()!r} (score {team.total_score:,.0f})")


def cmd_teams(args):
    """List saved teams."""
    state = load_state()

    from output.printer import print_saved_teams
    print_saved_teams(state.get("saved_teams", []))


def cmd_rename_team(args):
    """Rename a saved team."""
    state = load_state()

    from optimizer.roster import rename_saved_team
    try:
        state["saved_teams"] = rename_saved_team(state.get("saved_teams", []), args.team, args.new_name)
    except ValueError as e:
        print(f"ERROR: {e}")
        return
    save_state(state)
    print("Team renamed.")


def cmd_delete_team(args):
    """Delete a saved team."""
    state = load_state()

    from optimizer.roster import delete_saved_team
    try:
        state["saved_teams"], deleted = delete_saved_team(state.get("saved_teams", []), args.team)
    except ValueError as e:
        print(f"ERROR: {e}")
        return
    save_state(state)
    print(f"{deleted.name!r} deleted.")


def cmd_upgrade(args):
    """Upgrade a Legendary champion to Mythic and refresh the teams that use it."""
    state = load_state()
    if not state.get("reference"):
        print("ERROR: No reference data. Run 'python cli.py load-data' first.")
        return

    from optimizer.roster import find_roster_entry, replace_in_roster, upgrade_champion
    from optimizer.scorer import ensure_scored

    roster = state.get("roster", [])
    champion = find_roster_entry(roster, args.champion)
    if champion is None:
        print(f"ERROR: No roster champion matches {args.champion!r}.")
        return

    try:
        upgraded = ensure_scored(upgrade_champion(champion), GameConstants.default())
    except ValueError as e:
        print(f"ERROR: {e}")
        return

    state["roster"] = replace_in_roster(roster, upgraded)
    updated = _refresh_teams(state, upgraded)
    save_state(state)

    print(f"{upgraded.name} has been upgraded to {upgraded.base_rarity}!")
    if updated:
        print(f"{updated} saved team(s) updated.")


# --- Main ---

def main():
    parser = argparse.ArgumentParser(
        description="Champion Team Optimizer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Workflow:
  1. python cli.py load-data --dir data/raw         # Champion/synergy/legacy piece definitions
  2. python cli.py load-roster --file roster.json    # Your champions (or: prefill)
  3. python cli.py optimize --require-healer         # Find the best team
  4. python cli.py save-team "Raid Team"             # Keep it
  5. python cli.py optimize --exclude-team "Raid Team"  # Best team from what's left
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # load-data
    p_data = subparsers.add_parser("load-data", help="Load reference data")
    p_data.add_argument("--dir", help="Directory with champions.json, synergies.json, legacy_pieces.json")
    p_data.add_argument("--url", help="Base URL serving the same three files")

    # prefill
    subparsers.add_parser("prefill", help="Fill the roster with every known champion")

    # load-roster
    p_roster = subparsers.add_parser("load-roster", help="Import a roster (JSON or CSV)")
    p_roster.add_argument("--file", required=True, help="Roster file path")

    # export-roster
    p_export = subparsers.add_parser("export-roster", help="Export the roster to JSON")
    p_export.add_argument("--output", help="Output file path")

    # roster
    subparsers.add_parser("roster", help="Display the roster")

    # Progress options shared by add and edit
    progress_opts = argparse.ArgumentParser(add_help=False)
    progress_opts.add_argument("--star", help="Star color tier, e.g. 'Gold 2-Star'")
    progress_opts.add_argument("--force", type=int, choices=sorted(config.FORCE_LEVEL_MODIFIER),
                               help="Force level")
    progress_opts.add_argument("--gear", action="append", metavar="SLOT=RARITY",
                               help="Gear rarity for one slot (repeatable)")
    progress_opts.add_argument("--legacy-piece", metavar="ID", help="Legacy piece id ('' to unequip)")
    progress_opts.add_argument("--legacy-star", metavar="TIER", help="Legacy piece star color tier")

    # add
    p_add = subparsers.add_parser("add", parents=[progress_opts], help="Add a champion to the roster")
    p_add.add_argument("champion", help="Champion id or name")

    # edit
    p_edit = subparsers.add_parser("edit", parents=[progress_opts], help="Edit a roster champion")
    p_edit.add_argument("champion", help="Roster id, champion id, or name")

    # remove
    p_remove = subparsers.add_parser("remove", help="Remove a champion from the roster")
    p_remove.add_argument("champion", help="Roster id, champion id, or name")

    # optimize
    p_opt = subparsers.add_parser("optimize", help="Find the optimal team")
    p_opt.add_argument("--require-healer", action="store_true", help="Team must include a healer")
    p_opt.add_argument("--exclude-team", action="append", metavar="NAME",
                       help="Exclude members of a saved team (repeatable)")

    # show
    subparsers.add_parser("show", help="Display the current team")

    # swap
    p_swap = subparsers.add_parser("swap", help="Swap a member of the current team")
    p_swap.add_argument("index", type=int, help=f"Member position (0-{config.TEAM_SIZE - 1})")
    p_swap.add_argument("champion", help="Roster id, champion id, or name of the replacement")

    # reset
    subparsers.add_parser("reset", help="Restore the team from the last optimize run")

    # save-team
    p_save = subparsers.add_parser("save-team", help="Save the current team")
    p_save.add_argument("name")

    # teams
    subparsers.add_parser("teams", help="List saved teams")

    # rename-team
    p_rename = subparsers.add_parser("rename-team", help="Rename a saved team")
    p_rename.add_argument("team", help="Saved team id or name")
    p_rename.add_argument("new_name")

    # delete-team
    p_delete = subparsers.add_parser("delete-team", help="Delete a saved team")
    p_delete.add_argument("team", help="Saved team id or name")

    # upgrade
    p_upgrade = subparsers.add_parser("upgrade", help="Upgrade a Legendary champion to Mythic")
    p_upgrade.add_argument("champion", help="Roster id, champion id, or name")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if not args.command:
        parser.print_help()
        return

    commands = {
        "load-data": cmd_load_data,
        "prefill": cmd_prefill,
        "load-roster": cmd_load_roster,
        "export-roster": cmd_export_roster,
        "roster": cmd_roster,
        "add": cmd_add,
        "edit": cmd_edit,
        "remove": cmd_remove,
        "optimize": cmd_optimize,
        "show": cmd_show,
        "swap": cmd_swap,
        "reset": cmd_reset,
        "save-team": cmd_save_team,
        "teams": cmd_teams,
        "rename-team": cmd_rename_team,
        "delete-team": cmd_delete_team,
        "upgrade": cmd_upgrade,
    }

    cmd_func = commands.get(args.command)
    if cmd_func:
        cmd_func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
