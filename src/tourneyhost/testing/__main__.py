"""Testing CLI for Tourney Host.

This module provides an interactive command-line interface for generating
random events and leagues and inspecting their placements and rankings.
"""

# Tourney Host
# Copyright (C) 2025  Tourney Host developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import argparse
import shlex
import sys
from pathlib import Path
from typing import Dict, List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter

from tourneyhost.exceptions import TourneyHostException
from tourneyhost.models import EventVariant, MatchType
from tourneyhost.testing.rtg import (
    RandomTournamentGenerator,
    RatingDistribution,
    ResultPattern,
    RTGConfig,
)
from tourneyhost.utils import setup_logger

logger = setup_logger(__name__)

VARIANT_CHOICES = [v.value.lower() for v in EventVariant]
PATTERN_CHOICES = [p.value for p in ResultPattern]
DISTRIBUTION_CHOICES = [d.value for d in RatingDistribution]
EXIT_WORDS = {"exit", "quit", "q"}


# ========== Commands ==========


def _config_from_args(args: argparse.Namespace) -> RTGConfig:
    doubles = getattr(args, "doubles", False)
    return RTGConfig(
        num_players=args.players,
        variant=EventVariant[args.variant.upper()],
        match_type=MatchType.DOUBLES if doubles else MatchType.SINGLES,
        games_per_match=getattr(args, "games", 1),
        number_of_seeds=getattr(args, "seeds", 0),
        third_place_match=getattr(args, "bronze", False),
        result_pattern=ResultPattern(getattr(args, "pattern", "realistic")),
        rating_distribution=RatingDistribution(getattr(args, "ratings", "normal")),
        seed=args.seed,
    )


def print_placements(data: Dict) -> None:
    event = data["event"]
    rows = sorted(data["placements"].items(), key=lambda item: int(item[1]))
    print("\nPlacements:")
    for participant_id, label in rows:
        print(f"  {label:>4}  {event.participant_name(participant_id)}")


def run_generate_command(args: argparse.Namespace) -> int:
    """Generate, play and validate one random event."""
    rtg = RandomTournamentGenerator(_config_from_args(args))
    data = rtg.generate_complete_tournament()

    if args.output:
        output_path = Path(args.output)
        output_path.write_text(rtg.export_json_format(data), encoding="utf-8")
        print(f"Event saved to: {output_path}")

    event = data["event"]
    print(f"Format: {event.variant.value}")
    print(f"Participants: {len(event.participants())}")
    print(f"Played matches: {data['played_matches']}")
    print(f"Walkovers: {data['walkovers']}")
    print_placements(data)

    violations: List[str] = data.get("violations", [])
    if violations:
        print(f"\nViolations: {len(violations)}")
        for violation in violations:
            print(f"  - {violation}")
        return 1
    print("\nNo structural violations")
    return 0


def run_league_command(args: argparse.Namespace) -> int:
    """Play several events with one player pool and print the rankings."""
    rtg = RandomTournamentGenerator(_config_from_args(args))
    data = rtg.generate_league(args.tournaments)

    stats = data["statistics"]
    print(
        f"{stats['name']}: {stats['total_tournaments']} tournaments, "
        f"{stats['total_players']} players\n"
    )
    print(f"  {'Rank':>4}  {'Player':<20} {'Pts':>5} {'W':>3} {'L':>3}")
    for ranking in data["rankings"]:
        print(
            f"  {ranking.rank:>4}  {ranking.player.display_name:<20} "
            f"{ranking.points:>5} {ranking.matches_won:>3} {ranking.matches_lost:>3}"
        )
    return 0


# ========== Parsers ==========


def create_main_parser() -> argparse.ArgumentParser:
    """Create main argument parser."""
    parser = argparse.ArgumentParser(
        prog="tourneyhost-test",
        description="Testing CLI for Tourney Host",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Double elimination with 12 players, 4 seeds, best of 3
  tourneyhost-test generate --players 12 --variant double_elim --seeds 4 --games 3

  # League over five round-robins
  tourneyhost-test league --tournaments 5 --variant round_robin
        """,
    )
    parser.add_argument(
        "--interactive", "-i", action="store_true", help="Start in interactive mode"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    generate = subparsers.add_parser("generate", help="Generate a random event")
    generate.add_argument("--players", type=int, default=8, help="Number of players")
    generate.add_argument("--variant", choices=VARIANT_CHOICES, default="single_elim")
    generate.add_argument("--doubles", action="store_true", help="Pair into teams")
    generate.add_argument("--games", type=int, default=1, help="Best of N")
    generate.add_argument("--seeds", type=int, default=0, help="Seeded participants")
    generate.add_argument("--bronze", action="store_true", help="Third-place match")
    generate.add_argument("--pattern", choices=PATTERN_CHOICES, default="realistic")
    generate.add_argument("--ratings", choices=DISTRIBUTION_CHOICES, default="normal")
    generate.add_argument("--seed", type=int, help="Random seed")
    generate.add_argument("--output", help="Write the event as JSON to this file")
    generate.set_defaults(func=run_generate_command)

    league = subparsers.add_parser("league", help="Generate a league")
    league.add_argument("--players", type=int, default=8, help="Number of players")
    league.add_argument("--tournaments", type=int, default=3)
    league.add_argument("--variant", choices=VARIANT_CHOICES, default="single_elim")
    league.add_argument("--seed", type=int, help="Random seed")
    league.set_defaults(func=run_league_command)
    return parser


# ========== Modes ==========


def run_command(argv: List[str]) -> int:
    """Parse one command line and run it."""
    parser = create_main_parser()
    args = parser.parse_args(argv)
    if args.interactive:
        return run_interactive_mode()
    if hasattr(args, "func"):
        return args.func(args)
    parser.print_help()
    return 0


def run_interactive_mode(session: Optional[PromptSession] = None) -> int:
    """Read commands until exit; each line is parsed like the command line."""
    session = session or PromptSession(
        completer=WordCompleter(["generate", "league", "exit"])
    )
    print("Type a command (generate, league) or exit to leave")
    while True:
        try:
            line = session.prompt("tourneyhost-test> ").strip()
        except (EOFError, KeyboardInterrupt):
            break
        if not line:
            continue
        if line in EXIT_WORDS:
            break
        try:
            run_command(shlex.split(line))
        except SystemExit:
            # argparse exits on bad input
            continue
        except TourneyHostException as e:
            print(f"Error: {e}")
            logger.exception("Command execution failed")
    return 0


def main() -> int:
    """Main entry point for tourneyhost-test CLI."""
    argv = sys.argv[1:]
    if not argv:
        return run_interactive_mode()
    return run_command(argv)


if __name__ == "__main__":
    sys.exit(main())
