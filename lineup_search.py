# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Search every batting order of a roster for the best and worst lineups.

Usage:
    uv run lineup_search.py --roster data/sample_roster.json --games 200
    uv run lineup_search.py --limit 5000 --seed 42 --json-out results.json
"""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError

from config import SimConfig
from lineups import RosterSizeError
from pipeline import LineupSimulator, SimulationError
from report import print_report, write_report_json
from roster import RosterError, load_roster
from simulation import BullpenPolicy


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Simulate every 9-player batting order from a roster and rank them by runs."
    )
    parser.add_argument(
        "--roster", default=None,
        help="Roster JSON file (default: bundled data/sample_roster.json).",
    )
    parser.add_argument(
        "--games", type=int, default=None, metavar="G",
        help="Games simulated per lineup (default: 200 or $LINEUP_GAMES).",
    )
    parser.add_argument("--top-k", type=int, default=None, help="Top lineups to keep (default: 256).")
    parser.add_argument("--bottom-k", type=int, default=None, help="Bottom lineups to keep (default: 10).")
    parser.add_argument(
        "--workers", type=int, default=None,
        help="Worker processes (default: number of CPUs).",
    )
    parser.add_argument("--seed", type=int, default=None, help="Base random seed.")
    parser.add_argument(
        "--limit", type=int, default=None, metavar="N",
        help="Stop after N lineups instead of the full enumeration.",
    )
    parser.add_argument(
        "--bullpen", action="store_true",
        help="Randomize starter hand and allow one late pitching change.",
    )
    parser.add_argument("--json-out", default=None, help="Also write the report as JSON.")
    parser.add_argument("--verbose", action="store_true", help="Debug logging.")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    try:
        config = SimConfig.from_env(
            games_per_lineup=args.games,
            top_k=args.top_k,
            bottom_k=args.bottom_k,
            workers=args.workers,
            seed=args.seed,
            max_lineups=args.limit,
        )
    except ValidationError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 2

    try:
        roster = load_roster(args.roster)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except RosterError as e:
        print(f"Error: {e}", file=sys.stderr)
        for detail in e.details:
            print(f"  {detail}", file=sys.stderr)
        return 1

    try:
        simulator = LineupSimulator(
            roster,
            config=config,
            pitcher_policy_factory=BullpenPolicy if args.bullpen else None,
        )
        report = simulator.run()
    except RosterSizeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except SimulationError as e:
        print(f"Error: simulation failed: {e}", file=sys.stderr)
        return 1

    print_report(report)
    if args.json_out:
        path = write_report_json(report, args.json_out)
        print(f"Report written to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
