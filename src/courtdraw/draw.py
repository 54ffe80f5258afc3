#!/usr/bin/env python3
"""Court Auto-Draw.

Draw mode (default):
    courtdraw [event.yaml] [--seed N] [-o DIR]

    Builds the eligible player pool from the event file, draws non-reserve
    players onto every selected court/field and writes:
      {DIR}/matches.txt   - Match sheet, slot by slot
      {DIR}/matches.json  - Match list for persistence / re-verification
      {DIR}/matches.csv   - One row per occupied slot
      {DIR}/stats.txt     - Validation report + balance statistics

Verify mode:
    courtdraw [event.yaml] --verify matches.json

    Re-reads a saved match list and checks it against the event's layout.
    Exit code 0 if valid, 1 if violations found.

Examples:
    courtdraw                            # event.yaml, random draw
    courtdraw ladder.yaml --seed 7 -o w3 # reproducible draw into w3/
    courtdraw ladder.yaml --verify w3/matches.json
"""

import argparse
import logging
import sys
from pathlib import Path

from courtdraw.automatch import DrawError
from courtdraw.config import load_event
from courtdraw.constraints import format_validation_report, validate_matches
from courtdraw.eligibility import build_eligible_players, non_reserve_players
from courtdraw.output import read_matches_json, write_outputs
from courtdraw.stats import compute_stats, format_stats_report
from courtdraw.store import MatchStore


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Court Auto-Draw",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Exit codes:
  0  Draw valid
  1  No eligible players, draw failure, or constraint violations
""",
    )
    parser.add_argument(
        "config", nargs="?", default="event.yaml",
        help="Path to event YAML file (default: event.yaml)"
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Random seed for a reproducible draw. Omit to re-roll."
    )
    parser.add_argument(
        "--output-prefix", "-o", default="output",
        help="Output directory for generated files (default: output/)"
    )
    parser.add_argument(
        "--verify", metavar="JSON",
        help="Verify a saved matches.json instead of drawing"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Show debug logging from the draw"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config_path = args.config
    if not Path(config_path).exists():
        print(f"Error: event file {config_path} not found")
        sys.exit(1)

    print(f"Loading event from {config_path}...")
    config = load_event(config_path)
    layout = config["layout"]

    players = build_eligible_players(
        config["members"], config["criteria"],
        teams=config["teams"],
        match_types=config["match_types"],
        genders=config["genders"],
    )
    reserves = len(players) - len(non_reserve_players(players))
    print(f"Eligible players: {len(players)} ({reserves} reserve)")

    if args.verify:
        print(f"Verifying matches from {args.verify}...")
        matches = read_matches_json(args.verify)
        print(f"Loaded {len(matches)} matches")
        result = validate_matches(matches, layout, players)
        print(format_validation_report(result))
        stats = compute_stats(matches, layout, players)
        print("\n" + format_stats_report(stats))
        sys.exit(0 if result["valid"] else 1)

    store = MatchStore(event_id=config["event_id"])
    store.sync_to_resources(config["court_ids"], config["field_ids"])
    if not store.matches:
        print("Error: no courts or fields selected!")
        sys.exit(1)

    print(f"Drawing {len(store.matches)} matches with layout "
          f"{layout.name} (seed={args.seed})...")
    try:
        matches = store.auto_draw(players, layout, seed=args.seed)
    except DrawError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print("\nValidating...")
    result = validate_matches(matches, layout, players)
    report = format_validation_report(result)
    print(report)

    stats = compute_stats(matches, layout, players)
    stats_text = format_stats_report(stats)
    print("\n" + stats_text)

    print("\nWriting output files...")
    write_outputs(matches, layout, output_prefix=args.output_prefix,
                  courts=config["courts"], fields=config["fields"])

    stats_path = Path(args.output_prefix) / "stats.txt"
    stats_path.write_text(report + "\n\n" + stats_text)
    print(f"Written: {stats_path}")

    if result["valid"]:
        print("\nDraw generated successfully!")
    else:
        print(f"\nDraw has {len(result['errors'])} constraint violations.")
        sys.exit(1)


if __name__ == "__main__":
    main()
