# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Print the box score of a recorded game.

Usage:
    uv run scorebook.py data/games/sample_game.json
    uv run scorebook.py data/games/sample_game.json --format csv
    uv run scorebook.py game.json --format json --era-innings 7
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import config
from boxscore import box_score_csv, build_box_score, render_box_score_text
from snapshot_ingestion import IngestionError, load_snapshot

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Compute the box score of a recorded game snapshot."
    )
    parser.add_argument(
        "snapshot",
        help="Path to a game snapshot JSON file.",
    )
    parser.add_argument(
        "--format", choices=("text", "json", "csv"), default="text",
        help="Output format (default: text).",
    )
    parser.add_argument(
        "--era-innings", type=int, default=None, metavar="N",
        help="Innings in a standard game for ERA "
             "(default: $SCOREBOOK_ERA_INNINGS or 9).",
    )
    parser.add_argument(
        "--output", default=None, metavar="FILE",
        help="Write the box score to FILE instead of stdout.",
    )
    args = parser.parse_args(argv)

    config.configure_logging()

    era_innings = args.era_innings
    if era_innings is None:
        try:
            era_innings = config.get_era_innings()
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
    if era_innings < 1:
        print(f"Error: --era-innings must be at least 1, got {era_innings}", file=sys.stderr)
        return 1

    try:
        snapshot = load_snapshot(args.snapshot)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except IngestionError as e:
        print(f"Error: {e}", file=sys.stderr)
        for detail in e.details:
            print(f"  {detail}", file=sys.stderr)
        return 1

    box = build_box_score(snapshot, innings_per_game=era_innings)

    if args.format == "json":
        output = json.dumps(box.model_dump(mode="json"), indent=2)
    elif args.format == "csv":
        output = box_score_csv(box)
    else:
        output = render_box_score_text(box)

    if args.output:
        Path(args.output).write_text(output)
        logger.info("Box score written to %s", args.output)
    else:
        print(output)

    for warning in box.warnings:
        print(f"Warning: {warning.message}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
