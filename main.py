"""CLI entrypoint for the endurance pit-strategy engine."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from endurance_engine import __version__
from endurance_engine.config import load_car_presets, load_race_config
from endurance_engine.core.search import compute_strategy
from endurance_engine.report import format_stint_table, format_summary


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Endurance race pit-strategy calculator")
    parser.add_argument(
        "--config", type=Path, default=None, help="Race configuration YAML file"
    )
    parser.add_argument(
        "--preset", type=str, default=None, help="Car preset id, e.g. gr010"
    )
    parser.add_argument(
        "--top", type=int, default=5, help="Number of ranked strategies to show"
    )
    parser.add_argument(
        "--mid-race",
        nargs=2,
        type=float,
        metavar=("LAP", "FUEL"),
        default=None,
        help="Re-plan from the given lap with this much fuel on board (liters)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Load a race configuration, rank strategies and print the best plan."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    print(f"Endurance Strategy Engine v{__version__}")
    print("=" * 56)

    inputs = load_race_config(args.config)

    if args.preset:
        presets = {p.id: p for p in load_car_presets()}
        if args.preset not in presets:
            print(f"Unknown preset '{args.preset}'. Available: {', '.join(presets)}")
            return 2
        preset = presets[args.preset]
        inputs = preset.apply(inputs)
        print(f"Car preset : {preset.name}")

    if args.mid_race:
        lap, fuel = args.mid_race
        inputs = replace(inputs, mid_race_mode=True, current_lap=int(lap), current_fuel=fuel)
        print(f"Mid-race   : lap {int(lap)}, {fuel:.1f} L on board")

    report = compute_strategy(inputs)
    if report is None:
        print("\nNo valid strategy for these inputs.")
        return 1

    print()
    print(format_summary(report.ranked, top=args.top))
    print("\nStint plan:\n")
    print(format_stint_table(report.best.strategy))
    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
