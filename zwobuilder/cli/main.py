"""Terminal CLI entrypoint for zwobuilder."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from zwobuilder.analysis.summary import WorkoutSummary, summarize_workout
from zwobuilder.core.settings import load_settings
from zwobuilder.core.store import JsonFileStore
from zwobuilder.workout.format import format_duration
from zwobuilder.workout.library import build_workout_from_template, list_templates
from zwobuilder.workout.parser import load_workout, save_workout
from zwobuilder.workout.share import share_url, workout_from_query
from zwobuilder.workout.user_workouts import list_my_workouts, save_my_workout

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Build, convert and analyze structured bike workouts")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--store",
        type=Path,
        default=None,
        help="Preference store file (default ~/.zwobuilder/store.json)",
    )
    sub = parser.add_subparsers(dest="command")

    info = sub.add_parser("info", help="Print duration, score and zone analysis of a workout file")
    info.add_argument("path", type=Path)
    info.add_argument("--ftp", type=int, default=None, help="Threshold power in watts")
    info.add_argument("--json", action="store_true", help="Print the summary as JSON")

    convert = sub.add_parser("convert", help="Convert a .zwo/.erg/.mrc file to .zwo")
    convert.add_argument("path", type=Path)
    convert.add_argument("--out-dir", type=Path, default=Path("."))

    share = sub.add_parser("share", help="Print a share link for a workout file")
    share.add_argument("path", type=Path)
    share.add_argument("--base-url", default="https://example.invalid/")

    open_url = sub.add_parser("open", help="Decode a share link and write it as .zwo")
    open_url.add_argument("url")
    open_url.add_argument("--out-dir", type=Path, default=Path("."))

    save = sub.add_parser("save", help="Save a workout file to my workouts")
    save.add_argument("path", type=Path)
    save.add_argument("--overwrite", action="store_true")

    sub.add_parser("list", help="List my saved workouts")

    template = sub.add_parser("template", help="Write a built-in template as .zwo")
    template.add_argument("key", nargs="?", default=None, help="Template key; omit to list them")
    template.add_argument("--out-dir", type=Path, default=Path("."))
    return parser


def _print_summary(summary: WorkoutSummary) -> None:
    print(f"{summary.name or '(unnamed)'}")
    print(f"  Duration   {format_duration(summary.duration_sec)}")
    print(f"  TSS        {summary.score}")
    print(f"  XP         {summary.xp}")
    print(f"  IF         {summary.intensity_factor:.2f}")
    print(f"  Energy     {summary.fuel.kilojoules} kJ / {summary.fuel.kilocalories} kcal")
    print(f"  Fuel       {summary.fuel.carbohydrate_g} g carbs, {summary.fuel.water_ml} ml water")
    print("  Zones")
    for zone, minutes in zip(summary.zones.zones, summary.zones.minutes()):
        print(f"    {zone.key} {zone.name:<16} {zone.label:>18} W  {minutes:7.2f} min")
    if summary.zones.unclassified_seconds:
        print(f"    -- unclassified {summary.zones.unclassified_seconds / 60:.2f} min")
    print("  Power curve")
    for point in summary.power_curve:
        print(f"    {format_duration(point.duration):>8}  {point.power:6.0f} W")


def run_info(path: Path, ftp: int, as_json: bool) -> int:
    workout = load_workout(path)
    summary = summarize_workout(workout, ftp)
    if as_json:
        print(json.dumps(asdict(summary), indent=2))
        return 0
    _print_summary(summary)
    logger.debug("Analyzed %d segments at %d W threshold", len(workout), ftp)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.command is None:
        parser.print_help()
        return 1

    store = JsonFileStore(args.store)
    settings = load_settings(store)

    try:
        if args.command == "info":
            return run_info(args.path, args.ftp or settings.ftp_watts, args.json)
        if args.command == "convert":
            print(save_workout(load_workout(args.path), args.out_dir))
            return 0
        if args.command == "share":
            print(share_url(load_workout(args.path), args.base_url))
            return 0
        if args.command == "open":
            workout = workout_from_query(args.url)
            if workout is None:
                print("No shared workout in this link", file=sys.stderr)
                return 1
            print(save_workout(workout, args.out_dir))
            return 0
        if args.command == "save":
            print(save_my_workout(store, load_workout(args.path), overwrite=args.overwrite))
            return 0
        if args.command == "list":
            for item in list_my_workouts(store):
                print(f"{item.name:<32} {format_duration(item.workout.calculate_duration())}")
            return 0
        if args.command == "template":
            if args.key is None:
                for item in list_templates():
                    print(f"{item.key:<16} {item.name:<20} {item.category}")
                return 0
            print(save_workout(build_workout_from_template(args.key), args.out_dir))
            return 0
    except (ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
