"""Command-line interface for the idle RPG balance simulator."""
import argparse
import logging
import sys
from concurrent.futures import ProcessPoolExecutor
from pathlib import Path
from typing import Optional

from .core.prestige import tier_name
from .core.progression import prestige_required_for_zone
from .core.zones import ZONES
from .simulator.config import VERBOSITY_LEVELS, SimConfig
from .simulator.presets import PresetRegistry
from .simulator.report import SimReport, print_report
from .simulator.runner import run_batch
from .snapshot import SnapshotError, load_snapshot

logger = logging.getLogger(__name__)


def print_zone_table() -> None:
    """Print zones, subzones, bosses and prestige gates."""
    print("\n" + "=" * 60)
    print("  Zones & Prestige Gates")
    print("=" * 60)
    print(f"{'Zone':<6} {'Name':<22} {'Prestige':<10} {'Subzones':<8}")
    print("-" * 60)

    for zone in ZONES:
        required = prestige_required_for_zone(zone.id)
        print(f"{zone.id:<6} {zone.name:<22} {'P' + str(required):<10} {zone.subzone_count:<8}")
        for subzone in zone.subzones:
            marker = "*" if subzone.is_zone_boss else " "
            print(f"         {marker} {subzone.name:<22} boss: {subzone.boss_name}")

    print("=" * 60)
    print("Note: * = zone boss, defeating it opens the next zone")
    print()


def print_snapshot_summary(path: Path) -> None:
    state = load_snapshot(path)
    progression = state.progression
    print("\n" + "=" * 60)
    print(f"  {state.character_name}")
    print("=" * 60)
    print(f"  Level:      {progression.character_level} ({progression.character_xp} XP)")
    print(f"  Zone:       {progression.current_zone}-{progression.current_subzone}")
    print(f"  Prestige:   P{progression.prestige_rank} ({tier_name(progression.prestige_rank)})")
    print(f"  Kills:      {progression.total_kills}")
    print(f"  Deaths:     {state.total_deaths}")
    print(f"  Equipped:   {state.equipment.equipped_count()}/7 "
          f"(avg ilvl {state.equipment.average_ilvl():.1f})")
    print("=" * 60)


def build_config(args: argparse.Namespace) -> SimConfig:
    """Turn parsed arguments into a SimConfig, starting from a preset if given."""
    if args.preset:
        config = PresetRegistry.build(args.preset)
    else:
        config = SimConfig()

    overrides = {}
    if args.runs is not None:
        overrides["num_runs"] = args.runs
    if args.zone is not None:
        overrides["target_zone"] = args.zone
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.ticks is not None:
        overrides["max_ticks_per_run"] = args.ticks
    if args.no_loot:
        overrides["simulate_loot"] = False
    if args.prestige is not None:
        overrides["simulate_prestige"] = True
        overrides["target_prestige"] = args.prestige
    if args.start is not None:
        overrides["starting_prestige"] = args.start
    if args.verbose:
        overrides["verbosity"] = 2
    elif args.quiet:
        overrides["verbosity"] = 0
    return config.with_overrides(**overrides).validated()


def build_parser() -> argparse.ArgumentParser:
    preset_lines = "\n".join(
        f"  {info.id:<10}{info.description}" for info in PresetRegistry.get_all_info()
    )
    parser = argparse.ArgumentParser(
        description="Idle RPG Monte Carlo Balance Simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  %(prog)s -n 100 -z 5 -s 42          # 100 seeded runs to zone 5
  %(prog)s --preset full --json       # Full progression, save a JSON report
  %(prog)s --prestige 5 --workers 4   # Prestige to P5 on 4 processes
  %(prog)s --show-zones               # Show the zone table

Presets:
{preset_lines}
        """,
    )

    parser.add_argument(
        "--runs", "-n",
        type=int,
        help="Number of simulated characters (default: 1000)",
    )
    parser.add_argument(
        "--zone", "-z",
        type=int,
        help="Target zone (1-10, default: 10)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        help="Base random seed; run i uses seed + i",
    )
    parser.add_argument(
        "--ticks", "-t",
        type=int,
        help="Tick limit per run (default: 1000000)",
    )
    parser.add_argument(
        "--no-loot",
        action="store_true",
        help="Disable item drops",
    )
    parser.add_argument(
        "--prestige",
        type=int,
        metavar="RANK",
        help="Simulate prestige up to RANK",
    )
    parser.add_argument(
        "--start",
        type=int,
        metavar="RANK",
        help="Starting prestige rank",
    )
    parser.add_argument(
        "--preset",
        metavar="NAME",
        help="Start from a named preset; other flags override it",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Save the report as sim_report_<timestamp>.json",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("."),
        help="Directory for --json reports (default: current directory)",
    )
    parser.add_argument(
        "--print-json",
        action="store_true",
        help="Print the report as JSON instead of text",
    )
    parser.add_argument(
        "--level-curve",
        action="store_true",
        help="Also show when each level was first reached",
    )
    parser.add_argument(
        "--show-zones",
        action="store_true",
        help="Show zone, boss and prestige gate table",
    )
    parser.add_argument(
        "--inspect",
        type=Path,
        metavar="SNAPSHOT",
        help="Summarize a saved character snapshot",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Worker processes for the batch (default: 1)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log every run",
    )
    verbosity.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log errors",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    verbosity = 2 if args.verbose else 0 if args.quiet else 1
    logging.basicConfig(
        level=VERBOSITY_LEVELS[verbosity],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_config(args)
    except KeyError as exc:
        print(f"Error: {exc.args[0]}", file=sys.stderr)
        sys.exit(1)
    logger.debug("Batch config: %s", config)

    if args.show_zones:
        print_zone_table()
        return

    if args.inspect:
        try:
            print_snapshot_summary(args.inspect)
        except (OSError, SnapshotError) as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(1)
        return

    if args.workers < 1:
        print("Error: --workers must be at least 1", file=sys.stderr)
        sys.exit(1)

    if not args.print_json:
        print(f"Running {config.num_runs:,} simulations to zone {config.target_zone}...")
    if args.workers > 1:
        with ProcessPoolExecutor(max_workers=args.workers) as executor:
            runs = run_batch(config, executor)
    else:
        runs = run_batch(config)
    report = SimReport.from_runs(runs, config)

    if args.print_json:
        print(report.to_json())
    else:
        print_report(report)
        if args.level_curve:
            print()
            print(report.level_curve_text())

    if args.json:
        path = report.save_json(args.output_dir)
        print(f"Report saved to {path}", file=sys.stderr if args.print_json else sys.stdout)


if __name__ == "__main__":
    main()
