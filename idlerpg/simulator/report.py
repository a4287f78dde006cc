"""Aggregate ``RunStats`` into a balance report.

Pure arithmetic over the run list. Every average over an empty list is
0.0, so a zero-run batch yields an empty but valid report.
"""
import json
import logging
import statistics
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import DEFAULT_BALANCE, BalanceConfig
from ..core.zones import ZONES
from ..models import Rarity
from ..utils import format_number, format_ticks
from .config import SimConfig
from .stats import ZONE_SLOTS, RunStats

logger = logging.getLogger(__name__)

BANNER = "=" * 60
RULE = "-" * 60

# Balance assessment thresholds
HIGH_ZONE_DEATH_RATE = 0.5
LOW_AVG_FINAL_ZONE = 5.0
LOW_LEGENDARY_PER_RUN = 0.1
HIGH_AVG_DEATHS = 100.0


def _average(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _distribution(values: list[int]) -> dict[int, int]:
    counts: dict[int, int] = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1
    return dict(sorted(counts.items()))


@dataclass
class ZoneSummary:
    """Per-zone averages across all runs."""
    zone: int
    name: str
    avg_ticks: float = 0.0
    avg_kills: float = 0.0
    avg_deaths: float = 0.0

    @property
    def death_rate(self) -> float:
        """Deaths per kill."""
        return self.avg_deaths / max(self.avg_kills, 1.0)


@dataclass
class SimReport:
    """Summary statistics of one batch."""
    num_runs: int = 0
    target_zone: int = 10
    max_ticks_per_run: int = 0
    seed: Optional[int] = None
    runs_completed: int = 0
    runs_timed_out: int = 0
    avg_final_level: float = 0.0
    avg_final_zone: float = 0.0
    avg_final_prestige: float = 0.0
    avg_kills: float = 0.0
    avg_boss_kills: float = 0.0
    avg_deaths: float = 0.0
    avg_boss_deaths: float = 0.0
    avg_ticks_to_clear: float = 0.0
    min_deaths: int = 0
    median_deaths: float = 0.0
    max_deaths: int = 0
    level_distribution: dict[int, int] = field(default_factory=dict)
    zone_distribution: dict[int, int] = field(default_factory=dict)
    avg_drops: float = 0.0
    avg_upgrades: float = 0.0
    avg_drops_by_rarity: dict[str, float] = field(default_factory=dict)
    drop_rate: float = 0.0
    avg_final_ilvl: float = 0.0
    avg_xp_from_kills: float = 0.0
    avg_xp_from_passive: float = 0.0
    avg_dungeons: float = 0.0
    avg_fishing_spots: float = 0.0
    zones: list[ZoneSummary] = field(default_factory=list)
    level_curve: list[float] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    balance: BalanceConfig = field(default=DEFAULT_BALANCE, repr=False)

    @property
    def completion_rate(self) -> float:
        return self.runs_completed / self.num_runs if self.num_runs else 0.0

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    @classmethod
    def from_runs(cls, runs: list[RunStats], config: Optional[SimConfig] = None) -> "SimReport":
        config = config or SimConfig(num_runs=len(runs))
        n = len(runs)
        report = cls(
            num_runs=n,
            target_zone=config.target_zone,
            max_ticks_per_run=config.max_ticks_per_run,
            seed=config.seed,
            balance=config.balance,
        )
        if n == 0:
            return report

        completed = [r for r in runs if r.reached_target]
        deaths = [r.total_deaths for r in runs]

        report.runs_completed = len(completed)
        report.runs_timed_out = n - len(completed)
        report.avg_final_level = _average([r.final_level for r in runs])
        report.avg_final_zone = _average([r.final_zone for r in runs])
        report.avg_final_prestige = _average([r.final_prestige for r in runs])
        report.avg_kills = _average([r.total_kills for r in runs])
        report.avg_boss_kills = _average([r.boss_kills for r in runs])
        report.avg_deaths = _average(deaths)
        report.avg_boss_deaths = _average([r.boss_deaths for r in runs])
        report.avg_ticks_to_clear = _average([r.total_ticks for r in completed])
        report.min_deaths = min(deaths)
        report.median_deaths = statistics.median(deaths)
        report.max_deaths = max(deaths)
        report.level_distribution = _distribution([r.final_level for r in runs])
        report.zone_distribution = _distribution([r.final_zone for r in runs])

        report.avg_drops = _average([r.loot_stats.total_drops for r in runs])
        report.avg_upgrades = _average([r.loot_stats.upgrades_equipped for r in runs])
        report.avg_drops_by_rarity = {
            rarity.name: _average([r.loot_stats.drops_by_rarity.get(rarity.name, 0) for r in runs])
            for rarity in Rarity
        }
        attempts = sum(r.loot_stats.total_drop_attempts for r in runs)
        report.drop_rate = sum(r.loot_stats.mob_drops for r in runs) / max(attempts, 1)
        report.avg_final_ilvl = _average([r.final_avg_ilvl for r in runs])
        report.avg_xp_from_kills = _average([r.xp_from_kills for r in runs])
        report.avg_xp_from_passive = _average([r.xp_from_passive for r in runs])
        report.avg_dungeons = _average([r.dungeons_discovered for r in runs])
        report.avg_fishing_spots = _average([r.fishing_spots_discovered for r in runs])

        for zone in ZONES:
            if zone.id >= ZONE_SLOTS:
                break
            report.zones.append(ZoneSummary(
                zone=zone.id,
                name=zone.name,
                avg_ticks=_average([r.ticks_per_zone[zone.id] for r in runs]),
                avg_kills=_average([r.zone_kills[zone.id] for r in runs]),
                avg_deaths=_average([r.zone_deaths[zone.id] for r in runs]),
            ))

        deepest = max(len(r.level_up_ticks) for r in runs)
        for i in range(deepest):
            reached = [r.level_up_ticks[i] for r in runs if len(r.level_up_ticks) > i]
            report.level_curve.append(_average(reached))

        report.warnings = report._assess()
        return report

    def _assess(self) -> list[str]:
        warnings = []
        for zone in self.zones:
            if zone.avg_kills > 0 and zone.death_rate > HIGH_ZONE_DEATH_RATE:
                warnings.append(
                    f"Zone {zone.zone} ({zone.name}) is deadly: "
                    f"{zone.death_rate:.2f} deaths per kill"
                )
        if self.avg_final_zone < LOW_AVG_FINAL_ZONE:
            warnings.append(f"Progression is slow: average final zone {self.avg_final_zone:.1f}")
        legendaries = self.avg_drops_by_rarity.get(Rarity.LEGENDARY.name, 0.0)
        if self.avg_drops > 0 and legendaries < LOW_LEGENDARY_PER_RUN:
            warnings.append(f"Very few legendaries: {legendaries:.2f} per run")
        if self.avg_deaths > HIGH_AVG_DEATHS:
            warnings.append(f"Too many deaths: {self.avg_deaths:.1f} per run")
        return warnings

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def to_text(self) -> str:
        lines = [
            BANNER,
            "IDLE RPG BALANCE SIMULATION",
            BANNER,
            f"Runs: {self.num_runs}   Target zone: {self.target_zone}   Seed: {self.seed}",
            "",
            "PROGRESSION",
            RULE,
            f"  Runs completed:      {self.runs_completed} ({self.completion_rate:.1%})",
            f"  Runs timed out:      {self.runs_timed_out}",
            f"  Avg final level:     {self.avg_final_level:.1f}",
            f"  Avg final zone:      {self.avg_final_zone:.2f}",
            f"  Avg final prestige:  {self.avg_final_prestige:.2f}",
            f"  Avg kills:           {format_number(self.avg_kills)}"
            f" ({self.avg_boss_kills:.1f} bosses)",
            f"  Avg time to clear:   {format_ticks(self.avg_ticks_to_clear, self.balance)}"
            f" ({format_number(self.avg_ticks_to_clear)} ticks)",
            f"  XP kills / passive:  {format_number(self.avg_xp_from_kills)}"
            f" / {format_number(self.avg_xp_from_passive)}",
            "",
            "LOOT",
            RULE,
            f"  Avg drops:           {self.avg_drops:.1f} ({self.drop_rate:.1%} of regular kills)",
            f"  Avg upgrades:        {self.avg_upgrades:.1f}",
            f"  Avg final ilvl:      {self.avg_final_ilvl:.1f}",
        ]
        for rarity in Rarity:
            avg = self.avg_drops_by_rarity.get(rarity.name, 0.0)
            lines.append(f"    {rarity.display_name:<10} {avg:8.2f}")

        lines += ["", "ZONE COMPLETION", RULE]
        for zone, count in self.zone_distribution.items():
            share = count / self.num_runs if self.num_runs else 0.0
            lines.append(f"  Zone {zone:>2}: {count:>5} runs ({share:.1%})")

        lines += ["", "PER-ZONE", RULE,
                  f"  {'Zone':<24}{'Time':>10}{'Kills':>10}{'Deaths':>10}"]
        for zone in self.zones:
            if zone.avg_ticks == 0:
                continue
            lines.append(
                f"  {zone.zone:>2} {zone.name:<21}"
                f"{format_ticks(zone.avg_ticks, self.balance):>10}"
                f"{zone.avg_kills:>10.1f}{zone.avg_deaths:>10.1f}"
            )

        lines += [
            "",
            "DEATH ANALYSIS",
            RULE,
            f"  Avg deaths:          {self.avg_deaths:.1f} ({self.avg_boss_deaths:.1f} to bosses)",
            f"  Min / median / max:  {self.min_deaths} / {self.median_deaths:g} / {self.max_deaths}",
            "",
            "BALANCE ASSESSMENT",
            RULE,
        ]
        if self.warnings:
            lines += [f"  ! {warning}" for warning in self.warnings]
        elif self.num_runs:
            lines.append("  No balance issues detected")
        else:
            lines.append("  No runs to assess")
        lines.append(BANNER)
        return "\n".join(lines)

    def level_curve_text(self) -> str:
        """Average tick at which each level was first reached."""
        lines = ["LEVEL CURVE", RULE, f"  {'Level':>5}{'Tick':>12}{'Time':>12}"]
        for i, avg_tick in enumerate(self.level_curve):
            lines.append(
                f"  {i + 2:>5}{format_number(avg_tick):>12}"
                f"{format_ticks(avg_tick, self.balance):>12}"
            )
        if not self.level_curve:
            lines.append("  No level-ups recorded")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data.pop("balance")
        data["completion_rate"] = self.completion_rate
        for zone in data["zones"]:
            zone["death_rate"] = zone["avg_deaths"] / max(zone["avg_kills"], 1.0)
        return data

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def save_json(self, directory: Path = Path(".")) -> Path:
        """Write the report as ``sim_report_<UTC timestamp>.json`` in ``directory``."""
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        path = directory / f"sim_report_{stamp}.json"
        path.write_text(self.to_json(), encoding="utf-8")
        logger.info("Report written to %s", path)
        return path


def print_report(report: SimReport, console: Optional[Console] = None) -> None:
    """Render a report to the terminal with rich."""
    console = console or Console()
    console.print(Panel.fit(
        f"[bold]{report.num_runs}[/bold] runs to zone [bold]{report.target_zone}[/bold]   "
        f"completed [green]{report.runs_completed}[/green]   "
        f"timed out [red]{report.runs_timed_out}[/red]",
        title="Idle RPG Balance Simulation",
    ))

    table = Table(title="Per-zone averages", show_lines=False)
    table.add_column("Zone", justify="right")
    table.add_column("Name")
    table.add_column("Time", justify="right")
    table.add_column("Kills", justify="right")
    table.add_column("Deaths", justify="right")
    for zone in report.zones:
        if zone.avg_ticks == 0:
            continue
        deaths_style = "red" if zone.death_rate > HIGH_ZONE_DEATH_RATE else ""
        table.add_row(
            str(zone.zone),
            zone.name,
            format_ticks(zone.avg_ticks, report.balance),
            f"{zone.avg_kills:.1f}",
            f"[{deaths_style}]{zone.avg_deaths:.1f}[/]" if deaths_style else f"{zone.avg_deaths:.1f}",
        )
    if table.row_count:
        console.print(table)

    console.print(report.to_text(), highlight=False, markup=False)
