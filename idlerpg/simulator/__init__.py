"""Monte Carlo balance simulator."""
from .config import SimConfig
from .presets import PresetRegistry, full_progression, loot_analysis, zone_balance
from .report import SimReport, print_report
from .runner import make_run_rng, run_batch, run_simulation, run_single
from .stats import LootStats, PrestigeCycle, RunStats

__all__ = [
    "LootStats",
    "PresetRegistry",
    "PrestigeCycle",
    "RunStats",
    "SimConfig",
    "SimReport",
    "full_progression",
    "loot_analysis",
    "make_run_rng",
    "print_report",
    "run_batch",
    "run_simulation",
    "run_single",
    "zone_balance",
]
