"""Batch simulation parameters."""
import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from ..config import DEFAULT_BALANCE, BalanceConfig

logger = logging.getLogger(__name__)

# Verbosity -> log level used by the CLI and TUI
VERBOSITY_LEVELS: dict[int, int] = {
    0: logging.ERROR,     # quiet
    1: logging.WARNING,   # normal
    2: logging.DEBUG,     # verbose
}


@dataclass(frozen=True)
class SimConfig:
    """Immutable input to one Monte Carlo batch."""
    num_runs: int = 1000
    seed: Optional[int] = None
    max_ticks_per_run: int = 1_000_000
    target_zone: int = 10
    target_prestige: int = 0
    starting_prestige: int = 0
    simulate_loot: bool = True
    simulate_prestige: bool = False
    verbosity: int = 1
    balance: BalanceConfig = field(default=DEFAULT_BALANCE)

    def validated(self) -> "SimConfig":
        """Clamp out-of-range values instead of rejecting the batch."""
        changes = {}
        max_zone = self.balance.max_zone
        if not 1 <= self.target_zone <= max_zone:
            clamped = min(max(self.target_zone, 1), max_zone)
            logger.warning("target_zone %d out of range, using %d", self.target_zone, clamped)
            changes["target_zone"] = clamped
        for name in ("num_runs", "max_ticks_per_run", "target_prestige", "starting_prestige"):
            value = getattr(self, name)
            if value < 0:
                logger.warning("%s %d is negative, using 0", name, value)
                changes[name] = 0
        if self.verbosity not in VERBOSITY_LEVELS:
            changes["verbosity"] = min(max(self.verbosity, 0), 2)
        return replace(self, **changes) if changes else self

    @property
    def log_level(self) -> int:
        return VERBOSITY_LEVELS.get(self.verbosity, logging.WARNING)

    def with_overrides(self, **changes) -> "SimConfig":
        return replace(self, **changes)
