"""Per-run statistics collected by the Monte Carlo runner."""
from dataclasses import dataclass, field
from typing import Optional

from ..models import Rarity

# Index 0 is unused so zone ids index directly
ZONE_SLOTS = 11


def _zone_counters() -> list[int]:
    return [0] * ZONE_SLOTS


@dataclass
class LootStats:
    """Drop counts for one run. Attempts count regular kills only."""
    total_drops: int = 0
    boss_drops: int = 0
    total_drop_attempts: int = 0
    upgrades_equipped: int = 0
    drops_by_rarity: dict[str, int] = field(
        default_factory=lambda: {rarity.name: 0 for rarity in Rarity}
    )

    def record_drop(self, rarity: Rarity, equipped: bool, from_boss: bool = False) -> None:
        self.total_drops += 1
        if from_boss:
            self.boss_drops += 1
        self.drops_by_rarity[rarity.name] = self.drops_by_rarity.get(rarity.name, 0) + 1
        if equipped:
            self.upgrades_equipped += 1

    @property
    def mob_drops(self) -> int:
        return self.total_drops - self.boss_drops

    @property
    def legendary_drops(self) -> int:
        return self.drops_by_rarity.get(Rarity.LEGENDARY.name, 0)

    def drop_rate(self) -> float:
        """Share of regular kills that dropped an item."""
        if self.total_drop_attempts == 0:
            return 0.0
        return self.mob_drops / self.total_drop_attempts


@dataclass
class PrestigeCycle:
    """One stretch of play between two prestiges (or start and prestige)."""
    rank: int
    ticks_to_complete: int
    final_level: int
    deaths: int = 0
    kills: int = 0
    combat_ticks: int = 0
    regen_ticks: int = 0
    fight_count: int = 0
    ticks_at_zone_cap: int = 0
    boss_deaths: int = 0
    regular_deaths: int = 0


@dataclass
class RunStats:
    """Outcome of a single simulated character."""
    run_index: int = 0
    seed: Optional[int] = None
    final_level: int = 1
    final_zone: int = 1
    final_subzone: int = 1
    final_prestige: int = 0
    total_kills: int = 0
    boss_kills: int = 0
    total_deaths: int = 0
    boss_deaths: int = 0
    regular_deaths: int = 0
    total_ticks: int = 0
    reached_target: bool = False
    loot_stats: LootStats = field(default_factory=LootStats)
    final_avg_ilvl: float = 0.0
    zone_deaths: list[int] = field(default_factory=_zone_counters)
    zone_kills: list[int] = field(default_factory=_zone_counters)
    ticks_per_zone: list[int] = field(default_factory=_zone_counters)
    level_up_ticks: list[int] = field(default_factory=list)
    prestige_cycles: list[PrestigeCycle] = field(default_factory=list)
    combat_ticks: int = 0
    regen_ticks: int = 0
    fight_count: int = 0
    ticks_at_zone_cap: int = 0
    xp_from_kills: int = 0
    xp_from_passive: float = 0.0
    dungeons_discovered: int = 0
    fishing_spots_discovered: int = 0
    challenges_discovered: int = 0
    haven_discovered: bool = False
