"""Monte Carlo runner: many independent characters, one seed each.

Every run owns its own ``GameState`` and ``random.Random``; run ``i`` is
seeded with ``seed + i``. Runs never share state, so the batch is a plain
map over ``range(num_runs)`` and can be handed to any
``concurrent.futures`` executor without changing a single result.
"""
import logging
import random
from concurrent.futures import Executor
from functools import partial
from typing import Optional

from ..core.events import (
    BossDefeated,
    EnemySpawned,
    ItemDropped,
    LeveledUp,
    PlayerDied,
    SubzoneBossDefeated,
)
from ..core.game_state import GameState
from ..core.tick import tick
from ..models import XPCurve
from .config import SimConfig
from .report import SimReport
from .stats import PrestigeCycle, RunStats

logger = logging.getLogger(__name__)


def run_seed(seed: Optional[int], run_idx: int) -> Optional[int]:
    """Seed for run ``run_idx``; None means fresh entropy."""
    return None if seed is None else seed + run_idx


def make_run_rng(seed: Optional[int], run_idx: int) -> random.Random:
    return random.Random(run_seed(seed, run_idx))


def target_reached(state: GameState, config: SimConfig) -> bool:
    progression = state.progression
    if progression.current_zone < config.target_zone:
        return False
    return not config.simulate_prestige or progression.prestige_rank >= config.target_prestige


def should_prestige(state: GameState, config: SimConfig) -> bool:
    """Prestige once the zone target (or the zone cap) is reached short of the rank target."""
    if not config.simulate_prestige:
        return False
    progression = state.progression
    if progression.prestige_rank >= config.target_prestige or not state.can_prestige():
        return False
    return (progression.current_zone >= config.target_zone
            or progression.is_at_zone_cap(config.balance))


class _CycleCounter:
    """Counters for the current prestige cycle."""

    __slots__ = ("start_tick", "deaths", "boss_deaths", "kills", "combat_ticks",
                 "regen_ticks", "fight_count", "ticks_at_zone_cap")

    def __init__(self, start_tick: int = 0):
        self.start_tick = start_tick
        self.deaths = 0
        self.boss_deaths = 0
        self.kills = 0
        self.combat_ticks = 0
        self.regen_ticks = 0
        self.fight_count = 0
        self.ticks_at_zone_cap = 0

    def close(self, rank: int, final_level: int, now: int) -> PrestigeCycle:
        return PrestigeCycle(
            rank=rank,
            ticks_to_complete=now - self.start_tick,
            final_level=final_level,
            deaths=self.deaths,
            kills=self.kills,
            combat_ticks=self.combat_ticks,
            regen_ticks=self.regen_ticks,
            fight_count=self.fight_count,
            ticks_at_zone_cap=self.ticks_at_zone_cap,
            boss_deaths=self.boss_deaths,
            regular_deaths=self.deaths - self.boss_deaths,
        )


def run_single(config: SimConfig, run_idx: int) -> RunStats:
    """Simulate one character from a fresh start until target or timeout."""
    balance = config.balance
    seed = run_seed(config.seed, run_idx)
    rng = random.Random(seed)

    state = GameState.new(name=f"Sim {run_idx}", xp_curve=XPCurve.SIMULATOR, balance=balance)
    state.progression.prestige_rank = config.starting_prestige

    stats = RunStats(run_index=run_idx, seed=seed)
    loot = stats.loot_stats
    cycle = _CycleCounter()
    ticks = 0
    boss_kills_seen = 0

    while ticks < config.max_ticks_per_run:
        if target_reached(state, config):
            stats.reached_target = True
            break

        if should_prestige(state, config):
            stats.prestige_cycles.append(cycle.close(
                state.progression.prestige_rank, state.progression.character_level, ticks,
            ))
            # Gear survives prestige in the batch model
            state.prestige(keep_equipment=True, balance=balance)
            cycle = _CycleCounter(ticks)

        zone = state.progression.current_zone
        events = tick(state, rng, balance, roll_loot=config.simulate_loot)
        ticks += 1

        combat = state.combat
        if combat.is_regenerating:
            stats.regen_ticks += 1
            cycle.regen_ticks += 1
        elif combat.current_enemy is not None:
            stats.combat_ticks += 1
            cycle.combat_ticks += 1
        if state.progression.is_at_zone_cap(balance):
            stats.ticks_at_zone_cap += 1
            cycle.ticks_at_zone_cap += 1
        stats.ticks_per_zone[zone] += 1

        boss_killed = False
        for event in events:
            if isinstance(event, (BossDefeated, SubzoneBossDefeated)):
                boss_killed = True
            elif isinstance(event, EnemySpawned):
                stats.fight_count += 1
                cycle.fight_count += 1
            elif isinstance(event, PlayerDied):
                stats.zone_deaths[zone] += 1
                cycle.deaths += 1
                if event.was_boss:
                    stats.boss_deaths += 1
                    cycle.boss_deaths += 1
            elif isinstance(event, LeveledUp):
                # First time each level is reached, across all cycles
                if event.new_level - 1 > len(stats.level_up_ticks):
                    stats.level_up_ticks.append(ticks)
            elif isinstance(event, ItemDropped):
                loot.record_drop(event.item.rarity, event.equipped, from_boss=boss_killed)

        kills = state.progression.total_kills
        new_kills = kills - stats.total_kills
        if new_kills:
            stats.zone_kills[zone] += new_kills
            cycle.kills += new_kills
            new_boss_kills = state.boss_kills - boss_kills_seen
            if config.simulate_loot:
                # Only regular kills roll for a drop
                loot.total_drop_attempts += new_kills - new_boss_kills
            stats.total_kills = kills
            boss_kills_seen = state.boss_kills

        # Side content is external to the batch; count it and move on
        if state.active_dungeon:
            stats.dungeons_discovered += 1
            state.active_dungeon = False
        if state.active_fishing:
            stats.fishing_spots_discovered += 1
            state.active_fishing = False
        if state.pending_challenges:
            stats.challenges_discovered += state.pending_challenges
            state.pending_challenges = 0
    else:
        stats.reached_target = target_reached(state, config)

    progression = state.progression
    stats.final_level = progression.character_level
    stats.final_zone = progression.current_zone
    stats.final_subzone = progression.current_subzone
    stats.final_prestige = progression.prestige_rank
    stats.total_deaths = state.total_deaths
    stats.regular_deaths = stats.total_deaths - stats.boss_deaths
    stats.boss_kills = state.boss_kills
    stats.total_ticks = ticks
    stats.final_avg_ilvl = state.equipment.average_ilvl()
    stats.xp_from_kills = state.xp_from_kills
    stats.xp_from_passive = state.xp_from_passive
    stats.haven_discovered = state.haven_discovered

    logger.debug(
        "Run %d: level %d zone %d P%d in %d ticks (%s)",
        run_idx, stats.final_level, stats.final_zone, stats.final_prestige, ticks,
        "reached" if stats.reached_target else "timeout",
    )
    return stats


def run_batch(config: SimConfig, executor: Optional[Executor] = None) -> list[RunStats]:
    """Run every index in ``range(num_runs)`` and return results in index order.

    Args:
        config: Batch parameters; clamped before use
        executor: Optional executor whose ``map`` distributes the runs

    Returns:
        One ``RunStats`` per run, identical with or without an executor
    """
    config = config.validated()
    work = partial(run_single, config)
    indices = range(config.num_runs)
    logger.info(
        "Starting %d runs to zone %d (seed=%s, max_ticks=%d)",
        config.num_runs, config.target_zone, config.seed, config.max_ticks_per_run,
    )
    if executor is None:
        runs = [work(i) for i in indices]
    else:
        runs = list(executor.map(work, indices))
    logger.info(
        "Finished %d runs, %d reached target",
        len(runs), sum(1 for r in runs if r.reached_target),
    )
    return runs


def run_simulation(config: SimConfig, executor: Optional[Executor] = None) -> SimReport:
    """Run a batch and aggregate it into a ``SimReport``."""
    config = config.validated()
    runs = run_batch(config, executor)
    return SimReport.from_runs(runs, config)
