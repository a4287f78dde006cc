"""Tests for the Monte Carlo runner."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

import pytest

from idlerpg.core.game_state import GameState
from idlerpg.models import XPCurve
from idlerpg.simulator.config import SimConfig
from idlerpg.simulator.runner import (
    make_run_rng,
    run_batch,
    run_seed,
    run_simulation,
    run_single,
    should_prestige,
    target_reached,
)


class TestRunSeeds:
    """Run i of a batch is seeded with seed + i."""

    def test_run_seed(self):
        assert run_seed(42, 0) == 42
        assert run_seed(42, 7) == 49
        assert run_seed(None, 7) is None

    def test_make_run_rng(self):
        assert make_run_rng(10, 5).random() == make_run_rng(15, 0).random()

    def test_run_replayable_alone(self):
        base = SimConfig(num_runs=3, seed=42, max_ticks_per_run=2000, target_zone=2)
        shifted = base.with_overrides(seed=44)
        assert replace(run_single(shifted, 0), run_index=2) == run_single(base, 2)


class TestRunSingle:
    """One simulated character."""

    @pytest.fixture
    def config(self):
        return SimConfig(num_runs=1, seed=7, max_ticks_per_run=4000, target_zone=10)

    def test_target_zone_one_is_immediate(self, config):
        stats = run_single(config.with_overrides(target_zone=1), 0)
        assert stats.reached_target
        assert stats.total_ticks == 0
        assert stats.final_level == 1

    def test_timeout(self, config):
        stats = run_single(config, 0)
        assert not stats.reached_target
        assert stats.total_ticks == config.max_ticks_per_run

    def test_counters_consistent(self, config):
        stats = run_single(config, 0)
        assert sum(stats.ticks_per_zone) == stats.total_ticks
        assert sum(stats.zone_kills) == stats.total_kills
        assert sum(stats.zone_deaths) == stats.total_deaths
        assert stats.boss_deaths + stats.regular_deaths == stats.total_deaths
        assert stats.total_kills > 0
        assert stats.fight_count >= stats.total_kills
        assert stats.loot_stats.total_drop_attempts == stats.total_kills - stats.boss_kills
        assert stats.loot_stats.boss_drops == stats.boss_kills

    def test_level_curve_is_monotonic(self, config):
        stats = run_single(config, 0)
        assert len(stats.level_up_ticks) == stats.final_level - 1
        assert stats.level_up_ticks == sorted(stats.level_up_ticks)

    def test_no_loot(self, config):
        stats = run_single(config.with_overrides(simulate_loot=False), 0)
        assert stats.loot_stats.total_drops == 0
        assert stats.loot_stats.total_drop_attempts == 0
        assert stats.final_avg_ilvl == 0.0

    def test_starting_prestige(self, config):
        stats = run_single(config.with_overrides(starting_prestige=3, max_ticks_per_run=10), 0)
        assert stats.final_prestige == 3


class TestPrestigeTrigger:
    """When the runner decides to prestige."""

    @pytest.fixture
    def config(self):
        return SimConfig(target_zone=2, target_prestige=1, simulate_prestige=True)

    @pytest.fixture
    def level_ten(self, rng):
        state = GameState.new(xp_curve=XPCurve.SIMULATOR)
        state.add_xp(sum(int(100 * 1.1 ** level) for level in range(1, 10)), rng)
        return state

    def test_needs_level(self, config):
        state = GameState.new(xp_curve=XPCurve.SIMULATOR)
        state.progression.current_zone = 2
        assert not should_prestige(state, config)

    def test_not_before_zone(self, config, level_ten):
        assert level_ten.progression.character_level == 10
        assert not should_prestige(level_ten, config)

    def test_at_target_zone(self, config, level_ten):
        level_ten.progression.current_zone = 2
        assert should_prestige(level_ten, config)
        assert not target_reached(level_ten, config)

    def test_disabled(self, config, level_ten):
        level_ten.progression.current_zone = 2
        assert not should_prestige(level_ten, config.with_overrides(simulate_prestige=False))
        assert target_reached(level_ten, config.with_overrides(simulate_prestige=False))

    def test_rank_target_met(self, config, level_ten):
        level_ten.progression.current_zone = 2
        level_ten.progression.prestige_rank = 1
        assert not should_prestige(level_ten, config)
        assert target_reached(level_ten, config)


class TestPrestigeInRun:
    """A run that prestiges on the way to its target."""

    @pytest.fixture
    def stats(self):
        config = SimConfig(num_runs=1, seed=3, max_ticks_per_run=100_000, target_zone=2,
                           target_prestige=1, simulate_prestige=True)
        return run_single(config, 0)

    def test_reaches_rank_target(self, stats):
        assert stats.reached_target
        assert stats.final_prestige == 1
        assert stats.final_zone >= 2

    def test_cycle_recorded(self, stats):
        assert len(stats.prestige_cycles) == 1
        cycle = stats.prestige_cycles[0]
        assert cycle.rank == 0
        assert cycle.final_level >= 10
        assert 0 < cycle.ticks_to_complete < stats.total_ticks
        assert cycle.kills <= stats.total_kills

    def test_gear_survives_prestige(self, stats):
        assert stats.final_avg_ilvl > 0


class TestRunBatch:
    """Batches are deterministic and executor-independent."""

    @pytest.fixture
    def config(self):
        return SimConfig(num_runs=4, seed=42, max_ticks_per_run=1500, target_zone=2)

    def test_deterministic(self, config):
        assert run_batch(config) == run_batch(config)

    def test_index_order(self, config):
        runs = run_batch(config)
        assert [r.run_index for r in runs] == [0, 1, 2, 3]
        assert [r.seed for r in runs] == [42, 43, 44, 45]

    def test_executor_matches_serial(self, config):
        with ThreadPoolExecutor(max_workers=2) as executor:
            parallel = run_batch(config, executor)
        assert parallel == run_batch(config)

    def test_zero_runs(self, config):
        assert run_batch(config.with_overrides(num_runs=0)) == []

    def test_run_simulation_report(self, config):
        report = run_simulation(config)
        assert report.num_runs == 4
        assert report.seed == 42
        assert report.runs_completed + report.runs_timed_out == 4
