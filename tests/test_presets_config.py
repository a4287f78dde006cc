"""Tests for simulation presets and batch configuration."""

import logging

import pytest

from idlerpg.config import DEFAULT_BALANCE, BalanceConfig
from idlerpg.simulator.config import SimConfig
from idlerpg.simulator.presets import (
    PresetRegistry,
    full_progression,
    loot_analysis,
    zone_balance,
)


class TestPresetRegistry:
    """Presets register themselves by id."""

    def test_registered_ids(self):
        assert [info.id for info in PresetRegistry.get_all_info()] == ["full", "loot", "quick"]

    def test_build_with_overrides(self):
        config = PresetRegistry.build("quick", seed=9)
        assert config.target_zone == 5
        assert config.num_runs == 100
        assert config.seed == 9

    def test_unknown_preset(self):
        assert PresetRegistry.get("nope") is None
        with pytest.raises(KeyError, match="nope"):
            PresetRegistry.build("nope")


class TestPresetConfigs:
    """The preset builder functions."""

    def test_zone_balance(self):
        config = zone_balance(3)
        assert (config.num_runs, config.target_zone) == (100, 3)
        assert not config.simulate_prestige

    def test_full_progression(self):
        config = full_progression()
        assert (config.num_runs, config.target_zone, config.target_prestige) == (50, 10, 5)
        assert config.simulate_prestige and config.simulate_loot

    def test_loot_analysis(self):
        config = loot_analysis(250)
        assert config.num_runs == 250
        assert config.simulate_loot


class TestSimConfig:
    """Clamping and defaults."""

    def test_defaults(self):
        config = SimConfig()
        assert config.num_runs == 1000
        assert config.seed is None
        assert config.max_ticks_per_run == 1_000_000
        assert config.target_zone == 10
        assert config.balance is DEFAULT_BALANCE

    def test_valid_config_unchanged(self):
        config = SimConfig(target_zone=3)
        assert config.validated() is config

    def test_clamps_target_zone(self, caplog):
        with caplog.at_level(logging.WARNING):
            config = SimConfig(target_zone=42).validated()
        assert config.target_zone == 10
        assert "target_zone 42 out of range" in caplog.text

        assert SimConfig(target_zone=0).validated().target_zone == 1

    def test_clamps_negatives(self, caplog):
        with caplog.at_level(logging.WARNING):
            config = SimConfig(num_runs=-5, starting_prestige=-1).validated()
        assert config.num_runs == 0
        assert config.starting_prestige == 0
        assert "num_runs -5 is negative" in caplog.text

    def test_verbosity(self):
        assert SimConfig(verbosity=7).validated().verbosity == 2
        assert SimConfig(verbosity=0).log_level == logging.ERROR
        assert SimConfig(verbosity=2).log_level == logging.DEBUG

    def test_frozen(self):
        with pytest.raises(AttributeError):
            SimConfig().num_runs = 5


class TestBalanceConfig:
    """Shared tuning values."""

    def test_tick_timing(self):
        assert DEFAULT_BALANCE.tick_seconds == 0.1
        assert DEFAULT_BALANCE.ticks_per_second == 10

    def test_overrides_copy(self):
        fast = DEFAULT_BALANCE.with_overrides(tick_interval_ms=50)
        assert isinstance(fast, BalanceConfig)
        assert fast.ticks_per_second == 20
        assert DEFAULT_BALANCE.tick_interval_ms == 100
