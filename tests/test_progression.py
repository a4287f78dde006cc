"""Tests for levels, zones and prestige gating."""

import pytest

from idlerpg.config import DEFAULT_BALANCE
from idlerpg.core.progression import (
    ProgressionState,
    can_access_zone,
    max_zone_for_prestige,
    prestige_required_for_zone,
    sim_xp_for_level,
    xp_for_level,
)
from idlerpg.core.zones import (
    ZONES,
    StormsEnd,
    SubzoneComplete,
    ZoneComplete,
    ZoneCompleteButGated,
    get_zone,
)
from idlerpg.models import XPCurve


class TestXPCurves:
    """The gameplay and simulator curves are distinct."""

    def test_gameplay_curve(self):
        assert xp_for_level(1) == 100
        assert xp_for_level(4) == 800
        assert xp_for_level(10) == 3162

    def test_simulator_curve(self):
        assert sim_xp_for_level(1) == 110
        assert sim_xp_for_level(10) == int(100 * 1.1 ** 10)

    def test_curves_differ(self):
        assert xp_for_level(5) != sim_xp_for_level(5)

    def test_progression_uses_selected_curve(self):
        gameplay = ProgressionState(character_level=5)
        simulator = ProgressionState(character_level=5, xp_curve=XPCurve.SIMULATOR)
        assert gameplay.xp_to_next_level() == xp_for_level(5)
        assert simulator.xp_to_next_level() == sim_xp_for_level(5)


class TestAddXP:
    """Level-ups from XP grants."""

    def test_below_threshold(self):
        progression = ProgressionState()
        assert progression.add_xp(99) == 0
        assert progression.character_level == 1
        assert progression.character_xp == 99

    def test_exact_threshold(self):
        progression = ProgressionState()
        assert progression.add_xp(100) == 1
        assert progression.character_level == 2
        assert progression.character_xp == 0

    def test_three_levels_in_one_grant(self):
        progression = ProgressionState()
        xp = xp_for_level(1) + xp_for_level(2) + xp_for_level(3)
        assert progression.add_xp(xp) == 3
        assert progression.character_level == 4
        assert progression.character_xp == 0

    def test_three_times_flat_threshold(self):
        """With a flat curve, 3x the threshold is exactly three levels."""
        flat = DEFAULT_BALANCE.with_overrides(xp_curve_exponent=0.0)
        progression = ProgressionState()
        threshold = progression.xp_to_next_level(flat)
        assert progression.add_xp(3 * threshold, flat) == 3
        assert progression.character_level == 4

    def test_leftover_xp_kept(self):
        progression = ProgressionState()
        progression.add_xp(150)
        assert progression.character_level == 2
        assert progression.character_xp == 50

    def test_negative_xp_ignored(self):
        progression = ProgressionState()
        assert progression.add_xp(-50) == 0
        assert progression.character_xp == 0


class TestZoneGating:
    """prestige_required_for_zone and can_access_zone agree for every zone."""

    @pytest.mark.parametrize("zone", range(1, 11))
    def test_required_rank_grants_access(self, zone):
        required = prestige_required_for_zone(zone)
        assert can_access_zone(required, zone)

    @pytest.mark.parametrize("zone", range(1, 11))
    def test_lower_ranks_denied(self, zone):
        required = prestige_required_for_zone(zone)
        for rank in range(required):
            assert not can_access_zone(rank, zone)

    @pytest.mark.parametrize("zone", range(1, 11))
    def test_max_zone_inverse(self, zone):
        assert max_zone_for_prestige(prestige_required_for_zone(zone)) >= zone

    def test_tier_values(self):
        assert [prestige_required_for_zone(z) for z in range(1, 11)] == [
            0, 0, 5, 5, 10, 10, 15, 15, 20, 20,
        ]

    def test_max_zone_for_prestige(self):
        assert max_zone_for_prestige(0) == 2
        assert max_zone_for_prestige(4) == 2
        assert max_zone_for_prestige(5) == 4
        assert max_zone_for_prestige(19) == 8
        assert max_zone_for_prestige(20) == 10
        assert max_zone_for_prestige(100) == 10


class TestBossCadence:
    """Kill counting and boss advancement."""

    def test_boss_after_ten_kills(self):
        progression = ProgressionState()
        for _ in range(9):
            assert progression.record_kill(is_boss=False) is None
        assert not progression.should_spawn_boss()
        progression.record_kill(is_boss=False)
        assert progression.should_spawn_boss()

    def test_boss_kill_advances_subzone(self):
        progression = ProgressionState()
        for _ in range(DEFAULT_BALANCE.kills_for_boss):
            progression.record_kill(is_boss=False)
        result = progression.record_kill(is_boss=True)

        assert result == SubzoneComplete(new_subzone=2)
        assert progression.current_subzone == 2
        assert progression.kills_in_subzone == 0
        assert progression.total_kills == 11

    def test_zone_boss_advances_zone(self):
        last = get_zone(1).subzone_count
        progression = ProgressionState(current_subzone=last, kills_in_subzone=10)
        result = progression.record_kill(is_boss=True)

        assert result == ZoneComplete(old_zone=1, new_zone=2)
        assert progression.current_zone == 2
        assert progression.current_subzone == 1

    def test_zone_boss_gated_by_prestige(self):
        last = get_zone(2).subzone_count
        progression = ProgressionState(current_zone=2, current_subzone=last)
        result = progression.record_kill(is_boss=True)

        assert isinstance(result, ZoneCompleteButGated)
        assert result.zone_name == get_zone(3).name
        assert result.required_prestige == 5
        assert progression.current_zone == 2

    def test_final_boss_stays_in_last_zone(self):
        last = get_zone(10).subzone_count
        progression = ProgressionState(current_zone=10, current_subzone=last, prestige_rank=20)
        result = progression.record_kill(is_boss=True)

        assert result == StormsEnd()
        assert progression.current_zone == 10
        assert progression.current_subzone == last

    def test_boss_death_resets_to_retry_count(self):
        progression = ProgressionState(kills_in_subzone=10, fighting_boss=True)
        progression.reset_boss_encounter()
        assert progression.kills_in_subzone == 5
        assert not progression.fighting_boss

    def test_subzone_counts(self):
        assert [zone.subzone_count for zone in ZONES] == [3, 3, 3, 3, 4, 4, 4, 4, 4, 4]
        for zone in ZONES:
            assert zone.subzones[-1].is_zone_boss
            assert not any(s.is_zone_boss for s in zone.subzones[:-1])


class TestProgressionPrestige:
    """ProgressionState.prestige resets position but keeps lifetime kills."""

    def test_prestige_resets(self):
        progression = ProgressionState(
            character_level=12, character_xp=40, current_zone=2, current_subzone=3,
            kills_in_subzone=7, total_kills=500, fighting_boss=True,
        )
        progression.prestige()

        assert progression.prestige_rank == 1
        assert progression.character_level == 1
        assert progression.character_xp == 0
        assert (progression.current_zone, progression.current_subzone) == (1, 1)
        assert progression.kills_in_subzone == 0
        assert not progression.fighting_boss
        assert progression.total_kills == 500
