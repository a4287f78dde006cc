"""Tests for report aggregation and output."""

import io
import json
import re

import pytest
from rich.console import Console

from idlerpg.models import Rarity
from idlerpg.simulator.config import SimConfig
from idlerpg.simulator.report import SimReport, ZoneSummary, print_report
from idlerpg.simulator.stats import LootStats, RunStats


def _run(**kwargs):
    return RunStats(**kwargs)


class TestEmptyReport:
    """A zero-run batch yields an empty but valid report."""

    @pytest.fixture
    def report(self):
        return SimReport.from_runs([], SimConfig(num_runs=0, seed=3, target_zone=4))

    def test_fields(self, report):
        assert report.num_runs == 0
        assert report.target_zone == 4
        assert report.completion_rate == 0.0
        assert report.avg_final_level == 0.0
        assert report.zones == []
        assert report.warnings == []

    def test_text(self, report):
        assert "No runs to assess" in report.to_text()

    def test_json(self, report):
        data = json.loads(report.to_json())
        assert data["num_runs"] == 0
        assert "balance" not in data


class TestAggregation:
    """Averages and distributions over hand-built runs."""

    @pytest.fixture
    def runs(self):
        first = _run(run_index=0, final_level=10, final_zone=2, total_deaths=4, boss_deaths=1,
                     total_kills=100, total_ticks=5000, reached_target=True,
                     level_up_ticks=[10, 30])
        first.zone_kills[1] = 10
        first.zone_deaths[1] = 8
        first.ticks_per_zone[1] = 5000
        first.loot_stats = LootStats(total_drops=15, boss_drops=3, total_drop_attempts=100,
                                     drops_by_rarity={"COMMON": 10, "MAGIC": 5})
        second = _run(run_index=1, final_level=6, final_zone=1, total_deaths=0,
                      total_kills=50, total_ticks=8000, reached_target=False,
                      level_up_ticks=[20])
        second.ticks_per_zone[1] = 8000
        second.loot_stats = LootStats(total_drops=5, total_drop_attempts=50,
                                      drops_by_rarity={"COMMON": 5})
        return [first, second]

    @pytest.fixture
    def report(self, runs):
        return SimReport.from_runs(runs, SimConfig(num_runs=2, seed=1, target_zone=2))

    def test_progression(self, report):
        assert report.runs_completed == 1
        assert report.runs_timed_out == 1
        assert report.completion_rate == 0.5
        assert report.avg_final_level == 8.0
        assert report.avg_ticks_to_clear == 5000.0
        assert report.level_distribution == {6: 1, 10: 1}
        assert report.zone_distribution == {1: 1, 2: 1}

    def test_deaths(self, report):
        assert report.avg_deaths == 2.0
        assert report.avg_boss_deaths == 0.5
        assert (report.min_deaths, report.median_deaths, report.max_deaths) == (0, 2.0, 4)

    def test_loot(self, report):
        assert report.avg_drops == 10.0
        assert report.drop_rate == pytest.approx(17 / 150)

    def test_boss_drops_kept_out_of_rate(self, report):
        loot = LootStats(total_drop_attempts=10)
        loot.record_drop(Rarity.MAGIC, equipped=False)
        loot.record_drop(Rarity.RARE, equipped=True, from_boss=True)
        assert loot.total_drops == 2
        assert loot.boss_drops == 1
        assert loot.mob_drops == 1
        assert loot.upgrades_equipped == 1
        assert loot.drop_rate() == pytest.approx(0.1)
        assert report.avg_drops_by_rarity[Rarity.COMMON.name] == 7.5
        assert report.avg_drops_by_rarity[Rarity.LEGENDARY.name] == 0.0

    def test_level_curve(self, report):
        assert report.level_curve == [15.0, 30.0]
        assert "LEVEL CURVE" in report.level_curve_text()

    def test_zone_summaries(self, report):
        meadow = report.zones[0]
        assert meadow.name == "Meadow"
        assert meadow.avg_kills == 5.0
        assert meadow.avg_deaths == 4.0
        assert meadow.death_rate == pytest.approx(0.8)
        assert len(report.zones) == 10

    def test_warnings(self, report):
        assert any("Zone 1 (Meadow) is deadly" in w for w in report.warnings)
        assert any("Progression is slow" in w for w in report.warnings)
        assert any("legendaries" in w for w in report.warnings)

    def test_text_sections(self, report):
        text = report.to_text()
        for section in ("PROGRESSION", "LOOT", "ZONE COMPLETION", "PER-ZONE",
                        "DEATH ANALYSIS", "BALANCE ASSESSMENT"):
            assert section in text
        assert "  ! " in text

    def test_dict_has_zone_death_rate(self, report):
        data = report.to_dict()
        assert data["completion_rate"] == 0.5
        assert data["zones"][0]["death_rate"] == pytest.approx(0.8)

    def test_save_json(self, report, tmp_path):
        path = report.save_json(tmp_path / "reports")
        assert re.fullmatch(r"sim_report_\d{8}_\d{6}\.json", path.name)
        assert json.loads(path.read_text(encoding="utf-8"))["num_runs"] == 2

    def test_print_report(self, report):
        buffer = io.StringIO()
        print_report(report, Console(file=buffer, width=120))
        output = buffer.getvalue()
        assert "Per-zone averages" in output
        assert "BALANCE ASSESSMENT" in output


class TestZoneSummary:
    """Death rate guards against zero kills."""

    def test_zero_kills(self):
        assert ZoneSummary(zone=1, name="Meadow", avg_deaths=3.0).death_rate == 3.0
