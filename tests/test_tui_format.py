"""Tests for live-log formatting and the zone table rows."""

from idlerpg.core.events import (
    TICK_EVENT_TYPES,
    BossDefeated,
    ChallengeDiscovered,
    DungeonDiscovered,
    EnemyAttack,
    EnemyDied,
    EnemySpawned,
    FishingSpotDiscovered,
    HavenDiscovered,
    ItemDropped,
    LeveledUp,
    PlayerAttack,
    PlayerDied,
    PlayerRecovered,
    PrestigePerformed,
    SubzoneBossDefeated,
    ZoneAdvanced,
)
from idlerpg.core.items import Item
from idlerpg.core.zones import StormsEnd, SubzoneComplete, ZoneCompleteButGated
from idlerpg.models import EquipmentSlot, Rarity
from idlerpg.screens.zone_table import zone_rows
from idlerpg.tui import format_event

SAMPLES = [
    EnemySpawned(enemy_name="Meadow Boar", is_boss=False, zone=1, subzone=1),
    PlayerAttack(damage=12.0, was_crit=True),
    EnemyAttack(damage=3.0),
    EnemyDied(enemy_name="Meadow Boar", xp_gained=240),
    SubzoneBossDefeated(boss_name="Field Guardian", xp_gained=400, result=SubzoneComplete(2)),
    BossDefeated(boss_name="Broodmother Arachne", xp_gained=400,
                 result=ZoneCompleteButGated("Mountain Pass", 5), zone_advanced=False),
    PlayerDied(enemy_name="Alpha Wolf", was_boss=True),
    PlayerRecovered(hp=80.0),
    LeveledUp(new_level=4),
    ItemDropped(item=Item(EquipmentSlot.RING, Rarity.LEGENDARY, 50, name="Eternal Band"), equipped=True),
    ZoneAdvanced(old_zone=1, new_zone=2),
    PrestigePerformed(new_rank=1, tier_name="Bronze"),
    DungeonDiscovered(),
    FishingSpotDiscovered(),
    ChallengeDiscovered(pending=2),
    HavenDiscovered(),
]


class TestFormatEvent:
    """Every tick event has a log line."""

    def test_samples_cover_every_type(self):
        assert {type(event) for event in SAMPLES} == set(TICK_EVENT_TYPES)

    def test_every_event_formats(self):
        for event in SAMPLES:
            line = format_event(event)
            assert isinstance(line, str) and line

    def test_gated_boss_mentions_prestige(self):
        assert "P5" in format_event(SAMPLES[5])

    def test_final_boss(self):
        event = BossDefeated(boss_name="The Undying Storm", xp_gained=1, result=StormsEnd(), zone_advanced=False)
        assert "storm is over" in format_event(event)

    def test_loot_line(self):
        line = format_event(SAMPLES[9])
        assert "Eternal Band" in line
        assert "equipped" in line

    def test_unknown_object(self):
        assert format_event(object()) is None


class TestZoneRows:
    """Rows for the zone table screen."""

    def test_one_row_per_subzone(self):
        rows = zone_rows()
        assert len(rows) == 36
        assert rows[0][0] == "1. Meadow"
        assert rows[0][3] == "P0"
        assert rows[0][4] == "55/7/0"

    def test_zone_boss_marked(self):
        rows = zone_rows()
        assert rows[2][2] == "Sporeling Queen *"
        assert rows[3][0] == "2. Dark Forest"
