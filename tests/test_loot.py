"""Tests for loot tables, item generation and auto-equip."""

import random

import pytest

from idlerpg.config import DEFAULT_BALANCE, ITEM_AFFIX_COUNTS
from idlerpg.core.attributes import Attributes
from idlerpg.core.items import Equipment, Item
from idlerpg.core.loot import (
    auto_equip_if_better,
    drop_chance_for_prestige,
    drop_from_boss,
    generate_item,
    rarity_distribution,
    roll_rarity,
    score_item,
)
from idlerpg.models import AttributeType, EquipmentSlot, Rarity


class TestDropChance:
    """Regular kill drop chance."""

    def test_values(self):
        assert drop_chance_for_prestige(0) == pytest.approx(0.15)
        assert drop_chance_for_prestige(5) == pytest.approx(0.20)
        assert drop_chance_for_prestige(10) == pytest.approx(0.25)
        assert drop_chance_for_prestige(100) == pytest.approx(0.25)

    def test_non_decreasing(self):
        chances = [drop_chance_for_prestige(rank) for rank in range(30)]
        assert chances == sorted(chances)
        assert max(chances) <= DEFAULT_BALANCE.item_drop_max_chance


class TestRarityDistribution:
    """Mob rarity weights and the Common floor."""

    @pytest.mark.parametrize("rank,bonus", [(0, 0.0), (3, 0.0), (10, 0.0), (50, 25.0), (0, 500.0)])
    def test_sums_to_one(self, rank, bonus):
        assert sum(rarity_distribution(rank, bonus)) == pytest.approx(1.0)

    def test_baseline(self):
        assert rarity_distribution(0) == pytest.approx((0.55, 0.30, 0.10, 0.04, 0.01))

    def test_capped_bonuses(self):
        common, magic, *_ = rarity_distribution(100, 100.0)
        assert common == pytest.approx(0.20)
        assert magic == pytest.approx(0.30)

    def test_common_floor(self):
        balance = DEFAULT_BALANCE.with_overrides(mob_rarity_prestige_cap=1.0)
        common, magic, rare, epic, legendary = rarity_distribution(100, 25.0, balance)
        assert common == pytest.approx(0.10)
        assert rare == pytest.approx(0.10 + 0.45 * 0.6)
        assert legendary == pytest.approx(0.01 + 0.45 * 0.1)

    def test_empirical_common_share(self):
        balance = DEFAULT_BALANCE.with_overrides(mob_rarity_prestige_cap=1.0)
        rng = random.Random(2024)
        rolls = [roll_rarity(100, rng, 25.0, balance) for _ in range(10_000)]
        share = rolls.count(Rarity.COMMON) / len(rolls)
        assert share == pytest.approx(0.10, abs=0.02)


class TestItemGeneration:
    """Rolled items respect their rarity's bounds."""

    @pytest.mark.parametrize("rarity", list(Rarity))
    def test_affix_counts(self, rarity):
        rng = random.Random(int(rarity))
        low, high = ITEM_AFFIX_COUNTS[rarity]
        for _ in range(50):
            item = generate_item(EquipmentSlot.RING, rarity, 20, rng)
            assert low <= len(item.affixes) <= high
            assert len({a.affix_type for a in item.affixes}) == len(item.affixes)
            assert 1 <= len(item.attributes) <= 3

    def test_item_fields(self, rng):
        item = generate_item(EquipmentSlot.WEAPON, Rarity.EPIC, 30, rng)
        assert item.slot == EquipmentSlot.WEAPON
        assert item.rarity == Rarity.EPIC
        assert item.ilvl == 30
        assert item.display_name

    def test_boss_never_drops_common(self, rng):
        for _ in range(200):
            assert drop_from_boss(1, False, rng).rarity != Rarity.COMMON


class TestAutoEquip:
    """Only strictly better items replace equipped ones."""

    @pytest.fixture
    def attributes(self):
        return Attributes()

    def test_equips_into_empty_slot(self, attributes):
        equipment = Equipment()
        item = Item(EquipmentSlot.BOOTS, Rarity.MAGIC, 10, attributes={AttributeType.DEX: 2})
        assert auto_equip_if_better(item, equipment, attributes)
        assert equipment.get(EquipmentSlot.BOOTS) is item

    def test_equal_score_keeps_current(self, attributes):
        equipment = Equipment()
        first = Item(EquipmentSlot.BOOTS, Rarity.MAGIC, 10, name="First", attributes={AttributeType.DEX: 2})
        second = Item(EquipmentSlot.BOOTS, Rarity.MAGIC, 10, name="Second", attributes={AttributeType.DEX: 2})
        equipment.equip(first)

        assert score_item(first, attributes) == score_item(second, attributes)
        assert not auto_equip_if_better(second, equipment, attributes)
        assert equipment.get(EquipmentSlot.BOOTS) is first

    def test_better_item_replaces(self, attributes):
        equipment = Equipment()
        equipment.equip(Item(EquipmentSlot.RING, Rarity.COMMON, 10, attributes={AttributeType.STR: 1}))
        better = Item(EquipmentSlot.RING, Rarity.RARE, 20, attributes={AttributeType.STR: 3})
        assert auto_equip_if_better(better, equipment, attributes)
        assert equipment.get(EquipmentSlot.RING) is better
