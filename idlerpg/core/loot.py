"""Loot tables, item generation and auto-equip scoring."""
import random
from typing import Optional

from ..config import (
    AFFIX_SCORE_WEIGHTS,
    AFFIX_VALUE_RANGES,
    BOSS_RARITY_WEIGHTS,
    CRIT_MULTIPLIER_RANGES,
    DEFAULT_BALANCE,
    FINAL_BOSS_RARITY_WEIGHTS,
    HP_BONUS_RANGES,
    ITEM_AFFIX_COUNTS,
    ITEM_ATTRIBUTE_RANGES,
    MOB_RARITY_BASELINE,
    MOB_RARITY_SHIFT_SHARES,
    BalanceConfig,
)
from ..models import AffixType, AttributeType, EquipmentSlot, Rarity
from .attributes import Attributes
from .items import Affix, Equipment, Item

# Upper bound on the optional (haven-style) rarity bonus, as a fraction
MAX_OPTIONAL_RARITY_BONUS = 0.25

_SLOTS = list(EquipmentSlot)
_ATTRIBUTES = list(AttributeType)
_AFFIX_CATALOG = list(AffixType)

_RARITY_PREFIXES: dict[Rarity, tuple[str, ...]] = {
    Rarity.COMMON: ("Worn", "Plain", "Simple"),
    Rarity.MAGIC: ("Glowing", "Charged", "Keen"),
    Rarity.RARE: ("Runed", "Gleaming", "Tempered"),
    Rarity.EPIC: ("Exalted", "Stormforged", "Radiant"),
    Rarity.LEGENDARY: ("Godslayer's", "Eternal", "Mythforged"),
}

_SLOT_BASE_NAMES: dict[EquipmentSlot, tuple[str, ...]] = {
    EquipmentSlot.WEAPON: ("Sword", "Axe", "Staff", "Mace"),
    EquipmentSlot.ARMOR: ("Chainmail", "Breastplate", "Robe"),
    EquipmentSlot.HELMET: ("Helm", "Hood", "Circlet"),
    EquipmentSlot.GLOVES: ("Gauntlets", "Gloves", "Grips"),
    EquipmentSlot.BOOTS: ("Boots", "Greaves", "Sandals"),
    EquipmentSlot.AMULET: ("Amulet", "Pendant", "Talisman"),
    EquipmentSlot.RING: ("Ring", "Band", "Signet"),
}


# =============================================================================
# Drop and rarity rolls
# =============================================================================

def drop_chance_for_prestige(rank: int, balance: BalanceConfig = DEFAULT_BALANCE) -> float:
    """Chance that a regular kill drops an item, capped at the configured max."""
    chance = balance.item_drop_base_chance + rank * balance.item_drop_prestige_bonus
    return min(chance, balance.item_drop_max_chance)


def rarity_distribution(
    prestige_rank: int,
    bonus_percent: float = 0.0,
    balance: BalanceConfig = DEFAULT_BALANCE,
) -> tuple[float, float, float, float, float]:
    """Probabilities for Common, Magic, Rare, Epic, Legendary on a mob drop.

    Bonuses pull mass out of Common (never below the Common floor) and
    hand it to Rare, Epic and Legendary in fixed shares. Magic is fixed.
    """
    prestige_bonus = min(prestige_rank * balance.mob_rarity_prestige_bonus,
                         balance.mob_rarity_prestige_cap)
    optional_bonus = min(max(bonus_percent, 0.0) / 100.0, MAX_OPTIONAL_RARITY_BONUS)
    total_bonus = prestige_bonus + optional_bonus

    common, magic, rare, epic, legendary = MOB_RARITY_BASELINE
    new_common = max(common - total_bonus, balance.common_rarity_floor)
    shifted = common - new_common
    rare_share, epic_share, legendary_share = MOB_RARITY_SHIFT_SHARES
    return (
        new_common,
        magic,
        rare + shifted * rare_share,
        epic + shifted * epic_share,
        legendary + shifted * legendary_share,
    )


def _pick_weighted(weights: tuple[float, ...], tiers: tuple[Rarity, ...], rng: random.Random) -> Rarity:
    roll = rng.random()
    cumulative = 0.0
    for weight, rarity in zip(weights, tiers):
        cumulative += weight
        if roll < cumulative:
            return rarity
    return tiers[-1]


def roll_rarity(
    prestige_rank: int,
    rng: random.Random,
    bonus_percent: float = 0.0,
    balance: BalanceConfig = DEFAULT_BALANCE,
) -> Rarity:
    weights = rarity_distribution(prestige_rank, bonus_percent, balance)
    return _pick_weighted(weights, tuple(Rarity), rng)


def roll_boss_rarity(is_final_boss: bool, rng: random.Random) -> Rarity:
    """Boss drops skip Common; the last boss of the game rolls a richer table."""
    weights = FINAL_BOSS_RARITY_WEIGHTS if is_final_boss else BOSS_RARITY_WEIGHTS
    tiers = (Rarity.MAGIC, Rarity.RARE, Rarity.EPIC, Rarity.LEGENDARY)
    return _pick_weighted(weights, tiers, rng)


def try_drop_from_mob(
    prestige_rank: int,
    zone_id: int,
    rng: random.Random,
    bonus_percent: float = 0.0,
    balance: BalanceConfig = DEFAULT_BALANCE,
) -> Optional[Item]:
    if rng.random() >= drop_chance_for_prestige(prestige_rank, balance):
        return None
    slot = rng.choice(_SLOTS)
    rarity = roll_rarity(prestige_rank, rng, bonus_percent, balance)
    return generate_item(slot, rarity, zone_id * balance.zone_ilvl_multiplier, rng)


def drop_from_boss(
    zone_id: int,
    is_final_boss: bool,
    rng: random.Random,
    balance: BalanceConfig = DEFAULT_BALANCE,
) -> Item:
    slot = rng.choice(_SLOTS)
    rarity = roll_boss_rarity(is_final_boss, rng)
    return generate_item(slot, rarity, zone_id * balance.zone_ilvl_multiplier, rng)


# =============================================================================
# Item generation
# =============================================================================

def ilvl_multiplier(ilvl: int) -> float:
    """Stat scaling for item level; ilvl 10 is the 1.0 baseline."""
    return 1.0 + (max(ilvl, 10) - 10) / 30.0


def _roll_affix_value(affix_type: AffixType, rarity: Rarity, rng: random.Random) -> float:
    if affix_type == AffixType.HP_BONUS:
        low, high = HP_BONUS_RANGES[rarity]
    elif affix_type == AffixType.CRIT_MULTIPLIER:
        low, high = CRIT_MULTIPLIER_RANGES[rarity]
    else:
        low, high = AFFIX_VALUE_RANGES[rarity]
    return rng.uniform(low, high)


def generate_item(slot: EquipmentSlot, rarity: Rarity, ilvl: int, rng: random.Random) -> Item:
    """Roll a new item for ``slot``.

    Boosts one to three distinct attributes within the rarity's range and
    adds a rarity-bounded number of distinct affixes. All values are scaled
    by item level and then rounded.
    """
    scale = ilvl_multiplier(ilvl)

    attr_low, attr_high = ITEM_ATTRIBUTE_RANGES[rarity]
    boosted = rng.sample(_ATTRIBUTES, rng.randint(1, 3))
    attributes = {
        attr: max(round(rng.randint(attr_low, attr_high) * scale), 1)
        for attr in boosted
    }

    affix_low, affix_high = ITEM_AFFIX_COUNTS[rarity]
    affix_count = rng.randint(affix_low, affix_high)
    affixes = tuple(
        Affix(affix_type, float(round(_roll_affix_value(affix_type, rarity, rng) * scale)))
        for affix_type in rng.sample(_AFFIX_CATALOG, affix_count)
    )

    name = f"{rng.choice(_RARITY_PREFIXES[rarity])} {rng.choice(_SLOT_BASE_NAMES[slot])}"
    return Item(
        slot=slot,
        rarity=rarity,
        ilvl=ilvl,
        name=name,
        attributes=attributes,
        affixes=affixes,
    )


# =============================================================================
# Scoring
# =============================================================================

def score_item(item: Item, attributes: Attributes) -> float:
    """Weighted score of ``item`` for a character with ``attributes``.

    Attribute bonuses are weighted by how much of the character's total
    already sits in that attribute, so specialised builds favour their
    main stat. Affixes use a fixed weight table.
    """
    total = max(attributes.total(), 1)
    score = 0.0
    for attr, bonus in item.attributes.items():
        weight = 1 + attributes.get(attr) * 100 // total
        score += bonus * weight
    for affix in item.affixes:
        score += affix.value * AFFIX_SCORE_WEIGHTS.get(affix.affix_type, 1.0)
    return score


def auto_equip_if_better(item: Item, equipment: Equipment, attributes: Attributes) -> bool:
    """Equip ``item`` only if it scores strictly higher than the current one."""
    current = equipment.get(item.slot)
    current_score = score_item(current, attributes) if current is not None else 0.0
    if score_item(item, attributes) > current_score:
        equipment.equip(item)
        return True
    return False
