"""Enumerations shared across the engine."""
from enum import Enum, IntEnum


class Rarity(IntEnum):
    """Item rarity, ordered from worst to best."""
    COMMON = 0
    MAGIC = 1
    RARE = 2
    EPIC = 3
    LEGENDARY = 4

    @property
    def display_name(self) -> str:
        return self.name.capitalize()


class EquipmentSlot(Enum):
    """The seven fixed equipment slots."""
    WEAPON = "weapon"
    ARMOR = "armor"
    HELMET = "helmet"
    GLOVES = "gloves"
    BOOTS = "boots"
    AMULET = "amulet"
    RING = "ring"


class AttributeType(Enum):
    """Core character attributes."""
    STR = "str"    # physical damage
    DEX = "dex"    # defense and crit chance
    CON = "con"    # max HP
    INT = "int"    # magic damage
    WIS = "wis"    # passive XP rate
    CHA = "cha"    # prestige XP multiplier


class AffixType(Enum):
    """Secondary item modifiers."""
    DAMAGE_PERCENT = "damage_percent"
    CRIT_CHANCE = "crit_chance"
    CRIT_MULTIPLIER = "crit_multiplier"
    ATTACK_SPEED = "attack_speed"
    HP_BONUS = "hp_bonus"              # flat HP, not a percentage
    DAMAGE_REDUCTION = "damage_reduction"
    HP_REGEN = "hp_regen"
    DAMAGE_REFLECTION = "damage_reflection"
    XP_GAIN = "xp_gain"


class XPCurve(Enum):
    """Which level-up threshold curve a progression uses."""
    GAMEPLAY = "gameplay"      # 100 * level ** 1.5
    SIMULATOR = "simulator"    # 100 * 1.1 ** level
