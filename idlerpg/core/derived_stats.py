"""Combat stats derived from attributes, equipment and prestige."""
from dataclasses import dataclass
from typing import Optional

from ..config import DEFAULT_BALANCE, BalanceConfig
from ..models import AffixType, AttributeType
from .attributes import Attributes, attribute_modifier
from .items import Equipment
from .prestige import PrestigeCombatBonuses


@dataclass(slots=True)
class DerivedStats:
    """Snapshot of a character's effective combat numbers."""
    max_hp: float
    physical_damage: float
    magic_damage: float
    defense: float
    crit_chance: float            # percent, 0-100
    crit_multiplier: float
    attack_speed_multiplier: float = 1.0
    hp_regen_multiplier: float = 1.0
    damage_reflection_percent: float = 0.0
    xp_gain_multiplier: float = 1.0

    @property
    def total_damage(self) -> float:
        return self.physical_damage + self.magic_damage

    @classmethod
    def calculate(
        cls,
        attributes: Attributes,
        equipment: Equipment,
        prestige: Optional[PrestigeCombatBonuses] = None,
        balance: BalanceConfig = DEFAULT_BALANCE,
    ) -> "DerivedStats":
        """Fold equipment bonuses into attributes, then derive stats."""
        prestige = prestige or PrestigeCombatBonuses()
        base = balance.base_attribute_value

        def mod(attr: AttributeType) -> int:
            return attribute_modifier(attributes.get(attr) + equipment.attribute_bonus(attr), base)

        str_mod = mod(AttributeType.STR)
        dex_mod = mod(AttributeType.DEX)
        con_mod = mod(AttributeType.CON)
        int_mod = mod(AttributeType.INT)

        damage_pct = equipment.affix_total(AffixType.DAMAGE_PERCENT)
        damage_scale = 1.0 + damage_pct / 100.0

        max_hp = balance.base_hp + con_mod * 10 + equipment.affix_total(AffixType.HP_BONUS)
        max_hp += prestige.flat_hp

        defense = float(max(dex_mod, 0))
        defense *= 1.0 + equipment.affix_total(AffixType.DAMAGE_REDUCTION) / 100.0
        defense += prestige.flat_defense

        return cls(
            max_hp=max(max_hp, 1.0),
            physical_damage=max(balance.base_damage + str_mod * 2, 1.0) * damage_scale + prestige.flat_damage,
            magic_damage=max(balance.base_damage + int_mod * 2, 0.0) * damage_scale,
            defense=defense,
            crit_chance=min(
                max(balance.base_crit_chance + dex_mod + equipment.affix_total(AffixType.CRIT_CHANCE)
                    + prestige.crit_chance, 0.0),
                100.0,
            ),
            crit_multiplier=balance.base_crit_multiplier
            + equipment.affix_total(AffixType.CRIT_MULTIPLIER) / 100.0,
            attack_speed_multiplier=1.0 + equipment.affix_total(AffixType.ATTACK_SPEED) / 100.0,
            hp_regen_multiplier=1.0 + equipment.affix_total(AffixType.HP_REGEN) / 100.0,
            damage_reflection_percent=equipment.affix_total(AffixType.DAMAGE_REFLECTION),
            xp_gain_multiplier=1.0 + equipment.affix_total(AffixType.XP_GAIN) / 100.0,
        )
