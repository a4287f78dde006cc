"""Prestige tiers, multipliers and the character-level prestige reset."""
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..config import (
    DEFAULT_BALANCE,
    PRESTIGE_REQUIRED_LEVELS,
    PRESTIGE_TIER_NAME_MAX,
    PRESTIGE_TIER_NAMES,
    BalanceConfig,
)

if TYPE_CHECKING:
    from .game_state import GameState

# Crit bonus from prestige stops growing here (percent points)
PRESTIGE_CRIT_CAP = 15.0


@dataclass(frozen=True, slots=True)
class PrestigeTier:
    rank: int
    name: str
    required_level: int


def required_level_for_rank(rank: int) -> int:
    """Character level needed to prestige *into* ``rank``."""
    if rank <= 0:
        return 0
    if rank in PRESTIGE_REQUIRED_LEVELS:
        return PRESTIGE_REQUIRED_LEVELS[rank]
    if rank < 20:
        return PRESTIGE_REQUIRED_LEVELS[10] + (rank - 10) * 10
    return 220 + (rank - 19) * 15


def tier_name(rank: int) -> str:
    if rank < len(PRESTIGE_TIER_NAMES):
        return PRESTIGE_TIER_NAMES[rank]
    return PRESTIGE_TIER_NAME_MAX


def get_prestige_tier(rank: int) -> PrestigeTier:
    return PrestigeTier(rank=rank, name=tier_name(rank), required_level=required_level_for_rank(rank))


def can_prestige(level: int, rank: int) -> bool:
    """Whether a character at ``level`` can move from ``rank`` to the next tier."""
    return level >= required_level_for_rank(rank + 1)


def prestige_multiplier(rank: int, cha_modifier: int = 0) -> float:
    """XP multiplier from prestige rank, plus 10% per CHA modifier point."""
    base = 1.0 + 0.5 * rank ** 0.7
    return max(base + cha_modifier * 0.1, 0.1)


def wisdom_multiplier(wis_modifier: int) -> float:
    return max(1.0 + wis_modifier * 0.05, 0.1)


@dataclass(frozen=True, slots=True)
class PrestigeCombatBonuses:
    """Flat combat bonuses that scale with prestige rank."""
    flat_damage: float = 0.0
    flat_defense: float = 0.0
    crit_chance: float = 0.0
    flat_hp: float = 0.0

    @classmethod
    def from_rank(cls, rank: int) -> "PrestigeCombatBonuses":
        if rank <= 0:
            return cls()
        return cls(
            flat_damage=float(int(5.0 * rank ** 0.7)),
            flat_defense=float(int(3.0 * rank ** 0.6)),
            crit_chance=min(rank * 0.5, PRESTIGE_CRIT_CAP),
            flat_hp=float(int(15.0 * rank ** 0.6)),
        )


def perform_prestige(
    state: "GameState",
    keep_equipment: bool = False,
    balance: BalanceConfig = DEFAULT_BALANCE,
) -> int:
    """Reset a character for the next prestige rank.

    Level, XP, zone progress and attributes go back to their starting values
    and the rank goes up by one. Active dungeon and fishing sessions are
    dropped. Fishing rank, pending challenges and the haven are side
    progression and survive. Equipment is cleared unless
    ``keep_equipment`` is set, as the batch simulator does.

    Returns:
        The new prestige rank
    """
    state.progression.prestige()
    state.attributes.reset(balance)
    if not keep_equipment:
        state.equipment.clear()
    state.active_dungeon = False
    state.active_fishing = False
    state.total_prestige_count += 1
    state.combat.reset(balance.base_hp)
    return state.progression.prestige_rank
