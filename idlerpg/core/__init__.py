"""Deterministic tick-simulation core for the idle RPG.

Re-exports the pieces front ends and the batch simulator use most.
"""

from .combat import CombatState, Enemy
from .events import TICK_EVENT_TYPES, TickEvent
from .game_state import ChallengeReward, GameState
from .items import Affix, Equipment, Item
from .progression import (
    ProgressionState,
    can_access_zone,
    max_zone_for_prestige,
    prestige_required_for_zone,
    sim_xp_for_level,
    xp_for_level,
)
from .tick import Engine, GameEngine, tick

__all__ = [
    "Affix",
    "ChallengeReward",
    "CombatState",
    "Enemy",
    "Engine",
    "Equipment",
    "GameEngine",
    "GameState",
    "Item",
    "ProgressionState",
    "TICK_EVENT_TYPES",
    "TickEvent",
    "can_access_zone",
    "max_zone_for_prestige",
    "prestige_required_for_zone",
    "sim_xp_for_level",
    "tick",
    "xp_for_level",
]
