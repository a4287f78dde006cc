"""Typed events emitted by one call to ``tick``.

Every observable thing that happens in a tick is exactly one of the
frozen dataclasses below. Consumers dispatch with ``isinstance``;
``TICK_EVENT_TYPES`` lists them all so front ends can check they handle
every kind.
"""
from dataclasses import dataclass

from .items import Item
from .zones import BossDefeatResult


@dataclass(frozen=True, slots=True)
class EnemySpawned:
    enemy_name: str
    is_boss: bool
    zone: int
    subzone: int


@dataclass(frozen=True, slots=True)
class PlayerAttack:
    damage: float
    was_crit: bool


@dataclass(frozen=True, slots=True)
class EnemyAttack:
    damage: float


@dataclass(frozen=True, slots=True)
class EnemyDied:
    enemy_name: str
    xp_gained: int


@dataclass(frozen=True, slots=True)
class SubzoneBossDefeated:
    """A subzone guardian fell and the character moved on within the zone."""
    boss_name: str
    xp_gained: int
    result: BossDefeatResult


@dataclass(frozen=True, slots=True)
class BossDefeated:
    """A zone boss (the last subzone's guardian) fell."""
    boss_name: str
    xp_gained: int
    result: BossDefeatResult
    zone_advanced: bool


@dataclass(frozen=True, slots=True)
class PlayerDied:
    enemy_name: str
    was_boss: bool


@dataclass(frozen=True, slots=True)
class PlayerRecovered:
    """Regeneration finished and HP is back to max."""
    hp: float


@dataclass(frozen=True, slots=True)
class LeveledUp:
    new_level: int


@dataclass(frozen=True, slots=True)
class ItemDropped:
    item: Item
    equipped: bool


@dataclass(frozen=True, slots=True)
class ZoneAdvanced:
    old_zone: int
    new_zone: int


@dataclass(frozen=True, slots=True)
class PrestigePerformed:
    new_rank: int
    tier_name: str


@dataclass(frozen=True, slots=True)
class DungeonDiscovered:
    pass


@dataclass(frozen=True, slots=True)
class FishingSpotDiscovered:
    pass


@dataclass(frozen=True, slots=True)
class ChallengeDiscovered:
    pending: int


@dataclass(frozen=True, slots=True)
class HavenDiscovered:
    pass


TickEvent = (
    EnemySpawned
    | PlayerAttack
    | EnemyAttack
    | EnemyDied
    | SubzoneBossDefeated
    | BossDefeated
    | PlayerDied
    | PlayerRecovered
    | LeveledUp
    | ItemDropped
    | ZoneAdvanced
    | PrestigePerformed
    | DungeonDiscovered
    | FishingSpotDiscovered
    | ChallengeDiscovered
    | HavenDiscovered
)

TICK_EVENT_TYPES: tuple[type, ...] = TickEvent.__args__

# Events that mean an enemy was killed this tick
KILL_EVENT_TYPES: tuple[type, ...] = (EnemyDied, SubzoneBossDefeated, BossDefeated)
