"""The fixed-timestep tick and the engine that drives it.

``tick(state, rng)`` is the only entry point that advances the game. The
interactive front end calls it once per 100 ms frame, the Monte Carlo
runner calls it in a tight loop; both get identical results for the
same state and random stream.
"""
import logging
import random
from typing import Callable, Optional

from ..config import DEFAULT_BALANCE, BalanceConfig
from ..models import XPCurve
from .combat import (
    EnemyDefeated,
    PlayerDefeated,
    Regenerated,
    Retaliation,
    Strike,
    spawn_enemy,
    update_combat,
)
from .derived_stats import DerivedStats
from .events import (
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
    TickEvent,
    ZoneAdvanced,
)
from .game_state import GameState
from .loot import auto_equip_if_better, drop_from_boss, try_drop_from_mob
from .prestige import tier_name
from .zones import ZoneComplete

logger = logging.getLogger(__name__)


def tick(
    state: GameState,
    rng: random.Random,
    balance: BalanceConfig = DEFAULT_BALANCE,
    roll_loot: bool = True,
) -> list[TickEvent]:
    """Advance ``state`` by one tick and return what happened, in order.

    Steps, in this exact order:
        1. sync max HP from attributes and equipment
        2. spawn an enemy if none is active
        3. advance combat by one tick of time
        4. pay out XP, kills, zone moves and loot for each death
        5. roll the independent discovery checks

    ``rng`` is the only source of randomness. The tick never raises on a
    valid state.
    """
    events: list[TickEvent] = []
    delta_time = balance.tick_seconds

    # 1. Derived stats
    stats = state.derived_stats(balance)
    state.combat.update_max_hp(stats.max_hp)

    # 2. Spawn
    combat = state.combat
    if combat.current_enemy is None and not combat.is_regenerating:
        enemy = spawn_enemy(state.progression, rng, balance)
        combat.current_enemy = enemy
        events.append(EnemySpawned(
            enemy_name=enemy.name,
            is_boss=enemy.is_boss,
            zone=state.progression.current_zone,
            subzone=state.progression.current_subzone,
        ))

    # 3 + 4. Combat and its consequences
    for combat_event in update_combat(combat, delta_time, stats, rng, balance):
        if isinstance(combat_event, Strike):
            events.append(PlayerAttack(damage=combat_event.damage, was_crit=combat_event.was_crit))
        elif isinstance(combat_event, Retaliation):
            events.append(EnemyAttack(damage=combat_event.damage))
        elif isinstance(combat_event, EnemyDefeated):
            _resolve_kill(state, combat_event, stats, rng, balance, roll_loot, events)
        elif isinstance(combat_event, PlayerDefeated):
            _resolve_death(state, combat_event, balance, events)
        elif isinstance(combat_event, Regenerated):
            events.append(PlayerRecovered(hp=combat_event.hp))

    if balance.passive_xp and not combat.is_regenerating:
        _apply_passive_xp(state, stats, rng, balance, events)

    # 5. Discovery
    _roll_discoveries(state, rng, balance, events)

    state.play_time_ticks += 1
    return events


def _kill_xp(state: GameState, is_boss: bool, stats: DerivedStats,
             rng: random.Random, balance: BalanceConfig) -> int:
    if is_boss:
        ticks = balance.boss_xp_ticks
    else:
        ticks = rng.randint(balance.combat_xp_min_ticks, balance.combat_xp_max_ticks)
    return int(state.xp_per_tick(stats, balance) * ticks)


def _resolve_kill(
    state: GameState,
    defeated: EnemyDefeated,
    stats: DerivedStats,
    rng: random.Random,
    balance: BalanceConfig,
    roll_loot: bool,
    events: list[TickEvent],
) -> None:
    enemy = defeated.enemy
    progression = state.progression
    zone_at_kill = progression.current_zone

    xp = _kill_xp(state, enemy.is_boss, stats, rng, balance)
    state.xp_from_kills += xp
    new_levels = state.add_xp(xp, rng, balance)
    result = progression.record_kill(enemy.is_boss, balance)

    if enemy.is_boss:
        state.boss_kills += 1
        zone_advanced = isinstance(result, ZoneComplete)
        if enemy.is_zone_boss:
            events.append(BossDefeated(
                boss_name=enemy.name, xp_gained=xp, result=result, zone_advanced=zone_advanced,
            ))
        else:
            events.append(SubzoneBossDefeated(boss_name=enemy.name, xp_gained=xp, result=result))
        if zone_advanced:
            logger.debug("%s advanced to zone %d", state.character_name, result.new_zone)
            events.append(ZoneAdvanced(old_zone=result.old_zone, new_zone=result.new_zone))
    else:
        events.append(EnemyDied(enemy_name=enemy.name, xp_gained=xp))

    events.extend(LeveledUp(new_level=level) for level in new_levels)

    if not roll_loot:
        return
    if enemy.is_boss:
        item = drop_from_boss(zone_at_kill, enemy.is_zone_boss and zone_at_kill >= balance.max_zone,
                              rng, balance)
    else:
        item = try_drop_from_mob(progression.prestige_rank, zone_at_kill, rng, balance=balance)
    if item is not None:
        equipped = auto_equip_if_better(item, state.equipment, state.attributes)
        events.append(ItemDropped(item=item, equipped=equipped))


def _resolve_death(
    state: GameState,
    defeated: PlayerDefeated,
    balance: BalanceConfig,
    events: list[TickEvent],
) -> None:
    state.total_deaths += 1
    if defeated.enemy.is_boss:
        state.progression.reset_boss_encounter(balance)
    events.append(PlayerDied(enemy_name=defeated.enemy.name, was_boss=defeated.enemy.is_boss))


def _apply_passive_xp(
    state: GameState,
    stats: DerivedStats,
    rng: random.Random,
    balance: BalanceConfig,
    events: list[TickEvent],
) -> None:
    gain = state.xp_per_tick(stats, balance)
    state.xp_from_passive += gain
    state.passive_xp_carry += gain
    whole = int(state.passive_xp_carry)
    if whole <= 0:
        return
    state.passive_xp_carry -= whole
    events.extend(LeveledUp(new_level=level) for level in state.add_xp(whole, rng, balance))


def haven_discovery_chance(prestige_rank: int, balance: BalanceConfig = DEFAULT_BALANCE) -> float:
    if prestige_rank < balance.haven_min_prestige_rank:
        return 0.0
    extra_ranks = prestige_rank - balance.haven_min_prestige_rank
    return balance.haven_discovery_base_chance + extra_ranks * balance.haven_discovery_rank_bonus


def _roll_discoveries(
    state: GameState,
    rng: random.Random,
    balance: BalanceConfig,
    events: list[TickEvent],
) -> None:
    """Independent Bernoulli rolls, each drawn only while its content is available."""
    if not state.active_dungeon and rng.random() < balance.dungeon_discovery_chance:
        state.active_dungeon = True
        events.append(DungeonDiscovered())

    if not state.active_fishing and rng.random() < balance.fishing_discovery_chance:
        state.active_fishing = True
        events.append(FishingSpotDiscovered())

    if state.progression.prestige_rank >= 1 and rng.random() < balance.challenge_discovery_chance:
        state.pending_challenges += 1
        events.append(ChallengeDiscovered(pending=state.pending_challenges))

    if not state.haven_discovered:
        chance = haven_discovery_chance(state.progression.prestige_rank, balance)
        if chance > 0.0 and rng.random() < chance:
            state.haven_discovered = True
            events.append(HavenDiscovered())


# =============================================================================
# Engine
# =============================================================================

class GameEngine:
    """Owns a character, its random stream and the balance config.

    ``step()`` runs one tick. Listeners registered with ``subscribe`` see
    every event, which is how the TUI and the batch accumulator hook in.
    """

    __slots__ = ("state", "rng", "balance", "ticks", "_seed", "_listeners", "_xp_curve")

    def __init__(
        self,
        state: Optional[GameState] = None,
        seed: Optional[int] = None,
        balance: BalanceConfig = DEFAULT_BALANCE,
        xp_curve: XPCurve = XPCurve.GAMEPLAY,
    ):
        self.balance = balance
        self._seed = seed
        self._xp_curve = xp_curve
        self._listeners: list[Callable[[TickEvent], None]] = []
        self.state = state if state is not None else GameState.new(xp_curve=xp_curve, balance=balance)
        self.rng = random.Random(seed)
        self.ticks = 0

    def subscribe(self, listener: Callable[[TickEvent], None]) -> None:
        self._listeners.append(listener)

    def _publish(self, events: list[TickEvent]) -> None:
        for listener in self._listeners:
            for event in events:
                listener(event)

    def step(self) -> list[TickEvent]:
        events = tick(self.state, self.rng, self.balance)
        self.ticks += 1
        self._publish(events)
        return events

    def run(self, ticks: int) -> list[TickEvent]:
        """Run ``ticks`` ticks and return all events, in order."""
        events: list[TickEvent] = []
        for _ in range(ticks):
            events.extend(self.step())
        return events

    def can_prestige(self) -> bool:
        return self.state.can_prestige()

    def prestige(self, keep_equipment: bool = False) -> PrestigePerformed:
        if not self.state.can_prestige():
            raise RuntimeError(
                f"Level {self.state.progression.character_level} is too low to prestige"
            )
        new_rank = self.state.prestige(keep_equipment=keep_equipment, balance=self.balance)
        logger.debug("%s prestiged to rank %d", self.state.character_name, new_rank)
        event = PrestigePerformed(new_rank=new_rank, tier_name=tier_name(new_rank))
        self._publish([event])
        return event

    def reset(self) -> None:
        """Start over with a fresh character and a reseeded stream."""
        self.state = GameState.new(
            name=self.state.character_name, xp_curve=self._xp_curve, balance=self.balance,
        )
        self.rng = random.Random(self._seed)
        self.ticks = 0


# Shorter alias used by the front end
Engine = GameEngine
