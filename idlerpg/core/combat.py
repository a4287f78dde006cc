"""Single-encounter combat: enemy spawning and attack exchanges.

The resolver walks ``NoEncounter -> Fighting -> EnemyDead | PlayerDead``.
It only touches ``CombatState`` and reports what happened through the
small ``CombatEvent`` records below; XP, kill counting and loot are the
tick orchestrator's job.
"""
import random
from dataclasses import dataclass, field
from typing import Optional

from ..config import (
    DEFAULT_BALANCE,
    SUBZONE_BOSS_MULTIPLIERS,
    ZONE_BOSS_MULTIPLIERS,
    ZONE_ENEMY_STATS,
    BalanceConfig,
)
from .derived_stats import DerivedStats
from .progression import ProgressionState
from .zones import zone_or_last


@dataclass(slots=True)
class Enemy:
    name: str
    max_hp: float
    hp: float
    damage: float
    defense: float = 0.0
    is_boss: bool = False
    is_zone_boss: bool = False
    ilvl: int = 10

    def is_alive(self) -> bool:
        return self.hp > 0.0

    def reset_hp(self) -> None:
        self.hp = self.max_hp


@dataclass
class CombatState:
    """Player HP, the current enemy and the attack/regen timers."""
    player_current_hp: float = DEFAULT_BALANCE.base_hp
    player_max_hp: float = DEFAULT_BALANCE.base_hp
    current_enemy: Optional[Enemy] = None
    is_regenerating: bool = False
    attack_timer: float = 0.0
    regen_timer: float = 0.0
    regen_start_hp: float = 0.0

    def update_max_hp(self, new_max_hp: float) -> None:
        self.player_max_hp = new_max_hp
        if self.player_current_hp > new_max_hp:
            self.player_current_hp = new_max_hp

    def is_player_alive(self) -> bool:
        return self.player_current_hp > 0.0

    def start_regeneration(self) -> None:
        self.is_regenerating = True
        self.regen_timer = 0.0
        self.regen_start_hp = max(self.player_current_hp, 0.0)

    def reset(self, max_hp: float) -> None:
        self.player_current_hp = max_hp
        self.player_max_hp = max_hp
        self.current_enemy = None
        self.is_regenerating = False
        self.attack_timer = 0.0
        self.regen_timer = 0.0
        self.regen_start_hp = 0.0


# =============================================================================
# Combat events (consumed by the tick orchestrator)
# =============================================================================

@dataclass(frozen=True, slots=True)
class Strike:
    """The player hit the enemy."""
    damage: float
    was_crit: bool


@dataclass(frozen=True, slots=True)
class Retaliation:
    """The enemy hit the player."""
    damage: float


@dataclass(frozen=True, slots=True)
class EnemyDefeated:
    enemy: Enemy = field(compare=False)


@dataclass(frozen=True, slots=True)
class PlayerDefeated:
    enemy: Enemy = field(compare=False)


@dataclass(frozen=True, slots=True)
class Regenerated:
    hp: float


CombatEvent = Strike | Retaliation | EnemyDefeated | PlayerDefeated | Regenerated


# =============================================================================
# Spawning
# =============================================================================

def _zone_enemy_stats(
    zone_id: int,
    subzone_depth: int,
    rng: random.Random,
    balance: BalanceConfig,
) -> tuple[float, float, float]:
    """Base (hp, damage, defense) for a zone/subzone with variance applied."""
    index = min(max(zone_id, 1), max(ZONE_ENEMY_STATS))
    base_hp, hp_step, base_dmg, dmg_step, base_def, def_step = ZONE_ENEMY_STATS[index]
    depth_offset = max(subzone_depth - 1, 0)

    raw_hp = base_hp + depth_offset * hp_step
    raw_dmg = base_dmg + depth_offset * dmg_step
    raw_def = base_def + depth_offset * def_step

    hp_var = rng.uniform(balance.enemy_stat_variance_min, balance.enemy_stat_variance_max)
    dmg_var = rng.uniform(balance.enemy_stat_variance_min, balance.enemy_stat_variance_max)

    hp = float(max(int(raw_hp * hp_var), 1))
    damage = float(max(int(raw_dmg * dmg_var), 1))
    return hp, damage, float(raw_def)


def generate_zone_enemy(
    zone_id: int,
    subzone_id: int,
    rng: random.Random,
    balance: BalanceConfig = DEFAULT_BALANCE,
) -> Enemy:
    zone = zone_or_last(zone_id)
    hp, damage, defense = _zone_enemy_stats(zone.id, subzone_id, rng, balance)
    name = f"{rng.choice(zone.enemy_prefixes)} {rng.choice(zone.enemy_suffixes)}"
    return Enemy(
        name=name,
        max_hp=hp,
        hp=hp,
        damage=damage,
        defense=defense,
        ilvl=zone.id * balance.zone_ilvl_multiplier,
    )


def generate_boss(
    zone_id: int,
    subzone_id: int,
    rng: random.Random,
    balance: BalanceConfig = DEFAULT_BALANCE,
) -> Enemy:
    zone = zone_or_last(zone_id)
    subzone = zone.get_subzone(subzone_id) or zone.subzones[-1]
    hp, damage, defense = _zone_enemy_stats(zone.id, subzone.id, rng, balance)

    if subzone.is_zone_boss:
        hp_mult, dmg_mult, def_mult = ZONE_BOSS_MULTIPLIERS
    else:
        hp_mult, dmg_mult, def_mult = SUBZONE_BOSS_MULTIPLIERS

    boss_hp = float(max(int(hp * hp_mult), 1))
    return Enemy(
        name=subzone.boss_name,
        max_hp=boss_hp,
        hp=boss_hp,
        damage=float(max(int(damage * dmg_mult), 1)),
        defense=float(int(defense * def_mult)),
        is_boss=True,
        is_zone_boss=subzone.is_zone_boss,
        ilvl=zone.id * balance.zone_ilvl_multiplier,
    )


def spawn_enemy(
    progression: ProgressionState,
    rng: random.Random,
    balance: BalanceConfig = DEFAULT_BALANCE,
) -> Enemy:
    """Create the next enemy for the character's position.

    Marks the progression as fighting a boss when the kill counter is due.
    """
    if progression.should_spawn_boss(balance):
        progression.fighting_boss = True
        return generate_boss(progression.current_zone, progression.current_subzone, rng, balance)
    return generate_zone_enemy(progression.current_zone, progression.current_subzone, rng, balance)


# =============================================================================
# Resolution
# =============================================================================

def update_combat(
    combat: CombatState,
    delta_time: float,
    stats: DerivedStats,
    rng: random.Random,
    balance: BalanceConfig = DEFAULT_BALANCE,
) -> list[CombatEvent]:
    """Advance the encounter by ``delta_time`` seconds.

    At most one exchange resolves per call: the player strikes first and
    the enemy answers only if it survived. A kill by reflected damage beats
    a player death on the same exchange. The attack timer keeps its
    fractional remainder across exchanges.
    """
    events: list[CombatEvent] = []

    if combat.is_regenerating:
        _advance_regeneration(combat, delta_time, stats, balance, events)
        return events

    enemy = combat.current_enemy
    if enemy is None:
        return events

    combat.attack_timer += delta_time
    interval = balance.attack_interval_seconds / max(stats.attack_speed_multiplier, 0.01)
    if combat.attack_timer < interval:
        return events
    combat.attack_timer -= interval

    # Player strike; the crit roll is always drawn so the stream stays aligned
    was_crit = rng.random() * 100.0 < stats.crit_chance
    raw = stats.total_damage * (stats.crit_multiplier if was_crit else 1.0)
    damage = max(raw - enemy.defense, 1.0)
    enemy.hp -= damage
    events.append(Strike(damage=damage, was_crit=was_crit))

    if enemy.hp <= 0.0:
        combat.current_enemy = None
        events.append(EnemyDefeated(enemy=enemy))
        if balance.regen_after_kill and combat.player_current_hp < combat.player_max_hp:
            combat.start_regeneration()
        return events

    # Enemy answer
    incoming = max(enemy.damage - stats.defense, 1.0)
    combat.player_current_hp -= incoming
    events.append(Retaliation(damage=incoming))

    if stats.damage_reflection_percent > 0.0:
        enemy.hp -= incoming * stats.damage_reflection_percent / 100.0

    if enemy.hp <= 0.0:
        # Reflected damage finished it off; the kill stands even if the
        # retaliation also dropped the player
        combat.current_enemy = None
        events.append(EnemyDefeated(enemy=enemy))
        if combat.player_current_hp <= 0.0:
            combat.player_current_hp = 0.0
            combat.attack_timer = 0.0
            combat.start_regeneration()
        elif balance.regen_after_kill and combat.player_current_hp < combat.player_max_hp:
            combat.start_regeneration()
    elif combat.player_current_hp <= 0.0:
        combat.player_current_hp = 0.0
        combat.current_enemy = None
        combat.attack_timer = 0.0
        combat.start_regeneration()
        events.append(PlayerDefeated(enemy=enemy))

    return events


def _advance_regeneration(
    combat: CombatState,
    delta_time: float,
    stats: DerivedStats,
    balance: BalanceConfig,
    events: list[CombatEvent],
) -> None:
    duration = balance.hp_regen_duration_seconds / max(stats.hp_regen_multiplier, 0.01)
    combat.regen_timer += delta_time
    if combat.regen_timer >= duration:
        combat.player_current_hp = combat.player_max_hp
        combat.is_regenerating = False
        combat.regen_timer = 0.0
        events.append(Regenerated(hp=combat.player_current_hp))
        return
    progress = combat.regen_timer / duration
    start = combat.regen_start_hp
    combat.player_current_hp = start + (combat.player_max_hp - start) * progress
