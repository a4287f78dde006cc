"""Balance configuration and static game tables.

Tunable scalars live on the frozen ``BalanceConfig`` dataclass so the
interactive engine and the batch simulator share one definition.  Fixed
data tables (enemy stats per zone, prestige tiers, item ranges) stay as
module constants, the same way rate tables are kept for lookups.

Values are the live-game tuning as of the 10-zone "Storm Citadel" release.
"""
from dataclasses import dataclass, replace

from .models import AffixType, Rarity


# Per-zone enemy base stats
# Format: {zone_id: (base_hp, hp_step, base_dmg, dmg_step, base_def, def_step)}
# Steps are added once per subzone depth beyond the first.
ZONE_ENEMY_STATS: dict[int, tuple[int, int, int, int, int, int]] = {
    1: (55, 9, 7, 2, 0, 0),        # Meadow
    2: (90, 14, 13, 3, 2, 1),      # Dark Forest
    3: (160, 22, 22, 4, 6, 2),     # Mountain Pass
    4: (215, 27, 31, 6, 10, 3),    # Ancient Ruins
    5: (305, 32, 42, 7, 16, 3),    # Volcanic Wastes
    6: (380, 40, 53, 8, 22, 4),    # Frozen Tundra
    7: (485, 45, 67, 10, 29, 4),   # Crystal Caverns
    8: (575, 54, 78, 11, 35, 6),   # Sunken Kingdom
    9: (685, 63, 92, 13, 43, 6),   # Floating Isles
    10: (810, 72, 109, 14, 52, 7), # Storm Citadel
}

# Boss stat multipliers: (hp, damage, defense)
SUBZONE_BOSS_MULTIPLIERS: tuple[float, float, float] = (3.0, 1.5, 1.8)
ZONE_BOSS_MULTIPLIERS: tuple[float, float, float] = (5.0, 1.8, 2.5)

# Prestige tier display names, indexed by rank (20+ is "Eternal")
PRESTIGE_TIER_NAMES: tuple[str, ...] = (
    "None", "Bronze", "Silver", "Gold", "Platinum",
    "Diamond", "Emerald", "Sapphire", "Ruby", "Obsidian",
    "Celestial", "Astral", "Cosmic", "Stellar", "Galactic",
    "Transcendent", "Divine", "Exalted", "Mythic", "Legendary",
)
PRESTIGE_TIER_NAME_MAX = "Eternal"

# Character level required to reach a prestige rank
# Ranks 11-19 continue at +10 per rank, 20+ at +15 per rank beyond 219.
PRESTIGE_REQUIRED_LEVELS: dict[int, int] = {
    1: 10,
    2: 25,
    3: 50,
    4: 65,
    5: 80,
    6: 90,
    7: 100,
    8: 110,
    9: 120,
    10: 130,
}

# Zone gating tiers: (first_zone_of_tier, prestige_rank_required)
# Zones 1-2 are open, every later pair needs five more ranks.
ZONE_PRESTIGE_TIERS: tuple[tuple[int, int], ...] = (
    (1, 0),
    (3, 5),
    (5, 10),
    (7, 15),
    (9, 20),
)

# Attribute bonus per boosted attribute: {rarity: (min, max)}
ITEM_ATTRIBUTE_RANGES: dict[Rarity, tuple[int, int]] = {
    Rarity.COMMON: (1, 1),
    Rarity.MAGIC: (1, 2),
    Rarity.RARE: (2, 3),
    Rarity.EPIC: (3, 4),
    Rarity.LEGENDARY: (8, 15),
}

# Affix count by rarity: {rarity: (min, max)}
ITEM_AFFIX_COUNTS: dict[Rarity, tuple[int, int]] = {
    Rarity.COMMON: (0, 0),
    Rarity.MAGIC: (1, 1),
    Rarity.RARE: (2, 3),
    Rarity.EPIC: (3, 4),
    Rarity.LEGENDARY: (4, 5),
}

# Generic affix value range by rarity (percent points)
AFFIX_VALUE_RANGES: dict[Rarity, tuple[float, float]] = {
    Rarity.COMMON: (1.0, 2.0),
    Rarity.MAGIC: (1.0, 3.0),
    Rarity.RARE: (2.0, 4.0),
    Rarity.EPIC: (4.0, 6.0),
    Rarity.LEGENDARY: (6.0, 10.0),
}

# HPBonus is a flat amount, not a percentage
HP_BONUS_RANGES: dict[Rarity, tuple[float, float]] = {
    Rarity.COMMON: (5.0, 10.0),
    Rarity.MAGIC: (10.0, 20.0),
    Rarity.RARE: (20.0, 35.0),
    Rarity.EPIC: (30.0, 50.0),
    Rarity.LEGENDARY: (50.0, 80.0),
}

CRIT_MULTIPLIER_RANGES: dict[Rarity, tuple[float, float]] = {
    Rarity.COMMON: (2.0, 5.0),
    Rarity.MAGIC: (5.0, 10.0),
    Rarity.RARE: (10.0, 15.0),
    Rarity.EPIC: (15.0, 25.0),
    Rarity.LEGENDARY: (20.0, 35.0),
}

# Item score weight per affix point
AFFIX_SCORE_WEIGHTS: dict[AffixType, float] = {
    AffixType.DAMAGE_PERCENT: 2.0,
    AffixType.CRIT_CHANCE: 1.5,
    AffixType.CRIT_MULTIPLIER: 1.5,
    AffixType.ATTACK_SPEED: 1.2,
    AffixType.HP_BONUS: 0.5,
    AffixType.DAMAGE_REDUCTION: 1.3,
    AffixType.HP_REGEN: 1.0,
    AffixType.DAMAGE_REFLECTION: 0.8,
    AffixType.XP_GAIN: 1.0,
}

# Mob rarity distribution at zero bonus: Common, Magic, Rare, Epic, Legendary
MOB_RARITY_BASELINE: tuple[float, float, float, float, float] = (0.55, 0.30, 0.10, 0.04, 0.01)
# Share of the mass taken from Common that moves to Rare, Epic, Legendary
MOB_RARITY_SHIFT_SHARES: tuple[float, float, float] = (0.6, 0.3, 0.1)

# Boss drop tables: (Magic, Rare, Epic, Legendary), bosses never drop Common
BOSS_RARITY_WEIGHTS: tuple[float, float, float, float] = (0.40, 0.35, 0.20, 0.05)
FINAL_BOSS_RARITY_WEIGHTS: tuple[float, float, float, float] = (0.20, 0.40, 0.30, 0.10)


@dataclass(frozen=True, slots=True)
class BalanceConfig:
    """Immutable tuning values shared by the tick engine and the simulator.

    Build variants with ``BalanceConfig.with_overrides(...)``; instances are
    never mutated.
    """
    # Timing
    tick_interval_ms: int = 100
    attack_interval_seconds: float = 1.5
    hp_regen_duration_seconds: float = 2.5
    regen_after_kill: bool = False  # True restores the classic heal-between-fights pacing

    # Gameplay XP curve: base * level ** exponent
    xp_curve_base: float = 100.0
    xp_curve_exponent: float = 1.5
    # Simulator XP curve: base * growth ** level
    sim_xp_curve_base: float = 100.0
    sim_xp_curve_growth: float = 1.1

    # XP awards
    base_xp_per_tick: float = 1.0
    combat_xp_min_ticks: int = 200
    combat_xp_max_ticks: int = 400
    boss_xp_ticks: int = 400
    passive_xp: bool = True

    # Zones
    max_zone: int = 10
    kills_for_boss: int = 10
    kills_for_boss_retry: int = 5
    zone_ilvl_multiplier: int = 10
    enemy_stat_variance_min: float = 0.9
    enemy_stat_variance_max: float = 1.1

    # Attributes
    base_attribute_value: int = 10
    base_attribute_cap: int = 20
    attribute_cap_per_prestige: int = 5
    level_up_attribute_points: int = 3
    base_hp: float = 50.0
    base_damage: float = 5.0
    base_crit_chance: float = 5.0
    base_crit_multiplier: float = 2.0

    # Loot
    item_drop_base_chance: float = 0.15
    item_drop_prestige_bonus: float = 0.01
    item_drop_max_chance: float = 0.25
    mob_rarity_prestige_bonus: float = 0.01
    mob_rarity_prestige_cap: float = 0.10
    common_rarity_floor: float = 0.10

    # Discovery rolls (per tick)
    dungeon_discovery_chance: float = 0.0002
    fishing_discovery_chance: float = 0.0005
    challenge_discovery_chance: float = 0.000014
    haven_discovery_base_chance: float = 0.000014
    haven_discovery_rank_bonus: float = 0.000007
    haven_min_prestige_rank: int = 10

    @property
    def tick_seconds(self) -> float:
        """Delta time of one tick in seconds."""
        return self.tick_interval_ms / 1000.0

    @property
    def ticks_per_second(self) -> int:
        return 1000 // self.tick_interval_ms

    def with_overrides(self, **changes) -> "BalanceConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


DEFAULT_BALANCE = BalanceConfig()
