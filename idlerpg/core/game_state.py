"""The character aggregate mutated by ``tick``."""
import random
from dataclasses import dataclass, field

from ..config import DEFAULT_BALANCE, BalanceConfig
from ..models import AttributeType, XPCurve
from .attributes import Attributes, distribute_level_up_points
from .combat import CombatState
from .derived_stats import DerivedStats
from .items import Equipment
from .prestige import (
    PrestigeCombatBonuses,
    can_prestige,
    perform_prestige,
    prestige_multiplier,
    wisdom_multiplier,
)
from .progression import ProgressionState


@dataclass(frozen=True, slots=True)
class ChallengeReward:
    """What a finished minigame hands back to the core."""
    xp: int = 0
    prestige_ranks: int = 0


@dataclass
class GameState:
    """Everything one character owns: progression, gear, combat and side content.

    Attributes:
        character_name: Display name
        progression: Level, zone and prestige position
        attributes: The six core attributes
        equipment: Seven equipment slots
        combat: HP, current enemy and timers
        fishing_rank: Side progression, kept through prestige
        total_prestige_count: Lifetime prestiges performed
        active_dungeon: A discovered dungeon is waiting to be run
        active_fishing: A discovered fishing spot is waiting
        pending_challenges: Minigame challenges waiting in the menu
        haven_discovered: The haven base has been found
    """
    character_name: str = "Hero"
    progression: ProgressionState = field(default_factory=ProgressionState)
    attributes: Attributes = field(default_factory=Attributes)
    equipment: Equipment = field(default_factory=Equipment)
    combat: CombatState = field(default_factory=CombatState)
    fishing_rank: int = 0
    total_prestige_count: int = 0
    active_dungeon: bool = False
    active_fishing: bool = False
    pending_challenges: int = 0
    haven_discovered: bool = False
    total_deaths: int = 0
    boss_kills: int = 0
    play_time_ticks: int = 0
    xp_from_kills: int = 0
    xp_from_passive: float = 0.0
    passive_xp_carry: float = 0.0

    @classmethod
    def new(
        cls,
        name: str = "Hero",
        xp_curve: XPCurve = XPCurve.GAMEPLAY,
        balance: BalanceConfig = DEFAULT_BALANCE,
    ) -> "GameState":
        state = cls(character_name=name)
        state.progression.xp_curve = xp_curve
        state.attributes.reset(balance)
        state.combat.reset(balance.base_hp)
        return state

    # ------------------------------------------------------------------
    # Derived numbers
    # ------------------------------------------------------------------

    def derived_stats(self, balance: BalanceConfig = DEFAULT_BALANCE) -> DerivedStats:
        bonuses = PrestigeCombatBonuses.from_rank(self.progression.prestige_rank)
        return DerivedStats.calculate(self.attributes, self.equipment, bonuses, balance)

    def xp_per_tick(self, stats: DerivedStats, balance: BalanceConfig = DEFAULT_BALANCE) -> float:
        """Passive XP rate; kills are paid in multiples of this."""
        cha_mod = self.attributes.modifier(AttributeType.CHA)
        wis_mod = self.attributes.modifier(AttributeType.WIS)
        return (
            balance.base_xp_per_tick
            * prestige_multiplier(self.progression.prestige_rank, cha_mod)
            * wisdom_multiplier(wis_mod)
            * stats.xp_gain_multiplier
        )

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def add_xp(
        self,
        xp: int,
        rng: random.Random,
        balance: BalanceConfig = DEFAULT_BALANCE,
    ) -> list[int]:
        """Grant XP, spending attribute points for each level gained.

        Returns:
            The new levels reached, in order
        """
        start_level = self.progression.character_level
        gained = self.progression.add_xp(xp, balance)
        for _ in range(gained):
            distribute_level_up_points(self.attributes, self.progression.prestige_rank, rng, balance)
        return list(range(start_level + 1, start_level + gained + 1))

    def can_prestige(self) -> bool:
        return can_prestige(self.progression.character_level, self.progression.prestige_rank)

    def prestige(self, keep_equipment: bool = False, balance: BalanceConfig = DEFAULT_BALANCE) -> int:
        """Perform a prestige reset. See ``perform_prestige``."""
        return perform_prestige(self, keep_equipment=keep_equipment, balance=balance)

    def apply_challenge_reward(
        self,
        reward: ChallengeReward,
        rng: random.Random,
        balance: BalanceConfig = DEFAULT_BALANCE,
    ) -> list[int]:
        """Apply a minigame payout and clear one pending challenge."""
        self.pending_challenges = max(self.pending_challenges - 1, 0)
        if reward.prestige_ranks > 0:
            self.progression.prestige_rank += reward.prestige_ranks
        return self.add_xp(reward.xp, rng, balance) if reward.xp > 0 else []
