"""Level, zone and prestige progression.

Everything here is plain data plus pure transitions. Randomness and
side effects (attribute points, loot) are applied by the callers.
"""
from dataclasses import dataclass
from typing import Optional

from ..config import DEFAULT_BALANCE, ZONE_PRESTIGE_TIERS, BalanceConfig
from ..models import XPCurve
from .zones import (
    BossDefeatResult,
    StormsEnd,
    SubzoneComplete,
    ZoneComplete,
    ZoneCompleteButGated,
    zone_or_last,
)


def xp_for_level(level: int, balance: BalanceConfig = DEFAULT_BALANCE) -> int:
    """XP needed to go from ``level`` to ``level + 1`` (gameplay curve).

    ``base * level ** exponent``, so level 1 needs 100 and level 10 needs 3162.
    """
    return int(balance.xp_curve_base * level ** balance.xp_curve_exponent)


def sim_xp_for_level(level: int, balance: BalanceConfig = DEFAULT_BALANCE) -> int:
    """XP needed per level in the batch simulator's progression model.

    ``base * growth ** level``. Separate from the gameplay curve.
    """
    return int(balance.sim_xp_curve_base * balance.sim_xp_curve_growth ** level)


XP_CURVES = {
    XPCurve.GAMEPLAY: xp_for_level,
    XPCurve.SIMULATOR: sim_xp_for_level,
}


# =============================================================================
# Zone gating
# =============================================================================

def prestige_required_for_zone(zone: int) -> int:
    """Prestige rank needed to enter ``zone``."""
    required = 0
    for first_zone, rank in ZONE_PRESTIGE_TIERS:
        if zone >= first_zone:
            required = rank
    return required


def max_zone_for_prestige(rank: int, balance: BalanceConfig = DEFAULT_BALANCE) -> int:
    """Highest zone a character of prestige ``rank`` may enter."""
    tiers = list(ZONE_PRESTIGE_TIERS)
    highest = 0
    for i, (_, required) in enumerate(tiers):
        if rank >= required:
            # Last zone of this tier is one before the next tier starts
            if i + 1 < len(tiers):
                highest = tiers[i + 1][0] - 1
            else:
                highest = balance.max_zone
    return min(highest, balance.max_zone)


def can_access_zone(rank: int, zone: int) -> bool:
    return rank >= prestige_required_for_zone(zone)


# =============================================================================
# Progression state
# =============================================================================

@dataclass
class ProgressionState:
    """Level, XP, zone position and prestige rank of one character."""
    character_level: int = 1
    character_xp: int = 0
    current_zone: int = 1
    current_subzone: int = 1
    kills_in_subzone: int = 0
    prestige_rank: int = 0
    total_kills: int = 0
    fighting_boss: bool = False
    xp_curve: XPCurve = XPCurve.GAMEPLAY

    def xp_to_next_level(self, balance: BalanceConfig = DEFAULT_BALANCE) -> int:
        return XP_CURVES[self.xp_curve](self.character_level, balance)

    def add_xp(self, xp: int, balance: BalanceConfig = DEFAULT_BALANCE) -> int:
        """Add XP and apply every level-up it pays for.

        Returns:
            Number of levels gained (may be more than one)
        """
        self.character_xp += max(int(xp), 0)
        levels_gained = 0
        threshold = self.xp_to_next_level(balance)
        while self.character_xp >= threshold:
            self.character_xp -= threshold
            self.character_level += 1
            levels_gained += 1
            threshold = self.xp_to_next_level(balance)
        return levels_gained

    def should_spawn_boss(self, balance: BalanceConfig = DEFAULT_BALANCE) -> bool:
        return self.kills_in_subzone >= balance.kills_for_boss

    def record_kill(
        self,
        is_boss: bool,
        balance: BalanceConfig = DEFAULT_BALANCE,
    ) -> Optional[BossDefeatResult]:
        """Count a kill; a boss kill moves the character forward.

        Returns:
            The boss defeat outcome, or None for a regular kill
        """
        self.total_kills += 1
        if not is_boss:
            self.kills_in_subzone += 1
            return None

        self.kills_in_subzone = 0
        self.fighting_boss = False
        return self._advance_after_boss(balance)

    def _advance_after_boss(self, balance: BalanceConfig) -> BossDefeatResult:
        zone = zone_or_last(self.current_zone)
        if self.current_subzone < zone.subzone_count:
            self.current_subzone += 1
            return SubzoneComplete(new_subzone=self.current_subzone)

        if self.current_zone >= balance.max_zone:
            # Final zone: stay put and keep farming
            return StormsEnd()

        next_zone = self.current_zone + 1
        if not can_access_zone(self.prestige_rank, next_zone):
            return ZoneCompleteButGated(
                zone_name=zone_or_last(next_zone).name,
                required_prestige=prestige_required_for_zone(next_zone),
            )

        old_zone = self.current_zone
        self.current_zone = next_zone
        self.current_subzone = 1
        return ZoneComplete(old_zone=old_zone, new_zone=next_zone)

    def reset_boss_encounter(self, balance: BalanceConfig = DEFAULT_BALANCE) -> None:
        """Dying to a boss sends it back a few kills instead of a full cycle."""
        self.fighting_boss = False
        self.kills_in_subzone = max(balance.kills_for_boss - balance.kills_for_boss_retry, 0)

    def is_at_zone_cap(self, balance: BalanceConfig = DEFAULT_BALANCE) -> bool:
        return self.current_zone >= max_zone_for_prestige(self.prestige_rank, balance)

    def prestige(self) -> None:
        """Bump the prestige rank and restart level and zone progress.

        Lifetime ``total_kills`` is kept. Equipment and side progression live
        outside this record and are untouched.
        """
        self.prestige_rank += 1
        self.character_level = 1
        self.character_xp = 0
        self.current_zone = 1
        self.current_subzone = 1
        self.kills_in_subzone = 0
        self.fighting_boss = False
