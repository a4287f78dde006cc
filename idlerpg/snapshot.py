"""Save and load character snapshots as JSON.

Older snapshots may lack fields added since they were written; anything
missing falls back to the default a new character would have, and
unknown keys are ignored.
"""
import json
import logging
from dataclasses import fields
from pathlib import Path
from typing import Any, Optional

from .core.combat import CombatState, Enemy
from .core.game_state import GameState
from .core.items import Affix, Equipment, Item
from .core.progression import ProgressionState
from .models import AffixType, AttributeType, EquipmentSlot, Rarity, XPCurve

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 2

# GameState fields stored as plain scalars
_SCALAR_STATE_FIELDS = (
    "character_name",
    "fishing_rank",
    "total_prestige_count",
    "active_dungeon",
    "active_fishing",
    "pending_challenges",
    "haven_discovered",
    "total_deaths",
    "boss_kills",
    "play_time_ticks",
    "xp_from_kills",
    "xp_from_passive",
    "passive_xp_carry",
)


class SnapshotError(ValueError):
    """A snapshot file could not be parsed."""


# =============================================================================
# Encoding
# =============================================================================

def _item_to_dict(item: Item) -> dict[str, Any]:
    return {
        "slot": item.slot.value,
        "rarity": item.rarity.name,
        "ilvl": item.ilvl,
        "name": item.name,
        "attributes": {attr.value: value for attr, value in item.attributes.items()},
        "affixes": [{"type": a.affix_type.value, "value": a.value} for a in item.affixes],
    }


def _enemy_to_dict(enemy: Enemy) -> dict[str, Any]:
    return {f.name: getattr(enemy, f.name) for f in fields(enemy)}


def state_to_dict(state: GameState) -> dict[str, Any]:
    progression = state.progression
    combat = state.combat
    data: dict[str, Any] = {
        "snapshot_version": SNAPSHOT_VERSION,
        "progression": {
            "character_level": progression.character_level,
            "character_xp": progression.character_xp,
            "current_zone": progression.current_zone,
            "current_subzone": progression.current_subzone,
            "kills_in_subzone": progression.kills_in_subzone,
            "prestige_rank": progression.prestige_rank,
            "total_kills": progression.total_kills,
            "fighting_boss": progression.fighting_boss,
            "xp_curve": progression.xp_curve.value,
        },
        "attributes": {attr.value: state.attributes.get(attr) for attr in AttributeType},
        "equipment": {
            slot.value: _item_to_dict(item) if item is not None else None
            for slot, item in state.equipment.slots.items()
        },
        "combat": {
            "player_current_hp": combat.player_current_hp,
            "player_max_hp": combat.player_max_hp,
            "current_enemy": _enemy_to_dict(combat.current_enemy) if combat.current_enemy else None,
            "is_regenerating": combat.is_regenerating,
            "attack_timer": combat.attack_timer,
            "regen_timer": combat.regen_timer,
            "regen_start_hp": combat.regen_start_hp,
        },
    }
    for name in _SCALAR_STATE_FIELDS:
        data[name] = getattr(state, name)
    return data


# =============================================================================
# Decoding
# =============================================================================

def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    """A nested object by key; null or malformed sections read as empty."""
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        logger.warning("Ignoring malformed %r section in snapshot", key)
        return {}
    return value


def _item_from_dict(data: dict[str, Any]) -> Optional[Item]:
    try:
        slot = EquipmentSlot(data["slot"])
        rarity = Rarity[data.get("rarity", "COMMON")]
    except (KeyError, ValueError):
        logger.warning("Skipping unreadable item in snapshot: %r", data)
        return None
    attributes = {}
    for key, value in _section(data, "attributes").items():
        try:
            attributes[AttributeType(key)] = int(value)
        except ValueError:
            logger.warning("Ignoring unknown item attribute %r", key)
    affixes = []
    for raw in data.get("affixes") or []:
        try:
            affixes.append(Affix(AffixType(raw["type"]), float(raw.get("value", 0.0))))
        except (KeyError, TypeError, ValueError):
            logger.warning("Ignoring unknown affix %r", raw)
    return Item(
        slot=slot,
        rarity=rarity,
        ilvl=int(data.get("ilvl", 10)),
        name=data.get("name", ""),
        attributes=attributes,
        affixes=tuple(affixes),
    )


def _progression_from_dict(data: dict[str, Any]) -> ProgressionState:
    progression = ProgressionState()
    for f in fields(ProgressionState):
        if f.name in data and f.name != "xp_curve":
            setattr(progression, f.name, data[f.name])
    if "xp_curve" in data:
        progression.xp_curve = XPCurve(data["xp_curve"])
    return progression


def _combat_from_dict(data: dict[str, Any]) -> CombatState:
    combat = CombatState()
    for f in fields(CombatState):
        if f.name in data and f.name != "current_enemy":
            setattr(combat, f.name, data[f.name])
    # Older saves named the single attack timer after the player
    if "attack_timer" not in data and "player_attack_timer" in data:
        combat.attack_timer = data["player_attack_timer"]
    enemy_data = data.get("current_enemy")
    if isinstance(enemy_data, dict):
        known = {f.name for f in fields(Enemy)}
        combat.current_enemy = Enemy(**{k: v for k, v in enemy_data.items() if k in known})
    return combat


def state_from_dict(data: dict[str, Any]) -> GameState:
    """Rebuild a ``GameState``; missing sections keep new-character defaults."""
    state = GameState.new()
    version = data.get("snapshot_version", 1)
    if version > SNAPSHOT_VERSION:
        logger.warning("Snapshot version %s is newer than supported %s", version, SNAPSHOT_VERSION)

    state.progression = _progression_from_dict(_section(data, "progression"))

    for key, value in _section(data, "attributes").items():
        try:
            state.attributes.set(AttributeType(key), int(value))
        except ValueError:
            logger.warning("Ignoring unknown attribute %r", key)

    equipment = Equipment()
    for raw in _section(data, "equipment").values():
        if not isinstance(raw, dict):
            continue
        item = _item_from_dict(raw)
        if item is not None:
            equipment.equip(item)
    state.equipment = equipment

    combat_data = _section(data, "combat")
    if combat_data:
        state.combat = _combat_from_dict(combat_data)

    for name in _SCALAR_STATE_FIELDS:
        if name in data:
            setattr(state, name, data[name])
    return state


# =============================================================================
# Files
# =============================================================================

def save_snapshot(state: GameState, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(state_to_dict(state), indent=2), encoding="utf-8")
    logger.info("Saved snapshot to %s", path)
    return path


def load_snapshot(path: Path) -> GameState:
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise SnapshotError(f"{path} is not a valid snapshot: {exc}") from exc
    if not isinstance(data, dict):
        raise SnapshotError(f"{path} does not contain a snapshot object")
    return state_from_dict(data)
