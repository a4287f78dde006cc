"""Shared TUI screens for the idle RPG simulator."""

from .preset_select import PresetSelectScreen
from .zone_table import ZoneTableScreen

__all__ = [
    "PresetSelectScreen",
    "ZoneTableScreen",
]
