"""Named simulation presets and the registry that lists them.

Presets register themselves with ``PresetRegistry.register`` so the CLI
and the TUI can offer them without a hard-coded list.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional, Type

from .config import SimConfig


@dataclass
class PresetInfo:
    """Metadata about a preset for display and selection.

    Attributes:
        id: Unique identifier used on the command line (e.g. "quick")
        name: Display name
        description: One-line summary for menus and --help
    """
    id: str
    name: str
    description: str


class SimPreset(ABC):
    """A reusable batch configuration."""

    @classmethod
    @abstractmethod
    def get_info(cls) -> PresetInfo:
        """Return metadata about this preset."""

    @classmethod
    @abstractmethod
    def build(cls, **overrides) -> SimConfig:
        """Return the preset's config with ``overrides`` applied."""


class PresetRegistry:
    """Central registry of simulation presets.

    Example:
        @PresetRegistry.register
        class QuickPreset(SimPreset):
            ...
    """

    _presets: Dict[str, Type[SimPreset]] = {}

    @classmethod
    def register(cls, preset_class: Type[SimPreset]) -> Type[SimPreset]:
        """Decorator to register a preset.

        Args:
            preset_class: The preset class to register

        Returns:
            The same class (for decorator chaining)
        """
        cls._presets[preset_class.get_info().id] = preset_class
        return preset_class

    @classmethod
    def get(cls, preset_id: str) -> Optional[Type[SimPreset]]:
        return cls._presets.get(preset_id)

    @classmethod
    def get_all_info(cls) -> list[PresetInfo]:
        """Info for every registered preset, sorted by id."""
        return sorted((p.get_info() for p in cls._presets.values()), key=lambda info: info.id)

    @classmethod
    def build(cls, preset_id: str, **overrides) -> SimConfig:
        """Build a preset's config.

        Raises:
            KeyError: If no preset has this id
        """
        preset = cls.get(preset_id)
        if preset is None:
            raise KeyError(f"Unknown preset '{preset_id}'")
        return preset.build(**overrides)


# =============================================================================
# Built-in presets
# =============================================================================

def zone_balance(target_zone: int) -> SimConfig:
    """100 runs to ``target_zone`` without prestige."""
    return SimConfig(
        num_runs=100,
        target_zone=target_zone,
        target_prestige=0,
        simulate_loot=True,
        simulate_prestige=False,
    )


def full_progression() -> SimConfig:
    """50 runs to zone 10 prestiging up to rank 5."""
    return SimConfig(
        num_runs=50,
        target_zone=10,
        target_prestige=5,
        simulate_loot=True,
        simulate_prestige=True,
    )


def loot_analysis(num_runs: int) -> SimConfig:
    return SimConfig(num_runs=num_runs, target_zone=10, simulate_loot=True)


@PresetRegistry.register
class QuickPreset(SimPreset):
    @classmethod
    def get_info(cls) -> PresetInfo:
        return PresetInfo("quick", "Quick Balance Check", "100 runs to zone 5, no prestige")

    @classmethod
    def build(cls, **overrides) -> SimConfig:
        return zone_balance(5).with_overrides(**overrides)


@PresetRegistry.register
class FullPreset(SimPreset):
    @classmethod
    def get_info(cls) -> PresetInfo:
        return PresetInfo("full", "Full Progression", "50 runs to zone 10 with prestige to P5")

    @classmethod
    def build(cls, **overrides) -> SimConfig:
        return full_progression().with_overrides(**overrides)


@PresetRegistry.register
class LootPreset(SimPreset):
    @classmethod
    def get_info(cls) -> PresetInfo:
        return PresetInfo("loot", "Loot Analysis", "1000 runs to zone 10 tracking drops")

    @classmethod
    def build(cls, **overrides) -> SimConfig:
        return loot_analysis(1000).with_overrides(**overrides)
