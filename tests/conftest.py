"""Shared fixtures for the idle RPG tests."""

import random

import pytest

from idlerpg.core.game_state import GameState
from idlerpg.models import AttributeType


@pytest.fixture
def rng():
    """A seeded random stream."""
    return random.Random(12345)


@pytest.fixture
def strong_state():
    """A fresh character with high combat attributes."""
    state = GameState.new(name="Tester")
    state.attributes.set(AttributeType.STR, 30)
    state.attributes.set(AttributeType.DEX, 24)
    state.attributes.set(AttributeType.CON, 30)
    state.combat.reset(state.derived_stats().max_hp)
    return state
