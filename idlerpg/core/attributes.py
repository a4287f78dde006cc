"""Character attributes and level-up point distribution."""
import random
from dataclasses import dataclass, field

from ..config import DEFAULT_BALANCE, BalanceConfig
from ..models import AttributeType

# Placement attempts per level-up before leftover points are dropped
MAX_DISTRIBUTION_ATTEMPTS = 100


def _base_values(base: int = DEFAULT_BALANCE.base_attribute_value) -> dict[AttributeType, int]:
    return {attr: base for attr in AttributeType}


@dataclass
class Attributes:
    """The six core attributes, keyed by ``AttributeType``."""
    values: dict[AttributeType, int] = field(default_factory=_base_values)

    def get(self, attr: AttributeType) -> int:
        return self.values.get(attr, DEFAULT_BALANCE.base_attribute_value)

    def set(self, attr: AttributeType, value: int) -> None:
        self.values[attr] = value

    def increment(self, attr: AttributeType, amount: int = 1) -> None:
        self.values[attr] = self.get(attr) + amount

    def modifier(self, attr: AttributeType) -> int:
        return attribute_modifier(self.get(attr))

    def total(self) -> int:
        return sum(self.get(attr) for attr in AttributeType)

    def reset(self, balance: BalanceConfig = DEFAULT_BALANCE) -> None:
        self.values = _base_values(balance.base_attribute_value)

    def copy(self) -> "Attributes":
        return Attributes(values=dict(self.values))


def attribute_modifier(value: int, base: int = DEFAULT_BALANCE.base_attribute_value) -> int:
    """D&D-style modifier ``(value - 10) / 2``, truncated toward zero."""
    return int((value - base) / 2)


def attribute_cap(prestige_rank: int, balance: BalanceConfig = DEFAULT_BALANCE) -> int:
    return balance.base_attribute_cap + prestige_rank * balance.attribute_cap_per_prestige


def distribute_level_up_points(
    attributes: Attributes,
    prestige_rank: int,
    rng: random.Random,
    balance: BalanceConfig = DEFAULT_BALANCE,
) -> list[AttributeType]:
    """Spend one level's worth of points on random uncapped attributes.

    Returns:
        The attributes that received a point, in order
    """
    cap = attribute_cap(prestige_rank, balance)
    choices = list(AttributeType)
    raised = []
    points = balance.level_up_attribute_points
    attempts = 0
    while points > 0 and attempts < MAX_DISTRIBUTION_ATTEMPTS:
        attempts += 1
        attr = rng.choice(choices)
        if attributes.get(attr) < cap:
            attributes.increment(attr)
            raised.append(attr)
            points -= 1
    return raised
