"""Items, affixes and the equipment slots that hold them."""
from dataclasses import dataclass, field
from typing import Iterator, Optional

from ..models import AffixType, AttributeType, EquipmentSlot, Rarity


@dataclass(frozen=True, slots=True)
class Affix:
    affix_type: AffixType
    value: float


@dataclass(frozen=True)
class Item:
    """A generated piece of gear. Never modified after creation."""
    slot: EquipmentSlot
    rarity: Rarity
    ilvl: int
    name: str = ""
    attributes: dict[AttributeType, int] = field(default_factory=dict)
    affixes: tuple[Affix, ...] = ()

    def attribute(self, attr: AttributeType) -> int:
        return self.attributes.get(attr, 0)

    def affix_total(self, affix_type: AffixType) -> float:
        return sum(a.value for a in self.affixes if a.affix_type == affix_type)

    @property
    def display_name(self) -> str:
        return self.name or f"{self.rarity.display_name} {self.slot.value.capitalize()}"


@dataclass
class Equipment:
    """Seven fixed slots, each empty or holding exactly one item."""
    slots: dict[EquipmentSlot, Optional[Item]] = field(
        default_factory=lambda: {slot: None for slot in EquipmentSlot}
    )

    def get(self, slot: EquipmentSlot) -> Optional[Item]:
        return self.slots.get(slot)

    def equip(self, item: Item) -> Optional[Item]:
        """Put ``item`` in its slot, returning whatever it replaced."""
        previous = self.slots.get(item.slot)
        self.slots[item.slot] = item
        return previous

    def clear(self) -> None:
        self.slots = {slot: None for slot in EquipmentSlot}

    def items(self) -> Iterator[Item]:
        for slot in EquipmentSlot:
            item = self.slots.get(slot)
            if item is not None:
                yield item

    def equipped_count(self) -> int:
        return sum(1 for _ in self.items())

    def attribute_bonus(self, attr: AttributeType) -> int:
        return sum(item.attribute(attr) for item in self.items())

    def affix_total(self, affix_type: AffixType) -> float:
        return sum(item.affix_total(affix_type) for item in self.items())

    def average_ilvl(self) -> float:
        equipped = list(self.items())
        if not equipped:
            return 0.0
        return sum(item.ilvl for item in equipped) / len(equipped)
