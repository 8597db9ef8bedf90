"""Core battle data: units and grid coordinates."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional
from warband.data.items import Item

MAX_NAME = 100
START_HP = 100
MAX_SLOTS = 2

class Position(NamedTuple):
    x: int
    y: int

@dataclass(eq=False)
class Unit:
    """A combatant. Equality is identity: two units with equal stats are still distinct."""
    name: str
    item1: Item
    item2: Optional[Item] = None
    hp: int = START_HP

    def __post_init__(self):
        # bounded in UTF-8 bytes so the fixed save record holds it whole
        self.name = (self.name or "").encode("utf-8")[:MAX_NAME].decode("utf-8", errors="ignore")

    @property
    def slots_used(self) -> int:
        return self.item1.slots + (self.item2.slots if self.item2 else 0)

    def items(self) -> tuple[Item, ...]:
        return (self.item1,) if self.item2 is None else (self.item1, self.item2)

    def is_defeated(self) -> bool:
        return self.hp <= 0

    def describe(self) -> str:
        text = f"{self.name} with {self.item1.name}"
        if self.item2:
            text += f" and {self.item2.name}"
        return text

@dataclass
class SavedBattle:
    """Armies and active team as stored in a save file, in position-list order."""
    army1: List[Unit] = field(default_factory=list)
    army2: List[Unit] = field(default_factory=list)
    active_team: int = 1
