"""Factory helpers for building units and armies from catalog choices.

Used by the CLI setup prompts, the save loader and tests.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union
from warband.core.errors import SetupError, SetupErrorCode
from warband.data.items import Item, all_items, find_item
from .models import Unit, MAX_SLOTS, START_HP
from .roster import MAX_UNITS

MIN_ARMY = 1
MAX_ARMY = MAX_UNITS

ItemRef = Union[Item, int, str, None]

@dataclass
class UnitSpec:
    name: str
    item1: ItemRef
    item2: ItemRef = None

def resolve_item(ref: ItemRef) -> Optional[Item]:
    if ref is None:
        return None
    if isinstance(ref, Item):
        return ref
    if isinstance(ref, int):
        items = all_items()
        if 0 <= ref < len(items):
            return items[ref]
        raise SetupError(SetupErrorCode.WRONG_ITEM, f"no item at index {ref}")
    it = find_item(ref)
    if it is None:
        raise SetupError(SetupErrorCode.WRONG_ITEM, f"unknown item '{ref}'")
    return it

def build_unit(name: str, item1: ItemRef, item2: ItemRef = None, hp: int = START_HP) -> Unit:
    primary = resolve_item(item1)
    if primary is None:
        raise SetupError(SetupErrorCode.ITEM_COUNT, f"{name or 'unit'} must have a primary item")
    secondary = resolve_item(item2)
    used = primary.slots + (secondary.slots if secondary else 0)
    if used > MAX_SLOTS:
        raise SetupError(SetupErrorCode.SLOTS, f"{primary.name} and {secondary.name if secondary else '-'} need {used} slots (max {MAX_SLOTS})")
    return Unit(name=name, item1=primary, item2=secondary, hp=hp)

def check_army_size(count: int) -> int:
    if count < MIN_ARMY or count > MAX_ARMY:
        raise SetupError(SetupErrorCode.UNIT_COUNT, f"army size must be {MIN_ARMY}-{MAX_ARMY}, got {count}")
    return count

def build_army(specs: Sequence[UnitSpec]) -> List[Unit]:
    check_army_size(len(specs))
    return [build_unit(s.name, s.item1, s.item2) for s in specs]

__all__ = ["UnitSpec","resolve_item","build_unit","check_army_size","build_army","MIN_ARMY","MAX_ARMY"]
