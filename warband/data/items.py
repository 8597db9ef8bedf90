"""Item catalog loader.

The catalog is a fixed, ordered table. An item's identity is its index in
that table; units and save files refer to items only through it.
"""
from __future__ import annotations
import json
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple
from warband.core.errors import DataLoadError
from warband.core.paths import CATALOG

@dataclass(frozen=True)
class Item:
    index: int
    name: str
    att: int
    defense: int
    slots: int
    range: int
    radius: int = 0  # 0 = no area ability

    @property
    def has_area(self) -> bool:
        return self.radius > 0

    def summary(self) -> str:
        text = f"ATK:{self.att} DEF:{self.defense} RNG:{self.range} SLOTS:{self.slots}"
        if self.radius:
            text += f" AREA:{self.radius}"
        return text

_FIELDS = ("name", "att", "def", "slots", "range", "radius")

@lru_cache(maxsize=None)
def all_items() -> Tuple[Item, ...]:
    if not CATALOG.exists():
        raise DataLoadError(str(CATALOG), "catalog file missing")
    try:
        raw = json.loads(CATALOG.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise DataLoadError(str(CATALOG), str(e)) from e
    items = []
    for i, entry in enumerate(raw):
        missing = [f for f in _FIELDS if f not in entry]
        if missing:
            raise DataLoadError(str(CATALOG), f"entry {i} missing {', '.join(missing)}")
        items.append(Item(
            index=i,
            name=str(entry["name"]),
            att=int(entry["att"]),
            defense=int(entry["def"]),
            slots=int(entry["slots"]),
            range=int(entry["range"]),
            radius=int(entry.get("radius", 0)),
        ))
    return tuple(items)

def catalog_size() -> int:
    return len(all_items())

def get_item(index: int) -> Item:
    items = all_items()
    if index < 0 or index >= len(items):
        raise KeyError(f"Item not found: {index}")
    return items[index]

def item_or_none(index: int) -> Optional[Item]:
    """Resolve a stored index; -1 and out-of-range values mean "no item"."""
    items = all_items()
    if 0 <= index < len(items):
        return items[index]
    return None

def item_index(item: Optional[Item]) -> int:
    return -1 if item is None else item.index

def find_item(name: str) -> Optional[Item]:
    for it in all_items():
        if it.name == name:
            return it
    return None

def items_fitting(slots_available: int) -> list[Item]:
    return [it for it in all_items() if it.slots <= slots_available]

__all__ = ["Item","all_items","catalog_size","get_item","item_or_none","item_index","find_item","items_fitting"]
