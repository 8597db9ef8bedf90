"""Pure combat rules: distances, move/attack legality, damage and area reach.

Nothing in here mutates the battlefield.
"""
from __future__ import annotations
from typing import TYPE_CHECKING, List, Optional
from warband.data.items import Item
from .models import Position, Unit

if TYPE_CHECKING:
    from .field import Battlefield

MOVE_BUDGET = 2
MIN_DAMAGE = 1

def manhattan_distance(x1: int, y1: int, x2: int, y2: int) -> int:
    return abs(x1 - x2) + abs(y1 - y2)

def is_valid_move(bf: 'Battlefield', from_x: int, from_y: int, to_x: int, to_y: int) -> bool:
    if not bf.is_valid_position(to_x, to_y):
        return False
    if bf.unit_at(to_x, to_y) is not None:
        return False
    return manhattan_distance(from_x, from_y, to_x, to_y) <= MOVE_BUDGET

def effective_range(unit: Unit) -> int:
    rng = unit.item1.range
    if unit.item2 and unit.item2.range > rng:
        rng = unit.item2.range
    return rng

def is_valid_attack_target(bf: 'Battlefield', attacker: Unit, x1: int, y1: int, x2: int, y2: int) -> bool:
    if not bf.is_valid_position(x2, y2):
        return False
    target = bf.unit_at(x2, y2)
    if target is None or bf.team_at(x2, y2) == bf.team_at(x1, y1):
        return False
    return manhattan_distance(x1, y1, x2, y2) <= effective_range(attacker)

def attack_power(unit: Unit) -> int:
    return unit.item1.att + (unit.item2.att if unit.item2 else 0)

def defense_power(unit: Unit) -> int:
    return unit.item1.defense + (unit.item2.defense if unit.item2 else 0)

def calculate_damage(attacker: Unit, defender: Unit) -> int:
    return max(MIN_DAMAGE, attack_power(attacker) - defense_power(defender))

def special_item(unit: Unit) -> Optional[Item]:
    # slot 1 wins when both items carry an area ability
    if unit.item1.radius > 0:
        return unit.item1
    if unit.item2 and unit.item2.radius > 0:
        return unit.item2
    return None

def has_special_ability(unit: Unit) -> bool:
    return special_item(unit) is not None

def area_cells(bf: 'Battlefield', x: int, y: int, radius: int) -> List[Position]:
    """In-bounds cells of the square blast around (x, y), row by row."""
    cells: List[Position] = []
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            tx, ty = x + dx, y + dy
            if bf.is_valid_position(tx, ty):
                cells.append(Position(tx, ty))
    return cells

def area_targets(bf: 'Battlefield', unit: Unit, x: int, y: int) -> List[Position]:
    item = special_item(unit)
    if item is None:
        return []
    team = bf.team_at(x, y)
    return [p for p in area_cells(bf, x, y, item.radius)
            if bf.unit_at(p.x, p.y) is not None and bf.team_at(p.x, p.y) != team]

def valid_moves(bf: 'Battlefield', x: int, y: int) -> List[Position]:
    out: List[Position] = []
    for ty in range(bf.height):
        for tx in range(bf.width):
            if (tx, ty) != (x, y) and is_valid_move(bf, x, y, tx, ty):
                out.append(Position(tx, ty))
    return out

def attack_range(bf: 'Battlefield', unit: Unit, x: int, y: int) -> List[Position]:
    """Every in-bounds cell within the unit's reach, occupied or not."""
    reach = effective_range(unit)
    out: List[Position] = []
    for ty in range(bf.height):
        for tx in range(bf.width):
            if (tx, ty) != (x, y) and manhattan_distance(x, y, tx, ty) <= reach:
                out.append(Position(tx, ty))
    return out
