"""Computer opponent: attack the nearest legal target, otherwise step toward the nearest enemy.

Ties always go to the enemy that comes first in the enemy team's position
list, so a given board state always produces the same choice.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, List, Optional
from warband.core.types import other_team
from .core import BattleCore, CombatResult
from .field import Battlefield
from .models import Position
from . import mechanics

@dataclass
class AIAction:
    unit_pos: Position
    kind: str  # "attack" | "move" | "wait"
    target: Optional[Position] = None
    result: Optional[CombatResult] = None

def choose_target(bf: Battlefield, pos: Position) -> Optional[Position]:
    attacker = bf.unit_at(*pos)
    if attacker is None:
        return None
    best: Optional[Position] = None
    best_dist = bf.width + bf.height
    for enemy in bf.positions(other_team(bf.team_at(*pos))):
        if mechanics.is_valid_attack_target(bf, attacker, pos.x, pos.y, enemy.x, enemy.y):
            d = mechanics.manhattan_distance(pos.x, pos.y, enemy.x, enemy.y)
            if d < best_dist:
                best_dist = d
                best = enemy
    return best

def find_closest_enemy(bf: Battlefield, team: int, x: int, y: int) -> Optional[Position]:
    closest: Optional[Position] = None
    min_dist = bf.width + bf.height
    for enemy in bf.positions(other_team(team)):
        d = mechanics.manhattan_distance(x, y, enemy.x, enemy.y)
        if d < min_dist:
            min_dist = d
            closest = enemy
    return closest

def _sign(v: int) -> int:
    return (v > 0) - (v < 0)

def step_toward(pos: Position, target: Position) -> List[Position]:
    """Candidate single-square steps: along x first, then along y."""
    dx = _sign(target.x - pos.x)
    dy = _sign(target.y - pos.y)
    steps = []
    if dx:
        steps.append(Position(pos.x + dx, pos.y))
    if dy:
        steps.append(Position(pos.x, pos.y + dy))
    return steps

def move_towards_target(core: BattleCore, bf: Battlefield, pos: Position, target: Position) -> Optional[Position]:
    if pos == target:
        return None
    for nxt in step_toward(pos, target):
        if mechanics.is_valid_move(bf, pos.x, pos.y, nxt.x, nxt.y):
            core.move(bf, pos, nxt)
            return nxt
    return None

def act(core: BattleCore, bf: Battlefield, pos: Position) -> AIAction:
    """Let the unit at ``pos`` take its single action for this round."""
    target = choose_target(bf, pos)
    if target is not None:
        return AIAction(pos, "attack", target, core.perform_combat(bf, pos, target))
    closest = find_closest_enemy(bf, bf.team_at(*pos), pos.x, pos.y)
    if closest is not None:
        moved = move_towards_target(core, bf, pos, closest)
        if moved is not None:
            return AIAction(pos, "move", moved)
    return AIAction(pos, "wait")

def take_turn(core: BattleCore, bf: Battlefield, team: int, after_each: Optional[Callable[[AIAction], None]] = None) -> List[AIAction]:
    """Every unit of ``team`` acts once, in position-list order."""
    actions: List[AIAction] = []
    i = 0
    # the list is re-read each step since combat can reshape it
    while i < bf.count(team):
        if bf.count(other_team(team)) == 0:
            break
        pos = bf.positions(team)[i]
        action = act(core, bf, pos)
        actions.append(action)
        if after_each:
            after_each(action)
        i += 1
    return actions

__all__ = ["AIAction","choose_target","find_closest_enemy","move_towards_target","act","take_turn"]
