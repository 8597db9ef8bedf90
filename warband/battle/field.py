"""Battlefield grid: cells, per-team position lists and placement operations.

The grid is indexed ``cells[y][x]``. Each team's :class:`PositionList` is a
denormalized index over the grid and is updated by every place / remove /
move so that ``count(team) == len(positions(team)) ==`` the number of cells
tagged with that team.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple
from warband.core.types import TEAMS
from .models import Position, Unit
from .roster import PositionList, MAX_UNITS
from . import mechanics

MAX_GRID_WIDTH = 10
MAX_GRID_HEIGHT = 10

@dataclass
class GridCell:
    unit: Optional[Unit] = None
    team: int = 0  # 0 = empty, else 1 or 2

    def is_empty(self) -> bool:
        return self.unit is None

class Battlefield:
    def __init__(self, width: int = MAX_GRID_WIDTH, height: int = MAX_GRID_HEIGHT):
        # capped at 10x10
        self.width = max(1, min(int(width), MAX_GRID_WIDTH))
        self.height = max(1, min(int(height), MAX_GRID_HEIGHT))
        self.cells: List[List[GridCell]] = [[GridCell() for _ in range(self.width)] for _ in range(self.height)]
        self._positions: Dict[int, PositionList] = {t: PositionList(MAX_UNITS) for t in TEAMS}

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def is_valid_position(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell(self, x: int, y: int) -> Optional[GridCell]:
        if not self.is_valid_position(x, y):
            return None
        return self.cells[y][x]

    def unit_at(self, x: int, y: int) -> Optional[Unit]:
        c = self.cell(x, y)
        return c.unit if c else None

    def team_at(self, x: int, y: int) -> int:
        c = self.cell(x, y)
        return c.team if c else 0

    def is_empty(self, x: int, y: int) -> bool:
        c = self.cell(x, y)
        return c is not None and c.is_empty()

    def positions(self, team: int) -> List[Position]:
        return self._positions[team].as_list()

    def count(self, team: int) -> int:
        return len(self._positions[team])

    def units(self, team: int) -> List[Unit]:
        out = []
        for p in self._positions[team]:
            u = self.cells[p.y][p.x].unit
            if u is not None:
                out.append(u)
        return out

    def find_unit(self, unit: Unit) -> Optional[Tuple[int, Position]]:
        for team in TEAMS:
            for p in self._positions[team]:
                if self.cells[p.y][p.x].unit is unit:
                    return team, p
        return None

    def occupied(self) -> Iterator[Tuple[Position, GridCell]]:
        for y, row in enumerate(self.cells):
            for x, c in enumerate(row):
                if not c.is_empty():
                    yield Position(x, y), c

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def place(self, unit: Unit, team: int, x: int, y: int) -> bool:
        if not self.is_valid_position(x, y):
            return False
        if team not in self._positions:
            return False
        roster = self._positions[team]
        if roster.is_full():
            return False
        c = self.cells[y][x]
        if not c.is_empty() or self.find_unit(unit) is not None:
            return False
        c.unit = unit
        c.team = team
        roster.append(Position(x, y))
        return True

    def remove(self, x: int, y: int) -> bool:
        if not self.is_valid_position(x, y):
            return False
        c = self.cells[y][x]
        if c.is_empty():
            return False
        self._positions[c.team].remove(Position(x, y))
        c.unit = None
        c.team = 0
        return True

    def move(self, from_x: int, from_y: int, to_x: int, to_y: int) -> bool:
        if not self.is_valid_position(from_x, from_y):
            return False
        src = self.cells[from_y][from_x]
        if src.is_empty():
            return False
        if not mechanics.is_valid_move(self, from_x, from_y, to_x, to_y):
            return False
        self._positions[src.team].replace(Position(from_x, from_y), Position(to_x, to_y))
        dst = self.cells[to_y][to_x]
        dst.unit, dst.team = src.unit, src.team
        src.unit, src.team = None, 0
        return True

    def deploy(self, army: List[Unit], team: int) -> int:
        """Place an army on its home edge: team 1 at x=0, team 2 at the far column, every other row."""
        x = 0 if team == 1 else self.width - 1
        placed = 0
        for i, unit in enumerate(army):
            if self.place(unit, team, x, i * 2):
                placed += 1
        return placed
