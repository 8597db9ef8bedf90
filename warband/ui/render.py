"""Terminal battle screen drawn with Rich.

The renderer only reads state: it is handed the battlefield and the turn
controller on every redraw and never keeps references between calls.
"""
from __future__ import annotations
from typing import Sequence, Set
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.columns import Columns
from rich.box import ROUNDED, SIMPLE
from warband.core.types import TEAMS, TEAM_COLORS_HEX, TEAM_GLYPHS, team_label
from warband.battle.field import Battlefield
from warband.battle.models import Position
from warband.battle.turn import Phase, TurnController
from warband.battle import mechanics

HINTS = {
    Phase.UNIT_SELECT: "Arrows/WASD: move cursor • Enter: select unit • P: save • Q: quit",
    Phase.ACTION_SELECT: "Choose an action for the selected unit",
    Phase.MOVE_TARGET: "Arrows/WASD: pick destination (green) • Enter: move • Esc: cancel",
    Phase.ATTACK_TARGET: "Arrows/WASD: pick target (red) • Enter: attack • Esc: cancel",
    Phase.RESULT: "Resolving...",
    Phase.GAME_OVER: "Battle over",
}

MESSAGE_LINES = 6

def _hp_style(hp: int) -> str:
    if hp > 60:
        return "green"
    if hp > 30:
        return "yellow"
    return "red"

class BattleRenderer:
    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def _highlights(self, bf: Battlefield, turn: TurnController) -> tuple[Set[Position], Set[Position]]:
        sel = turn.state.selected
        unit = turn.selected_unit()
        if sel is None or unit is None:
            return set(), set()
        if turn.phase is Phase.MOVE_TARGET:
            return set(mechanics.valid_moves(bf, sel.x, sel.y)), set()
        if turn.phase is Phase.ATTACK_TARGET:
            return set(), set(mechanics.attack_range(bf, unit, sel.x, sel.y))
        return set(), set()

    def grid(self, bf: Battlefield, turn: TurnController) -> Table:
        moves, reach = self._highlights(bf, turn)
        table = Table(box=SIMPLE, show_header=True, padding=(0, 1))
        table.add_column("")
        for x in range(bf.width):
            table.add_column(str(x), justify="center")
        cursor = turn.state.cursor
        for y in range(bf.height):
            row = [str(y)]
            for x in range(bf.width):
                p = Position(x, y)
                cell = bf.cells[y][x]
                if cell.unit is not None:
                    txt = Text(TEAM_GLYPHS[cell.team], style=f"bold {TEAM_COLORS_HEX[cell.team]}")
                else:
                    txt = Text("·", style="dim")
                if p in moves:
                    txt.stylize("on dark_green")
                if p in reach:
                    txt.stylize("on dark_red")
                if p == turn.state.selected:
                    txt.stylize("reverse green")
                if p == cursor:
                    txt.stylize("reverse yellow")
                row.append(txt)
            table.add_row(*row)
        return table

    def unit_list(self, bf: Battlefield, team: int) -> Panel:
        table = Table(box=None, show_header=False, padding=(0, 1))
        for p in bf.positions(team):
            u = bf.unit_at(*p)
            if u is None:
                continue
            items = u.item1.name + (f" + {u.item2.name}" if u.item2 else "")
            table.add_row(
                Text(u.name, style=TEAM_COLORS_HEX[team]),
                Text(f"{u.hp:>3} HP", style=_hp_style(u.hp)),
                Text(f"({p.x},{p.y})", style="dim"),
                Text(items, style="dim"),
            )
        return Panel(table, title=f"{team_label(team)} [{bf.count(team)}]", box=ROUNDED, border_style=TEAM_COLORS_HEX[team])

    def status(self, turn: TurnController) -> Text:
        unit = turn.selected_unit()
        line = Text(f"{team_label(turn.state.active_team)} to act", style=f"bold {TEAM_COLORS_HEX[turn.state.active_team]}")
        if unit is not None:
            line.append(f"  •  {unit.name}: ATK {mechanics.attack_power(unit)} DEF {mechanics.defense_power(unit)} "
                        f"RNG {mechanics.effective_range(unit)}")
            if mechanics.has_special_ability(unit):
                line.append("  [special]", style="magenta")
        return line

    def redraw(self, bf: Battlefield, turn: TurnController, messages: Sequence[str]) -> None:
        log = Text("\n".join(messages[-MESSAGE_LINES:]) or " ")
        body = Group(
            self.status(turn),
            Columns([self.grid(bf, turn), Group(*(self.unit_list(bf, t) for t in TEAMS))]),
            Panel(log, title="Battle Log", box=ROUNDED),
            Text(HINTS[turn.phase], style="dim"),
        )
        self.console.clear()
        self.console.print(body)
