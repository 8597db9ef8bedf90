"""
Vertical menu navigation rendered with Rich.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence
from warband.ui.keys import read_key, Key, KeyEvent

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.align import Align
from rich.box import ROUNDED

# Global Rich console for menus and the battle screen
menu_console = Console()

MENU_COLOR = "bright_cyan"

@dataclass
class MenuItem:
    label: str
    value: str
    disabled: bool = False
    help_text: Optional[str] = None

class Menu:
    def __init__(
        self,
        title: str,
        items: Sequence[MenuItem],
        allow_escape: bool = True,
        footer: str | None = "↑/↓ or W/S to move • Enter to select • Esc to cancel",
        before_render: Optional[Callable[[], None]] = None,
        key_source: Callable[[], KeyEvent] = read_key,
        console: Console = menu_console,
    ):
        self.title = title
        self.items = list(items)
        self.allow_escape = allow_escape
        self.footer = footer
        self.index = 0
        self.before_render = before_render
        self.key_source = key_source
        self.console = console
        # Make sure starting selection isn't disabled
        if self.items and self.items[self.index].disabled:
            self._advance(1)

    def _advance(self, delta: int):
        if not self.items:
            return
        attempts = 0
        n = len(self.items)
        while attempts < n:
            self.index = (self.index + delta) % n
            if not self.items[self.index].disabled:
                return
            attempts += 1

    def _render(self):
        self.console.clear()
        # Optional hook to render extra UI (e.g. the battlefield) above the menu
        if self.before_render:
            self.before_render()
        table = Table(
            title=f"[bold {MENU_COLOR}]{self.title}[/bold {MENU_COLOR}]",
            box=ROUNDED,
            show_header=False,
            width=48,
        )
        table.add_column("Option", justify="left")
        for i, item in enumerate(self.items):
            prefix = f"[{MENU_COLOR}]►[/{MENU_COLOR}] " if i == self.index else "  "
            if item.disabled:
                table.add_row(f"{prefix}[dim][X] {item.label}[/dim]")
            elif i == self.index:
                table.add_row(f"{prefix}[{MENU_COLOR}]{item.label}[/{MENU_COLOR}]")
            else:
                table.add_row(f"{prefix}[bright_white]{item.label}[/bright_white]")
        self.console.print(Align.center(table))
        cur = self.items[self.index] if self.items else None
        if cur and cur.help_text:
            self.console.print(Panel(cur.help_text, box=ROUNDED, title=f"[bold {MENU_COLOR}]Info[/bold {MENU_COLOR}]"))
        if self.footer:
            self.console.print(Panel(self.footer, style="dim", box=ROUNDED))

    def run(self) -> Optional[str]:
        if not any(not it.disabled for it in self.items):
            return None
        while True:
            self._render()
            ev = self.key_source()
            if ev.key == Key.UP:
                self._advance(-1)
            elif ev.key == Key.DOWN:
                self._advance(1)
            elif ev.key == Key.ENTER:
                return self.items[self.index].value
            elif ev.key in (Key.ESC, Key.QUIT) and self.allow_escape:
                return None
            # ignore others

def select_menu(
    title: str,
    options: List[tuple[str, str]],
    footer: str | None = None,
    **kwargs,
) -> str | None:
    items = [MenuItem(label=o[0], value=o[1]) for o in options]
    if footer is None:
        footer = "↑/↓ or W/S to move • Enter to select • Esc to go back"
    return Menu(title, items, allow_escape=True, footer=footer, **kwargs).run()
