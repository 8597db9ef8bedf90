from __future__ import annotations
from typing import List, Optional, Sequence
from rich.panel import Panel
from rich.box import DOUBLE
from warband.core.errors import SetupError, SetupErrorCode
from warband.core.logging import logger
from warband.system.settings import Settings
from warband.system.save import save_battle, load_battle, default_save_path, SavedBattle
from warband.data.items import Item, items_fitting
from warband.battle import BattleSession, ControllerKind
from warband.battle.factory import build_unit, check_army_size
from warband.battle.models import Unit, MAX_SLOTS
from warband.battle.turn import Action, TurnController
from warband.ui.keys import read_intent
from warband.ui.menu_nav import Menu, MenuItem, select_menu, menu_console as console
from warband.ui.render import BattleRenderer

ACTION_LABELS = {
    Action.MOVE: "Move",
    Action.ATTACK: "Attack",
    Action.SPECIAL: "Special",
    Action.END_TURN: "End Turn",
}

OUTCOME_TEXT = {
    "TEAM1_WIN": "ARMY 1 WINS!",
    "TEAM2_WIN": "ARMY 2 WINS!",
    "DRAW": "DRAW!",
    "ABANDONED": "Battle abandoned.",
}

def _pause():
    try:
        input("Press Enter to continue...")
    except EOFError:
        pass

# ---------------------------------------------------------------------------
# Army setup
# ---------------------------------------------------------------------------
def pick_item(title: str, slots_available: int, optional: bool) -> Optional[Item]:
    choices = items_fitting(slots_available)
    items = [MenuItem(label=f"{it.name:<15} {it.summary()}", value=str(it.index)) for it in choices]
    if optional:
        items.append(MenuItem(label="(none)", value="none"))
    value = Menu(title, items).run()
    if value is None or value == "none":
        return None
    return next(it for it in choices if str(it.index) == value)

def setup_unit(number: int) -> Unit:
    name = input(f"Enter name for unit {number}: ").strip() or f"Unit {number}"
    primary = pick_item(f"{name}: primary item", MAX_SLOTS, optional=False)
    if primary is None:
        raise SetupError(SetupErrorCode.ITEM_COUNT, "Must select primary item")
    slots_left = MAX_SLOTS - primary.slots
    secondary = pick_item(f"{name}: secondary item (optional)", slots_left, optional=True) if slots_left > 0 else None
    unit = build_unit(name, primary, secondary)
    console.print(f"Unit created: {unit.describe()}")
    return unit

def read_army(label: str) -> List[Unit]:
    console.print(Panel(f"Set up {label}", box=DOUBLE))
    raw = input("Enter unit count (1-5): ").strip()
    try:
        count = int(raw)
    except ValueError:
        raise SetupError(SetupErrorCode.UNIT_COUNT, f"not a number: '{raw}'") from None
    check_army_size(count)
    return [setup_unit(i + 1) for i in range(count)]

# ---------------------------------------------------------------------------
# Battle
# ---------------------------------------------------------------------------
def make_action_chooser(session: BattleSession, renderer: BattleRenderer):
    def choose(turn: TurnController) -> Optional[Action]:
        available = turn.available_actions()
        items = [MenuItem(label=ACTION_LABELS[a], value=a.value, disabled=a not in available) for a in Action]
        value = Menu(
            "ACTION",
            items,
            footer="↑/↓ to move • Enter to select • Esc to cancel",
            before_render=lambda: renderer.redraw(session.bf, turn, session.log),
        ).run()
        return Action(value) if value else None
    return choose

def run_battle(session: BattleSession, settings: Settings) -> str:
    renderer = BattleRenderer(console)
    save_path = default_save_path(settings.data.save_file)

    def on_save(saved: SavedBattle) -> bool:
        return save_battle(saved, save_path) is not None

    if all(kind == "ai" for kind in session.controllers.values()):
        session.on_message = lambda _msg: renderer.redraw(session.bf, session.turn, session.log)
        outcome = session.run_auto(settings.data.max_rounds)
    else:
        outcome = session.play(
            read_intent,
            make_action_chooser(session, renderer),
            renderer=renderer,
            on_save=on_save,
            max_rounds=settings.data.max_rounds,
        )
    console.print(Panel(OUTCOME_TEXT.get(outcome, outcome), box=DOUBLE, style="bold"))
    _pause()
    return outcome

def new_battle(settings: Settings, controllers: Sequence[ControllerKind]) -> Optional[str]:
    try:
        army1 = read_army("Army 1")
        army2 = read_army("Army 2")
    except SetupError as e:
        logger.warn("SetupFailed", code=int(e.code), detail=e.detail)
        console.print(f"[red]Setup failed ({int(e.code)}): {e.detail}[/red]")
        _pause()
        return None
    session = BattleSession(
        army1, army2,
        controllers=controllers,
        move_then_attack=settings.data.move_then_attack,
        ai_delay=settings.data.ai_delay,
    )
    return run_battle(session, settings)

def load_and_play(settings: Settings) -> Optional[str]:
    saved = load_battle(default_save_path(settings.data.save_file))
    if saved is None:
        console.print("[red]Load failed.[/red]")
        _pause()
        return None
    console.print("Game loaded!")
    session = BattleSession.from_saved(
        saved,
        controllers=("human", "human"),
        move_then_attack=settings.data.move_then_attack,
        ai_delay=settings.data.ai_delay,
    )
    return run_battle(session, settings)

def options_menu(settings: Settings):
    while True:
        d = settings.data
        choice = select_menu(
            "OPTIONS",
            [
                (f"Log Level [{d.log_level}]", "log_level"),
                (f"Move then Attack [{'ON' if d.move_then_attack else 'OFF'}]", "move_then_attack"),
                (f"AI Delay [{d.ai_delay:.1f}s]", "ai_delay"),
                ("Return", "return"),
            ],
        )
        if choice in (None, "return"):
            return
        if choice == "log_level":
            lvl = select_menu("LOG LEVEL", [(lv, lv) for lv in ("DEBUG","INFO","WARN","ERROR")])
            if lvl:
                settings.update(log_level=lvl)
                settings.apply_log_level()
        elif choice == "move_then_attack":
            settings.update(move_then_attack=not d.move_then_attack)
        elif choice == "ai_delay":
            settings.update(ai_delay=0.0 if d.ai_delay >= 1.0 else round(d.ai_delay + 0.3, 1))

def main_menu() -> str:
    choice = select_menu(
        "WARBAND",
        [
            ("AI Game", "ai"),
            ("Simple Game", "simple"),
            ("Versus AI", "versus"),
            ("Load Game", "load"),
            ("Options", "options"),
            ("Quit", "quit"),
        ],
    )
    # Esc returns None -> treat as Quit gracefully
    return choice or "quit"

def run():
    settings = Settings.load()
    settings.apply_log_level()
    while True:
        choice = main_menu()
        if choice == "ai":
            new_battle(settings, ("ai", "ai"))
        elif choice == "simple":
            new_battle(settings, ("human", "human"))
        elif choice == "versus":
            new_battle(settings, ("human", "ai"))
        elif choice == "load":
            load_and_play(settings)
        elif choice == "options":
            options_menu(settings)
        elif choice == "quit":
            console.print("Goodbye!")
            break
    settings.save()

if __name__ == "__main__":
    run()
