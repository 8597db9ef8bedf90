"""Turn / action state machine for player-controlled turns.

Phases and the events that move between them are an explicit table; any
(phase, event) pair that is not listed is rejected and leaves the state as
it was. The controller layers the game rules on top: it checks legality
before firing an event, so a rejected selection never consumes the turn.

Flow::

    UNIT_SELECT -> ACTION_SELECT -> MOVE_TARGET / ATTACK_TARGET -> RESULT
    RESULT -> UNIT_SELECT (other team) | ACTION_SELECT (same unit, after a move) | GAME_OVER
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional, Tuple
from warband.core.logging import logger
from warband.core.types import other_team, TEAMS
from .core import BattleCore, CombatResult
from .field import Battlefield
from .models import Position, Unit
from . import mechanics

class Phase(Enum):
    UNIT_SELECT = auto()
    ACTION_SELECT = auto()
    MOVE_TARGET = auto()
    ATTACK_TARGET = auto()
    RESULT = auto()
    GAME_OVER = auto()

class Event(Enum):
    SELECT_UNIT = auto()
    CHOOSE_MOVE = auto()
    CHOOSE_ATTACK = auto()
    CHOOSE_SPECIAL = auto()
    END_TURN = auto()
    TARGET_CONFIRMED = auto()
    CANCEL = auto()      # drop the selection
    BACK = auto()        # return to the locked unit's action menu
    CONTINUE = auto()    # same unit may still act
    NEXT_TURN = auto()
    FINISH = auto()

TRANSITIONS: Dict[Tuple[Phase, Event], Phase] = {
    (Phase.UNIT_SELECT, Event.SELECT_UNIT): Phase.ACTION_SELECT,
    # turns played by the computer never leave UNIT_SELECT
    (Phase.UNIT_SELECT, Event.NEXT_TURN): Phase.UNIT_SELECT,
    (Phase.UNIT_SELECT, Event.FINISH): Phase.GAME_OVER,
    (Phase.ACTION_SELECT, Event.CHOOSE_MOVE): Phase.MOVE_TARGET,
    (Phase.ACTION_SELECT, Event.CHOOSE_ATTACK): Phase.ATTACK_TARGET,
    (Phase.ACTION_SELECT, Event.CHOOSE_SPECIAL): Phase.RESULT,
    (Phase.ACTION_SELECT, Event.END_TURN): Phase.UNIT_SELECT,
    (Phase.ACTION_SELECT, Event.CANCEL): Phase.UNIT_SELECT,
    (Phase.MOVE_TARGET, Event.TARGET_CONFIRMED): Phase.RESULT,
    (Phase.MOVE_TARGET, Event.CANCEL): Phase.UNIT_SELECT,
    (Phase.MOVE_TARGET, Event.BACK): Phase.ACTION_SELECT,
    (Phase.ATTACK_TARGET, Event.TARGET_CONFIRMED): Phase.RESULT,
    (Phase.ATTACK_TARGET, Event.CANCEL): Phase.UNIT_SELECT,
    (Phase.ATTACK_TARGET, Event.BACK): Phase.ACTION_SELECT,
    (Phase.RESULT, Event.CONTINUE): Phase.ACTION_SELECT,
    (Phase.RESULT, Event.NEXT_TURN): Phase.UNIT_SELECT,
    (Phase.RESULT, Event.FINISH): Phase.GAME_OVER,
}

def next_phase(phase: Phase, event: Event) -> Optional[Phase]:
    return TRANSITIONS.get((phase, event))

class Action(Enum):
    MOVE = "move"
    ATTACK = "attack"
    SPECIAL = "special"
    END_TURN = "end_turn"

class Intent(Enum):
    """Abstract input events produced by the input collaborator."""
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    CONFIRM = auto()
    CANCEL = auto()
    SAVE = auto()
    QUIT = auto()

_CURSOR_DELTAS = {
    Intent.UP: (0, -1),
    Intent.DOWN: (0, 1),
    Intent.LEFT: (-1, 0),
    Intent.RIGHT: (1, 0),
}

@dataclass
class ActionResult:
    ok: bool
    message: str = ""
    combat: List[CombatResult] = field(default_factory=list)
    turn_ended: bool = False

@dataclass
class TurnState:
    active_team: int = 1
    phase: Phase = Phase.UNIT_SELECT
    selected: Optional[Position] = None
    has_moved: bool = False
    has_attacked: bool = False
    cursor: Position = Position(0, 0)

    def reset_for(self, team: int):
        self.active_team = team
        self.selected = None
        self.has_moved = False
        self.has_attacked = False
        self.phase = Phase.UNIT_SELECT

class TurnController:
    def __init__(self, bf: Battlefield, core: Optional[BattleCore] = None, *, first_team: int = 1, move_then_attack: bool = True):
        if first_team not in TEAMS:
            first_team = 1
        self.bf = bf
        self.core = core or BattleCore()
        self.move_then_attack = move_then_attack
        self.state = TurnState(active_team=first_team)
        self.turns_taken = 0

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------
    @property
    def phase(self) -> Phase:
        return self.state.phase

    def fire(self, event: Event) -> bool:
        nxt = next_phase(self.state.phase, event)
        if nxt is None:
            logger.debug("TransitionRejected", phase=self.state.phase.name, trigger=event.name)
            return False
        self.state.phase = nxt
        return True

    def selected_unit(self) -> Optional[Unit]:
        sel = self.state.selected
        return self.bf.unit_at(*sel) if sel else None

    def is_over(self) -> bool:
        return any(self.bf.count(t) == 0 for t in TEAMS)

    def _locked(self) -> bool:
        # a unit that already moved keeps the selection until the turn ends
        return self.state.selected is not None and (self.state.has_moved or self.state.has_attacked)

    def available_actions(self) -> List[Action]:
        unit = self.selected_unit()
        if unit is None:
            return []
        acts: List[Action] = []
        if not self.state.has_moved:
            acts.append(Action.MOVE)
        if not self.state.has_attacked:
            acts.append(Action.ATTACK)
            if mechanics.has_special_ability(unit):
                acts.append(Action.SPECIAL)
        acts.append(Action.END_TURN)
        return acts

    # ------------------------------------------------------------------
    # Player operations
    # ------------------------------------------------------------------
    def select_unit(self, pos: Position) -> ActionResult:
        if self.state.phase is not Phase.UNIT_SELECT:
            return ActionResult(False, "Finish the current action first.")
        pos = Position(*pos)
        unit = self.bf.unit_at(*pos)
        if unit is None or self.bf.team_at(*pos) != self.state.active_team:
            return ActionResult(False, f"Select a unit of Army {self.state.active_team}.")
        self.state.selected = pos
        self.fire(Event.SELECT_UNIT)
        return ActionResult(True, f"{unit.name} selected")

    def choose_action(self, action: Action) -> ActionResult:
        if self.state.phase is not Phase.ACTION_SELECT:
            return ActionResult(False, "No unit is waiting for orders.")
        unit = self.selected_unit()
        assert unit is not None and self.state.selected is not None
        if action not in self.available_actions():
            return ActionResult(False, f"{action.value.replace('_', ' ').title()} is not available for {unit.name}.")
        if action is Action.END_TURN:
            self.fire(Event.END_TURN)
            self._pass_turn()
            return ActionResult(True, f"Turn ended. Army {self.state.active_team}'s turn", turn_ended=True)
        if action is Action.MOVE:
            self.fire(Event.CHOOSE_MOVE)
            return ActionResult(True, f"Choose where to move {unit.name}")
        if action is Action.ATTACK:
            self.fire(Event.CHOOSE_ATTACK)
            return ActionResult(True, f"Choose target for {unit.name}")
        results = self.core.use_special_ability(self.bf, *self.state.selected)
        self.state.has_attacked = True
        self.fire(Event.CHOOSE_SPECIAL)
        return self._after_action(ActionResult(True, f"{unit.name} unleashes a special ability", results))

    def confirm_target(self, pos: Position) -> ActionResult:
        pos = Position(*pos)
        sel = self.state.selected
        unit = self.selected_unit()
        if self.state.phase is Phase.MOVE_TARGET and sel and unit:
            if not mechanics.is_valid_move(self.bf, sel.x, sel.y, pos.x, pos.y):
                return ActionResult(False, "Invalid move position!")
            self.core.move(self.bf, sel, pos)
            self.state.selected = pos
            self.state.has_moved = True
            self.fire(Event.TARGET_CONFIRMED)
            return self._after_action(ActionResult(True, f"{unit.name} moved"))
        if self.state.phase is Phase.ATTACK_TARGET and sel and unit:
            if not mechanics.is_valid_attack_target(self.bf, unit, sel.x, sel.y, pos.x, pos.y):
                return ActionResult(False, "Invalid attack target!")
            result = self.core.perform_combat(self.bf, sel, pos)
            self.state.has_attacked = True
            self.fire(Event.TARGET_CONFIRMED)
            return self._after_action(ActionResult(True, f"{unit.name} attacks", [result] if result else []))
        return ActionResult(False, "Nothing to target right now.")

    def cancel(self) -> ActionResult:
        phase = self.state.phase
        if phase in (Phase.MOVE_TARGET, Phase.ATTACK_TARGET) and self._locked():
            self.fire(Event.BACK)
            return ActionResult(True, "Back to action menu")
        if phase is Phase.ACTION_SELECT and self._locked():
            return ActionResult(False, "This unit already acted; finish with an action or End Turn.")
        if self.fire(Event.CANCEL):
            self.state.selected = None
            return ActionResult(True, "Selection cleared")
        return ActionResult(False)

    def complete_ai_turn(self) -> ActionResult:
        """Close a turn whose actions were taken outside the player phases (computer-controlled team)."""
        if self.is_over():
            return ActionResult(self.fire(Event.FINISH), "Battle over", turn_ended=True)
        if not self.fire(Event.NEXT_TURN):
            return ActionResult(False, "Finish the current action first.")
        self._pass_turn()
        return ActionResult(True, f"Turn ended. Army {self.state.active_team}'s turn", turn_ended=True)

    def _after_action(self, result: ActionResult) -> ActionResult:
        if self.is_over():
            self.fire(Event.FINISH)
            self.state.selected = None
            result.turn_ended = True
            return result
        if self.move_then_attack and self.state.has_moved and not self.state.has_attacked:
            self.fire(Event.CONTINUE)
            return result
        self.fire(Event.NEXT_TURN)
        self._pass_turn()
        result.turn_ended = True
        return result

    def _pass_turn(self):
        nxt = other_team(self.state.active_team)
        self.state.reset_for(nxt)
        self.turns_taken += 1
        logger.debug("TurnPassed", team=nxt, turns=self.turns_taken)

    # ------------------------------------------------------------------
    # Intent dispatch
    # ------------------------------------------------------------------
    def move_cursor(self, dx: int, dy: int) -> Position:
        c = self.state.cursor
        nx = min(max(c.x + dx, 0), self.bf.width - 1)
        ny = min(max(c.y + dy, 0), self.bf.height - 1)
        self.state.cursor = Position(nx, ny)
        return self.state.cursor

    def handle(self, intent: Intent) -> ActionResult:
        """Feed one abstract input event. Save / quit belong to the session, not here."""
        if intent in _CURSOR_DELTAS:
            self.move_cursor(*_CURSOR_DELTAS[intent])
            return ActionResult(True)
        if intent is Intent.CANCEL:
            return self.cancel()
        if intent is Intent.CONFIRM:
            if self.state.phase is Phase.UNIT_SELECT:
                return self.select_unit(self.state.cursor)
            if self.state.phase in (Phase.MOVE_TARGET, Phase.ATTACK_TARGET):
                return self.confirm_target(self.state.cursor)
        return ActionResult(False)

__all__ = ["Phase","Event","TRANSITIONS","next_phase","Action","Intent","ActionResult","TurnState","TurnController"]
