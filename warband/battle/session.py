"""Battle session orchestration: deployment, rounds, human/computer turns and outcome.

A round is one turn for each team, team 1 first unless a loaded save says
otherwise. Computer-controlled teams act through :mod:`warband.battle.ai`
(every unit acts once); human teams are driven by abstract intents through
:class:`TurnController`.
"""
from __future__ import annotations
import time
from typing import Callable, Dict, List, Literal, Optional, Protocol, Sequence
from warband.core.logging import logger
from warband.core.types import TEAMS
from . import ai
from .core import BattleCore
from .field import Battlefield
from .models import SavedBattle, Unit
from .turn import Action, ActionResult, Intent, Phase, TurnController

Outcome = Literal["TEAM1_WIN", "TEAM2_WIN", "DRAW", "ABANDONED", "ONGOING"]
ControllerKind = Literal["human", "ai"]

class Renderer(Protocol):
    def redraw(self, bf: Battlefield, turn: TurnController, messages: Sequence[str]) -> None: ...

class BattleSession:
    def __init__(
        self,
        army1: List[Unit],
        army2: List[Unit],
        *,
        controllers: Sequence[ControllerKind] = ("ai", "ai"),
        first_team: int = 1,
        core: Optional[BattleCore] = None,
        move_then_attack: bool = True,
        ai_delay: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
        on_message: Optional[Callable[[str], None]] = None,
    ):
        self.army1 = army1
        self.army2 = army2
        self.controllers: Dict[int, ControllerKind] = {1: controllers[0], 2: controllers[1]}
        self.bf = Battlefield()
        self.bf.deploy(army1, 1)
        self.bf.deploy(army2, 2)
        self.core = core or BattleCore()
        self.turn = TurnController(self.bf, self.core, first_team=first_team, move_then_attack=move_then_attack)
        self.first_team = self.turn.state.active_team
        self.rounds = 0
        self.log: List[str] = []
        self.abandoned = False
        self.ai_delay = ai_delay
        self._sleep = sleep
        self.on_message = on_message

        def _capture(msg: str):
            self.log.append(msg)
            if self.on_message:
                self.on_message(msg)
        self.core.message_cb = _capture

    @classmethod
    def from_saved(cls, saved: SavedBattle, **kwargs) -> "BattleSession":
        kwargs.setdefault("first_team", saved.active_team)
        return cls(saved.army1, saved.army2, **kwargs)

    def snapshot(self) -> SavedBattle:
        return SavedBattle(self.bf.units(1), self.bf.units(2), self.turn.state.active_team)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    def is_over(self) -> bool:
        return self.abandoned or any(self.bf.count(t) == 0 for t in TEAMS)

    def outcome(self) -> Outcome:
        if self.abandoned:
            return "ABANDONED"
        n1, n2 = self.bf.count(1), self.bf.count(2)
        if n1 > 0 and n2 == 0:
            return "TEAM1_WIN"
        if n2 > 0 and n1 == 0:
            return "TEAM2_WIN"
        if n1 == 0 and n2 == 0:
            return "DRAW"
        return "ONGOING"

    def final_outcome(self) -> Outcome:
        """Outcome once the loop has stopped: an undecided battle is a draw."""
        res = self.outcome()
        return "DRAW" if res == "ONGOING" else res

    def _say(self, msg: str):
        self.core._msg(msg)

    # ------------------------------------------------------------------
    # Computer turns
    # ------------------------------------------------------------------
    def run_ai_turn(self, team: int) -> List[ai.AIAction]:
        return ai.take_turn(self.core, self.bf, team, after_each=self._pace)

    def _pace(self, action: ai.AIAction):
        if self.ai_delay > 0 and action.kind != "wait":
            self._sleep(self.ai_delay)

    def step_round(self):
        """One turn per team, starting with whoever is active."""
        self.rounds += 1
        self._say(f"Round {self.rounds}")
        for _ in TEAMS:
            team = self.turn.state.active_team
            if not self.is_over():
                self.run_ai_turn(team)
            self.turn.complete_ai_turn()

    def run_auto(self, max_rounds: int = -1) -> Outcome:
        """Computer vs computer until one army is gone or the round budget (negative = unlimited) runs out."""
        logger.info("BattleStart", mode="auto", army1=self.bf.count(1), army2=self.bf.count(2), max_rounds=max_rounds)
        budget = max_rounds
        while not self.is_over() and budget != 0:
            self.step_round()
            if budget > 0:
                budget -= 1
        result = self.final_outcome()
        self._announce(result)
        return result

    # ------------------------------------------------------------------
    # Mixed / human play
    # ------------------------------------------------------------------
    def play(
        self,
        read_intent: Callable[[], Intent],
        choose_action: Callable[[TurnController], Optional[Action]],
        *,
        renderer: Optional[Renderer] = None,
        on_save: Optional[Callable[[SavedBattle], bool]] = None,
        max_rounds: int = -1,
    ) -> Outcome:
        """Drive turns for any mix of human and computer teams.

        ``read_intent`` supplies cursor/confirm/cancel/save/quit events for
        human teams; ``choose_action`` answers the action menu (None = cancel).
        """
        logger.info("BattleStart", mode="play", team1=self.controllers[1], team2=self.controllers[2])
        budget = max_rounds
        self._say(f"Army {self.turn.state.active_team}'s turn")
        while not self.is_over() and budget != 0:
            team = self.turn.state.active_team
            if renderer:
                renderer.redraw(self.bf, self.turn, self.log)
            if self.controllers[team] == "ai":
                self.run_ai_turn(team)
                res = self.complete_turn()
            elif self.turn.phase is Phase.ACTION_SELECT:
                action = choose_action(self.turn)
                res = self.turn.choose_action(action) if action else self.turn.cancel()
                self._report(res)
            else:
                intent = read_intent()
                if intent is Intent.QUIT:
                    self.abandoned = True
                    logger.info("BattleAbandoned", team=team)
                    break
                if intent is Intent.SAVE:
                    ok = on_save(self.snapshot()) if on_save else False
                    self._say("Game saved" if ok else "Save failed!")
                    continue
                res = self.turn.handle(intent)
                self._report(res)
            if res.turn_ended and self.turn.state.active_team == self.first_team:
                self.rounds += 1
                if budget > 0:
                    budget -= 1
            if res.turn_ended and not self.is_over():
                self._say(f"Army {self.turn.state.active_team}'s turn")
        if renderer:
            renderer.redraw(self.bf, self.turn, self.log)
        result = self.final_outcome()
        self._announce(result)
        return result

    def complete_turn(self) -> ActionResult:
        return self.turn.complete_ai_turn()

    def _report(self, res: ActionResult):
        if res.message and (not res.ok or not res.combat):
            self._say(res.message)

    def _announce(self, result: Outcome):
        if result == "TEAM1_WIN":
            self._say("Army 1 is victorious!")
        elif result == "TEAM2_WIN":
            self._say("Army 2 is victorious!")
        elif result == "DRAW":
            self._say("Battle ended in a draw!")
        logger.info("BattleEnd", outcome=result, rounds=self.rounds)

__all__ = ["BattleSession","Outcome","ControllerKind","Renderer"]
