"""
Battle system package.
- models.py (Unit, Position)
- field.py (grid and per-team position lists)
- mechanics.py (distances, legality, damage, area reach)
- core.py (combat resolution)
- turn.py (player turn state machine)
- ai.py (computer opponent)
- session.py (rounds and outcome)
"""
from .session import BattleSession, Outcome, ControllerKind
__all__ = ["BattleSession","Outcome","ControllerKind"]
