"""Combat resolution on top of the pure rules in :mod:`warband.battle.mechanics`.

BattleCore applies damage, removes defeated units and reports what happened
through ``message_cb`` (falls back to ``print``). Each call completes all of its
grid and health changes before returning.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, List, Optional
from warband.core.logging import logger
from .field import Battlefield
from .models import Position, Unit
from . import mechanics

@dataclass
class CombatResult:
    attacker: Unit
    target: Unit
    target_pos: Position
    damage: int
    target_hp: int
    defeated: bool
    area: bool = False

class BattleCore:
    def __init__(self, message_cb: Optional[Callable[[str], None]] = None):
        self.message_cb = message_cb
        # Optional callback for the renderer to observe HP changes
        self.hp_change_cb: Optional[Callable[[Unit, int, int], None]] = None

    def _msg(self, text: str):
        if self.message_cb: self.message_cb(text)
        else: print(text)

    def _notify_hp_change(self, target: Unit, old_hp: int, new_hp: int):
        cb = self.hp_change_cb
        if cb:
            cb(target, old_hp, new_hp)

    # ------------------------------------------------------------------
    # Damage
    # ------------------------------------------------------------------
    def _hit(self, bf: Battlefield, attacker: Unit, pos: Position, *, area: bool) -> CombatResult:
        target = bf.unit_at(pos.x, pos.y)
        assert target is not None
        team = bf.team_at(pos.x, pos.y)
        damage = mechanics.calculate_damage(attacker, target)
        old = target.hp
        target.hp -= damage
        self._notify_hp_change(target, old, target.hp)
        if area:
            self._msg(f"{attacker.name} hits {target.name} for {damage} area damage!")
        else:
            self._msg(f"{attacker.name} hits {target.name} for {damage} damage! {target.name} HP: {target.hp}")
        logger.debug("UnitHit", attacker=attacker.name, target=target.name, damage=damage, hp=target.hp, area=area)
        defeated = target.hp <= 0
        if defeated:
            self._msg(f"{target.name} has been defeated!")
            bf.remove(pos.x, pos.y)
            logger.info("UnitDefeated", unit=target.name, team=team, remaining=bf.count(team))
        return CombatResult(attacker, target, pos, damage, target.hp, defeated, area)

    def perform_combat(self, bf: Battlefield, att_pos: Position, target_pos: Position) -> Optional[CombatResult]:
        """Resolve a single attack. Returns None (and changes nothing) if the target is not legal."""
        attacker = bf.unit_at(*att_pos)
        if attacker is None:
            return None
        if not mechanics.is_valid_attack_target(bf, attacker, att_pos.x, att_pos.y, target_pos.x, target_pos.y):
            return None
        return self._hit(bf, attacker, Position(*target_pos), area=False)

    def use_special_ability(self, bf: Battlefield, x: int, y: int) -> List[CombatResult]:
        """Hit every enemy inside the caster's square blast; each target resolves independently."""
        unit = bf.unit_at(x, y)
        if unit is None or not mechanics.has_special_ability(unit):
            return []
        item = mechanics.special_item(unit)
        assert item is not None
        results: List[CombatResult] = []
        team = bf.team_at(x, y)
        for p in mechanics.area_cells(bf, x, y, item.radius):
            if bf.unit_at(p.x, p.y) is not None and bf.team_at(p.x, p.y) != team:
                results.append(self._hit(bf, unit, p, area=True))
        if not results:
            self._msg(f"{unit.name}'s {item.name} hits nothing.")
        return results

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------
    def move(self, bf: Battlefield, src: Position, dst: Position) -> bool:
        unit = bf.unit_at(*src)
        if unit is None or not bf.move(src.x, src.y, dst.x, dst.y):
            return False
        self._msg(f"{unit.name} moves to ({dst.x}, {dst.y})")
        logger.debug("UnitMoved", unit=unit.name, frm=f"{src.x},{src.y}", to=f"{dst.x},{dst.y}")
        return True

__all__ = ["BattleCore","CombatResult"]
