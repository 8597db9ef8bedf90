from warband.battle import ai, mechanics
from warband.battle.core import BattleCore
from warband.battle.field import Battlefield
from warband.battle.models import Position, Unit
from warband.data.items import find_item


def quiet_core():
    return BattleCore(message_cb=lambda _m: None)


def unit(item, name="u"):
    return Unit(name, find_item(item))


def test_tie_goes_to_first_enemy_in_list():
    bf = Battlefield()
    bf.place(unit("Bow", "archer"), 1, 2, 2)
    bf.place(unit("Sword", "south"), 2, 2, 4)
    bf.place(unit("Sword", "east"), 2, 4, 2)
    assert ai.choose_target(bf, Position(2, 2)) == Position(2, 4)


def test_closer_target_wins_regardless_of_order():
    bf = Battlefield()
    bf.place(unit("Bow", "archer"), 1, 2, 2)
    bf.place(unit("Sword", "far"), 2, 2, 5)
    bf.place(unit("Sword", "near"), 2, 3, 2)
    assert ai.choose_target(bf, Position(2, 2)) == Position(3, 2)


def test_attacks_when_in_range():
    bf = Battlefield()
    bf.place(unit("Sword", "k"), 1, 0, 0)
    target = unit("Staff", "m")
    bf.place(target, 2, 1, 0)
    action = ai.act(quiet_core(), bf, Position(0, 0))
    assert action.kind == "attack"
    assert target.hp == 95


def test_steps_one_square_x_first():
    bf = Battlefield()
    bf.place(unit("Sword", "k"), 1, 0, 0)
    bf.place(unit("Sword", "e"), 2, 5, 3)
    action = ai.act(quiet_core(), bf, Position(0, 0))
    assert action.kind == "move"
    assert bf.positions(1) == [Position(1, 0)]


def test_blocked_x_step_falls_back_to_y():
    bf = Battlefield()
    bf.place(unit("Sword", "k"), 1, 0, 0)
    bf.place(unit("Shield", "wall"), 1, 1, 0)
    bf.place(unit("Sword", "e"), 2, 5, 3)
    ai.act(quiet_core(), bf, Position(0, 0))
    assert bf.positions(1) == [Position(0, 1), Position(1, 0)]


def test_waits_when_fully_blocked():
    bf = Battlefield()
    bf.place(unit("Sword", "k"), 1, 0, 0)
    bf.place(unit("Shield", "w1"), 1, 1, 0)
    bf.place(unit("Shield", "w2"), 1, 0, 1)
    bf.place(unit("Sword", "e"), 2, 5, 3)
    action = ai.act(quiet_core(), bf, Position(0, 0))
    assert action.kind == "wait"
    assert bf.unit_at(0, 0).name == "k"


def test_turn_never_increases_distance():
    bf = Battlefield()
    for i in range(3):
        bf.place(unit("Sword", f"a{i}"), 1, 0, i * 2)
    for i in range(3):
        bf.place(unit("Sword", f"b{i}"), 2, 9, i * 3)
    core = quiet_core()
    for _ in range(6):
        before = {}
        for p in bf.positions(1):
            e = ai.find_closest_enemy(bf, 1, p.x, p.y)
            before[id(bf.unit_at(*p))] = mechanics.manhattan_distance(p.x, p.y, e.x, e.y)
        actions = ai.take_turn(core, bf, 1)
        assert len(actions) == 3
        for p in bf.positions(1):
            e = ai.find_closest_enemy(bf, 1, p.x, p.y)
            assert mechanics.manhattan_distance(p.x, p.y, e.x, e.y) <= before[id(bf.unit_at(*p))]
        occupied = [p for p, _ in bf.occupied()]
        assert len(occupied) == len(set(occupied)) == 6


def test_take_turn_stops_when_enemies_are_gone():
    bf = Battlefield()
    bf.place(unit("Greatsword", "a"), 1, 0, 0)
    bf.place(unit("Greatsword", "b"), 1, 0, 2)
    bf.place(Unit("last", find_item("Dagger"), hp=1), 2, 0, 1)
    calls = []
    actions = ai.take_turn(quiet_core(), bf, 1, after_each=calls.append)
    assert [a.kind for a in actions] == ["attack"]
    assert calls == actions
    assert bf.count(2) == 0
