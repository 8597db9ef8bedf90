from warband.battle.field import Battlefield
from warband.battle.models import Position, Unit
from warband.battle.roster import PositionList
from warband.data.items import find_item


def make(name="u"):
    return Unit(name, find_item("Sword"))


def test_position_list_order_and_capacity():
    pl = PositionList(3)
    assert pl.append(Position(0, 0))
    assert pl.append(Position(1, 1))
    assert not pl.append(Position(1, 1))  # duplicate
    assert pl.append(Position(2, 2))
    assert not pl.append(Position(3, 3))  # full
    assert pl.remove(Position(0, 0))
    assert pl.as_list() == [Position(1, 1), Position(2, 2)]
    assert pl.replace(Position(1, 1), Position(5, 5))
    assert pl.as_list() == [Position(5, 5), Position(2, 2)]
    assert not pl.remove(Position(9, 9))


def test_valid_positions():
    bf = Battlefield()
    assert bf.width == 10 and bf.height == 10
    for y in range(-1, 11):
        for x in range(-1, 11):
            assert bf.is_valid_position(x, y) == (0 <= x < 10 and 0 <= y < 10)
    assert Battlefield(20, 3).width == 10


def test_place_updates_grid_and_list():
    bf = Battlefield()
    u = make()
    assert bf.place(u, 1, 3, 4)
    assert bf.unit_at(3, 4) is u
    assert bf.team_at(3, 4) == 1
    assert bf.positions(1) == [Position(3, 4)]
    assert bf.count(2) == 0


def test_place_rejections():
    bf = Battlefield()
    assert not bf.place(make(), 1, 10, 0)
    u = make()
    assert bf.place(u, 1, 0, 0)
    assert not bf.place(make(), 2, 0, 0)  # occupied
    assert not bf.place(u, 1, 1, 1)  # already on the field
    for i in range(1, 5):
        assert bf.place(make(f"u{i}"), 1, i, 0)
    extra = make("extra")
    assert not bf.place(extra, 1, 9, 9)  # sixth unit
    assert bf.count(1) == 5
    assert bf.unit_at(9, 9) is None


def test_remove_keeps_order():
    bf = Battlefield()
    for i in range(4):
        bf.place(make(f"u{i}"), 2, i, 0)
    assert bf.remove(1, 0)
    assert bf.positions(2) == [Position(0, 0), Position(2, 0), Position(3, 0)]
    assert bf.is_empty(1, 0)
    assert not bf.remove(1, 0)
    assert not bf.remove(-1, 0)


def test_move_replaces_in_place():
    bf = Battlefield()
    for i in range(3):
        bf.place(make(f"u{i}"), 1, 0, i * 2)
    mover = bf.unit_at(0, 2)
    assert bf.move(0, 2, 2, 2)
    assert bf.positions(1) == [Position(0, 0), Position(2, 2), Position(0, 4)]
    assert bf.unit_at(2, 2) is mover
    assert bf.is_empty(0, 2)


def test_move_rejections():
    bf = Battlefield()
    bf.place(make("a"), 1, 0, 0)
    bf.place(make("b"), 2, 1, 0)
    assert not bf.move(0, 0, 1, 0)  # occupied
    assert not bf.move(0, 0, 2, 1)  # distance 3
    assert not bf.move(5, 5, 5, 6)  # empty source
    assert not bf.move(0, 0, -1, 0)
    assert bf.positions(1) == [Position(0, 0)]


def test_deploy_uses_home_edges():
    bf = Battlefield()
    army1 = [make(f"a{i}") for i in range(3)]
    army2 = [make(f"b{i}") for i in range(2)]
    assert bf.deploy(army1, 1) == 3
    assert bf.deploy(army2, 2) == 2
    assert bf.positions(1) == [Position(0, 0), Position(0, 2), Position(0, 4)]
    assert bf.positions(2) == [Position(9, 0), Position(9, 2)]
    assert bf.units(2) == army2
