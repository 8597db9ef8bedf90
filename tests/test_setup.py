import pytest
from warband.battle.factory import UnitSpec, build_army, build_unit, check_army_size, resolve_item
from warband.core.errors import SetupError, SetupErrorCode


def test_build_unit_by_name_or_index():
    u = build_unit("Ranger", "Bow", 0)
    assert u.item1.name == "Bow" and u.item2.name == "Sword"
    assert u.hp == 100 and u.slots_used == 2
    assert u.describe() == "Ranger with Bow and Sword"


def test_names_are_truncated():
    assert len(build_unit("x" * 150, "Sword").name) == 100


@pytest.mark.parametrize("count", [0, 6, -1])
def test_army_size_limits(count):
    with pytest.raises(SetupError) as e:
        check_army_size(count)
    assert e.value.code == SetupErrorCode.UNIT_COUNT == -1


def test_missing_primary_item():
    with pytest.raises(SetupError) as e:
        build_unit("Nobody", None)
    assert e.value.code == SetupErrorCode.ITEM_COUNT


def test_unknown_item():
    with pytest.raises(SetupError) as e:
        resolve_item(16)
    assert e.value.code == SetupErrorCode.WRONG_ITEM
    with pytest.raises(SetupError):
        resolve_item("Banana")


def test_slot_budget():
    with pytest.raises(SetupError) as e:
        build_unit("Tank", "Armor", "Sword")
    assert e.value.code == SetupErrorCode.SLOTS == -4
    assert build_unit("Tank", "Armor").slots_used == 2


def test_build_army():
    army = build_army([UnitSpec("a", "Sword"), UnitSpec("b", "Ice Staff")])
    assert [u.name for u in army] == ["a", "b"]
    with pytest.raises(SetupError):
        build_army([])
