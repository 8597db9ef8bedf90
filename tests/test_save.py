import struct
import pytest
from warband.battle.factory import build_unit
from warband.core.errors import SaveFormatError
from warband.system.save import (
    HEADER, RECORD, SavedBattle, decode_battle, default_save_path, encode_battle, load_battle, save_battle,
)


def army(n, prefix):
    return [build_unit(f"{prefix}{i}", "Bow", "Dagger" if i % 2 else None) for i in range(n)]


def test_record_layout():
    assert HEADER.size == 12
    assert RECORD.size == 116


def test_encode_size_matches_unit_count():
    saved = SavedBattle(army(1, "a"), army(5, "b"), active_team=2)
    assert len(encode_battle(saved)) == 12 + 6 * 116


def test_save_and_load_round_trip(tmp_path):
    a1 = army(5, "red")
    a1[0].hp = 37
    saved = SavedBattle(a1, army(1, "blue"), active_team=2)
    path = save_battle(saved, tmp_path / "battle.dat")
    assert path is not None and path.exists()
    assert [p.name for p in tmp_path.iterdir()] == ["battle.dat"]
    loaded = load_battle(path)
    assert loaded is not None
    assert loaded.active_team == 2
    assert [u.name for u in loaded.army1] == [u.name for u in a1]
    assert loaded.army1[0].hp == 37
    assert loaded.army1[0].item2 is None
    assert loaded.army1[1].item2.name == "Dagger"
    assert loaded.army2[0].item1.name == "Bow"


def test_refuses_to_write_bad_counts(tmp_path):
    assert save_battle(SavedBattle([], army(1, "b")), tmp_path / "x.dat") is None
    assert save_battle(SavedBattle(army(6, "a"), army(1, "b")), tmp_path / "x.dat") is None
    assert not (tmp_path / "x.dat").exists()


@pytest.mark.parametrize("n1,n2", [(0, 1), (6, 1), (1, -3)])
def test_load_rejects_bad_counts(tmp_path, n1, n2):
    path = tmp_path / "bad.dat"
    path.write_bytes(HEADER.pack(n1, n2, 1) + b"\0" * (RECORD.size * 7))
    assert load_battle(path) is None


def test_load_rejects_short_files(tmp_path):
    data = encode_battle(SavedBattle(army(2, "a"), army(2, "b")))
    path = tmp_path / "short.dat"
    path.write_bytes(data[:-10])
    assert load_battle(path) is None
    path.write_bytes(data[:5])
    assert load_battle(path) is None


def test_load_rejects_missing_primary_item():
    data = bytearray(encode_battle(SavedBattle(army(1, "a"), army(1, "b"))))
    # item1 of the first record
    struct.pack_into("<i", data, HEADER.size + 104 + 4, -1)
    with pytest.raises(SaveFormatError):
        decode_battle(bytes(data))


def test_missing_file_is_not_an_error(tmp_path):
    assert load_battle(tmp_path / "nothing.dat") is None


def test_default_path_lives_under_home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    path = default_save_path()
    assert path == tmp_path / ".warband_saves" / "savefile.dat"
    assert save_battle(SavedBattle(army(1, "a"), army(1, "b"))) == path


def test_non_ascii_names_survive_round_trip(tmp_path):
    unit = build_unit("Ł" * 60, "Sword")
    assert len(unit.name.encode("utf-8")) <= 100
    assert unit.name == "Ł" * 50
    mixed = build_unit("a" + "Ł" * 60, "Sword")  # a 2-byte char would straddle the limit
    assert mixed.name == "a" + "Ł" * 49
    path = save_battle(SavedBattle([unit], [mixed, build_unit("Zoë", "Bow")]), tmp_path / "names.dat")
    loaded = load_battle(path)
    assert loaded.army1[0].name == unit.name
    assert [u.name for u in loaded.army2] == [mixed.name, "Zoë"]


@pytest.mark.parametrize("hp", [0, -7])
def test_load_rejects_defeated_units(tmp_path, hp):
    data = HEADER.pack(1, 1, 1) + RECORD.pack(b"ghost", hp, 0, -1) + RECORD.pack(b"alive", 50, 0, -1)
    with pytest.raises(SaveFormatError):
        decode_battle(data)
    path = tmp_path / "dead.dat"
    path.write_bytes(data)
    assert load_battle(path) is None
