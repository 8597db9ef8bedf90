import json
from warband.system.settings import Settings, SettingsData


def test_defaults_when_file_missing(tmp_path):
    s = Settings.load(tmp_path / "settings.json")
    assert s.data.log_level == "INFO"
    assert s.data.max_rounds == 200
    assert s.data.move_then_attack is True


def test_garbage_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    s = Settings.load(path)
    assert s.data == SettingsData()


def test_unknown_keys_are_ignored_and_values_normalized(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"log_level": "LOUD", "ai_delay": -2, "max_rounds": "50", "volume": 3}), encoding="utf-8")
    s = Settings.load(path)
    assert s.data.log_level == "INFO"
    assert s.data.ai_delay == 0.0
    assert s.data.max_rounds == 50


def test_update_persists_and_notifies(tmp_path):
    path = tmp_path / "settings.json"
    s = Settings.load(path)
    seen = []
    s.on_change(lambda d: seen.append(d.move_then_attack))
    s.update(move_then_attack=False)
    assert seen == [False]
    assert json.loads(path.read_text(encoding="utf-8"))["move_then_attack"] is False
    assert Settings.load(path).data.move_then_attack is False
