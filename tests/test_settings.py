import json

import pytest

from ghostgame.core.logging import logger
from ghostgame.system.settings import Settings, SettingsData


@pytest.fixture(autouse=True)
def _restore_log_level():
    yield
    logger.set_level("INFO")


def test_defaults_when_missing(tmp_path):
    s = Settings.load(tmp_path / "settings.json")
    assert s.data == SettingsData()


def test_bad_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{broken", encoding="utf-8")
    s = Settings.load(path)
    assert s.data.log_level == "INFO"
    assert s.data.max_level == 100


def test_save_and_reload(tmp_path):
    path = tmp_path / "settings.json"
    s = Settings.load(path)
    s.update(max_level=50, text_speed=3)
    s.save()
    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["max_level"] == 50
    again = Settings.load(path)
    assert again.data.max_level == 50 and again.data.text_speed == 3


def test_normalize_and_unknown_keys(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"log_level": "LOUD", "max_level": 0, "text_speed": 9, "bogus": 1}), encoding="utf-8")
    s = Settings.load(path)
    assert s.data == SettingsData()
    with pytest.raises(AttributeError):
        s.update(bogus=True)


def test_update_applies_log_level_and_notifies(tmp_path):
    s = Settings.load(tmp_path / "settings.json")
    seen = []
    s.on_change(lambda data: seen.append(data.log_level))
    s.update(log_level="DEBUG")
    assert seen == ["DEBUG"]
    assert logger.is_enabled("DEBUG")
