import json
import logging

from backend import settings


def test_load_settings_creates_defaults(isolated_settings):
    loaded = settings.load_settings()
    assert isolated_settings.exists()
    assert [item["key"] for item in loaded] == ["rest_duration", "carry_forward_sets"]
    assert settings.get_value("rest_duration") == 90


def test_set_value_persists(isolated_settings):
    settings.set_value("rest_duration", 120)
    settings.set_value("theme", "dark")
    stored = json.loads(isolated_settings.read_text())
    assert {"key": "rest_duration", "value": 120, "type": "int"} in stored
    assert {"key": "theme", "value": "dark", "type": "str"} in stored
    assert settings.get_value("theme") == "dark"


def test_unknown_key_uses_default():
    assert settings.get_value("missing", default=3) == 3


def test_missing_key_falls_back_to_builtin(isolated_settings):
    isolated_settings.write_text(json.dumps([{"key": "theme", "value": "dark", "type": "str"}]))
    assert settings.get_value("carry_forward_sets") is True
    assert settings.session_defaults() == (90, True)


def test_corrupt_file_is_reset(isolated_settings, caplog):
    isolated_settings.write_text("{oops")
    with caplog.at_level(logging.WARNING):
        loaded = settings.load_settings()
    assert "resetting" in caplog.text
    assert loaded == settings.DEFAULT_SETTINGS
    assert json.loads(isolated_settings.read_text()) == settings.DEFAULT_SETTINGS


def test_session_defaults_reflect_stored_values():
    settings.set_value("rest_duration", 45)
    settings.set_value("carry_forward_sets", False)
    defaults = settings.session_defaults()
    assert defaults.rest_duration == 45
    assert defaults.carry_forward is False


def test_session_defaults_ignore_invalid_values(caplog):
    settings.set_value("rest_duration", "long")
    settings.set_value("carry_forward_sets", "yes")
    with caplog.at_level(logging.WARNING):
        defaults = settings.session_defaults()
    assert defaults == settings.SessionDefaults(90, True)
    assert "rest_duration" in caplog.text
    assert "carry_forward_sets" in caplog.text
