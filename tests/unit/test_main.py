import pytest

import decker.main as entrypoint
from config.settings import AppSettings
from decker.exceptions import ConfigurationError


class RecordingSetup:
    def __init__(self):
        self.calls = []

    def __call__(self, **kwargs):
        self.calls.append(kwargs)


def settings_without_key():
    return AppSettings(_env_file=None)


@pytest.fixture
def logging_calls(monkeypatch):
    recorder = RecordingSetup()
    monkeypatch.setattr(entrypoint, "setup_logging", recorder)
    return recorder


@pytest.mark.unit
def test_missing_helius_key_is_configuration_error(monkeypatch):
    monkeypatch.delenv("HELIUS__API_KEY", raising=False)
    monkeypatch.setattr(entrypoint, "get_settings", settings_without_key)

    with pytest.raises(ConfigurationError):
        entrypoint.load_settings()


@pytest.mark.unit
def test_main_exits_non_zero_on_bad_config(monkeypatch, logging_calls):
    monkeypatch.delenv("HELIUS__API_KEY", raising=False)
    monkeypatch.setattr(entrypoint, "get_settings", settings_without_key)

    with pytest.raises(SystemExit) as exc_info:
        entrypoint.main()

    assert exc_info.value.code == 1


@pytest.mark.unit
@pytest.mark.parametrize("environment, json, level", [("prod", True, "INFO"), ("dev", False, "DEBUG")])
def test_logging_follows_environment(monkeypatch, logging_calls, environment, json, level):
    settings = AppSettings(_env_file=None, environment=environment, helius={"api_key": "key"})
    served = []
    monkeypatch.setattr(entrypoint, "get_settings", lambda: settings)
    monkeypatch.setattr(entrypoint.uvicorn, "run", lambda app, **kwargs: served.append(kwargs))

    entrypoint.main()

    assert logging_calls.calls[-1] == {"json": json, "level": level}
    assert served == [{"host": "0.0.0.0", "port": 5000, "log_level": "info"}]
