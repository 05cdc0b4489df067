"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from carrunner.config.settings import Settings, get_settings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    # Keep a developer's .env and shell out of the way
    monkeypatch.chdir(tmp_path)
    for name in ("CARRUNNER_VARIANT", "CARRUNNER_SEED", "CARRUNNER_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    settings = Settings()
    assert settings.variant == "transformer"
    assert settings.seed is None
    assert settings.display.width == 1200
    assert settings.display.height == 600
    assert settings.simulator.step_rate == 60
    assert settings.step_seconds == pytest.approx(1 / 60)


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("CARRUNNER_VARIANT", "rally")
    monkeypatch.setenv("CARRUNNER_SEED", "42")
    monkeypatch.setenv("CARRUNNER_DISPLAY__WIDTH", "800")
    monkeypatch.setenv("CARRUNNER_SIMULATOR__STEP_RATE", "120")

    settings = Settings()
    assert settings.variant == "rally"
    assert settings.seed == 42
    assert settings.display.width == 800
    assert settings.simulator.step_rate == 120


def test_dotenv_file_is_read(tmp_path):
    (tmp_path / ".env").write_text("CARRUNNER_VARIANT=classic\nCARRUNNER_DEBUG=true\n")
    settings = Settings()
    assert settings.variant == "classic"
    assert settings.debug


def test_invalid_values_are_rejected(monkeypatch):
    monkeypatch.setenv("CARRUNNER_VARIANT", "hovercraft")
    with pytest.raises(ValidationError):
        Settings()


def test_non_positive_viewport_rejected(monkeypatch):
    monkeypatch.setenv("CARRUNNER_DISPLAY__HEIGHT", "0")
    with pytest.raises(ValidationError):
        Settings()


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
