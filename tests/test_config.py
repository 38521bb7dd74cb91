"""Tests for settings."""

from combat_sim.config import Settings, settings


def test_defaults():
    assert settings.MAX_SHOTS == 500
    assert settings.DEFAULT_FIRE_RATE == 600
    assert settings.DEFAULT_RANGE == 60
    assert settings.CALIBRATION_PASS_ACCURACY == 90
    assert (settings.ITEMS_DATA_DIR / "weapons.json").exists()
    assert (settings.CALIBRATION_DATA_DIR / "single_shot_cases.json").exists()


def test_environment_override(monkeypatch):
    monkeypatch.setenv("COMBAT_SIM_MAX_SHOTS", "50")
    monkeypatch.setenv("COMBAT_SIM_DEFAULT_RANGE", "120")

    overridden = Settings()

    assert overridden.MAX_SHOTS == 50
    assert overridden.DEFAULT_RANGE == 120
