import pytest

from school_attendance.config import get_settings_module


@pytest.mark.parametrize(
    "env, module",
    [
        ("production", "school_attendance.config.production"),
        ("PROD", "school_attendance.config.production"),
        ("test", "school_attendance.config.testing"),
        ("development", "school_attendance.config.development"),
    ],
)
def test_app_env_selects_settings(monkeypatch, env, module):
    monkeypatch.setenv("APP_ENV", env)

    assert get_settings_module() == module


def test_development_is_the_default(monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)

    assert get_settings_module() == "school_attendance.config.development"


def test_unknown_app_env_fails_fast(monkeypatch):
    monkeypatch.setenv("APP_ENV", "staging")

    with pytest.raises(RuntimeError, match="staging"):
        get_settings_module()
