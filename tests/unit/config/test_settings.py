"""Tests for settings loading."""

from pathlib import Path

import pytest

from game_saver.config import (
    ConfigurationError,
    LeasingSettings,
    SecuritySettings,
    Settings,
    get_settings,
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run from an empty directory with no config-related env vars."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    for name in ("CONFIG_FILE", "LEASING__MAX_HOURS", "SECURITY__SESSION_SECRET"):
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_leasing_bounds(self):
        settings = Settings()
        assert settings.leasing.min_hours == 1
        assert settings.leasing.max_hours == 24

    def test_session_secret_is_generated(self):
        security = SecuritySettings()
        assert security.session_secret
        assert len(security.session_secret) == 64
        assert security.session_secret_generated is True

    def test_configured_secret_is_kept(self):
        security = SecuritySettings(session_secret="fixed")
        assert security.session_secret == "fixed"
        assert security.session_secret_generated is False

    def test_server_url(self):
        assert Settings().server_url == "http://127.0.0.1:8000"


class TestValidation:
    def test_min_above_max_rejected(self):
        with pytest.raises(ValueError, match="must not exceed"):
            LeasingSettings(min_hours=5, max_hours=2)

    def test_max_hours_capped_at_a_week(self):
        with pytest.raises(ValueError):
            LeasingSettings(max_hours=169)


class TestSources:
    def test_nested_env_vars(self, monkeypatch):
        monkeypatch.setenv("LEASING__MAX_HOURS", "12")
        monkeypatch.setenv("SECURITY__SESSION_SECRET", "from-env")

        settings = get_settings()
        assert settings.leasing.max_hours == 12
        assert settings.security.session_secret == "from-env"

    def test_toml_file(self, tmp_path):
        config = tmp_path / "custom.toml"
        config.write_text('[leasing]\nmax_hours = 6\n\n[server]\nport = 9001\n')

        settings = get_settings(config)
        assert settings.leasing.max_hours == 6
        assert settings.server.port == 9001

    def test_config_file_env_var(self, tmp_path, monkeypatch):
        config = tmp_path / "env.toml"
        config.write_text("[leasing]\nmin_hours = 2\n")
        monkeypatch.setenv("CONFIG_FILE", str(config))

        assert get_settings().leasing.min_hours == 2

    def test_discovers_file_in_working_directory(self, tmp_path):
        (tmp_path / ".game_saver.toml").write_text("[server]\nport = 8123\n")
        assert get_settings().server.port == 8123

    def test_overrides_win(self, tmp_path):
        config = tmp_path / "custom.toml"
        config.write_text("[leasing]\nmax_hours = 6\n")

        settings = get_settings(config, leasing={"max_hours": 8})
        assert settings.leasing.max_hours == 8

    def test_non_toml_file_rejected(self, tmp_path):
        config = tmp_path / "config.json"
        config.write_text("{}")
        with pytest.raises(ConfigurationError, match="Only TOML"):
            get_settings(config)

    def test_invalid_toml_rejected(self, tmp_path):
        config = tmp_path / "broken.toml"
        config.write_text("[leasing\nmax_hours = ")
        with pytest.raises(ConfigurationError, match="Invalid TOML"):
            get_settings(config)

    def test_invalid_values_rejected(self, tmp_path):
        config = tmp_path / "bad.toml"
        config.write_text("[leasing]\nmin_hours = 0\n")
        with pytest.raises(ConfigurationError):
            get_settings(config)

    def test_missing_file_falls_back_to_defaults(self):
        settings = get_settings(Path("does-not-exist.toml"))
        assert settings.leasing.max_hours == 24
