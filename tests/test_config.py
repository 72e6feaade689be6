"""Tests for Settings.from_env."""

import os

from iplens.config import Settings
from iplens.history import HISTORY_CAPACITY


class TestSettings:
    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.provider_url == "https://ipinfo.io"
        assert settings.provider_token is None
        assert settings.history_capacity == HISTORY_CAPACITY
        assert settings.history_key == "ipHistory_v1"
        assert settings.map_zoom == 12
        assert settings.circle_radius == 500.0

    def test_env_overrides(self):
        settings = Settings.from_env({
            "IPLENS_PROVIDER_URL": "http://geo.local",
            "IPLENS_PROVIDER_TOKEN": "secret",
            "IPLENS_TIMEOUT": "2.5",
            "IPLENS_HOME": "/tmp/iplens-test",
            "IPLENS_HISTORY_CAPACITY": "10",
            "IPLENS_MAP_ZOOM": "8",
            "IPLENS_CIRCLE_RADIUS": "1000",
        })
        assert settings.provider_url == "http://geo.local"
        assert settings.provider_token == "secret"
        assert settings.timeout == 2.5
        assert settings.home == "/tmp/iplens-test"
        assert settings.history_capacity == 10
        assert settings.map_zoom == 8
        assert settings.circle_radius == 1000.0

    def test_bad_numbers_fall_back(self):
        settings = Settings.from_env({"IPLENS_TIMEOUT": "soon", "IPLENS_MAP_ZOOM": "close"})
        assert settings.timeout == 10.0
        assert settings.map_zoom == 12

    def test_empty_token_is_none(self):
        assert Settings.from_env({"IPLENS_PROVIDER_TOKEN": ""}).provider_token is None

    def test_reads_dotenv_from_working_directory(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("IPLENS_MAP_ZOOM=7\nIPLENS_PROVIDER_TOKEN=from-dotenv\n")
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("IPLENS_MAP_ZOOM", raising=False)
        monkeypatch.delenv("IPLENS_PROVIDER_TOKEN", raising=False)
        try:
            settings = Settings.from_env()
            assert settings.map_zoom == 7
            assert settings.provider_token == "from-dotenv"
        finally:
            os.environ.pop("IPLENS_MAP_ZOOM", None)
            os.environ.pop("IPLENS_PROVIDER_TOKEN", None)

    def test_real_environment_wins_over_dotenv(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("IPLENS_MAP_ZOOM=7\n")
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("IPLENS_MAP_ZOOM", "15")
        assert Settings.from_env().map_zoom == 15
