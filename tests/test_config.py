"""Tests for runtime configuration and application-data directory resolution."""
import sys
from pathlib import Path

import pytest

from jdnotes.config import BackendConfig, _USER_ENV, platform_data_root
from jdnotes.exceptions import ConfigurationError, DirectoryResolutionError, ErrorCode


class TestBackendConfig:

    def test_user_env_path_is_correct(self):
        assert _USER_ENV == Path.home() / ".jdnotes" / ".env"

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("JDNOTES_APP_DATA_DIR", raising=False)
        monkeypatch.delenv("JDNOTES_APP_IDENTIFIER", raising=False)
        monkeypatch.delenv("JDNOTES_LOG_LEVEL", raising=False)

        cfg = BackendConfig()

        assert cfg.app_data_dir is None
        assert cfg.app_identifier == "com.jdnotes.app"
        assert cfg.log_level == "INFO"

    def test_values_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("JDNOTES_APP_DATA_DIR", str(tmp_path / "data"))
        monkeypatch.setenv("JDNOTES_LOG_LEVEL", "debug")

        cfg = BackendConfig()

        assert cfg.app_data_dir == tmp_path / "data"
        assert cfg.log_level == "DEBUG"

    def test_user_env_file_is_honored(self, monkeypatch, tmp_path):
        from dotenv import load_dotenv

        monkeypatch.delenv("JDNOTES_APP_IDENTIFIER", raising=False)
        user_env = tmp_path / ".env"
        user_env.write_text("JDNOTES_APP_IDENTIFIER=org.example.notes\n")
        load_dotenv(user_env)
        try:
            assert BackendConfig().app_identifier == "org.example.notes"
        finally:
            monkeypatch.delenv("JDNOTES_APP_IDENTIFIER", raising=False)

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("JDNOTES_LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigurationError) as exc_info:
            BackendConfig()

        assert exc_info.value.config_key == "log_level"

    def test_identifier_cannot_be_a_path(self):
        with pytest.raises(ConfigurationError):
            BackendConfig(app_identifier="../escape", log_level="INFO")

    def test_explicit_app_data_dir_is_created(self, tmp_path):
        cfg = BackendConfig(app_data_dir=tmp_path / "a" / "b", log_level="INFO")

        assert cfg.get_app_data_dir() == tmp_path / "a" / "b"
        assert (tmp_path / "a" / "b").is_dir()
        assert cfg.get_log_dir() == tmp_path / "a" / "b" / "logs"

    def test_platform_dir_joined_with_identifier(self, monkeypatch, tmp_path):
        monkeypatch.setattr(sys, "platform", "linux")
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))

        cfg = BackendConfig(app_data_dir=None, app_identifier="com.jdnotes.app", log_level="INFO")

        assert cfg.get_app_data_dir() == tmp_path / "xdg" / "com.jdnotes.app"

    def test_uncreatable_app_data_dir(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("file")
        cfg = BackendConfig(app_data_dir=blocker / "data", log_level="INFO")

        with pytest.raises(DirectoryResolutionError) as exc_info:
            cfg.get_app_data_dir()

        assert exc_info.value.code == ErrorCode.APP_DATA_DIR_CREATE_FAILED


class TestPlatformDataRoot:

    def test_linux_without_xdg(self, monkeypatch):
        monkeypatch.setattr(sys, "platform", "linux")
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)

        assert platform_data_root() == Path.home() / ".local" / "share"

    def test_macos(self, monkeypatch):
        monkeypatch.setattr(sys, "platform", "darwin")

        assert platform_data_root() == Path.home() / "Library" / "Application Support"

    def test_windows_uses_appdata(self, monkeypatch, tmp_path):
        monkeypatch.setattr(sys, "platform", "win32")
        monkeypatch.setenv("APPDATA", str(tmp_path))

        assert platform_data_root() == tmp_path

    def test_windows_without_appdata(self, monkeypatch):
        monkeypatch.setattr(sys, "platform", "win32")
        monkeypatch.delenv("APPDATA", raising=False)

        with pytest.raises(DirectoryResolutionError):
            platform_data_root()

    def test_no_home_directory(self, monkeypatch):
        monkeypatch.setattr(sys, "platform", "linux")
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)

        def _no_home():
            raise RuntimeError("Could not determine home directory.")

        monkeypatch.setattr(Path, "home", staticmethod(_no_home))

        with pytest.raises(DirectoryResolutionError):
            platform_data_root()
