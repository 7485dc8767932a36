"""Tests for the command line entry point."""
from pathlib import Path
from unittest.mock import patch

import pytest

from jdnotes import main as main_module
from jdnotes.config import config


@pytest.fixture
def isolated_config(monkeypatch):
    """Let main() mutate the global config and restore it afterwards."""
    monkeypatch.setattr(config, "app_data_dir", config.app_data_dir)
    monkeypatch.setattr(config, "log_level", config.log_level)
    return config


def test_parse_args_defaults(monkeypatch):
    monkeypatch.delenv("JDNOTES_APP_DATA_DIR", raising=False)

    args = main_module.parse_args([])

    assert args.app_data_dir is None
    assert args.no_init_db is False


def test_main_initializes_database_and_runs_server(tmp_path, isolated_config, restore_logging):
    app_dir = tmp_path / "appdata"

    with patch.object(main_module, "JDNotesMcpServer") as server_cls, \
            patch.object(main_module, "atexit"):
        main_module.main(["--app-data-dir", str(app_dir), "--log-level", "DEBUG"])

    assert (app_dir / "jdnotes.db").exists()
    assert (app_dir / "logs" / "jdnotes.log").exists()
    server_cls.return_value.run.assert_called_once()
    store = server_cls.call_args.kwargs["store"]
    assert store.default_database_path() == app_dir / "jdnotes.db"


def test_main_skips_schema_when_asked(tmp_path, isolated_config, restore_logging):
    app_dir = tmp_path / "appdata"

    with patch.object(main_module, "JDNotesMcpServer"), patch.object(main_module, "atexit"):
        main_module.main(["--app-data-dir", str(app_dir), "--no-init-db"])

    assert not (app_dir / "jdnotes.db").exists()


def test_main_exits_when_database_init_fails(tmp_path, isolated_config, restore_logging):
    app_dir = tmp_path / "appdata"

    with patch.object(main_module, "JDNotesMcpServer") as server_cls, \
            patch.object(main_module, "atexit"), \
            patch.object(main_module, "init_db", side_effect=RuntimeError("locked")):
        with pytest.raises(SystemExit) as exc_info:
            main_module.main(["--app-data-dir", str(app_dir)])

    assert exc_info.value.code == 1
    server_cls.assert_not_called()
