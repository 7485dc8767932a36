"""Common test fixtures for the JD Notes backend."""

import logging
from pathlib import Path

import pytest

from jdnotes.observability import ROOT_LOGGER_NAME, metrics
from jdnotes.server.mcp_server import JDNotesMcpServer
from jdnotes.storage.config_store import ConfigStore


@pytest.fixture(autouse=True)
def _reset_metrics():
    """Keep command metrics from leaking between tests."""
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def app_dir(tmp_path):
    """Application-data directory for one test."""
    return tmp_path / "appdata"


@pytest.fixture
def store(app_dir):
    """ConfigStore rooted at the temporary application-data directory."""
    return ConfigStore(app_data_dir=app_dir)


@pytest.fixture
def write_config(store):
    """Write raw text to config.json and return its path."""

    def _write(content) -> Path:
        path = store.config_path()
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def mcp_server(store):
    """Command server bound to the temporary store."""
    return JDNotesMcpServer(store=store)


@pytest.fixture
def restore_logging():
    """Remove handlers added to the package logger during a test."""
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers_before = list(root_logger.handlers)
    level_before = root_logger.level
    yield root_logger
    for handler in list(root_logger.handlers):
        if handler not in handlers_before:
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level_before)


@pytest.fixture
def get_tool(mcp_server):
    """Look up a registered tool function by name."""

    def _get(tool_name: str):
        tool = mcp_server.mcp._tool_manager.get_tool(tool_name)
        if tool is None:
            raise ValueError(f"Tool '{tool_name}' not found")
        return tool.fn

    return _get
