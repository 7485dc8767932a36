"""Commands exposed to the JD Notes presentation layer.

Each command takes the ``ConfigStore`` to work on, returns a typed result and
raises ``JDNotesError`` on failure. ``jdnotes.server.mcp_server`` registers
them as tools.
"""
import logging
from pathlib import Path
from typing import Any, Union

from jdnotes.models.schema import (
    AISettings,
    DatabaseInfo,
    ImportSummary,
    IndexedDBImportResult,
)
from jdnotes.observability import traced
from jdnotes.services import data_transfer
from jdnotes.storage.config_store import ConfigStore
from jdnotes.utils import format_size

logger = logging.getLogger(__name__)


# ============= Database location =============

@traced("get_database_path")
def get_database_path(store: ConfigStore) -> str:
    return str(store.effective_database_path())


@traced("get_database_url")
def get_database_url(store: ConfigStore) -> str:
    return store.database_url()


@traced("get_database_info")
def get_database_info(store: ConfigStore) -> DatabaseInfo:
    """Describe the database file currently in use."""
    path = store.effective_database_path()
    size = store.get_database_size()
    return DatabaseInfo(
        path=str(path),
        exists=path.exists(),
        size=size,
        size_formatted=format_size(size),
        is_custom=store.load().database_path is not None,
    )


@traced("copy_database_to")
def copy_database_to(store: ConfigStore, new_path: Union[str, Path]) -> None:
    store.copy_database(new_path)


@traced("change_database_location")
def change_database_location(store: ConfigStore, new_dir: Union[str, Path]) -> str:
    """Copy the database into ``new_dir`` and make it the active location."""
    logger.info(f"change_database_location called with: {new_dir}")
    new_path = store.relocate(new_dir)
    logger.info(f"Database location changed to: {new_path}")
    return new_path


@traced("get_config_path")
def get_config_path(store: ConfigStore) -> str:
    return str(store.config_path())


# ============= AI settings =============

@traced("get_ai_settings")
def get_ai_settings(store: ConfigStore) -> AISettings:
    return store.get_ai_settings()


@traced("save_ai_settings")
def save_ai_settings(store: ConfigStore, settings: AISettings) -> None:
    store.save_ai_settings(settings)


# ============= Import / export =============

@traced("export_database_json")
def export_database_json() -> str:
    return data_transfer.export_database_json()


@traced("import_database_json")
def import_database_json(json_data: str) -> ImportSummary:
    return data_transfer.import_database_json(json_data)


@traced("import_from_indexeddb")
def import_from_indexeddb(data: Any) -> IndexedDBImportResult:
    return data_transfer.import_from_indexeddb(data)
