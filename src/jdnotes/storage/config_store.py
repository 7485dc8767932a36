"""Configuration store for the JD Notes backend.

Owns ``config.json`` in the application-data directory, resolves which
database file is in use, and relocates the database together with its config
pointer.

``load()`` never raises: a malformed document goes through legacy migration,
and a document that is not a JSON object at all is rebuilt from defaults
(keeping the database path from ``config.json.backup`` when there is one).
All other operations raise a ``JDNotesError`` naming the failing step.

There is no in-memory cache and no locking: every call re-reads the file and
every mutation rewrites the whole document.
"""
import json
import logging
import os
import shutil
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from jdnotes.backup import backup_path_for, create_backup, try_create_backup
from jdnotes.config import CONFIG_FILE_NAME, DATABASE_FILE_NAME, BackendConfig, config
from jdnotes.exceptions import (
    DirectoryResolutionError,
    ErrorCode,
    JDNotesError,
    SerializationError,
    StorageError,
)
from jdnotes.models.schema import AIProvider, AISettings, AppConfig

logger = logging.getLogger(__name__)

# Legacy base URLs without one of these are given the default version segment
_VERSION_SUFFIX = "/v1"
_ALT_VERSION_MARKER = "/v4"


def normalize_legacy_base_url(base_url: str) -> str:
    """Append the default API version segment to a legacy base URL.

    Older releases stored the bare host (``https://api.deepseek.com``); the AI
    client now expects the versioned root.
    """
    if base_url.endswith(_VERSION_SUFFIX) or _ALT_VERSION_MARKER in base_url:
        return base_url
    return f"{base_url.rstrip('/')}{_VERSION_SUFFIX}"


def _parse_json_object(raw: bytes) -> Optional[Dict[str, Any]]:
    """Parse raw bytes as a generic JSON object, or return None."""
    try:
        value = json.loads(raw)
    except ValueError:
        return None
    return value if isinstance(value, dict) else None


def _non_empty_string(document: Dict[str, Any], key: str) -> Optional[str]:
    value = document.get(key)
    if isinstance(value, str) and value:
        return value
    return None


def migrate_legacy_document(document: Dict[str, Any]) -> AppConfig:
    """Build a current-schema config from an older or partially valid document.

    Each field is extracted independently; anything missing or of the wrong
    type keeps its default.
    """
    migrated = AppConfig(database_path=_non_empty_string(document, "database_path"))
    if migrated.database_path:
        logger.info(f"Migrating database_path: {migrated.database_path}")

    legacy_ai = document.get("ai_settings")
    if isinstance(legacy_ai, dict):
        settings = migrated.ai_settings
        base_url = legacy_ai.get("base_url")
        if isinstance(base_url, str):
            settings.base_url = normalize_legacy_base_url(base_url)
        api_key = legacy_ai.get("api_key")
        if isinstance(api_key, str):
            settings.api_key = api_key
        model = legacy_ai.get("model")
        if isinstance(model, str):
            settings.model = model
        provider = legacy_ai.get("provider")
        if isinstance(provider, str):
            settings.provider = AIProvider.from_name(provider)

    return migrated


class ConfigStore:
    """Reads, heals and writes the application configuration file."""

    def __init__(
        self,
        app_data_dir: Optional[Union[str, Path]] = None,
        settings: Optional[BackendConfig] = None,
    ):
        """Initialize the store.

        Args:
            app_data_dir: Application-data directory. Defaults to the platform
                directory resolved by ``jdnotes.config``.
            settings: Runtime settings to resolve directories from. Defaults to
                the global config.
        """
        settings = settings or config
        if app_data_dir is not None:
            settings = settings.model_copy(update={"app_data_dir": Path(app_data_dir)})
        self._settings = settings

    # ---------------------------------------------------------------- paths

    def app_data_dir(self) -> Path:
        """Get the application-data directory, creating it if needed."""
        return self._settings.get_app_data_dir()

    def config_path(self) -> Path:
        """Get the path of ``config.json``."""
        return self.app_data_dir() / CONFIG_FILE_NAME

    def default_database_path(self) -> Path:
        """Get the database location used when no override is configured."""
        return self.app_data_dir() / DATABASE_FILE_NAME

    # ------------------------------------------------------------ load/save

    def load(self) -> AppConfig:
        """Load the configuration, healing the file if necessary.

        Never raises. In the worst case the defaults are returned.
        """
        try:
            config_path = self.config_path()
        except DirectoryResolutionError as e:
            logger.error(f"{e.message}; using default configuration")
            return AppConfig()

        try:
            if not config_path.exists():
                logger.info("Config file not found, using default configuration")
                return AppConfig()
            raw = config_path.read_bytes()
        except OSError as e:
            logger.error(f"Failed to read config file {config_path}: {e}; using default configuration")
            return AppConfig()

        try:
            app_config = AppConfig.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                f"Config file does not match the current schema "
                f"({e.error_count()} error(s)), attempting migration"
            )
        else:
            logger.info(f"Config loaded, database_path: {app_config.database_path}")
            return app_config

        document = _parse_json_object(raw)
        if document is not None:
            return self._migrate(config_path, document)
        return self._recover(config_path)

    def _migrate(self, config_path: Path, document: Dict[str, Any]) -> AppConfig:
        migrated = migrate_legacy_document(document)
        try:
            self._write(config_path, migrated)
        except JDNotesError as e:
            logger.warning(f"Failed to save migrated config: {e.message}")
        else:
            logger.info(f"Config migrated, database_path: {migrated.database_path}")
        return migrated

    def _recover(self, config_path: Path) -> AppConfig:
        logger.error(f"Config file {config_path} could not be parsed at all, rebuilding it")
        backup_path = backup_path_for(config_path)
        recovered_path = None

        if os.path.isfile(backup_path):
            logger.info(f"Trying to recover config from backup: {backup_path}")
            try:
                backup_document = _parse_json_object(backup_path.read_bytes())
            except OSError as e:
                logger.warning(f"Failed to read config backup: {e}")
                backup_document = None
            if backup_document is not None:
                recovered_path = _non_empty_string(backup_document, "database_path")
                if recovered_path:
                    logger.info(f"Recovered database_path from backup: {recovered_path}")
        else:
            # Keep the unreadable original around before it is overwritten
            try_create_backup(config_path, label="corrupt config file")

        rebuilt = AppConfig(database_path=recovered_path)
        try:
            self._write(config_path, rebuilt)
        except JDNotesError as e:
            logger.warning(f"Failed to save rebuilt config: {e.message}")
        else:
            logger.info(f"Config rebuilt, database_path: {rebuilt.database_path}")
        return rebuilt

    def save(self, app_config: AppConfig) -> None:
        """Write the whole configuration document.

        The write is direct, not atomic.

        Raises:
            SerializationError: If the document cannot be encoded.
            StorageError: If the file cannot be written.
            DirectoryResolutionError: If the application-data directory is unavailable.
        """
        self._write(self.config_path(), app_config)

    @staticmethod
    def _write(config_path: Path, app_config: AppConfig) -> None:
        try:
            content = app_config.model_dump_json(indent=2)
        except ValueError as e:
            raise SerializationError(
                f"Failed to serialize config: {e}",
                code=ErrorCode.SERIALIZE_FAILED,
                original_error=e,
            ) from e
        try:
            config_path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise StorageError(
                f"Failed to write config file: {e}",
                operation="write_config",
                path=str(config_path),
                code=ErrorCode.STORAGE_WRITE_FAILED,
                original_error=e,
            ) from e

    # ------------------------------------------------------------- database

    def effective_database_path(self) -> Path:
        """Get the database file in use, honoring the configured override.

        An override whose directory cannot be reached or created is skipped for this
        call only; the stored setting is left alone so the user can fix the
        directory and retry.
        """
        app_config = self.load()

        if app_config.database_path:
            path = Path(app_config.database_path)
            parent = path.parent
            try:
                if parent.exists():
                    logger.debug(f"Using custom database path: {path}")
                    return path
                logger.warning(f"Custom database directory does not exist, creating it: {parent}")
                parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.error(
                    f"Cannot use custom database directory ({e}), "
                    f"falling back to the default path"
                )
            else:
                logger.info(f"Created database directory: {parent}")
                return path

        default_path = self.default_database_path()
        logger.debug(f"Using default database path: {default_path}")
        return default_path

    def database_url(self) -> str:
        """Get the connection string handed to the presentation layer's SQL driver."""
        return f"sqlite:{self.effective_database_path()}"

    def database_exists(self) -> bool:
        return self.effective_database_path().exists()

    def get_database_size(self) -> int:
        """Get the database file size in bytes, 0 if it does not exist yet."""
        db_path = self.effective_database_path()
        if not db_path.exists():
            return 0
        try:
            return db_path.stat().st_size
        except OSError as e:
            raise StorageError(
                f"Failed to read database file metadata: {e}",
                operation="stat_database",
                path=str(db_path),
                original_error=e,
            ) from e

    def copy_database(self, target_path: Union[str, Path]) -> None:
        """Copy the current database file somewhere else without touching the config.

        Raises:
            StorageError: If there is no current database or the copy fails.
        """
        current = self.effective_database_path()
        if not current.exists():
            raise StorageError(
                "Current database file does not exist",
                operation="copy_database",
                path=str(current),
                code=ErrorCode.DATABASE_NOT_FOUND,
            )
        if os.path.isdir(target_path):
            raise StorageError(
                "Failed to copy database file: target is a directory",
                operation="copy_database",
                path=str(target_path),
                code=ErrorCode.STORAGE_COPY_FAILED,
            )
        try:
            shutil.copy2(current, target_path)
        except OSError as e:
            raise StorageError(
                f"Failed to copy database file: {e}",
                operation="copy_database",
                path=str(target_path),
                code=ErrorCode.STORAGE_COPY_FAILED,
                original_error=e,
            ) from e
        logger.info(f"Database copied to: {target_path}")

    def relocate(self, new_directory: Union[str, Path]) -> str:
        """Move the database to a new directory and point the config at it.

        Steps:
        1. Back up ``config.json`` (fatal on failure).
        2. Create the target directory.
        3. Copy the current database, if any, backing up a file already at
           the target to ``jdnotes.db.backup``.
        4. Save the new ``database_path``.

        The config is only updated after the copy succeeded. The original
        database file is left in place.

        Args:
            new_directory: Directory that will hold the database file

        Returns:
            The new database path.

        Raises:
            StorageError: If any filesystem step fails.
        """
        current = self.effective_database_path()
        target_dir = Path(new_directory).expanduser().absolute()
        target = target_dir / DATABASE_FILE_NAME

        logger.info(f"Current database path: {current}")
        logger.info(f"New database path: {target}")

        config_path = self.config_path()
        if config_path.exists():
            create_backup(config_path, label="config file")

        try:
            target_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(
                f"Failed to create target directory: {e}",
                operation="create_target_dir",
                path=str(target_dir),
                code=ErrorCode.STORAGE_CREATE_DIR_FAILED,
                original_error=e,
            ) from e

        if current.exists():
            if target.exists() and os.path.samefile(current, target):
                logger.info("Database is already at the target location, nothing to copy")
            else:
                if target.exists():
                    logger.info("A database already exists at the target, backing it up")
                    create_backup(target, label="existing database at target")
                try:
                    shutil.copy2(current, target)
                except OSError as e:
                    raise StorageError(
                        f"Failed to copy database file: {e}",
                        operation="copy_database",
                        path=str(target),
                        code=ErrorCode.STORAGE_COPY_FAILED,
                        original_error=e,
                    ) from e
                logger.info("Database file copied")
        else:
            logger.info("No database file at the current location, only updating the config")

        app_config = self.load()
        app_config.database_path = str(target)
        self.save(app_config)

        logger.info(f"Config updated, new database path: {target}")
        return str(target)

    # ---------------------------------------------------------- AI settings

    def get_ai_settings(self) -> AISettings:
        return self.load().ai_settings

    def save_ai_settings(self, settings: AISettings) -> None:
        """Replace the stored AI settings, keeping the rest of the document."""
        app_config = self.load()
        app_config.ai_settings = settings
        self.save(app_config)
