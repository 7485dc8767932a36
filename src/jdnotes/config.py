"""Runtime configuration for the JD Notes backend.

These are process-level settings (where the application-data directory lives,
log level, server name). The user-facing document with the database path
override and AI settings is ``config.json``, handled by
``jdnotes.storage.config_store``.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

from jdnotes import __version__
from jdnotes.exceptions import ConfigurationError, DirectoryResolutionError, ErrorCode

# Anchored to __file__ so it works regardless of the process CWD.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

# User-level config: survives reinstalls
_USER_ENV = Path.home() / ".jdnotes" / ".env"
load_dotenv(_USER_ENV)


logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"
DATABASE_FILE_NAME = "jdnotes.db"

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def platform_data_root() -> Path:
    """Return the per-user data root for the running platform.

    Raises:
        DirectoryResolutionError: If the platform gives no usable location.
    """
    try:
        if sys.platform.startswith("win"):
            appdata = os.getenv("APPDATA")
            if not appdata:
                raise DirectoryResolutionError(
                    "Failed to resolve application data directory: APPDATA is not set"
                )
            return Path(appdata)
        if sys.platform == "darwin":
            return Path.home() / "Library" / "Application Support"
        xdg = os.getenv("XDG_DATA_HOME")
        if xdg:
            return Path(xdg)
        return Path.home() / ".local" / "share"
    except RuntimeError as e:
        # Path.home() raises RuntimeError when no home directory can be found
        raise DirectoryResolutionError(
            f"Failed to resolve application data directory: {e}",
            original_error=e,
        ) from e


class BackendConfig(BaseModel):
    """Configuration for the JD Notes backend process."""

    # Explicit application-data directory (tests, portable installs)
    app_data_dir: Optional[Path] = Field(
        default_factory=lambda: (
            Path(os.getenv("JDNOTES_APP_DATA_DIR"))
            if os.getenv("JDNOTES_APP_DATA_DIR")
            else None
        )
    )
    # Bundle identifier, used as the directory name under the platform data root
    app_identifier: str = Field(
        default_factory=lambda: os.getenv("JDNOTES_APP_IDENTIFIER", "com.jdnotes.app")
    )
    server_name: str = Field(
        default_factory=lambda: os.getenv("JDNOTES_SERVER_NAME", "jdnotes-backend")
    )
    server_version: str = Field(default=__version__)
    log_level: str = Field(
        default_factory=lambda: os.getenv("JDNOTES_LOG_LEVEL", "INFO").upper()
    )

    @model_validator(mode="after")
    def _validate_settings(self) -> "BackendConfig":
        if self.log_level not in _VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid log level '{self.log_level}', expected one of "
                f"{', '.join(_VALID_LOG_LEVELS)}",
                config_key="log_level",
            )
        if not self.app_identifier or "/" in self.app_identifier or "\\" in self.app_identifier:
            raise ConfigurationError(
                f"Invalid application identifier '{self.app_identifier}'",
                config_key="app_identifier",
            )
        return self

    def get_app_data_dir(self) -> Path:
        """Get the application-data directory, creating it if needed.

        Raises:
            DirectoryResolutionError: If the directory cannot be resolved or created.
        """
        if self.app_data_dir is not None:
            app_dir = self.app_data_dir.expanduser()
        else:
            app_dir = platform_data_root() / self.app_identifier

        try:
            app_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryResolutionError(
                f"Failed to create application data directory: {e}",
                code=ErrorCode.APP_DATA_DIR_CREATE_FAILED,
                original_error=e,
            ) from e
        return app_dir

    def get_log_dir(self) -> Path:
        """Get the directory for rotating log files."""
        return self.get_app_data_dir() / "logs"


# Create a global config instance
config = BackendConfig()
