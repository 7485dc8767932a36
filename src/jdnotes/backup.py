"""Backup utilities for the JD Notes backend.

Backups are plain sibling copies named ``<file>.backup`` (``config.json.backup``,
``jdnotes.db.backup``). There is one slot per file; a new backup overwrites the
previous one.
"""
import logging
import shutil
from pathlib import Path
from typing import Optional, Union

from jdnotes.exceptions import ErrorCode, StorageError

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".backup"


def backup_path_for(path: Union[str, Path]) -> Path:
    """Return the backup slot for a file.

    Example:
        backup_path_for("/data/config.json") -> /data/config.json.backup
    """
    path = Path(path)
    return path.with_name(path.name + BACKUP_SUFFIX)


def create_backup(path: Union[str, Path], label: Optional[str] = None) -> Path:
    """Copy a file into its backup slot, overwriting any previous backup.

    Args:
        path: File to back up
        label: Short description used in log and error messages

    Returns:
        Path to the backup file.

    Raises:
        StorageError: If the copy fails.
    """
    source = Path(path)
    backup_path = backup_path_for(source)
    what = label or source.name
    try:
        shutil.copy2(source, backup_path)
    except OSError as e:
        raise StorageError(
            f"Failed to back up {what}: {e}",
            operation="backup",
            path=str(source),
            code=ErrorCode.STORAGE_BACKUP_FAILED,
            original_error=e,
        ) from e

    logger.info(f"Backed up {what} to: {backup_path}")
    return backup_path


def try_create_backup(path: Union[str, Path], label: Optional[str] = None) -> Optional[Path]:
    """Best-effort variant of :func:`create_backup`.

    Returns:
        Path to the backup file, or None if the copy failed (the failure is logged).
    """
    try:
        return create_backup(path, label=label)
    except StorageError as e:
        logger.warning(e.message)
        return None
