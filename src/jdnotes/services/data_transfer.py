"""JSON import/export envelopes.

The presentation layer reads and writes the actual note and chat-message rows
through its own SQL driver. This module only produces the export envelope and
validates/counts the records of incoming payloads.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from jdnotes.exceptions import ErrorCode, SerializationError
from jdnotes.models.schema import (
    EXPORT_FORMAT_VERSION,
    ExportData,
    ImportSummary,
    IndexedDBImportResult,
)

logger = logging.getLogger(__name__)


def build_export_envelope() -> ExportData:
    """Create an empty export document stamped with the current UTC time."""
    return ExportData(
        version=EXPORT_FORMAT_VERSION,
        exported_at=datetime.now(timezone.utc).isoformat(),
        notes=[],
        chat_messages=[],
    )


def export_database_json() -> str:
    """Serialize the export envelope as pretty-printed JSON."""
    try:
        return build_export_envelope().model_dump_json(indent=2)
    except ValueError as e:
        raise SerializationError(
            f"Failed to serialize export data: {e}",
            code=ErrorCode.SERIALIZE_FAILED,
            original_error=e,
        ) from e


def import_database_json(json_data: str) -> ImportSummary:
    """Validate an export document and count its records.

    Raises:
        SerializationError: If the text is not a valid export document.
    """
    try:
        import_data = ExportData.model_validate_json(json_data)
    except ValidationError as e:
        raise SerializationError(f"JSON parse failed: {e}", original_error=e) from e

    logger.info(
        f"Import payload parsed: {len(import_data.notes)} notes, "
        f"{len(import_data.chat_messages)} chat messages"
    )
    return ImportSummary(
        notes_count=len(import_data.notes),
        messages_count=len(import_data.chat_messages),
    )


def import_from_indexeddb(data: Any) -> IndexedDBImportResult:
    """Count records in a dump from the browser-storage version of the app.

    The dump is loosely typed; ``notes`` and ``chatMessages`` are only counted
    when they are arrays. A JSON string is parsed first.
    """
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except ValueError as e:
            raise SerializationError(f"JSON parse failed: {e}", original_error=e) from e

    notes = data.get("notes") if isinstance(data, dict) else None
    messages = data.get("chatMessages") if isinstance(data, dict) else None

    return IndexedDBImportResult(
        success=True,
        notes_imported=len(notes) if isinstance(notes, list) else 0,
        messages_imported=len(messages) if isinstance(messages, list) else 0,
    )
