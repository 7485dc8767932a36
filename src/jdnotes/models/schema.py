"""Data models for the JD Notes backend."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

DEFAULT_AI_BASE_URL = "https://api.deepseek.com/v1"
DEFAULT_AI_MODEL = "deepseek-chat"

EXPORT_FORMAT_VERSION = "1.0"


class AIProvider(str, Enum):
    """Wire dialect used by the AI client in the presentation layer."""
    # OpenAI-compatible APIs (OpenAI, DeepSeek, Zhipu, Qwen, Moonshot, ...)
    OPENAI_COMPATIBLE = "OpenAICompatible"
    ANTHROPIC = "Anthropic"
    GOOGLE = "Google"
    OLLAMA = "Ollama"

    @classmethod
    def from_name(cls, name: str) -> "AIProvider":
        """Map a stored provider name, falling back to OpenAI-compatible."""
        try:
            return cls(name)
        except ValueError:
            return cls.OPENAI_COMPATIBLE


class AISettings(BaseModel):
    """AI provider settings.

    ``base_url``, ``api_key`` and ``model`` are required when parsing a stored
    document; use :meth:`default` for a fresh instance.
    """
    provider: AIProvider = AIProvider.OPENAI_COMPATIBLE
    base_url: str
    api_key: str
    model: str

    @classmethod
    def default(cls) -> "AISettings":
        return cls(
            provider=AIProvider.OPENAI_COMPATIBLE,
            base_url=DEFAULT_AI_BASE_URL,
            api_key="",
            model=DEFAULT_AI_MODEL,
        )


class AppConfig(BaseModel):
    """The persisted application configuration document (config.json)."""
    # Custom database file path; None means the default location is used
    database_path: Optional[str] = None
    ai_settings: AISettings = Field(default_factory=AISettings.default)


class Note(BaseModel):
    """Note record as it appears in export files."""
    id: Optional[int] = None
    title: str
    content: str
    tags: List[str]
    is_favorite: int
    is_deleted: int
    created_at: str
    updated_at: str
    reminder_date: Optional[str] = None
    reminder_enabled: int


class ChatMessage(BaseModel):
    """AI chat message record as it appears in export files."""
    id: Optional[int] = None
    note_id: int
    role: str
    content: str
    timestamp: str


class ExportData(BaseModel):
    """Envelope of a JSON database export."""
    version: str
    exported_at: str
    notes: List[Note]
    chat_messages: List[ChatMessage]


class DatabaseInfo(BaseModel):
    """Location and size of the database file in use."""
    path: str
    exists: bool
    size: int
    size_formatted: str
    is_custom: bool


class ImportSummary(BaseModel):
    """Record counts found in an import_database_json payload."""
    notes_count: int
    messages_count: int


class IndexedDBImportResult(BaseModel):
    """Record counts found in a legacy IndexedDB dump."""
    success: bool = True
    notes_imported: int
    messages_imported: int
