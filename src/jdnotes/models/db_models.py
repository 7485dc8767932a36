"""SQLAlchemy table definitions for the JD Notes database file.

Rows are read and written by the presentation layer's SQL driver. The backend
only makes sure the schema exists in whichever file the config points at.
"""
from pathlib import Path
from typing import Union

from sqlalchemy import (CheckConstraint, Column, ForeignKey, Index, Integer,
                        String, Text, create_engine, event, text)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

# Create base class for SQLAlchemy models
Base = declarative_base()


class DBNote(Base):
    """Database model for a note."""
    __tablename__ = "notes"
    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    # JSON array of tag names
    tags = Column(Text, nullable=False, server_default=text("'[]'"))
    is_favorite = Column(Integer, nullable=False, server_default=text("0"))
    is_deleted = Column(Integer, nullable=False, server_default=text("0"))
    # ISO 8601 timestamps
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)
    reminder_date = Column(Text, nullable=True)
    reminder_enabled = Column(Integer, nullable=False, server_default=text("0"))

    __table_args__ = (
        Index("idx_notes_updated_at", updated_at.desc()),
        Index("idx_notes_created_at", created_at.desc()),
        Index("idx_notes_is_deleted", "is_deleted"),
        Index("idx_notes_is_favorite", "is_favorite"),
        Index("idx_notes_reminder", "reminder_enabled", "reminder_date"),
    )


class DBChatMessage(Base):
    """Database model for an AI chat message attached to a note."""
    __tablename__ = "chat_messages"
    id = Column(Integer, primary_key=True, autoincrement=True)
    note_id = Column(Integer, ForeignKey("notes.id", ondelete="CASCADE"), nullable=False)
    role = Column(String(16), nullable=False)
    content = Column(Text, nullable=False)
    timestamp = Column(Text, nullable=False)

    __table_args__ = (
        CheckConstraint("role IN ('user', 'assistant')", name="ck_chat_messages_role"),
        Index("idx_chat_messages_note_id", "note_id"),
        Index("idx_chat_messages_timestamp", "timestamp"),
    )


class DBAppConfig(Base):
    """Key/value settings stored inside the database file."""
    __tablename__ = "app_config"
    key = Column(Text, primary_key=True)
    value = Column(Text, nullable=False)


def sqlalchemy_url(database_path: Union[str, Path]) -> str:
    """Get the SQLAlchemy URL for a database file."""
    return f"sqlite:///{database_path}"


def init_db(database_path: Union[str, Path]) -> Engine:
    """Create the schema in the database file if it is not there yet.

    Safe to run on every start. The file is created when missing.

    Returns:
        The engine bound to the database file.
    """
    engine = create_engine(sqlalchemy_url(database_path))

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    return engine
