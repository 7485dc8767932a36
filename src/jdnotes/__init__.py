"""
JD Notes backend - native shell for the JD Notes desktop application.

This package locates and relocates the SQLite database file, persists the
JSON application configuration (database path override and AI-provider
settings) and exposes a small command surface to the presentation layer.
Record-level note and chat-message persistence happens in the presentation
layer's SQL driver, not here.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("jdnotes-backend")
except PackageNotFoundError:
    __version__ = "0.3.0"
