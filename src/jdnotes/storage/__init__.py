"""Storage package for the JD Notes backend."""
from jdnotes.storage.config_store import ConfigStore

__all__ = ["ConfigStore"]
