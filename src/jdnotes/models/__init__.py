"""Data models for the JD Notes backend."""
