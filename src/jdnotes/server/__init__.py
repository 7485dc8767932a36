"""Command server for the JD Notes backend."""
