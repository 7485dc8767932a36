"""Services for the JD Notes backend."""
