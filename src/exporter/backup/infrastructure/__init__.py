"""Infrastructure adapters for the backup context."""
