"""Domain layer for the backup context."""
