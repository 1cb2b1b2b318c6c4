"""Application layer for the backup context: the export engine."""
