"""Database infrastructure - shared engine and ORM primitives."""
