"""HTTP layer for the intake service."""
