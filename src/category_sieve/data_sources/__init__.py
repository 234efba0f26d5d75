"""Loaders for external resources (keyword hierarchy)."""
