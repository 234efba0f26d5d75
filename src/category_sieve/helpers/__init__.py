"""Text matching helpers."""
