"""Command-line interface for category-sieve."""
