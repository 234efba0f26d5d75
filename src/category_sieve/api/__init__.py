"""HTTP API for category-sieve."""
