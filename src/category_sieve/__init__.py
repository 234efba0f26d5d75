"""category-sieve: category-based relevance ranking of literature search results."""

__version__ = "0.1.0"
