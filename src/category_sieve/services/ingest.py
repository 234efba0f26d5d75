"""Normalize raw article records into validated Article models."""

import logging
from typing import Any, Iterable

from pydantic import ValidationError

from category_sieve.models.model_article import Article

logger = logging.getLogger(__name__)


def ingest_articles(raw: Iterable[dict[str, Any] | Article]) -> list[Article]:
    """Validate a batch of upstream records.

    Records that fail validation or have neither a title nor an abstract are
    skipped; when a pmid repeats, the first record wins. Input order is kept.
    """
    articles: dict[str, Article] = {}
    invalid = empty = duplicates = 0

    for record in raw:
        try:
            article = (
                record if isinstance(record, Article) else Article.model_validate(record)
            )
        except ValidationError as e:
            invalid += 1
            logger.warning("Skipping invalid article record: %s", e.errors()[0]["msg"])
            continue

        if not article.has_text:
            empty += 1
            logger.debug("Skipping %s: no title or abstract", article.pmid)
            continue
        if article.pmid in articles:
            duplicates += 1
            continue
        articles[article.pmid] = article

    if invalid or empty or duplicates:
        logger.warning(
            "Ingested %d articles (skipped %d invalid, %d without text, %d duplicate)",
            len(articles),
            invalid,
            empty,
            duplicates,
        )
    return list(articles.values())
