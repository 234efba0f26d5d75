"""Data models for category-sieve."""

from category_sieve.models.model_article import Article
from category_sieve.models.model_category import (
    CategoryNames,
    CategoryNode,
    KeywordHierarchy,
    KeywordSet,
    StudyType,
)
from category_sieve.models.model_score import (
    MatchEvidence,
    RankedArticle,
    ScoreResult,
    ScoringWeights,
)
from category_sieve.models.model_search_request import SearchPlan, SearchRequest

__all__ = [
    "Article",
    "CategoryNames",
    "CategoryNode",
    "KeywordHierarchy",
    "KeywordSet",
    "MatchEvidence",
    "RankedArticle",
    "ScoreResult",
    "ScoringWeights",
    "SearchPlan",
    "SearchRequest",
    "StudyType",
]
