"""Pytest configuration and fixtures."""

import pytest

from category_sieve.data_sources.keyword_hierarchy import parse_keyword_hierarchy
from category_sieve.models.model_article import Article
from category_sieve.models.model_category import KeywordHierarchy
from category_sieve.services.keyword_resolver import KeywordResolver
from category_sieve.services.ranker import CategoryRanker
from category_sieve.services.relevance_scorer import RelevanceScorer


def _pharmacokinetics() -> dict:
    return {
        "name": "Pharmacokinetics",
        "keywords": ["pharmacokinetics"],
        "meshTerms": ["Pharmacokinetics[MeSH]"],
        "textKeywords": ["Cmax[tiab]", "AUC[tiab]"],
        "subcategories": {
            "absorption": {
                "name": "Absorption",
                "keywords": ["absorption", "bioavailability"],
                "meshTerms": [
                    "Intestinal Absorption[MeSH]",
                    "Biological Availability[MeSH]",
                ],
                "textKeywords": ["absorption rate[tiab]"],
                "types": {
                    "oral": {
                        "name": "Oral",
                        "keywords": ["oral administration"],
                        "meshTerms": ["Administration, Oral[MeSH]"],
                        "textKeywords": ["orally[tiab]"],
                    }
                },
            },
            "distribution": {
                "name": "Distribution",
                "keywords": ["distribution", "protein binding"],
                "meshTerms": ["Tissue Distribution[MeSH]"],
                "textKeywords": ["volume of distribution[tiab]"],
            },
        },
    }


@pytest.fixture
def hierarchy_data() -> dict:
    """A small hierarchy in the on-disk JSON shape."""
    return {
        "animalStudies": {
            "name": "Animal Studies",
            "categories": {
                "pharmacokinetics": _pharmacokinetics(),
                "toxicology": {
                    "name": "Toxicology",
                    "keywords": ["toxicity"],
                    "meshTerms": ["Toxicity Tests[MeSH]"],
                    "textKeywords": ["LD50[tiab]"],
                },
            },
        },
        "humanStudies": {
            "name": "Human Studies",
            "categories": {
                "efficacy": {
                    "name": "Efficacy",
                    "keywords": ["efficacy", "effectiveness"],
                    "meshTerms": ["Treatment Outcome[MeSH]", "Efficacy[MeSH]"],
                    "textKeywords": ["clinical response[tiab]"],
                    "subcategories": {
                        "pediatrics": {
                            "name": "Pediatrics",
                            "keywords": ["children", "pediatric"],
                            "meshTerms": ["Child[MeSH]"],
                            "textKeywords": ["paediatric[tiab]"],
                        },
                        "placeboControlled": {
                            "name": "Placebo Controlled",
                            "keywords": ["placebo"],
                            "meshTerms": ["Placebos[MeSH]"],
                            "textKeywords": ["double-blind[tiab]"],
                        },
                    },
                },
                "pharmacokinetics": _pharmacokinetics(),
            },
        },
    }


@pytest.fixture
def hierarchy(hierarchy_data) -> KeywordHierarchy:
    return parse_keyword_hierarchy(hierarchy_data)


@pytest.fixture
def resolver(hierarchy) -> KeywordResolver:
    return KeywordResolver(hierarchy)


@pytest.fixture
def scorer(resolver) -> RelevanceScorer:
    return RelevanceScorer(resolver)


@pytest.fixture
def ranker(resolver) -> CategoryRanker:
    return CategoryRanker(resolver)


@pytest.fixture
def make_article():
    """Factory for Article instances with sensible empty defaults."""

    def _make(pmid: str = "1", title: str = "", abstract: str = "", **fields) -> Article:
        return Article(pmid=pmid, title=title, abstract=abstract, **fields)

    return _make
