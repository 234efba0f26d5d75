"""Unit tests for scoring models."""

import pytest

from category_sieve.models.model_article import Article
from category_sieve.models.model_score import (
    MatchEvidence,
    RankedArticle,
    ScoreResult,
    ScoringWeights,
)


@pytest.mark.parametrize(
    "mentions, bonus", [(0, 0), (1, 0), (2, 15), (3, 25), (4, 25), (5, 40), (12, 40)]
)
def test_drug_frequency_bonus(mentions, bonus):
    assert ScoringWeights().drug_frequency_bonus(mentions) == bonus


@pytest.mark.parametrize(
    "match_types, multiplier", [(0, 1.0), (1, 1.0), (2, 1.2), (3, 1.5), (4, 1.5)]
)
def test_match_type_multiplier(match_types, multiplier):
    assert ScoringWeights().match_type_multiplier(match_types) == multiplier


def test_weights_can_be_overridden():
    weights = ScoringWeights(drug_in_title=10)

    assert weights.drug_in_title == 10
    assert weights.drug_in_abstract == 80


def test_match_types_ignores_drug_matches():
    evidence = MatchEvidence(drug_matches=("cefixime",), title_matches=("absorption",))

    assert evidence.match_types == 1


def test_union_is_order_preserving_and_deduplicated():
    first = MatchEvidence(title_matches=("absorption",), mesh_matches=("Rats",))
    second = MatchEvidence(
        title_matches=("distribution", "absorption"), abstract_matches=("uptake",)
    )

    merged = first.union(second)

    assert merged.title_matches == ("absorption", "distribution")
    assert merged.mesh_matches == ("Rats",)
    assert merged.abstract_matches == ("uptake",)
    assert merged.match_types == 3


def test_ranked_article_serializes_with_camel_case_aliases():
    ranked = RankedArticle(
        article=Article(pmid="42", title="T", mesh_terms=["Humans"]),
        result=ScoreResult(score=658, has_drug=True),
        category_paths=("pharmacokinetics",),
    )

    data = ranked.model_dump(mode="json", by_alias=True)

    assert ranked.pmid == "42"
    assert data["relevanceScore"] == 658
    assert data["categoryPaths"] == ["pharmacokinetics"]
    assert data["article"]["meshTerms"] == ["Humans"]
    assert data["result"]["hasDrug"] is True
