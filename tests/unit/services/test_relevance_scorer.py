"""Unit tests for services/relevance_scorer."""

import pytest

from category_sieve.models.model_category import KeywordSet
from category_sieve.models.model_score import ScoringWeights
from category_sieve.services.events import CollectingEventSink
from category_sieve.services.relevance_scorer import (
    SCORING_STAGES,
    RelevanceScorer,
    ScoringState,
    match_type_bonus,
)

ABSORPTION = "pharmacokinetics.absorption"


@pytest.fixture
def absorption_keywords(resolver) -> KeywordSet:
    return resolver.resolve_keywords("human", ABSORPTION)


def _score(scorer, article, keyword_set, drug=None, path=ABSORPTION):
    return scorer.score(article, keyword_set, drug, "human", path)


# --- Drug presence ---


def test_drug_in_title_with_subheading_terms(scorer, make_article, absorption_keywords):
    article = make_article(title="Absorption of cefixime in healthy volunteers")

    result = _score(scorer, article, absorption_keywords, drug="cefixime")

    # 150 drug in title + 300 inner keyword with drug + 8 "absorption" in title,
    # x1.0 for one match type, + 200 drug-and-filter
    assert result.score == 658
    assert result.filter_score == 458
    assert result.has_drug and result.drug_in_title and not result.drug_in_abstract
    assert result.drug_mention_count == 1
    assert result.has_drug_and_filter
    assert result.title_has_inner_keywords
    assert not result.title_has_full_path
    assert result.matches.title_matches == ("absorption",)
    assert result.matches.drug_matches == ("cefixime",)
    assert result.match_types == 1


def test_drug_frequency_tiers_use_title_and_abstract(scorer, make_article):
    article = make_article(
        title="Cefixime tablets",
        abstract="Cefixime was given. Plasma cefixime peaked early; cefixime was safe.",
    )

    result = scorer.score(article, KeywordSet(), "cefixime")

    assert result.drug_mention_count == 4
    # 150 + 25 (>= 3 mentions), no category signal, then 200 + 25 drug-and-filter
    assert result.score == 400


def test_drug_only_in_abstract(scorer, make_article):
    article = make_article(title="Tablet study", abstract="We measured cefixime.")

    result = scorer.score(article, KeywordSet(), "cefixime")

    assert result.drug_in_abstract and not result.drug_in_title
    assert result.score == 80 + 120


def test_substring_fallback_for_long_queries(scorer, make_article):
    article = make_article(title="Cefixime trihydrate tablets")

    assert scorer.score(article, KeywordSet(), "cefix").has_drug
    assert not scorer.score(article, KeywordSet(), "cef").has_drug


def test_drug_matching_is_case_insensitive(scorer, make_article):
    article = make_article(title="CEFIXIME in otitis media")

    assert scorer.score(article, KeywordSet(), "Cefixime").drug_in_title


def test_drug_bonus_is_monotonic(scorer, make_article, absorption_keywords):
    article = make_article(
        title="Bioavailability of cefixime",
        abstract="The absorption rate of cefixime was measured.",
    )

    with_drug = _score(scorer, article, absorption_keywords, drug="cefixime")
    without_drug = _score(scorer, article, absorption_keywords, drug=None)
    missing_drug = _score(scorer, article, absorption_keywords, drug="amoxicillin")

    assert with_drug.score >= without_drug.score
    assert with_drug.score >= missing_drug.score
    assert missing_drug.score == without_drug.score


# --- Category locality ---


def test_full_path_in_title_with_drug(scorer, make_article, absorption_keywords):
    article = make_article(title="Pharmacokinetics: absorption of cefixime")

    result = _score(scorer, article, absorption_keywords, drug="cefixime")

    assert result.title_has_full_path
    assert not result.title_has_inner_keywords
    assert "Pharmacokinetics > Absorption" in result.matches.title_matches
    # 150 drug + 500 full path + 8 "absorption" in title, x1.0, + 200
    assert result.score == 858


def test_full_path_in_title_without_drug(scorer, make_article, absorption_keywords):
    article = make_article(title="Pharmacokinetics - Absorption")

    result = _score(scorer, article, absorption_keywords)

    assert result.title_has_full_path
    # 100 full path + 8 "absorption" in title
    assert result.score == 108


def test_full_path_needs_category_context(scorer, make_article, absorption_keywords):
    article = make_article(title="Pharmacokinetics: absorption of cefixime")

    result = scorer.score(article, absorption_keywords, "cefixime")

    assert not result.title_has_full_path


def test_parent_only_article_flagged(scorer, resolver, make_article):
    keyword_set = resolver.resolve_keywords("human", "pharmacokinetics.distribution")
    article = make_article(title="Pharmacokinetics of a new tablet")

    result = _score(scorer, article, keyword_set, path="pharmacokinetics.distribution")

    assert result.filter_score == 0
    assert result.should_reject_parent_only


def test_parent_only_not_flagged_when_any_keyword_matches(scorer, resolver, make_article):
    keyword_set = resolver.resolve_keywords("human", "pharmacokinetics.distribution")
    article = make_article(
        title="Pharmacokinetics of a new tablet",
        abstract="Tissue distribution was not assessed.",
    )

    result = _score(scorer, article, keyword_set, path="pharmacokinetics.distribution")

    assert result.filter_score > 0
    assert not result.should_reject_parent_only


# --- Keyword matching and multiplier ---


def test_all_evidence_types_with_multiplier(scorer, make_article, absorption_keywords):
    article = make_article(
        title="Oral bioavailability of a new tablet",
        abstract="The absorption rate was measured after oral administration.",
        mesh_terms=["Biological Availability", "Humans"],
        keywords=["bioavailability"],
    )

    result = _score(scorer, article, absorption_keywords)

    # 50 inner keyword + 20 MeSH exact + 8 title + 10 cross + 15 abstract + 3 keyword
    # = 106, x1.5 for four match types
    assert result.score == 159
    assert result.filter_score == 159
    assert result.match_types == 4
    assert result.matches.mesh_matches == ("Biological Availability",)
    assert result.matches.title_matches == ("bioavailability",)
    assert result.matches.abstract_matches == (
        "absorption",
        "oral administration",
        "absorption rate",
    )
    assert result.matches.keyword_matches == ("bioavailability",)
    assert not result.has_drug


@pytest.mark.parametrize(
    "mesh_term, points",
    [
        ("Intestinal Absorption", 20),
        ("Absorption", 15),
        ("Drug Absorption Studies", 8),
    ],
)
def test_mesh_match_tiers(scorer, make_article, mesh_term, points):
    keyword_set = KeywordSet(mesh_terms=("Intestinal Absorption[MeSH]",))
    article = make_article(title="x", mesh_terms=[mesh_term])

    result = scorer.score(article, keyword_set)

    assert result.score == points
    assert result.matches.mesh_matches == (mesh_term,)


def test_abstract_partial_needs_terms_longer_than_four(scorer, make_article):
    article = make_article(abstract="pre-oralism and nonbioavailability")

    short = scorer.score(article, KeywordSet(keywords=("oral",)))
    long = scorer.score(article, KeywordSet(keywords=("bioavailability",)))

    assert short.score == 0
    assert long.score == 2


def test_title_partial_match(scorer, make_article):
    article = make_article(title="Nonbioavailability compared")

    result = scorer.score(article, KeywordSet(keywords=("bioavailability",)))

    assert result.score == 4


def test_match_type_multiplier_uses_exact_arithmetic():
    state = ScoringState(score=35, title_matches=["a"], abstract_matches=["b"])

    delta, _ = match_type_bonus(ScoringWeights(), None, state)

    assert delta == 7
    assert state.filter_score == 42


def test_empty_article_scores_zero(scorer, make_article, absorption_keywords):
    result = _score(scorer, make_article(), absorption_keywords, drug="cefixime")

    assert result.score == 0
    assert result.match_types == 0
    assert not result.has_drug


def test_custom_weights(resolver, make_article):
    scorer = RelevanceScorer(resolver, weights=ScoringWeights(drug_in_title=1000))

    result = scorer.score(make_article(title="Cefixime"), KeywordSet(), "cefixime")

    assert result.score == 1000 + 200


def test_drug_only_points_need_zeroed_drug_weights(resolver, make_article):
    article = make_article(title="Cefixime tablets")
    weights = ScoringWeights(drug_in_title=0, drug_in_abstract=0, drug_frequency_tiers=())

    default = RelevanceScorer(resolver).score(article, KeywordSet(), "cefixime")
    zeroed = RelevanceScorer(resolver, weights=weights).score(
        article, KeywordSet(), "cefixime"
    )

    # Drug points count towards filter_score, so the default path is drug + category
    assert default.has_drug_and_filter
    assert zeroed.has_drug and not zeroed.has_drug_and_filter
    assert zeroed.score == weights.drug_only_title


# --- Events ---


def test_events_emitted_for_scoring_stages(resolver, make_article, absorption_keywords):
    sink = CollectingEventSink()
    scorer = RelevanceScorer(resolver, event_sink=sink)
    article = make_article(pmid="7", title="Absorption of cefixime in healthy volunteers")

    result = scorer.score(article, absorption_keywords, "cefixime", "human", ABSORPTION)

    assert sink.stages("7") == [
        "drug_presence",
        "inner_keywords",
        "title_keywords",
        "drug_and_filter",
    ]
    assert sum(e.delta for e in sink.events) == result.score
    assert sink.events[-1].score == result.score


def test_stage_order():
    assert [name for name, _ in SCORING_STAGES][0] == "drug_presence"
    assert [name for name, _ in SCORING_STAGES][-1] == "drug_and_filter"
