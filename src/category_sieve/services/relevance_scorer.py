"""Relevance scorer: one article x one category keyword set x one drug query.

Scoring is an ordered pipeline of named stages. Each stage reads the prepared
inputs, records match evidence on a call-local state and returns the points it
adds (a multiplier stage returns the difference it makes). Point values come
from ``ScoringWeights``.

Stages, in order:

    drug_presence        drug query in title (+150) or abstract (+80), plus a
                         mention-frequency bonus
    full_path_in_title   "Parent > Child" path in the title (+500 / +100)
    inner_keywords       subheading terms anywhere in title+abstract (+300 / +50)
    mesh_terms           article MeSH vs filter MeSH (+20 / +15 / +8)
    title_keywords       filter terms in the title (+8 whole word / +4 partial)
    title_mesh_cross     title and MeSH both matched (+10)
    abstract_keywords    filter terms in the abstract (+5 / +2)
    article_keywords     article keyword field vs filter terms (+3)
    match_type_bonus     x1.5 for 3+ evidence types, x1.2 for 2; sets filter_score
    parent_only          flags parent-only articles with no category signal
    drug_and_filter      drug + category signal (+200 / +120 + frequency), or a
                         small consolation for drug-only hits
"""

import logging
import math
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Callable

from category_sieve.constants import FULL_PATH_SEPARATOR, FULL_PATH_TITLE_SEPARATORS
from category_sieve.helpers.text_helpers import (
    clean_term,
    contains_word,
    count_substrings,
    count_words,
    strip_tag,
)
from category_sieve.models.model_article import Article
from category_sieve.models.model_category import CategoryNames, KeywordSet, StudyType
from category_sieve.models.model_score import (
    MatchEvidence,
    ScoreResult,
    ScoringEvent,
    ScoringWeights,
)
from category_sieve.services.events import ScoringEventSink
from category_sieve.services.keyword_resolver import KeywordResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringInput:
    """Lowercased article text and cleaned filter terms, prepared once per call."""

    article: Article
    title: str
    abstract: str
    drug_query: str
    drug_label: str
    # (tag-stripped term as written, lowercase form), union of all three classes
    filter_terms: tuple[tuple[str, str], ...]
    filter_mesh: tuple[str, ...]
    category: CategoryNames

    @property
    def full_text(self) -> str:
        return f"{self.title} {self.abstract}"


@dataclass
class ScoringState:
    """Running score and evidence for one scoring call."""

    score: int = 0
    mesh_matches: list[str] = field(default_factory=list)
    title_matches: list[str] = field(default_factory=list)
    abstract_matches: list[str] = field(default_factory=list)
    keyword_matches: list[str] = field(default_factory=list)
    drug_matches: list[str] = field(default_factory=list)
    has_drug: bool = False
    drug_in_title: bool = False
    drug_in_abstract: bool = False
    drug_mention_count: int = 0
    title_has_full_path: bool = False
    title_has_inner_keywords: bool = False
    title_has_parent_only: bool = False
    title_keyword_hits: int = 0
    filter_score: int = 0
    has_drug_and_filter: bool = False
    should_reject_parent_only: bool = False

    @property
    def evidence(self) -> MatchEvidence:
        return MatchEvidence(
            mesh_matches=tuple(dict.fromkeys(self.mesh_matches)),
            title_matches=tuple(dict.fromkeys(self.title_matches)),
            abstract_matches=tuple(dict.fromkeys(self.abstract_matches)),
            keyword_matches=tuple(dict.fromkeys(self.keyword_matches)),
            drug_matches=tuple(dict.fromkeys(self.drug_matches)),
        )


StageResult = tuple[int, str]
Stage = Callable[[ScoringWeights, ScoringInput, ScoringState], StageResult]


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------


def drug_presence(w: ScoringWeights, inp: ScoringInput, st: ScoringState) -> StageResult:
    query = inp.drug_query
    if not query:
        return 0, ""

    st.drug_in_title = contains_word(inp.title, query)
    st.drug_in_abstract = contains_word(inp.abstract, query)
    partial = False
    found = st.drug_in_title or st.drug_in_abstract
    if not found and len(query) >= w.drug_substring_min_length:
        st.drug_in_title = query in inp.title
        st.drug_in_abstract = query in inp.abstract
        partial = True
    st.has_drug = st.drug_in_title or st.drug_in_abstract
    if not st.has_drug:
        return 0, ""

    st.drug_mention_count = count_words(inp.full_text, query) or count_substrings(
        inp.full_text, query
    )
    st.drug_matches.append(inp.drug_label)

    base = w.drug_in_title if st.drug_in_title else w.drug_in_abstract
    frequency = w.drug_frequency_bonus(st.drug_mention_count)
    where = "title" if st.drug_in_title else "abstract"
    kind = "partial" if partial else "whole word"
    return base + frequency, (
        f"{kind} match in {where}, {st.drug_mention_count} mention(s)"
    )


def full_path_in_title(
    w: ScoringWeights, inp: ScoringInput, st: ScoringState
) -> StageResult:
    full_path = inp.category.full_path
    if not full_path:
        return 0, ""

    lowered = full_path.lower()
    variants = {
        lowered.replace(FULL_PATH_SEPARATOR, sep) for sep in FULL_PATH_TITLE_SEPARATORS
    }
    st.title_has_full_path = any(v in inp.title for v in variants)
    if not st.title_has_full_path:
        return 0, ""

    st.title_matches.append(full_path)
    if st.has_drug:
        return w.full_path_with_drug, f"drug + {full_path!r} in title"
    return w.full_path_without_drug, f"{full_path!r} in title"


def inner_keywords(w: ScoringWeights, inp: ScoringInput, st: ScoringState) -> StageResult:
    category = inp.category
    if st.title_has_full_path or not category.is_subheading:
        return 0, ""

    text = inp.full_text
    st.title_has_inner_keywords = any(k in text for k in category.inner_keywords if k)
    parent = category.parent_name.lower()
    st.title_has_parent_only = (
        bool(parent) and parent in text and not st.title_has_inner_keywords
    )
    if not st.title_has_inner_keywords:
        return 0, "parent name only" if st.title_has_parent_only else ""

    if st.has_drug:
        return w.inner_keyword_with_drug, f"drug + {category.child_name!r} terms"
    return w.inner_keyword_without_drug, f"{category.child_name!r} terms"


def mesh_terms(w: ScoringWeights, inp: ScoringInput, st: ScoringState) -> StageResult:
    if not inp.filter_mesh:
        return 0, ""

    points = 0
    for mesh in inp.article.mesh_terms:
        mesh_lower = mesh.lower()
        mesh_words = mesh_lower.split()
        for filter_mesh in inp.filter_mesh:
            if mesh_lower == filter_mesh:
                gained = w.mesh_exact
            elif filter_mesh in mesh_lower or mesh_lower in filter_mesh:
                gained = w.mesh_partial
            elif any(
                mw in fw or fw in mw for mw in mesh_words for fw in filter_mesh.split()
            ):
                gained = w.mesh_word
            else:
                continue
            points += gained
            st.mesh_matches.append(mesh)
            break
    return points, f"{len(st.mesh_matches)} MeSH match(es)" if points else ""


def title_keywords(w: ScoringWeights, inp: ScoringInput, st: ScoringState) -> StageResult:
    if not inp.title:
        return 0, ""

    points = 0
    for term, term_lower in inp.filter_terms:
        if contains_word(inp.title, term_lower):
            points += w.title_word
        elif term_lower in inp.title:
            points += w.title_partial
        else:
            continue
        st.title_matches.append(term)
        st.title_keyword_hits += 1
    return points, f"{st.title_keyword_hits} title term(s)" if points else ""


def title_mesh_cross(
    w: ScoringWeights, inp: ScoringInput, st: ScoringState
) -> StageResult:
    if st.title_keyword_hits and st.mesh_matches:
        return w.title_mesh_cross_bonus, "title and MeSH both matched"
    return 0, ""


def abstract_keywords(
    w: ScoringWeights, inp: ScoringInput, st: ScoringState
) -> StageResult:
    if not inp.abstract:
        return 0, ""

    points = 0
    for term, term_lower in inp.filter_terms:
        if contains_word(inp.abstract, term_lower):
            points += w.abstract_word
        elif len(term_lower) > w.abstract_partial_min_length and term_lower in inp.abstract:
            points += w.abstract_partial
        else:
            continue
        st.abstract_matches.append(term)
    return points, f"{len(st.abstract_matches)} abstract term(s)" if points else ""


def article_keywords(
    w: ScoringWeights, inp: ScoringInput, st: ScoringState
) -> StageResult:
    points = 0
    for keyword in inp.article.keywords:
        keyword_lower = keyword.lower()
        if any(term_lower in keyword_lower for _, term_lower in inp.filter_terms):
            points += w.article_keyword
            st.keyword_matches.append(keyword)
    return points, f"{len(st.keyword_matches)} article keyword(s)" if points else ""


def match_type_bonus(
    w: ScoringWeights, inp: ScoringInput, st: ScoringState
) -> StageResult:
    match_types = st.evidence.match_types
    multiplier = w.match_type_multiplier(match_types)
    # Exact rational arithmetic so that e.g. 35 * 1.2 floors to 42, not 41.
    boosted = math.floor(st.score * Fraction(str(multiplier)))
    st.filter_score = boosted
    if boosted == st.score:
        return 0, ""
    return boosted - st.score, f"x{multiplier} for {match_types} match types"


def parent_only(w: ScoringWeights, inp: ScoringInput, st: ScoringState) -> StageResult:
    st.should_reject_parent_only = st.title_has_parent_only and st.filter_score == 0
    return 0, "parent-only, no category signal" if st.should_reject_parent_only else ""


def drug_and_filter(
    w: ScoringWeights, inp: ScoringInput, st: ScoringState
) -> StageResult:
    if not st.has_drug:
        return 0, ""

    if st.filter_score > 0:
        st.has_drug_and_filter = True
        if st.drug_in_title:
            base = w.drug_and_filter_title
        elif st.drug_in_abstract:
            base = w.drug_and_filter_abstract
        else:
            base = 0
        return base + w.drug_frequency_bonus(st.drug_mention_count), "drug + category"

    # filter_score already includes the drug points, so this branch is only
    # reached when the drug weights award nothing (zeroed in custom weights).
    if st.drug_in_title:
        return w.drug_only_title, "drug only"
    return w.drug_only_abstract, "drug only"


SCORING_STAGES: tuple[tuple[str, Stage], ...] = (
    ("drug_presence", drug_presence),
    ("full_path_in_title", full_path_in_title),
    ("inner_keywords", inner_keywords),
    ("mesh_terms", mesh_terms),
    ("title_keywords", title_keywords),
    ("title_mesh_cross", title_mesh_cross),
    ("abstract_keywords", abstract_keywords),
    ("article_keywords", article_keywords),
    ("match_type_bonus", match_type_bonus),
    ("parent_only", parent_only),
    ("drug_and_filter", drug_and_filter),
)


# ---------------------------------------------------------------------------
# Scorer
# ---------------------------------------------------------------------------


class RelevanceScorer:
    """Scores articles against category keyword sets.

    Args:
        resolver: Used to look up category display names for the title-locality
            stages.
        weights: Point table; defaults to ``ScoringWeights()``.
        event_sink: Optional receiver of one ``ScoringEvent`` per stage that
            changed the score. Scoring does not depend on it.
    """

    def __init__(
        self,
        resolver: KeywordResolver,
        weights: ScoringWeights | None = None,
        event_sink: ScoringEventSink | None = None,
    ):
        self.resolver = resolver
        self.weights = weights or ScoringWeights()
        self.event_sink = event_sink

    def prepare(
        self,
        article: Article,
        keyword_set: KeywordSet,
        drug_query: str | None = None,
        study_type: StudyType | str | None = None,
        category_path: str | None = None,
        category_names: CategoryNames | None = None,
    ) -> ScoringInput:
        filter_terms: dict[str, str] = {}
        for term in keyword_set.all_terms():
            term_lower = clean_term(term)
            if term_lower and term_lower not in filter_terms:
                filter_terms[term_lower] = strip_tag(term)

        if category_names is not None:
            category = category_names
        elif study_type and category_path:
            category = self.resolver.resolve_category_names(study_type, category_path)
        else:
            category = CategoryNames()

        return ScoringInput(
            article=article,
            title=article.title.lower(),
            abstract=article.abstract.lower(),
            drug_query=(drug_query or "").strip().lower(),
            drug_label=(drug_query or "").strip(),
            filter_terms=tuple((term, lower) for lower, term in filter_terms.items()),
            filter_mesh=tuple(
                t for t in (clean_term(m) for m in keyword_set.mesh_terms) if t
            ),
            category=category,
        )

    def score(
        self,
        article: Article,
        keyword_set: KeywordSet,
        drug_query: str | None = None,
        study_type: StudyType | str | None = None,
        category_path: str | None = None,
        category_names: CategoryNames | None = None,
    ) -> ScoreResult:
        """Score one article against one category's keyword set and a drug query.

        ``category_names`` skips the display-name lookup when the caller already
        resolved it for ``category_path``.
        """
        inp = self.prepare(
            article, keyword_set, drug_query, study_type, category_path, category_names
        )
        state = ScoringState()

        for stage_name, stage in SCORING_STAGES:
            delta, detail = stage(self.weights, inp, state)
            state.score += delta
            if delta and self.event_sink is not None:
                self.event_sink.emit(
                    ScoringEvent(
                        pmid=article.pmid,
                        category_path=category_path,
                        stage=stage_name,
                        delta=delta,
                        score=state.score,
                        detail=detail,
                    )
                )

        evidence = state.evidence
        logger.debug(
            "Scored %s for %s: %d (filter %d, %d match types)",
            article.pmid,
            category_path,
            state.score,
            state.filter_score,
            evidence.match_types,
        )
        return ScoreResult(
            score=state.score,
            matches=evidence,
            match_types=evidence.match_types,
            has_drug_and_filter=state.has_drug_and_filter,
            has_drug=state.has_drug,
            drug_in_title=state.drug_in_title,
            drug_in_abstract=state.drug_in_abstract,
            drug_mention_count=state.drug_mention_count,
            filter_score=state.filter_score,
            title_has_full_path=state.title_has_full_path,
            title_has_inner_keywords=state.title_has_inner_keywords,
            should_reject_parent_only=state.should_reject_parent_only,
        )
