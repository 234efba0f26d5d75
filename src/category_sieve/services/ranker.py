"""Ranker/merger: classify, score per category, accept, merge by pmid and order."""

import logging
from collections import Counter
from typing import Iterable

from category_sieve.helpers.text_helpers import highlight_keywords, unique
from category_sieve.models.model_article import Article
from category_sieve.models.model_category import StudyType
from category_sieve.models.model_score import (
    RankedArticle,
    ScoreResult,
    ScoringEvent,
    ScoringWeights,
)
from category_sieve.services.events import ScoringEventSink
from category_sieve.services.keyword_resolver import (
    KeywordResolver,
    normalize_category_path,
)
from category_sieve.services.relevance_scorer import RelevanceScorer
from category_sieve.services.study_type_classifier import should_exclude

logger = logging.getLogger(__name__)


def acceptance_reason(result: ScoreResult, weights: ScoringWeights) -> str | None:
    """Why a scored (article, category) pair is kept, or None if it is rejected."""
    if (
        not result.has_drug_and_filter
        and result.should_reject_parent_only
        and not result.has_drug
    ):
        return None
    if result.has_drug:
        return "drug"
    if result.filter_score >= weights.accept_min_filter_score:
        return "filter score"
    if result.match_types >= weights.accept_min_match_types:
        return "match types"
    return None


def merge_score_results(
    first: ScoreResult, second: ScoreResult, weights: ScoringWeights
) -> ScoreResult:
    """Combine results for the same article accepted under two categories.

    Evidence is unioned, the score is the larger one plus a small bonus, boolean
    signals are ORed and counts take the maximum.
    """
    matches = first.matches.union(second.matches)
    return ScoreResult(
        score=max(first.score, second.score) + weights.multi_category_bonus,
        matches=matches,
        match_types=matches.match_types,
        has_drug_and_filter=first.has_drug_and_filter or second.has_drug_and_filter,
        has_drug=first.has_drug or second.has_drug,
        drug_in_title=first.drug_in_title or second.drug_in_title,
        drug_in_abstract=first.drug_in_abstract or second.drug_in_abstract,
        drug_mention_count=max(first.drug_mention_count, second.drug_mention_count),
        filter_score=max(first.filter_score, second.filter_score),
        title_has_full_path=first.title_has_full_path or second.title_has_full_path,
        title_has_inner_keywords=(
            first.title_has_inner_keywords or second.title_has_inner_keywords
        ),
        should_reject_parent_only=(
            first.should_reject_parent_only and second.should_reject_parent_only
        ),
    )


def ranking_key(ranked: RankedArticle) -> tuple:
    """Sort key: tiered boolean priorities, then score, then pmid for a total order."""
    r = ranked.result
    return (
        not (r.title_has_full_path and r.has_drug),
        not (r.title_has_inner_keywords and r.has_drug),
        -r.score,
        not r.has_drug_and_filter,
        not r.drug_in_title,
        -r.drug_mention_count,
        -r.match_types,
        ranked.pmid,
    )


def highlight_ranked_article(ranked: RankedArticle) -> RankedArticle:
    """Copy of ``ranked`` with its matched terms marked in the title and abstract."""
    matches = ranked.result.matches
    terms = [
        *matches.drug_matches,
        *matches.title_matches,
        *matches.abstract_matches,
        *matches.keyword_matches,
        *matches.mesh_matches,
    ]
    return ranked.model_copy(
        update={
            "highlighted_title": highlight_keywords(ranked.article.title, terms),
            "highlighted_abstract": highlight_keywords(ranked.article.abstract, terms),
        }
    )


def _bucket(result: ScoreResult) -> str:
    if result.title_has_full_path and result.has_drug:
        return "full_path+drug"
    if result.title_has_inner_keywords and result.has_drug:
        return "inner_keywords+drug"
    if result.has_drug_and_filter:
        return "drug+filter"
    # Needs custom weights: with the defaults any drug hit gives filter_score > 0.
    if result.has_drug:
        return "drug_only"
    return "filter_only"


class CategoryRanker:
    """Ranks a batch of articles against one or more categories of one study type.

    Every ``rank`` call is independent: the merge map lives only for the call and
    the hierarchy behind the resolver is never modified.
    """

    def __init__(
        self,
        resolver: KeywordResolver,
        scorer: RelevanceScorer | None = None,
        event_sink: ScoringEventSink | None = None,
    ):
        self.resolver = resolver
        self.event_sink = event_sink
        self.scorer = scorer or RelevanceScorer(resolver, event_sink=event_sink)

    @property
    def weights(self) -> ScoringWeights:
        return self.scorer.weights

    def _emit(
        self, pmid: str, category_path: str | None, stage: str, score: int, detail: str
    ):
        if self.event_sink is not None:
            self.event_sink.emit(
                ScoringEvent(
                    pmid=pmid,
                    category_path=category_path,
                    stage=stage,
                    score=score,
                    detail=detail,
                )
            )

    def rank(
        self,
        articles: Iterable[Article],
        study_type: StudyType | str,
        category_paths: Iterable[str],
        drug_query: str | None = None,
        top_n: int = 30,
    ) -> list[RankedArticle]:
        """Filter, score, merge and order articles.

        Args:
            articles: Candidate articles, already normalized (see services.ingest).
            study_type: "animal" or "human"; drives both exclusion and keyword lookup.
            category_paths: One or more dot-separated paths. Paths that differ only in
                whitespace around segments count as duplicates and are ignored.
            drug_query: Free-text drug/topic; None or "" disables drug signals.
            top_n: Maximum number of results returned.

        Returns:
            Accepted articles, best first, at most ``top_n`` of them.
        """
        study_type = StudyType(study_type)
        paths = unique(
            path for path in map(normalize_category_path, category_paths) if path
        )
        articles = list(articles)

        candidates = [a for a in articles if not should_exclude(a, study_type)]
        excluded = len(articles) - len(candidates)
        if excluded:
            logger.info(
                "Excluded %d of %d articles based on study type %s",
                excluded,
                len(articles),
                study_type.value,
            )

        merged: dict[str, RankedArticle] = {}
        for path in paths:
            keyword_set = self.resolver.resolve_keywords(study_type, path)
            names = self.resolver.resolve_category_names(study_type, path)
            for article in candidates:
                result = self.scorer.score(
                    article,
                    keyword_set,
                    drug_query,
                    study_type,
                    path,
                    category_names=names,
                )
                reason = acceptance_reason(result, self.weights)
                if reason is None:
                    self._emit(article.pmid, path, "rejected", result.score, "")
                    continue
                self._emit(article.pmid, path, "accepted", result.score, reason)

                existing = merged.get(article.pmid)
                if existing is None:
                    merged[article.pmid] = RankedArticle(
                        article=article, result=result, category_paths=(path,)
                    )
                    continue

                combined = merge_score_results(existing.result, result, self.weights)
                merged[article.pmid] = RankedArticle(
                    article=existing.article,
                    result=combined,
                    category_paths=(*existing.category_paths, path),
                )
                self._emit(article.pmid, path, "merged", combined.score, "")

        ranked = sorted(merged.values(), key=ranking_key)[:top_n]

        buckets = Counter(_bucket(r.result) for r in ranked)
        logger.info(
            "Ranked %d of %d accepted articles for %s > [%s]: %s",
            len(ranked),
            len(merged),
            study_type.value,
            ", ".join(paths),
            ", ".join(f"{name}={count}" for name, count in sorted(buckets.items()))
            or "none",
        )
        return ranked
