"""Scoring models: point table, match evidence and per-article results."""

from pydantic import BaseModel, ConfigDict, computed_field
from pydantic.alias_generators import to_camel

from category_sieve.models.model_article import Article


class ScoringWeights(BaseModel):
    """Point values and multipliers used by the relevance scorer and merger."""

    model_config = ConfigDict(frozen=True)

    # Drug presence
    drug_in_title: int = 150
    drug_in_abstract: int = 80
    # (minimum mentions, bonus), checked in order
    drug_frequency_tiers: tuple[tuple[int, int], ...] = ((5, 40), (3, 25), (2, 15))
    drug_substring_min_length: int = 4

    # Category path locality
    full_path_with_drug: int = 500
    full_path_without_drug: int = 100
    inner_keyword_with_drug: int = 300
    inner_keyword_without_drug: int = 50

    # Keyword matching
    mesh_exact: int = 20
    mesh_partial: int = 15
    mesh_word: int = 8
    title_word: int = 8
    title_partial: int = 4
    title_mesh_cross_bonus: int = 10
    abstract_word: int = 5
    abstract_partial: int = 2
    abstract_partial_min_length: int = 4  # strictly greater than
    article_keyword: int = 3

    # (minimum match types, multiplier), checked in order
    match_type_multipliers: tuple[tuple[int, float], ...] = ((3, 1.5), (2, 1.2))

    # Drug combined with category signal
    drug_and_filter_title: int = 200
    drug_and_filter_abstract: int = 120
    drug_only_title: int = 5
    drug_only_abstract: int = 2

    # Ranking
    accept_min_filter_score: int = 10
    accept_min_match_types: int = 2
    multi_category_bonus: int = 2

    def drug_frequency_bonus(self, mention_count: int) -> int:
        for min_mentions, bonus in self.drug_frequency_tiers:
            if mention_count >= min_mentions:
                return bonus
        return 0

    def match_type_multiplier(self, match_types: int) -> float:
        for min_types, multiplier in self.match_type_multipliers:
            if match_types >= min_types:
                return multiplier
        return 1.0


class MatchEvidence(BaseModel):
    """Terms that matched, grouped by where they matched."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    mesh_matches: tuple[str, ...] = ()
    title_matches: tuple[str, ...] = ()
    abstract_matches: tuple[str, ...] = ()
    keyword_matches: tuple[str, ...] = ()
    drug_matches: tuple[str, ...] = ()

    @property
    def match_types(self) -> int:
        """Number of non-empty category evidence sets (drug matches excluded)."""
        return sum(
            1
            for matches in (
                self.mesh_matches,
                self.title_matches,
                self.abstract_matches,
                self.keyword_matches,
            )
            if matches
        )

    def union(self, other: "MatchEvidence") -> "MatchEvidence":
        """Order-preserving union of every evidence set."""
        return MatchEvidence(
            mesh_matches=_union(self.mesh_matches, other.mesh_matches),
            title_matches=_union(self.title_matches, other.title_matches),
            abstract_matches=_union(self.abstract_matches, other.abstract_matches),
            keyword_matches=_union(self.keyword_matches, other.keyword_matches),
            drug_matches=_union(self.drug_matches, other.drug_matches),
        )


def _union(first: tuple[str, ...], second: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(first + second))


class ScoreResult(BaseModel):
    """Outcome of scoring one article against one category."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    score: int = 0
    matches: MatchEvidence = MatchEvidence()
    match_types: int = 0
    has_drug_and_filter: bool = False
    has_drug: bool = False
    drug_in_title: bool = False
    drug_in_abstract: bool = False
    drug_mention_count: int = 0
    filter_score: int = 0
    title_has_full_path: bool = False
    title_has_inner_keywords: bool = False
    should_reject_parent_only: bool = False


class RankedArticle(BaseModel):
    """An accepted article with its (possibly merged) score."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    article: Article
    result: ScoreResult
    category_paths: tuple[str, ...] = ()
    # Set only when highlighting is requested
    highlighted_title: str | None = None
    highlighted_abstract: str | None = None

    @computed_field(alias="relevanceScore")
    @property
    def relevance_score(self) -> int:
        return self.result.score

    @property
    def pmid(self) -> str:
        return self.article.pmid


class ScoringEvent(BaseModel):
    """One scoring stage outcome or ranking decision, for optional observability."""

    model_config = ConfigDict(frozen=True)

    pmid: str
    category_path: str | None = None
    stage: str
    delta: int = 0
    score: int = 0
    detail: str = ""
