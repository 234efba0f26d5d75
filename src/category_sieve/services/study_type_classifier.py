"""Study-type classifier: drop articles whose species context conflicts with the request.

Only articles with a clear signal for the other study type are removed; anything
kept is still subject to scoring.
"""

import logging

from category_sieve.constants import (
    ANIMAL_MESH_TERMS,
    ANIMAL_MODEL_TITLE_PHRASES,
    ANIMAL_TERMS,
    CLINICAL_TITLE_PHRASES,
    HUMAN_MESH_TERMS,
    HUMAN_TERMS,
    STRONG_ANIMAL_TERMS,
)
from category_sieve.helpers.text_helpers import contains_word
from category_sieve.models.model_article import Article
from category_sieve.models.model_category import StudyType

logger = logging.getLogger(__name__)

MESH_WEIGHT = 10
TITLE_WEIGHT = 3
ABSTRACT_WEIGHT = 1
ANIMAL_STUDY_MIN_ANIMAL_SCORE = 3


def has_mesh_indicator(mesh_terms: tuple[str, ...], indicators: tuple[str, ...]) -> bool:
    """True if any indicator occurs inside any single MeSH term (case-insensitive)."""
    lowered = [m.lower() for m in mesh_terms]
    return any(indicator in mesh for indicator in indicators for mesh in lowered)


def _term_votes(text: str, terms: tuple[str, ...], weight: int) -> int:
    return weight * sum(1 for term in terms if contains_word(text, term))


def species_scores(article: Article) -> tuple[int, int]:
    """Weighted (animal_score, human_score) votes for an article.

    A MeSH indicator hit is worth 10, each listed term in the title 3 and each
    in the abstract 1.
    """
    title = article.title.lower()
    abstract = article.abstract.lower()

    animal_score = MESH_WEIGHT * has_mesh_indicator(article.mesh_terms, ANIMAL_MESH_TERMS)
    human_score = MESH_WEIGHT * has_mesh_indicator(article.mesh_terms, HUMAN_MESH_TERMS)

    animal_score += _term_votes(title, ANIMAL_TERMS, TITLE_WEIGHT)
    animal_score += _term_votes(abstract, ANIMAL_TERMS, ABSTRACT_WEIGHT)
    human_score += _term_votes(title, HUMAN_TERMS, TITLE_WEIGHT)
    human_score += _term_votes(abstract, HUMAN_TERMS, ABSTRACT_WEIGHT)

    return animal_score, human_score


def should_exclude(article: Article, study_type: StudyType | str) -> bool:
    """Return True if the article's species context conflicts with study_type."""
    study_type = StudyType(study_type)
    title = article.title.lower()
    has_animal_mesh = has_mesh_indicator(article.mesh_terms, ANIMAL_MESH_TERMS)
    has_human_mesh = has_mesh_indicator(article.mesh_terms, HUMAN_MESH_TERMS)
    animal_score, human_score = species_scores(article)

    if study_type is StudyType.HUMAN:
        if any(phrase in title for phrase in ANIMAL_MODEL_TITLE_PHRASES):
            logger.debug("Excluding %s: animal model in title", article.pmid)
            return True
        if has_animal_mesh and not has_human_mesh:
            logger.debug("Excluding %s: animal MeSH without human MeSH", article.pmid)
            return True
        strong_animal_in_title = any(
            contains_word(title, term) for term in STRONG_ANIMAL_TERMS
        )
        if strong_animal_in_title and human_score < animal_score:
            logger.debug(
                "Excluding %s: animal species in title (animal=%d, human=%d)",
                article.pmid,
                animal_score,
                human_score,
            )
            return True
        return False

    clinical_in_title = any(phrase in title for phrase in CLINICAL_TITLE_PHRASES) or (
        "patients" in title and "study" in title
    )
    if clinical_in_title:
        logger.debug("Excluding %s: clinical study in title", article.pmid)
        return True
    if (
        has_human_mesh
        and not has_animal_mesh
        and animal_score < ANIMAL_STUDY_MIN_ANIMAL_SCORE
    ):
        logger.debug("Excluding %s: human MeSH without animal signal", article.pmid)
        return True
    return False
