import logging
from datetime import date

from category_sieve.constants import (
    CONTROLLED_TRIAL_PATH_MARKERS,
    EARLIEST_PUBLICATION_YEAR,
    META_ANALYSIS_PATH_MARKERS,
    QUERY_KEYWORD_LIMIT,
    STUDY_TYPE_MESH_FILTERS,
    UNCONTROLLED_PATH_MARKERS,
)
from category_sieve.models.model_category import StudyType
from category_sieve.models.model_search_request import SearchPlan, SearchRequest
from category_sieve.services.keyword_resolver import KeywordResolver

logger = logging.getLogger(__name__)


def _publication_type_clause(category_path: str) -> str:
    if any(marker in category_path for marker in CONTROLLED_TRIAL_PATH_MARKERS):
        return (
            " NOT (Meta-Analysis[Publication Type] OR Systematic Review[Publication Type]"
            " OR Review[Publication Type])"
        )
    if any(marker in category_path for marker in META_ANALYSIS_PATH_MARKERS):
        return (
            " AND (Meta-Analysis[Publication Type]"
            " OR Systematic Review[Publication Type])"
        )
    if any(marker in category_path for marker in UNCONTROLLED_PATH_MARKERS):
        return (
            " NOT (Randomized Controlled Trial[Publication Type]"
            " OR Meta-Analysis[Publication Type])"
        )
    return ""


def build_search_query(
    query: str,
    heading_keyword: str = "",
    category_keywords: list[str] | None = None,
    study_type: StudyType | str | None = None,
    category_path: str = "",
    year_from: int | None = None,
    year_to: int | None = None,
    has_abstract: bool = False,
    free_full_text: bool = False,
    full_text: bool = False,
) -> str:
    """Build a PubMed search string for a drug query narrowed to a category.

    e.g. ``cefixime AND Pharmacokinetics AND (Absorption OR Bioavailability)``
    followed by the study-type MeSH filter and any date/availability filters.
    Only the first few category keywords are OR-ed in.
    """
    search = query.strip()
    if heading_keyword:
        search = f"{search} AND {heading_keyword}"

    if category_keywords:
        keywords = " OR ".join(category_keywords[:QUERY_KEYWORD_LIMIT])
        search = f"{search} AND ({keywords})"

    if study_type:
        search = f"{search} AND {STUDY_TYPE_MESH_FILTERS[StudyType(study_type).value]}"

    if category_path:
        search += _publication_type_clause(category_path)

    if year_from or year_to:
        start = year_from or EARLIEST_PUBLICATION_YEAR
        end = year_to or date.today().year
        search = f"{search} AND {start}:{end}[dp]"

    if has_abstract:
        search = f"{search} AND hasabstract"
    if free_full_text:
        search = f"{search} AND free full text[sb]"
    if full_text:
        search = f"{search} AND full text[sb]"

    return search


def plan_search_query(resolver: KeywordResolver, request: SearchRequest) -> SearchPlan:
    """Resolve heading and category keywords for the first requested path.

    Custom keywords on the request replace the hierarchy's primary keywords.
    """
    first_path = request.category_paths[0]
    heading_keyword = resolver.resolve_heading_keyword(request.study_type, first_path)

    if request.custom_keywords:
        category_keywords = list(request.custom_keywords)
        logger.info("Using custom keywords: %s", ", ".join(category_keywords))
    else:
        category_keywords = resolver.resolve_primary_search_keywords(
            request.study_type, first_path
        )

    query = build_search_query(
        request.query,
        heading_keyword=heading_keyword,
        category_keywords=category_keywords,
        study_type=request.study_type,
        category_path=first_path,
        year_from=request.year_from,
        year_to=request.year_to,
        has_abstract=request.has_abstract,
        free_full_text=request.free_full_text,
        full_text=request.full_text,
    )
    logger.debug("PubMed search query: %s", query)
    return SearchPlan(
        query=query,
        heading_keyword=heading_keyword,
        category_keywords=category_keywords,
    )
