"""Boundary validation of caller inputs (CLI options, API bodies)."""

from typing import Iterable

from category_sieve.config import get_settings
from category_sieve.errors import (
    InvalidStudyType,
    InvalidTopN,
    MissingCategoryPath,
    MissingQuery,
)
from category_sieve.models.model_category import StudyType
from category_sieve.models.model_search_request import SearchRequest


def split_csv(value: str | Iterable[str] | None) -> list[str]:
    """Split a comma-joined string (or flatten a list of them), dropping blanks."""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    return [part.strip() for item in value for part in item.split(",") if part.strip()]


def parse_category_paths(value: str | Iterable[str] | None) -> list[str]:
    """``"pharmacokinetics.absorption, pharmacokinetics.metabolism"`` -> list of paths."""
    return split_csv(value)


def parse_study_type(value: object) -> StudyType:
    if isinstance(value, StudyType):
        return value
    try:
        return StudyType(str(value).strip().lower())
    except ValueError as e:
        raise InvalidStudyType(value) from e


def validate_search_request(
    query: str | None,
    study_type: object,
    category_paths: str | Iterable[str] | None,
    top_n: int | None = None,
    custom_keywords: str | Iterable[str] | None = None,
    year_from: int | None = None,
    year_to: int | None = None,
    has_abstract: bool = False,
    free_full_text: bool = False,
    full_text: bool = False,
    require_query: bool = True,
) -> SearchRequest:
    """Check caller inputs and return a frozen SearchRequest.

    Ranking an already retrieved batch does not need a query (drug signals are
    then simply absent), so pass ``require_query=False`` there.

    Raises:
        MissingQuery: query is empty and ``require_query`` is set.
        InvalidStudyType: study_type is not "animal" or "human".
        MissingCategoryPath: no non-empty category path was given.
        InvalidTopN: top_n is less than 1.
    """
    query = (query or "").strip()
    if require_query and not query:
        raise MissingQuery()

    paths = parse_category_paths(category_paths)
    if not paths:
        raise MissingCategoryPath()

    parsed_study_type = parse_study_type(study_type)

    if top_n is None:
        top_n = get_settings().default_top_n
    if isinstance(top_n, bool) or not isinstance(top_n, int) or top_n < 1:
        raise InvalidTopN(top_n)

    return SearchRequest(
        query=query,
        study_type=parsed_study_type,
        category_paths=tuple(paths),
        top_n=top_n,
        custom_keywords=tuple(split_csv(custom_keywords)),
        year_from=year_from,
        year_to=year_to,
        has_abstract=has_abstract,
        free_full_text=free_full_text,
        full_text=full_text,
    )
