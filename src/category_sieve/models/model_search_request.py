"""Validated search/ranking request."""

from pydantic import BaseModel, ConfigDict

from category_sieve.models.model_category import StudyType


class SearchRequest(BaseModel):
    """Caller inputs after boundary validation (see services.request_validation)."""

    model_config = ConfigDict(frozen=True)

    query: str = ""
    study_type: StudyType
    category_paths: tuple[str, ...]
    top_n: int = 30
    custom_keywords: tuple[str, ...] = ()
    year_from: int | None = None
    year_to: int | None = None
    has_abstract: bool = False
    free_full_text: bool = False
    full_text: bool = False


class SearchPlan(BaseModel):
    """A PubMed query plus the category terms that went into it."""

    query: str
    heading_keyword: str = ""
    category_keywords: list[str] = []
