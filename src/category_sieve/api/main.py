"""FastAPI application."""

import logging

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from category_sieve import __version__
from category_sieve.config import get_settings
from category_sieve.data_sources.keyword_hierarchy import get_keyword_hierarchy
from category_sieve.errors import CategorySieveError, HierarchyLoadError
from category_sieve.models.model_category import CategoryOutline, StudyType
from category_sieve.models.model_score import RankedArticle
from category_sieve.services.ingest import ingest_articles
from category_sieve.services.keyword_resolver import KeywordResolver
from category_sieve.services.events import LoggingEventSink
from category_sieve.services.ranker import CategoryRanker, highlight_ranked_article
from category_sieve.services.request_validation import (
    parse_study_type,
    validate_search_request,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="category-sieve API",
    description="Rank literature search results by research category",
    version=__version__,
)


class RankRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    articles: list[dict] = []
    study_type: str = "animal"
    category_path: str | list[str] | None = None
    category_paths: list[str] = []
    query: str = ""
    top_n: int | None = None
    highlight: bool = False


class RankResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    query: str
    study_type: str
    categories: list[str]
    retrieved_articles: int
    filtered_articles: int
    articles: list[RankedArticle]


def get_resolver() -> KeywordResolver:
    return KeywordResolver(get_keyword_hierarchy())


@app.exception_handler(CategorySieveError)
async def category_sieve_error_handler(request: Request, exc: CategorySieveError):
    if isinstance(exc, HierarchyLoadError):
        logger.error("Keyword hierarchy unavailable: %s", exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "detail": jsonable_encoder(exc.errors())},
    )


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/categories")
def list_all_categories(
    resolver: KeywordResolver = Depends(get_resolver),
) -> dict[str, list[CategoryOutline]]:
    return {
        study_type.hierarchy_key: resolver.category_outline(study_type)
        for study_type in StudyType
    }


@app.get("/categories/{study_type}")
def list_categories(
    study_type: str, resolver: KeywordResolver = Depends(get_resolver)
) -> list[CategoryOutline]:
    return resolver.category_outline(parse_study_type(study_type))


@app.get("/categories/{study_type}/{category_path}/keywords")
def category_keywords(
    study_type: str,
    category_path: str,
    resolver: KeywordResolver = Depends(get_resolver),
) -> dict:
    """Resolved keyword set, primary search keywords and display names for a path."""
    parsed = parse_study_type(study_type)
    keyword_set = resolver.resolve_keywords(parsed, category_path)
    if keyword_set.is_empty:
        raise HTTPException(
            status_code=404,
            detail=f"No keywords found for {parsed.value} > {category_path}",
        )
    names = resolver.resolve_category_names(parsed, category_path)
    return {
        "studyType": parsed.value,
        "categoryPath": category_path,
        "fullPath": names.full_path,
        "keywords": list(keyword_set.keywords),
        "meshTerms": list(keyword_set.mesh_terms),
        "textKeywords": list(keyword_set.text_keywords),
        "primaryKeywords": resolver.resolve_primary_search_keywords(
            parsed, category_path
        ),
    }


@app.post("/rank", response_model=RankResponse, response_model_by_alias=True)
def rank_articles(
    body: RankRequest, resolver: KeywordResolver = Depends(get_resolver)
) -> RankResponse:
    """Filter and rank a batch of already retrieved articles."""
    request = validate_search_request(
        body.query,
        body.study_type,
        body.category_paths or body.category_path,
        top_n=body.top_n,
        require_query=False,
    )

    settings = get_settings()
    articles = ingest_articles(body.articles[: settings.max_results])
    event_sink = LoggingEventSink() if settings.debug else None
    ranked = CategoryRanker(resolver, event_sink=event_sink).rank(
        articles,
        request.study_type,
        request.category_paths,
        drug_query=request.query,
        top_n=request.top_n,
    )
    if body.highlight:
        ranked = [highlight_ranked_article(item) for item in ranked]
    return RankResponse(
        query=request.query,
        study_type=request.study_type.value,
        categories=list(request.category_paths),
        retrieved_articles=len(articles),
        filtered_articles=len(ranked),
        articles=ranked,
    )
