"""Command-line interface for category-sieve."""

import json
import logging
from pathlib import Path

import click

from category_sieve.config import get_settings
from category_sieve.data_sources.keyword_hierarchy import get_keyword_hierarchy
from category_sieve.errors import CategorySieveError
from category_sieve.models.model_category import CategoryOutline, StudyType
from category_sieve.services.events import LoggingEventSink
from category_sieve.services.ingest import ingest_articles
from category_sieve.services.keyword_resolver import KeywordResolver
from category_sieve.services.pubmed_query import plan_search_query
from category_sieve.services.ranker import CategoryRanker, highlight_ranked_article
from category_sieve.services.request_validation import validate_search_request

STUDY_TYPE_CHOICE = click.Choice([s.value for s in StudyType], case_sensitive=False)


def _resolver() -> KeywordResolver:
    try:
        return KeywordResolver(get_keyword_hierarchy())
    except CategorySieveError as e:
        raise click.ClickException(str(e)) from e


def _echo_outline(nodes: list[CategoryOutline], indent: int = 0) -> None:
    for node in nodes:
        click.echo(f"{'  ' * indent}{node.path}  ({node.name})")
        _echo_outline(node.children, indent + 1)


@click.group()
@click.version_option(package_name="category-sieve")
def main():
    """category-sieve: rank literature search results by research category."""
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("study_type", type=STUDY_TYPE_CHOICE)
def categories(study_type: str):
    """List the category tree for a study type."""
    _echo_outline(_resolver().category_outline(study_type.lower()))


@main.command()
@click.argument("study_type", type=STUDY_TYPE_CHOICE)
@click.argument("category_path")
def keywords(study_type: str, category_path: str):
    """Show the resolved keywords for a category path."""
    resolver = _resolver()
    study_type = study_type.lower()
    keyword_set = resolver.resolve_keywords(study_type, category_path)
    if keyword_set.is_empty:
        raise click.ClickException(
            f"No keywords found for {study_type} > {category_path}"
        )

    names = resolver.resolve_category_names(study_type, category_path)
    click.echo(f"Category: {names.full_path}")
    click.echo(f"Keywords ({len(keyword_set.keywords)}): {', '.join(keyword_set.keywords)}")
    click.echo(
        f"MeSH terms ({len(keyword_set.mesh_terms)}): {', '.join(keyword_set.mesh_terms)}"
    )
    click.echo(
        f"Text keywords ({len(keyword_set.text_keywords)}): "
        f"{', '.join(keyword_set.text_keywords)}"
    )
    primary = resolver.resolve_primary_search_keywords(study_type, category_path)
    click.echo(f"Primary search keywords: {', '.join(primary)}")


@main.command()
@click.option("-q", "--query", required=True, help="Drug or topic to search for")
@click.option("-s", "--study-type", type=STUDY_TYPE_CHOICE, required=True)
@click.option(
    "-c", "--category-path", required=True, help="Comma-separated category paths"
)
@click.option("--custom-keywords", help="Comma-separated keywords to use instead")
@click.option("--year-from", type=int)
@click.option("--year-to", type=int)
@click.option("--has-abstract", is_flag=True)
@click.option("--free-full-text", is_flag=True)
@click.option("--full-text", is_flag=True)
def query(
    query: str,
    study_type: str,
    category_path: str,
    custom_keywords: str | None,
    year_from: int | None,
    year_to: int | None,
    has_abstract: bool,
    free_full_text: bool,
    full_text: bool,
):
    """Build the PubMed search query for a drug and category."""
    try:
        request = validate_search_request(
            query,
            study_type,
            category_path,
            custom_keywords=custom_keywords,
            year_from=year_from,
            year_to=year_to,
            has_abstract=has_abstract,
            free_full_text=free_full_text,
            full_text=full_text,
        )
    except CategorySieveError as e:
        raise click.UsageError(str(e)) from e

    plan = plan_search_query(_resolver(), request)
    click.echo(plan.query)


@main.command()
@click.argument("articles_json", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-q", "--query", default="", help="Drug or topic the articles were searched for"
)
@click.option("-s", "--study-type", type=STUDY_TYPE_CHOICE, required=True)
@click.option(
    "-c", "--category-path", required=True, help="Comma-separated category paths"
)
@click.option("-n", "--top-n", type=int, help="Number of articles to return")
@click.option("-o", "--output", type=click.Path(), help="Output file path (JSON)")
@click.option(
    "--highlight", is_flag=True, help="Mark matched terms in the saved title and abstract"
)
def rank(
    articles_json: str,
    query: str,
    study_type: str,
    category_path: str,
    top_n: int | None,
    output: str | None,
    highlight: bool,
):
    """Rank a JSON list of articles against one or more categories."""
    try:
        request = validate_search_request(
            query, study_type, category_path, top_n=top_n, require_query=False
        )
    except CategorySieveError as e:
        raise click.UsageError(str(e)) from e

    try:
        raw = json.loads(Path(articles_json).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Failed to parse {articles_json}: {e}") from e
    if isinstance(raw, dict):
        raw = raw.get("articles", [])

    articles = ingest_articles(raw)
    event_sink = LoggingEventSink() if get_settings().debug else None
    ranked = CategoryRanker(_resolver(), event_sink=event_sink).rank(
        articles,
        request.study_type,
        request.category_paths,
        drug_query=request.query,
        top_n=request.top_n,
    )
    if highlight:
        ranked = [highlight_ranked_article(item) for item in ranked]

    click.echo(f"Top {len(ranked)} of {len(articles)} articles:")
    for i, item in enumerate(ranked, 1):
        click.echo(
            f"  {i}. [{item.pmid}] {item.article.title} (score: {item.relevance_score})"
        )

    if output:
        payload = {
            "query": request.query,
            "studyType": request.study_type.value,
            "categories": list(request.category_paths),
            "articles": [item.model_dump(mode="json", by_alias=True) for item in ranked],
        }
        Path(output).write_text(json.dumps(payload, indent=2))
        click.echo(f"\nResults saved to: {output}")


if __name__ == "__main__":
    main()
