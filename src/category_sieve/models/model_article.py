"""Article model: the typed boundary for externally supplied search results."""

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

# Keys under which XML-to-dict converters store an element's text content.
_TEXT_NODE_KEYS = ("_", "#text", "text")


def coerce_text(value: Any) -> str:
    """Collapse a loosely typed upstream value into plain text.

    ``None`` becomes ``""``; XML text nodes (``{"_": "..."}``) yield their text;
    lists are space-joined; anything else goes through ``str``.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        for key in _TEXT_NODE_KEYS:
            if key in value:
                return coerce_text(value[key])
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(text for text in (coerce_text(v) for v in value) if text)
    return str(value)


def coerce_text_list(value: Any) -> list[str]:
    """Coerce an upstream value into a list of non-empty strings."""
    if value is None:
        return []
    if not isinstance(value, (list, tuple, set, frozenset)):
        value = [value]
    return [text for text in (coerce_text(v).strip() for v in value) if text]


class Article(BaseModel):
    """One literature search result.

    Upstream sources do not guarantee clean types, so every field is coerced on
    construction; the ranking engine never has to probe types at runtime.
    Accepts snake_case or camelCase keys (``mesh_terms`` / ``meshTerms``).
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    pmid: str
    title: str = ""
    abstract: str = ""
    authors: tuple[str, ...] = ()
    journal: str = ""
    publication_date: str = ""
    mesh_terms: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    url: str = ""

    @field_validator("pmid", mode="before")
    @classmethod
    def coerce_pmid(cls, value: Any) -> str:
        pmid = coerce_text(value).strip()
        if not pmid:
            raise ValueError("pmid is required")
        return pmid

    @field_validator(
        "title", "abstract", "journal", "publication_date", "url", mode="before"
    )
    @classmethod
    def coerce_text_fields(cls, value: Any) -> str:
        return coerce_text(value)

    @field_validator("authors", "mesh_terms", "keywords", mode="before")
    @classmethod
    def coerce_list_fields(cls, value: Any) -> list[str]:
        return coerce_text_list(value)

    @property
    def has_text(self) -> bool:
        return bool(self.title.strip() or self.abstract.strip())
