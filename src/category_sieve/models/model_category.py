"""Keyword hierarchy models.

The hierarchy is loaded once per process (see
``category_sieve.data_sources.keyword_hierarchy``) and shared read-only by every
resolver and scorer, so all models here are frozen.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from category_sieve.constants import STUDY_TYPE_KEYS


class StudyType(str, Enum):
    ANIMAL = "animal"
    HUMAN = "human"

    @property
    def hierarchy_key(self) -> str:
        """Top-level key of this study type in the hierarchy resource."""
        return STUDY_TYPE_KEYS[self.value]


def _keyed_children(children: Any) -> Any:
    """Carry each mapping key onto its child node (``key`` is implied by position)."""
    if not isinstance(children, dict):
        return children
    keyed = {}
    for child_key, child in children.items():
        if isinstance(child, dict) and not child.get("key"):
            child = {**child, "key": child_key}
        elif isinstance(child, CategoryNode) and not child.key:
            child = child.model_copy(update={"key": child_key})
        keyed[child_key] = child
    return keyed


class CategoryNode(BaseModel):
    """One node of a study type's category tree.

    A top category holds ``subcategories``; a subcategory holds ``types``. Terms
    may carry a trailing PubMed tag (``[MeSH]``, ``[tiab]``) that is stripped
    before matching.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: str = ""
    name: str = ""
    keywords: tuple[str, ...] = ()
    mesh_terms: tuple[str, ...] = Field(default=(), alias="meshTerms")
    text_keywords: tuple[str, ...] = Field(default=(), alias="textKeywords")
    subcategories: dict[str, "CategoryNode"] = {}
    types: dict[str, "CategoryNode"] = {}

    @model_validator(mode="before")
    @classmethod
    def coerce_nones(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        values = {k: v for k, v in values.items() if v is not None}
        for field_name in ("subcategories", "types"):
            if field_name in values:
                values[field_name] = _keyed_children(values[field_name])
        return values


class StudyCategories(BaseModel):
    """The category tree for one study type."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    categories: dict[str, CategoryNode] = {}

    @model_validator(mode="before")
    @classmethod
    def key_categories(cls, values: Any) -> Any:
        if isinstance(values, dict) and values.get("categories") is not None:
            values = {**values, "categories": _keyed_children(values["categories"])}
        return values


class KeywordHierarchy(BaseModel):
    """Category trees for both study types."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    animal_studies: StudyCategories = Field(
        default_factory=StudyCategories, alias="animalStudies"
    )
    human_studies: StudyCategories = Field(
        default_factory=StudyCategories, alias="humanStudies"
    )

    def for_study(self, study_type: StudyType | str) -> StudyCategories:
        if StudyType(study_type) is StudyType.ANIMAL:
            return self.animal_studies
        return self.human_studies


class KeywordSet(BaseModel):
    """Resolved keyword set for one category path.

    Each class is de-duplicated and kept in first-seen order.
    """

    model_config = ConfigDict(frozen=True)

    keywords: tuple[str, ...] = ()
    mesh_terms: tuple[str, ...] = ()
    text_keywords: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.keywords or self.mesh_terms or self.text_keywords)

    @property
    def total(self) -> int:
        return len(self.keywords) + len(self.mesh_terms) + len(self.text_keywords)

    def all_terms(self) -> tuple[str, ...]:
        """keywords, then MeSH terms, then text keywords (raw, tags kept)."""
        return self.keywords + self.mesh_terms + self.text_keywords


class CategoryNames(BaseModel):
    """Display names along a category path, used for title-locality checks."""

    model_config = ConfigDict(frozen=True)

    parent_name: str = ""
    child_name: str = ""
    full_path: str = ""
    is_subheading: bool = False
    inner_keywords: tuple[str, ...] = ()


class CategoryOutline(BaseModel):
    """Simplified key/name/path tree for category pickers."""

    key: str
    name: str
    path: str
    children: list["CategoryOutline"] = []
