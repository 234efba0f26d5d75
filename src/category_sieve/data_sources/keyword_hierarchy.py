"""
Keyword hierarchy loader.

Reads the category/keyword tree for both study types from a JSON resource:

    {
      "animalStudies": {"name": ..., "categories": {<key>: <node>, ...}},
      "humanStudies":  {"name": ..., "categories": {<key>: <node>, ...}}
    }

where each node carries ``name``, ``keywords``, ``meshTerms``, ``textKeywords``
and optionally ``subcategories`` (top categories) or ``types`` (subcategories).
The result is a frozen ``KeywordHierarchy`` that callers inject into the
resolver; it is never mutated after load.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path

from pydantic import ValidationError

from category_sieve.config import get_settings
from category_sieve.constants import MAX_CATEGORY_DEPTH
from category_sieve.errors import HierarchyLoadError
from category_sieve.models.model_category import CategoryNode, KeywordHierarchy

logger = logging.getLogger(__name__)

_SOURCE_NAME = "keyword_hierarchy"


def parse_keyword_hierarchy(data: dict, source: str = _SOURCE_NAME) -> KeywordHierarchy:
    """Validate raw mapping data into a KeywordHierarchy.

    Raises:
        HierarchyLoadError: if the data does not match the expected shape or a
            tree is deeper than category -> subcategory -> type.
    """
    if not isinstance(data, dict):
        raise HierarchyLoadError(source, "Hierarchy root must be a JSON object")

    try:
        hierarchy = KeywordHierarchy.model_validate(data)
    except ValidationError as e:
        raise HierarchyLoadError(source, f"Invalid hierarchy: {e}") from e

    for study in (hierarchy.animal_studies, hierarchy.human_studies):
        for category in study.categories.values():
            _check_depth(category, depth=1, source=source)

    return hierarchy


def _check_depth(node: CategoryNode, depth: int, source: str) -> None:
    if depth == 1 and node.types:
        raise HierarchyLoadError(
            source, f"Top category {node.key!r} must use 'subcategories', not 'types'"
        )
    if depth == 2 and node.subcategories:
        raise HierarchyLoadError(
            source, f"Subcategory {node.key!r} must use 'types', not 'subcategories'"
        )
    if depth == MAX_CATEGORY_DEPTH and (node.subcategories or node.types):
        raise HierarchyLoadError(
            source,
            f"Category {node.key!r} exceeds the maximum depth of {MAX_CATEGORY_DEPTH}",
        )
    for child in (*node.subcategories.values(), *node.types.values()):
        _check_depth(child, depth + 1, source)


def load_keyword_hierarchy(path: Path | None = None) -> KeywordHierarchy:
    """Load the keyword hierarchy from a JSON file.

    Args:
        path: JSON resource to read. Defaults to ``Settings.keyword_mappings_path``
            (the bundled ``data/keyword_mappings.json`` unless overridden).

    Raises:
        HierarchyLoadError: if the file is missing, not valid JSON, or malformed.
    """
    path = Path(path) if path is not None else get_settings().keyword_mappings_path

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise HierarchyLoadError(_SOURCE_NAME, f"File not found: {path}") from e
    except json.JSONDecodeError as e:
        raise HierarchyLoadError(_SOURCE_NAME, f"Failed to parse {path}: {e}") from e

    hierarchy = parse_keyword_hierarchy(raw, source=str(path))
    logger.debug(
        "Loaded keyword hierarchy from %s (%d animal, %d human categories)",
        path,
        len(hierarchy.animal_studies.categories),
        len(hierarchy.human_studies.categories),
    )
    return hierarchy


@lru_cache
def get_keyword_hierarchy() -> KeywordHierarchy:
    """Load the configured hierarchy once per process."""
    return load_keyword_hierarchy()
