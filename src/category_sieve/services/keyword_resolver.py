"""Keyword resolver: category path -> keyword set, search keywords and display names.

Aggregation depends on how deep the selected path is:

  * top category ("pharmacokinetics"): the node plus every descendant, plus the
    category's display name, for a broad search;
  * subcategory ("pharmacokinetics.absorption"): the node plus its types (one
    level only), for a narrow search;
  * type ("pharmacokinetics.absorption.oral"): the node alone.
"""

import logging

from category_sieve.constants import (
    CATEGORY_PATH_SEPARATOR,
    FULL_PATH_SEPARATOR,
    MAX_CATEGORY_DEPTH,
    PRIMARY_KEYWORD_CAP_BROAD,
    PRIMARY_KEYWORD_CAP_NARROW,
    PRIMARY_KEYWORD_MESH_SHARE,
    PRIMARY_MESH_STOPLIST,
    PRIMARY_TEXT_MIN_LENGTH_BROAD,
    PRIMARY_TEXT_MIN_LENGTH_NARROW,
    PRIMARY_TEXT_STOPLIST_NARROW,
)
from category_sieve.errors import CategoryNotFound
from category_sieve.helpers.text_helpers import (
    clean_term,
    strip_tag,
    unique,
    unique_casefold,
)
from category_sieve.models.model_category import (
    CategoryNames,
    CategoryNode,
    CategoryOutline,
    KeywordHierarchy,
    KeywordSet,
    StudyType,
)

logger = logging.getLogger(__name__)


def split_category_path(category_path: str) -> list[str]:
    return [part.strip() for part in category_path.split(CATEGORY_PATH_SEPARATOR)]


def normalize_category_path(category_path: str) -> str:
    """Canonical spelling of a path: segments stripped of surrounding whitespace."""
    return CATEGORY_PATH_SEPARATOR.join(split_category_path(category_path))


class KeywordResolver:
    """Resolves category paths against an injected, read-only keyword hierarchy."""

    def __init__(self, hierarchy: KeywordHierarchy):
        self.hierarchy = hierarchy

    def find_path(
        self, study_type: StudyType | str, category_path: str
    ) -> list[CategoryNode]:
        """Walk the hierarchy and return the node at each level of the path.

        Segment 1 is looked up in the study's categories, segment 2 in that
        category's subcategories and segment 3 in the subcategory's types.

        Raises:
            CategoryNotFound: if any segment cannot be resolved, a segment is
                empty, or the path is deeper than three levels.
        """
        study_type = StudyType(study_type)
        parts = split_category_path(category_path or "")
        if len(parts) > MAX_CATEGORY_DEPTH:
            raise CategoryNotFound(study_type.value, category_path)

        children = self.hierarchy.for_study(study_type).categories
        nodes: list[CategoryNode] = []
        for depth, part in enumerate(parts):
            node = children.get(part) if part else None
            if node is None:
                raise CategoryNotFound(study_type.value, category_path, part)
            nodes.append(node)
            children = node.subcategories if depth == 0 else node.types
        return nodes

    def resolve_keywords(
        self, study_type: StudyType | str, category_path: str
    ) -> KeywordSet:
        """Resolve the keyword set for a category path.

        Unknown paths resolve to an empty KeywordSet so a request degrades to
        "no category signal" instead of failing.
        """
        try:
            nodes = self.find_path(study_type, category_path)
        except CategoryNotFound as e:
            logger.warning("%s; using an empty keyword set", e)
            return KeywordSet()

        node = nodes[-1]
        if len(nodes) == 1:
            sources = list(_walk(node))
        elif len(nodes) == 2:
            sources = [node, *node.types.values()]
        else:
            sources = [node]

        keywords = [k for n in sources for k in n.keywords]
        mesh_terms = [m for n in sources for m in n.mesh_terms]
        text_keywords = [t for n in sources for t in n.text_keywords]

        if len(nodes) == 1 and node.name:
            keywords.append(node.name)
            text_keywords.append(node.name)

        keyword_set = KeywordSet(
            keywords=tuple(unique(keywords)),
            mesh_terms=tuple(unique(mesh_terms)),
            text_keywords=tuple(unique(text_keywords)),
        )
        logger.debug(
            "Resolved %s > %s (%s search): %d terms",
            StudyType(study_type).value,
            category_path,
            "broad" if len(nodes) == 1 else "narrow",
            keyword_set.total,
        )
        return keyword_set

    def resolve_primary_search_keywords(
        self, study_type: StudyType | str, category_path: str
    ) -> list[str]:
        """Pick a short list of terms for building an external search query.

        MeSH terms fill roughly 60% of the cap first (generic terms skipped),
        then text keywords fill the rest. Broad (top category) paths allow 8
        terms, narrow paths 3, with a stricter text-keyword filter.
        """
        keyword_set = self.resolve_keywords(study_type, category_path)
        if keyword_set.is_empty:
            return []

        broad = len(split_category_path(category_path)) == 1
        cap = PRIMARY_KEYWORD_CAP_BROAD if broad else PRIMARY_KEYWORD_CAP_NARROW
        mesh_cap = max(1, round(cap * PRIMARY_KEYWORD_MESH_SHARE))

        mesh_candidates = unique_casefold(
            strip_tag(term)
            for term in keyword_set.mesh_terms
            if clean_term(term) and clean_term(term) not in PRIMARY_MESH_STOPLIST
        )
        primary = mesh_candidates[:mesh_cap]

        for term in keyword_set.text_keywords:
            if len(primary) >= cap:
                break
            if not _is_primary_text_keyword(clean_term(term), broad):
                continue
            primary = unique_casefold([*primary, strip_tag(term)])

        return primary

    def resolve_category_names(
        self, study_type: StudyType | str, category_path: str
    ) -> CategoryNames:
        """Collect display names along the path plus the deepest node's own terms."""
        try:
            nodes = self.find_path(study_type, category_path)
        except CategoryNotFound as e:
            logger.debug("%s; no category names", e)
            return CategoryNames()

        node = nodes[-1]
        inner_keywords = unique(
            term
            for term in (
                clean_term(t) for t in (*node.keywords, *node.text_keywords, node.name)
            )
            if term
        )
        return CategoryNames(
            parent_name=nodes[0].name,
            child_name=node.name if len(nodes) > 1 else "",
            full_path=FULL_PATH_SEPARATOR.join(n.name for n in nodes),
            is_subheading=len(nodes) > 1,
            inner_keywords=tuple(inner_keywords),
        )

    def resolve_heading_keyword(
        self, study_type: StudyType | str, category_path: str
    ) -> str:
        """Display name of the path's top-level category ("" when unknown)."""
        top_key = split_category_path(category_path or "")[0]
        category = self.hierarchy.for_study(study_type).categories.get(top_key)
        return category.name if category else ""

    def category_outline(self, study_type: StudyType | str) -> list[CategoryOutline]:
        """Key/name/path tree of every category for a study type."""
        return [
            _outline(node, node.key or key)
            for key, node in self.hierarchy.for_study(study_type).categories.items()
        ]


def _walk(node: CategoryNode):
    """Yield a node and every descendant, depth first."""
    yield node
    for child in (*node.subcategories.values(), *node.types.values()):
        yield from _walk(child)


def _is_primary_text_keyword(term: str, broad: bool) -> bool:
    if broad:
        return len(term) > PRIMARY_TEXT_MIN_LENGTH_BROAD
    return (
        len(term) > PRIMARY_TEXT_MIN_LENGTH_NARROW
        and term not in PRIMARY_TEXT_STOPLIST_NARROW
    )


def _outline(node: CategoryNode, path: str) -> CategoryOutline:
    children = node.subcategories or node.types
    return CategoryOutline(
        key=node.key,
        name=node.name,
        path=path,
        children=[
            _outline(child, f"{path}{CATEGORY_PATH_SEPARATOR}{child_key}")
            for child_key, child in children.items()
        ],
    )
