"""Exceptions raised by category-sieve.

Input validation errors (``InvalidStudyType``, ``MissingCategoryPath``,
``MissingQuery``, ``InvalidTopN``) are raised at the request boundary, before the
ranking engine is entered. ``CategoryNotFound`` is raised while walking the
keyword hierarchy and is normalized to an empty keyword set by the resolver.
"""


class CategorySieveError(Exception):
    """Base class for all category-sieve errors."""


class InvalidStudyType(CategorySieveError, ValueError):
    """Study type is not one of the supported values."""

    def __init__(self, study_type: object):
        self.study_type = study_type
        super().__init__(
            f'Study type must be either "animal" or "human", got {study_type!r}'
        )


class MissingCategoryPath(CategorySieveError, ValueError):
    """No category path was supplied."""

    def __init__(self) -> None:
        super().__init__("At least one category path is required")


class MissingQuery(CategorySieveError, ValueError):
    """No drug/topic query was supplied where one is required."""

    def __init__(self) -> None:
        super().__init__("Query parameter is required")


class InvalidTopN(CategorySieveError, ValueError):
    """top_n is not a positive integer."""

    def __init__(self, top_n: object):
        self.top_n = top_n
        super().__init__(f"top_n must be a positive integer, got {top_n!r}")


class CategoryNotFound(CategorySieveError, LookupError):
    """A category path segment does not exist in the hierarchy."""

    def __init__(self, study_type: str, category_path: str, segment: str = ""):
        self.study_type = study_type
        self.category_path = category_path
        self.segment = segment
        detail = f" (unresolved segment {segment!r})" if segment else ""
        super().__init__(
            f"Category {category_path!r} not found for {study_type} studies{detail}"
        )


class HierarchyLoadError(CategorySieveError):
    """The keyword hierarchy resource could not be loaded."""

    def __init__(self, source: str, message: str):
        self.source = source
        self.message = message
        super().__init__(f"[{source}] {message}")
