"""Unit tests for keyword hierarchy models."""

import pytest
from pydantic import ValidationError

from category_sieve.models.model_category import (
    CategoryNode,
    KeywordHierarchy,
    KeywordSet,
    StudyType,
)


def test_study_type_hierarchy_key():
    assert StudyType("animal").hierarchy_key == "animalStudies"
    assert StudyType.HUMAN.hierarchy_key == "humanStudies"


def test_nodes_take_their_key_from_the_mapping(hierarchy):
    pk = hierarchy.human_studies.categories["pharmacokinetics"]

    assert pk.key == "pharmacokinetics"
    assert pk.subcategories["absorption"].key == "absorption"
    assert pk.subcategories["absorption"].types["oral"].key == "oral"


def test_node_reads_camel_case_term_lists(hierarchy):
    absorption = hierarchy.human_studies.categories["pharmacokinetics"].subcategories[
        "absorption"
    ]

    assert absorption.mesh_terms == (
        "Intestinal Absorption[MeSH]",
        "Biological Availability[MeSH]",
    )
    assert absorption.text_keywords == ("absorption rate[tiab]",)


def test_node_coerce_nones_uses_defaults():
    node = CategoryNode.model_validate(
        {"name": "Safety", "keywords": None, "meshTerms": None, "subcategories": None}
    )

    assert node.keywords == ()
    assert node.mesh_terms == ()
    assert node.subcategories == {}


def test_hierarchy_is_frozen(hierarchy):
    with pytest.raises(ValidationError):
        hierarchy.human_studies.categories["efficacy"].name = "Changed"


def test_for_study(hierarchy):
    assert "toxicology" in hierarchy.for_study("animal").categories
    assert "efficacy" in hierarchy.for_study(StudyType.HUMAN).categories


def test_for_study_rejects_unknown_study_type():
    with pytest.raises(ValueError):
        KeywordHierarchy().for_study("plant")


def test_keyword_set_all_terms_order():
    keyword_set = KeywordSet(
        keywords=("a",), mesh_terms=("B[MeSH]",), text_keywords=("c[tiab]",)
    )

    assert keyword_set.all_terms() == ("a", "B[MeSH]", "c[tiab]")
    assert keyword_set.total == 3
    assert not keyword_set.is_empty
    assert KeywordSet().is_empty
