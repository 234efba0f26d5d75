"""Unit tests for the keyword hierarchy loader."""

import json

import pytest

from category_sieve.constants import DEFAULT_KEYWORD_MAPPINGS_PATH
from category_sieve.data_sources.keyword_hierarchy import (
    load_keyword_hierarchy,
    parse_keyword_hierarchy,
)
from category_sieve.errors import HierarchyLoadError
from category_sieve.models.model_category import StudyType


def test_load_keyword_hierarchy_from_file(tmp_path, hierarchy_data):
    path = tmp_path / "mappings.json"
    path.write_text(json.dumps(hierarchy_data), encoding="utf-8")

    hierarchy = load_keyword_hierarchy(path)

    assert set(hierarchy.animal_studies.categories) == {"pharmacokinetics", "toxicology"}
    assert hierarchy.human_studies.name == "Human Studies"


def test_bundled_mappings_load():
    hierarchy = load_keyword_hierarchy(DEFAULT_KEYWORD_MAPPINGS_PATH)

    human = hierarchy.for_study(StudyType.HUMAN).categories
    animal = hierarchy.for_study(StudyType.ANIMAL).categories
    assert {"efficacy", "safety", "pharmacokinetics"} <= set(human)
    assert {"pharmacokinetics", "toxicology"} <= set(animal)
    assert "oral" in animal["pharmacokinetics"].subcategories["absorption"].types


def test_missing_file_raises(tmp_path):
    with pytest.raises(HierarchyLoadError, match="File not found"):
        load_keyword_hierarchy(tmp_path / "missing.json")


def test_invalid_json_raises(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(HierarchyLoadError, match="Failed to parse"):
        load_keyword_hierarchy(path)


def test_non_object_root_raises():
    with pytest.raises(HierarchyLoadError):
        parse_keyword_hierarchy(["not", "a", "mapping"])


def test_schema_violation_raises():
    with pytest.raises(HierarchyLoadError, match="Invalid hierarchy"):
        parse_keyword_hierarchy({"humanStudies": {"categories": {"x": {"keywords": 5}}}})


def test_types_on_top_category_rejected():
    data = {
        "humanStudies": {
            "categories": {"safety": {"name": "Safety", "types": {"a": {}}}}
        }
    }

    with pytest.raises(HierarchyLoadError, match="subcategories"):
        parse_keyword_hierarchy(data)


def test_fourth_level_rejected():
    data = {
        "animalStudies": {
            "categories": {
                "pk": {
                    "subcategories": {
                        "absorption": {
                            "types": {"oral": {"types": {"gavage": {"name": "Gavage"}}}}
                        }
                    }
                }
            }
        }
    }

    with pytest.raises(HierarchyLoadError, match="maximum depth"):
        parse_keyword_hierarchy(data)


def test_error_message_names_source():
    err = HierarchyLoadError("mappings.json", "boom")

    assert str(err) == "[mappings.json] boom"
    assert err.source == "mappings.json"
