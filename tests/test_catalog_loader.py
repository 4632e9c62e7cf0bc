import json

import pytest

from stayscore.catalog.loader import load_properties
from stayscore.core.env import resolve_project_path


def test_sample_catalog_loads():
    properties = load_properties(resolve_project_path("data/catalogs/properties.json"))
    assert len(properties) == 6
    assert properties[0].id == "665f1a2b3c4d5e6f70819201"
    assert properties[3].price.monthly == 28000
    assert properties[5].price.usable_monthly is None


def test_wrapped_catalog_and_null_records(tmp_path):
    path = tmp_path / "wrapped.json"
    path.write_text(json.dumps({"properties": [{"id": "a"}, None, "junk"]}), encoding="utf-8")
    properties = load_properties(path)
    assert [p.id for p in properties] == ["a", ""]


def test_catalog_root_must_be_a_list(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"id": "a"}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_properties(path)
