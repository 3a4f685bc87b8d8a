"""Tests for template processing and template schema validation."""

import json
import tempfile
from pathlib import Path

import pytest

from canopy_registry.errors import TemplateError
from canopy_registry.registry.store import RegistryStore
from canopy_registry.templates.processor import process_template
from canopy_registry.templates.schema import get_schema
from canopy_registry.templates.schema_validator import (
    validate_all_templates,
    validate_template_data,
    validate_template_file,
)
from canopy_registry.utils.hashing import json_checksum

from registry_fixtures import CANOPY_TEMPLATE, FIXED_TIMESTAMP, write, write_template

BASE_URL = "https://example.test/registry"


# --- Processor ---


def test_process_template_writes_token_files():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = RegistryStore(tmpdir, BASE_URL)
        write_template(Path(tmpdir), "canopy", CANOPY_TEMPLATE)

        record = process_template(store, "canopy", FIXED_TIMESTAMP)

        template_dir = Path(tmpdir) / "templates" / "canopy"
        assert json.loads((template_dir / "colors.json").read_text()) == CANOPY_TEMPLATE["tokens"]["colors"]
        assert json.loads((template_dir / "spacing.json").read_text()) == CANOPY_TEMPLATE["tokens"]["spacing"]

        assert [tf.type for tf in record.token_files] == ["colors", "spacing"]
        colors = record.token_files[0]
        assert colors.url == f"{BASE_URL}/templates/canopy/colors.json"
        assert colors.checksum == json_checksum(CANOPY_TEMPLATE["tokens"]["colors"])
        assert record.checksum == json_checksum(CANOPY_TEMPLATE)
        assert record.template_url == f"{BASE_URL}/templates/canopy/template.json"
        assert record.personality.key == "calm-comfortable-rounded"
        assert record.last_updated == FIXED_TIMESTAMP


def test_process_template_writes_metadata():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = RegistryStore(tmpdir, BASE_URL)
        write_template(Path(tmpdir), "canopy", CANOPY_TEMPLATE)

        record = process_template(store, "canopy", FIXED_TIMESTAMP)

        metadata = json.loads((Path(tmpdir) / "templates/canopy/metadata.json").read_text())
        assert metadata == record.to_dict()
        assert metadata["metadataUrl"] == f"{BASE_URL}/templates/canopy/metadata.json"
        assert metadata["preview"] == {"primary": "#2f855a"}


def test_template_without_colors_fails_and_writes_nothing():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = RegistryStore(tmpdir, BASE_URL)
        data = dict(CANOPY_TEMPLATE, tokens={"spacing": {"sm": 4}})
        write_template(Path(tmpdir), "canopy", data)

        with pytest.raises(TemplateError, match="tokens.colors"):
            process_template(store, "canopy", FIXED_TIMESTAMP)

        assert not (Path(tmpdir) / "templates/canopy/spacing.json").exists()
        assert not (Path(tmpdir) / "templates/canopy/metadata.json").exists()


def test_malformed_template_json():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = RegistryStore(tmpdir, BASE_URL)
        write(Path(tmpdir) / "templates/bad/template.json", "{not json")

        with pytest.raises(TemplateError, match="Invalid JSON") as excinfo:
            process_template(store, "bad", FIXED_TIMESTAMP)
        assert excinfo.value.template == "bad"


def test_unreadable_template_encoding():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = RegistryStore(tmpdir, BASE_URL)
        path = Path(tmpdir) / "templates/bad/template.json"
        path.parent.mkdir(parents=True)
        path.write_bytes(b'{"name": "bad\xff"}')

        with pytest.raises(TemplateError, match="Invalid JSON"):
            process_template(store, "bad", FIXED_TIMESTAMP)


@pytest.mark.parametrize("group", ["template", "metadata", "../escape", "a/b", ""])
def test_token_group_must_be_a_plain_file_stem(group):
    with tempfile.TemporaryDirectory() as tmpdir:
        store = RegistryStore(tmpdir, BASE_URL)
        tokens = {"colors": {"primary": "#000"}, group: {"x": 1}}
        path = write_template(Path(tmpdir), "canopy", dict(CANOPY_TEMPLATE, tokens=tokens))
        original = path.read_text()

        with pytest.raises(TemplateError, match="Token group"):
            process_template(store, "canopy", FIXED_TIMESTAMP)

        assert path.read_text() == original
        assert sorted(p.name for p in path.parent.iterdir()) == ["template.json"]
        assert not (Path(tmpdir) / "templates" / "escape.json").exists()


def test_template_name_must_match_directory():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = RegistryStore(tmpdir, BASE_URL)
        write_template(Path(tmpdir), "other", CANOPY_TEMPLATE)

        with pytest.raises(TemplateError, match="does not match"):
            process_template(store, "other", FIXED_TIMESTAMP)


# --- Schema ---


def test_schema_requires_colors():
    schema = get_schema()
    assert schema["properties"]["tokens"]["required"] == ["colors"]


def test_valid_template_data():
    assert validate_template_data(CANOPY_TEMPLATE) == []


def test_missing_fields_reported():
    data = {k: v for k, v in CANOPY_TEMPLATE.items() if k not in ("author", "personality")}
    issues = validate_template_data(data)
    assert any("author" in i for i in issues)
    assert any("personality" in i for i in issues)


def test_missing_colors_reported():
    data = dict(CANOPY_TEMPLATE, tokens={"spacing": {}})
    issues = validate_template_data(data)
    assert any("colors" in i for i in issues)


def test_bad_version_and_name_reported():
    data = dict(CANOPY_TEMPLATE, version="latest", name="Not Kebab")
    issues = validate_template_data(data)
    assert any(i.startswith("version 'latest'") for i in issues)
    assert any(i.startswith("name 'Not Kebab'") for i in issues)


def test_wrong_type_reported():
    issues = validate_template_data(dict(CANOPY_TEMPLATE, tokens=[]))
    assert "tokens must be object, got array" in issues


def test_validate_template_file_checks_directory_name():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = write_template(Path(tmpdir), "forest", CANOPY_TEMPLATE)
        issues = validate_template_file(path)
        assert any("does not match template directory" in i for i in issues)


def test_validate_template_file_invalid_json():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = write(Path(tmpdir) / "templates/bad/template.json", "[")
        issues = validate_template_file(path)
        assert any("json" in i.lower() for i in issues)


def test_validate_all_templates():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        write_template(root, "canopy", CANOPY_TEMPLATE)
        (root / "templates" / "empty").mkdir()

        results = validate_all_templates(root / "templates")

        assert results["canopy"] == []
        assert results["empty"] == ["Missing template.json"]


def test_validate_all_templates_without_directory_is_read_only():
    with tempfile.TemporaryDirectory() as tmpdir:
        missing = Path(tmpdir) / "templates"
        assert validate_all_templates(missing) == {}
        assert not missing.exists()


def test_nested_fields_named_by_dotted_path():
    personality = {"spacing": "compact", "roundness": ""}
    issues = validate_template_data(dict(CANOPY_TEMPLATE, personality=personality))
    assert "personality.mood is required" in issues
    assert "personality.roundness must not be empty" in issues


def test_token_groups_must_be_objects_or_arrays():
    tokens = {"colors": {}, "spacing": 4, "shadows": [{"y": 1}]}
    issues = validate_template_data(dict(CANOPY_TEMPLATE, tokens=tokens))
    assert issues == ["tokens.spacing must be object or array, got number"]


def test_colors_group_must_be_an_object():
    issues = validate_template_data(dict(CANOPY_TEMPLATE, tokens={"colors": ["#fff"]}))
    assert issues == ["tokens.colors must be object, got array"]


def test_reserved_token_group_names_reported():
    tokens = {"colors": {}, "template": {}, "metadata": {}, "../up": {}}
    issues = validate_template_data(dict(CANOPY_TEMPLATE, tokens=tokens))
    assert issues == [
        "tokens key 'template' is not allowed",
        "tokens key 'metadata' is not allowed",
        "tokens key '../up' is not allowed",
    ]


def test_non_object_document_reported():
    assert validate_template_data([1, 2]) == ["template must be object, got array"]


def test_validate_template_file_invalid_encoding():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "templates" / "bad" / "template.json"
        path.parent.mkdir(parents=True)
        path.write_bytes(b'{"name": "\xff"}')
        issues = validate_template_file(path)
        assert len(issues) == 1
        assert issues[0].startswith("Invalid JSON")
