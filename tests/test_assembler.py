"""Tests for registry document assembly."""

from canopy_registry.registry.assembler import (
    build_api_document,
    build_index,
    component_stats,
    template_stats,
)
from canopy_registry.registry.models import ComponentRecord, Personality, TemplateRecord, TokenFile
from canopy_registry.registry.store import RegistryStore

BASE_URL = "https://example.test/registry"
STAMP = "2024-01-01T00:00:00.000Z"


def _component(name: str, category: str, deps=()) -> ComponentRecord:
    return ComponentRecord(
        name=name,
        display_name=name.capitalize(),
        description=f"{name} component",
        category=category,
        version="1.0.0",
        checksum="0" * 32,
        download_url=f"{BASE_URL}/components/{name}/component.tsx.template",
        metadata_url=f"{BASE_URL}/components/{name}/component.json",
        dependencies=tuple(deps),
    )


def _template(name: str, mood: str, groups=("colors",)) -> TemplateRecord:
    return TemplateRecord(
        name=name,
        display_name=name.capitalize(),
        description="",
        author="",
        version="1.0.0",
        last_updated=STAMP,
        template_url="",
        metadata_url="",
        checksum="",
        personality=Personality(mood=mood, spacing="compact", roundness="sharp"),
        token_files=tuple(TokenFile(type=g, url="", checksum="") for g in groups),
    )


COMPONENTS = [
    _component("button", "forms", ["lucide-react-native", "expo-haptics"]),
    _component("card", "layout"),
    _component("input", "forms", ["expo-haptics"]),
]


def test_component_stats():
    stats = component_stats(COMPONENTS)
    assert stats == {
        "totalComponents": 3,
        "categories": ["forms", "layout"],
        "totalDependencies": 2,
    }


def test_template_stats():
    templates = [_template("canopy", "calm", ("colors", "spacing")), _template("dusk", "calm")]
    stats = template_stats(templates)
    assert stats["totalTemplates"] == 2
    assert stats["availableThemes"] == ["canopy", "dusk"]
    assert stats["tokenTypes"] == ["colors", "spacing"]
    assert stats["personalities"] == ["calm-compact-sharp"]


def test_template_stats_empty():
    assert template_stats([])["tokenTypes"] == []


def test_api_document_shape():
    doc = build_api_document("components", COMPONENTS, "1.0.0", STAMP, BASE_URL).to_dict()
    assert list(doc) == ["version", "lastUpdated", "baseUrl", "components", "stats"]
    assert doc["lastUpdated"] == STAMP
    assert [c["name"] for c in doc["components"]] == ["button", "card", "input"]


def test_index_is_union_over_components():
    store = RegistryStore("/tmp/registry", BASE_URL)
    index = build_index(COMPONENTS, [], [], [], store, "1.0.0", STAMP)

    assert index.dependencies == ("expo-haptics", "lucide-react-native")
    assert index.categories == ("forms", "layout")
    assert index.stats == {
        "components": 3,
        "templates": 0,
        "providers": 0,
        "tokens": 0,
        "totalDependencies": 2,
    }
    assert index.endpoints["components"] == f"{BASE_URL}/api/components.json"
    assert set(index.endpoints) == {"components", "templates", "providers", "tokens"}


def test_index_tracks_component_changes():
    store = RegistryStore("/tmp/registry", BASE_URL)
    before = build_index(COMPONENTS, [], [], [], store, "1.0.0", STAMP)
    after = build_index(COMPONENTS[1:], [], [], [], store, "1.0.0", STAMP)
    assert "lucide-react-native" in before.dependencies
    assert "lucide-react-native" not in after.dependencies
    assert after.stats["components"] == 2
