"""Registry assembler — aggregate records into API documents and the index.

Everything here is a pure reduction over records that were already built.
No files are read and no metadata is extracted.
"""

from __future__ import annotations

from typing import Any, Sequence

from canopy_registry.registry.models import (
    KINDS,
    ApiDocument,
    ComponentRecord,
    ProviderRecord,
    RegistryIndex,
    TemplateRecord,
    TokenRecord,
)
from canopy_registry.registry.store import RegistryStore


def _unique(values) -> list:
    return list(dict.fromkeys(values))


def component_categories(components: Sequence[ComponentRecord]) -> list[str]:
    """Categories in first-seen order."""
    return _unique(c.category for c in components)


def component_dependencies(components: Sequence[ComponentRecord]) -> list[str]:
    """Sorted union of every component's external dependencies."""
    return sorted({dep for c in components for dep in c.dependencies})


def component_stats(components: Sequence[ComponentRecord]) -> dict[str, Any]:
    return {
        "totalComponents": len(components),
        "categories": component_categories(components),
        "totalDependencies": len(component_dependencies(components)),
    }


def template_stats(templates: Sequence[TemplateRecord]) -> dict[str, Any]:
    return {
        "totalTemplates": len(templates),
        "availableThemes": [t.name for t in templates],
        "tokenTypes": [tf.type for tf in templates[0].token_files] if templates else [],
        "personalities": _unique(t.personality.key for t in templates),
    }


def provider_stats(providers: Sequence[ProviderRecord]) -> dict[str, Any]:
    return {"totalProviders": len(providers)}


def token_stats(tokens: Sequence[TokenRecord]) -> dict[str, Any]:
    return {"totalTokens": len(tokens)}


STATS_BUILDERS = {
    "components": component_stats,
    "templates": template_stats,
    "providers": provider_stats,
    "tokens": token_stats,
}


def build_api_document(
    kind: str,
    records: Sequence,
    version: str,
    last_updated: str,
    base_url: str,
) -> ApiDocument:
    """Assemble one kind-level document such as ``api/components.json``."""
    return ApiDocument(
        kind=kind,
        version=version,
        last_updated=last_updated,
        base_url=base_url,
        records=tuple(r.to_dict() for r in records),
        stats=STATS_BUILDERS[kind](records),
    )


def build_index(
    components: Sequence[ComponentRecord],
    templates: Sequence[TemplateRecord],
    providers: Sequence[ProviderRecord],
    tokens: Sequence[TokenRecord],
    store: RegistryStore,
    version: str,
    last_updated: str,
) -> RegistryIndex:
    """Assemble ``api/index.json`` from the same build's records."""
    dependencies = component_dependencies(components)
    return RegistryIndex(
        version=version,
        last_updated=last_updated,
        base_url=store.base_url,
        stats={
            "components": len(components),
            "templates": len(templates),
            "providers": len(providers),
            "tokens": len(tokens),
            "totalDependencies": len(dependencies),
        },
        endpoints={kind: store.api_url(kind) for kind in KINDS},
        categories=tuple(component_categories(components)),
        dependencies=tuple(dependencies),
    )
