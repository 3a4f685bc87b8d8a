"""Metadata synthesizer — turn a fact sheet into a publishable record.

Pure functions: the same name, facts, tables and store always produce the
same record. URLs come from the store so they are derived, never chosen.
"""

from __future__ import annotations

from canopy_registry.analyzers.source_analyzer import SourceFacts
from canopy_registry.config import ClassificationTables
from canopy_registry.registry.models import (
    HAPTICS_PROVIDER,
    THEME_PROVIDER,
    ComponentRecord,
    ProviderRecord,
    TokenRecord,
)
from canopy_registry.registry.store import COMPONENT_TEMPLATE_FILE, RegistryStore


def normalize_name(source_name: str) -> str:
    """Registry identifier for a source file stem: ``GradientButton`` -> ``gradientbutton``."""
    return source_name.lower()


def display_name_for(source_name: str, tables: ClassificationTables) -> str:
    name = normalize_name(source_name)
    if name in tables.display_names:
        return tables.display_names[name]
    return source_name[:1].upper() + source_name[1:]


def required_providers(facts: SourceFacts) -> tuple[str, ...]:
    """Providers a component needs, derived only from its capability flags."""
    providers = []
    if facts.has_haptics:
        providers.append(HAPTICS_PROVIDER)
    if facts.has_provider:
        providers.append(THEME_PROVIDER)
    return tuple(providers)


def synthesize_component(
    source_name: str,
    facts: SourceFacts,
    tables: ClassificationTables,
    store: RegistryStore,
    version: str,
) -> ComponentRecord:
    name = normalize_name(source_name)
    display_name = display_name_for(source_name, tables)
    return ComponentRecord(
        name=name,
        display_name=display_name,
        description=tables.description_for(name, display_name),
        category=tables.category_for(name),
        dependencies=facts.dependencies,
        required_providers=required_providers(facts),
        files=(COMPONENT_TEMPLATE_FILE,),
        exports=facts.exports,
        variants=facts.variants,
        sizes=facts.sizes,
        token_usage=facts.token_usage,
        has_haptics=facts.has_haptics,
        version=version,
        checksum=facts.checksum,
        download_url=store.component_download_url(name),
        metadata_url=store.component_metadata_url(name),
    )


def synthesize_provider(
    source_name: str, facts: SourceFacts, store: RegistryStore, version: str
) -> ProviderRecord:
    name = normalize_name(source_name)
    return ProviderRecord(
        name=name,
        display_name=source_name,
        description=f"{source_name} context provider",
        dependencies=facts.dependencies,
        exports=facts.exports,
        version=version,
        checksum=facts.checksum,
        download_url=store.provider_download_url(name),
        metadata_url=store.provider_metadata_url(name),
    )


def synthesize_token(
    source_name: str, facts: SourceFacts, store: RegistryStore, version: str
) -> TokenRecord:
    name = normalize_name(source_name)
    return TokenRecord(
        name=name,
        display_name=source_name[:1].upper() + source_name[1:],
        description=f"{source_name} design tokens",
        dependencies=facts.dependencies,
        exports=facts.exports,
        version=version,
        checksum=facts.checksum,
        download_url=store.token_download_url(name),
        metadata_url=store.token_metadata_url(name),
    )
