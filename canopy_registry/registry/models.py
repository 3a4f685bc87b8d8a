"""Registry data models — published artifact records and API documents.

Records are immutable values produced once per build. ``to_dict`` returns the
exact JSON shape the installer CLI reads, with camelCase keys in a fixed order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

KINDS = ("components", "templates", "providers", "tokens")

HAPTICS_PROVIDER = "HapticsProvider"
THEME_PROVIDER = "ThemeProvider"


@dataclass(frozen=True)
class ComponentRecord:
    """A UI component published under ``components/<name>/``."""

    name: str
    display_name: str
    description: str
    category: str
    version: str
    checksum: str
    download_url: str
    metadata_url: str
    dependencies: tuple[str, ...] = ()
    required_providers: tuple[str, ...] = ()
    files: tuple[str, ...] = ()
    exports: tuple[str, ...] = ()
    variants: tuple[str, ...] = ()
    sizes: tuple[str, ...] = ()
    token_usage: tuple[str, ...] = ()
    has_haptics: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "displayName": self.display_name,
            "description": self.description,
            "category": self.category,
            "dependencies": list(self.dependencies),
            "requiredProviders": list(self.required_providers),
            "files": list(self.files),
            "exports": list(self.exports),
            "variants": list(self.variants),
            "sizes": list(self.sizes),
            "tokenUsage": list(self.token_usage),
            "hasHaptics": self.has_haptics,
            "version": self.version,
            "checksum": self.checksum,
            "downloadUrl": self.download_url,
            "metadataUrl": self.metadata_url,
        }


@dataclass(frozen=True)
class ProviderRecord:
    """A context provider published as ``providers/<name>.tsx.template``."""

    name: str
    display_name: str
    description: str
    version: str
    checksum: str
    download_url: str
    metadata_url: str
    dependencies: tuple[str, ...] = ()
    exports: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "displayName": self.display_name,
            "description": self.description,
            "dependencies": list(self.dependencies),
            "exports": list(self.exports),
            "version": self.version,
            "checksum": self.checksum,
            "downloadUrl": self.download_url,
            "metadataUrl": self.metadata_url,
        }


@dataclass(frozen=True)
class TokenRecord:
    """A design-token set published as ``tokens/<name>.ts.template``."""

    name: str
    display_name: str
    description: str
    version: str
    checksum: str
    download_url: str
    metadata_url: str
    dependencies: tuple[str, ...] = ()
    exports: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "displayName": self.display_name,
            "description": self.description,
            "dependencies": list(self.dependencies),
            "exports": list(self.exports),
            "version": self.version,
            "checksum": self.checksum,
            "downloadUrl": self.download_url,
            "metadataUrl": self.metadata_url,
        }


@dataclass(frozen=True)
class Personality:
    mood: str = ""
    spacing: str = ""
    roundness: str = ""

    @property
    def key(self) -> str:
        return f"{self.mood}-{self.spacing}-{self.roundness}"

    def to_dict(self) -> dict[str, str]:
        return {"mood": self.mood, "spacing": self.spacing, "roundness": self.roundness}


@dataclass(frozen=True)
class TokenFile:
    """One externalized token group of a template."""

    type: str
    url: str
    checksum: str

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "url": self.url, "checksum": self.checksum}


@dataclass(frozen=True)
class TemplateRecord:
    """A visual theme published under ``templates/<name>/``."""

    name: str
    display_name: str
    description: str
    author: str
    version: str
    last_updated: str
    template_url: str
    metadata_url: str
    checksum: str
    personality: Personality = field(default_factory=Personality)
    preview: Any = None
    token_files: tuple[TokenFile, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "displayName": self.display_name,
            "description": self.description,
            "author": self.author,
            "version": self.version,
            "lastUpdated": self.last_updated,
            "personality": self.personality.to_dict(),
            "preview": self.preview,
            "tokenFiles": [tf.to_dict() for tf in self.token_files],
            "templateUrl": self.template_url,
            "metadataUrl": self.metadata_url,
            "checksum": self.checksum,
        }


@dataclass(frozen=True)
class ApiDocument:
    """A kind-level API document, e.g. ``api/components.json``."""

    kind: str
    version: str
    last_updated: str
    base_url: str
    records: tuple[dict[str, Any], ...] = ()
    stats: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "lastUpdated": self.last_updated,
            "baseUrl": self.base_url,
            self.kind: list(self.records),
            "stats": self.stats,
        }


@dataclass(frozen=True)
class RegistryIndex:
    """The top-level ``api/index.json`` document."""

    version: str
    last_updated: str
    base_url: str
    stats: dict[str, int] = field(default_factory=dict)
    endpoints: dict[str, str] = field(default_factory=dict)
    categories: tuple[str, ...] = ()
    dependencies: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "lastUpdated": self.last_updated,
            "baseUrl": self.base_url,
            "stats": self.stats,
            "endpoints": self.endpoints,
            "categories": list(self.categories),
            "dependencies": list(self.dependencies),
        }
