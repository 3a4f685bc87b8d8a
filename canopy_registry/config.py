"""Configuration loading for the registry build.

Every setting has a default matching the published registry, so a config
file is optional. When present, ``registry.yaml`` in the registry root (or an
explicit ``--config`` path) overrides individual keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

import yaml

from canopy_registry import __version__
from canopy_registry.analyzers.source_analyzer import DEFAULT_HOST_PACKAGES
from canopy_registry.errors import ConfigError

DEFAULT_BASE_URL = "https://raw.githubusercontent.com/rncanopy/rncanopy-registry/main"
DEFAULT_CONFIG_FILE = "registry.yaml"

DEFAULT_CATEGORIES: Mapping[str, str] = MappingProxyType(
    {
        "button": "forms",
        "gradientbutton": "forms",
        "input": "forms",
        "switch": "forms",
        "slider": "forms",
        "toggle": "forms",
        "alert": "feedback",
        "toast": "feedback",
        "badge": "feedback",
        "card": "layout",
        "spinner": "loading",
    }
)

DEFAULT_DESCRIPTIONS: Mapping[str, str] = MappingProxyType(
    {
        "button": "Customizable button component with multiple variants, sizes, and loading states",
        "gradientbutton": "Button component with gradient backgrounds and advanced styling",
        "input": "Text input component with validation states and helper text",
        "switch": "Toggle control with smooth animations and haptic feedback",
        "slider": "Range input control with customizable styling",
        "toggle": "Button-like toggle component with pressed states",
        "alert": "Inline feedback messages with multiple variants",
        "toast": "Overlay notifications with positioning and animations",
        "badge": "Status indicators and labels with multiple variants",
        "card": "Container component with elevation and customizable styling",
        "spinner": "Loading indicators with multiple styles and sizes",
    }
)

DEFAULT_DISPLAY_NAMES: Mapping[str, str] = MappingProxyType({"gradientbutton": "Gradient Button"})

VALID_CATEGORIES = frozenset(DEFAULT_CATEGORIES.values())


@dataclass(frozen=True)
class ClassificationTables:
    """Static name lookups merged into component records.

    Unknown names fall back to ``fallback_category`` and to a description
    built from the display name.
    """

    categories: Mapping[str, str] = field(default_factory=lambda: DEFAULT_CATEGORIES)
    descriptions: Mapping[str, str] = field(default_factory=lambda: DEFAULT_DESCRIPTIONS)
    display_names: Mapping[str, str] = field(default_factory=lambda: DEFAULT_DISPLAY_NAMES)
    fallback_category: str = "forms"

    def category_for(self, name: str) -> str:
        return self.categories.get(name, self.fallback_category)

    def description_for(self, name: str, display_name: str) -> str:
        return self.descriptions.get(name, f"{display_name} component")


@dataclass(frozen=True)
class RegistryConfig:
    """Settings for one build or validation run."""

    registry_root: Path = Path(".")
    source_root: Path = Path("..")
    base_url: str = DEFAULT_BASE_URL
    version: str = __version__
    components_dir: str = "components/ui"
    providers_dir: str = "providers"
    tokens_dir: str = "constants/ui"
    host_packages: tuple[str, ...] = DEFAULT_HOST_PACKAGES
    tables: ClassificationTables = field(default_factory=ClassificationTables)

    @property
    def components_source(self) -> Path:
        return self.source_root / self.components_dir

    @property
    def providers_source(self) -> Path:
        return self.source_root / self.providers_dir

    @property
    def tokens_source(self) -> Path:
        return self.source_root / self.tokens_dir

    def with_overrides(self, **overrides: Any) -> "RegistryConfig":
        """Return a copy with non-None overrides applied (CLI flags)."""
        values = {k: v for k, v in overrides.items() if v is not None}
        for key in ("registry_root", "source_root"):
            if key in values:
                values[key] = Path(values[key])
        return replace(self, **values)


_SCALAR_KEYS = {f.name for f in fields(RegistryConfig)} - {"tables", "host_packages"}
_TABLE_KEYS = {"categories", "descriptions", "display_names", "fallback_category"}


def load_config(path: str | Path, registry_root: Optional[str | Path] = None) -> RegistryConfig:
    """Load a registry config from a YAML file.

    Relative ``registry_root``/``source_root`` values resolve against the
    config file's directory.

    Raises:
        ConfigError: If the file is unreadable, not a mapping, or has unknown keys.
    """
    config_path = Path(path)
    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config: {e}", path=str(config_path)) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}", path=str(config_path)) from e

    if not isinstance(data, dict):
        raise ConfigError("Config must be a mapping", path=str(config_path))

    unknown = set(data) - _SCALAR_KEYS - {"host_packages", "classification"}
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}", path=str(config_path))

    base_dir = config_path.parent
    values: dict[str, Any] = {k: data[k] for k in _SCALAR_KEYS if k in data}
    for key in ("registry_root", "source_root"):
        if key in values:
            values[key] = base_dir / Path(values[key])
    if "version" in values:
        values["version"] = str(values["version"])
    if registry_root is not None:
        values["registry_root"] = Path(registry_root)
    values.setdefault("registry_root", base_dir)
    values.setdefault("source_root", values["registry_root"] / "..")

    if "host_packages" in data:
        values["host_packages"] = tuple(data["host_packages"] or ())

    if "classification" in data:
        values["tables"] = _load_tables(data["classification"], str(config_path))

    return RegistryConfig(**values)


def _load_tables(data: Any, source: str) -> ClassificationTables:
    if not isinstance(data, dict):
        raise ConfigError("'classification' must be a mapping", path=source)
    unknown = set(data) - _TABLE_KEYS
    if unknown:
        raise ConfigError(f"Unknown classification keys: {', '.join(sorted(unknown))}", path=source)

    categories = {**DEFAULT_CATEGORIES, **(data.get("categories") or {})}
    fallback = data.get("fallback_category", "forms")
    for name, category in [*categories.items(), ("fallback_category", fallback)]:
        if category not in VALID_CATEGORIES:
            raise ConfigError(
                f"Invalid category '{category}' for '{name}'. Must be one of: {sorted(VALID_CATEGORIES)}",
                path=source,
            )

    return ClassificationTables(
        categories=MappingProxyType(categories),
        descriptions=MappingProxyType({**DEFAULT_DESCRIPTIONS, **(data.get("descriptions") or {})}),
        display_names=MappingProxyType({**DEFAULT_DISPLAY_NAMES, **(data.get("display_names") or {})}),
        fallback_category=fallback,
    )


def resolve_config(
    config_path: Optional[str | Path] = None,
    registry_root: Optional[str | Path] = None,
) -> RegistryConfig:
    """Pick the config for a run: explicit file, ``registry.yaml``, or defaults."""
    if config_path:
        return load_config(config_path, registry_root)
    root = Path(registry_root) if registry_root else Path(".")
    candidate = root / DEFAULT_CONFIG_FILE
    if candidate.exists():
        return load_config(candidate, root)
    return RegistryConfig(registry_root=root, source_root=root / "..")
