"""Filesystem-backed registry store.

The registry tree is a store keyed by ``(kind, name)``. Every on-disk path
and every published URL is derived here from the registry root, the base URL,
the artifact kind and its name, so records never carry hand-chosen locations.
Writes always replace the whole file.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from canopy_registry.registry.models import KINDS

API_DIR = "api"
INDEX_DOCUMENT = "index"

COMPONENT_TEMPLATE_FILE = "component.tsx.template"
COMPONENT_METADATA_FILE = "component.json"
TEMPLATE_DEFINITION_FILE = "template.json"
TEMPLATE_METADATA_FILE = "metadata.json"

PROVIDER_TEMPLATE_SUFFIX = ".tsx.template"
TOKEN_TEMPLATE_SUFFIX = ".ts.template"

# Import rewrites applied when a source file becomes a downloadable template.
# Sources live two levels (components) or one level (providers) below the
# project root; installed templates sit next to constants/ and providers/.
COMPONENT_IMPORT_REWRITES = (
    ("../../constants/ui", "./constants/ui"),
    ("../../providers", "./providers"),
)
PROVIDER_IMPORT_REWRITES = (("../constants/ui", "./constants/ui"),)


def to_template(content: str, rewrites: tuple[tuple[str, str], ...]) -> str:
    """Turn artifact source text into its installable template text."""
    for old, new in rewrites:
        content = content.replace(old, new)
    return content


class RegistryStore:
    """Paths, URLs and whole-file writes for one registry tree."""

    REQUIRED_DIRS = (API_DIR, *KINDS)

    def __init__(self, root: str | Path, base_url: str = ""):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def _url(self, relative: str) -> str:
        return f"{self.base_url}/{relative}"

    # -- directories --------------------------------------------------------

    def kind_dir(self, kind: str) -> Path:
        return self.root / kind

    def ensure_dirs(self) -> None:
        for name in self.REQUIRED_DIRS:
            (self.root / name).mkdir(parents=True, exist_ok=True)

    # -- API documents ------------------------------------------------------

    def api_path(self, document: str) -> Path:
        return self.root / API_DIR / f"{document}.json"

    def api_url(self, document: str) -> str:
        return self._url(f"{API_DIR}/{document}.json")

    # -- components ---------------------------------------------------------

    def component_dir(self, name: str) -> Path:
        return self.root / "components" / name

    def component_template_path(self, name: str) -> Path:
        return self.component_dir(name) / COMPONENT_TEMPLATE_FILE

    def component_metadata_path(self, name: str) -> Path:
        return self.component_dir(name) / COMPONENT_METADATA_FILE

    def component_download_url(self, name: str) -> str:
        return self._url(f"components/{name}/{COMPONENT_TEMPLATE_FILE}")

    def component_metadata_url(self, name: str) -> str:
        return self._url(f"components/{name}/{COMPONENT_METADATA_FILE}")

    # -- providers ----------------------------------------------------------

    def provider_template_path(self, name: str) -> Path:
        return self.root / "providers" / f"{name}{PROVIDER_TEMPLATE_SUFFIX}"

    def provider_metadata_path(self, name: str) -> Path:
        return self.root / "providers" / f"{name}.json"

    def provider_download_url(self, name: str) -> str:
        return self._url(f"providers/{name}{PROVIDER_TEMPLATE_SUFFIX}")

    def provider_metadata_url(self, name: str) -> str:
        return self._url(f"providers/{name}.json")

    # -- tokens -------------------------------------------------------------

    def token_template_path(self, name: str) -> Path:
        return self.root / "tokens" / f"{name}{TOKEN_TEMPLATE_SUFFIX}"

    def token_metadata_path(self, name: str) -> Path:
        return self.root / "tokens" / f"{name}.json"

    def token_download_url(self, name: str) -> str:
        return self._url(f"tokens/{name}{TOKEN_TEMPLATE_SUFFIX}")

    def token_metadata_url(self, name: str) -> str:
        return self._url(f"tokens/{name}.json")

    # -- templates ----------------------------------------------------------

    def template_dir(self, name: str) -> Path:
        return self.root / "templates" / name

    def template_definition_path(self, name: str) -> Path:
        return self.template_dir(name) / TEMPLATE_DEFINITION_FILE

    def template_metadata_path(self, name: str) -> Path:
        return self.template_dir(name) / TEMPLATE_METADATA_FILE

    def token_group_path(self, template: str, group: str) -> Path:
        return self.template_dir(template) / f"{group}.json"

    def template_url(self, name: str) -> str:
        return self._url(f"templates/{name}/{TEMPLATE_DEFINITION_FILE}")

    def template_metadata_url(self, name: str) -> str:
        return self._url(f"templates/{name}/{TEMPLATE_METADATA_FILE}")

    def token_group_url(self, template: str, group: str) -> str:
        return self._url(f"templates/{template}/{group}.json")

    def template_names(self) -> list[str]:
        """Template directories that contain a definition, sorted by name."""
        templates_dir = self.kind_dir("templates")
        if not templates_dir.is_dir():
            return []
        return sorted(
            d.name
            for d in templates_dir.iterdir()
            if d.is_dir() and (d / TEMPLATE_DEFINITION_FILE).exists()
        )

    # -- writes -------------------------------------------------------------

    @staticmethod
    def write_text(path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)

    @classmethod
    def write_json(cls, path: Path, data: Any) -> None:
        cls.write_text(path, json.dumps(data, indent=2, ensure_ascii=False))
