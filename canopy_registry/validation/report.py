"""Registry report — headline numbers of a built registry, read from the index."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from canopy_registry.registry.models import KINDS
from canopy_registry.registry.store import INDEX_DOCUMENT, RegistryStore

logger = logging.getLogger(__name__)


@dataclass
class RegistryReport:
    timestamp: str
    version: str
    stats: dict[str, int] = field(default_factory=dict)
    categories: list[str] = field(default_factory=list)
    dependency_count: int = 0
    structure: dict[str, bool] = field(default_factory=dict)

    def lines(self) -> list[str]:
        lines = [f"Version: {self.version}"]
        for kind in KINDS:
            lines.append(f"{kind.capitalize()}: {self.stats.get(kind, 0)}")
        lines.append(f"Dependencies: {self.dependency_count}")
        lines.append(f"Categories: {', '.join(self.categories)}")
        return lines


def generate_report(registry_root: str | Path) -> Optional[RegistryReport]:
    """Summarize ``api/index.json``. Returns None when the index is unusable."""
    store = RegistryStore(registry_root)
    path = store.api_path(INDEX_DOCUMENT)
    try:
        with open(path, encoding="utf-8") as f:
            index = json.load(f)
    except FileNotFoundError:
        logger.error("Cannot generate report: %s not found", path)
        return None
    except OSError as e:
        logger.error("Cannot generate report: cannot read %s: %s", path, e)
        return None
    except ValueError as e:
        logger.error("Cannot generate report: invalid JSON in %s: %s", path, e)
        return None

    if not isinstance(index, dict):
        logger.error("Cannot generate report: %s is not a JSON object", path)
        return None

    return RegistryReport(
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=str(index.get("version", "")),
        stats=_mapping(index.get("stats")),
        categories=[c for c in _sequence(index.get("categories")) if isinstance(c, str)],
        dependency_count=len(_sequence(index.get("dependencies"))),
        structure={kind: store.kind_dir(kind).is_dir() for kind in KINDS},
    )


def _mapping(value) -> dict:
    return dict(value) if isinstance(value, dict) else {}


def _sequence(value) -> list:
    return list(value) if isinstance(value, list) else []
