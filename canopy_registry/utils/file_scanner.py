"""File scanner — discover artifact source files in the source tree."""

from __future__ import annotations

from pathlib import Path

from canopy_registry.errors import SourceTreeError

# Source file suffix per artifact kind
KIND_SUFFIXES = {
    "components": ".tsx",
    "providers": ".tsx",
    "tokens": ".ts",
}

# Barrel files re-export other artifacts and are never artifacts themselves
SKIP_MARKER = "index"


def scan_artifact_sources(source_dir: Path, kind: str) -> list[Path]:
    """List the artifact source files of one kind, one file per artifact.

    Only direct children are considered. Results are sorted by file name so
    every build visits artifacts in the same order.

    Raises:
        SourceTreeError: If the source directory does not exist.
    """
    if not source_dir.is_dir():
        raise SourceTreeError(f"Missing {kind} source directory", path=str(source_dir))

    suffix = KIND_SUFFIXES[kind]
    files = [
        item
        for item in source_dir.iterdir()
        if item.is_file() and _should_include(item, suffix)
    ]
    return sorted(files, key=lambda p: p.name)


def _should_include(path: Path, suffix: str) -> bool:
    """Check if a file is an artifact source of the expected type."""
    if SKIP_MARKER in path.name:
        return False
    # "Button.test.tsx" has suffix ".tsx" but is not an artifact
    return path.name.endswith(suffix) and path.name.count(".") == suffix.count(".")


def artifact_stem(path: Path, kind: str) -> str:
    """Return the artifact's source name, e.g. ``GradientButton``."""
    return path.name[: -len(KIND_SUFFIXES[kind])]
