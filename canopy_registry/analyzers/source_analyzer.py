"""Source analyzer — extract a fact sheet from one artifact's source text.

The analyzer does not parse the source. It runs a handful of independent
pattern extractors over the raw text, each returning the values it found in
first-occurrence order with duplicates removed:

- dependencies: external packages named in import statements
- exports: names introduced by exported interface/type/function/const
- variants / sizes: string literals of ``*Variant`` / ``*Size`` union aliases
- token usage: dotted accessors rooted at a design-token category
- capability flags: haptics and theming hook usage

Source text is trusted and heterogeneous, so a pattern that does not occur
simply yields an empty result.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from canopy_registry.utils.hashing import content_checksum

DEFAULT_HOST_PACKAGES = ("react", "react-native")

HAPTICS_MARKERS = ("useHaptics", "triggerHaptic")
THEMING_MARKERS = ("useTheme",)

TOKEN_CATEGORIES = (
    "colors",
    "spacing",
    "radii",
    "borders",
    "typography",
    "iconSizes",
    "opacity",
    "shadows",
    "haptics",
)

# `import X from 'mod'`, `import { a,\n b } from "mod"` and `import 'mod'`.
# [^;'"] spans newlines, so multi-line named imports are matched too.
_IMPORT_RE = re.compile(
    r"""\bimport\s+(?:type\s+)?(?:[^;'"]*?\s*\bfrom\s*)?['"]([^'"]+)['"]"""
)

_EXPORT_RE = re.compile(r"\bexport\s+(?:interface|type|function|const)\s+([A-Za-z0-9_]+)")

_STRING_LITERAL_RE = re.compile(r"""['"]([^'"]+)['"]""")

_TOKEN_RE = re.compile(r"\b(?:" + "|".join(TOKEN_CATEGORIES) + r")\.[\w.\[\]]+")


def _union_alias_re(suffix: str) -> re.Pattern:
    literal = r"""['"][^'"]+['"]"""
    return re.compile(
        rf"\btype\s+\w*{suffix}\s*=\s*(?:\|\s*)?{literal}(?:\s*\|\s*{literal})*"
    )


_UNION_PATTERNS = {
    "Variant": _union_alias_re("Variant"),
    "Size": _union_alias_re("Size"),
}


@dataclass(frozen=True)
class SourceFacts:
    """Structural facts extracted from one artifact source file."""

    dependencies: tuple[str, ...] = ()
    exports: tuple[str, ...] = ()
    variants: tuple[str, ...] = ()
    sizes: tuple[str, ...] = ()
    token_usage: tuple[str, ...] = ()
    has_haptics: bool = False
    uses_theme: bool = False
    checksum: str = ""

    @property
    def has_provider(self) -> bool:
        """True when the artifact consumes any provider-backed hook."""
        return self.uses_theme or self.has_haptics


def analyze_source(text: str, host_packages: Iterable[str] = DEFAULT_HOST_PACKAGES) -> SourceFacts:
    """Run every extractor over ``text`` and return the combined fact sheet."""
    return SourceFacts(
        dependencies=extract_dependencies(text, host_packages),
        exports=extract_exports(text),
        variants=extract_variants(text),
        sizes=extract_sizes(text),
        token_usage=extract_token_usage(text),
        has_haptics=detect_haptics(text),
        uses_theme=detect_theming(text),
        checksum=content_checksum(text),
    )


def extract_dependencies(
    text: str, host_packages: Iterable[str] = DEFAULT_HOST_PACKAGES
) -> tuple[str, ...]:
    """Collect external module paths from import statements.

    Relative imports and the host UI framework's own packages (including
    their subpaths, e.g. ``react-native/Libraries/...``) are dropped.
    """
    hosts = tuple(host_packages)
    modules = []
    for match in _IMPORT_RE.finditer(text):
        module = match.group(1)
        if module.startswith("."):
            continue
        if _is_host_package(module, hosts):
            continue
        modules.append(module)
    return _unique(modules)


def _is_host_package(module: str, hosts: tuple[str, ...]) -> bool:
    return any(module == host or module.startswith(host + "/") for host in hosts)


def extract_exports(text: str) -> tuple[str, ...]:
    """Collect names introduced by exported interface/type/function/const."""
    return _unique(m.group(1) for m in _EXPORT_RE.finditer(text))


def extract_union_literals(text: str, suffix: str) -> tuple[str, ...]:
    """Collect string literals from ``type <Name><suffix> = 'a' | 'b'`` aliases."""
    pattern = _UNION_PATTERNS.get(suffix) or _union_alias_re(suffix)
    values = []
    for match in pattern.finditer(text):
        values.extend(_STRING_LITERAL_RE.findall(match.group(0)))
    return _unique(values)


def extract_variants(text: str) -> tuple[str, ...]:
    return extract_union_literals(text, "Variant")


def extract_sizes(text: str) -> tuple[str, ...]:
    return extract_union_literals(text, "Size")


def extract_token_usage(text: str) -> tuple[str, ...]:
    """Collect full dotted token paths such as ``colors.primary.500``."""
    paths = (m.group(0).rstrip(".") for m in _TOKEN_RE.finditer(text))
    return _unique(p for p in paths if "." in p)


def detect_haptics(text: str) -> bool:
    return any(marker in text for marker in HAPTICS_MARKERS)


def detect_theming(text: str) -> bool:
    return any(marker in text for marker in THEMING_MARKERS)


def _unique(values: Iterable[str]) -> tuple[str, ...]:
    """Deduplicate while keeping first-occurrence order."""
    return tuple(dict.fromkeys(values))
