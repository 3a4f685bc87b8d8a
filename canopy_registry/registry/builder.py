"""Registry builder — run the full assembly pipeline for one registry tree.

Steps, in order: components, templates, providers, tokens, then the index.
Every generated file is rewritten on each run, so building twice against an
unchanged source tree yields identical output apart from ``lastUpdated``.

Failure handling:
- a missing source directory aborts that kind's sub-build; its API document
  and the index are left untouched and the build is marked failed
- a template that cannot be processed is skipped with a warning
- a source whose name collides with an earlier one of the same kind is
  skipped with an error
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from canopy_registry.analyzers.metadata import (
    normalize_name,
    synthesize_component,
    synthesize_provider,
    synthesize_token,
)
from canopy_registry.analyzers.source_analyzer import analyze_source
from canopy_registry.config import RegistryConfig
from canopy_registry.errors import SourceTreeError, TemplateError
from canopy_registry.registry.assembler import build_api_document, build_index
from canopy_registry.registry.models import (
    ComponentRecord,
    ProviderRecord,
    RegistryIndex,
    TemplateRecord,
    TokenRecord,
)
from canopy_registry.registry.store import (
    COMPONENT_IMPORT_REWRITES,
    INDEX_DOCUMENT,
    PROVIDER_IMPORT_REWRITES,
    RegistryStore,
    to_template,
)
from canopy_registry.templates.processor import process_template
from canopy_registry.utils.file_scanner import artifact_stem, scan_artifact_sources

logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    """ISO 8601 UTC timestamp with millisecond precision, e.g. ``2024-05-01T12:00:00.000Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class BuildResult:
    """Outcome of one build run."""

    last_updated: str
    components: list[ComponentRecord] = field(default_factory=list)
    templates: list[TemplateRecord] = field(default_factory=list)
    providers: list[ProviderRecord] = field(default_factory=list)
    tokens: list[TokenRecord] = field(default_factory=list)
    index: Optional[RegistryIndex] = None
    failed_kinds: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        status = "PASS" if self.success else "FAIL"
        return (
            f"[{status}] {len(self.components)} components, {len(self.templates)} templates, "
            f"{len(self.providers)} providers, {len(self.tokens)} tokens; "
            f"{len(self.errors)} error(s), {len(self.warnings)} warning(s)"
        )


class RegistryBuilder:
    """Builds every artifact, API document and the index for one registry."""

    def __init__(self, config: RegistryConfig, clock: Callable[[], str] = utc_timestamp):
        self.config = config
        self.store = RegistryStore(config.registry_root, config.base_url)
        self._clock = clock

    def build(self) -> BuildResult:
        """Run the whole pipeline. Never raises for per-artifact problems."""
        result = BuildResult(last_updated=self._clock())
        self.store.ensure_dirs()

        steps = (
            ("components", self.build_components),
            ("templates", self.build_templates),
            ("providers", self.build_providers),
            ("tokens", self.build_tokens),
        )
        for kind, step in steps:
            try:
                records = step(result)
            except SourceTreeError as e:
                logger.error("Cannot build %s: %s", kind, e)
                result.errors.append(f"{kind}: {e}")
                result.failed_kinds.append(kind)
                continue
            setattr(result, kind, records)
            self.write_api_document(kind, records, result.last_updated)

        if result.failed_kinds:
            logger.error(
                "Index not rebuilt; failed sub-builds: %s", ", ".join(result.failed_kinds)
            )
        else:
            result.index = self.build_index(result)

        logger.info("Registry build finished: %s", result.summary())
        return result

    # -- sub-builds ---------------------------------------------------------

    def build_components(self, result: BuildResult) -> list[ComponentRecord]:
        records = []
        for source_name, content in self._read_sources("components", self.config.components_source, result):
            facts = analyze_source(content, self.config.host_packages)
            record = synthesize_component(
                source_name, facts, self.config.tables, self.store, self.config.version
            )
            self.store.write_text(
                self.store.component_template_path(record.name),
                to_template(content, COMPONENT_IMPORT_REWRITES),
            )
            self.store.write_json(self.store.component_metadata_path(record.name), record.to_dict())
            records.append(record)
            logger.info(
                "  %s (%d exports, %d deps)", record.name, len(record.exports), len(record.dependencies)
            )
        logger.info("Generated %d components", len(records))
        return records

    def build_templates(self, result: BuildResult) -> list[TemplateRecord]:
        records = []
        for name in self.store.template_names():
            try:
                record = process_template(self.store, name, result.last_updated)
            except TemplateError as e:
                logger.warning("Skipping template %s: %s", name, e)
                result.warnings.append(f"templates/{name}: {e.message}")
                continue
            records.append(record)
            logger.info(
                "  %s (%d token files: %s)",
                record.display_name or name,
                len(record.token_files),
                ", ".join(tf.type for tf in record.token_files),
            )
        logger.info("Generated %d templates", len(records))
        return records

    def build_providers(self, result: BuildResult) -> list[ProviderRecord]:
        records = []
        for source_name, content in self._read_sources("providers", self.config.providers_source, result):
            facts = analyze_source(content, self.config.host_packages)
            record = synthesize_provider(source_name, facts, self.store, self.config.version)
            self.store.write_text(
                self.store.provider_template_path(record.name),
                to_template(content, PROVIDER_IMPORT_REWRITES),
            )
            self.store.write_json(self.store.provider_metadata_path(record.name), record.to_dict())
            records.append(record)
            logger.info("  %s (%d exports)", record.display_name, len(record.exports))
        logger.info("Generated %d providers", len(records))
        return records

    def build_tokens(self, result: BuildResult) -> list[TokenRecord]:
        records = []
        for source_name, content in self._read_sources("tokens", self.config.tokens_source, result):
            facts = analyze_source(content, self.config.host_packages)
            record = synthesize_token(source_name, facts, self.store, self.config.version)
            self.store.write_text(self.store.token_template_path(record.name), content)
            self.store.write_json(self.store.token_metadata_path(record.name), record.to_dict())
            records.append(record)
            logger.info("  %s", record.name)
        logger.info("Generated %d token sets", len(records))
        return records

    def build_index(self, result: BuildResult) -> RegistryIndex:
        index = build_index(
            result.components,
            result.templates,
            result.providers,
            result.tokens,
            self.store,
            self.config.version,
            result.last_updated,
        )
        self.store.write_json(self.store.api_path(INDEX_DOCUMENT), index.to_dict())
        logger.info("Registry index created")
        return index

    # -- helpers ------------------------------------------------------------

    def write_api_document(self, kind: str, records: list, last_updated: str) -> None:
        document = build_api_document(
            kind, records, self.config.version, last_updated, self.store.base_url
        )
        self.store.write_json(self.store.api_path(kind), document.to_dict())

    def _read_sources(self, kind: str, source_dir: Path, result: BuildResult):
        """Yield ``(source_name, text)`` per artifact, skipping name collisions.

        Raises:
            SourceTreeError: If ``source_dir`` does not exist.
        """
        seen: dict[str, str] = {}
        for path in scan_artifact_sources(source_dir, kind):
            source_name = artifact_stem(path, kind)
            name = normalize_name(source_name)
            if name in seen:
                message = f"{kind}/{name}: '{path.name}' collides with '{seen[name]}'"
                logger.error("Duplicate artifact name %s", message)
                result.errors.append(message)
                continue
            seen[name] = path.name
            # newline="" keeps line endings intact so checksums see the raw text
            try:
                with open(path, encoding="utf-8", newline="") as f:
                    content = f.read()
            except (OSError, UnicodeDecodeError) as e:
                message = f"{kind}/{name}: cannot read '{path.name}': {e}"
                logger.error("Skipping unreadable source %s", message)
                result.errors.append(message)
                continue
            yield source_name, content


async def run_build(
    config: RegistryConfig, clock: Callable[[], str] = utc_timestamp
) -> BuildResult:
    """Awaitable build entry point. The pipeline itself runs synchronously."""
    return RegistryBuilder(config, clock=clock).build()
