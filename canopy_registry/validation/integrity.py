"""Integrity validator — check published documents against the on-disk tree.

Runs read-only over a built registry. Checks:
1. Structure: required directories exist; every API document exists and parses
2. Records: every record of every kind has its required fields and a unique name
3. References: every record's directory and declared files exist, template
   token files parse and still match their published checksums
4. Index: counts, categories and dependencies equal the unions over the kind
   documents, and every document shares the index's ``lastUpdated``

Every artifact is checked independently. A defect is logged and recorded, and
checking continues, so one run reports the complete defect set.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from canopy_registry.registry.models import KINDS
from canopy_registry.registry.store import (
    API_DIR,
    COMPONENT_METADATA_FILE,
    COMPONENT_TEMPLATE_FILE,
    INDEX_DOCUMENT,
    TEMPLATE_METADATA_FILE,
    RegistryStore,
)
from canopy_registry.templates.processor import REQUIRED_TOKEN_GROUP
from canopy_registry.templates.schema import TOKEN_GROUP_PATTERN
from canopy_registry.utils.hashing import json_checksum

logger = logging.getLogger(__name__)

DOCUMENT_FIELDS = ("version", "lastUpdated", "baseUrl", "stats")

REQUIRED_FIELDS = {
    "components": ("name", "displayName", "description", "category", "dependencies", "exports", "version"),
    "templates": ("name", "displayName", "description", "version"),
    "providers": ("name", "displayName", "description", "dependencies", "exports", "version", "checksum", "downloadUrl"),
    "tokens": ("name", "description", "version", "checksum", "downloadUrl"),
}

INDEX_FIELDS = ("endpoints", "categories", "dependencies")


class IssueKind(Enum):
    MISSING_STRUCTURE = "missing_structure"  # Required directory or document absent
    MALFORMED_DOCUMENT = "malformed_document"  # JSON parse failure
    SCHEMA_VIOLATION = "schema_violation"  # Required field absent or wrong shape
    REFERENTIAL_BREAK = "referential_break"  # Record points at missing or changed content


@dataclass
class IntegrityIssue:
    """A single defect found in the registry tree."""

    kind: IssueKind
    artifact: str  # e.g. "components/button", "api/index.json", "index"
    message: str
    path: str = ""

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.artifact}: {self.message}"


@dataclass
class ValidationReport:
    """Result of validating one registry tree."""

    issues: list[IntegrityIssue] = field(default_factory=list)
    checked: dict[str, int] = field(default_factory=dict)
    dependencies: list[str] = field(default_factory=list)
    provider_dependents: dict[str, list[str]] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return not self.issues

    @property
    def invalid_artifacts(self) -> list[str]:
        return sorted({i.artifact for i in self.issues})

    def issues_for(self, artifact: str) -> list[IntegrityIssue]:
        return [i for i in self.issues if i.artifact == artifact]

    def add(self, kind: IssueKind, artifact: str, message: str, path: str | Path = "") -> None:
        issue = IntegrityIssue(kind=kind, artifact=artifact, message=message, path=str(path))
        logger.error("%s", issue)
        self.issues.append(issue)

    def summary(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        checked = ", ".join(f"{n} {k}" for k, n in self.checked.items())
        return (
            f"[{status}] {len(self.issues)} defect(s) in "
            f"{len(self.invalid_artifacts)} artifact(s); checked {checked or 'nothing'}"
        )


class IntegrityValidator:
    """Validates a built registry tree rooted at ``registry_root``."""

    def __init__(self, registry_root: str | Path):
        self.store = RegistryStore(registry_root)
        self._documents: dict[str, Optional[dict[str, Any]]] = {}

    def validate(self) -> ValidationReport:
        report = ValidationReport()
        self.validate_structure(report)
        self.validate_components(report)
        self.validate_templates(report)
        self.validate_providers(report)
        self.validate_tokens(report)
        self.validate_dependencies(report)
        self.validate_index(report)
        logger.info("Registry validation: %s", report.summary())
        return report

    # -- structure ----------------------------------------------------------

    def validate_structure(self, report: ValidationReport) -> None:
        for name in RegistryStore.REQUIRED_DIRS:
            path = self.store.root / name
            if not path.is_dir():
                report.add(IssueKind.MISSING_STRUCTURE, name, "Missing directory", path)
            else:
                logger.debug("Directory exists: %s", name)

        for document in (INDEX_DOCUMENT, *KINDS):
            self._load_document(document, report)

    def _load_document(self, document: str, report: ValidationReport) -> Optional[dict[str, Any]]:
        """Parse ``api/<document>.json`` once, recording any defect."""
        if document in self._documents:
            return self._documents[document]

        artifact = f"{API_DIR}/{document}.json"
        path = self.store.api_path(document)
        data = None
        if not path.exists():
            report.add(IssueKind.MISSING_STRUCTURE, artifact, "Missing API document", path)
        else:
            try:
                with open(path, encoding="utf-8") as f:
                    data = json.load(f)
            except OSError as e:
                report.add(IssueKind.MALFORMED_DOCUMENT, artifact, f"Cannot read document: {e}", path)
            except ValueError as e:
                report.add(IssueKind.MALFORMED_DOCUMENT, artifact, f"Invalid JSON: {e}", path)
            else:
                if not isinstance(data, dict):
                    report.add(IssueKind.SCHEMA_VIOLATION, artifact, "Document is not a JSON object", path)
                    data = None
                else:
                    missing = [f for f in DOCUMENT_FIELDS if f not in data]
                    if document == INDEX_DOCUMENT:
                        missing.extend(f for f in INDEX_FIELDS if f not in data)
                    elif not isinstance(data.get(document), list):
                        missing.append(document)
                    for field_name in missing:
                        report.add(IssueKind.SCHEMA_VIOLATION, artifact, f"Missing field: {field_name}", path)
        self._documents[document] = data
        return data

    def _records(self, kind: str, report: ValidationReport) -> list:
        document = self._load_document(kind, report)
        if document is None or not isinstance(document.get(kind), list):
            return []
        records = document[kind]
        report.checked[kind] = len(records)
        return records

    def _check_record(self, kind: str, position: int, record: Any, seen: set[str], report: ValidationReport) -> Optional[str]:
        """Check required fields. Returns the record name when it is usable for file checks."""
        if not isinstance(record, dict):
            report.add(IssueKind.SCHEMA_VIOLATION, f"{kind}[{position}]", "Record is not a JSON object")
            return None

        name = record.get("name")
        artifact = f"{kind}/{name}" if isinstance(name, str) and name else f"{kind}[{position}]"
        for field_name in REQUIRED_FIELDS[kind]:
            if field_name not in record:
                report.add(IssueKind.SCHEMA_VIOLATION, artifact, f"Missing field: {field_name}")

        if not isinstance(name, str) or not name:
            return None
        if "/" in name or "\\" in name or name.startswith("."):
            report.add(IssueKind.SCHEMA_VIOLATION, artifact, f"Invalid artifact name: {name!r}")
            return None
        if name in seen:
            report.add(IssueKind.SCHEMA_VIOLATION, artifact, "Duplicate artifact name")
            return None
        seen.add(name)
        return name

    def _require_file(self, report: ValidationReport, artifact: str, path: Path, label: str) -> bool:
        if path.is_file():
            return True
        relative = path.relative_to(self.store.root).as_posix()
        report.add(IssueKind.REFERENTIAL_BREAK, artifact, f"{label} missing: {relative}", path)
        return False

    # -- per-kind checks ----------------------------------------------------

    def validate_components(self, report: ValidationReport) -> None:
        seen: set[str] = set()
        for i, record in enumerate(self._records("components", report)):
            before = len(report.issues)
            name = self._check_record("components", i, record, seen, report)
            if name is None:
                continue
            artifact = f"components/{name}"
            if "category" in record and not isinstance(record["category"], str):
                report.add(IssueKind.SCHEMA_VIOLATION, artifact, "Field 'category' must be a string")
            component_dir = self.store.component_dir(name)
            if not component_dir.is_dir():
                report.add(IssueKind.REFERENTIAL_BREAK, artifact, "Component directory missing", component_dir)
            else:
                self._require_file(report, artifact, component_dir / COMPONENT_TEMPLATE_FILE, "Component template")
                self._require_file(report, artifact, component_dir / COMPONENT_METADATA_FILE, "Component metadata")
            if len(report.issues) == before:
                logger.info("Component valid: %s", name)

    def validate_templates(self, report: ValidationReport) -> None:
        seen: set[str] = set()
        for i, record in enumerate(self._records("templates", report)):
            before = len(report.issues)
            name = self._check_record("templates", i, record, seen, report)
            if name is None:
                continue
            artifact = f"templates/{name}"
            template_dir = self.store.template_dir(name)
            if not template_dir.is_dir():
                report.add(IssueKind.REFERENTIAL_BREAK, artifact, "Template directory missing", template_dir)
                continue

            self._require_file(report, artifact, template_dir / TEMPLATE_METADATA_FILE, "Template metadata")

            token_files = record.get("tokenFiles") or []
            if not isinstance(token_files, list):
                report.add(IssueKind.SCHEMA_VIOLATION, artifact, "Field 'tokenFiles' must be a list")
                token_files = []

            declared = {}
            for entry in token_files:
                if _is_token_file_entry(entry):
                    declared[entry["type"]] = entry.get("checksum")
                else:
                    report.add(IssueKind.SCHEMA_VIOLATION, artifact, f"Invalid tokenFiles entry: {entry!r}")
            groups = dict.fromkeys([REQUIRED_TOKEN_GROUP, *declared])
            for group in groups:
                self._check_token_file(report, artifact, name, group, declared.get(group))

            if len(report.issues) == before:
                logger.info("Template valid: %s", name)

    def _check_token_file(
        self, report: ValidationReport, artifact: str, template: str, group: str, checksum: Optional[str]
    ) -> None:
        path = self.store.token_group_path(template, group)
        if not self._require_file(report, artifact, path, f"Template {group}"):
            return
        try:
            with open(path, encoding="utf-8") as f:
                value = json.load(f)
        except OSError as e:
            report.add(IssueKind.MALFORMED_DOCUMENT, artifact, f"Cannot read {group}.json: {e}", path)
            return
        except ValueError as e:
            report.add(IssueKind.MALFORMED_DOCUMENT, artifact, f"Invalid {group} JSON: {e}", path)
            return
        if checksum and json_checksum(value) != checksum:
            report.add(IssueKind.REFERENTIAL_BREAK, artifact, f"Token file {group}.json does not match its checksum", path)

    def validate_providers(self, report: ValidationReport) -> None:
        seen: set[str] = set()
        for i, record in enumerate(self._records("providers", report)):
            before = len(report.issues)
            name = self._check_record("providers", i, record, seen, report)
            if name is None:
                continue
            artifact = f"providers/{name}"
            self._require_file(report, artifact, self.store.provider_template_path(name), "Provider template")
            self._require_file(report, artifact, self.store.provider_metadata_path(name), "Provider metadata")
            if len(report.issues) == before:
                logger.info("Provider valid: %s", name)

    def validate_tokens(self, report: ValidationReport) -> None:
        seen: set[str] = set()
        for i, record in enumerate(self._records("tokens", report)):
            before = len(report.issues)
            name = self._check_record("tokens", i, record, seen, report)
            if name is None:
                continue
            artifact = f"tokens/{name}"
            self._require_file(report, artifact, self.store.token_template_path(name), "Token template")
            self._require_file(report, artifact, self.store.token_metadata_path(name), "Token metadata")
            if len(report.issues) == before:
                logger.info("Token set valid: %s", name)

    # -- cross-document checks ----------------------------------------------

    def validate_dependencies(self, report: ValidationReport) -> None:
        """Summarize external dependencies and provider requirements of components."""
        document = self._documents.get("components")
        records = document.get("components") if document else None
        if not isinstance(records, list):
            return

        dependencies: set[str] = set()
        dependents: dict[str, list[str]] = {}
        for record in records:
            if not isinstance(record, dict):
                continue
            artifact = f"components/{record.get('name')}"
            dependencies.update(_string_list(report, record, "dependencies", artifact) or [])
            for provider in _string_list(report, record, "requiredProviders", artifact) or []:
                dependents.setdefault(provider, []).append(str(record.get("name")))

        report.dependencies = sorted(dependencies)
        report.provider_dependents = dependents
        logger.info(
            "Unique dependencies: %d; components with provider dependencies: %d",
            len(dependencies),
            len({c for names in dependents.values() for c in names}),
        )

    def validate_index(self, report: ValidationReport) -> None:
        index = self._documents.get(INDEX_DOCUMENT)
        if index is None:
            return
        artifact = "index"
        path = self.store.api_path(INDEX_DOCUMENT)

        stats = index.get("stats") if isinstance(index.get("stats"), dict) else {}
        endpoints = index.get("endpoints") if isinstance(index.get("endpoints"), dict) else {}
        for kind in KINDS:
            if kind not in endpoints:
                report.add(IssueKind.SCHEMA_VIOLATION, artifact, f"Missing endpoint: {kind}", path)

            document = self._documents.get(kind)
            if document is None:
                continue
            records = document.get(kind)
            if isinstance(records, list) and stats.get(kind) != len(records):
                report.add(
                    IssueKind.REFERENTIAL_BREAK,
                    artifact,
                    f"stats.{kind} is {stats.get(kind)!r} but api/{kind}.json has {len(records)}",
                    path,
                )
            if document.get("lastUpdated") != index.get("lastUpdated"):
                report.add(
                    IssueKind.REFERENTIAL_BREAK,
                    artifact,
                    f"api/{kind}.json lastUpdated differs from the index (partial build?)",
                    path,
                )

        components = self._documents.get("components")
        records = components.get("components") if components else None
        if not isinstance(records, list):
            return
        categories = {
            r["category"] for r in records if isinstance(r, dict) and isinstance(r.get("category"), str)
        }
        index_categories = _string_list(report, index, "categories", artifact, path)
        if index_categories is not None and set(index_categories) != categories:
            report.add(IssueKind.REFERENTIAL_BREAK, artifact, "categories differ from the component set", path)
        index_dependencies = _string_list(report, index, "dependencies", artifact, path)
        if index_dependencies is not None and index_dependencies != report.dependencies:
            report.add(IssueKind.REFERENTIAL_BREAK, artifact, "dependencies differ from the component set", path)


def _string_list(
    report: ValidationReport, owner: dict, field_name: str, artifact: str, path: str | Path = ""
) -> Optional[list[str]]:
    """Return ``owner[field_name]`` if it is a list of strings, None if absent or misshapen."""
    value = owner.get(field_name)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        report.add(IssueKind.SCHEMA_VIOLATION, artifact, f"Field '{field_name}' must be a list of strings", path)
        return None
    return value


def _is_token_file_entry(entry: Any) -> bool:
    return (
        isinstance(entry, dict)
        and isinstance(entry.get("type"), str)
        and re.match(TOKEN_GROUP_PATTERN, entry["type"]) is not None
    )
