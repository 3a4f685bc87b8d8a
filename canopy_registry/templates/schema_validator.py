"""Template validator — structural validation of template definitions.

Walks the template JSON Schema manually and collects every violation, so a
single run reports all defects of all templates. Read-only: nothing in the
templates directory is created or modified.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from canopy_registry.registry.store import TEMPLATE_DEFINITION_FILE
from canopy_registry.templates.schema import get_schema

logger = logging.getLogger(__name__)


def validate_template_data(data) -> list[str]:
    """Validate a parsed template definition against the template schema.

    Returns:
        List of error messages. Empty list means valid.
    """
    issues: list[str] = []
    _check_field(data, get_schema(), "", issues)
    return issues


def validate_template_file(template_path: str | Path) -> list[str]:
    """Validate one ``template.json`` file."""
    path = Path(template_path)
    if not path.exists():
        return [f"File not found: {path}"]

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        return [f"Cannot read file: {e}"]
    except ValueError as e:
        return [f"Invalid JSON: {e}"]

    issues = validate_template_data(data)
    if isinstance(data, dict) and data.get("name") and data["name"] != path.parent.name:
        issues.append(
            f"name '{data['name']}' does not match template directory '{path.parent.name}'"
        )
    return issues


def validate_all_templates(templates_dir: str | Path) -> dict[str, list[str]]:
    """Validate every template directory under ``templates_dir``.

    A directory without a ``template.json`` is reported as a defect.

    Returns:
        Mapping of template directory name to its issues (empty when valid).
    """
    root = Path(templates_dir)
    results: dict[str, list[str]] = {}
    if not root.is_dir():
        logger.info("No templates directory found at %s", root)
        return results

    for template_dir in sorted(d for d in root.iterdir() if d.is_dir()):
        definition = template_dir / TEMPLATE_DEFINITION_FILE
        if not definition.exists():
            results[template_dir.name] = [f"Missing {TEMPLATE_DEFINITION_FILE}"]
        else:
            results[template_dir.name] = validate_template_file(definition)

        if results[template_dir.name]:
            for issue in results[template_dir.name]:
                logger.error("Template %s: %s", template_dir.name, issue)
        else:
            logger.info("Template valid: %s", template_dir.name)
    return results


_JSON_TYPES = {"string": str, "object": dict, "array": list}


def _json_type(value) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if value is None:
        return "null"
    for name, python_type in _JSON_TYPES.items():
        if isinstance(value, python_type):
            return name
    return type(value).__name__


def _field(parent: str, key: str) -> str:
    return f"{parent}.{key}" if parent else key


def _check_field(value, schema: dict, field: str, issues: list[str]) -> None:
    """Check one template field against its schema node, descending into objects.

    Fields are named by their dotted path, e.g. ``personality.mood`` or
    ``tokens.colors``; the document itself is ``template``.
    """
    label = field or "template"
    expected = schema.get("type")
    if expected is not None:
        allowed = [expected] if isinstance(expected, str) else list(expected)
        if not any(isinstance(value, _JSON_TYPES[t]) for t in allowed):
            issues.append(f"{label} must be {' or '.join(allowed)}, got {_json_type(value)}")
            return

    if isinstance(value, str):
        if len(value) < schema.get("minLength", 0):
            issues.append(f"{label} must not be empty")
        if "pattern" in schema and not re.match(schema["pattern"], value):
            issues.append(f"{label} '{value}' does not match {schema['pattern']}")
    elif isinstance(value, dict):
        for key in schema.get("required", []):
            if key not in value:
                issues.append(f"{_field(field, key)} is required")

        key_pattern = schema.get("propertyNames", {}).get("pattern")
        properties = schema.get("properties", {})
        extra = schema.get("additionalProperties")
        for key, child in value.items():
            if key_pattern and not re.match(key_pattern, key):
                issues.append(f"{label} key '{key}' is not allowed")
                continue
            child_schema = properties.get(key, extra)
            if isinstance(child_schema, dict):
                _check_field(child, child_schema, _field(field, key), issues)
