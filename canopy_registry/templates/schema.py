"""JSON Schema for template definition documents (``template.json``).

This is the structural contract a template must meet before it is published.
Tools can export this and use it with any JSON Schema validator.
"""

from canopy_registry.config import DEFAULT_BASE_URL

# A token group is published as `<group>.json` beside `template.json` and
# `metadata.json`, so its name must be a plain file stem other than those two.
TOKEN_GROUP_PATTERN = r"^(?!(?:template|metadata)$)[A-Za-z][A-Za-z0-9_-]*$"

TEMPLATE_SCHEMA: dict = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": f"{DEFAULT_BASE_URL}/schemas/template.schema.json",
    "title": "Registry Template Definition",
    "description": (
        "A named visual theme: identity fields, a personality triple, and a "
        "map of token groups that are published as separate files."
    ),
    "type": "object",
    "required": ["name", "displayName", "description", "author", "version", "personality", "tokens"],
    "properties": {
        "name": {
            "type": "string",
            "pattern": "^[a-z][a-z0-9-]*$",
            "description": "Kebab-case identifier; must match the template directory.",
        },
        "displayName": {"type": "string", "minLength": 1},
        "description": {"type": "string", "minLength": 1},
        "author": {"type": "string", "minLength": 1},
        "version": {
            "type": "string",
            "pattern": r"^\d+\.\d+\.\d+",
            "description": "Semantic version of this template.",
        },
        "personality": {
            "type": "object",
            "required": ["mood", "spacing", "roundness"],
            "properties": {
                "mood": {"type": "string", "minLength": 1},
                "spacing": {"type": "string", "minLength": 1},
                "roundness": {"type": "string", "minLength": 1},
            },
        },
        "preview": {"description": "Optional preview payload shown by the installer."},
        "tokens": {
            "type": "object",
            "required": ["colors"],
            "propertyNames": {"pattern": TOKEN_GROUP_PATTERN},
            "additionalProperties": {"type": ["object", "array"]},
            "properties": {
                "colors": {
                    "type": "object",
                    "description": "Color token group; the one mandatory group.",
                },
            },
        },
    },
}


def get_schema() -> dict:
    """Return the JSON Schema for template definition files."""
    return TEMPLATE_SCHEMA
