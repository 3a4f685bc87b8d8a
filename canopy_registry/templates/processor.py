"""Template processor — split a template definition into published files.

Each key of ``tokens`` becomes its own ``<group>.json`` next to the
definition, and ``metadata.json`` records every generated file by URL and
checksum. ``tokens.colors`` is the one mandatory group.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from canopy_registry.errors import TemplateError
from canopy_registry.registry.models import Personality, TemplateRecord, TokenFile
from canopy_registry.registry.store import RegistryStore
from canopy_registry.templates.schema import TOKEN_GROUP_PATTERN
from canopy_registry.utils.hashing import json_checksum

logger = logging.getLogger(__name__)

REQUIRED_TOKEN_GROUP = "colors"


def load_template_definition(store: RegistryStore, name: str) -> dict[str, Any]:
    """Read and structurally check ``templates/<name>/template.json``.

    Raises:
        TemplateError: If the file is malformed, names another template,
            lacks ``tokens.colors``, or has a token group
            that is not a plain file stem (``template`` and ``metadata``
            are taken).
    """
    path = store.template_definition_path(name)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise TemplateError(name, f"Cannot read definition: {e}", path=str(path)) from e
    except ValueError as e:
        raise TemplateError(name, f"Invalid JSON: {e}", path=str(path)) from e

    if not isinstance(data, dict):
        raise TemplateError(name, "Template definition must be a JSON object", path=str(path))

    declared = data.get("name", name)
    if declared != name:
        raise TemplateError(
            name, f"Template name '{declared}' does not match its directory", path=str(path)
        )

    tokens = data.get("tokens")
    if not isinstance(tokens, dict) or REQUIRED_TOKEN_GROUP not in tokens:
        raise TemplateError(name, f"Missing required tokens.{REQUIRED_TOKEN_GROUP}", path=str(path))

    for group in tokens:
        if not re.match(TOKEN_GROUP_PATTERN, group):
            raise TemplateError(
                name,
                f"Token group '{group}' cannot be published as {group}.json",
                path=str(path),
            )
    return data


def process_template(store: RegistryStore, name: str, last_updated: str) -> TemplateRecord:
    """Externalize a template's token groups and write its metadata.

    Returns:
        The published TemplateRecord.

    Raises:
        TemplateError: See ``load_template_definition``. Nothing is written
            for a template that fails.
    """
    data = load_template_definition(store, name)
    tokens: dict[str, Any] = data["tokens"]

    token_files = []
    for group, value in tokens.items():
        store.write_json(store.token_group_path(name, group), value)
        token_files.append(
            TokenFile(
                type=group,
                url=store.token_group_url(name, group),
                checksum=json_checksum(value),
            )
        )

    personality = data.get("personality")
    if not isinstance(personality, dict):
        personality = {}
    record = TemplateRecord(
        name=name,
        display_name=data.get("displayName", ""),
        description=data.get("description", ""),
        author=data.get("author", ""),
        version=data.get("version", ""),
        last_updated=last_updated,
        personality=Personality(
            mood=personality.get("mood", ""),
            spacing=personality.get("spacing", ""),
            roundness=personality.get("roundness", ""),
        ),
        preview=data.get("preview"),
        token_files=tuple(token_files),
        template_url=store.template_url(name),
        metadata_url=store.template_metadata_url(name),
        checksum=json_checksum(data),
    )

    store.write_json(store.template_metadata_path(name), record.to_dict())
    logger.debug("Template %s: %d token files", name, len(token_files))
    return record
