"""Exception hierarchy for the registry pipeline."""

from __future__ import annotations

from typing import Any, Optional


class RegistryError(Exception):
    """Base error for registry build and validation failures."""

    error_type = "registry_error"

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path

    def to_json(self) -> dict[str, Any]:
        """Serialize error to JSON format for machine parsing."""
        result: dict[str, Any] = {
            "error": self.error_type,
            "message": self.message,
        }
        if self.path:
            result["path"] = self.path
        return result

    def __str__(self) -> str:
        if self.path:
            return f"{self.message} | path: {self.path}"
        return self.message


class ConfigError(RegistryError):
    """Invalid or unreadable registry configuration."""

    error_type = "config_invalid"


class SourceTreeError(RegistryError):
    """A required source directory is missing."""

    error_type = "source_missing"


class TemplateError(RegistryError):
    """A template definition could not be processed."""

    error_type = "template_invalid"

    def __init__(self, template: str, message: str, path: Optional[str] = None):
        super().__init__(message, path)
        self.template = template

    def to_json(self) -> dict[str, Any]:
        result = super().to_json()
        result["template"] = self.template
        return result
