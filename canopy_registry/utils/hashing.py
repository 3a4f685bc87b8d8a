"""Content hashing for change detection and artifact checksums.

Checksums are MD5 hex digests of the exact text. No normalization is
applied, so whitespace or line-ending edits change the digest.
"""

import hashlib
import json
from typing import Any


def content_checksum(text: str) -> str:
    """Compute the MD5 hex digest of string content.

    Args:
        text: Raw artifact text.

    Returns:
        32-character lowercase hexadecimal digest.
    """
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def canonical_json(value: Any) -> str:
    """Serialize a JSON value compactly, keeping key insertion order."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def json_checksum(value: Any) -> str:
    """Checksum of the canonical JSON serialization of a value."""
    return content_checksum(canonical_json(value))
