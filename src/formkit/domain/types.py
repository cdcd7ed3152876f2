"""Field type tags and property-level value types.

``FieldType`` is the tag stored on every field record and the key of the
field registry in :mod:`formkit.domain.fields`.
"""

from __future__ import annotations

import re
from enum import StrEnum


class FieldType(StrEnum):
    """Kinds of field a form can hold."""

    TEXT = "text"
    BOOLEAN = "boolean"
    SELECT = "select"
    FILE = "file"


class TextFormat(StrEnum):
    """Display/format hint for text fields. Not enforced by validation."""

    TEXT = "text"
    TEXT_BOX = "text-box"
    EMAIL = "email"
    URL = "url"


# Top-level media types accepted on their own (e.g. "image" for any image).
MIME_TOP_LEVEL_TYPES: frozenset[str] = frozenset(
    {"application", "audio", "font", "image", "model", "text", "video"}
)

_MIME_PAIR_PATTERN = re.compile(r"^[^/\s]+/[^/\s]+$")


def is_mime_type_like(value: str) -> bool:
    """Check whether *value* is a top-level media type or a ``type/subtype`` pair."""
    return value in MIME_TOP_LEVEL_TYPES or _MIME_PAIR_PATTERN.match(value) is not None


def is_extension_like(value: str) -> bool:
    """Check whether *value* looks like a file extension (``.pdf``)."""
    return len(value) > 1 and value.startswith(".")
