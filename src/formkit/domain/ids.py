"""Identifier type and validation.

Ids are opaque strings generated by the surrounding application. The
domain never mints its own ids, select choices included; records only
refuse blank ones.

INVARIANT: IDs are permanent. Once assigned, an ID never changes.
"""

from __future__ import annotations

type ID = str


def validate_id(value: str) -> bool:
    """Check whether *value* is usable as an id (non-empty, not blank)."""
    return isinstance(value, str) and bool(value.strip())


def require_id(value: str | None) -> str | None:
    """Record validator: reject blank ids. ``None`` (an unset link) passes."""
    if value is not None and not validate_id(value):
        msg = f"Invalid id {value!r}: must be a non-blank string"
        raise ValueError(msg)
    return value
