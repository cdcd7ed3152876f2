"""Linked-field conditions: match values, condition payloads, evaluation.

A condition makes a field's visibility depend on the submitted value of
another field in the same form. The rule is expressed by ``has_value``
(presence), a :class:`MatchValue` (equality), or both combined.

Match values carry an explicit kind instead of being inferred from
truthiness, so ``False``, ``0`` and ``""`` are legitimate match values.
Stored records keep the flat persistence shape (``match_value_str``,
``match_value_int``, ``match_value_bool``); :meth:`FieldCondition.to_record`
and :meth:`FieldCondition.from_record` convert between the two.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

from formkit.domain.errors import InvalidConditionError

# Record key that holds the value for each match kind.
MATCH_RECORD_KEYS: dict[str, str] = {
    "str": "match_value_str",
    "int": "match_value_int",
    "bool": "match_value_bool",
}

CONDITION_RULE_KEYS: tuple[str, ...] = ("has_value", *MATCH_RECORD_KEYS.values())


class MatchValue(BaseModel):
    """A scalar to compare a linked field's value against, tagged by kind."""

    model_config = {"frozen": True}

    kind: Literal["str", "int", "bool", "none"] = "none"
    value: bool | int | str | None = None

    @model_validator(mode="after")
    def _check_kind(self) -> MatchValue:
        expected = {
            "none": self.value is None,
            "bool": isinstance(self.value, bool),
            "int": isinstance(self.value, int) and not isinstance(self.value, bool),
            "str": isinstance(self.value, str),
        }
        if not expected[self.kind]:
            msg = f"Match value {self.value!r} does not fit kind {self.kind!r}"
            raise ValueError(msg)
        return self

    @classmethod
    def none(cls) -> MatchValue:
        """No equality rule."""
        return cls()

    @classmethod
    def of(cls, value: object) -> MatchValue:
        """Build a match value from a raw scalar, picking the kind by its type.

        ``bool`` is checked before ``int`` since it is an ``int`` subclass.
        Numbers are matched as ints only: a float such as ``2.5`` (or
        ``2.0``) has no match column and is refused rather than truncated.

        Raises:
            InvalidConditionError: If *value* is not a str, int, bool, or None.
        """
        if value is None:
            return cls()
        if isinstance(value, bool):
            return cls(kind="bool", value=value)
        if isinstance(value, int):
            return cls(kind="int", value=value)
        if isinstance(value, str):
            return cls(kind="str", value=value)
        msg = f"Unsupported match value {value!r} ({type(value).__name__}); use str, int or bool"
        raise InvalidConditionError(msg, match_value=repr(value))

    @property
    def is_set(self) -> bool:
        return self.kind != "none"

    def matches(self, value: object) -> bool:
        """Check *value* for equality with this match value, kind included."""
        if self.kind == "bool":
            return isinstance(value, bool) and value is self.value
        if self.kind == "int":
            return isinstance(value, int) and not isinstance(value, bool) and value == self.value
        if self.kind == "str":
            return isinstance(value, str) and value == self.value
        return False


class FieldCondition(BaseModel):
    """Rule payload for :meth:`Field.set_linked_field_condition`.

    ``has_value`` and ``match`` are independent; when both are set the
    linked field must have a value *and* that value must match.
    """

    model_config = {"frozen": True}

    has_value: bool | None = None
    match: MatchValue = Field(default_factory=MatchValue)

    @model_validator(mode="after")
    def _require_rule(self) -> FieldCondition:
        if self.has_value is None and not self.match.is_set:
            msg = "A condition needs has_value, a match value, or both"
            raise ValueError(msg)
        return self

    @classmethod
    def matching(cls, value: object, *, has_value: bool | None = None) -> FieldCondition:
        """Condition on the linked field's value being equal to *value*."""
        return cls(has_value=has_value, match=MatchValue.of(value))

    def to_record(self) -> dict[str, Any]:
        """Flatten into the persisted rule keys; unused keys are ``None``."""
        record: dict[str, Any] = {key: None for key in CONDITION_RULE_KEYS}
        record["has_value"] = self.has_value
        if self.match.is_set:
            record[MATCH_RECORD_KEYS[self.match.kind]] = self.match.value
        return record

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> FieldCondition | None:
        """Rebuild a condition from flat rule keys, or ``None`` when no rule is stored."""
        match = MatchValue.none()
        for kind, key in MATCH_RECORD_KEYS.items():
            if record.get(key) is not None:
                match = MatchValue(kind=kind, value=record[key])  # type: ignore[arg-type]
                break
        has_value = record.get("has_value")
        if has_value is None and not match.is_set:
            return None
        return cls(has_value=has_value, match=match)


def has_submitted_value(value: object) -> bool:
    """Whether *value* counts as answered: not None and not empty text/bytes.

    ``False`` and ``0`` are answers.
    """
    if value is None:
        return False
    if isinstance(value, (str, bytes, bytearray)):
        return len(value) > 0
    return True


def condition_met(condition: FieldCondition, value: object) -> bool:
    """Evaluate *condition* against the linked field's submitted *value*."""
    present = has_submitted_value(value)
    if condition.has_value is not None and present != condition.has_value:
        return False
    if condition.match.is_set:
        return present and condition.match.matches(value)
    return True
