"""Form aggregate: owns an ordered list of fields.

Field order is display order. The form enforces membership (a field is
added once, live, and only to the form it names) and owns the archive
cascade: removing a field clears the condition of every sibling that was
linked to it, in a single synchronous pass.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, field_validator

from formkit.domain.conditions import FieldCondition
from formkit.domain.errors import (
    CrossScopeError,
    InvalidConditionError,
    InvalidStateError,
    InvariantError,
    NotFoundError,
)
from formkit.domain.fields import Field, revise
from formkit.domain.ids import ID, require_id

logger = logging.getLogger(__name__)


class FormData(BaseModel):
    """Form record."""

    model_config = {"frozen": True, "extra": "forbid"}

    id: str
    title: str
    description: str | None = None
    archived: bool = False

    @field_validator("id")
    @classmethod
    def _check_id(cls, value: str) -> str:
        return require_id(value)


class Form:
    """A form and its fields."""

    def __init__(self, data: FormData | Mapping[str, Any]) -> None:
        if not isinstance(data, FormData):
            data = FormData.model_validate(data)
        self.data = data
        self.fields: list[Field] = []

    def __repr__(self) -> str:
        return f"Form(id={self.id!r}, title={self.data.title!r})"

    @property
    def id(self) -> ID:
        return self.data.id

    @property
    def archived(self) -> bool:
        return self.data.archived

    # --- Membership ---

    def add_field(self, field: Field) -> Field:
        """Append *field* to the end of the form.

        Raises:
            InvalidStateError: If the form is archived.
            InvariantError: If the field is archived or already a member.
            CrossScopeError: If the field names another form.
        """
        if self.archived:
            msg = f"Cannot add Field({field.id}) to archived Form({self.id})"
            raise InvalidStateError(msg, form_id=self.id, field_id=field.id)
        if field.archived:
            msg = f"invariant: adding Field({field.id}) to Form({self.id}), but is already archived"
            raise InvariantError(msg, form_id=self.id, field_id=field.id)
        if self.get_field_index_by_id(field.id) != -1:
            msg = f"invariant: Field({field.id}) was already added to Form({self.id})"
            raise InvariantError(msg, form_id=self.id, field_id=field.id)
        if field.form_id != self.id:
            msg = f"Field({field.id}) belongs to Form({field.form_id}), not Form({self.id})"
            raise CrossScopeError(msg, form_id=self.id, field_id=field.id)

        self.fields.append(field)
        return field

    def remove_field(self, field: Field) -> list[ID]:
        """Soft-remove *field* and sever every condition that points at it.

        Re-removing an archived member is allowed; the cascade runs again.

        Returns:
            Ids of the sibling fields whose condition was cleared.

        Raises:
            NotFoundError: If the field was never a member.
        """
        member = self.get_field(field.id)
        member.set_archived()
        if field is not member:
            field.set_archived()

        cleared: list[ID] = []
        for related in self.fields:
            if related is not member and related.linked_field_id == member.id:
                related.clear_linked_field_condition()
                cleared.append(related.id)

        if cleared:
            logger.debug("Archiving field %s cleared conditions on %s", member.id, cleared)
        return cleared

    def has_field(self, field: Field) -> bool:
        return self.get_field_index_by_id(field.id) != -1

    def get_field_index_by_id(self, field_id: ID) -> int:
        """Position of the field with *field_id*, archived included; -1 if absent."""
        for idx, field in enumerate(self.fields):
            if field.id == field_id:
                return idx
        return -1

    def get_field(self, field_id: ID) -> Field:
        """Look up a member field by id.

        Raises:
            NotFoundError: If no member has *field_id*.
        """
        idx = self.get_field_index_by_id(field_id)
        if idx == -1:
            msg = f"Field({field_id}) does not belong to Form({self.id})"
            raise NotFoundError(msg, form_id=self.id, field_id=field_id)
        return self.fields[idx]

    def find_field(self, key: str) -> Field | None:
        """Look up a member field by id, falling back to its name.

        Names are matched against live fields before archived ones.
        """
        idx = self.get_field_index_by_id(key)
        if idx != -1:
            return self.fields[idx]
        by_name = [field for field in self.fields if field.data.name == key]
        by_name.sort(key=lambda field: field.archived)
        return by_name[0] if by_name else None

    def get_fields(self, *, include_archived: bool = False) -> list[Field]:
        """Fields in the order they were added, live ones only unless *include_archived*."""
        if include_archived:
            return list(self.fields)
        return [field for field in self.fields if not field.archived]

    # --- Conditions ---

    def set_field_condition(
        self,
        field: Field,
        linked_field_id: ID,
        condition: FieldCondition,
    ) -> None:
        """Condition *field* on the member with *linked_field_id*.

        Both ends are resolved by lookup in this form.

        Raises:
            NotFoundError: If either field is not a member.
            InvalidConditionError: If the link would close a cycle.
            CrossScopeError: If the linked field is archived.
        """
        member = self.get_field(field.id)
        linked = self.get_field(linked_field_id)
        if linked is not member and self._links_back_to(linked, member.id):
            msg = f"Linking Field({member.id}) to Field({linked.id}) would create a cycle"
            raise InvalidConditionError(msg, field_id=member.id, linked_field_id=linked.id)
        member.set_linked_field_condition(linked, condition)

    def _links_back_to(self, start: Field, target_id: ID) -> bool:
        """Follow the chain of linked fields from *start* looking for *target_id*."""
        seen: set[ID] = set()
        current: Field | None = start
        while current is not None and current.linked_field_id is not None:
            if current.linked_field_id == target_id:
                return True
            if current.id in seen:
                return False
            seen.add(current.id)
            idx = self.get_field_index_by_id(current.linked_field_id)
            current = self.fields[idx] if idx != -1 else None
        return False

    def get_dependents(self, field: Field) -> list[Field]:
        """Live fields whose condition links to *field*."""
        return [
            related
            for related in self.fields
            if not related.archived and related.linked_field_id == field.id
        ]

    # --- Lifecycle ---

    def set_archived(self) -> None:
        """Archive the form and every field on it. Idempotent."""
        if not self.data.archived:
            self.data = revise(self.data, archived=True)
        for field in self.fields:
            field.set_archived()
        logger.debug("Archived form %s with %d fields", self.id, len(self.fields))

    def to_dict(self) -> dict[str, Any]:
        """Serialize the form record and its fields (archived included)."""
        return {
            "form": self.data.model_dump(mode="json"),
            "fields": [field.to_dict() for field in self.fields],
        }
