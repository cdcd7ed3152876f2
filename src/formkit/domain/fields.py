"""Field models: shared field record, per-type properties, validation.

A field is a pair of frozen pydantic records: :class:`FieldData` (the
columns shared by every field type) and a type-specific properties record.
Mutating operations never edit a record in place; they build a revised
record with :func:`revise`, which re-runs validation, and swap it in only
once it is valid. A failed operation therefore leaves the field untouched.

Field types are registered in :data:`FIELD_REGISTRY` keyed by the
:class:`~formkit.domain.types.FieldType` tag stored on the record, and
:func:`build_field` dispatches on that tag.

The per-type ``is_valid_value()`` returns a bool and never raises: a value
of the wrong Python type is simply invalid.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar

from pydantic import (
    BaseModel,
    NonNegativeInt,
    StrictBool,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)

from formkit.domain.conditions import CONDITION_RULE_KEYS, MATCH_RECORD_KEYS, FieldCondition
from formkit.domain.errors import (
    CrossScopeError,
    FieldValueError,
    InvalidConditionError,
    InvalidStateError,
    InvariantError,
    NotFoundError,
)
from formkit.domain.ids import ID, require_id
from formkit.domain.types import FieldType, TextFormat, is_extension_like, is_mime_type_like

logger = logging.getLogger(__name__)


def revise[T: BaseModel](record: T, **changes: Any) -> T:
    """Return a validated copy of *record* with *changes* applied."""
    return type(record).model_validate({**record.model_dump(), **changes})


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class FieldData(BaseModel):
    """Columns shared by every field type.

    INVARIANT: condition columns are all-or-nothing. Without
    ``linked_field_id`` every rule column is None; with it, at most one
    ``match_value_*`` is set and at least one of ``has_value`` or a match
    value is set.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: str
    form_id: str
    field_properties_id: str
    name: str
    label: str
    description: str | None = None
    archived: bool = False
    type: FieldType
    required: bool = False

    linked_field_id: str | None = None
    has_value: StrictBool | None = None
    match_value_str: StrictStr | None = None
    match_value_int: StrictInt | None = None
    match_value_bool: StrictBool | None = None

    @field_validator("id", "form_id", "field_properties_id", "linked_field_id")
    @classmethod
    def _check_ids(cls, value: str | None) -> str | None:
        return require_id(value)

    @model_validator(mode="after")
    def _check_condition(self) -> FieldData:
        rules = [key for key in CONDITION_RULE_KEYS if getattr(self, key) is not None]
        matches = [key for key in MATCH_RECORD_KEYS.values() if getattr(self, key) is not None]
        if self.linked_field_id is None:
            if rules:
                msg = f"Condition columns {rules} set without linked_field_id"
                raise ValueError(msg)
            return self
        if self.linked_field_id == self.id:
            msg = f"Field {self.id!r} cannot be linked to itself"
            raise ValueError(msg)
        if len(matches) > 1:
            msg = f"Only one match value may be set, got {matches}"
            raise ValueError(msg)
        if not rules:
            msg = "linked_field_id set without has_value or a match value"
            raise ValueError(msg)
        return self


class TextFieldProperties(BaseModel):
    """Properties record for text fields."""

    model_config = {"frozen": True, "extra": "forbid"}

    # Used for display hints; not enforced by is_valid_value().
    format: TextFormat = TextFormat.TEXT
    min_length: NonNegativeInt | None = None
    max_length: NonNegativeInt | None = None
    placeholder: str | None = None
    default_value: str | None = None

    @model_validator(mode="after")
    def _check_bounds(self) -> TextFieldProperties:
        if (
            self.min_length is not None
            and self.max_length is not None
            and self.min_length > self.max_length
        ):
            msg = f"min_length {self.min_length} exceeds max_length {self.max_length}"
            raise ValueError(msg)
        return self


class BooleanFieldProperties(BaseModel):
    """Properties record for boolean fields."""

    model_config = {"frozen": True, "extra": "forbid"}

    default_value: StrictBool | None = None


class SelectFieldProperties(BaseModel):
    """Properties record for select fields."""

    model_config = {"frozen": True, "extra": "forbid"}

    default_choice_id: str | None = None


class FileFieldProperties(BaseModel):
    """Properties record for file fields.

    Extensions and MIME types are recorded for the file-inspection
    collaborator; the core only checks size.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    max_size_bytes: NonNegativeInt | None = None
    valid_extensions: list[str] | None = None
    valid_mime_types: list[str] | None = None

    @field_validator("valid_extensions")
    @classmethod
    def _check_extensions(cls, value: list[str] | None) -> list[str] | None:
        for ext in value or []:
            if not is_extension_like(ext):
                msg = f"Extension {ext!r} must start with '.'"
                raise ValueError(msg)
        return value

    @field_validator("valid_mime_types")
    @classmethod
    def _check_mime_types(cls, value: list[str] | None) -> list[str] | None:
        for mime in value or []:
            if not is_mime_type_like(mime):
                msg = f"MIME type {mime!r} is neither a top-level type nor 'type/subtype'"
                raise ValueError(msg)
        return value


class ChoiceData(BaseModel):
    """Record for one select choice."""

    model_config = {"frozen": True, "extra": "forbid"}

    id: str
    # Links to the properties record, not the field, so a field can be
    # swapped out without orphaning its choices.
    field_properties_id: str
    label: str
    archived: bool = False

    @field_validator("id", "field_properties_id")
    @classmethod
    def _check_ids(cls, value: str) -> str:
        return require_id(value)


# ---------------------------------------------------------------------------
# Field base
# ---------------------------------------------------------------------------


class Field(ABC):
    """Base for all field types.

    Subclasses set ``field_type`` and ``properties_model`` and implement
    :meth:`is_valid_value`.
    """

    field_type: ClassVar[FieldType]
    properties_model: ClassVar[type[BaseModel]]

    def __init__(
        self,
        data: FieldData | Mapping[str, Any],
        properties: BaseModel | Mapping[str, Any] | None = None,
    ) -> None:
        if not isinstance(data, FieldData):
            data = FieldData.model_validate({"type": self.field_type, **data})
        if data.type != self.field_type:
            msg = f"{type(self).__name__} cannot hold a {data.type!r} field record"
            raise ValueError(msg)
        if properties is None:
            properties = self.properties_model()
        elif not isinstance(properties, self.properties_model):
            properties = self.properties_model.model_validate(properties)
        self.data = data
        self.properties = properties

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, name={self.data.name!r})"

    @property
    def id(self) -> ID:
        return self.data.id

    @property
    def form_id(self) -> ID:
        return self.data.form_id

    @property
    def archived(self) -> bool:
        return self.data.archived

    @property
    def linked_field_id(self) -> ID | None:
        return self.data.linked_field_id

    @property
    def condition(self) -> FieldCondition | None:
        """The stored linked-field rule, or None when unconditioned."""
        if self.data.linked_field_id is None:
            return None
        return FieldCondition.from_record(self.data.model_dump())

    def set_archived(self) -> None:
        """Soft-delete this field. Idempotent; siblings are left alone."""
        if self.data.archived:
            return
        self.data = revise(self.data, archived=True)
        logger.debug("Archived field %s", self.id)

    def clear_linked_field_condition(self) -> None:
        """Drop the linked field and every rule column together."""
        cleared = dict.fromkeys(CONDITION_RULE_KEYS)
        self.data = revise(self.data, linked_field_id=None, **cleared)

    def set_linked_field_condition(self, linked_field: Field, condition: FieldCondition) -> None:
        """Make this field's visibility depend on *linked_field*.

        Exactly one ``match_value_*`` column is written, chosen by the
        condition's match kind; the other two are cleared. ``has_value`` is
        stored as given.

        Raises:
            InvalidConditionError: If *linked_field* is this field.
            CrossScopeError: If *linked_field* is in another form or archived.
        """
        if linked_field.id == self.id:
            msg = f"Field({self.id}) cannot be conditioned on itself"
            raise InvalidConditionError(msg, field_id=self.id)
        if linked_field.form_id != self.form_id:
            msg = (
                f"Cannot link Field({self.id}) to Field({linked_field.id}); "
                f"they belong to different forms"
            )
            raise CrossScopeError(
                msg, field_id=self.id, linked_field_id=linked_field.id, form_id=self.form_id
            )
        if linked_field.archived:
            msg = f"Cannot link Field({self.id}) to archived Field({linked_field.id})"
            raise CrossScopeError(msg, field_id=self.id, linked_field_id=linked_field.id)

        self.data = revise(self.data, linked_field_id=linked_field.id, **condition.to_record())
        logger.debug("Linked field %s to %s", self.id, linked_field.id)

    @abstractmethod
    def is_valid_value(self, value: Any) -> bool:
        """Validate a submitted value for this field."""
        ...

    def to_dict(self) -> dict[str, Any]:
        """Serialize the field record with its properties nested under ``properties``."""
        payload = self.data.model_dump(mode="json")
        payload["properties"] = self.properties.model_dump(mode="json", exclude_none=True)
        return payload


# ---------------------------------------------------------------------------
# Concrete field types
# ---------------------------------------------------------------------------


class TextField(Field):
    """Free text with optional length bounds.

    INVARIANT: ``default_value``, when set, passes :meth:`is_valid_value`.
    """

    field_type: ClassVar[FieldType] = FieldType.TEXT
    properties_model: ClassVar[type[BaseModel]] = TextFieldProperties
    properties: TextFieldProperties

    def __init__(
        self,
        data: FieldData | Mapping[str, Any],
        properties: TextFieldProperties | Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(data, properties)
        default = self.properties.default_value
        if default is not None and not self.is_valid_value(default):
            msg = f"Default {default!r} for TextField({self.id}) does not pass validation"
            raise FieldValueError(msg, field_id=self.id)

    def set_default(self, value: str) -> None:
        """Set the default value.

        Raises:
            FieldValueError: If *value* fails this field's validation.
        """
        if not self.is_valid_value(value):
            msg = f"Cannot set default for TextField({self.id}); {value!r} does not pass validation"
            raise FieldValueError(msg, field_id=self.id)
        self.properties = revise(self.properties, default_value=value)

    def is_valid_value(self, value: Any) -> bool:
        # Format is not checked here; email/URL shape belongs to a collaborator.
        if not isinstance(value, str):
            return False
        min_length = self.properties.min_length
        max_length = self.properties.max_length
        if min_length is not None and len(value) < min_length:
            return False
        if max_length is not None and len(value) > max_length:
            return False
        return True


class BooleanField(Field):
    """Yes/no field."""

    field_type: ClassVar[FieldType] = FieldType.BOOLEAN
    properties_model: ClassVar[type[BaseModel]] = BooleanFieldProperties
    properties: BooleanFieldProperties

    def set_default(self, value: bool) -> None:
        self.properties = revise(self.properties, default_value=value)

    def is_valid_value(self, value: Any) -> bool:
        return isinstance(value, bool)


class SelectFieldChoice:
    """A single option on a select field.

    Choices are archived rather than deleted so that stored responses keep
    pointing at a real choice.
    """

    def __init__(self, data: ChoiceData | Mapping[str, Any]) -> None:
        if not isinstance(data, ChoiceData):
            data = ChoiceData.model_validate(data)
        self.data = data

    def __repr__(self) -> str:
        return f"SelectFieldChoice(id={self.id!r}, label={self.data.label!r})"

    @property
    def id(self) -> ID:
        return self.data.id

    @property
    def label(self) -> str:
        return self.data.label

    @property
    def archived(self) -> bool:
        return self.data.archived

    def set_archived(self) -> None:
        if self.data.archived:
            return
        self.data = revise(self.data, archived=True)


class SelectField(Field):
    """Single choice out of an ordered list of :class:`SelectFieldChoice`.

    INVARIANT: ``default_choice_id``, when set through
    :meth:`set_default_choice`, names a live member choice.
    """

    field_type: ClassVar[FieldType] = FieldType.SELECT
    properties_model: ClassVar[type[BaseModel]] = SelectFieldProperties
    properties: SelectFieldProperties

    def __init__(
        self,
        data: FieldData | Mapping[str, Any],
        properties: SelectFieldProperties | Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(data, properties)
        self.choices: list[SelectFieldChoice] = []

    def add_choice(self, choice: SelectFieldChoice) -> SelectFieldChoice:
        """Append *choice* and return it.

        Raises:
            InvariantError: If the choice is archived or already a member.
            CrossScopeError: If the choice belongs to other field properties.
        """
        if choice.archived:
            msg = (
                f"invariant: adding SelectFieldChoice({choice.id}) to "
                f"SelectField({self.id}), but is already archived"
            )
            raise InvariantError(msg, field_id=self.id, choice_id=choice.id)
        if self._has_choice_id(choice.id):
            msg = f"invariant: SelectFieldChoice({choice.id}) already on SelectField({self.id})"
            raise InvariantError(msg, field_id=self.id, choice_id=choice.id)
        if choice.data.field_properties_id != self.data.field_properties_id:
            msg = (
                f"SelectFieldChoice({choice.id}) belongs to properties "
                f"{choice.data.field_properties_id!r}, not {self.data.field_properties_id!r}"
            )
            raise CrossScopeError(msg, field_id=self.id, choice_id=choice.id)

        self.choices.append(choice)
        return choice

    def remove_choice(self, choice: SelectFieldChoice) -> None:
        """Archive *choice* in place. Clears the default if it pointed here.

        Raises:
            NotFoundError: If the choice is not a member of this field.
        """
        member = self.get_choice(choice.id)
        member.set_archived()
        if choice is not member:
            choice.set_archived()
        if self.properties.default_choice_id == member.id:
            self.properties = revise(self.properties, default_choice_id=None)
        logger.debug("Archived choice %s on field %s", member.id, self.id)

    def has_choice(self, choice: SelectFieldChoice) -> bool:
        return self._has_choice_id(choice.id)

    def _has_choice_id(self, choice_id: ID) -> bool:
        return self.get_choice_index_by_id(choice_id) != -1

    def get_choice_index_by_id(self, choice_id: ID) -> int:
        """Position of the choice with *choice_id*, archived included; -1 if absent."""
        for idx, choice in enumerate(self.choices):
            if choice.id == choice_id:
                return idx
        return -1

    def get_choice(self, choice_id: ID) -> SelectFieldChoice:
        """Look up a member choice by id.

        Raises:
            NotFoundError: If no member has *choice_id*.
        """
        idx = self.get_choice_index_by_id(choice_id)
        if idx == -1:
            msg = f"SelectFieldChoice({choice_id}) does not belong to SelectField({self.id})"
            raise NotFoundError(msg, field_id=self.id, choice_id=choice_id)
        return self.choices[idx]

    def set_default_choice(self, choice: SelectFieldChoice) -> None:
        """Make *choice* the default.

        Raises:
            NotFoundError: If the choice is not a member.
            InvalidStateError: If the choice is archived.
        """
        member = self.get_choice(choice.id)
        if member.archived or choice.archived:
            msg = f"Tried to set SelectFieldChoice({choice.id}) as default, but is archived"
            raise InvalidStateError(msg, field_id=self.id, choice_id=choice.id)
        self.properties = revise(self.properties, default_choice_id=member.id)

    def get_choices(self, *, include_archived: bool = False) -> list[SelectFieldChoice]:
        """Choices in insertion order, live ones only unless *include_archived*."""
        if include_archived:
            return list(self.choices)
        return [choice for choice in self.choices if not choice.archived]

    def is_valid_value(self, value: Any) -> bool:
        """True iff *value* is the id of a live choice on this field."""
        if not isinstance(value, str):
            return False
        idx = self.get_choice_index_by_id(value)
        return idx != -1 and not self.choices[idx].archived

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["choices"] = [choice.data.model_dump(mode="json") for choice in self.choices]
        return payload


class FileField(Field):
    """Uploaded file; only byte size is validated here."""

    field_type: ClassVar[FieldType] = FieldType.FILE
    properties_model: ClassVar[type[BaseModel]] = FileFieldProperties
    properties: FileFieldProperties

    def is_valid_value(self, value: Any) -> bool:
        # Extension and MIME checks need real file inspection and live elsewhere.
        if isinstance(value, memoryview):
            size = value.nbytes
        elif isinstance(value, (bytes, bytearray)):
            size = len(value)
        else:
            return False
        max_size = self.properties.max_size_bytes
        return max_size is None or size <= max_size


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

FIELD_REGISTRY: dict[str, type[Field]] = {}


def get_field_class(field_type: str) -> type[Field]:
    """Look up the Field class registered for a type tag.

    Raises:
        KeyError: If no field class is registered for *field_type*.
    """
    if field_type in FIELD_REGISTRY:
        return FIELD_REGISTRY[field_type]
    msg = f"No field class registered for type={field_type!r}"
    raise KeyError(msg)


def build_field(
    data: FieldData | Mapping[str, Any],
    properties: BaseModel | Mapping[str, Any] | None = None,
) -> Field:
    """Construct the right Field subclass for the record's ``type`` tag."""
    field_type = data.type if isinstance(data, FieldData) else data.get("type")
    if field_type is None:
        msg = "Field record has no 'type'"
        raise KeyError(msg)
    return get_field_class(str(field_type))(data, properties)


def _register_fields() -> None:
    """Populate :data:`FIELD_REGISTRY` with the built-in field types."""
    for field_cls in (TextField, BooleanField, SelectField, FileField):
        FIELD_REGISTRY[str(field_cls.field_type)] = field_cls


_register_fields()
