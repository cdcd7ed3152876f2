"""Form definition and response files.

A definition file mirrors the persisted records of one form::

    form:
      id: signup
      title: Newsletter signup
    fields:
      - id: email
        field_properties_id: p-email
        name: email
        label: Email address
        type: text
        required: true
        properties: {format: email, min_length: 3}
      - id: cadence
        field_properties_id: p-cadence
        name: cadence
        label: How often?
        type: select
        linked_field_id: subscribe
        match_value_bool: true
        properties: {default_choice_id: weekly}
        choices:
          - {id: weekly, field_properties_id: p-cadence, label: Weekly}

Condition columns are read as stored. The aggregate is assembled through
the domain operations (``add_field``, ``add_choice``, ``set_default_choice``)
so the same invariants hold as for forms built in code; archived records
are added live and archived afterwards.

YAML (``.yaml``/``.yml``) is read with ruamel.yaml's safe loader; ``.json``
with the stdlib.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from ruamel.yaml import YAML, YAMLError

from formkit.domain.errors import FormError
from formkit.domain.fields import Field, SelectField, SelectFieldChoice, build_field
from formkit.domain.form import Form
from formkit.domain.types import FieldType

logger = logging.getLogger(__name__)

YAML_SUFFIXES = frozenset({".yaml", ".yml"})
JSON_SUFFIXES = frozenset({".json"})


class DefinitionError(Exception):
    """A definition or response file could not be read or assembled."""

    def __init__(self, path: Path | None, message: str) -> None:
        self.path = path
        self.message = message
        where = f"{path}: " if path is not None else ""
        super().__init__(f"{where}{message}")


def _new_yaml() -> YAML:
    """Create a fresh safe-mode YAML parser (plain dicts and lists)."""
    return YAML(typ="safe", pure=True)


def read_document(path: Path) -> dict[str, Any]:
    """Parse a YAML or JSON file whose top level is a mapping.

    Raises:
        DefinitionError: On unknown suffix, unreadable file, bad syntax,
            or a non-mapping top level.
    """
    suffix = path.suffix.lower()
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DefinitionError(path, f"cannot read file ({exc.strerror})") from exc

    try:
        if suffix in YAML_SUFFIXES:
            doc = _new_yaml().load(raw)
        elif suffix in JSON_SUFFIXES:
            doc = json.loads(raw)
        else:
            raise DefinitionError(path, f"unsupported file type {suffix!r}")
    except (YAMLError, json.JSONDecodeError) as exc:
        raise DefinitionError(path, f"invalid syntax: {exc}") from exc

    if doc is None:
        doc = {}
    if not isinstance(doc, dict):
        raise DefinitionError(path, "top level must be a mapping")
    return doc


# ---------------------------------------------------------------------------
# Form definitions
# ---------------------------------------------------------------------------


def load_form(path: Path) -> Form:
    """Read a definition file and assemble its :class:`Form`."""
    return build_form(read_document(path), source=path)


def build_form(doc: Mapping[str, Any], *, source: Path | None = None) -> Form:
    """Assemble a :class:`Form` from a parsed definition document.

    Raises:
        DefinitionError: If a record is malformed or breaks a domain rule.
    """
    form_record = doc.get("form")
    if not isinstance(form_record, Mapping):
        raise DefinitionError(source, "missing 'form' mapping")
    field_records = doc.get("fields") or []
    if not isinstance(field_records, list):
        raise DefinitionError(source, "'fields' must be a list")

    form_record = dict(form_record)
    form_archived = bool(form_record.pop("archived", False))
    try:
        form = Form(form_record)
        for position, raw in enumerate(field_records):
            if not isinstance(raw, Mapping):
                raise DefinitionError(source, f"fields[{position}] must be a mapping")
            _add_field_record(form, dict(raw), source)
    except ValidationError as exc:
        raise DefinitionError(source, f"invalid record: {exc}") from exc
    except FormError as exc:
        raise DefinitionError(source, exc.message) from exc

    if form_archived:
        form.set_archived()
    logger.debug("Loaded form %s with %d fields", form.id, len(form.fields))
    return form


def _add_field_record(form: Form, record: dict[str, Any], source: Path | None) -> Field:
    raw_properties = record.pop("properties", None) or {}
    if not isinstance(raw_properties, Mapping):
        msg = f"properties of field {record.get('id')!r} must be a mapping"
        raise DefinitionError(source, msg)
    properties = dict(raw_properties)
    choices = record.pop("choices", None) or []
    if not isinstance(choices, list):
        raise DefinitionError(source, f"choices of field {record.get('id')!r} must be a list")
    archived = bool(record.pop("archived", False))
    record.setdefault("form_id", form.id)

    default_choice_id = None
    if record.get("type") == FieldType.SELECT:
        default_choice_id = properties.pop("default_choice_id", None)
    elif choices:
        msg = f"Field {record.get('id')!r} of type {record.get('type')!r} cannot have choices"
        raise DefinitionError(source, msg)

    try:
        field = build_field(record, properties)
    except KeyError as exc:
        raise DefinitionError(source, str(exc.args[0])) from exc
    form.add_field(field)

    if isinstance(field, SelectField):
        _add_choices(field, choices, source)
        if default_choice_id is not None:
            field.set_default_choice(field.get_choice(str(default_choice_id)))

    if archived:
        field.set_archived()
    return field


def _add_choices(field: SelectField, records: list[Any], source: Path | None) -> None:
    for raw in records:
        if not isinstance(raw, Mapping):
            raise DefinitionError(source, f"choices of field {field.id!r} must be mappings")
        record = dict(raw)
        record.setdefault("field_properties_id", field.data.field_properties_id)
        archived = bool(record.pop("archived", False))
        choice = field.add_choice(SelectFieldChoice(record))
        if archived:
            field.remove_choice(choice)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


def load_response(path: Path, form: Form) -> dict[str, Any]:
    """Read a response file mapping field ids (or names) to submitted values.

    Values for file fields are paths, relative to the response file, and
    are replaced with the file's bytes.

    Raises:
        DefinitionError: If the file or a referenced upload cannot be read.
    """
    doc = read_document(path)
    values: dict[str, Any] = {}
    for key, value in doc.items():
        field = form.find_field(str(key))
        if field is not None and field.data.type == FieldType.FILE and isinstance(value, str):
            upload = path.parent / value
            try:
                value = upload.read_bytes()
            except OSError as exc:
                msg = f"cannot read upload {upload} ({exc.strerror})"
                raise DefinitionError(path, msg) from exc
        values[str(key)] = value
    return values
