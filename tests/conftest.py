"""Shared pytest fixtures and test helpers for formkit tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from formkit.domain.fields import BooleanField, FileField, SelectField, SelectFieldChoice, TextField
from formkit.domain.form import Form

FORM_ID = "form-1"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def form() -> Form:
    """An empty live form."""
    return Form({"id": FORM_ID, "title": "Newsletter signup"})


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run in a temp directory so no stray formkit.toml is discovered."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("FORMKIT_CONFIG", raising=False)


# ---------------------------------------------------------------------------
# Shared test helpers (used across test modules)
# ---------------------------------------------------------------------------


def field_record(field_id: str, field_type: str, **overrides: Any) -> dict[str, Any]:
    """A minimal field record on FORM_ID."""
    record: dict[str, Any] = {
        "id": field_id,
        "form_id": FORM_ID,
        "field_properties_id": f"props-{field_id}",
        "name": field_id,
        "label": field_id.title(),
        "type": field_type,
    }
    record.update(overrides)
    return record


def text_field(
    field_id: str = "email", properties: dict[str, Any] | None = None, **kw: Any
) -> TextField:
    return TextField(field_record(field_id, "text", **kw), properties)


def boolean_field(field_id: str = "subscribe", **kw: Any) -> BooleanField:
    return BooleanField(field_record(field_id, "boolean", **kw))


def select_field(field_id: str = "cadence", **kw: Any) -> SelectField:
    return SelectField(field_record(field_id, "select", **kw))


def file_field(field_id: str = "avatar", properties: dict[str, Any] | None = None) -> FileField:
    return FileField(field_record(field_id, "file"), properties)


def choice(field: SelectField, choice_id: str, label: str | None = None) -> SelectFieldChoice:
    return SelectFieldChoice(
        {
            "id": choice_id,
            "field_properties_id": field.data.field_properties_id,
            "label": label or choice_id.title(),
        }
    )


SIGNUP_YAML = """\
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
    properties:
      format: email
      min_length: 3
  - id: subscribe
    field_properties_id: p-subscribe
    name: subscribe
    label: Subscribe?
    type: boolean
    linked_field_id: email
    has_value: true
  - id: cadence
    field_properties_id: p-cadence
    name: cadence
    label: How often?
    type: select
    linked_field_id: subscribe
    match_value_bool: true
    properties:
      default_choice_id: weekly
    choices:
      - id: daily
        label: Daily
        archived: true
      - id: weekly
        label: Weekly
      - id: monthly
        label: Monthly
  - id: avatar
    field_properties_id: p-avatar
    name: avatar
    label: Avatar
    type: file
    properties:
      max_size_bytes: 10
      valid_extensions: [".png"]
      valid_mime_types: ["image"]
"""


@pytest.fixture
def signup_yaml(tmp_path: Path) -> Path:
    """The signup form definition written to a temp YAML file."""
    path = tmp_path / "signup.yaml"
    path.write_text(SIGNUP_YAML, encoding="utf-8")
    return path
