"""Tests for definition and response file loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from formkit.domain.fields import BooleanField, FileField, SelectField, TextField
from formkit.infrastructure.definitions import (
    DefinitionError,
    build_form,
    load_form,
    load_response,
    read_document,
)


def _doc(*fields: dict) -> dict:
    return {"form": {"id": "f", "title": "T"}, "fields": list(fields)}


def _record(field_id: str, field_type: str, **extra: object) -> dict:
    return {
        "id": field_id,
        "field_properties_id": f"p-{field_id}",
        "name": field_id,
        "label": field_id,
        "type": field_type,
        "form_id": "f",
        **extra,
    }


# ---------------------------------------------------------------------------
# read_document
# ---------------------------------------------------------------------------


class TestReadDocument:
    def test_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "doc.yml"
        path.write_text("a: 1\nb: [x, y]\n")
        assert read_document(path) == {"a": 1, "b": ["x", "y"]}

    def test_json(self, tmp_path: Path) -> None:
        path = tmp_path / "doc.json"
        path.write_text(json.dumps({"a": True}))
        assert read_document(path) == {"a": True}

    def test_empty_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert read_document(path) == {}

    def test_unsupported_suffix(self, tmp_path: Path) -> None:
        path = tmp_path / "doc.toml"
        path.write_text("")
        with pytest.raises(DefinitionError, match="unsupported"):
            read_document(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DefinitionError, match="cannot read"):
            read_document(tmp_path / "nope.yaml")

    def test_bad_syntax(self, tmp_path: Path) -> None:
        path = tmp_path / "doc.json"
        path.write_text("{not json")
        with pytest.raises(DefinitionError, match="invalid syntax"):
            read_document(path)

    def test_list_top_level(self, tmp_path: Path) -> None:
        path = tmp_path / "doc.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(DefinitionError, match="mapping") as exc_info:
            read_document(path)
        assert exc_info.value.path == path


# ---------------------------------------------------------------------------
# load_form / build_form
# ---------------------------------------------------------------------------


class TestLoadForm:
    def test_signup(self, signup_yaml: Path) -> None:
        form = load_form(signup_yaml)
        assert form.id == "signup"
        assert [f.id for f in form.get_fields()] == ["email", "subscribe", "cadence", "avatar"]
        email, subscribe, cadence, avatar = form.fields
        assert isinstance(email, TextField)
        assert isinstance(subscribe, BooleanField)
        assert isinstance(cadence, SelectField)
        assert isinstance(avatar, FileField)
        assert email.data.required is True
        assert email.properties.min_length == 3
        assert subscribe.linked_field_id == "email"
        assert cadence.data.match_value_bool is True

    def test_choices_and_default(self, signup_yaml: Path) -> None:
        cadence = load_form(signup_yaml).get_field("cadence")
        assert isinstance(cadence, SelectField)
        assert [c.id for c in cadence.get_choices()] == ["weekly", "monthly"]
        assert cadence.get_choice("daily").archived
        assert cadence.properties.default_choice_id == "weekly"

    def test_file_properties(self, signup_yaml: Path) -> None:
        avatar = load_form(signup_yaml).get_field("avatar")
        assert avatar.properties.max_size_bytes == 10
        assert avatar.properties.valid_mime_types == ["image"]


class TestBuildForm:
    def test_missing_form(self) -> None:
        with pytest.raises(DefinitionError, match="'form'"):
            build_form({"fields": []})

    def test_fields_must_be_list(self) -> None:
        with pytest.raises(DefinitionError, match="list"):
            build_form({"form": {"id": "f", "title": "T"}, "fields": {"a": 1}})

    def test_unknown_type(self) -> None:
        with pytest.raises(DefinitionError, match="rating"):
            build_form(_doc(_record("r", "rating")))

    def test_invalid_record(self) -> None:
        record = _record("t", "text")
        del record["label"]
        with pytest.raises(DefinitionError, match="invalid record"):
            build_form(_doc(record))

    def test_duplicate_field(self) -> None:
        with pytest.raises(DefinitionError, match="already added"):
            build_form(_doc(_record("t", "text"), _record("t", "text")))

    def test_choices_on_non_select(self) -> None:
        with pytest.raises(DefinitionError, match="cannot have choices"):
            build_form(_doc(_record("t", "text", choices=[{"id": "a", "label": "A"}])))

    @pytest.mark.parametrize("properties", [[1, 2], "abc", 3])
    def test_properties_must_be_mapping(self, properties: object) -> None:
        with pytest.raises(DefinitionError, match="properties of field 't' must be a mapping"):
            build_form(_doc(_record("t", "text", properties=properties)))

    def test_choices_must_be_list(self) -> None:
        record = _record("s", "select", choices={"id": "a", "label": "A"})
        with pytest.raises(DefinitionError, match="must be a list"):
            build_form(_doc(record))

    def test_unknown_default_choice(self) -> None:
        record = _record("s", "select", properties={"default_choice_id": "x"})
        with pytest.raises(DefinitionError, match="does not belong"):
            build_form(_doc(record))

    def test_archived_default_choice(self) -> None:
        record = _record(
            "s",
            "select",
            properties={"default_choice_id": "a"},
            choices=[{"id": "a", "label": "A", "archived": True}],
        )
        with pytest.raises(DefinitionError, match="archived"):
            build_form(_doc(record))

    def test_archived_field(self) -> None:
        form = build_form(_doc(_record("t", "text", archived=True), _record("u", "text")))
        assert form.get_field("t").archived
        assert [f.id for f in form.get_fields()] == ["u"]

    def test_archived_form(self) -> None:
        doc = _doc(_record("t", "text"))
        doc["form"]["archived"] = True
        form = build_form(doc)
        assert form.archived
        assert form.get_field("t").archived

    def test_source_in_message(self, tmp_path: Path) -> None:
        source = tmp_path / "x.yaml"
        with pytest.raises(DefinitionError) as exc_info:
            build_form({}, source=source)
        assert str(exc_info.value).startswith(str(source))


# ---------------------------------------------------------------------------
# load_response
# ---------------------------------------------------------------------------


class TestLoadResponse:
    def test_values(self, signup_yaml: Path, tmp_path: Path) -> None:
        form = load_form(signup_yaml)
        path = tmp_path / "response.yaml"
        path.write_text("email: a@b.c\nsubscribe: false\n")
        assert load_response(path, form) == {"email": "a@b.c", "subscribe": False}

    def test_file_upload_read_as_bytes(self, signup_yaml: Path, tmp_path: Path) -> None:
        form = load_form(signup_yaml)
        (tmp_path / "me.png").write_bytes(b"\x89PNG")
        path = tmp_path / "response.yaml"
        path.write_text("avatar: me.png\n")
        assert load_response(path, form) == {"avatar": b"\x89PNG"}

    def test_missing_upload(self, signup_yaml: Path, tmp_path: Path) -> None:
        form = load_form(signup_yaml)
        path = tmp_path / "response.yaml"
        path.write_text("avatar: gone.png\n")
        with pytest.raises(DefinitionError, match="cannot read upload"):
            load_response(path, form)
