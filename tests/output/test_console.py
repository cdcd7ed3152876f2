"""Tests for the Rich console factory and theme."""

from __future__ import annotations

from formkit.domain.types import FieldType
from formkit.output.console import FORMKIT_THEME, create_console, get_output, style_for_type


class TestCreateConsole:
    def test_renders_to_buffer(self) -> None:
        console = create_console(no_color=True)
        console.print("hello")
        assert get_output(console) == "hello\n"

    def test_default_width(self) -> None:
        assert create_console().width == 120

    def test_width_override(self) -> None:
        assert create_console(width=60).width == 60

    def test_theme_styles(self) -> None:
        assert "fk.ok" in FORMKIT_THEME.styles
        assert "fk.type.select" in FORMKIT_THEME.styles


class TestStyleForType:
    def test_known(self) -> None:
        assert style_for_type("boolean") == "fk.type.boolean"

    def test_unknown(self) -> None:
        assert style_for_type("rating") == ""

    def test_every_field_type_themed(self) -> None:
        for field_type in FieldType:
            assert style_for_type(field_type) in FORMKIT_THEME.styles
