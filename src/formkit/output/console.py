"""Rich console and theme shared by the formkit renderers.

The ``fk.*`` styles cover the three human views: the OK/ERROR banner of
every result, the field table of ``show`` (one colour per field type,
archived rows struck through) and the issue list of ``check`` (severity
colours). Consoles write into a StringIO so renderers can return text;
Rich drops colour by itself when stdout is not a terminal.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

from formkit.domain.types import FieldType

DEFAULT_WIDTH = 120

_TYPE_STYLES: dict[str, str] = {
    FieldType.TEXT: "green",
    FieldType.BOOLEAN: "magenta",
    FieldType.SELECT: "blue",
    FieldType.FILE: "yellow",
}

FORMKIT_THEME = Theme(
    {
        "fk.ok": "bold green",
        "fk.error": "bold red",
        "fk.warning": "bold yellow",
        "fk.op": "bold cyan",
        "fk.key": "dim",
        "fk.id": "bold blue",
        "fk.title": "bold",
        "fk.archived": "dim strike",
        **{f"fk.type.{name}": colour for name, colour in _TYPE_STYLES.items()},
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Console rendering into a StringIO with the formkit theme."""
    return Console(
        file=StringIO(),
        theme=FORMKIT_THEME,
        no_color=no_color,
        highlight=False,
        width=width or DEFAULT_WIDTH,
    )


def get_output(console: Console) -> str:
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_type(field_type: str) -> str:
    """Theme style for a field type column; unknown types stay unstyled."""
    return f"fk.type.{field_type}" if field_type in _TYPE_STYLES else ""
