"""Typed payload contracts for service boundaries.

These models validate payload shapes before they leave the service layer
so key regressions fail fast in tests.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


def dump_validated[T: BaseModel](model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="python")


class CheckIssue(BaseModel):
    """One integrity finding returned by ``CheckService.check``."""

    model_config = ConfigDict(extra="allow")

    category: str
    severity: Literal["warning", "error"]
    field_id: str | None = None
    message: str


class FieldSummary(BaseModel):
    """One row of ``FormService.describe``."""

    id: str
    name: str
    label: str
    type: str
    required: bool
    archived: bool
    linked_field_id: str | None = None
    condition: dict[str, Any] | None = None
    choices: list[dict[str, Any]] | None = None


class DescribeResultData(BaseModel):
    """Payload contract for ``FormService.describe``."""

    id: str
    title: str
    description: str | None = None
    archived: bool
    count: int
    fields: list[FieldSummary]


class ResponseResultData(BaseModel):
    """Payload contract for ``ResponseService.validate``."""

    form_id: str
    visible: list[str]
    hidden: list[str]
    errors: dict[str, str]
