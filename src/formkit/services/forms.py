"""FormService: describe a form and apply field mutations at the boundary.

The mutation methods wrap the domain operations for callers that want a
:class:`ServiceResult` instead of exceptions: domain errors become failed
results carrying the error's code and detail.
"""

from __future__ import annotations

from typing import Any

from formkit.domain.conditions import FieldCondition, MatchValue
from formkit.domain.errors import FormError
from formkit.domain.fields import Field, SelectField
from formkit.services.base import BaseService
from formkit.services.contracts import DescribeResultData, dump_validated
from formkit.services.result import ServiceError, ServiceResult


def _summarize(field: Field) -> dict[str, Any]:
    condition = field.condition
    summary: dict[str, Any] = {
        "id": field.id,
        "name": field.data.name,
        "label": field.data.label,
        "type": str(field.data.type),
        "required": field.data.required,
        "archived": field.archived,
        "linked_field_id": field.linked_field_id,
        "condition": condition.model_dump(mode="json") if condition is not None else None,
    }
    if isinstance(field, SelectField):
        summary["choices"] = [
            {"id": c.id, "label": c.label, "archived": c.archived} for c in field.choices
        ]
    return summary


class FormService(BaseService):
    """Read and mutate a form, reporting through ServiceResult."""

    def describe(self, *, include_archived: bool = False) -> ServiceResult:
        """Ordered field listing with conditions and choices."""
        fields = self._form.get_fields(include_archived=include_archived)
        data = dump_validated(
            DescribeResultData,
            {
                "id": self._form.id,
                "title": self._form.data.title,
                "description": self._form.data.description,
                "archived": self._form.archived,
                "count": len(fields),
                "fields": [_summarize(field) for field in fields],
            },
        )
        return ServiceResult(ok=True, op="describe", data=data)

    def remove_field(self, field_id: str) -> ServiceResult:
        """Archive a field and clear conditions that pointed at it."""
        op = "remove_field"
        try:
            field = self._form.get_field(field_id)
            cleared = self._form.remove_field(field)
        except FormError as exc:
            return self._failure(op, exc)
        warnings = [f"Cleared condition on {fid!r}" for fid in cleared]
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": field_id, "cleared_conditions": cleared},
            warnings=warnings,
        )

    def set_condition(
        self,
        field_id: str,
        linked_field_id: str,
        *,
        has_value: bool | None = None,
        match: MatchValue | None = None,
    ) -> ServiceResult:
        """Condition a field on another field of the same form."""
        op = "set_condition"
        try:
            condition = FieldCondition(has_value=has_value, match=match or MatchValue.none())
        except ValueError as exc:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(code="INVALID_CONDITION", message=str(exc)),
            )
        try:
            field = self._form.get_field(field_id)
            self._form.set_field_condition(field, linked_field_id, condition)
        except FormError as exc:
            return self._failure(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": field_id, "linked_field_id": linked_field_id, **condition.to_record()},
        )

    def clear_condition(self, field_id: str) -> ServiceResult:
        """Remove a field's condition, if any."""
        op = "clear_condition"
        try:
            field = self._form.get_field(field_id)
        except FormError as exc:
            return self._failure(op, exc)
        field.clear_linked_field_condition()
        return ServiceResult(ok=True, op=op, data={"id": field_id})
