"""ResponseService: visibility and validation of submitted values.

Values are keyed by field id or name. Visibility is evaluated in
condition order: a live field is visible when it has no condition, or
when the field it links to is visible and the condition holds for that
field's value. Hidden fields are never validated.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Literal

from formkit.domain.conditions import condition_met, has_submitted_value
from formkit.domain.errors import FormError
from formkit.infrastructure.graph import ConditionGraph
from formkit.services.base import BaseService
from formkit.services.contracts import ResponseResultData, dump_validated
from formkit.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from formkit.domain.form import Form


class ResponseService(BaseService):
    """Checks a submission against a form."""

    def __init__(
        self,
        form: Form,
        *,
        hidden_values: Literal["warn", "error"] = "warn",
        unknown_keys: Literal["warn", "error"] = "warn",
    ) -> None:
        super().__init__(form)
        self._hidden_values = hidden_values
        self._unknown_keys = unknown_keys

    def visible_fields(self, values: Mapping[str, Any]) -> ServiceResult:
        """Report which live fields are shown for *values*."""
        op = "visible_fields"
        resolved, _unknown = self._resolve(values)
        try:
            visibility = self._visibility(resolved)
        except FormError as exc:
            return self._failure(op, exc)
        visible, hidden = self._split(visibility)
        return ServiceResult(
            ok=True,
            op=op,
            data={"form_id": self._form.id, "visible": visible, "hidden": hidden},
        )

    def validate(self, values: Mapping[str, Any]) -> ServiceResult:
        """Validate *values*: required and per-type checks on visible fields.

        Fails with ``INVALID_RESPONSE`` when any field has an error; the
        per-field messages are in ``error.detail["errors"]`` and in ``data``.
        """
        op = "validate_response"
        resolved, unknown = self._resolve(values)
        try:
            visibility = self._visibility(resolved)
        except FormError as exc:
            return self._failure(op, exc)

        errors: dict[str, str] = {}
        warnings: list[str] = []

        for key in unknown:
            self._apply_policy(
                self._unknown_keys, key, f"{key!r} is not a field of this form", errors, warnings
            )

        for field in self._form.get_fields(include_archived=True):
            value = resolved.get(field.id)
            if field.archived:
                if has_submitted_value(value):
                    self._apply_policy(
                        self._hidden_values,
                        field.id,
                        f"Value for archived field {field.id!r} ignored",
                        errors,
                        warnings,
                    )
                continue
            if not visibility[field.id]:
                if has_submitted_value(value):
                    self._apply_policy(
                        self._hidden_values,
                        field.id,
                        f"Value for hidden field {field.id!r} ignored",
                        errors,
                        warnings,
                    )
                continue
            if not has_submitted_value(value):
                if field.data.required:
                    errors[field.id] = "A value is required"
                continue
            if not field.is_valid_value(value):
                errors[field.id] = f"Invalid value for {field.data.type} field"

        visible, hidden = self._split(visibility)
        data = dump_validated(
            ResponseResultData,
            {"form_id": self._form.id, "visible": visible, "hidden": hidden, "errors": errors},
        )
        if errors:
            error = ServiceError(
                code="INVALID_RESPONSE",
                message=f"{len(errors)} value(s) failed validation",
                detail={"errors": errors},
            )
            return ServiceResult(ok=False, op=op, data=data, warnings=warnings, error=error)
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve(self, values: Mapping[str, Any]) -> tuple[dict[str, Any], list[str]]:
        """Key *values* by field id; return the unmatched keys separately."""
        resolved: dict[str, Any] = {}
        unknown: list[str] = []
        for key, value in values.items():
            field = self._form.find_field(str(key))
            if field is None:
                unknown.append(str(key))
            else:
                resolved[field.id] = value
        return resolved, unknown

    def _visibility(self, resolved: Mapping[str, Any]) -> dict[str, bool]:
        """Visibility of every field, computed linked-field first.

        Raises:
            InvalidConditionError: If the conditions contain a cycle.
        """
        visible: dict[str, bool] = {}
        for field_id in ConditionGraph(self._form).evaluation_order():
            field = self._form.get_field(field_id)
            if field.archived:
                visible[field_id] = False
                continue
            condition = field.condition
            if condition is None:
                visible[field_id] = True
                continue
            linked_id = field.linked_field_id
            # A link to a field outside the form never shows the dependent.
            visible[field_id] = bool(
                linked_id is not None
                and visible.get(linked_id, False)
                and condition_met(condition, resolved.get(linked_id))
            )
        return visible

    def _split(self, visibility: Mapping[str, bool]) -> tuple[list[str], list[str]]:
        """Live field ids in form order, split into visible and hidden."""
        visible: list[str] = []
        hidden: list[str] = []
        for field in self._form.get_fields():
            (visible if visibility.get(field.id) else hidden).append(field.id)
        return visible, hidden

    @staticmethod
    def _apply_policy(
        policy: str,
        key: str,
        message: str,
        errors: dict[str, str],
        warnings: list[str],
    ) -> None:
        if policy == "error":
            errors[key] = message
        else:
            warnings.append(message)
