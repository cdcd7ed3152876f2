"""CheckService: integrity report for a form aggregate.

Follows the linter pattern: nothing is modified, every finding is an
issue with a category and a severity. Three categories: condition
integrity, select choices, and field configuration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from formkit.domain.fields import SelectField
from formkit.infrastructure.graph import ConditionGraph
from formkit.services.base import BaseService
from formkit.services.contracts import CheckIssue, dump_validated
from formkit.services.result import ServiceResult

if TYPE_CHECKING:
    from formkit.domain.form import Form

# ---------------------------------------------------------------------------
# Issue severity and category constants
# ---------------------------------------------------------------------------

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"

_SEVERITY_RANK: dict[str, int] = {SEVERITY_WARNING: 0, SEVERITY_ERROR: 1}

CAT_CONDITIONS = "condition_integrity"
CAT_CHOICES = "select_choices"
CAT_FIELDS = "field_configuration"


def _issue(category: str, severity: str, message: str, field_id: str | None) -> dict[str, Any]:
    return dump_validated(
        CheckIssue,
        {"category": category, "severity": severity, "message": message, "field_id": field_id},
    )


class CheckService(BaseService):
    """Reports integrity issues on a form without modifying it."""

    def __init__(self, form: Form, *, max_condition_depth: int = 3) -> None:
        super().__init__(form)
        self._max_condition_depth = max_condition_depth

    def check(self, *, min_severity: str = SEVERITY_WARNING) -> ServiceResult:
        """Report issues at or above *min_severity*."""
        graph = ConditionGraph(self._form)
        issues: list[dict[str, Any]] = []
        issues.extend(self._check_conditions(graph))
        issues.extend(self._check_choices())
        issues.extend(self._check_fields())

        threshold = _SEVERITY_RANK[min_severity]
        issues = [i for i in issues if _SEVERITY_RANK[i["severity"]] >= threshold]
        error_count = sum(1 for i in issues if i["severity"] == SEVERITY_ERROR)

        return ServiceResult(
            ok=True,
            op="check",
            data={
                "form_id": self._form.id,
                "issues": issues,
                "count": len(issues),
                "error_count": error_count,
                "warning_count": len(issues) - error_count,
                "healthy": error_count == 0,
            },
        )

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def _check_conditions(self, graph: ConditionGraph) -> list[dict[str, Any]]:
        issues: list[dict[str, Any]] = []
        for field_id, linked_id in graph.dangling():
            issues.append(
                _issue(
                    CAT_CONDITIONS,
                    SEVERITY_ERROR,
                    f"Condition links to {linked_id!r}, which is not a field of this form",
                    field_id,
                )
            )

        for field in self._form.get_fields():
            linked_id = field.linked_field_id
            if linked_id is None or self._form.get_field_index_by_id(linked_id) == -1:
                continue
            if self._form.get_field(linked_id).archived:
                issues.append(
                    _issue(
                        CAT_CONDITIONS,
                        SEVERITY_ERROR,
                        f"Condition links to archived field {linked_id!r}",
                        field.id,
                    )
                )

        cycles = graph.cycles()
        for cycle in cycles:
            issues.append(
                _issue(
                    CAT_CONDITIONS,
                    SEVERITY_ERROR,
                    f"Conditions form a cycle: {' -> '.join(cycle)}",
                    cycle[0],
                )
            )

        if not cycles:
            for field_id, depth in graph.depths().items():
                if depth > self._max_condition_depth:
                    issues.append(
                        _issue(
                            CAT_CONDITIONS,
                            SEVERITY_WARNING,
                            f"Condition chain is {depth} deep "
                            f"(max {self._max_condition_depth})",
                            field_id,
                        )
                    )
        return issues

    def _check_choices(self) -> list[dict[str, Any]]:
        issues: list[dict[str, Any]] = []
        for field in self._form.get_fields():
            if not isinstance(field, SelectField):
                continue
            if not field.get_choices():
                issues.append(
                    _issue(
                        CAT_CHOICES, SEVERITY_WARNING, "Select field has no live choices", field.id
                    )
                )
            default_id = field.properties.default_choice_id
            if default_id is None:
                continue
            idx = field.get_choice_index_by_id(default_id)
            if idx == -1:
                issues.append(
                    _issue(
                        CAT_CHOICES,
                        SEVERITY_ERROR,
                        f"Default choice {default_id!r} is not a choice of this field",
                        field.id,
                    )
                )
            elif field.choices[idx].archived:
                issues.append(
                    _issue(
                        CAT_CHOICES,
                        SEVERITY_ERROR,
                        f"Default choice {default_id!r} is archived",
                        field.id,
                    )
                )
        return issues

    def _check_fields(self) -> list[dict[str, Any]]:
        issues: list[dict[str, Any]] = []
        for field in self._form.get_fields():
            if field.data.required and field.linked_field_id is not None:
                issues.append(
                    _issue(
                        CAT_FIELDS,
                        SEVERITY_WARNING,
                        "Required field is only required while its condition holds",
                        field.id,
                    )
                )
        if self._form.archived and self._form.get_fields():
            issues.append(
                _issue(CAT_FIELDS, SEVERITY_ERROR, "Archived form still has live fields", None)
            )
        return issues
