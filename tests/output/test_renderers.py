"""Tests for the per-op Rich renderers."""

from __future__ import annotations

from pathlib import Path

from formkit.infrastructure.definitions import load_form
from formkit.output.renderers import render_quiet, render_result
from formkit.services.check import CheckService
from formkit.services.forms import FormService
from formkit.services.responses import ResponseService
from formkit.services.result import ServiceError, ServiceResult


class TestRenderDescribe:
    def test_table(self, signup_yaml: Path) -> None:
        result = FormService(load_form(signup_yaml)).describe()
        output = render_result(result)
        assert "Newsletter signup" in output
        assert "Email address" in output
        assert "subscribe = true" in output
        assert "email has value" in output
        assert "4 fields" in output

    def test_verbose_lists_live_choices(self, signup_yaml: Path) -> None:
        output = render_result(FormService(load_form(signup_yaml)).describe(), verbose=True)
        assert "Weekly, Monthly" in output
        assert "Daily" not in output

    def test_quiet_lists_ids(self, signup_yaml: Path) -> None:
        result = FormService(load_form(signup_yaml)).describe()
        assert render_quiet(result) == "email\nsubscribe\ncadence\navatar"


class TestRenderCheck:
    def test_clean(self, signup_yaml: Path) -> None:
        output = render_result(CheckService(load_form(signup_yaml)).check())
        assert "No issues found" in output

    def test_issues_grouped(self) -> None:
        result = ServiceResult(
            ok=True,
            op="check",
            data={
                "issues": [
                    {
                        "category": "select_choices",
                        "severity": "error",
                        "field_id": "cadence",
                        "message": "Default choice 'x' is archived",
                    }
                ],
                "count": 1,
                "error_count": 1,
                "warning_count": 0,
            },
        )
        output = render_result(result)
        assert "select_choices" in output
        assert "[cadence]" in output
        assert "1 errors, 0 warnings" in output


class TestRenderVisibility:
    def test_lists(self, signup_yaml: Path) -> None:
        result = ResponseService(load_form(signup_yaml)).visible_fields({})
        output = render_result(result)
        assert "visible: email, avatar" in output
        assert "hidden: subscribe, cadence" in output


class TestRenderError:
    def test_detail_errors(self) -> None:
        result = ServiceResult(
            ok=False,
            op="validate_response",
            error=ServiceError(
                code="INVALID_RESPONSE",
                message="1 value(s) failed validation",
                detail={"errors": {"email": "A value is required"}},
            ),
        )
        output = render_result(result)
        assert output.startswith("ERROR")
        assert "email: A value is required" in output
        assert "INVALID_RESPONSE" not in output
        assert "code: INVALID_RESPONSE" in render_result(result, verbose=True)
