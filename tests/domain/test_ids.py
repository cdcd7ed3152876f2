"""Tests for id validation."""

from __future__ import annotations

import pytest

from formkit.domain.ids import require_id, validate_id


class TestValidateId:
    @pytest.mark.parametrize("value", ["f1", "field_email", "0", "a b"])
    def test_accepts_non_blank(self, value: str) -> None:
        assert validate_id(value) is True

    @pytest.mark.parametrize("value", ["", "   ", "\t"])
    def test_rejects_blank(self, value: str) -> None:
        assert validate_id(value) is False

    def test_rejects_non_string(self) -> None:
        assert validate_id(123) is False  # type: ignore[arg-type]


class TestRequireId:
    def test_passes_value_through(self) -> None:
        assert require_id("choice_weekly") == "choice_weekly"

    def test_none_is_unset(self) -> None:
        assert require_id(None) is None

    def test_blank_raises(self) -> None:
        with pytest.raises(ValueError, match="non-blank"):
            require_id("")
