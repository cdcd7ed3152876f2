"""Tests for the validate command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from formkit.cli import cli


def _response(tmp_path: Path, text: str, name: str = "response.yaml") -> Path:
    path = tmp_path / name
    path.write_text(text)
    return path


@pytest.mark.usefixtures("_isolated_cwd")
class TestValidateCommand:
    def test_valid(self, cli_runner: CliRunner, signup_yaml: Path, tmp_path: Path) -> None:
        response = _response(tmp_path, "email: a@b.c\nsubscribe: true\ncadence: weekly\n")
        result = cli_runner.invoke(cli, ["validate", str(signup_yaml), str(response)])
        assert result.exit_code == 0
        assert "visible: email, subscribe, cadence, avatar" in result.output

    def test_invalid_exit_code(
        self, cli_runner: CliRunner, signup_yaml: Path, tmp_path: Path
    ) -> None:
        response = _response(tmp_path, "email: ab\n")
        result = cli_runner.invoke(cli, ["--json", "validate", str(signup_yaml), str(response)])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["error"]["code"] == "INVALID_RESPONSE"
        assert data["error"]["detail"]["errors"] == {"email": "Invalid value for text field"}

    def test_json_response(
        self, cli_runner: CliRunner, signup_yaml: Path, tmp_path: Path
    ) -> None:
        response = _response(tmp_path, json.dumps({"email": "a@b.c"}), "response.json")
        result = cli_runner.invoke(cli, ["--json", "validate", str(signup_yaml), str(response)])
        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["hidden"] == ["subscribe", "cadence"]

    def test_visible_only(self, cli_runner: CliRunner, signup_yaml: Path, tmp_path: Path) -> None:
        response = _response(tmp_path, "email: ab\n")
        result = cli_runner.invoke(
            cli, ["--json", "validate", str(signup_yaml), str(response), "--visible-only"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["op"] == "visible_fields"
        assert data["data"]["visible"] == ["email", "subscribe", "avatar"]

    def test_upload(self, cli_runner: CliRunner, signup_yaml: Path, tmp_path: Path) -> None:
        (tmp_path / "big.png").write_bytes(b"x" * 11)
        response = _response(tmp_path, "email: a@b.c\navatar: big.png\n")
        result = cli_runner.invoke(cli, ["--json", "validate", str(signup_yaml), str(response)])
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["detail"]["errors"] == {
            "avatar": "Invalid value for file field"
        }

    def test_hidden_values_policy(
        self, cli_runner: CliRunner, signup_yaml: Path, tmp_path: Path
    ) -> None:
        (tmp_path / "formkit.toml").write_text('[responses]\nhidden_values = "error"\n')
        response = _response(tmp_path, "email: a@b.c\nsubscribe: false\ncadence: weekly\n")
        result = cli_runner.invoke(cli, ["--json", "validate", str(signup_yaml), str(response)])
        assert result.exit_code == 1
        errors = json.loads(result.output)["error"]["detail"]["errors"]
        assert errors == {"cadence": "Value for hidden field 'cadence' ignored"}

    def test_unknown_key_warning(
        self, cli_runner: CliRunner, signup_yaml: Path, tmp_path: Path
    ) -> None:
        response = _response(tmp_path, "email: a@b.c\nage: 3\n")
        result = cli_runner.invoke(cli, ["validate", str(signup_yaml), str(response)])
        assert result.exit_code == 0
        assert "WARNING: 'age' is not a field of this form" in result.output

    def test_missing_upload(
        self, cli_runner: CliRunner, signup_yaml: Path, tmp_path: Path
    ) -> None:
        response = _response(tmp_path, "avatar: gone.png\n")
        result = cli_runner.invoke(cli, ["--json", "validate", str(signup_yaml), str(response)])
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "DEFINITION_ERROR"
