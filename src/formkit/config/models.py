"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, formkit.toml only contains
overrides. An empty file (or no file) is a valid configuration. The
sections are composed into
:class:`~formkit.config.settings.FormkitSettings`; the check and validate
commands read them from there.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, PositiveInt


class CheckConfig(BaseModel):
    """[check] section."""

    model_config = {"frozen": True}

    min_severity: Literal["warning", "error"] = "warning"
    # Condition chains deeper than this are reported as warnings.
    max_condition_depth: PositiveInt = 3


class ResponsesConfig(BaseModel):
    """[responses] section.

    ``warn`` reports the offending key as a warning; ``error`` fails
    the response.
    """

    model_config = {"frozen": True}

    hidden_values: Literal["warn", "error"] = "warn"
    unknown_keys: Literal["warn", "error"] = "warn"
