"""Locate the formkit.toml that configures a run.

Walk-up finder, similar to how git finds .git/: a definition checked in
next to its ``formkit.toml`` picks up that project's ``[check]`` and
``[responses]`` policy from any subdirectory. ``FORMKIT_CONFIG`` and the
``--config`` flag override the search.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "formkit.toml"
CONFIG_ENV_VAR = "FORMKIT_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for formkit.toml.

    Returns the path to the config file, or None if not found.
    Checks FORMKIT_CONFIG env var first; a missing file there disables
    the walk-up.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None
