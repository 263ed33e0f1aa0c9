"""Per-user file locations."""

import os
import re
from pathlib import Path
from typing import Optional

APP_NAME = "svgen"

_UNSAFE_ID_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def get_config_path() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / APP_NAME / "config.json"


def get_cache_dir() -> Path:
    base = os.environ.get("XDG_CACHE_HOME") or str(Path.home() / ".cache")
    return Path(base) / APP_NAME


def resolve_output_dir(output_dir: Optional[str] = None) -> Path:
    """Return the directory SVG files should be written to (cwd when unset)."""
    if not output_dir or not output_dir.strip():
        return Path.cwd()
    return Path(output_dir).resolve()


def svg_output_path(base_dir: Path, response_id: str, index: int) -> Path:
    """Build a stable, filesystem-safe name for the index-th SVG of a response."""
    safe_id = _UNSAFE_ID_CHARS.sub("_", response_id)
    return Path(base_dir) / f"{safe_id}-{index + 1}.svg"
