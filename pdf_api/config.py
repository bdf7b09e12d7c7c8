"""
Centralized configuration loader.

Loads non-sensitive config from pdf_api.toml (required, no fallback defaults).
A .env file, when present, is loaded into os.environ.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()

_CONFIG_PATH = Path(
    os.environ.get("PDF_API_CONFIG_PATH", Path(__file__).parent.parent / "pdf_api.toml")
)

if not _CONFIG_PATH.exists():
    raise RuntimeError(f"Configuration file not found: {_CONFIG_PATH}")

REQUIRED_SECTIONS = ("app", "service", "cors", "download", "render", "gamma")

with open(_CONFIG_PATH, "rb") as _f:
    _CONFIG = tomllib.load(_f)

_missing = [s for s in REQUIRED_SECTIONS if not isinstance(_CONFIG.get(s), dict)]
if _missing:
    raise RuntimeError(
        f"{_CONFIG_PATH.name} is missing required sections: {', '.join(_missing)}"
    )


def get(*keys: str) -> Any:
    """Traverse nested TOML config by dotted keys.

    Example: get("download", "timeout_seconds") -> 8
    Raises RuntimeError if any key is missing.
    """
    current = _CONFIG
    path = ".".join(keys)
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            raise RuntimeError(
                f"Missing required config key '{path}' in {_CONFIG_PATH.name}"
            )
        current = current[key]
    return current

