"""Runtime settings loaded from settings.toml with environment overrides.

Example ``config/settings.toml``:

    [ocr]
    url = "http://localhost:8001"
    timeout = 60

    [cron]
    secret = "change-me"

    [ledger]
    path = "/srv/tabungin/ledger.json"

Environment variables take precedence:
    TABUNGIN_OCR_URL, TABUNGIN_OCR_TIMEOUT, TABUNGIN_CRON_SECRET
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

from tabungin.runtime.paths import get_paths

DEFAULT_OCR_URL = "http://localhost:8001"
DEFAULT_OCR_TIMEOUT = 60.0


class ConfigError(ValueError):
    """Raised when settings or stored data are malformed."""


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""

    ocr_url: str = DEFAULT_OCR_URL
    ocr_timeout: float = DEFAULT_OCR_TIMEOUT
    cron_secret: str | None = None
    ledger_path: Path | None = None


def _load_toml(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict; missing files map to empty dict."""
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    if not path.exists():
        return {}

    with open(path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid settings file {path}: {e}") from e
    return data if isinstance(data, dict) else {}


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] must be a table")
    return section


def _parse_timeout(value: Any) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"OCR timeout must be a number, got {value!r}") from e
    if timeout <= 0:
        raise ConfigError(f"OCR timeout must be positive, got {timeout}")
    return timeout


@lru_cache(maxsize=4)
def load_settings(config_path: str | None = None) -> Settings:
    """
    Load settings from settings.toml, then apply environment overrides.

    Args:
        config_path: Optional TOML path override. If None, uses the data root's
                     config/settings.toml.
    """
    path = Path(config_path) if config_path is not None else get_paths().settings
    data = _load_toml(path)

    ocr = _section(data, "ocr")
    cron = _section(data, "cron")
    ledger = _section(data, "ledger")

    ocr_url = os.environ.get("TABUNGIN_OCR_URL") or ocr.get("url") or DEFAULT_OCR_URL
    ocr_timeout = _parse_timeout(os.environ.get("TABUNGIN_OCR_TIMEOUT") or ocr.get("timeout", DEFAULT_OCR_TIMEOUT))
    cron_secret = os.environ.get("TABUNGIN_CRON_SECRET") or cron.get("secret") or None
    ledger_path = ledger.get("path")

    return Settings(
        ocr_url=str(ocr_url).rstrip("/"),
        ocr_timeout=ocr_timeout,
        cron_secret=str(cron_secret) if cron_secret else None,
        ledger_path=Path(ledger_path).expanduser() if ledger_path else None,
    )
