"""Centralized path management for the tabungin project.

All data lives under one root, ``$TABUNGIN_HOME`` or ``~/.tabungin``:

    ~/.tabungin/
    ├── config/settings.toml
    ├── ledger.json
    └── receipts/
        ├── images/     - Uploaded receipt photos
        ├── ocr_json/   - Raw OCR service responses
        └── scanned/    - Parsed drafts awaiting review
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _get_data_root() -> Path:
    """Determine the data root directory."""
    env_root = os.environ.get("TABUNGIN_HOME")
    if env_root:
        return Path(env_root).expanduser()
    return Path("~/.tabungin").expanduser()


@dataclass
class ProjectPaths:
    """Container for all data paths, computed relative to one root."""

    root: Path = field(default_factory=_get_data_root)

    def __post_init__(self) -> None:
        self.root = self.root.resolve()

    # --- Configuration paths ---
    @property
    def config(self) -> Path:
        """Configuration directory (config/)."""
        return self.root / "config"

    @property
    def settings(self) -> Path:
        """Settings TOML file."""
        return self.config / "settings.toml"

    # --- Ledger paths ---
    @property
    def ledger(self) -> Path:
        """JSON document holding accounts, transactions, recurring rules and bills."""
        return self.root / "ledger.json"

    # --- Receipt paths ---
    @property
    def receipts(self) -> Path:
        """Root receipts directory."""
        return self.root / "receipts"

    @property
    def receipts_images(self) -> Path:
        """Receipt photos/images."""
        return self.receipts / "images"

    @property
    def receipts_scanned(self) -> Path:
        """Parsed receipts awaiting manual review."""
        return self.receipts / "scanned"

    @property
    def receipts_ocr_json(self) -> Path:
        """Raw OCR results (JSON)."""
        return self.receipts / "ocr_json"

    def ensure_receipt_directories(self) -> None:
        """Create all receipt-related directories if they don't exist."""
        self.receipts_images.mkdir(parents=True, exist_ok=True)
        self.receipts_scanned.mkdir(parents=True, exist_ok=True)
        self.receipts_ocr_json.mkdir(parents=True, exist_ok=True)


_paths: ProjectPaths | None = None


def get_paths() -> ProjectPaths:
    """Get the singleton ProjectPaths instance."""
    global _paths
    if _paths is None:
        _paths = ProjectPaths()
    return _paths


def set_data_root(root: Path | str) -> ProjectPaths:
    """Point the singleton at a different data root (tests, alternate profiles)."""
    global _paths
    _paths = ProjectPaths(root=Path(root))
    return _paths
