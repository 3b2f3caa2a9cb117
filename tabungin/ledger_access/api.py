"""Resolution of the ledger store used by workflows and entrypoints."""

from __future__ import annotations

from pathlib import Path

from tabungin.ledger_access.store import JsonLedgerStore
from tabungin.runtime.paths import get_paths
from tabungin.runtime.settings import load_settings


def resolve_ledger_path(ledger_path: Path | str | None = None) -> Path:
    """Explicit path, then ``[ledger] path`` from settings, then the data root."""
    if ledger_path is not None:
        return Path(ledger_path)
    configured = load_settings().ledger_path
    if configured is not None:
        return configured
    return get_paths().ledger


def get_ledger_store(ledger_path: Path | str | None = None) -> JsonLedgerStore:
    """Return a store bound to the resolved ledger file."""
    return JsonLedgerStore(resolve_ledger_path(ledger_path))
