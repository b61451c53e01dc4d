"""Utility modules for SHET."""

from shet.utils.locks import LockTimeoutError, clear_ledger_lock, ledger_lock

__all__ = ["LockTimeoutError", "clear_ledger_lock", "ledger_lock"]
