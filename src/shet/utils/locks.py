"""Concurrency control for ledger operations.

Transfers and admin calls run one at a time: each acquires the single
process-wide ledger lock for the whole load / evaluate / commit cycle.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

logger = logging.getLogger(__name__)

_ledger_lock: Optional[asyncio.Lock] = None


class LockTimeoutError(Exception):
    """Raised when the ledger lock cannot be acquired within the timeout period."""

    pass


def get_ledger_lock() -> asyncio.Lock:
    """Get or create the process-wide ledger lock."""
    global _ledger_lock
    if _ledger_lock is None:
        _ledger_lock = asyncio.Lock()
    return _ledger_lock


@asynccontextmanager
async def ledger_lock(timeout: Optional[float] = 30.0, operation: str = "ledger_operation"):
    """Hold the ledger lock for the duration of the block.

    Args:
        timeout: Maximum time to wait for the lock (None or 0 = wait forever)
        operation: Description for logging

    Example:
        async with ledger_lock(operation="transfer"):
            # Load config, evaluate, apply legs, commit
            pass
    """
    lock = get_ledger_lock()

    try:
        if timeout:
            await asyncio.wait_for(lock.acquire(), timeout=timeout)
        else:
            await lock.acquire()
    except asyncio.TimeoutError:
        logger.warning(f"Ledger lock timeout after {timeout}s: {operation}")
        raise LockTimeoutError(f"Could not acquire ledger lock within {timeout}s")

    logger.debug(f"Ledger lock acquired: {operation}")
    try:
        yield
    finally:
        lock.release()
        logger.debug(f"Ledger lock released: {operation}")


def clear_ledger_lock() -> None:
    """Drop the ledger lock (useful for testing across event loops)."""
    global _ledger_lock
    _ledger_lock = None
