"""Ledger module for token balances, policy persistence and events."""

from shet.ledger.models import (
    AccountBalance,
    LastTxHeight,
    MembershipList,
    PolicyConfig,
    PolicyEvent,
    PolicyEventType,
    PolicyMembership,
    TokenState,
)
from shet.ledger.database import get_db, init_db
from shet.ledger.repository import LedgerRepository, PolicyRepository

__all__ = [
    # Models
    "AccountBalance",
    "LastTxHeight",
    "PolicyConfig",
    "PolicyEvent",
    "PolicyMembership",
    "TokenState",
    # Enums
    "MembershipList",
    "PolicyEventType",
    # Database
    "get_db",
    "init_db",
    "LedgerRepository",
    "PolicyRepository",
]
