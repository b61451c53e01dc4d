"""Transfer-policy engine: ordered access, anti-bot, limit and fee stages."""

from shet.policy.errors import (
    AdminError,
    AlreadyInitialized,
    BlacklistedParty,
    FeeTooHigh,
    InsufficientBalance,
    InvalidAmount,
    NotInitialized,
    PolicyError,
    PolicyRejection,
    RateLimited,
    TradingDisabled,
    TxLimitExceeded,
    Unauthorized,
    WalletLimitExceeded,
    ZeroAddress,
)
from shet.policy.config_store import ConfigStore
from shet.policy.access import AccessGate
from shet.policy.antibot import AntiAutomationGuard
from shet.policy.limits import LimitEnforcer
from shet.policy.fees import FeeCalculator, FeeSplit
from shet.policy.engine import LedgerLeg, TransferInstruction, TransferPolicy
from shet.policy.admin import AdminEvent, AdminInterface

__all__ = [
    # Stages
    "AccessGate",
    "AntiAutomationGuard",
    "LimitEnforcer",
    "FeeCalculator",
    "FeeSplit",
    # Orchestration
    "ConfigStore",
    "TransferPolicy",
    "TransferInstruction",
    "LedgerLeg",
    "AdminInterface",
    "AdminEvent",
    # Errors
    "PolicyError",
    "PolicyRejection",
    "AdminError",
    "BlacklistedParty",
    "TradingDisabled",
    "RateLimited",
    "TxLimitExceeded",
    "WalletLimitExceeded",
    "InvalidAmount",
    "Unauthorized",
    "FeeTooHigh",
    "ZeroAddress",
    "AlreadyInitialized",
    "NotInitialized",
    "InsufficientBalance",
]
