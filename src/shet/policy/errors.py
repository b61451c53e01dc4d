"""Transfer-policy and admin error kinds.

Every failure is a synchronous rejection of the triggering call. Each
exception carries a ``code`` naming the error kind so that API layers and
monitors can report it without matching on class names.
"""

from typing import Optional


class PolicyError(Exception):
    """Base class for all transfer-policy errors."""

    code = "PolicyError"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.code)
        self.message = message or self.code


class PolicyRejection(PolicyError):
    """A transfer was rejected by one of the policy stages."""


class BlacklistedParty(PolicyRejection):
    code = "BlacklistedParty"


class TradingDisabled(PolicyRejection):
    code = "TradingDisabled"


class RateLimited(PolicyRejection):
    code = "RateLimited"


class TxLimitExceeded(PolicyRejection):
    code = "TxLimitExceeded"


class WalletLimitExceeded(PolicyRejection):
    code = "WalletLimitExceeded"


class InvalidAmount(PolicyRejection):
    code = "InvalidAmount"


class AdminError(PolicyError):
    """An administrative call was refused."""


class Unauthorized(AdminError):
    code = "Unauthorized"


class FeeTooHigh(AdminError):
    code = "FeeTooHigh"


class ZeroAddress(PolicyError):
    """The null account was supplied where a real account is required."""

    code = "ZeroAddress"


class AlreadyInitialized(PolicyError):
    code = "AlreadyInitialized"


class NotInitialized(PolicyError):
    code = "NotInitialized"


class InsufficientBalance(PolicyError, ValueError):
    """Raised by the ledger when a debit exceeds the available balance."""

    code = "InsufficientBalance"
