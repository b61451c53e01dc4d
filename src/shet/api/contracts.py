"""Request and response contracts for the token API.

Amounts are smallest-unit integers; responses render them as strings so
that clients without big-integer JSON support do not lose precision.
"""

from typing import Optional

from pydantic import BaseModel, Field

ADDRESS_PATTERN = r"^0x[0-9a-fA-F]{40}$"


class TransferRequest(BaseModel):
    """Request to transfer tokens."""

    sender: str = Field(..., pattern=ADDRESS_PATTERN, description="Sending account")
    recipient: str = Field(..., pattern=ADDRESS_PATTERN, description="Receiving account")
    amount: int = Field(..., ge=0, description="Amount in smallest units")
    height: int = Field(..., ge=0, description="Current ledger height")


class TransferResponse(BaseModel):
    """Committed transfer."""

    sender: str
    recipient: str
    amount: str
    fee_amount: str
    net_amount: str
    height: int
    legs: int


class PolicySnapshot(BaseModel):
    """Scalar policy parameters."""

    owner: str
    dev_wallet: str
    fee_percent: int
    fees_enabled: bool
    trading_enabled: bool
    anti_bot_enabled: bool
    launch_height: int
    protection_blocks: int
    max_tx_amount: str
    max_wallet_amount: str


class TokenInfo(BaseModel):
    """Token metadata with the current policy."""

    address: str
    name: str
    symbol: str
    decimals: int
    total_supply: str
    policy: PolicySnapshot


class AccountInfo(BaseModel):
    """Balance and policy memberships of an account."""

    address: str
    balance: str
    whitelisted: bool
    blacklisted: bool
    excluded_from_fees: bool
    last_tx_height: Optional[int] = None


class ToggleRequest(BaseModel):
    enabled: bool


class TradingToggleRequest(BaseModel):
    enabled: bool
    height: int = Field(..., ge=0, description="Current ledger height")


class AddressRequest(BaseModel):
    address: str = Field(..., pattern=ADDRESS_PATTERN)


class MembershipRequest(BaseModel):
    address: str = Field(..., pattern=ADDRESS_PATTERN)
    status: bool


class AmountRequest(BaseModel):
    amount: int = Field(..., ge=0)


class FeePercentRequest(BaseModel):
    percent: int = Field(..., ge=0)


class MintRequest(BaseModel):
    to: str = Field(..., pattern=ADDRESS_PATTERN)
    amount: int = Field(..., ge=0)


class EventInfo(BaseModel):
    """Recorded policy or transfer event."""

    id: int
    kind: str
    account: Optional[str]
    counterparty: Optional[str]
    value: Optional[str]
    created_at: Optional[str]


class ErrorResponse(BaseModel):
    error: str
    detail: str
