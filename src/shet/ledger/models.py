"""SQLAlchemy models for the token ledger and transfer policy."""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import (
    BigInteger,
    DateTime,
    Index,
    String,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from shet.token import MAX_UINT256


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Uint256(TypeDecorator):
    """Unsigned 256-bit integer stored as a decimal string.

    SQLite cannot hold values above 2**63 exactly in a numeric column.
    """

    impl = String(78)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value < 0:
            raise ValueError(f"Uint256 cannot be negative: {value}")
        if value > MAX_UINT256:
            raise ValueError(f"Uint256 overflow: {value}")
        return str(int(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return int(value)


class MembershipList(str, Enum):
    """Policy membership sets."""

    WHITELIST = "whitelist"
    BLACKLIST = "blacklist"
    FEE_EXCLUDED = "fee_excluded"


class PolicyEventType(str, Enum):
    """Events emitted by admin operations and committed transfers."""

    FEES_TOGGLED = "fees_toggled"
    TRADING_TOGGLED = "trading_toggled"
    DEV_WALLET_UPDATED = "dev_wallet_updated"
    WHITELIST_UPDATED = "whitelist_updated"
    BLACKLIST_UPDATED = "blacklist_updated"
    FEE_PERCENT_UPDATED = "fee_percent_updated"
    TRANSFER = "transfer"


class AccountBalance(Base):
    """Token balance of a single account."""

    __tablename__ = "account_balances"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    address: Mapped[str] = mapped_column(String(42), unique=True, nullable=False, index=True)
    amount: Mapped[int] = mapped_column(Uint256, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class TokenState(Base):
    """Token metadata and supply (single row)."""

    __tablename__ = "token_state"

    id: Mapped[int] = mapped_column(primary_key=True)
    address: Mapped[str] = mapped_column(String(42), nullable=False)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    symbol: Mapped[str] = mapped_column(String(20), nullable=False)
    decimals: Mapped[int] = mapped_column(default=18)
    total_supply: Mapped[int] = mapped_column(Uint256, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class PolicyConfig(Base):
    """Scalar transfer-policy parameters (single row)."""

    __tablename__ = "policy_config"

    id: Mapped[int] = mapped_column(primary_key=True)
    owner: Mapped[str] = mapped_column(String(42), nullable=False)
    dev_wallet: Mapped[str] = mapped_column(String(42), nullable=False)
    fee_percent: Mapped[int] = mapped_column(nullable=False)
    fees_enabled: Mapped[bool] = mapped_column(default=True)
    trading_enabled: Mapped[bool] = mapped_column(default=False)
    anti_bot_enabled: Mapped[bool] = mapped_column(default=True)
    launch_height: Mapped[int] = mapped_column(BigInteger, default=0)
    protection_blocks: Mapped[int] = mapped_column(default=3)
    max_tx_amount: Mapped[int] = mapped_column(Uint256, nullable=False)
    max_wallet_amount: Mapped[int] = mapped_column(Uint256, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class PolicyMembership(Base):
    """Membership of an account in a policy set."""

    __tablename__ = "policy_memberships"
    __table_args__ = (
        Index("ix_policy_memberships_list_account", "list_name", "account", unique=True),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    list_name: Mapped[MembershipList] = mapped_column(String(20), nullable=False)
    account: Mapped[str] = mapped_column(String(42), nullable=False)


class LastTxHeight(Base):
    """Last ledger height an account took part in a transfer during the anti-bot window."""

    __tablename__ = "last_tx_heights"

    account: Mapped[str] = mapped_column(String(42), primary_key=True)
    height: Mapped[int] = mapped_column(BigInteger, nullable=False)


class PolicyEvent(Base):
    """Observable event record for external monitors."""

    __tablename__ = "policy_events"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    kind: Mapped[PolicyEventType] = mapped_column(String(30), nullable=False, index=True)
    account: Mapped[Optional[str]] = mapped_column(String(42), nullable=True)
    counterparty: Mapped[Optional[str]] = mapped_column(String(42), nullable=True)
    value: Mapped[Optional[str]] = mapped_column(String(78), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
