"""Owner-only administrative operations over the policy configuration."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from shet.ledger.models import PolicyEventType
from shet.policy.config_store import ConfigStore
from shet.policy.engine import Ledger
from shet.policy.errors import FeeTooHigh, InvalidAmount, Unauthorized, ZeroAddress
from shet.token import MAX_FEE_PERCENT, NULL_ACCOUNT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminEvent:
    """Event raised by an admin operation, persisted by the caller."""

    kind: PolicyEventType
    value: Any
    account: Optional[str] = None


class AdminInterface:
    """Privileged mutators over a ConfigStore.

    Every operation starts with ``require_owner``. Emitted events are
    queued in ``events`` and written out by the service that owns the
    database session.
    """

    def __init__(self, config: ConfigStore, caller: str, ledger: Optional[Ledger] = None):
        self.config = config
        self.caller = caller
        self.ledger = ledger
        self.events: list[AdminEvent] = []

    def require_owner(self) -> None:
        """Raises Unauthorized unless the caller is the owner."""
        if self.caller != self.config.owner:
            logger.warning(f"Unauthorized admin call by {self.caller}")
            raise Unauthorized(f"Caller {self.caller} is not the owner")

    def _emit(self, kind: PolicyEventType, value: Any, account: Optional[str] = None) -> None:
        self.events.append(AdminEvent(kind=kind, value=value, account=account))
        logger.info(f"{kind.value}: account={account} value={value}")

    def toggle_fees(self, enabled: bool) -> None:
        self.require_owner()
        self.config.fees_enabled = enabled
        self._emit(PolicyEventType.FEES_TOGGLED, enabled)

    def toggle_trading(self, enabled: bool, current_height: int) -> None:
        """Enable or disable trading. Enabling (re)starts the anti-bot window."""
        self.require_owner()
        self.config.trading_enabled = enabled
        if enabled:
            self.config.launch_height = current_height
        self._emit(PolicyEventType.TRADING_TOGGLED, enabled)

    def set_dev_wallet(self, address: str) -> None:
        self.require_owner()
        if address == NULL_ACCOUNT:
            raise ZeroAddress("Dev wallet cannot be the null account")
        self.config.dev_wallet = address
        self._emit(PolicyEventType.DEV_WALLET_UPDATED, address, account=address)

    def set_whitelist(self, address: str, status: bool) -> None:
        self.require_owner()
        _set_membership(self.config.whitelist, address, status)
        self._emit(PolicyEventType.WHITELIST_UPDATED, status, account=address)

    def set_blacklist(self, address: str, status: bool) -> None:
        self.require_owner()
        _set_membership(self.config.blacklist, address, status)
        self._emit(PolicyEventType.BLACKLIST_UPDATED, status, account=address)

    def set_excluded_from_fees(self, address: str, status: bool) -> None:
        self.require_owner()
        _set_membership(self.config.fee_excluded, address, status)

    def set_max_tx_amount(self, amount: int) -> None:
        self.require_owner()
        _require_amount(amount)
        self.config.max_tx_amount = amount

    def set_max_wallet_amount(self, amount: int) -> None:
        self.require_owner()
        _require_amount(amount)
        self.config.max_wallet_amount = amount

    def set_fee_percent(self, percent: int) -> None:
        self.require_owner()
        if percent > MAX_FEE_PERCENT:
            raise FeeTooHigh(f"Fee percent {percent} exceeds max {MAX_FEE_PERCENT}")
        if percent < 0:
            raise InvalidAmount(f"Fee percent cannot be negative: {percent}")
        self.config.fee_percent = percent
        self._emit(PolicyEventType.FEE_PERCENT_UPDATED, percent)

    def disable_anti_bot(self) -> None:
        """Turn anti-bot off for good; there is no way back."""
        self.require_owner()
        self.config.anti_bot_enabled = False
        logger.info("Anti-bot protection disabled")

    async def mint(self, to: str, amount: int) -> None:
        self.require_owner()
        if to == NULL_ACCOUNT:
            raise ZeroAddress("Cannot mint to the null account")
        _require_amount(amount)
        if self.ledger is None:
            raise RuntimeError("No ledger attached for minting")
        await self.ledger.mint(to, amount)


def _set_membership(members: set[str], address: str, status: bool) -> None:
    if status:
        members.add(address)
    else:
        members.discard(address)


def _require_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise InvalidAmount(f"Invalid amount: {amount!r}")
