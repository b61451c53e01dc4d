"""Transfer-policy orchestrator.

Runs every transfer through a fixed pipeline of stages:

1. AccessGate          - blacklist, then trading-enabled gate
2. AntiAutomationGuard - one transfer per account per height after launch
3. LimitEnforcer       - per-transfer cap, then post-transfer wallet cap
4. FeeCalculator       - fee / net split

The first stage to reject ends evaluation. Nothing is written until every
stage has passed; ledger legs and the anti-bot stamp are applied by
``execute`` and must run inside the caller's database transaction.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from shet.policy.access import AccessGate
from shet.policy.antibot import AntiAutomationGuard
from shet.policy.config_store import ConfigStore
from shet.policy.errors import InsufficientBalance, InvalidAmount, PolicyRejection, ZeroAddress
from shet.policy.fees import FeeCalculator, FeeSplit
from shet.policy.limits import LimitEnforcer
from shet.token import NULL_ACCOUNT

logger = logging.getLogger(__name__)


class Ledger(Protocol):
    """Balance ledger the policy issues legs to."""

    async def balance_of(self, address: str) -> int: ...

    async def credit_and_debit(self, sender: str, recipient: str, amount: int) -> None: ...

    async def mint(self, to: str, amount: int): ...


@dataclass(frozen=True)
class LedgerLeg:
    """One debit/credit movement."""

    sender: str
    recipient: str
    amount: int


@dataclass(frozen=True)
class TransferInstruction:
    """An accepted transfer, ready to be applied to the ledger."""

    sender: str
    recipient: str
    amount: int
    height: int
    split: FeeSplit
    legs: tuple[LedgerLeg, ...]
    stamped: tuple[str, ...] = ()

    @property
    def fee_amount(self) -> int:
        return self.split.fee_amount

    @property
    def net_amount(self) -> int:
        return self.split.net_amount


class TransferPolicy:
    """Applies the ordered policy pipeline to transfers."""

    def __init__(
        self,
        config: ConfigStore,
        ledger: Ledger,
        access: Optional[AccessGate] = None,
        anti_bot: Optional[AntiAutomationGuard] = None,
        limits: Optional[LimitEnforcer] = None,
        fees: Optional[FeeCalculator] = None,
    ):
        self.config = config
        self.ledger = ledger
        self.access = access or AccessGate()
        self.anti_bot = anti_bot or AntiAutomationGuard()
        self.limits = limits or LimitEnforcer()
        self.fees = fees or FeeCalculator()

    async def evaluate(
        self, sender: str, recipient: str, amount: int, current_height: int
    ) -> TransferInstruction:
        """Run every stage and build the ledger legs.

        Does not mutate the config or the ledger.

        Raises:
            PolicyRejection: The first stage that rejected
            ZeroAddress: Sender or recipient is the null account
        """
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
            raise InvalidAmount(f"Invalid transfer amount: {amount!r}")
        if NULL_ACCOUNT in (sender, recipient):
            raise ZeroAddress("Transfers from or to the null account are not allowed")

        config = self.config
        try:
            self.access.check(sender, recipient, config)
            stamped = self.anti_bot.check(sender, recipient, current_height, config)
            recipient_balance = await self.ledger.balance_of(recipient)
            self.limits.check(sender, recipient, amount, recipient_balance, config)
        except PolicyRejection as e:
            logger.warning(
                f"Transfer rejected [{e.code}] {sender} -> {recipient} "
                f"amount={amount} height={current_height}: {e.message}"
            )
            raise

        split = self.fees.compute(sender, recipient, amount, config)

        if split.fee_amount > 0:
            legs = (
                LedgerLeg(sender, config.dev_wallet, split.fee_amount),
                LedgerLeg(sender, recipient, split.net_amount),
            )
        else:
            legs = (LedgerLeg(sender, recipient, amount),)

        return TransferInstruction(
            sender=sender,
            recipient=recipient,
            amount=amount,
            height=current_height,
            split=split,
            legs=legs,
            stamped=stamped,
        )

    async def execute(
        self, sender: str, recipient: str, amount: int, current_height: int
    ) -> TransferInstruction:
        """Evaluate, apply the ledger legs, then record the anti-bot stamp.

        Must run inside one database transaction: if a leg fails the caller
        rolls back and the in-memory config is discarded.

        Raises:
            PolicyRejection: A stage rejected the transfer
            InsufficientBalance: Sender cannot cover the amount
        """
        instruction = await self.evaluate(sender, recipient, amount, current_height)

        sender_balance = await self.ledger.balance_of(sender)
        if sender_balance < amount:
            raise InsufficientBalance(
                f"Insufficient balance: {sender} has {sender_balance}, need {amount}"
            )

        for leg in instruction.legs:
            await self.ledger.credit_and_debit(leg.sender, leg.recipient, leg.amount)

        self.anti_bot.record(self.config, instruction.stamped, current_height)

        logger.info(
            f"Transfer {sender} -> {recipient} amount={amount} "
            f"fee={instruction.fee_amount} net={instruction.net_amount} height={current_height}"
        )
        return instruction
