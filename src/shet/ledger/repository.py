"""Repositories for ledger and transfer-policy persistence."""

import logging
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

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
from shet.policy.config_store import ConfigStore
from shet.policy.errors import InsufficientBalance, InvalidAmount, NotInitialized
from shet.token import MAX_UINT256, NULL_ACCOUNT

logger = logging.getLogger(__name__)

_SINGLETON_ID = 1


class LedgerRepository:
    """Fungible-token ledger: balances, supply and the event log."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # Token state
    async def get_token_state(self) -> Optional[TokenState]:
        """Get token metadata and supply."""
        return await self.session.get(TokenState, _SINGLETON_ID)

    async def create_token_state(
        self, address: str, name: str, symbol: str, decimals: int
    ) -> TokenState:
        """Create the token state row with zero supply."""
        state = TokenState(
            id=_SINGLETON_ID,
            address=address,
            name=name,
            symbol=symbol,
            decimals=decimals,
            total_supply=0,
        )
        self.session.add(state)
        await self.session.flush()
        return state

    async def total_supply(self) -> int:
        state = await self.get_token_state()
        return state.total_supply if state else 0

    # Balance operations
    async def get_balance(self, address: str) -> Optional[AccountBalance]:
        """Get balance record for an account."""
        stmt = select(AccountBalance).where(AccountBalance.address == address)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_create_balance(self, address: str) -> AccountBalance:
        """Get or create a balance record for an account."""
        balance = await self.get_balance(address)
        if balance is None:
            balance = AccountBalance(address=address, amount=0)
            self.session.add(balance)
            await self.session.flush()
        return balance

    async def balance_of(self, address: str) -> int:
        """Get account balance in smallest units (0 if unknown)."""
        balance = await self.get_balance(address)
        return balance.amount if balance else 0

    async def credit_and_debit(self, sender: str, recipient: str, amount: int) -> None:
        """Move amount from sender to recipient.

        Raises:
            InsufficientBalance: If sender holds less than amount
        """
        sender_balance = await self.get_or_create_balance(sender)
        if sender_balance.amount < amount:
            raise InsufficientBalance(
                f"Insufficient balance: {sender} has {sender_balance.amount}, need {amount}"
            )
        sender_balance.amount -= amount

        recipient_balance = await self.get_or_create_balance(recipient)
        recipient_balance.amount += amount

        await self.session.flush()
        await self.add_event(
            PolicyEventType.TRANSFER, account=sender, counterparty=recipient, value=amount
        )

    async def mint(self, to: str, amount: int) -> AccountBalance:
        """Create new units and credit them to an account."""
        state = await self.get_token_state()
        if state is None:
            raise NotInitialized("Token state does not exist")
        if state.total_supply + amount > MAX_UINT256:
            raise InvalidAmount(f"Minting {amount} would overflow total supply")

        balance = await self.get_or_create_balance(to)
        balance.amount += amount
        state.total_supply += amount

        await self.session.flush()
        await self.add_event(
            PolicyEventType.TRANSFER, account=NULL_ACCOUNT, counterparty=to, value=amount
        )
        logger.info(f"Minted {amount} to {to}, total supply {state.total_supply}")
        return balance

    # Event log
    async def add_event(
        self,
        kind: PolicyEventType,
        account: Optional[str] = None,
        counterparty: Optional[str] = None,
        value=None,
    ) -> PolicyEvent:
        """Append an event for external monitors."""
        event = PolicyEvent(
            kind=kind,
            account=account,
            counterparty=counterparty,
            value=None if value is None else _event_value(value),
        )
        self.session.add(event)
        await self.session.flush()
        return event

    async def get_events(
        self, kind: Optional[PolicyEventType] = None, limit: int = 50
    ) -> list[PolicyEvent]:
        """Get most recent events, newest first."""
        stmt = select(PolicyEvent)
        if kind:
            stmt = stmt.where(PolicyEvent.kind == kind)
        stmt = stmt.order_by(PolicyEvent.id.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class PolicyRepository:
    """Loads and saves the transfer-policy ConfigStore."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def exists(self) -> bool:
        return await self.session.get(PolicyConfig, _SINGLETON_ID) is not None

    async def load(self) -> ConfigStore:
        """Load the full policy configuration.

        Raises:
            NotInitialized: If the system was never initialized
        """
        row = await self.session.get(PolicyConfig, _SINGLETON_ID)
        if row is None:
            raise NotInitialized("Transfer policy is not initialized")

        memberships = await self._load_memberships()
        heights = await self.session.execute(select(LastTxHeight))

        return ConfigStore(
            owner=row.owner,
            dev_wallet=row.dev_wallet,
            max_tx_amount=row.max_tx_amount,
            max_wallet_amount=row.max_wallet_amount,
            fee_percent=row.fee_percent,
            fees_enabled=row.fees_enabled,
            trading_enabled=row.trading_enabled,
            anti_bot_enabled=row.anti_bot_enabled,
            launch_height=row.launch_height,
            protection_blocks=row.protection_blocks,
            whitelist=memberships[MembershipList.WHITELIST],
            blacklist=memberships[MembershipList.BLACKLIST],
            fee_excluded=memberships[MembershipList.FEE_EXCLUDED],
            last_tx_height={h.account: h.height for h in heights.scalars().all()},
        )

    async def save(self, config: ConfigStore) -> PolicyConfig:
        """Persist the configuration, creating the row on first save."""
        row = await self.session.get(PolicyConfig, _SINGLETON_ID)
        if row is None:
            row = PolicyConfig(id=_SINGLETON_ID, owner=config.owner)
            self.session.add(row)

        row.dev_wallet = config.dev_wallet
        row.fee_percent = config.fee_percent
        row.fees_enabled = config.fees_enabled
        row.trading_enabled = config.trading_enabled
        row.anti_bot_enabled = config.anti_bot_enabled
        row.launch_height = config.launch_height
        row.protection_blocks = config.protection_blocks
        row.max_tx_amount = config.max_tx_amount
        row.max_wallet_amount = config.max_wallet_amount

        await self._sync_memberships(
            {
                MembershipList.WHITELIST: config.whitelist,
                MembershipList.BLACKLIST: config.blacklist,
                MembershipList.FEE_EXCLUDED: config.fee_excluded,
            }
        )
        await self.save_last_tx_heights(config.last_tx_height)

        await self.session.flush()
        return row

    async def save_last_tx_heights(self, heights: dict[str, int]) -> None:
        """Upsert anti-bot stamps."""
        for account, height in heights.items():
            await self.session.merge(LastTxHeight(account=account, height=height))
        await self.session.flush()

    async def _load_memberships(self) -> dict[MembershipList, set[str]]:
        sets: dict[MembershipList, set[str]] = {name: set() for name in MembershipList}
        result = await self.session.execute(select(PolicyMembership))
        for member in result.scalars().all():
            sets[MembershipList(member.list_name)].add(member.account)
        return sets

    async def _sync_memberships(self, wanted: dict[MembershipList, set[str]]) -> None:
        current = await self._load_memberships()
        for name, accounts in wanted.items():
            removed = current[name] - accounts
            if removed:
                await self.session.execute(
                    delete(PolicyMembership).where(
                        PolicyMembership.list_name == name.value,
                        PolicyMembership.account.in_(removed),
                    )
                )
            for account in accounts - current[name]:
                self.session.add(PolicyMembership(list_name=name.value, account=account))


def _event_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
