"""Token service: runs policy operations inside one database transaction.

Each call takes the ledger lock, opens a session, loads the ConfigStore,
runs the operation and saves the store back before commit. Any exception
rolls the whole call back.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncGenerator, Awaitable, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shet.config import Settings, get_settings
from shet.ledger.database import get_db
from shet.ledger.models import PolicyEvent, PolicyEventType
from shet.ledger.repository import LedgerRepository, PolicyRepository
from shet.policy.admin import AdminInterface
from shet.policy.config_store import ConfigStore
from shet.policy.engine import TransferInstruction, TransferPolicy
from shet.policy.errors import AlreadyInitialized, ZeroAddress
from shet.token import (
    DECIMALS,
    NULL_ACCOUNT,
    TOKEN_NAME,
    TOKEN_SYMBOL,
    TOTAL_SUPPLY,
    normalize_account,
)
from shet.utils.locks import ledger_lock

logger = logging.getLogger(__name__)

SessionScope = Callable[[], AsyncContextManager[AsyncSession]]
AdminAction = Callable[[AdminInterface], Optional[Awaitable[None]]]


class TokenService:
    """Entry point for initialization, transfers, admin calls and queries."""

    def __init__(
        self,
        session_scope: SessionScope = get_db,
        settings: Optional[Settings] = None,
    ):
        self.session_scope = session_scope
        self.settings = settings or get_settings()

    @asynccontextmanager
    async def _locked_session(self, operation: str) -> AsyncGenerator[AsyncSession, None]:
        async with ledger_lock(timeout=self.settings.lock_timeout, operation=operation):
            async with self.session_scope() as session:
                yield session

    # ======================
    # Construction
    # ======================

    async def initialize(
        self,
        deployer: str,
        dev_wallet: str,
        system_account: Optional[str] = None,
    ) -> ConfigStore:
        """Create the token, mint the fixed supply and seed the policy.

        Raises:
            ZeroAddress: dev_wallet is the null account
            AlreadyInitialized: The system already exists
        """
        deployer = normalize_account(deployer)
        dev_wallet = normalize_account(dev_wallet)
        system_account = normalize_account(system_account or self.settings.token_address)

        if dev_wallet == NULL_ACCOUNT:
            raise ZeroAddress("Dev wallet cannot be the null account")

        async with self._locked_session("initialize") as session:
            policy_repo = PolicyRepository(session)
            if await policy_repo.exists():
                raise AlreadyInitialized("Token is already initialized")

            ledger = LedgerRepository(session)
            await ledger.create_token_state(
                address=system_account,
                name=TOKEN_NAME,
                symbol=TOKEN_SYMBOL,
                decimals=DECIMALS,
            )
            await ledger.mint(deployer, TOTAL_SUPPLY)

            config = ConfigStore(
                owner=deployer,
                dev_wallet=dev_wallet,
                max_tx_amount=TOTAL_SUPPLY // 100,
                max_wallet_amount=TOTAL_SUPPLY // 50,
                fee_percent=self.settings.default_fee_percent,
                fees_enabled=True,
                trading_enabled=False,
                anti_bot_enabled=True,
                protection_blocks=self.settings.protection_blocks,
                fee_excluded={deployer, system_account, dev_wallet},
            )
            await policy_repo.save(config)

        logger.info(f"{TOKEN_SYMBOL} initialized: owner={deployer} dev_wallet={dev_wallet}")
        return config

    # ======================
    # Transfers
    # ======================

    async def transfer(
        self, sender: str, recipient: str, amount: int, current_height: int
    ) -> TransferInstruction:
        """Run a transfer through the policy and commit it.

        Raises:
            PolicyRejection: A policy stage rejected the transfer
            InsufficientBalance: Sender cannot cover the amount
            ZeroAddress: Sender or recipient is the null account
        """
        sender = normalize_account(sender)
        recipient = normalize_account(recipient)

        async with self._locked_session("transfer") as session:
            policy_repo = PolicyRepository(session)
            config = await policy_repo.load()
            policy = TransferPolicy(config, LedgerRepository(session))

            instruction = await policy.execute(sender, recipient, amount, current_height)

            if instruction.stamped:
                await policy_repo.save_last_tx_heights(
                    {account: current_height for account in instruction.stamped}
                )

        return instruction

    async def evaluate(
        self, sender: str, recipient: str, amount: int, current_height: int
    ) -> TransferInstruction:
        """Dry-run a transfer without committing anything."""
        sender = normalize_account(sender)
        recipient = normalize_account(recipient)

        async with self.session_scope() as session:
            config = await PolicyRepository(session).load()
            policy = TransferPolicy(config, LedgerRepository(session))
            return await policy.evaluate(sender, recipient, amount, current_height)

    # ======================
    # Admin
    # ======================

    async def _run_admin(self, caller: str, operation: str, action: AdminAction) -> ConfigStore:
        caller = normalize_account(caller)

        async with self._locked_session(operation) as session:
            policy_repo = PolicyRepository(session)
            ledger = LedgerRepository(session)
            config = await policy_repo.load()

            admin = AdminInterface(config, caller, ledger=ledger)
            result = action(admin)
            if result is not None:
                await result

            await policy_repo.save(config)
            for event in admin.events:
                await ledger.add_event(event.kind, account=event.account, value=event.value)

        return config

    async def toggle_fees(self, caller: str, enabled: bool) -> ConfigStore:
        return await self._run_admin(caller, "toggle_fees", lambda a: a.toggle_fees(enabled))

    async def toggle_trading(self, caller: str, enabled: bool, current_height: int) -> ConfigStore:
        return await self._run_admin(
            caller, "toggle_trading", lambda a: a.toggle_trading(enabled, current_height)
        )

    async def set_dev_wallet(self, caller: str, address: str) -> ConfigStore:
        address = normalize_account(address)
        return await self._run_admin(caller, "set_dev_wallet", lambda a: a.set_dev_wallet(address))

    async def set_whitelist(self, caller: str, address: str, status: bool) -> ConfigStore:
        address = normalize_account(address)
        return await self._run_admin(
            caller, "set_whitelist", lambda a: a.set_whitelist(address, status)
        )

    async def set_blacklist(self, caller: str, address: str, status: bool) -> ConfigStore:
        address = normalize_account(address)
        return await self._run_admin(
            caller, "set_blacklist", lambda a: a.set_blacklist(address, status)
        )

    async def set_excluded_from_fees(self, caller: str, address: str, status: bool) -> ConfigStore:
        address = normalize_account(address)
        return await self._run_admin(
            caller, "set_excluded_from_fees", lambda a: a.set_excluded_from_fees(address, status)
        )

    async def set_max_tx_amount(self, caller: str, amount: int) -> ConfigStore:
        return await self._run_admin(
            caller, "set_max_tx_amount", lambda a: a.set_max_tx_amount(amount)
        )

    async def set_max_wallet_amount(self, caller: str, amount: int) -> ConfigStore:
        return await self._run_admin(
            caller, "set_max_wallet_amount", lambda a: a.set_max_wallet_amount(amount)
        )

    async def set_fee_percent(self, caller: str, percent: int) -> ConfigStore:
        return await self._run_admin(
            caller, "set_fee_percent", lambda a: a.set_fee_percent(percent)
        )

    async def disable_anti_bot(self, caller: str) -> ConfigStore:
        return await self._run_admin(caller, "disable_anti_bot", lambda a: a.disable_anti_bot())

    async def mint(self, caller: str, to: str, amount: int) -> ConfigStore:
        to = normalize_account(to)
        return await self._run_admin(caller, "mint", lambda a: a.mint(to, amount))

    # ======================
    # Queries
    # ======================

    async def get_policy(self) -> ConfigStore:
        """Load the current configuration (read-only copy)."""
        async with self.session_scope() as session:
            return await PolicyRepository(session).load()

    async def is_whitelisted(self, address: str) -> bool:
        return (await self.get_policy()).is_whitelisted(normalize_account(address))

    async def is_blacklisted(self, address: str) -> bool:
        return (await self.get_policy()).is_blacklisted(normalize_account(address))

    async def is_excluded_from_fees(self, address: str) -> bool:
        return (await self.get_policy()).is_excluded_from_fees(normalize_account(address))

    async def last_tx_height(self, address: str) -> Optional[int]:
        return (await self.get_policy()).last_tx_height.get(normalize_account(address))

    async def balance_of(self, address: str) -> int:
        async with self.session_scope() as session:
            return await LedgerRepository(session).balance_of(normalize_account(address))

    async def total_supply(self) -> int:
        async with self.session_scope() as session:
            return await LedgerRepository(session).total_supply()

    async def get_token_info(self) -> dict:
        """Token metadata and supply."""
        async with self.session_scope() as session:
            state = await LedgerRepository(session).get_token_state()
            if state is None:
                return {}
            return {
                "address": state.address,
                "name": state.name,
                "symbol": state.symbol,
                "decimals": state.decimals,
                "total_supply": state.total_supply,
            }

    async def get_events(
        self, kind: Optional[PolicyEventType] = None, limit: int = 50
    ) -> list[PolicyEvent]:
        async with self.session_scope() as session:
            return await LedgerRepository(session).get_events(kind=kind, limit=limit)
