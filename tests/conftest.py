"""Pytest configuration and fixtures."""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ADMIN_TOKEN"] = ""
os.environ["DEBUG"] = "false"

from shet.config import get_settings
from shet.ledger.models import Base
from shet.ledger.repository import LedgerRepository, PolicyRepository
from shet.policy.config_store import ConfigStore
from shet.policy.errors import InsufficientBalance
from shet.services.token import TokenService
from shet.token import TOTAL_SUPPLY
from shet.utils.locks import clear_ledger_lock

OWNER = "0x" + "a" * 40
DEV = "0x" + "d" * 40
SYSTEM = "0x" + "5" * 40
ALICE = "0x" + "1" * 40
BOB = "0x" + "2" * 40
CAROL = "0x" + "3" * 40


@pytest.fixture(autouse=True)
def fresh_ledger_lock():
    """Each test runs on its own event loop; drop the lock between tests."""
    clear_ledger_lock()
    yield
    clear_ledger_lock()


@pytest.fixture
def make_config():
    """Factory for ConfigStore instances with deployment defaults."""

    def _make(**overrides) -> ConfigStore:
        values = dict(
            owner=OWNER,
            dev_wallet=DEV,
            max_tx_amount=TOTAL_SUPPLY // 100,
            max_wallet_amount=TOTAL_SUPPLY // 50,
            fee_percent=2,
            fees_enabled=True,
            trading_enabled=True,
            anti_bot_enabled=True,
            launch_height=100,
            protection_blocks=3,
            fee_excluded={OWNER, SYSTEM, DEV},
        )
        values.update(overrides)
        return ConfigStore(**values)

    return _make


@pytest_asyncio.fixture
async def db_engine():
    """Create in-memory database engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for testing."""
    session_factory = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def ledger_repo(db_session: AsyncSession) -> LedgerRepository:
    """Create ledger repository for testing."""
    return LedgerRepository(db_session)


@pytest_asyncio.fixture
async def policy_repo(db_session: AsyncSession) -> PolicyRepository:
    """Create policy repository for testing."""
    return PolicyRepository(db_session)


@pytest.fixture
def session_scope(db_engine):
    """Commit/rollback session scope bound to the test engine."""
    session_factory = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    @asynccontextmanager
    async def scope():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    return scope


@pytest.fixture
def token_service(session_scope) -> TokenService:
    """Token service bound to the test database (not initialized)."""
    return TokenService(session_scope=session_scope, settings=get_settings())


@pytest_asyncio.fixture
async def deployed(token_service: TokenService) -> TokenService:
    """Token service with the token deployed by OWNER."""
    await token_service.initialize(OWNER, DEV, system_account=SYSTEM)
    return token_service


class FakeLedger:
    """In-memory ledger that records applied legs."""

    def __init__(self, balances=None, fail_on_leg=None):
        self.balances = dict(balances or {})
        self.legs = []
        self.fail_on_leg = fail_on_leg

    async def balance_of(self, address):
        return self.balances.get(address, 0)

    async def credit_and_debit(self, sender, recipient, amount):
        if self.fail_on_leg is not None and len(self.legs) == self.fail_on_leg:
            raise RuntimeError("ledger failure")
        if self.balances.get(sender, 0) < amount:
            raise InsufficientBalance("Insufficient balance")
        self.balances[sender] = self.balances.get(sender, 0) - amount
        self.balances[recipient] = self.balances.get(recipient, 0) + amount
        self.legs.append((sender, recipient, amount))

    async def mint(self, to, amount):
        self.balances[to] = self.balances.get(to, 0) + amount
