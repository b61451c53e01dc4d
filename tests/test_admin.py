"""Tests for owner-only admin operations."""

import pytest

from shet.ledger.models import PolicyEventType
from shet.policy.admin import AdminInterface
from shet.policy.errors import FeeTooHigh, InvalidAmount, Unauthorized, ZeroAddress
from shet.token import NULL_ACCOUNT

from tests.conftest import ALICE, BOB, OWNER, FakeLedger


class TestAuthorization:
    """Every admin operation requires the owner."""

    @pytest.mark.parametrize(
        "operation",
        [
            lambda a: a.toggle_fees(False),
            lambda a: a.toggle_trading(True, 10),
            lambda a: a.set_dev_wallet(BOB),
            lambda a: a.set_whitelist(BOB, True),
            lambda a: a.set_blacklist(BOB, True),
            lambda a: a.set_excluded_from_fees(BOB, True),
            lambda a: a.set_max_tx_amount(1),
            lambda a: a.set_max_wallet_amount(1),
            lambda a: a.set_fee_percent(5),
            lambda a: a.disable_anti_bot(),
        ],
    )
    def test_non_owner_unauthorized(self, make_config, operation):
        config = make_config()
        before = config.snapshot()
        admin = AdminInterface(config, caller=ALICE)

        with pytest.raises(Unauthorized):
            operation(admin)

        assert config.snapshot() == before
        assert admin.events == []

    @pytest.mark.asyncio
    async def test_non_owner_cannot_mint(self, make_config):
        ledger = FakeLedger()
        admin = AdminInterface(make_config(), caller=ALICE, ledger=ledger)

        with pytest.raises(Unauthorized):
            await admin.mint(ALICE, 100)

        assert ledger.balances == {}


class TestOwnerOperations:
    """Tests for the effects of admin operations."""

    def _admin(self, config):
        return AdminInterface(config, caller=OWNER)

    def test_toggle_trading_sets_launch_height(self, make_config):
        config = make_config(trading_enabled=False, launch_height=0)
        admin = self._admin(config)

        admin.toggle_trading(True, 1234)

        assert config.trading_enabled
        assert config.launch_height == 1234
        assert admin.events[-1].kind == PolicyEventType.TRADING_TOGGLED
        assert admin.events[-1].value is True

    def test_disable_trading_keeps_launch_height(self, make_config):
        config = make_config(launch_height=100)

        self._admin(config).toggle_trading(False, 999)

        assert not config.trading_enabled
        assert config.launch_height == 100

    def test_toggle_fees(self, make_config):
        config = make_config()
        admin = self._admin(config)

        admin.toggle_fees(False)

        assert not config.fees_enabled
        assert admin.events[-1].kind == PolicyEventType.FEES_TOGGLED

    def test_set_fee_percent_max(self, make_config):
        config = make_config()
        admin = self._admin(config)

        admin.set_fee_percent(10)

        assert config.fee_percent == 10
        assert admin.events[-1].kind == PolicyEventType.FEE_PERCENT_UPDATED
        assert admin.events[-1].value == 10

    def test_set_fee_percent_too_high(self, make_config):
        config = make_config()

        with pytest.raises(FeeTooHigh):
            self._admin(config).set_fee_percent(11)

        assert config.fee_percent == 2

    def test_set_fee_percent_negative(self, make_config):
        with pytest.raises(InvalidAmount):
            self._admin(make_config()).set_fee_percent(-1)

    def test_set_dev_wallet(self, make_config):
        config = make_config()
        admin = self._admin(config)

        admin.set_dev_wallet(BOB)

        assert config.dev_wallet == BOB
        assert admin.events[-1].kind == PolicyEventType.DEV_WALLET_UPDATED

    def test_set_dev_wallet_null_rejected(self, make_config):
        config = make_config()
        dev_wallet = config.dev_wallet

        with pytest.raises(ZeroAddress):
            self._admin(config).set_dev_wallet(NULL_ACCOUNT)

        assert config.dev_wallet == dev_wallet

    def test_whitelist_is_idempotent(self, make_config):
        config = make_config()
        admin = self._admin(config)

        admin.set_whitelist(ALICE, True)
        admin.set_whitelist(ALICE, True)

        assert config.whitelist == {ALICE}

        admin.set_whitelist(ALICE, False)
        admin.set_whitelist(ALICE, False)

        assert config.whitelist == set()

    def test_blacklist_event_carries_account_and_status(self, make_config):
        config = make_config()
        admin = self._admin(config)

        admin.set_blacklist(BOB, True)

        event = admin.events[-1]
        assert event.kind == PolicyEventType.BLACKLIST_UPDATED
        assert event.account == BOB
        assert event.value is True
        assert config.is_blacklisted(BOB)

    def test_fee_exclusion_and_limits_emit_no_events(self, make_config):
        config = make_config()
        admin = self._admin(config)

        admin.set_excluded_from_fees(ALICE, True)
        admin.set_max_tx_amount(500)
        admin.set_max_wallet_amount(900)
        admin.disable_anti_bot()

        assert config.is_excluded_from_fees(ALICE)
        assert config.max_tx_amount == 500
        assert config.max_wallet_amount == 900
        assert not config.anti_bot_enabled
        assert admin.events == []

    def test_negative_limit_rejected(self, make_config):
        with pytest.raises(InvalidAmount):
            self._admin(make_config()).set_max_tx_amount(-5)

    @pytest.mark.asyncio
    async def test_mint_delegates_to_ledger(self, make_config):
        ledger = FakeLedger()
        admin = AdminInterface(make_config(), caller=OWNER, ledger=ledger)

        await admin.mint(ALICE, 100)

        assert ledger.balances == {ALICE: 100}

    @pytest.mark.asyncio
    async def test_mint_to_null_rejected(self, make_config):
        admin = AdminInterface(make_config(), caller=OWNER, ledger=FakeLedger())

        with pytest.raises(ZeroAddress):
            await admin.mint(NULL_ACCOUNT, 100)
