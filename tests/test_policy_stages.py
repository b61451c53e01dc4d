"""Tests for the individual transfer-policy stages."""

import pytest

from shet.policy.access import AccessGate
from shet.policy.antibot import AntiAutomationGuard
from shet.policy.errors import (
    BlacklistedParty,
    RateLimited,
    TradingDisabled,
    TxLimitExceeded,
    WalletLimitExceeded,
)
from shet.policy.fees import FeeCalculator
from shet.policy.limits import LimitEnforcer
from shet.token import NULL_ACCOUNT, to_units

from tests.conftest import ALICE, BOB, CAROL, DEV, OWNER


class TestConfigStore:
    """Tests for ConfigStore invariants."""

    def test_rejects_null_dev_wallet(self, make_config):
        with pytest.raises(ValueError, match="null account"):
            make_config(dev_wallet=NULL_ACCOUNT)

    def test_rejects_fee_above_max(self, make_config):
        with pytest.raises(ValueError, match="fee_percent"):
            make_config(fee_percent=11)

    def test_snapshot_has_scalars_only(self, make_config):
        snapshot = make_config().snapshot()

        assert snapshot["fee_percent"] == 2
        assert snapshot["owner"] == OWNER
        assert "whitelist" not in snapshot
        assert "last_tx_height" not in snapshot


class TestAccessGate:
    """Tests for blacklist and trading gate."""

    def setup_method(self):
        self.gate = AccessGate()

    def test_allows_when_trading_enabled(self, make_config):
        self.gate.check(ALICE, BOB, make_config())

    @pytest.mark.parametrize("sender,recipient", [(ALICE, BOB), (BOB, ALICE)])
    def test_blacklisted_party_rejected(self, make_config, sender, recipient):
        config = make_config(blacklist={ALICE})

        with pytest.raises(BlacklistedParty):
            self.gate.check(sender, recipient, config)

    def test_blacklist_overrides_whitelist_and_owner(self, make_config):
        config = make_config(trading_enabled=False, whitelist={ALICE}, blacklist={ALICE})

        with pytest.raises(BlacklistedParty):
            self.gate.check(ALICE, OWNER, config)

    def test_blacklist_checked_before_trading_gate(self, make_config):
        config = make_config(trading_enabled=False, blacklist={BOB})

        with pytest.raises(BlacklistedParty):
            self.gate.check(ALICE, BOB, config)

    def test_trading_disabled_rejects_regular_accounts(self, make_config):
        config = make_config(trading_enabled=False)

        with pytest.raises(TradingDisabled):
            self.gate.check(ALICE, BOB, config)

    def test_trading_disabled_allows_whitelisted(self, make_config):
        config = make_config(trading_enabled=False, whitelist={BOB})

        self.gate.check(ALICE, BOB, config)
        self.gate.check(BOB, ALICE, config)

    def test_trading_disabled_allows_owner(self, make_config):
        config = make_config(trading_enabled=False)

        self.gate.check(OWNER, ALICE, config)
        self.gate.check(ALICE, OWNER, config)

    def test_fee_exclusion_does_not_open_gate(self, make_config):
        config = make_config(trading_enabled=False, fee_excluded={ALICE})

        with pytest.raises(TradingDisabled):
            self.gate.check(ALICE, BOB, config)


class TestAntiAutomationGuard:
    """Tests for the launch-window rate limit."""

    def setup_method(self):
        self.guard = AntiAutomationGuard()

    def test_active_inside_window(self, make_config):
        config = make_config(launch_height=100, protection_blocks=3)

        assert self.guard.is_active(config, 100)
        assert self.guard.is_active(config, 102)
        assert not self.guard.is_active(config, 103)

    def test_inactive_when_disabled_or_not_trading(self, make_config):
        assert not self.guard.is_active(make_config(anti_bot_enabled=False), 100)
        assert not self.guard.is_active(make_config(trading_enabled=False), 100)

    def test_check_returns_parties_without_writing(self, make_config):
        config = make_config()

        stamped = self.guard.check(ALICE, BOB, 101, config)

        assert stamped == (ALICE, BOB)
        assert config.last_tx_height == {}

    def test_second_transfer_same_height_rejected(self, make_config):
        config = make_config()
        self.guard.record(config, self.guard.check(ALICE, BOB, 101, config), 101)

        with pytest.raises(RateLimited):
            self.guard.check(BOB, CAROL, 101, config)

    def test_next_height_allowed(self, make_config):
        config = make_config()
        self.guard.record(config, self.guard.check(ALICE, BOB, 101, config), 101)

        assert self.guard.check(BOB, CAROL, 102, config) == (BOB, CAROL)

    def test_outside_window_no_check_and_no_stamp(self, make_config):
        config = make_config(last_tx_height={ALICE: 103})

        assert self.guard.check(ALICE, BOB, 103, config) == ()
        self.guard.record(config, (), 103)
        assert BOB not in config.last_tx_height

    def test_relaunch_restarts_window(self, make_config):
        config = make_config(launch_height=500)

        assert self.guard.is_active(config, 501)


class TestLimitEnforcer:
    """Tests for transaction and wallet caps."""

    def setup_method(self):
        self.limits = LimitEnforcer()

    def test_tx_limit_exceeded(self, make_config):
        config = make_config(max_tx_amount=to_units(10_000_000))

        with pytest.raises(TxLimitExceeded):
            self.limits.check(ALICE, BOB, to_units(10_000_001), 0, config)

    def test_tx_limit_boundary_allowed(self, make_config):
        config = make_config(max_tx_amount=1000, max_wallet_amount=10_000)

        self.limits.check(ALICE, BOB, 1000, 0, config)

    def test_tx_limit_checked_before_wallet_limit(self, make_config):
        config = make_config(max_tx_amount=100, max_wallet_amount=50)

        with pytest.raises(TxLimitExceeded):
            self.limits.check(ALICE, BOB, 101, 0, config)

    def test_wallet_limit_exceeded(self, make_config):
        config = make_config(max_tx_amount=1000, max_wallet_amount=5000)

        with pytest.raises(WalletLimitExceeded):
            self.limits.check(ALICE, BOB, 1000, 4001, config)

    def test_wallet_limit_boundary_allowed(self, make_config):
        config = make_config(max_tx_amount=1000, max_wallet_amount=5000)

        self.limits.check(ALICE, BOB, 1000, 4000, config)

    def test_owner_exempt(self, make_config):
        config = make_config(max_tx_amount=10, max_wallet_amount=10)

        self.limits.check(OWNER, BOB, 1000, 1000, config)
        self.limits.check(ALICE, OWNER, 1000, 1000, config)

    def test_dev_wallet_and_null_exempt_from_wallet_cap_only(self, make_config):
        config = make_config(max_tx_amount=1000, max_wallet_amount=10)

        self.limits.check(ALICE, DEV, 1000, 10**9, config)
        self.limits.check(ALICE, NULL_ACCOUNT, 1000, 10**9, config)

        with pytest.raises(TxLimitExceeded):
            self.limits.check(ALICE, DEV, 1001, 0, config)

    def test_fee_exclusion_does_not_exempt(self, make_config):
        config = make_config(max_tx_amount=10, fee_excluded={ALICE})

        with pytest.raises(TxLimitExceeded):
            self.limits.check(ALICE, BOB, 11, 0, config)


class TestFeeCalculator:
    """Tests for fee computation."""

    def setup_method(self):
        self.fees = FeeCalculator()

    def test_two_percent_of_1000(self, make_config):
        split = self.fees.compute(ALICE, BOB, 1000, make_config())

        assert split.fee_amount == 20
        assert split.net_amount == 980

    def test_fee_truncates(self, make_config):
        split = self.fees.compute(ALICE, BOB, 149, make_config(fee_percent=2))

        assert split.fee_amount == 2
        assert split.net_amount == 147
        assert split.amount == 149

    def test_small_amount_no_fee(self, make_config):
        split = self.fees.compute(ALICE, BOB, 49, make_config(fee_percent=2))

        assert split.fee_amount == 0
        assert split.net_amount == 49

    def test_fees_disabled(self, make_config):
        split = self.fees.compute(ALICE, BOB, 1000, make_config(fees_enabled=False))

        assert split.fee_amount == 0
        assert split.net_amount == 1000

    @pytest.mark.parametrize("sender,recipient", [(ALICE, BOB), (BOB, ALICE)])
    def test_excluded_party_pays_no_fee(self, make_config, sender, recipient):
        config = make_config(fee_excluded={ALICE})

        split = self.fees.compute(sender, recipient, 1000, config)

        assert split.fee_amount == 0

    def test_large_amount_exact(self, make_config):
        amount = to_units(123_456_789) + 7
        split = self.fees.compute(ALICE, BOB, amount, make_config(fee_percent=10))

        assert split.fee_amount == amount * 10 // 100
        assert split.fee_amount + split.net_amount == amount
