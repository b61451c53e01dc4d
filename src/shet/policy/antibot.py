"""Anti-automation guard for the post-launch window."""

import logging

from shet.policy.config_store import ConfigStore
from shet.policy.errors import RateLimited

logger = logging.getLogger(__name__)


class AntiAutomationGuard:
    """Limits each account to one transfer per ledger height after launch.

    Only active while anti-bot is enabled, trading is enabled and the
    current height is inside ``[launch_height, launch_height + protection_blocks)``.
    ``check`` does not write anything; the accounts it returns are stamped
    by ``record`` once the whole transfer has been accepted.
    """

    name = "anti_bot"

    @staticmethod
    def is_active(config: ConfigStore, current_height: int) -> bool:
        return (
            config.anti_bot_enabled
            and config.trading_enabled
            and current_height < config.protection_end_height
        )

    def check(
        self, sender: str, recipient: str, current_height: int, config: ConfigStore
    ) -> tuple[str, ...]:
        """Check the per-height rate limit.

        Returns:
            Accounts to stamp with ``current_height`` (empty when inactive)

        Raises:
            RateLimited: Either party already transferred at this height
        """
        if not self.is_active(config, current_height):
            return ()

        for account in (sender, recipient):
            if config.last_tx_height.get(account) == current_height:
                raise RateLimited(
                    f"Account {account} already transferred at height {current_height}"
                )

        return (sender, recipient)

    def record(
        self, config: ConfigStore, accounts: tuple[str, ...], current_height: int
    ) -> None:
        """Stamp accounts with the height of an accepted transfer."""
        for account in accounts:
            config.last_tx_height[account] = current_height
        if accounts:
            logger.debug(f"Anti-bot stamp at height {current_height}: {', '.join(accounts)}")
