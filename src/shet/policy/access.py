"""Access gate: blacklist and trading-enabled checks."""

from shet.policy.config_store import ConfigStore
from shet.policy.errors import BlacklistedParty, TradingDisabled


class AccessGate:
    """Decides whether a transfer is permitted at all.

    The blacklist is checked first and overrides whitelist membership.
    While trading is disabled only transfers touching a whitelisted account
    or the owner get through.
    """

    name = "access"

    def check(self, sender: str, recipient: str, config: ConfigStore) -> None:
        """Raise if the transfer is not permitted.

        Raises:
            BlacklistedParty: Sender or recipient is blacklisted
            TradingDisabled: Trading is off and neither party is privileged
        """
        if config.is_blacklisted(sender) or config.is_blacklisted(recipient):
            raise BlacklistedParty(
                f"Blacklisted party in transfer {sender} -> {recipient}"
            )

        if config.trading_enabled:
            return

        if (
            config.is_whitelisted(sender)
            or config.is_whitelisted(recipient)
            or config.is_owner(sender)
            or config.is_owner(recipient)
        ):
            return

        raise TradingDisabled("Trading is not enabled")
