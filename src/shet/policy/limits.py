"""Per-transfer and per-wallet holding limits."""

from shet.policy.config_store import ConfigStore
from shet.policy.errors import TxLimitExceeded, WalletLimitExceeded
from shet.token import NULL_ACCOUNT


class LimitEnforcer:
    """Caps transfer size and the recipient's post-transfer balance.

    Transfers touching the owner are exempt. The dev wallet and the null
    account are exempt from the wallet cap only. Fee exclusion does not
    exempt an account from either cap.
    """

    name = "limits"

    def check(
        self,
        sender: str,
        recipient: str,
        amount: int,
        recipient_balance: int,
        config: ConfigStore,
    ) -> None:
        """Raise if the transfer breaks a cap.

        Raises:
            TxLimitExceeded: Amount is above max_tx_amount
            WalletLimitExceeded: Recipient would hold more than max_wallet_amount
        """
        if config.is_owner(sender) or config.is_owner(recipient):
            return

        if amount > config.max_tx_amount:
            raise TxLimitExceeded(
                f"Transfer amount {amount} exceeds max {config.max_tx_amount}"
            )

        if recipient in (config.dev_wallet, NULL_ACCOUNT):
            return

        if recipient_balance + amount > config.max_wallet_amount:
            raise WalletLimitExceeded(
                f"Recipient balance would be {recipient_balance + amount}, "
                f"max {config.max_wallet_amount}"
            )
