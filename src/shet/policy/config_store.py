"""Transfer-policy configuration aggregate.

A single ``ConfigStore`` is handed by reference to every policy stage.
Scalar parameters and membership sets are only changed through
``AdminInterface``; ``last_tx_height`` is only changed by the anti-bot guard.
"""

from dataclasses import asdict, dataclass, field

from shet.token import MAX_FEE_PERCENT, NULL_ACCOUNT


@dataclass
class ConfigStore:
    """Mutable policy parameters and privileged-account sets."""

    owner: str
    dev_wallet: str
    max_tx_amount: int
    max_wallet_amount: int
    fee_percent: int = 2
    fees_enabled: bool = True
    trading_enabled: bool = False
    anti_bot_enabled: bool = True
    launch_height: int = 0
    protection_blocks: int = 3

    whitelist: set[str] = field(default_factory=set)
    blacklist: set[str] = field(default_factory=set)
    fee_excluded: set[str] = field(default_factory=set)

    # Sparse: absent means the account never transferred inside the window
    last_tx_height: dict[str, int] = field(default_factory=dict)

    def __post_init__(self):
        if self.dev_wallet == NULL_ACCOUNT:
            raise ValueError("dev_wallet cannot be the null account")
        if not 0 <= self.fee_percent <= MAX_FEE_PERCENT:
            raise ValueError(f"fee_percent must be within 0..{MAX_FEE_PERCENT}")

    def is_owner(self, account: str) -> bool:
        return account == self.owner

    def is_whitelisted(self, account: str) -> bool:
        return account in self.whitelist

    def is_blacklisted(self, account: str) -> bool:
        return account in self.blacklist

    def is_excluded_from_fees(self, account: str) -> bool:
        return account in self.fee_excluded

    @property
    def protection_end_height(self) -> int:
        """First height at which the anti-bot window no longer applies."""
        return self.launch_height + self.protection_blocks

    def snapshot(self) -> dict:
        """Scalar fields only, for read-only queries."""
        data = asdict(self)
        for key in ("whitelist", "blacklist", "fee_excluded", "last_tx_height"):
            data.pop(key)
        return data
