"""Fee computation."""

from dataclasses import dataclass

from shet.policy.config_store import ConfigStore


@dataclass(frozen=True)
class FeeSplit:
    """Fee and net portions of a transfer. Always sums to the amount."""

    fee_amount: int
    net_amount: int

    @property
    def amount(self) -> int:
        return self.fee_amount + self.net_amount


class FeeCalculator:
    """Splits a transfer into fee and net amounts."""

    name = "fees"

    def compute(
        self, sender: str, recipient: str, amount: int, config: ConfigStore
    ) -> FeeSplit:
        if (
            not config.fees_enabled
            or config.is_excluded_from_fees(sender)
            or config.is_excluded_from_fees(recipient)
        ):
            return FeeSplit(fee_amount=0, net_amount=amount)

        # Integer floor division, never rounds the fee up
        fee_amount = amount * config.fee_percent // 100
        return FeeSplit(fee_amount=fee_amount, net_amount=amount - fee_amount)
