"""Token constants and account helpers."""

import re

TOKEN_NAME = "SHET"
TOKEN_SYMBOL = "SHET"
DECIMALS = 18

# Fixed supply minted to the deployer at initialization
TOTAL_SUPPLY = 1_000_000_000 * 10**DECIMALS

NULL_ACCOUNT = "0x0000000000000000000000000000000000000000"

MAX_FEE_PERCENT = 10

MAX_UINT256 = 2**256 - 1

_ADDRESS_RE = re.compile(r"^0x[0-9a-f]{40}$")


def normalize_account(address: str) -> str:
    """Normalize an account address for use as a key.

    Raises:
        ValueError: If the address is not a 20-byte hex string
    """
    normalized = address.strip().lower()
    if not _ADDRESS_RE.match(normalized):
        raise ValueError(f"Invalid account address: {address!r}")
    return normalized


def to_units(amount: int) -> int:
    """Convert whole tokens to smallest units."""
    return amount * 10**DECIMALS
