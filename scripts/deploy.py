#!/usr/bin/env python3
"""Deploy the SHET token.

Creates the database tables, mints the fixed supply to the deployer and
seeds the transfer policy.

Usage:
    python scripts/deploy.py --deployer 0xABC... [--dev-wallet 0xDEF...]

Options:
    --deployer        Deploying account; becomes the owner
    --dev-wallet      Fee-collection account (default: 0x...dEaD placeholder)
    --system-account  Address of the token itself (default: TOKEN_ADDRESS setting)
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dotenv import load_dotenv

load_dotenv()

from shet.ledger.database import close_db, init_db
from shet.policy.errors import PolicyError
from shet.services.token import TokenService
from shet.token import TOKEN_SYMBOL

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

# TODO: replace with the real developer wallet before a production deploy
DEFAULT_DEV_WALLET = "0x000000000000000000000000000000000000dEaD"


async def deploy(deployer: str, dev_wallet: str, system_account: str = None) -> str:
    """Initialize the token and return its address."""
    await init_db()
    try:
        service = TokenService()
        await service.initialize(deployer, dev_wallet, system_account=system_account)
        info = await service.get_token_info()
        return info["address"]
    finally:
        await close_db()


def main() -> int:
    parser = argparse.ArgumentParser(description=f"Deploy the {TOKEN_SYMBOL} token")
    parser.add_argument("--deployer", required=True, help="Deploying (owner) account")
    parser.add_argument("--dev-wallet", default=DEFAULT_DEV_WALLET, help="Fee-collection account")
    parser.add_argument("--system-account", default=None, help="Token system account")
    args = parser.parse_args()

    try:
        address = asyncio.run(deploy(args.deployer, args.dev_wallet, args.system_account))
    except (PolicyError, ValueError) as e:
        logger.error(f"Deploy failed: {e}")
        return 1

    print(f"{TOKEN_SYMBOL} deployed to: {address}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
