"""Public token endpoints: metadata, account lookups and transfers."""

from fastapi import APIRouter, Depends

from shet.api.contracts import (
    AccountInfo,
    ErrorResponse,
    PolicySnapshot,
    TokenInfo,
    TransferRequest,
    TransferResponse,
)
from shet.api.deps import get_token_service
from shet.policy.config_store import ConfigStore
from shet.services.token import TokenService
from shet.token import normalize_account

router = APIRouter()


def policy_snapshot(config: ConfigStore) -> PolicySnapshot:
    """Render the scalar policy fields."""
    data = config.snapshot()
    data["max_tx_amount"] = str(data["max_tx_amount"])
    data["max_wallet_amount"] = str(data["max_wallet_amount"])
    return PolicySnapshot(**data)


@router.get("/token", response_model=TokenInfo)
async def get_token(service: TokenService = Depends(get_token_service)) -> TokenInfo:
    """Get token metadata and the current transfer policy."""
    info = await service.get_token_info()
    config = await service.get_policy()

    return TokenInfo(
        address=info["address"],
        name=info["name"],
        symbol=info["symbol"],
        decimals=info["decimals"],
        total_supply=str(info["total_supply"]),
        policy=policy_snapshot(config),
    )


@router.get("/accounts/{address}", response_model=AccountInfo)
async def get_account(
    address: str, service: TokenService = Depends(get_token_service)
) -> AccountInfo:
    """Get balance and policy memberships for an account."""
    address = normalize_account(address)
    config = await service.get_policy()
    balance = await service.balance_of(address)

    return AccountInfo(
        address=address,
        balance=str(balance),
        whitelisted=config.is_whitelisted(address),
        blacklisted=config.is_blacklisted(address),
        excluded_from_fees=config.is_excluded_from_fees(address),
        last_tx_height=config.last_tx_height.get(address),
    )


@router.post(
    "/transfers",
    response_model=TransferResponse,
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def create_transfer(
    request: TransferRequest, service: TokenService = Depends(get_token_service)
) -> TransferResponse:
    """Run a transfer through the policy and commit it.

    Rejections are returned as ``{"error": <kind>, "detail": <message>}``.
    """
    instruction = await service.transfer(
        request.sender, request.recipient, request.amount, request.height
    )

    return TransferResponse(
        sender=instruction.sender,
        recipient=instruction.recipient,
        amount=str(instruction.amount),
        fee_amount=str(instruction.fee_amount),
        net_amount=str(instruction.net_amount),
        height=instruction.height,
        legs=len(instruction.legs),
    )
