"""Admin API endpoints (token-protected, owner-only).

The ``X-Admin-Token`` header gates access to the router; the
``X-Caller-Address`` header names the account issuing the call, and the
policy rejects anyone but the owner with ``Unauthorized``.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from shet.api.contracts import (
    AddressRequest,
    AmountRequest,
    EventInfo,
    FeePercentRequest,
    MembershipRequest,
    MintRequest,
    PolicySnapshot,
    ToggleRequest,
    TradingToggleRequest,
)
from shet.api.deps import get_caller, get_token_service, require_admin_token
from shet.api.routes.token import policy_snapshot
from shet.ledger.models import PolicyEventType
from shet.services.token import TokenService

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin_token)])


@router.post("/fees", response_model=PolicySnapshot)
async def toggle_fees(
    request: ToggleRequest,
    caller: str = Depends(get_caller),
    service: TokenService = Depends(get_token_service),
) -> PolicySnapshot:
    """Enable or disable fee collection."""
    return policy_snapshot(await service.toggle_fees(caller, request.enabled))


@router.post("/trading", response_model=PolicySnapshot)
async def toggle_trading(
    request: TradingToggleRequest,
    caller: str = Depends(get_caller),
    service: TokenService = Depends(get_token_service),
) -> PolicySnapshot:
    """Enable or disable trading. Enabling sets the launch height."""
    config = await service.toggle_trading(caller, request.enabled, request.height)
    return policy_snapshot(config)


@router.post("/dev-wallet", response_model=PolicySnapshot)
async def set_dev_wallet(
    request: AddressRequest,
    caller: str = Depends(get_caller),
    service: TokenService = Depends(get_token_service),
) -> PolicySnapshot:
    return policy_snapshot(await service.set_dev_wallet(caller, request.address))


@router.post("/whitelist")
async def set_whitelist(
    request: MembershipRequest,
    caller: str = Depends(get_caller),
    service: TokenService = Depends(get_token_service),
) -> dict:
    await service.set_whitelist(caller, request.address, request.status)
    return {"address": request.address.lower(), "whitelisted": request.status}


@router.post("/blacklist")
async def set_blacklist(
    request: MembershipRequest,
    caller: str = Depends(get_caller),
    service: TokenService = Depends(get_token_service),
) -> dict:
    await service.set_blacklist(caller, request.address, request.status)
    return {"address": request.address.lower(), "blacklisted": request.status}


@router.post("/fee-exclusion")
async def set_excluded_from_fees(
    request: MembershipRequest,
    caller: str = Depends(get_caller),
    service: TokenService = Depends(get_token_service),
) -> dict:
    await service.set_excluded_from_fees(caller, request.address, request.status)
    return {"address": request.address.lower(), "excluded_from_fees": request.status}


@router.post("/max-tx", response_model=PolicySnapshot)
async def set_max_tx_amount(
    request: AmountRequest,
    caller: str = Depends(get_caller),
    service: TokenService = Depends(get_token_service),
) -> PolicySnapshot:
    return policy_snapshot(await service.set_max_tx_amount(caller, request.amount))


@router.post("/max-wallet", response_model=PolicySnapshot)
async def set_max_wallet_amount(
    request: AmountRequest,
    caller: str = Depends(get_caller),
    service: TokenService = Depends(get_token_service),
) -> PolicySnapshot:
    return policy_snapshot(await service.set_max_wallet_amount(caller, request.amount))


@router.post("/fee-percent", response_model=PolicySnapshot)
async def set_fee_percent(
    request: FeePercentRequest,
    caller: str = Depends(get_caller),
    service: TokenService = Depends(get_token_service),
) -> PolicySnapshot:
    """Set the fee percent (max 10)."""
    return policy_snapshot(await service.set_fee_percent(caller, request.percent))


@router.post("/anti-bot/disable", response_model=PolicySnapshot)
async def disable_anti_bot(
    caller: str = Depends(get_caller),
    service: TokenService = Depends(get_token_service),
) -> PolicySnapshot:
    """Permanently disable anti-bot protection."""
    return policy_snapshot(await service.disable_anti_bot(caller))


@router.post("/mint")
async def mint(
    request: MintRequest,
    caller: str = Depends(get_caller),
    service: TokenService = Depends(get_token_service),
) -> dict:
    await service.mint(caller, request.to, request.amount)
    return {
        "to": request.to.lower(),
        "amount": str(request.amount),
        "total_supply": str(await service.total_supply()),
    }


@router.get("/events", response_model=list[EventInfo])
async def list_events(
    kind: Optional[PolicyEventType] = None,
    limit: int = 50,
    service: TokenService = Depends(get_token_service),
) -> list[EventInfo]:
    """List recorded events, newest first."""
    events = await service.get_events(kind=kind, limit=limit)

    return [
        EventInfo(
            id=event.id,
            kind=PolicyEventType(event.kind).value,
            account=event.account,
            counterparty=event.counterparty,
            value=event.value,
            created_at=event.created_at.isoformat() if event.created_at else None,
        )
        for event in events
    ]
