"""Shared FastAPI dependencies."""

from typing import Optional

from fastapi import Header, HTTPException

from shet.config import get_settings
from shet.services.token import TokenService

_token_service: Optional[TokenService] = None


def get_token_service() -> TokenService:
    """Get the process-wide token service."""
    global _token_service
    if _token_service is None:
        _token_service = TokenService()
    return _token_service


async def require_admin_token(x_admin_token: str = Header(None)) -> bool:
    """Verify admin token from header.

    If ADMIN_TOKEN is not set, allows access (dev mode).
    """
    settings = get_settings()

    if not settings.admin_token:
        return True

    if x_admin_token != settings.admin_token:
        raise HTTPException(status_code=401, detail="Invalid admin token")

    return True


async def get_caller(x_caller_address: str = Header(...)) -> str:
    """Account issuing an admin call; ownership is checked by the policy."""
    return x_caller_address
