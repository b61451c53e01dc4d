"""Services that run policy operations against the database."""

from shet.services.token import TokenService

__all__ = ["TokenService"]
