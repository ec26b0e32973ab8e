"""Dependency injection for FastAPI endpoints"""

from fastapi import Header, HTTPException, Request
from statement_gateway.domain.contracts import RateLookup
from statement_gateway.infrastructure.clients.rates import ExchangeRateClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_rate_lookup() -> RateLookup:
    """Provide exchange rate client instance"""
    return ExchangeRateClient()


def get_customer_id(x_customer_id: str | None = Header(default=None)) -> str:
    """Customer identity forwarded by the authentication gateway in front of this service"""
    if not x_customer_id:
        raise HTTPException(status_code=401, detail="Missing customer identity")
    return x_customer_id
