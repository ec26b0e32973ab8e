"""Pytest fixtures for testing"""

import uuid
import pytest
from datetime import date
from decimal import Decimal
from typing import Callable, Dict, Generator, List, Tuple
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from statement_gateway.api.main import create_app
from statement_gateway.api.dependencies import get_rate_lookup
from statement_gateway.domain.contracts import RateLookup
from statement_gateway.domain.models import InboundEvent
from statement_gateway.infrastructure.database.models import Base
from statement_gateway.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class StaticRateLookup(RateLookup):
    """In-memory rate table that records every lookup"""

    def __init__(self, quotes: Dict[Tuple[str, str], Decimal]):
        self.quotes = quotes
        self.calls: List[Tuple[date, str, str]] = []

    async def rate(self, on_date: date, from_currency: str, to_currency: str) -> Decimal:
        self.calls.append((on_date, from_currency, to_currency))
        if from_currency == to_currency:
            return Decimal(1)
        return self.quotes.get((from_currency, to_currency), Decimal(1))


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(db: Session) -> Callable[[], Session]:
    """Factory for fresh sessions on the test database (tables created by `db`)"""
    return TestingSessionLocal


@pytest.fixture
def rates() -> StaticRateLookup:
    """Rates into IDR used across statement tests"""
    return StaticRateLookup(
        {
            ("CHF", "IDR"): Decimal("17000.12"),
            ("USD", "IDR"): Decimal("15600.75"),
            ("EUR", "IDR"): Decimal("16950.40"),
        }
    )


@pytest.fixture
def client(db: Session, rates: StaticRateLookup) -> TestClient:
    """Create FastAPI test client with test database and static rates"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rate_lookup] = lambda: rates
    return TestClient(app)


@pytest.fixture
def make_event() -> Callable[..., InboundEvent]:
    """Build inbound events with sensible defaults"""

    def _make_event(
        currency_amount: str = "CHF 100-",
        value_date: date = date(2020, 10, 15),
        customer_id: str = "P-0123456789",
        event_id: uuid.UUID | None = None,
        account_iban: str = "CH93-0000-0000-0000-0000-0",
        description: str = "Online payment CHF",
    ) -> InboundEvent:
        return InboundEvent(
            id=event_id or uuid.uuid4(),
            customer_id=customer_id,
            account_iban=account_iban,
            currency_amount=currency_amount,
            value_date=value_date,
            description=description,
        )

    return _make_event
