"""Exercise the rate client against the local mock rate server over ASGI"""

import importlib.util
import httpx
import pytest
from datetime import date
from decimal import Decimal
from pathlib import Path
from statement_gateway.domain.statements import StatementAssembler
from statement_gateway.infrastructure.clients.rates import ExchangeRateClient
from statement_gateway.infrastructure.database.repositories import TransactionRepository
from statement_gateway.domain.ingestion import IngestionProcessor
from statement_gateway.domain.models import PageRequest

MOCK_SERVER = Path(__file__).resolve().parents[2] / "mock" / "rate_server" / "main.py"


@pytest.fixture(scope="module")
def mock_app():
    spec = importlib.util.spec_from_file_location("mock_rate_server", MOCK_SERVER)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module.app


@pytest.fixture
def rate_client(mock_app) -> ExchangeRateClient:
    return ExchangeRateClient(
        base_url="http://mock-rates",
        api_key="local",
        transport=httpx.ASGITransport(app=mock_app),
    )


async def test_known_pair_is_quoted(rate_client: ExchangeRateClient):
    assert await rate_client.rate(date(2020, 10, 15), "CHF", "IDR") == Decimal("17000.12")


async def test_unknown_pair_falls_back_to_identity(rate_client: ExchangeRateClient):
    assert await rate_client.rate(date(2020, 10, 15), "JPY", "IDR") == Decimal(1)


async def test_statement_against_mock_server(db, make_event, rate_client: ExchangeRateClient):
    """Test ingest-then-assemble end to end with HTTP rate lookups"""
    processor = IngestionProcessor(TransactionRepository(db))
    event = make_event(currency_amount="CHF 100-", value_date=date(2020, 10, 15))
    processor.ingest(event)

    statement = await StatementAssembler(TransactionRepository(db), rate_client).assemble(
        event.customer_id, date(2020, 10, 1), PageRequest(0, 20), "IDR"
    )

    assert statement.total_debit == Decimal("1700012.00")
    assert statement.total_credit == Decimal(0)
    assert statement.transactions[0].id == event.id
