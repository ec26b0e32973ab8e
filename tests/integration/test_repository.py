"""Integration tests for the SQLAlchemy transaction repository"""

import uuid
import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from sqlalchemy.orm import Session
from statement_gateway.domain.exceptions import PersistenceError
from statement_gateway.domain.models import Direction, PageRequest, StoredTransaction
from statement_gateway.infrastructure.database.models import Base
from statement_gateway.infrastructure.database.repositories import TransactionRepository, stamp_audit_fields

CUSTOMER = "P-0123456789"


def transaction(
    value_date: date,
    customer_id: str = CUSTOMER,
    amount: str = "10",
    direction: Direction = Direction.CREDIT,
) -> StoredTransaction:
    return StoredTransaction(
        id=uuid.uuid4(),
        customer_id=customer_id,
        account_iban="CH93-0000-0000-0000-0000-0",
        currency="CHF",
        amount=Decimal(amount),
        direction=direction,
        value_date=value_date,
        month_key=value_date.replace(day=1),
        description="Card payment",
    )


def test_find_filters_by_customer_and_month(db: Session):
    repo = TransactionRepository(db)
    mine = repo.save(transaction(date(2020, 10, 3)))
    repo.save(transaction(date(2020, 11, 3)))
    repo.save(transaction(date(2020, 10, 4), customer_id="P-9999999999"))

    page = repo.find_by_customer_and_month(CUSTOMER, date(2020, 10, 1), PageRequest(0, 10))

    assert [t.id for t in page.items] == [mine.id]
    assert page.total_elements == 1
    assert page.total_pages == 1


def test_find_pages_in_value_date_order(db: Session):
    """Test pages are ordered by value date and carry full-month counts"""
    repo = TransactionRepository(db)
    for day in (20, 5, 12, 28, 1):
        repo.save(transaction(date(2020, 10, day)))

    first = repo.find_by_customer_and_month(CUSTOMER, date(2020, 10, 1), PageRequest(0, 2))
    second = repo.find_by_customer_and_month(CUSTOMER, date(2020, 10, 1), PageRequest(1, 2))
    third = repo.find_by_customer_and_month(CUSTOMER, date(2020, 10, 1), PageRequest(2, 2))

    assert [t.value_date.day for t in first.items] == [1, 5]
    assert [t.value_date.day for t in second.items] == [12, 20]
    assert [t.value_date.day for t in third.items] == [28]
    assert first.total_elements == 5
    assert first.total_pages == 3
    assert third.page == 2
    assert third.size == 2


def test_page_past_the_end_is_empty(db: Session):
    repo = TransactionRepository(db)
    repo.save(transaction(date(2020, 10, 3)))

    page = repo.find_by_customer_and_month(CUSTOMER, date(2020, 10, 1), PageRequest(5, 10))

    assert page.items == []
    assert page.total_elements == 1
    assert page.total_pages == 1


def test_save_replaces_by_id(db: Session):
    """Test insert-or-replace keeps a single row per id"""
    repo = TransactionRepository(db)
    original = repo.save(transaction(date(2020, 10, 3), amount="10", direction=Direction.CREDIT))

    replacement = transaction(date(2020, 10, 9), amount="99.99", direction=Direction.DEBIT)
    replacement.id = original.id
    repo.save(replacement)

    page = repo.find_by_customer_and_month(CUSTOMER, date(2020, 10, 1), PageRequest(0, 10))
    assert page.total_elements == 1
    assert page.items[0].amount == Decimal("99.99")
    assert page.items[0].direction == Direction.DEBIT
    assert page.items[0].value_date == date(2020, 10, 9)


def test_get_unknown_id_returns_none(db: Session):
    assert TransactionRepository(db).get(uuid.uuid4()) is None


def test_stamp_audit_fields_sets_both_timestamps():
    now = datetime(2020, 10, 1, tzinfo=timezone.utc)

    values = stamp_audit_fields({"currency": "CHF"}, now)

    assert values == {"currency": "CHF", "created_at": now, "updated_at": now}


def test_replace_keeps_first_created_at(db: Session):
    repo = TransactionRepository(db)
    original = repo.save(transaction(date(2020, 10, 3), amount="10"))

    replacement = transaction(date(2020, 10, 3), amount="11")
    replacement.id = original.id
    replaced = repo.save(replacement)

    assert replaced.created_at == original.created_at
    assert replaced.updated_at >= original.updated_at
    assert replaced.amount == Decimal("11")


def test_overlapping_deliveries_last_write_wins(db: Session, session_factory):
    """Test a delivery that looked up the id before another delivery inserted it still wins"""
    first_session = session_factory()
    second_session = session_factory()
    try:
        first_repo = TransactionRepository(first_session)
        second_repo = TransactionRepository(second_session)

        earlier = transaction(date(2020, 10, 3), amount="10")
        later = transaction(date(2020, 10, 3), amount="20")
        later.id = earlier.id

        assert first_repo.get(earlier.id) is None
        second_repo.save(earlier)
        saved = first_repo.save(later)

        assert saved.amount == Decimal("20")
        stored = TransactionRepository(db).find_by_customer_and_month(CUSTOMER, date(2020, 10, 1), PageRequest(0, 10))
        assert stored.total_elements == 1
        assert stored.items[0].amount == Decimal("20")
    finally:
        first_session.close()
        second_session.close()


def test_save_wraps_database_errors(db: Session):
    """Test storage failures surface as PersistenceError"""
    Base.metadata.drop_all(bind=db.get_bind())

    with pytest.raises(PersistenceError):
        TransactionRepository(db).save(transaction(date(2020, 10, 3)))


def test_find_wraps_database_errors(db: Session):
    Base.metadata.drop_all(bind=db.get_bind())

    with pytest.raises(PersistenceError):
        TransactionRepository(db).find_by_customer_and_month(CUSTOMER, date(2020, 10, 1), PageRequest(0, 10))
