"""Data access layer for normalized transactions"""

import math
import uuid
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional
from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from statement_gateway.domain.contracts import TransactionStore
from statement_gateway.domain.exceptions import PersistenceError
from statement_gateway.domain.models import PageRequest, StoredTransaction, TransactionPage
from statement_gateway.infrastructure.database.models import TransactionRecord

# Dialects with a single-statement INSERT ... ON CONFLICT DO UPDATE
UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

# Columns a redelivery overwrites; id is the conflict target and created_at stays from the first insert
REPLACED_COLUMNS = (
    "customer_id",
    "account_iban",
    "currency",
    "amount",
    "direction",
    "value_date",
    "month_key",
    "description",
    "updated_at",
)


def stamp_audit_fields(values: Dict[str, Any], now: datetime) -> Dict[str, Any]:
    """Pre-write hook: stamp both audit columns; on conflict only updated_at is applied"""
    return {**values, "created_at": now, "updated_at": now}


def to_domain(record: TransactionRecord) -> StoredTransaction:
    return StoredTransaction(
        id=record.id,
        customer_id=record.customer_id,
        account_iban=record.account_iban,
        currency=record.currency,
        amount=record.amount,
        direction=record.direction,
        value_date=record.value_date,
        month_key=record.month_key,
        description=record.description,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


class TransactionRepository(TransactionStore):
    """Repository for normalized transactions"""

    def __init__(self, db: Session):
        self.db = db

    def save(self, transaction: StoredTransaction) -> StoredTransaction:
        """
        Insert or replace a transaction by id and commit.

        The write is one INSERT ... ON CONFLICT (id) DO UPDATE statement, so
        overlapping deliveries of the same id never collide: the last one to commit
        wins. created_at is kept from the first insert.

        Raises:
            PersistenceError: On any database error (the session is rolled back)
        """
        dialect = self.db.get_bind().dialect.name
        if dialect not in UPSERT_INSERTS:
            raise PersistenceError(f"Insert-or-replace is not supported on {dialect}")

        values = stamp_audit_fields(
            {
                "id": transaction.id,
                "customer_id": transaction.customer_id,
                "account_iban": transaction.account_iban,
                "currency": transaction.currency,
                "amount": transaction.amount,
                "direction": transaction.direction,
                "value_date": transaction.value_date,
                "month_key": transaction.month_key,
                "description": transaction.description,
            },
            datetime.now(timezone.utc),
        )
        stmt = UPSERT_INSERTS[dialect](TransactionRecord).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[TransactionRecord.id],
            set_={column: stmt.excluded[column] for column in REPLACED_COLUMNS},
        )

        try:
            self.db.execute(stmt)
            self.db.commit()
            record = self.db.get(TransactionRecord, transaction.id, populate_existing=True)
            return to_domain(record)

        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Failed to save transaction {transaction.id}: {e}") from e

    def get(self, transaction_id: uuid.UUID) -> Optional[StoredTransaction]:
        """Fetch a single transaction by id"""
        try:
            record = self.db.get(TransactionRecord, transaction_id)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load transaction {transaction_id}: {e}") from e
        return to_domain(record) if record else None

    def find_by_customer_and_month(
        self,
        customer_id: str,
        month_key: date,
        page_request: PageRequest,
    ) -> TransactionPage:
        """Fetch one page of a customer's month ordered by value date, plus full-month counts"""
        criteria = (
            TransactionRecord.customer_id == customer_id,
            TransactionRecord.month_key == month_key,
        )
        try:
            total_elements = self.db.scalar(
                select(func.count()).select_from(TransactionRecord).where(*criteria)
            ) or 0
            records = self.db.scalars(
                select(TransactionRecord)
                .where(*criteria)
                .order_by(TransactionRecord.value_date, TransactionRecord.id)
                .offset(page_request.offset)
                .limit(page_request.size)
            ).all()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to query transactions for {customer_id}: {e}") from e

        return TransactionPage(
            items=[to_domain(r) for r in records],
            page=page_request.page,
            size=page_request.size,
            total_elements=total_elements,
            total_pages=math.ceil(total_elements / page_request.size),
        )
