"""Pydantic schemas for API responses"""

import uuid
from datetime import date
from decimal import Decimal
from typing import List
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from statement_gateway.domain.models import Direction, StatementLine, StatementPage


class CamelModel(BaseModel):
    """Serializes snake_case fields as camelCase JSON keys"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TransactionSchema(CamelModel):
    """Single converted transaction"""

    id: uuid.UUID
    account_iban: str
    currency: str
    amount: Decimal
    value_date: date
    description: str
    transaction_type: Direction

    @classmethod
    def from_line(cls, line: StatementLine) -> "TransactionSchema":
        return cls(
            id=line.id,
            account_iban=line.account_iban,
            currency=line.currency,
            amount=line.amount,
            value_date=line.value_date,
            description=line.description,
            transaction_type=line.direction,
        )


class TransactionPageResponse(CamelModel):
    """Response for GET /v1/transactions"""

    transactions: List[TransactionSchema]
    page: int
    size: int
    total_elements: int
    total_pages: int
    currency: str
    total_credit: Decimal
    total_debit: Decimal

    @classmethod
    def from_statement(cls, statement: StatementPage) -> "TransactionPageResponse":
        return cls(
            transactions=[TransactionSchema.from_line(line) for line in statement.transactions],
            page=statement.page,
            size=statement.size,
            total_elements=statement.total_elements,
            total_pages=statement.total_pages,
            currency=statement.currency,
            total_credit=statement.total_credit,
            total_debit=statement.total_debit,
        )
