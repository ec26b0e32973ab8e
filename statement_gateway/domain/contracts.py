"""Abstract capabilities the domain services depend on"""

import uuid
from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Optional

from statement_gateway.domain.models import PageRequest, StoredTransaction, TransactionPage


class RateLookup(ABC):
    """Conversion rate source for statement assembly"""

    @abstractmethod
    async def rate(self, on_date: date, from_currency: str, to_currency: str) -> Decimal:
        """
        Multiplier converting one unit of from_currency into to_currency.

        Implementations must not raise: an unavailable rate is reported as Decimal(1).
        """
        ...


class TransactionStore(ABC):
    """Durable storage of normalized transactions"""

    @abstractmethod
    def save(self, transaction: StoredTransaction) -> StoredTransaction:
        """Insert or replace the transaction by id and return the stored version"""
        ...

    @abstractmethod
    def get(self, transaction_id: uuid.UUID) -> Optional[StoredTransaction]:
        ...

    @abstractmethod
    def find_by_customer_and_month(
        self,
        customer_id: str,
        month_key: date,
        page_request: PageRequest,
    ) -> TransactionPage:
        """One page of a customer's transactions for a month, with full-month counts"""
        ...
