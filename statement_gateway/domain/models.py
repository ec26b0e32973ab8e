"""Domain models - pure Python dataclasses representing business entities"""

import enum
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional


class Direction(str, enum.Enum):
    """Whether money came into (CREDIT) or left (DEBIT) the account"""

    CREDIT = "CREDIT"
    DEBIT = "DEBIT"


@dataclass
class InboundEvent:
    """Transaction notification as delivered by the message transport"""

    id: uuid.UUID
    customer_id: str
    account_iban: str
    currency_amount: str  # e.g. "CHF 100-"
    value_date: date
    description: str


@dataclass(frozen=True)
class ParsedAmount:
    """Currency code plus unsigned magnitude and direction"""

    currency: str
    amount: Decimal
    direction: Direction


@dataclass
class StoredTransaction:
    """Persisted, normalized transaction keyed by the event id"""

    id: uuid.UUID
    customer_id: str
    account_iban: str
    currency: str
    amount: Decimal
    direction: Direction
    value_date: date
    month_key: date
    description: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class PageRequest:
    """Zero-based page number and page size"""

    page: int
    size: int

    def __post_init__(self) -> None:
        if self.page < 0:
            raise ValueError(f"page must be >= 0, got {self.page}")
        if self.size <= 0:
            raise ValueError(f"size must be > 0, got {self.size}")

    @property
    def offset(self) -> int:
        return self.page * self.size


@dataclass
class TransactionPage:
    """One page of stored transactions plus metadata for the full result set"""

    items: List[StoredTransaction]
    page: int
    size: int
    total_elements: int
    total_pages: int


@dataclass
class StatementLine:
    """Single transaction converted into the reporting currency"""

    id: uuid.UUID
    account_iban: str
    currency: str
    amount: Decimal
    value_date: date
    description: str
    direction: Direction


@dataclass
class StatementPage:
    """Converted page of a monthly statement.

    total_credit and total_debit only cover the lines on this page, while
    total_elements and total_pages describe the whole month.
    """

    transactions: List[StatementLine]
    page: int
    size: int
    total_elements: int
    total_pages: int
    currency: str
    total_credit: Decimal
    total_debit: Decimal
