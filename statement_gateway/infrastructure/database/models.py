"""SQLAlchemy ORM models matching db/schema.sql"""

from sqlalchemy import Column, Date, DateTime, Enum, Index, Numeric, Text, Uuid
from sqlalchemy.orm import declarative_base

from statement_gateway.domain.models import Direction

Base = declarative_base()


class TransactionRecord(Base):
    """Normalized transaction, one row per event id"""

    __tablename__ = "transactions"

    id = Column(Uuid(as_uuid=True), primary_key=True)
    customer_id = Column(Text, nullable=False)
    account_iban = Column(Text, nullable=False)
    currency = Column(Text, nullable=False)
    amount = Column(Numeric(38, 10, asdecimal=True), nullable=False)
    direction = Column(Enum(Direction, name="transaction_direction", native_enum=False), nullable=False)
    value_date = Column(Date, nullable=False)
    month_key = Column(Date, nullable=False)
    description = Column(Text, nullable=False, default="")
    # Stamped by TransactionRepository before every write
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_transactions_customer_month", "customer_id", "month_key"),
    )
