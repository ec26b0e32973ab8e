"""Pydantic schema for transaction event messages"""

import uuid
from datetime import date
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from statement_gateway.domain.models import InboundEvent


class TransactionEventMessage(BaseModel):
    """JSON body of a message on the transactions channel"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: uuid.UUID
    customer_id: str = Field(..., min_length=1)
    account_iban: str
    currency_amount: str = Field(..., description="Currency and magnitude, e.g. 'CHF 100-'")
    value_date: date
    description: str = ""

    def to_event(self) -> InboundEvent:
        return InboundEvent(
            id=self.id,
            customer_id=self.customer_id,
            account_iban=self.account_iban,
            currency_amount=self.currency_amount,
            value_date=self.value_date,
            description=self.description,
        )
