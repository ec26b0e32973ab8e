"""Ingestion of transaction events into the transaction store"""

import logging

from statement_gateway.domain.amounts import parse_currency_amount
from statement_gateway.domain.contracts import TransactionStore
from statement_gateway.domain.exceptions import MalformedAmountError, PersistenceError
from statement_gateway.domain.models import InboundEvent, StoredTransaction
from statement_gateway.infrastructure.observability.metrics import record_ingestion
from statement_gateway.utils.date_utils import month_key

logger = logging.getLogger(__name__)


class IngestionProcessor:
    """Normalizes inbound events and writes them keyed by event id"""

    def __init__(self, store: TransactionStore):
        self.store = store

    def ingest(self, event: InboundEvent) -> StoredTransaction:
        """
        Parse, normalize and persist one transaction event.

        A redelivered event carries the same id, so the write replaces the earlier
        version instead of adding a duplicate.

        Raises:
            MalformedAmountError: currency_amount cannot be parsed
            PersistenceError: The store rejected the write
        """
        logger.debug(
            "Ingesting transaction",
            extra={"transaction_id": str(event.id), "customer_id": event.customer_id},
        )

        try:
            parsed = parse_currency_amount(event.currency_amount.strip())
        except MalformedAmountError:
            record_ingestion("malformed")
            logger.error(
                "Malformed currency amount",
                extra={"transaction_id": str(event.id), "currency_amount": event.currency_amount},
            )
            raise

        transaction = StoredTransaction(
            id=event.id,
            customer_id=event.customer_id,
            account_iban=event.account_iban,
            currency=parsed.currency,
            amount=parsed.amount,
            direction=parsed.direction,
            value_date=event.value_date,
            month_key=month_key(event.value_date),
            description=event.description,
        )

        try:
            stored = self.store.save(transaction)
        except PersistenceError:
            record_ingestion("persistence_error")
            logger.error("Failed to persist transaction", extra={"transaction_id": str(event.id)})
            raise

        record_ingestion("ingested")
        logger.info(
            "Saved transaction",
            extra={
                "transaction_id": str(stored.id),
                "customer_id": stored.customer_id,
                "direction": stored.direction.value,
                "amount": str(stored.amount),
                "currency": stored.currency,
            },
        )
        return stored
