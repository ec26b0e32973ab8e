"""Transport-agnostic handler for transaction event messages"""

import logging
from typing import Callable
from sqlalchemy.orm import Session

from statement_gateway.domain.ingestion import IngestionProcessor
from statement_gateway.domain.models import StoredTransaction
from statement_gateway.infrastructure.database.repositories import TransactionRepository
from statement_gateway.infrastructure.database.session import SessionLocal, session_scope
from statement_gateway.infrastructure.messaging.schemas import TransactionEventMessage

logger = logging.getLogger(__name__)

# Only the head of a payload goes into log lines
PAYLOAD_PREVIEW_CHARS = 100


class TransactionConsumer:
    """
    Decodes one message and hands it to the ingestion pipeline.

    The broker client (topic subscription, offsets, partitions) lives outside this
    service and calls on_message once per delivery. Every failure is re-raised so the
    broker's redelivery or dead-letter policy applies; redeliveries are safe because
    ingestion overwrites by event id.
    """

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self.session_factory = session_factory

    def on_message(self, message: str | bytes) -> StoredTransaction:
        preview = message[:PAYLOAD_PREVIEW_CHARS]
        logger.info("Received transaction message", extra={"payload": str(preview)})

        with session_scope(self.session_factory) as db:
            try:
                event = TransactionEventMessage.model_validate_json(message).to_event()
                processor = IngestionProcessor(TransactionRepository(db))
                stored = processor.ingest(event)
                logger.info("Successfully ingested transaction", extra={"transaction_id": str(stored.id)})
                return stored
            except Exception:
                logger.exception("Failed to process transaction message", extra={"payload": str(preview)})
                raise
