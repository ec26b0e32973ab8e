"""GET /v1/transactions - Monthly statement page in the base currency"""

import time
import logging
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from statement_gateway.api.v1.schemas import TransactionPageResponse
from statement_gateway.api.dependencies import get_customer_id, get_rate_lookup, get_request_id
from statement_gateway.config import settings
from statement_gateway.domain.contracts import RateLookup
from statement_gateway.domain.exceptions import PersistenceError
from statement_gateway.domain.models import PageRequest
from statement_gateway.domain.statements import StatementAssembler
from statement_gateway.infrastructure.database.session import get_db
from statement_gateway.infrastructure.database.repositories import TransactionRepository
from statement_gateway.infrastructure.observability.metrics import statement_counter
from statement_gateway.infrastructure.observability.logging import log_statement

router = APIRouter()


@router.get("/transactions", response_model=TransactionPageResponse)
async def get_transactions(
    request: Request,
    month_key: date = Query(..., alias="monthKey", description="First day of month, e.g. 2020-10-01"),
    page: int = Query(0, ge=0, description="Page number (0-based)"),
    size: int = Query(20, gt=0, description="Page size (any positive integer)"),
    customer_id: str = Depends(get_customer_id),
    db: Session = Depends(get_db),
    rates: RateLookup = Depends(get_rate_lookup),
):
    """
    List a customer's transactions for one month.

    Amounts are converted to the configured base currency. totalCredit and
    totalDebit sum only the transactions on the returned page; totalElements and
    totalPages describe the whole month. An unknown customer or empty month
    returns an empty page.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        assembler = StatementAssembler(TransactionRepository(db), rates)
        statement = await assembler.assemble(
            customer_id=customer_id,
            month_key=month_key,
            page_request=PageRequest(page=page, size=size),
            base_currency=settings.base_currency,
        )

    except PersistenceError as e:
        logging.error(f"Transaction store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Transaction store unavailable")

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    statement_counter.inc()
    log_statement(
        request_id,
        customer_id,
        month_key.isoformat(),
        statement.page,
        len(statement.transactions),
        duration_ms,
    )

    return TransactionPageResponse.from_statement(statement)
