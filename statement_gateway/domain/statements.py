"""Monthly statement assembly - currency conversion and page totals"""

import asyncio
import logging
from datetime import date
from decimal import Decimal, Inexact, localcontext
from typing import List

from statement_gateway.domain.contracts import RateLookup, TransactionStore
from statement_gateway.domain.models import Direction, PageRequest, StatementLine, StatementPage

logger = logging.getLogger(__name__)


def _digit_count(value: Decimal) -> int:
    return len(value.as_tuple().digits)


def exact_product(amount: Decimal, rate: Decimal) -> Decimal:
    """amount * rate with enough precision that nothing is rounded; rounding raises Inexact"""
    with localcontext() as ctx:
        ctx.prec = _digit_count(amount) + _digit_count(rate)
        ctx.traps[Inexact] = True
        return amount * rate


def summation_precision(values: List[Decimal]) -> int:
    """Digits needed to add values exactly: their combined digit span plus room for carries"""
    if not values:
        return 1
    highest = max(v.adjusted() for v in values)
    lowest = min(v.as_tuple().exponent for v in values)
    return highest - lowest + 1 + len(str(len(values)))


class StatementAssembler:
    """Builds converted statement pages from stored transactions"""

    def __init__(self, store: TransactionStore, rates: RateLookup):
        self.store = store
        self.rates = rates

    async def assemble(
        self,
        customer_id: str,
        month_key: date,
        page_request: PageRequest,
        base_currency: str,
    ) -> StatementPage:
        """
        Convert one page of a customer's month into base_currency.

        Steps:
        1. Fetch the page from the store (storage owns ordering and pagination counts)
        2. Look up every row's rate concurrently
        3. Accumulate converted amounts into credit/debit totals in storage order

        Totals cover only the rows on the requested page. Products and sums are
        computed in a decimal context wide enough to be exact, with Inexact trapped.
        """
        page = self.store.find_by_customer_and_month(customer_id, month_key, page_request)
        logger.debug(
            "Loaded statement page",
            extra={
                "customer_id": customer_id,
                "month_key": month_key.isoformat(),
                "page": page.page,
                "total_elements": page.total_elements,
            },
        )

        rates = await asyncio.gather(
            *(self.rates.rate(t.value_date, t.currency, base_currency) for t in page.items)
        )
        converted = [exact_product(t.amount, rate) for t, rate in zip(page.items, rates)]

        total_credit = Decimal(0)
        total_debit = Decimal(0)
        lines = []
        with localcontext() as ctx:
            ctx.prec = summation_precision(converted)
            ctx.traps[Inexact] = True

            for transaction, amount in zip(page.items, converted):
                if transaction.direction == Direction.CREDIT:
                    total_credit += amount
                else:
                    total_debit += amount

                lines.append(
                    StatementLine(
                        id=transaction.id,
                        account_iban=transaction.account_iban,
                        currency=base_currency,
                        amount=amount,
                        value_date=transaction.value_date,
                        description=transaction.description,
                        direction=transaction.direction,
                    )
                )

        logger.info(
            "Assembled statement page",
            extra={
                "customer_id": customer_id,
                "items": len(lines),
                "total_credit": str(total_credit),
                "total_debit": str(total_debit),
                "currency": base_currency,
            },
        )

        return StatementPage(
            transactions=lines,
            page=page.page,
            size=page.size,
            total_elements=page.total_elements,
            total_pages=page.total_pages,
            currency=base_currency,
            total_credit=total_credit,
            total_debit=total_debit,
        )
