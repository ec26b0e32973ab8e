"""Currency amount parsing for inbound transaction events"""

import re
from decimal import Decimal, InvalidOperation

from statement_gateway.domain.exceptions import MalformedAmountError
from statement_gateway.domain.models import Direction, ParsedAmount

DEBIT_MARKER = "-"

# Plain decimal literal: optional plus, digits with optional fraction, optional exponent.
# Whitespace and digit-group underscores are rejected even though Decimal() tolerates them.
_DECIMAL_PATTERN = re.compile(r"^\+?(\d+\.?\d*|\.\d+)([eE]\+?\d+)?$")


def parse_currency_amount(raw: str) -> ParsedAmount:
    """
    Parse a "<CUR> <magnitude>[-]" string into a directioned amount.

    Rules:
    - Split on the first space only: left is the currency, right is the magnitude
    - Every "-" in the magnitude segment is removed before parsing, not only a trailing one
    - Direction is DEBIT when the trimmed input ends with "-", CREDIT otherwise

    Examples:
        "CHF 100-"    -> ParsedAmount("CHF", Decimal("100"), DEBIT)
        "EUR 12.50"   -> ParsedAmount("EUR", Decimal("12.50"), CREDIT)
        "USD 1-000"   -> ParsedAmount("USD", Decimal("1000"), CREDIT)

    Raises:
        MalformedAmountError: No separating space, empty currency, or the magnitude
            is not a non-negative decimal once dashes are removed
    """
    if raw is None:
        raise MalformedAmountError("Currency amount is missing")

    text = raw.strip()
    currency, separator, numeric = text.partition(" ")

    if not separator:
        raise MalformedAmountError(f"No space between currency and amount in '{raw}'")
    if not currency:
        raise MalformedAmountError(f"Empty currency code in '{raw}'")

    digits = numeric.replace(DEBIT_MARKER, "")
    if not _DECIMAL_PATTERN.match(digits):
        raise MalformedAmountError(f"Invalid amount '{numeric}' in '{raw}'")

    try:
        amount = Decimal(digits)
    except InvalidOperation as e:
        raise MalformedAmountError(f"Invalid amount '{numeric}' in '{raw}'") from e

    direction = Direction.DEBIT if text.endswith(DEBIT_MARKER) else Direction.CREDIT

    return ParsedAmount(currency=currency, amount=amount, direction=direction)
