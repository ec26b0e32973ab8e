"""Exchange rate HTTP client with identity-rate fallback"""

import json
import logging
import httpx
from datetime import date
from decimal import Decimal, InvalidOperation

from statement_gateway.config import settings
from statement_gateway.domain.contracts import RateLookup
from statement_gateway.domain.exceptions import RateProviderError
from statement_gateway.infrastructure.observability.metrics import rate_latency_histogram, record_rate_lookup

logger = logging.getLogger(__name__)

IDENTITY_RATE = Decimal(1)


class ExchangeRateClient(RateLookup):
    """Client for the external live exchange rate API"""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.rate_api_base
        self.api_key = api_key if api_key is not None else settings.rate_api_key
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def rate(self, on_date: date, from_currency: str, to_currency: str) -> Decimal:
        """
        Rate converting from_currency into to_currency.

        The provider only serves live quotes, so on_date does not change the result.
        Same-currency lookups return 1 without a network call. Any provider failure
        is logged and downgraded to 1 so the statement can still be produced.
        """
        if from_currency == to_currency:
            record_rate_lookup("identity")
            return IDENTITY_RATE

        try:
            with rate_latency_histogram.time():
                quote = await self.fetch_live_rate(from_currency, to_currency)
        except RateProviderError as e:
            record_rate_lookup("fallback")
            logger.warning(
                f"Rate provider failure, using identity rate: {e}",
                extra={"from_currency": from_currency, "to_currency": to_currency, "date": on_date.isoformat()},
            )
            return IDENTITY_RATE
        except Exception:
            record_rate_lookup("fallback")
            logger.exception(
                "Unexpected rate lookup failure, using identity rate",
                extra={"from_currency": from_currency, "to_currency": to_currency, "date": on_date.isoformat()},
            )
            return IDENTITY_RATE

        record_rate_lookup("provider")
        logger.info(
            "Rate retrieved",
            extra={"from_currency": from_currency, "to_currency": to_currency, "rate": str(quote)},
        )
        return quote

    async def fetch_live_rate(self, from_currency: str, to_currency: str) -> Decimal:
        """
        Query the provider's /live endpoint for a single currency pair.

        Expected body: {"success": true, "quotes": {"USDIDR": 15000.5}}

        Raises:
            RateProviderError: On timeout, HTTP errors, or a body without a usable quote
        """
        pair = f"{from_currency}{to_currency}"
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(
                    f"{self.base_url}/live",
                    params={
                        "source": from_currency,
                        "currencies": to_currency,
                        "access_key": self.api_key,
                    },
                )
                response.raise_for_status()
                # Keep provider decimals exact instead of going through float
                data = json.loads(response.text, parse_float=Decimal)

                if not data.get("success", False):
                    raise RateProviderError(f"Rate provider reported failure for {pair}: {data.get('error')}")

                quotes = data.get("quotes") or {}
                if pair not in quotes:
                    raise RateProviderError(f"Rate provider returned no quote for {pair}")

                quote = Decimal(str(quotes[pair]))

            except httpx.TimeoutException as e:
                raise RateProviderError(f"Rate provider timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise RateProviderError(f"Rate provider error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise RateProviderError(f"Rate provider unreachable: {e}") from e
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                raise RateProviderError(f"Rate provider request failed: {e}") from e
            except (AttributeError, ValueError, TypeError, InvalidOperation) as e:
                raise RateProviderError(f"Invalid rate data from provider: {e}") from e

        if not quote.is_finite() or quote <= 0:
            raise RateProviderError(f"Unusable quote {quote} for {pair}")

        return quote
