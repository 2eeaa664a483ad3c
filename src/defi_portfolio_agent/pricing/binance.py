"""Exchange ticker price source."""

from decimal import Decimal

import httpx

from defi_portfolio_agent.core.models import TokenIdentifier, TokenPriceRecord
from defi_portfolio_agent.exceptions import ProviderUnavailableError, TokenNotFoundError
from defi_portfolio_agent.pricing.base import BasePriceSource

# Binance error code for an unknown trading pair
INVALID_SYMBOL_CODE = -1121


class BinanceTickerSource(BasePriceSource):
    """
    Fetches 24h ticker statistics from the Binance spot API.

    The ticker reports last price, percent change, and quote-asset volume for a
    trading pair. It carries no market cap, so the record's market cap is 0.

    """

    name = "binance"

    def fetch_record(self, identifier: TokenIdentifier) -> TokenPriceRecord:
        data = self._get_json("/api/v3/ticker/24hr", params={"symbol": identifier.feed_id})

        try:
            return TokenPriceRecord(
                symbol=identifier.symbol,
                display_name=identifier.display_name,
                price_usd=Decimal(str(data["lastPrice"])),
                change_24h_percent=Decimal(str(data["priceChangePercent"])),
                volume_24h_usd=Decimal(str(data.get("quoteVolume") or "0")),
            )
        except (KeyError, TypeError, ValueError, ArithmeticError) as e:
            msg = f"Malformed ticker response for {identifier.feed_id}: {e}"
            raise ProviderUnavailableError(msg) from e

    def _raise_for_error(self, response: httpx.Response) -> None:
        try:
            code = response.json().get("code")
        except (ValueError, AttributeError):
            code = None

        if code == INVALID_SYMBOL_CODE:
            symbol = response.request.url.params.get("symbol")
            msg = f"Trading pair {symbol} is not listed"
            raise TokenNotFoundError(msg)
        super()._raise_for_error(response)
