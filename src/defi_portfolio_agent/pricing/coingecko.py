"""Aggregator spot-price source."""

from decimal import Decimal
from typing import Any

from defi_portfolio_agent.core.models import MarketOverview, TokenIdentifier, TokenPriceRecord
from defi_portfolio_agent.exceptions import ProviderUnavailableError, TokenNotFoundError
from defi_portfolio_agent.pricing.base import BasePriceSource


def _decimal(value: Any) -> Decimal:
    """Convert an optional JSON number to Decimal, treating null as 0."""
    return Decimal(str(value)) if value is not None else Decimal("0")


class CoinGeckoSource(BasePriceSource):
    """
    Fetches spot prices and global market figures from the CoinGecko API.

    Constructed identifiers have no CoinGecko ID; the lower-cased ticker is
    tried instead, which the API answers with an empty payload when unknown.

    """

    name = "coingecko"

    def fetch_record(self, identifier: TokenIdentifier) -> TokenPriceRecord:
        coin_id = identifier.coingecko_id or identifier.symbol.lower()
        data = self._get_json(
            "/simple/price",
            params={
                "ids": coin_id,
                "vs_currencies": "usd",
                "include_24hr_change": "true",
                "include_24hr_vol": "true",
                "include_market_cap": "true",
            },
        )

        coin = data.get(coin_id) if isinstance(data, dict) else None
        if not coin:
            msg = f"Token {coin_id} not found"
            raise TokenNotFoundError(msg)

        try:
            return TokenPriceRecord(
                symbol=identifier.symbol,
                display_name=identifier.display_name,
                price_usd=Decimal(str(coin["usd"])),
                change_24h_percent=_decimal(coin.get("usd_24h_change")),
                volume_24h_usd=_decimal(coin.get("usd_24h_vol")),
                market_cap_usd=_decimal(coin.get("usd_market_cap")),
            )
        except (KeyError, TypeError, ValueError, ArithmeticError) as e:
            msg = f"Malformed price response for {coin_id}: {e}"
            raise ProviderUnavailableError(msg) from e

    def fetch_market_overview(self) -> MarketOverview:
        """
        Fetch global market capitalisation, volume, and dominance.

        Returns
        -------
        MarketOverview
            Global market figures

        Raises
        ------
        ProviderUnavailableError
            On network errors or malformed responses

        """
        payload = self._get_json("/global")
        try:
            data = payload["data"]
            return MarketOverview(
                total_market_cap_usd=Decimal(str(data["total_market_cap"]["usd"])),
                total_volume_usd=Decimal(str(data["total_volume"]["usd"])),
                btc_dominance=Decimal(str(data["market_cap_percentage"]["btc"])),
                eth_dominance=Decimal(str(data["market_cap_percentage"]["eth"])),
            )
        except (KeyError, TypeError, ValueError, ArithmeticError) as e:
            msg = f"Malformed global market response: {e}"
            raise ProviderUnavailableError(msg) from e
