"""Price fetcher with stablecoin short-circuit and zero-price fallback."""

import logging
from decimal import Decimal

import httpx

from defi_portfolio_agent.config import AgentSettings, PriceProvider
from defi_portfolio_agent.core.models import (
    FetchResult,
    FetchStatus,
    MarketOverview,
    TokenIdentifier,
    TokenPriceRecord,
)
from defi_portfolio_agent.data.demo import demo_market_overview
from defi_portfolio_agent.exceptions import DataSourceError, NotConfiguredError, TokenNotFoundError
from defi_portfolio_agent.pricing.base import BasePriceSource
from defi_portfolio_agent.pricing.binance import BinanceTickerSource
from defi_portfolio_agent.pricing.coingecko import CoinGeckoSource
from defi_portfolio_agent.pricing.resolver import SymbolResolver

logger = logging.getLogger(__name__)


def status_for(error: DataSourceError) -> FetchStatus:
    """
    Map a data-source exception to a fetch status.

    Parameters
    ----------
    error : DataSourceError
        Raised exception

    Returns
    -------
    FetchStatus
        NOT_CONFIGURED, NOT_FOUND, or TRANSIENT_FAILURE

    """
    if isinstance(error, NotConfiguredError):
        return FetchStatus.NOT_CONFIGURED
    if isinstance(error, TokenNotFoundError):
        return FetchStatus.NOT_FOUND
    return FetchStatus.TRANSIENT_FAILURE


def build_price_source(settings: AgentSettings, client: httpx.Client | None = None) -> BasePriceSource:
    """Create the market-data source selected in settings."""
    if settings.price_provider == PriceProvider.COINGECKO:
        return CoinGeckoSource(settings.coingecko_base_url, client=client, timeout=settings.request_timeout)
    return BinanceTickerSource(settings.binance_base_url, client=client, timeout=settings.request_timeout)


class PriceFetcher:
    """
    Returns a ``TokenPriceRecord`` for a resolved token, never raising.

    Stablecoins are answered with a fixed 1.00 USD record without a network
    call. Any failure yields a zero-priced record in ``FetchResult.value``; the
    result's status tells an unknown token apart from an outage.

    Parameters
    ----------
    settings : AgentSettings
        Agent settings
    resolver : SymbolResolver | None
        Symbol resolver. Uses the bundled alias table if None.
    client : httpx.Client | None
        Shared HTTP client
    source : BasePriceSource | None
        Market-data source. Built from settings if None.
    market_source : CoinGeckoSource | None
        Source for global market figures. Built from settings if None.

    """

    def __init__(
        self,
        settings: AgentSettings,
        resolver: SymbolResolver | None = None,
        client: httpx.Client | None = None,
        source: BasePriceSource | None = None,
        market_source: CoinGeckoSource | None = None,
    ) -> None:
        self.settings = settings
        self.resolver = resolver or SymbolResolver()
        self.source = source or build_price_source(settings, client)
        self.market_source = market_source or CoinGeckoSource(
            settings.coingecko_base_url,
            client=client,
            timeout=settings.request_timeout,
        )

    def fetch(self, identifier: TokenIdentifier) -> FetchResult[TokenPriceRecord]:
        """
        Fetch the price record for a resolved token.

        Parameters
        ----------
        identifier : TokenIdentifier
            Resolved token

        Returns
        -------
        FetchResult[TokenPriceRecord]
            Live record, or a zero-priced record with a non-OK status

        """
        if identifier.stablecoin:
            return FetchResult(status=FetchStatus.OK, value=self._stablecoin_record(identifier))

        try:
            record = self.source.fetch_record(identifier)
        except DataSourceError as e:
            status = status_for(e)
            logger.warning("Price lookup for %s failed (%s): %s", identifier.feed_id, status, e)
            return FetchResult(status=status, value=self._zero_record(identifier), detail=str(e))

        return FetchResult(status=FetchStatus.OK, value=record)

    def get_price_for_query(self, text: str) -> FetchResult[TokenPriceRecord] | None:
        """
        Resolve a free-text query and fetch its price.

        Parameters
        ----------
        text : str
            User query

        Returns
        -------
        FetchResult[TokenPriceRecord] | None
            Price result, or None if no token could be identified

        """
        identifier = self.resolver.resolve(text)
        if identifier is None:
            return None
        return self.fetch(identifier)

    def get_price_for_symbol(self, symbol: str) -> FetchResult[TokenPriceRecord]:
        """
        Fetch the price for an explicit token ticker.

        Parameters
        ----------
        symbol : str
            Token ticker (e.g., from token metadata)

        Returns
        -------
        FetchResult[TokenPriceRecord]
            Price result; NOT_FOUND with a zero record for unusable tickers

        """
        identifier = self.resolver.resolve_symbol(symbol)
        if identifier is None:
            record = TokenPriceRecord(symbol=symbol, display_name=symbol, price_usd=Decimal("0"))
            return FetchResult(status=FetchStatus.NOT_FOUND, value=record, detail=f"Unusable token code: {symbol!r}")
        return self.fetch(identifier)

    def get_prices(self, identifiers: list[TokenIdentifier]) -> dict[str, FetchResult[TokenPriceRecord]]:
        """
        Fetch prices for several tokens, one call each.

        Parameters
        ----------
        identifiers : list[TokenIdentifier]
            Resolved tokens

        Returns
        -------
        dict[str, FetchResult[TokenPriceRecord]]
            Mapping of token symbol to price result

        """
        return {identifier.symbol: self.fetch(identifier) for identifier in identifiers}

    def get_market_overview(self) -> FetchResult[MarketOverview]:
        """Fetch global market figures, falling back to fixed figures on failure."""
        try:
            overview = self.market_source.fetch_market_overview()
        except DataSourceError as e:
            status = status_for(e)
            logger.warning("Market overview lookup failed (%s): %s", status, e)
            return FetchResult(status=status, value=demo_market_overview(), detail=str(e))
        return FetchResult(status=FetchStatus.OK, value=overview)

    def _stablecoin_record(self, identifier: TokenIdentifier) -> TokenPriceRecord:
        return TokenPriceRecord(
            symbol=identifier.symbol,
            display_name=identifier.display_name,
            price_usd=Decimal("1.00"),
        )

    def _zero_record(self, identifier: TokenIdentifier) -> TokenPriceRecord:
        return TokenPriceRecord(
            symbol=identifier.symbol,
            display_name=identifier.display_name,
            price_usd=Decimal("0"),
        )

    def close(self) -> None:
        """Close price sources."""
        self.source.close()
        self.market_source.close()

    def __enter__(self) -> "PriceFetcher":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
