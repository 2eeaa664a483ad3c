"""Symbol resolution and market-data price lookups."""

from defi_portfolio_agent.pricing.base import BasePriceSource
from defi_portfolio_agent.pricing.binance import BinanceTickerSource
from defi_portfolio_agent.pricing.coingecko import CoinGeckoSource
from defi_portfolio_agent.pricing.fetcher import PriceFetcher, build_price_source, status_for
from defi_portfolio_agent.pricing.resolver import SymbolResolver

__all__ = [
    "BasePriceSource",
    "BinanceTickerSource",
    "CoinGeckoSource",
    "PriceFetcher",
    "SymbolResolver",
    "build_price_source",
    "status_for",
]
