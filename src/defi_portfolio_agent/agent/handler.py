"""Portfolio agent: routes chat queries to data lookups and renders replies."""

import logging
from typing import Any

import httpx
from pydantic import BaseModel, Field

from defi_portfolio_agent.agent import responses
from defi_portfolio_agent.agent.intents import Intent, detect_intent
from defi_portfolio_agent.config import AgentSettings
from defi_portfolio_agent.core.aggregator import PortfolioAggregator
from defi_portfolio_agent.core.balances import BalanceFetcher
from defi_portfolio_agent.core.optimizer import PortfolioOptimizer
from defi_portfolio_agent.core.portfolio import PortfolioService, PositionSource
from defi_portfolio_agent.pricing.fetcher import PriceFetcher
from defi_portfolio_agent.pricing.resolver import SymbolResolver

logger = logging.getLogger(__name__)


class AgentResponse(BaseModel):
    """
    Reply to a chat query.

    Attributes
    ----------
    intent : Intent
        Action the query was routed to
    text : str
        Rendered reply
    data : dict[str, Any]
        Structured result behind the reply (JSON-compatible)

    """

    intent: Intent
    text: str
    data: dict[str, Any] = Field(default_factory=dict)


class PortfolioAgent:
    """
    Answers natural-language portfolio and price queries.

    Parameters
    ----------
    settings : AgentSettings
        Agent settings
    resolver : SymbolResolver
        Token symbol resolver
    price_fetcher : PriceFetcher
        Price lookups
    portfolio_service : PortfolioService
        Portfolio snapshots
    optimizer : PortfolioOptimizer
        Rebalancing suggestions
    client : httpx.Client | None
        Shared HTTP client closed by ``close()``

    """

    def __init__(
        self,
        settings: AgentSettings,
        resolver: SymbolResolver,
        price_fetcher: PriceFetcher,
        portfolio_service: PortfolioService,
        optimizer: PortfolioOptimizer,
        client: httpx.Client | None = None,
    ) -> None:
        self.settings = settings
        self.resolver = resolver
        self.price_fetcher = price_fetcher
        self.portfolio_service = portfolio_service
        self.optimizer = optimizer
        self.client = client

    @property
    def aggregator(self) -> PortfolioAggregator:
        return self.portfolio_service.aggregator

    def handle(self, text: str, wallet_address: str | None = None) -> AgentResponse:
        """
        Answer a chat query.

        Parameters
        ----------
        text : str
            User query
        wallet_address : str | None
            Wallet for portfolio queries. Uses the configured wallet if None.

        Returns
        -------
        AgentResponse
            Routed intent, reply text, and structured data

        """
        intent = detect_intent(text)
        # "market cap of bitcoin" asks about one token; dominance is always market-wide
        if intent == Intent.UNKNOWN or (intent == Intent.MARKET_OVERVIEW and "dominance" not in text.lower()):
            identifier = self.resolver.resolve(text)
            if identifier is not None and identifier.curated:
                intent = Intent.GET_PRICE
        logger.debug("Routed %r to %s", text, intent)

        match intent:
            case Intent.GET_PRICE:
                return self.price(text)
            case Intent.CHECK_PORTFOLIO:
                return self.portfolio(wallet_address)
            case Intent.ANALYZE_RISK:
                return self.risk(wallet_address)
            case Intent.OPTIMIZE_PORTFOLIO:
                return self.optimize(wallet_address)
            case Intent.MARKET_OVERVIEW:
                return self.market_overview()
            case _:
                return AgentResponse(intent=intent, text=responses.format_help())

    def price(self, text: str) -> AgentResponse:
        """Answer a price query."""
        result = self.price_fetcher.get_price_for_query(text)
        if result is None:
            return AgentResponse(intent=Intent.GET_PRICE, text=responses.format_clarification())
        return AgentResponse(
            intent=Intent.GET_PRICE,
            text=responses.format_price(result),
            data=result.model_dump(mode="json"),
        )

    def portfolio(self, wallet_address: str | None = None) -> AgentResponse:
        """Answer a portfolio query."""
        result = self.portfolio_service.get_portfolio_data(wallet_address)
        return AgentResponse(
            intent=Intent.CHECK_PORTFOLIO,
            text=responses.format_portfolio(result),
            data=result.model_dump(mode="json"),
        )

    def risk(self, wallet_address: str | None = None) -> AgentResponse:
        """Answer a risk analysis query."""
        result = self.portfolio_service.get_portfolio_data(wallet_address)
        assessment = self.aggregator.assess_risk(result.value)
        return AgentResponse(
            intent=Intent.ANALYZE_RISK,
            text=responses.format_risk(assessment, self.aggregator.native_symbol, result.status),
            data={"status": result.status.value, "assessment": assessment.model_dump(mode="json")},
        )

    def optimize(self, wallet_address: str | None = None) -> AgentResponse:
        """Answer a rebalancing query."""
        result = self.portfolio_service.get_portfolio_data(wallet_address)
        suggestions = self.optimizer.suggest(result.value)
        return AgentResponse(
            intent=Intent.OPTIMIZE_PORTFOLIO,
            text=responses.format_rebalance(suggestions, result.status),
            data={
                "status": result.status.value,
                "suggestions": [s.model_dump(mode="json") for s in suggestions],
            },
        )

    def market_overview(self) -> AgentResponse:
        """Answer a global market query."""
        result = self.price_fetcher.get_market_overview()
        return AgentResponse(
            intent=Intent.MARKET_OVERVIEW,
            text=responses.format_market_overview(result),
            data=result.model_dump(mode="json"),
        )

    def close(self) -> None:
        """Close the shared HTTP client."""
        self.price_fetcher.close()
        if self.client is not None:
            self.client.close()

    def __enter__(self) -> "PortfolioAgent":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Context manager exit."""
        self.close()


def build_agent(
    settings: AgentSettings,
    client: httpx.Client | None = None,
    position_source: PositionSource | None = None,
) -> PortfolioAgent:
    """
    Wire all components onto one HTTP client.

    Parameters
    ----------
    settings : AgentSettings
        Agent settings
    client : httpx.Client | None
        HTTP client to share. One with ``settings.request_timeout`` is created if None.
    position_source : PositionSource | None
        Protocol position source for live portfolios

    Returns
    -------
    PortfolioAgent
        Ready-to-use agent

    """
    client = client or httpx.Client(timeout=settings.request_timeout)
    resolver = SymbolResolver()
    stablecoins = resolver.table.stablecoin_symbols()
    native_symbol = settings.network_profile.native_currency_symbol

    price_fetcher = PriceFetcher(settings, resolver=resolver, client=client)
    balance_fetcher = BalanceFetcher(settings, price_fetcher, client=client)
    aggregator = PortfolioAggregator(native_symbol, stablecoin_symbols=stablecoins)
    portfolio_service = PortfolioService(
        settings,
        balance_fetcher,
        position_source=position_source,
        aggregator=aggregator,
    )
    optimizer = PortfolioOptimizer(native_symbol, stablecoins)

    return PortfolioAgent(
        settings,
        resolver=resolver,
        price_fetcher=price_fetcher,
        portfolio_service=portfolio_service,
        optimizer=optimizer,
        client=client,
    )
