"""Core functionality including models, aggregation, and rebalancing."""

from defi_portfolio_agent.core.aggregator import PortfolioAggregator, risk_score_for
from defi_portfolio_agent.core.models import (
    FetchResult,
    FetchStatus,
    MarketOverview,
    NetworkProfile,
    PortfolioSnapshot,
    PositionType,
    ProtocolPosition,
    RebalanceSuggestion,
    RiskAssessment,
    TokenBalance,
    TokenIdentifier,
    TokenPriceRecord,
)
from defi_portfolio_agent.core.optimizer import PortfolioOptimizer

# BalanceFetcher and PortfolioService depend on the data and pricing packages,
# which import core.models; import them from their modules to avoid a cycle.

__all__ = [
    "FetchResult",
    "FetchStatus",
    "MarketOverview",
    "NetworkProfile",
    "PortfolioAggregator",
    "PortfolioOptimizer",
    "PortfolioSnapshot",
    "PositionType",
    "ProtocolPosition",
    "RebalanceSuggestion",
    "RiskAssessment",
    "TokenBalance",
    "TokenIdentifier",
    "TokenPriceRecord",
    "risk_score_for",
]
