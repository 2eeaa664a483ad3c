"""Chat-style agent actions over the portfolio data layer."""

from defi_portfolio_agent.agent.handler import AgentResponse, PortfolioAgent, build_agent
from defi_portfolio_agent.agent.intents import Intent, detect_intent

__all__ = [
    "AgentResponse",
    "Intent",
    "PortfolioAgent",
    "build_agent",
    "detect_intent",
]
