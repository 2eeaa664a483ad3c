"""Static data tables and their loaders."""

from defi_portfolio_agent.data.demo import demo_balances, demo_market_overview, demo_positions
from defi_portfolio_agent.data.loader import (
    get_all_networks,
    get_chain_id,
    get_default_network_key,
    get_network,
    load_networks,
    load_token_aliases,
)

__all__ = [
    # Demo fallbacks
    "demo_balances",
    "demo_market_overview",
    "demo_positions",
    # Loader functions
    "get_all_networks",
    "get_chain_id",
    "get_default_network_key",
    "get_network",
    "load_networks",
    "load_token_aliases",
]
