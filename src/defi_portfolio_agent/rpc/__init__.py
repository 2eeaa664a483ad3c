"""Chain-data RPC layer."""

from defi_portfolio_agent.rpc.provider import AlchemyRPCProvider, parse_quantity

__all__ = [
    "AlchemyRPCProvider",
    "parse_quantity",
]
