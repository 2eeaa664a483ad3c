"""Fixed stand-in data used when live providers are unavailable."""

from decimal import Decimal

from defi_portfolio_agent.core.models import (
    MarketOverview,
    PositionType,
    ProtocolPosition,
    TokenBalance,
)


def demo_balances() -> list[TokenBalance]:
    """Return the two demo holdings (7500 USD in total)."""
    return [
        TokenBalance(symbol="ETH", quantity=Decimal("2.5"), price_usd=Decimal("2400")),
        TokenBalance(symbol="USDC", quantity=Decimal("1500"), price_usd=Decimal("1")),
    ]


def demo_positions() -> list[ProtocolPosition]:
    """Return the demo Uniswap V3 liquidity position."""
    return [
        ProtocolPosition(
            protocol_name="Uniswap V3",
            position_type=PositionType.LIQUIDITY_POOL,
            pair_label="ETH/USDC",
            value_usd=Decimal("2000"),
            apy_percent=Decimal("15.5"),
            fee_tier="0.3%",
        ),
    ]


def demo_market_overview() -> MarketOverview:
    return MarketOverview(
        total_market_cap_usd=Decimal("2500000000000"),
        total_volume_usd=Decimal("50000000000"),
        btc_dominance=Decimal("45"),
        eth_dominance=Decimal("18"),
    )
