"""Tests for Pydantic data models."""

from datetime import UTC
from decimal import Decimal

import pytest
from pydantic import ValidationError

from defi_portfolio_agent.core.models import (
    FetchResult,
    FetchStatus,
    PortfolioSnapshot,
    PositionType,
    ProtocolPosition,
    TokenBalance,
    TokenPriceRecord,
)


def test_token_balance_value():
    """Value is quantity times price."""
    balance = TokenBalance(symbol="ETH", quantity=Decimal("2.5"), price_usd=Decimal("2400"))

    assert balance.value_usd == Decimal("6000")
    assert balance.contract_address is None


def test_token_balance_rejects_negative_quantity():
    with pytest.raises(ValidationError):
        TokenBalance(symbol="ETH", quantity=Decimal("-1"), price_usd=Decimal("2400"))


def test_price_record_defaults():
    """Test TokenPriceRecord defaults."""
    record = TokenPriceRecord(symbol="BTC", display_name="Bitcoin", price_usd=Decimal("65000"))

    assert record.change_24h_percent == Decimal("0")
    assert record.volume_24h_usd == Decimal("0")
    assert record.market_cap_usd == Decimal("0")
    assert record.fetched_at.tzinfo == UTC


def test_price_record_is_frozen():
    record = TokenPriceRecord(symbol="BTC", display_name="Bitcoin", price_usd=Decimal("65000"))

    with pytest.raises(ValidationError):
        record.price_usd = Decimal("1")


def test_portfolio_snapshot_totals():
    """Test PortfolioSnapshot computed totals and allocation."""
    snapshot = PortfolioSnapshot(
        address="0xUser...",
        balances=[
            TokenBalance(symbol="ETH", quantity=Decimal("1"), price_usd=Decimal("3000")),
            TokenBalance(symbol="USDC", quantity=Decimal("500"), price_usd=Decimal("1")),
        ],
        positions=[
            ProtocolPosition(
                protocol_name="Uniswap V3",
                position_type=PositionType.LIQUIDITY_POOL,
                pair_label="ETH/USDC",
                value_usd=Decimal("1500"),
            )
        ],
        risk_score=4,
    )

    assert snapshot.total_value_usd == Decimal("5000")
    assert snapshot.allocation == {
        "ETH": Decimal("3000"),
        "USDC": Decimal("500"),
        "Uniswap V3": Decimal("1500"),
    }


def test_portfolio_snapshot_risk_score_bounds():
    with pytest.raises(ValidationError):
        PortfolioSnapshot(risk_score=11)
    with pytest.raises(ValidationError):
        PortfolioSnapshot(risk_score=0)


def test_fetch_result_ok():
    record = TokenPriceRecord(symbol="BTC", display_name="Bitcoin", price_usd=Decimal("0"))

    assert FetchResult(status=FetchStatus.OK, value=record).ok
    assert not FetchResult(status=FetchStatus.NOT_FOUND, value=record).ok


def test_fetch_result_serializes_status():
    result = FetchResult[list[TokenBalance]](status=FetchStatus.TRANSIENT_FAILURE, value=[], detail="timeout")

    data = result.model_dump(mode="json")
    assert data == {"status": "transient_failure", "value": [], "detail": "timeout"}


def test_position_type_enum():
    """Test PositionType enum values."""
    assert PositionType.LIQUIDITY_POOL.value == "liquidity_pool"
    assert PositionType.LENDING.value == "lending"
    assert PositionType.OTHER.value == "other"
