"""Tests for intent routing and agent responses."""

import httpx
import pytest

from defi_portfolio_agent.agent import Intent, build_agent, detect_intent
from defi_portfolio_agent.config import AgentSettings


def ticker_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/api/v3/ticker/24hr" and request.url.params["symbol"] == "BTCUSDT":
        return httpx.Response(
            200,
            json={"lastPrice": "65000.00", "priceChangePercent": "1.2", "quoteVolume": "2500000000"},
        )
    if request.url.path == "/api/v3/ticker/24hr":
        return httpx.Response(400, json={"code": -1121, "msg": "Invalid symbol."})
    return httpx.Response(500)


@pytest.fixture
def agent(mock_client):
    with build_agent(AgentSettings(), client=mock_client(ticker_handler)) as agent:
        yield agent


@pytest.mark.parametrize(
    ("text", "intent"),
    [
        ("check my portfolio", Intent.CHECK_PORTFOLIO),
        ("what's my balance?", Intent.CHECK_PORTFOLIO),
        ("what's the price of bitcoin", Intent.GET_PRICE),
        ("what's solana worth?", Intent.GET_PRICE),
        ("I'm worried about my portfolio risk", Intent.ANALYZE_RISK),
        ("analyze my holdings", Intent.ANALYZE_RISK),
        ("optimize my portfolio", Intent.OPTIMIZE_PORTFOLIO),
        ("should I rebalance?", Intent.OPTIMIZE_PORTFOLIO),
        ("give me a market overview", Intent.MARKET_OVERVIEW),
        ("help", Intent.HELP),
        ("bitcoin", Intent.UNKNOWN),
        ("", Intent.UNKNOWN),
    ],
)
def test_detect_intent(text, intent):
    assert detect_intent(text) == intent


def test_price_query_end_to_end(agent):
    """A price question renders the live ticker."""
    response = agent.handle("what's the price of bitcoin")

    assert response.intent == Intent.GET_PRICE
    assert "Bitcoin (BTC)" in response.text
    assert "$65,000.00" in response.text
    assert "📈" in response.text
    assert "+1.20%" in response.text
    assert "$2.5B" in response.text
    assert response.data["status"] == "ok"


def test_bare_token_name_is_price_query(agent):
    response = agent.handle("bitcoin")

    assert response.intent == Intent.GET_PRICE
    assert "$65,000.00" in response.text


def test_stablecoin_price(agent):
    response = agent.handle("usdc price")

    assert "$1.00" in response.text
    assert "➖" in response.text


def test_unknown_token_apology(agent):
    response = agent.handle("get xyz price")

    assert response.intent == Intent.GET_PRICE
    assert "couldn't find price data for XYZ" in response.text
    assert response.data["status"] == "not_found"


def test_unresolved_price_query_asks_for_clarification(agent):
    response = agent.handle("price please")

    assert response.intent == Intent.GET_PRICE
    assert "couldn't tell which token" in response.text
    assert response.data == {}


def test_portfolio_without_wallet_uses_demo(agent):
    response = agent.handle("check my portfolio")

    assert response.intent == Intent.CHECK_PORTFOLIO
    assert "Showing demo data" in response.text
    assert "$9,500.00" in response.text
    assert "Uniswap V3 (ETH/USDC)" in response.text
    assert "6/10 (Medium)" in response.text
    assert response.data["status"] == "not_configured"


def test_risk_analysis(agent):
    response = agent.handle("I'm worried about my portfolio risk")

    assert response.intent == Intent.ANALYZE_RISK
    assert "6/10" in response.text
    assert "63% ETH exposure" in response.text
    assert response.data["assessment"]["risk_score"] == 6


def test_optimize(agent):
    response = agent.handle("optimize my portfolio")

    assert response.intent == Intent.OPTIMIZE_PORTFOLIO
    assert "**Native:** 63.2% → target 40%, sell ~$2,200.00" in response.text
    assert len(response.data["suggestions"]) == 4


def test_market_overview_fallback(agent):
    response = agent.handle("market overview")

    assert response.intent == Intent.MARKET_OVERVIEW
    assert "Showing reference figures" in response.text
    assert "$2.5T" in response.text
    assert "45.0%" in response.text


def test_market_cap_of_named_token_is_price_query(agent):
    response = agent.handle("what's the market cap of bitcoin")

    assert response.intent == Intent.GET_PRICE
    assert "$65,000.00" in response.text


@pytest.mark.parametrize("text", ["crypto market cap", "bitcoin dominance"])
def test_market_wide_queries_stay_overview(agent, text):
    response = agent.handle(text)

    assert response.intent == Intent.MARKET_OVERVIEW
    assert "Showing reference figures" in response.text


def test_bare_uncurated_ticker_shows_help(agent):
    response = agent.handle("wbtc")

    assert response.intent == Intent.UNKNOWN
    assert "DeFi Portfolio Assistant" in response.text


@pytest.mark.parametrize("text", ["help", "hello there", "check abc"])
def test_help(agent, text):
    response = agent.handle(text)

    assert "DeFi Portfolio Assistant" in response.text


def test_close_closes_shared_client(mock_client):
    client = mock_client(ticker_handler)
    agent = build_agent(AgentSettings(), client=client)

    agent.close()

    assert client.is_closed
