"""Tests for token symbol resolution."""

import pytest

from defi_portfolio_agent.data import load_token_aliases
from defi_portfolio_agent.pricing.resolver import SymbolResolver

TABLE = load_token_aliases()


@pytest.fixture(scope="module")
def resolver():
    return SymbolResolver(TABLE)


@pytest.mark.parametrize("entry", TABLE.tokens, ids=lambda entry: entry.symbol)
def test_all_aliases_resolve_to_same_identifier(resolver, entry):
    """Full names and tickers of a token resolve to one identifier."""
    identifiers = {resolver.resolve(f"what is the price of {alias}") for alias in entry.aliases}

    assert len(identifiers) == 1
    identifier = identifiers.pop()
    assert identifier.symbol == entry.symbol
    assert identifier.feed_id == f"{entry.symbol}USDT"
    assert identifier.curated is True


@pytest.mark.parametrize(
    ("query", "symbol"),
    [
        ("what's the price of bitcoin", "BTC"),
        ("get btc price", "BTC"),
        ("How much is ETHEREUM trading at?", "ETH"),
        ("what's solana worth?", "SOL"),
        ("check usd coin", "USDC"),
        ("shiba inu price", "SHIB"),
    ],
)
def test_resolve_queries(resolver, query, symbol):
    assert resolver.resolve(query).symbol == symbol


def test_resolve_constructs_pair_for_unknown_token(resolver):
    """Unknown tokens in price phrasing get a constructed trading pair."""
    identifier = resolver.resolve("get xyz price")

    assert identifier.symbol == "XYZ"
    assert identifier.feed_id == "XYZUSDT"
    assert identifier.curated is False
    assert identifier.coingecko_id is None


def test_resolve_candidate_before_price_word(resolver):
    assert resolver.resolve("what is the fooz price today").symbol == "FOOZ"


@pytest.mark.parametrize(
    "query",
    [
        "what's the price",
        "hello there",
        "",
        "check the price",
    ],
)
def test_resolve_returns_none_without_token(resolver, query):
    """Filler words are never treated as tokens."""
    assert resolver.resolve(query) is None


def test_alias_needs_word_boundary(resolver):
    """'sol' inside 'solid' is not Solana."""
    assert resolver.resolve("that was a solid day") is None


def test_resolve_symbol(resolver):
    assert resolver.resolve_symbol("eth").symbol == "ETH"
    assert resolver.resolve_symbol(" USDC ").stablecoin is True
    assert resolver.resolve_symbol("WBTC").feed_id == "WBTCUSDT"


@pytest.mark.parametrize("symbol", ["", "   ", "US$C", "a-b"])
def test_resolve_symbol_rejects_unusable_codes(resolver, symbol):
    assert resolver.resolve_symbol(symbol) is None


def test_is_stablecoin(resolver):
    assert resolver.is_stablecoin("DAI")
    assert resolver.is_stablecoin("tether")
    assert not resolver.is_stablecoin("ETH")
    assert not resolver.is_stablecoin("UNKNOWN")


def test_stablecoin_identifier(resolver):
    identifier = resolver.resolve("price of usdt")

    assert identifier.stablecoin is True
    assert identifier.display_name == "Tether"


def test_resolve_bare_token_code(resolver):
    """A lone ticker outside the alias table still gets a trading pair."""
    identifier = resolver.resolve("wbtc")

    assert identifier.feed_id == "WBTCUSDT"
    assert identifier.curated is False
    assert resolver.resolve(" ETH ").curated is True


@pytest.mark.parametrize("query", ["price", "the", "wbtc?", "foo-bar"])
def test_resolve_bare_word_rejected(resolver, query):
    assert resolver.resolve(query) is None
