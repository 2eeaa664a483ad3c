"""Tests for data loading and static tables."""

import pytest

from defi_portfolio_agent.core.models import NetworkType
from defi_portfolio_agent.data import (
    get_all_networks,
    get_chain_id,
    get_default_network_key,
    get_network,
    load_networks,
    load_token_aliases,
)
from defi_portfolio_agent.exceptions import ConfigurationError


def test_load_networks():
    """Test all supported networks are present."""
    networks = load_networks()

    assert set(networks) == {"devnet", "testnet", "mainnet", "polygon_mainnet", "arbitrum_mainnet"}


def test_get_default_network_key():
    assert get_default_network_key() == "testnet"


@pytest.mark.parametrize(
    ("key", "chain_id"),
    [
        ("devnet", 1337),
        ("testnet", 11155111),
        ("mainnet", 1),
        ("polygon_mainnet", 137),
        ("arbitrum_mainnet", 42161),
    ],
)
def test_get_chain_id(key, chain_id):
    """Test getting chain ID."""
    assert get_chain_id(key) == chain_id


def test_get_network_profile():
    """Test network profile contents."""
    profile = get_network("mainnet")

    assert profile.key == "mainnet"
    assert profile.network_type == NetworkType.MAINNET
    assert profile.native_currency_symbol == "ETH"
    assert profile.native_decimals == 18
    assert profile.is_testnet is False
    assert profile.rpc_url.startswith("https://")


def test_get_network_is_case_insensitive():
    assert get_network("MAINNET").chain_id == 1


def test_polygon_native_currency():
    assert get_network("polygon_mainnet").native_currency_symbol == "MATIC"


def test_get_network_unknown():
    with pytest.raises(ConfigurationError, match="Unsupported network"):
        get_network("nonexistent")


def test_get_all_networks_order():
    keys = [profile.key for profile in get_all_networks()]

    assert keys[:3] == ["devnet", "testnet", "mainnet"]


def test_testnets_flagged():
    for profile in get_all_networks():
        assert profile.is_testnet == (profile.network_type != NetworkType.MAINNET)


def test_load_token_aliases():
    """Test the bundled alias table."""
    table = load_token_aliases()

    assert table.quote_currency == "USDT"
    symbols = [entry.symbol for entry in table.tokens]
    assert "BTC" in symbols
    assert "ETH" in symbols
    assert len(symbols) == len(set(symbols))
    assert table.stablecoin_symbols() == {"USDT", "USDC", "DAI", "BUSD"}


def test_every_entry_lists_its_ticker_as_alias():
    for entry in load_token_aliases().tokens:
        assert entry.symbol.lower() in {alias.lower() for alias in entry.aliases}


def test_duplicate_alias_rejected(tmp_path):
    path = tmp_path / "tokens.yaml"
    path.write_text(
        """
quote_currency: USDT
tokens:
  - symbol: ETH
    name: Ethereum
    aliases: [eth, ether]
  - symbol: ETC
    name: Ethereum Classic
    aliases: [etc, ether]
""",
        encoding="utf-8",
    )

    with pytest.raises(ConfigurationError, match="ether"):
        load_token_aliases(path)


def test_duplicate_symbol_rejected(tmp_path):
    path = tmp_path / "tokens.yaml"
    path.write_text(
        """
quote_currency: USDT
tokens:
  - symbol: BTC
    name: Bitcoin
    aliases: [btc]
  - symbol: BTC
    name: Bitcoin again
    aliases: [bitcoin]
""",
        encoding="utf-8",
    )

    with pytest.raises(ConfigurationError, match="Duplicate token symbol"):
        load_token_aliases(path)


def test_malformed_table_rejected(tmp_path):
    path = tmp_path / "tokens.yaml"
    path.write_text("quote_currency: USDT\ntokens:\n  - symbol: BTC\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Invalid token alias table"):
        load_token_aliases(path)
