"""Network table and token alias table loaders."""

from functools import cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from defi_portfolio_agent.core.models import NetworkProfile, TokenAliasTable
from defi_portfolio_agent.exceptions import ConfigurationError

DATA_DIR = Path(__file__).parent


def _read_yaml(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f)


@cache
def load_networks() -> dict[str, NetworkProfile]:
    """
    Load static network profiles from networks.yaml.

    Returns
    -------
    dict[str, NetworkProfile]
        Mapping of network key to profile

    """
    raw = _read_yaml(DATA_DIR / "networks.yaml")
    profiles = {}
    for key, entry in raw["networks"].items():
        currency = entry["native_currency"]
        profiles[key] = NetworkProfile(
            key=key,
            name=entry["name"],
            network_type=entry["network_type"],
            chain_id=entry["chain_id"],
            rpc_url=entry["rpc_url"],
            explorer_url=entry["explorer_url"],
            native_currency_name=currency["name"],
            native_currency_symbol=currency["symbol"],
            native_decimals=currency.get("decimals", 18),
            is_testnet=entry["is_testnet"],
            alchemy_url=entry.get("alchemy_url"),
        )
    return profiles


def get_default_network_key() -> str:
    """Return the network used when none is configured."""
    return _read_yaml(DATA_DIR / "networks.yaml")["default_network"]


def get_network(key: str) -> NetworkProfile:
    """
    Get the profile for a network.

    Parameters
    ----------
    key : str
        Network key (e.g., 'mainnet', 'testnet')

    Returns
    -------
    NetworkProfile
        Static chain parameters

    Raises
    ------
    ConfigurationError
        If the network is not in the table

    """
    networks = load_networks()
    try:
        return networks[key.lower()]
    except KeyError:
        msg = f"Unsupported network: {key}. Must be one of: {', '.join(networks)}"
        raise ConfigurationError(msg) from None


def get_all_networks() -> list[NetworkProfile]:
    """Return all network profiles in table order."""
    return list(load_networks().values())


def get_chain_id(key: str) -> int:
    """Return the numeric chain ID of a network."""
    return get_network(key).chain_id


def load_token_aliases(path: Path | None = None) -> TokenAliasTable:
    """
    Load and validate the token alias table.

    Parameters
    ----------
    path : Path | None
        Alternative table file. Uses the bundled tokens.yaml if None.

    Returns
    -------
    TokenAliasTable
        Validated alias table

    Raises
    ------
    ConfigurationError
        If the table is malformed or an alias or symbol appears twice

    """
    raw = _read_yaml(path or DATA_DIR / "tokens.yaml")
    try:
        table = TokenAliasTable.model_validate(raw)
    except ValidationError as e:
        msg = f"Invalid token alias table: {e}"
        raise ConfigurationError(msg) from e

    seen_aliases: dict[str, str] = {}
    seen_symbols: set[str] = set()
    for entry in table.tokens:
        if entry.symbol in seen_symbols:
            msg = f"Duplicate token symbol in alias table: {entry.symbol}"
            raise ConfigurationError(msg)
        seen_symbols.add(entry.symbol)

        for alias in entry.aliases:
            key = alias.lower()
            if key in seen_aliases:
                msg = f"Alias '{alias}' maps to both {seen_aliases[key]} and {entry.symbol}"
                raise ConfigurationError(msg)
            seen_aliases[key] = entry.symbol

    return table
