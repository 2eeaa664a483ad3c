"""Agent settings, constructed once and passed into every component."""

import logging
import os
from collections.abc import Mapping
from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from defi_portfolio_agent.core.models import NetworkProfile
from defi_portfolio_agent.data.loader import get_default_network_key, get_network, load_networks
from defi_portfolio_agent.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class PriceProvider(StrEnum):
    """Supported market-data providers."""

    BINANCE = "binance"
    COINGECKO = "coingecko"


class AgentSettings(BaseModel):
    """
    Runtime settings for the portfolio agent.

    Parameters
    ----------
    network : str
        Key into the network table (e.g., 'testnet', 'mainnet')
    alchemy_api_key : str | None
        Chain-data provider key. Balance lookups fall back to demo data without it.
    infura_project_id : str | None
        Appended to Infura RPC URLs
    wallet_address : str | None
        Default wallet for portfolio queries
    price_provider : PriceProvider
        Market-data provider for price lookups
    binance_base_url : str
        Ticker API base URL
    coingecko_base_url : str
        Aggregator API base URL
    rpc_url : str | None
        Explicit RPC endpoint overriding the network default
    request_timeout : float
        Per-call HTTP timeout in seconds
    max_token_lookups : int
        Maximum token balances enriched per wallet query
    dust_threshold : Decimal
        Token balances below this many whole units are ignored

    """

    model_config = ConfigDict(frozen=True)

    network: str = "testnet"
    alchemy_api_key: str | None = None
    infura_project_id: str | None = None
    wallet_address: str | None = None
    price_provider: PriceProvider = PriceProvider.BINANCE
    binance_base_url: str = "https://api.binance.com"
    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    rpc_url: str | None = None
    request_timeout: float = Field(default=10.0, gt=0)
    max_token_lookups: int = Field(default=5, ge=0)
    dust_threshold: Decimal = Field(default=Decimal("0.001"), ge=0)

    @field_validator("network")
    @classmethod
    def _validate_network(cls, value: str) -> str:
        value = value.lower()
        if value not in load_networks():
            msg = f"Invalid network: {value}. Must be one of: {', '.join(load_networks())}"
            raise ValueError(msg)
        return value

    @property
    def network_profile(self) -> NetworkProfile:
        """Static parameters of the selected network."""
        return get_network(self.network)

    @property
    def resolved_rpc_url(self) -> str:
        """RPC endpoint with the Infura project id appended where applicable."""
        base_url = self.rpc_url or self.network_profile.rpc_url
        if "infura.io" in base_url and self.infura_project_id:
            return base_url + self.infura_project_id
        return base_url

    @property
    def alchemy_rpc_url(self) -> str | None:
        """Chain-data provider endpoint, None when not configured for this network."""
        base_url = self.network_profile.alchemy_url
        if not base_url or not self.alchemy_api_key:
            return None
        return f"{base_url.rstrip('/')}/{self.alchemy_api_key}"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AgentSettings":
        """
        Build settings from environment variables.

        Parameters
        ----------
        environ : Mapping[str, str] | None
            Variables to read. Uses ``os.environ`` if None.

        Returns
        -------
        AgentSettings
            Validated settings

        Raises
        ------
        ConfigurationError
            If a variable holds an invalid value

        """
        env = os.environ if environ is None else environ

        network = env.get("NETWORK", "").strip().lower()
        if not network:
            network = get_default_network_key()
            logger.warning("NETWORK not specified, defaulting to %s", network)

        values: dict[str, object] = {"network": network}

        optional_vars = {
            "alchemy_api_key": "ALCHEMY_API_KEY",
            "infura_project_id": "INFURA_PROJECT_ID",
            "wallet_address": "WALLET_ADDRESS",
            "price_provider": "PRICE_PROVIDER",
            "binance_base_url": "BINANCE_BASE_URL",
            "coingecko_base_url": "COINGECKO_BASE_URL",
            "request_timeout": "REQUEST_TIMEOUT",
            "max_token_lookups": "MAX_TOKEN_LOOKUPS",
            "dust_threshold": "DUST_THRESHOLD",
        }
        for field_name, var in optional_vars.items():
            if env.get(var):
                values[field_name] = env[var].strip()

        # Network-specific RPC URL wins over the generic one
        rpc_url = env.get(f"ETHEREUM_RPC_URL_{network.upper()}") or env.get("ETHEREUM_RPC_URL")
        if rpc_url:
            values["rpc_url"] = rpc_url

        try:
            return cls.model_validate(values)
        except ValidationError as e:
            msg = f"Invalid configuration: {e}"
            raise ConfigurationError(msg) from e
