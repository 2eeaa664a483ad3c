"""Pytest configuration for defi-portfolio-agent tests."""

from collections.abc import Callable

import httpx
import pytest

from defi_portfolio_agent.config import AgentSettings

ENV_VARS = (
    "NETWORK",
    "ALCHEMY_API_KEY",
    "INFURA_PROJECT_ID",
    "WALLET_ADDRESS",
    "PRICE_PROVIDER",
    "BINANCE_BASE_URL",
    "COINGECKO_BASE_URL",
    "REQUEST_TIMEOUT",
    "MAX_TOKEN_LOOKUPS",
    "DUST_THRESHOLD",
    "ETHEREUM_RPC_URL",
)

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of settings built from env."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.delenv("ETHEREUM_RPC_URL_TESTNET", raising=False)
    monkeypatch.delenv("ETHEREUM_RPC_URL_MAINNET", raising=False)


@pytest.fixture
def settings():
    """Mainnet settings with an Alchemy key, so balance lookups go live."""
    return AgentSettings(network="mainnet", alchemy_api_key="test-key")


@pytest.fixture
def mock_client():
    """Factory for an httpx client whose requests are answered by a handler."""
    clients = []

    def _make(handler: Handler) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def offline_client(mock_client):
    """Client that fails the test on any network call."""

    def handler(request: httpx.Request) -> httpx.Response:
        pytest.fail(f"Unexpected network call: {request.method} {request.url}")

    return mock_client(handler)
