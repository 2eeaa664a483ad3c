"""JSON-RPC provider for native and token balance queries."""

import itertools
import logging
from typing import Any

import httpx

from defi_portfolio_agent.config import AgentSettings
from defi_portfolio_agent.exceptions import NotConfiguredError, ProviderUnavailableError, RPCError

logger = logging.getLogger(__name__)


class AlchemyRPCProvider:
    """
    JSON-RPC 2.0 client for an Alchemy-compatible chain-data endpoint.

    Each method issues exactly one POST. There are no retries; failures are
    raised for the caller to turn into a fallback.

    Parameters
    ----------
    url : str
        Full RPC endpoint including the API key
    client : httpx.Client | None
        Shared HTTP client. A private client is created if None.
    timeout : float
        Timeout for a private client, in seconds
    debug : bool
        Log every request at debug level

    """

    def __init__(
        self,
        url: str,
        client: httpx.Client | None = None,
        timeout: float = 10.0,
        *,
        debug: bool = False,
    ) -> None:
        self.url = url
        self.debug = debug
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=timeout)
        self._ids = itertools.count(1)

    @classmethod
    def from_settings(cls, settings: AgentSettings, client: httpx.Client | None = None) -> "AlchemyRPCProvider":
        """
        Build a provider for the configured network.

        Raises
        ------
        NotConfiguredError
            If no API key is set or the network has no chain-data endpoint

        """
        url = settings.alchemy_rpc_url
        if url is None:
            msg = f"Alchemy API key not configured for network {settings.network}"
            raise NotConfiguredError(msg)
        return cls(url, client=client, timeout=settings.request_timeout)

    def make_request(self, method: str, params: list[Any]) -> Any:
        """
        Make a single JSON-RPC call.

        Parameters
        ----------
        method : str
            RPC method name (e.g., 'eth_getBalance')
        params : list[Any]
            Method parameters

        Returns
        -------
        Any
            The ``result`` member of the response

        Raises
        ------
        RPCError
            If the response carries a JSON-RPC error object
        ProviderUnavailableError
            On transport errors or a malformed response envelope

        """
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        if self.debug:
            logger.debug("RPC %s %s", method, params)

        try:
            response = self.client.post(self.url, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.TimeoutException as e:
            msg = f"RPC {method} timed out: {e}"
            raise ProviderUnavailableError(msg) from e
        except httpx.HTTPError as e:
            msg = f"RPC {method} failed: {e}"
            raise ProviderUnavailableError(msg) from e
        except ValueError as e:
            msg = f"RPC {method} returned a non-JSON body"
            raise ProviderUnavailableError(msg) from e

        if not isinstance(body, dict):
            msg = f"RPC {method} returned an unexpected payload"
            raise ProviderUnavailableError(msg)

        error = body.get("error")
        if error:
            code = error.get("code") if isinstance(error, dict) else None
            message = error.get("message", "") if isinstance(error, dict) else str(error)
            raise RPCError(method, code, message)

        if "result" not in body:
            msg = f"RPC {method} response has no result"
            raise ProviderUnavailableError(msg)
        return body["result"]

    def get_native_balance(self, address: str) -> int:
        """
        Get the native-coin balance of an address in base units.

        Parameters
        ----------
        address : str
            Wallet address

        Returns
        -------
        int
            Balance in the smallest unit (e.g., wei)

        """
        result = self.make_request("eth_getBalance", [address, "latest"])
        return parse_quantity(result, "eth_getBalance")

    def get_token_balances(self, address: str) -> list[dict[str, Any]]:
        """
        Get the ERC-20 balance list of an address.

        Parameters
        ----------
        address : str
            Wallet address

        Returns
        -------
        list[dict[str, Any]]
            Entries with ``contractAddress`` and hex ``tokenBalance``

        """
        result = self.make_request("alchemy_getTokenBalances", [address])
        if not isinstance(result, dict):
            msg = "alchemy_getTokenBalances returned an unexpected payload"
            raise ProviderUnavailableError(msg)
        return [entry for entry in result.get("tokenBalances") or [] if isinstance(entry, dict)]

    def get_token_metadata(self, contract_address: str) -> dict[str, Any]:
        """
        Get symbol, name, and decimals of a token contract.

        Parameters
        ----------
        contract_address : str
            Token contract address

        Returns
        -------
        dict[str, Any]
            Metadata with ``symbol``, ``name``, and ``decimals`` (any may be None)

        """
        result = self.make_request("alchemy_getTokenMetadata", [contract_address])
        if not isinstance(result, dict):
            msg = f"alchemy_getTokenMetadata returned an unexpected payload for {contract_address}"
            raise ProviderUnavailableError(msg)
        return result

    def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "AlchemyRPCProvider":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Context manager exit."""
        self.close()


def parse_quantity(value: Any, method: str) -> int:
    """Decode a hex-encoded JSON-RPC quantity; null and bare "0x" are zero."""
    if value is None or value == "0x":
        return 0
    try:
        return int(value, 16)
    except (TypeError, ValueError) as e:
        msg = f"RPC {method} returned an invalid quantity: {value!r}"
        raise ProviderUnavailableError(msg) from e
