"""Base class for HTTP market-data sources."""

from abc import ABC, abstractmethod
from typing import Any, ClassVar

import httpx

from defi_portfolio_agent.core.models import TokenIdentifier, TokenPriceRecord
from defi_portfolio_agent.exceptions import ProviderUnavailableError, TokenNotFoundError


class BasePriceSource(ABC):
    """
    Abstract market-data source.

    Subclasses issue exactly one request per lookup and translate the
    provider-specific payload into a ``TokenPriceRecord``. Failures are raised
    as ``DataSourceError`` subclasses; the caller decides on fallbacks.

    Parameters
    ----------
    base_url : str
        Provider API base URL
    client : httpx.Client | None
        Shared HTTP client. A private client is created if None.
    timeout : float
        Timeout for a private client, in seconds

    """

    name: ClassVar[str] = ""

    def __init__(self, base_url: str, client: httpx.Client | None = None, timeout: float = 10.0) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=timeout)

    @abstractmethod
    def fetch_record(self, identifier: TokenIdentifier) -> TokenPriceRecord:
        """
        Fetch the current price record for a token.

        Parameters
        ----------
        identifier : TokenIdentifier
            Resolved token

        Returns
        -------
        TokenPriceRecord
            Normalized price record

        Raises
        ------
        TokenNotFoundError
            If the provider does not list the token
        ProviderUnavailableError
            On network errors or malformed responses

        """

    def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """
        Issue a GET request and decode the JSON body.

        Parameters
        ----------
        path : str
            Path relative to the base URL
        params : dict[str, Any] | None
            Query parameters

        Returns
        -------
        Any
            Decoded JSON body

        """
        url = f"{self.base_url}{path}"
        try:
            response = self.client.get(url, params=params)
        except httpx.TimeoutException as e:
            msg = f"{self.name} request timed out: {e}"
            raise ProviderUnavailableError(msg) from e
        except httpx.HTTPError as e:
            msg = f"{self.name} request failed: {e}"
            raise ProviderUnavailableError(msg) from e

        if response.is_error:
            self._raise_for_error(response)

        try:
            return response.json()
        except ValueError as e:
            msg = f"{self.name} returned a non-JSON body"
            raise ProviderUnavailableError(msg) from e

    def _raise_for_error(self, response: httpx.Response) -> None:
        """Map an HTTP error response to a data-source exception."""
        if response.status_code == 404:
            msg = f"{self.name} has no data for {response.request.url}"
            raise TokenNotFoundError(msg)
        msg = f"{self.name} HTTP error {response.status_code}"
        raise ProviderUnavailableError(msg)

    def close(self) -> None:
        """Close the HTTP client if this source created it."""
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "BasePriceSource":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
