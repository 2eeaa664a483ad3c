"""Exception hierarchy for configuration and external data sources."""


class PortfolioAgentError(Exception):
    """Base exception for the portfolio agent."""


class ConfigurationError(PortfolioAgentError):
    """Raised when settings or static data tables are invalid."""


class DataSourceError(PortfolioAgentError):
    """Base exception for failures talking to market-data or chain-data providers."""


class NotConfiguredError(DataSourceError):
    """Raised when a data source is used without the credentials it needs."""


class ProviderUnavailableError(DataSourceError):
    """Raised on network errors, timeouts, or malformed provider responses."""


class RPCError(ProviderUnavailableError):
    """
    JSON-RPC error object returned by the chain-data provider.

    Parameters
    ----------
    method : str
        RPC method that failed
    code : int | None
        JSON-RPC error code
    message : str
        Error message reported by the provider

    """

    def __init__(self, method: str, code: int | None, message: str) -> None:
        self.method = method
        self.code = code
        super().__init__(f"RPC {method} failed ({code}): {message}")


class TokenNotFoundError(DataSourceError):
    """Raised when a provider does not know the requested token."""
