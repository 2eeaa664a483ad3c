"""Wallet balance fetching with spam filtering and demo fallback."""

import logging
import re
from decimal import Decimal

import httpx

from defi_portfolio_agent.config import AgentSettings
from defi_portfolio_agent.core.models import FetchResult, FetchStatus, TokenBalance
from defi_portfolio_agent.data.demo import demo_balances
from defi_portfolio_agent.exceptions import DataSourceError
from defi_portfolio_agent.pricing.fetcher import PriceFetcher, status_for
from defi_portfolio_agent.rpc.provider import AlchemyRPCProvider, parse_quantity

logger = logging.getLogger(__name__)

MAX_SYMBOL_LENGTH = 10

# Exchange tickers are plain alphanumerics
ALLOWED_SYMBOL_RE = re.compile(r"^[A-Za-z0-9]+$")

# Marketing words and URL fragments used by airdropped scam tokens
SPAM_MARKERS = (
    "claim",
    "airdrop",
    "free",
    "bonus",
    "visit",
    "reward",
    "www",
    "http",
    ".com",
    ".io",
    ".net",
    ".org",
    "t.me",
)


def is_valid_token_symbol(symbol: object) -> bool:
    """
    Check a token symbol against the anti-spam rules.

    Parameters
    ----------
    symbol : object
        Symbol from token metadata (may be missing or not a string)

    Returns
    -------
    bool
        False if the symbol is empty, longer than 10 characters, contains a
        spam marker (case-insensitive), or has characters outside A-Z, a-z, 0-9

    Examples
    --------
    >>> is_valid_token_symbol("AAVE")
    True
    >>> is_valid_token_symbol("FREEAIRDROP")
    False

    """
    if not isinstance(symbol, str) or not symbol:
        return False
    if len(symbol) > MAX_SYMBOL_LENGTH:
        return False
    lowered = symbol.lower()
    if any(marker in lowered for marker in SPAM_MARKERS):
        return False
    return bool(ALLOWED_SYMBOL_RE.match(symbol))


class BalanceFetcher:
    """
    Fetches native and token balances of a wallet and prices them.

    Workflow:
    1. Native balance via ``eth_getBalance``, converted with the network's decimals
    2. Token balance list, bounded to ``max_token_lookups`` non-zero entries
    3. Sequential metadata lookup per token; dust and spam symbols are dropped
    4. Price lookup per accepted token (value 0 when the price is unknown)

    Any failure in the pipeline returns the fixed demo balances instead; the
    result is never partial and no exception reaches the caller.

    Parameters
    ----------
    settings : AgentSettings
        Agent settings
    price_fetcher : PriceFetcher
        Price lookups for native coin and tokens
    client : httpx.Client | None
        Shared HTTP client
    rpc_provider : AlchemyRPCProvider | None
        Chain-data provider. Built from settings on each fetch if None.

    """

    def __init__(
        self,
        settings: AgentSettings,
        price_fetcher: PriceFetcher,
        client: httpx.Client | None = None,
        rpc_provider: AlchemyRPCProvider | None = None,
    ) -> None:
        self.settings = settings
        self.price_fetcher = price_fetcher
        self.client = client
        self.rpc_provider = rpc_provider

    def fetch_balances(self, address: str) -> FetchResult[list[TokenBalance]]:
        """
        Get priced balances for a wallet.

        Parameters
        ----------
        address : str
            Wallet address, passed through to the provider unvalidated

        Returns
        -------
        FetchResult[list[TokenBalance]]
            Live balances, or the demo balances with a non-OK status

        """
        try:
            if self.rpc_provider is not None:
                balances = self._fetch_live_balances(self.rpc_provider, address)
            else:
                with AlchemyRPCProvider.from_settings(self.settings, client=self.client) as rpc:
                    balances = self._fetch_live_balances(rpc, address)
        except DataSourceError as e:
            status = status_for(e)
            logger.warning("Balance fetch for %s failed (%s), using demo balances: %s", address, status, e)
            return FetchResult(status=status, value=demo_balances(), detail=str(e))
        except (TypeError, ValueError, ArithmeticError) as e:
            logger.warning("Malformed balance data for %s, using demo balances: %s", address, e)
            return FetchResult(status=FetchStatus.TRANSIENT_FAILURE, value=demo_balances(), detail=str(e))

        return FetchResult(status=FetchStatus.OK, value=balances)

    def _fetch_live_balances(self, rpc: AlchemyRPCProvider, address: str) -> list[TokenBalance]:
        profile = self.settings.network_profile

        # Native coin
        wei = rpc.get_native_balance(address)
        native_quantity = Decimal(wei) / Decimal(10**profile.native_decimals)
        native_price = self.price_fetcher.get_price_for_symbol(profile.native_currency_symbol)
        balances = [
            TokenBalance(
                symbol=profile.native_currency_symbol,
                quantity=native_quantity,
                price_usd=native_price.value.price_usd,
            )
        ]

        # Tokens
        entries = [
            entry
            for entry in rpc.get_token_balances(address)
            if parse_quantity(entry.get("tokenBalance"), "alchemy_getTokenBalances") > 0
        ]
        for entry in entries[: self.settings.max_token_lookups]:
            balance = self._token_balance(rpc, entry)
            if balance is not None:
                balances.append(balance)

        return balances

    def _token_balance(self, rpc: AlchemyRPCProvider, entry: dict) -> TokenBalance | None:
        """Build a priced balance for one token entry, or None if it is rejected."""
        contract = entry.get("contractAddress")
        if not contract:
            return None

        metadata = rpc.get_token_metadata(contract)
        symbol = metadata.get("symbol")
        decimals = metadata.get("decimals")
        if decimals is None:
            decimals = 18

        raw = parse_quantity(entry.get("tokenBalance"), "alchemy_getTokenBalances")
        quantity = Decimal(raw) / Decimal(10 ** int(decimals))

        if quantity < self.settings.dust_threshold:
            logger.debug("Skipping dust balance of %s (%s)", symbol, contract)
            return None
        if not is_valid_token_symbol(symbol):
            logger.debug("Skipping token with rejected symbol %r (%s)", symbol, contract)
            return None

        price = self.price_fetcher.get_price_for_symbol(symbol)
        return TokenBalance(
            symbol=symbol,
            quantity=quantity,
            price_usd=price.value.price_usd,
            contract_address=contract,
        )
