"""Portfolio service: balances plus positions, with demo fallback."""

import logging
from typing import Protocol

from defi_portfolio_agent.config import AgentSettings
from defi_portfolio_agent.core.aggregator import PortfolioAggregator
from defi_portfolio_agent.core.balances import BalanceFetcher
from defi_portfolio_agent.core.models import FetchResult, FetchStatus, PortfolioSnapshot, ProtocolPosition
from defi_portfolio_agent.data.demo import demo_balances, demo_positions

logger = logging.getLogger(__name__)


class PositionSource(Protocol):
    """Anything that can list protocol positions for a wallet."""

    def get_positions(self, address: str) -> list[ProtocolPosition]:
        """
        Fetch protocol positions held by a wallet.

        Parameters
        ----------
        address : str
            Wallet address

        Returns
        -------
        list[ProtocolPosition]
            Positions found

        """
        ...


class StaticPositionSource:
    """
    Position source returning a fixed list.

    There is no live protocol integration; the default is an empty list.

    Parameters
    ----------
    positions : list[ProtocolPosition] | None
        Positions to report for every wallet

    """

    def __init__(self, positions: list[ProtocolPosition] | None = None) -> None:
        self.positions = list(positions or [])

    def get_positions(self, address: str) -> list[ProtocolPosition]:
        return list(self.positions)


class PortfolioService:
    """
    Produces a ``PortfolioSnapshot`` for a wallet.

    Without a wallet address, or when the balance fetch does not succeed, the
    demo snapshot (two demo balances plus the demo Uniswap position, 9500 USD)
    is returned with the corresponding non-OK status.

    Parameters
    ----------
    settings : AgentSettings
        Agent settings
    balance_fetcher : BalanceFetcher
        Wallet balance source
    position_source : PositionSource | None
        Protocol position source. Reports no positions if None.
    aggregator : PortfolioAggregator | None
        Aggregator. Built for the network's native coin if None.

    """

    def __init__(
        self,
        settings: AgentSettings,
        balance_fetcher: BalanceFetcher,
        position_source: PositionSource | None = None,
        aggregator: PortfolioAggregator | None = None,
    ) -> None:
        self.settings = settings
        self.balance_fetcher = balance_fetcher
        self.position_source = position_source or StaticPositionSource()
        self.aggregator = aggregator or PortfolioAggregator(settings.network_profile.native_currency_symbol)

    def get_portfolio_data(self, wallet_address: str | None = None) -> FetchResult[PortfolioSnapshot]:
        """
        Fetch and aggregate a wallet's portfolio.

        Parameters
        ----------
        wallet_address : str | None
            Wallet to query. Uses the configured wallet if None.

        Returns
        -------
        FetchResult[PortfolioSnapshot]
            Live snapshot, or the demo snapshot with a non-OK status

        """
        address = wallet_address or self.settings.wallet_address
        if not address:
            logger.info("No wallet address configured, returning demo portfolio")
            return FetchResult(
                status=FetchStatus.NOT_CONFIGURED,
                value=self.demo_snapshot(),
                detail="No wallet address configured",
            )

        balances = self.balance_fetcher.fetch_balances(address)
        if not balances.ok:
            return FetchResult(status=balances.status, value=self.demo_snapshot(), detail=balances.detail)

        positions = self.position_source.get_positions(address)
        snapshot = self.aggregator.build_snapshot(balances.value, positions, address=address)
        return FetchResult(status=FetchStatus.OK, value=snapshot)

    def demo_snapshot(self) -> PortfolioSnapshot:
        """Build the fixed demo snapshot."""
        return self.aggregator.build_snapshot(demo_balances(), demo_positions())
