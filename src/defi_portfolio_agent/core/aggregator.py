"""Portfolio aggregation and concentration risk scoring."""

from decimal import Decimal

from defi_portfolio_agent.core.models import (
    ConcentrationLevel,
    PortfolioSnapshot,
    ProtocolPosition,
    RiskAssessment,
    TokenBalance,
)
from defi_portfolio_agent.data.loader import load_token_aliases

# (exclusive lower bound on native-coin fraction, score), checked in order
RISK_THRESHOLDS: tuple[tuple[Decimal, int], ...] = (
    (Decimal("0.8"), 8),
    (Decimal("0.6"), 6),
    (Decimal("0.4"), 4),
)
BASE_RISK_SCORE = 3

HUNDRED = Decimal("100")


def risk_score_for(native_fraction: Decimal) -> int:
    """
    Score concentration risk from the native coin's share of the portfolio.

    Parameters
    ----------
    native_fraction : Decimal
        Native-coin value divided by total value, in [0, 1]

    Returns
    -------
    int
        8 above 0.8, 6 above 0.6, 4 above 0.4, otherwise 3

    """
    for threshold, score in RISK_THRESHOLDS:
        if native_fraction > threshold:
            return score
    return BASE_RISK_SCORE


class PortfolioAggregator:
    """
    Combines balances and protocol positions into a ``PortfolioSnapshot``.

    Pure computation over already-fetched data: no network calls, no retries,
    no caching.

    Parameters
    ----------
    native_symbol : str
        Ticker of the network's native coin (e.g., 'ETH')
    stablecoin_symbols : set[str] | None
        Tickers treated as stablecoins in the risk breakdown. Uses the
        stablecoin rows of the token alias table if None.

    """

    def __init__(self, native_symbol: str = "ETH", stablecoin_symbols: set[str] | None = None) -> None:
        self.native_symbol = native_symbol
        if stablecoin_symbols is None:
            stablecoin_symbols = load_token_aliases().stablecoin_symbols()
        self.stablecoin_symbols = stablecoin_symbols

    def total_value(self, balances: list[TokenBalance], positions: list[ProtocolPosition]) -> Decimal:
        """Sum of all balance and position values."""
        balance_value = sum((b.value_usd for b in balances), Decimal("0"))
        position_value = sum((p.value_usd for p in positions), Decimal("0"))
        return balance_value + position_value

    def native_fraction(self, balances: list[TokenBalance], positions: list[ProtocolPosition]) -> Decimal:
        """
        Share of the portfolio held in the native coin.

        Parameters
        ----------
        balances : list[TokenBalance]
            Wallet holdings
        positions : list[ProtocolPosition]
            Protocol positions

        Returns
        -------
        Decimal
            Fraction in [0, 1]; 0 for an empty or zero-valued portfolio

        """
        total = self.total_value(balances, positions)
        if total == 0:
            return Decimal("0")
        native_value = sum((b.value_usd for b in balances if b.symbol == self.native_symbol), Decimal("0"))
        return native_value / total

    def build_snapshot(
        self,
        balances: list[TokenBalance],
        positions: list[ProtocolPosition],
        address: str | None = None,
    ) -> PortfolioSnapshot:
        """
        Build a portfolio snapshot with its risk score.

        Parameters
        ----------
        balances : list[TokenBalance]
            Wallet holdings
        positions : list[ProtocolPosition]
            Protocol positions
        address : str | None
            Wallet address, None for demo data

        Returns
        -------
        PortfolioSnapshot
            Snapshot whose total is the exact sum of its parts

        """
        return PortfolioSnapshot(
            address=address,
            balances=list(balances),
            positions=list(positions),
            risk_score=risk_score_for(self.native_fraction(balances, positions)),
        )

    def assess_risk(self, snapshot: PortfolioSnapshot) -> RiskAssessment:
        """
        Break a snapshot's risk down into allocation shares and recommendations.

        Parameters
        ----------
        snapshot : PortfolioSnapshot
            Portfolio to assess

        Returns
        -------
        RiskAssessment
            Score, shares in percent, concentration level, and recommendations

        """
        total = snapshot.total_value_usd
        native_fraction = self.native_fraction(snapshot.balances, snapshot.positions)

        if total == 0:
            stable_fraction = Decimal("0")
            defi_fraction = Decimal("0")
        else:
            stable_value = sum(
                (b.value_usd for b in snapshot.balances if b.symbol in self.stablecoin_symbols),
                Decimal("0"),
            )
            defi_value = sum((p.value_usd for p in snapshot.positions), Decimal("0"))
            stable_fraction = stable_value / total
            defi_fraction = defi_value / total

        score = risk_score_for(native_fraction)
        if score >= 8:
            concentration = ConcentrationLevel.HIGH
        elif score >= 6:
            concentration = ConcentrationLevel.MEDIUM
        else:
            concentration = ConcentrationLevel.LOW

        recommendations = []
        if native_fraction > Decimal("0.7"):
            recommendations.append(f"Consider rebalancing: {self.native_symbol} allocation exceeds 70%")
        if stable_fraction < Decimal("0.2"):
            recommendations.append("Consider diversifying into stablecoins for risk management")
        if defi_fraction > 0:
            recommendations.append("Monitor protocol health for your DeFi positions")
        recommendations.append("Set up alerts for 20%+ price movements")

        return RiskAssessment(
            risk_score=score,
            native_percent=native_fraction * HUNDRED,
            stablecoin_percent=stable_fraction * HUNDRED,
            defi_percent=defi_fraction * HUNDRED,
            concentration=concentration,
            recommendations=recommendations,
        )
