"""Difference-from-target rebalancing suggestions."""

from decimal import Decimal

from defi_portfolio_agent.core.models import PortfolioSnapshot, RebalanceAction, RebalanceSuggestion

# Placeholder allocation policy, in percent of total value
DEFAULT_TARGETS: dict[str, Decimal] = {
    "native": Decimal("40"),
    "stablecoin": Decimal("30"),
    "defi": Decimal("20"),
    "other": Decimal("10"),
}


class PortfolioOptimizer:
    """
    Compares current allocation buckets against fixed targets.

    Buckets: the native coin, stablecoins, protocol positions ("defi"), and all
    other tokens. A bucket within ``tolerance_percent`` of its target is held.

    Parameters
    ----------
    native_symbol : str
        Ticker of the native coin
    stablecoin_symbols : set[str]
        Tickers counted as stablecoins
    targets : dict[str, Decimal] | None
        Target percent per bucket. Uses ``DEFAULT_TARGETS`` if None.
    tolerance_percent : Decimal
        Allowed drift before a buy or sell is suggested

    """

    def __init__(
        self,
        native_symbol: str,
        stablecoin_symbols: set[str],
        targets: dict[str, Decimal] | None = None,
        tolerance_percent: Decimal = Decimal("5"),
    ) -> None:
        self.native_symbol = native_symbol
        self.stablecoin_symbols = stablecoin_symbols
        self.targets = targets or DEFAULT_TARGETS
        self.tolerance_percent = tolerance_percent

    def bucket_values(self, snapshot: PortfolioSnapshot) -> dict[str, Decimal]:
        """USD value held in each bucket."""
        values = {bucket: Decimal("0") for bucket in self.targets}
        for balance in snapshot.balances:
            if balance.symbol == self.native_symbol:
                bucket = "native"
            elif balance.symbol in self.stablecoin_symbols:
                bucket = "stablecoin"
            else:
                bucket = "other"
            values[bucket] = values.get(bucket, Decimal("0")) + balance.value_usd
        for position in snapshot.positions:
            values["defi"] = values.get("defi", Decimal("0")) + position.value_usd
        return values

    def suggest(self, snapshot: PortfolioSnapshot) -> list[RebalanceSuggestion]:
        """
        Suggest per-bucket changes to reach the target allocation.

        Parameters
        ----------
        snapshot : PortfolioSnapshot
            Current portfolio

        Returns
        -------
        list[RebalanceSuggestion]
            One suggestion per target bucket; empty for a zero-valued portfolio

        """
        total = snapshot.total_value_usd
        if total == 0:
            return []

        values = self.bucket_values(snapshot)
        suggestions = []
        for bucket, target in self.targets.items():
            current = values.get(bucket, Decimal("0")) / total * 100
            drift = target - current
            if abs(drift) <= self.tolerance_percent:
                action = RebalanceAction.HOLD
            elif drift > 0:
                action = RebalanceAction.BUY
            else:
                action = RebalanceAction.SELL

            suggestions.append(
                RebalanceSuggestion(
                    bucket=bucket,
                    current_percent=current,
                    target_percent=target,
                    delta_usd=total * drift / 100,
                    action=action,
                )
            )
        return suggestions
