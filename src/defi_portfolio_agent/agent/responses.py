"""Chat text templates for agent responses."""

from decimal import Decimal

from defi_portfolio_agent.core.models import (
    FetchResult,
    FetchStatus,
    MarketOverview,
    PortfolioSnapshot,
    RebalanceAction,
    RebalanceSuggestion,
    RiskAssessment,
    TokenPriceRecord,
)

FALLBACK_NOTICES = {
    FetchStatus.NOT_CONFIGURED: "Showing demo data: live wallet data is not configured.",
    FetchStatus.TRANSIENT_FAILURE: "Showing demo data: the data provider is currently unavailable.",
    FetchStatus.NOT_FOUND: "Showing demo data: no live data was found.",
}

HELP_TEXT = """🤖 **DeFi Portfolio Assistant**

I can help with:
• **Portfolio:** "check my portfolio", "what's my balance?"
• **Prices:** "get btc price", "what's solana worth?"
• **Risk:** "analyze my risk", "I'm worried about my portfolio risk"
• **Rebalancing:** "optimize my portfolio"
• **Market:** "market overview\""""


def _usd(value: Decimal) -> str:
    return f"${value:,.2f}"


def _compact_usd(value: Decimal) -> str:
    """Format large USD amounts as $1.2T / $3.4B / $5.6M."""
    for divisor, suffix in ((Decimal("1e12"), "T"), (Decimal("1e9"), "B"), (Decimal("1e6"), "M")):
        if value >= divisor:
            return f"${value / divisor:,.1f}{suffix}"
    return _usd(value)


def _risk_label(score: int) -> str:
    if score >= 8:
        return "High"
    if score >= 5:
        return "Medium"
    return "Low"


def format_price(result: FetchResult[TokenPriceRecord]) -> str:
    """
    Render a price lookup.

    Parameters
    ----------
    result : FetchResult[TokenPriceRecord]
        Price result

    Returns
    -------
    str
        Price card, or an apology naming the reason when no live price exists

    """
    record = result.value
    title = f"{record.display_name} ({record.symbol})" if record.display_name != record.symbol else record.symbol

    if result.status == FetchStatus.NOT_FOUND:
        return f"❌ Sorry, I couldn't find price data for {title}. Check the token name or ticker and try again."
    if not result.ok:
        return f"❌ Sorry, I couldn't fetch the current price for {title}. Please try again later."

    change = record.change_24h_percent
    change_emoji = "📈" if change > 0 else "📉" if change < 0 else "➖"

    lines = [
        f"💰 **{title} Price**",
        "",
        f"🏷️ **Current Price:** {_usd(record.price_usd)}",
        f"{change_emoji} **24h Change:** {change:+.2f}%",
    ]
    if record.volume_24h_usd:
        lines.append(f"📊 **24h Volume:** {_compact_usd(record.volume_24h_usd)}")
    if record.market_cap_usd:
        lines.append(f"🏦 **Market Cap:** {_compact_usd(record.market_cap_usd)}")
    lines.append("")
    lines.append(f"⏰ **Last Updated:** {record.fetched_at:%H:%M:%S} UTC")
    return "\n".join(lines)


def format_portfolio(result: FetchResult[PortfolioSnapshot]) -> str:
    """Render a portfolio snapshot with holdings and positions."""
    snapshot = result.value
    lines = ["📊 **Portfolio Analysis Complete**", ""]
    if not result.ok:
        lines += [f"ℹ️ {FALLBACK_NOTICES[result.status]}", ""]

    lines += [f"💰 **Total Portfolio Value:** {_usd(snapshot.total_value_usd)}", "", "🪙 **Holdings:**"]
    for balance in snapshot.balances:
        lines.append(f"• {balance.symbol}: {balance.quantity:,.4f} (~{_usd(balance.value_usd)})")
    for position in snapshot.positions:
        label = f" ({position.pair_label})" if position.pair_label else ""
        apy = f", APY {position.apy_percent}%" if position.apy_percent is not None else ""
        lines.append(f"• {position.protocol_name}{label}: {_usd(position.value_usd)}{apy}")

    lines += ["", f"⚖️ **Risk Assessment:** {snapshot.risk_score}/10 ({_risk_label(snapshot.risk_score)})"]
    return "\n".join(lines)


def format_risk(assessment: RiskAssessment, native_symbol: str, status: FetchStatus = FetchStatus.OK) -> str:
    """Render a risk breakdown."""
    lines = ["⚠️ **Portfolio Risk Analysis**", ""]
    if status != FetchStatus.OK:
        lines += [f"ℹ️ {FALLBACK_NOTICES[status]}", ""]

    lines += [
        f"🎯 **Overall Risk Score:** {assessment.risk_score}/10 ({_risk_label(assessment.risk_score)})",
        "",
        "📊 **Risk Breakdown:**",
        f"• **Concentration Risk:** {assessment.concentration.value.title()} "
        f"({assessment.native_percent:.0f}% {native_symbol} exposure)",
        f"• **Stablecoin Share:** {assessment.stablecoin_percent:.0f}%",
        f"• **DeFi Protocol Share:** {assessment.defi_percent:.0f}%",
        "",
        "💡 **Recommendations:**",
    ]
    lines += [f"• {rec}" for rec in assessment.recommendations]
    return "\n".join(lines)


def format_rebalance(suggestions: list[RebalanceSuggestion], status: FetchStatus = FetchStatus.OK) -> str:
    """Render rebalancing suggestions."""
    lines = ["🔄 **Portfolio Optimization**", ""]
    if status != FetchStatus.OK:
        lines += [f"ℹ️ {FALLBACK_NOTICES[status]}", ""]
    if not suggestions:
        lines.append("Your portfolio is empty, so there is nothing to rebalance.")
        return "\n".join(lines)

    for suggestion in suggestions:
        bucket = suggestion.bucket.title()
        allocation = f"{suggestion.current_percent:.1f}% → target {suggestion.target_percent:.0f}%"
        if suggestion.action == RebalanceAction.HOLD:
            lines.append(f"• **{bucket}:** {allocation}, hold")
        else:
            verb = "buy" if suggestion.action == RebalanceAction.BUY else "sell"
            lines.append(f"• **{bucket}:** {allocation}, {verb} ~{_usd(abs(suggestion.delta_usd))}")
    return "\n".join(lines)


def format_market_overview(result: FetchResult[MarketOverview]) -> str:
    """Render global market figures."""
    overview = result.value
    lines = ["🌐 **Crypto Market Overview**", ""]
    if not result.ok:
        lines += ["ℹ️ Showing reference figures: live market data is unavailable.", ""]
    lines += [
        f"🏦 **Total Market Cap:** {_compact_usd(overview.total_market_cap_usd)}",
        f"📊 **24h Volume:** {_compact_usd(overview.total_volume_usd)}",
        f"₿ **BTC Dominance:** {overview.btc_dominance:.1f}%",
        f"Ξ **ETH Dominance:** {overview.eth_dominance:.1f}%",
    ]
    return "\n".join(lines)


def format_clarification() -> str:
    """Prompt shown when no token could be identified in a price query."""
    return (
        "🤔 I couldn't tell which token you mean. "
        "Try something like \"get btc price\" or \"what's the price of solana\"."
    )


def format_help() -> str:
    return HELP_TEXT
