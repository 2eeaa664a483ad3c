"""Keyword routing of chat queries to agent actions."""

import re
from enum import StrEnum


class Intent(StrEnum):
    """Action a query is routed to."""

    CHECK_PORTFOLIO = "CHECK_PORTFOLIO"
    GET_PRICE = "GET_PRICE"
    ANALYZE_RISK = "ANALYZE_RISK"
    OPTIMIZE_PORTFOLIO = "OPTIMIZE_PORTFOLIO"
    MARKET_OVERVIEW = "MARKET_OVERVIEW"
    HELP = "HELP"
    UNKNOWN = "UNKNOWN"


# Checked in order; the first intent with a matching keyword wins
INTENT_KEYWORDS: tuple[tuple[Intent, tuple[str, ...]], ...] = (
    (Intent.HELP, ("help", "what can you do")),
    (Intent.ANALYZE_RISK, ("risk", "worried", "exposure", "analyze", "analyse")),
    (Intent.OPTIMIZE_PORTFOLIO, ("optimize", "optimise", "rebalance", "rebalancing", "allocation")),
    (Intent.CHECK_PORTFOLIO, ("portfolio", "balance", "holdings", "my wallet")),
    (Intent.MARKET_OVERVIEW, ("market overview", "market cap", "dominance", "crypto market")),
    (Intent.GET_PRICE, ("price", "worth", "cost", "value", "trading at")),
)

_KEYWORD_PATTERNS = [
    (intent, re.compile(r"\b(?:" + "|".join(re.escape(k) for k in keywords) + r")\b"))
    for intent, keywords in INTENT_KEYWORDS
]


def detect_intent(text: str) -> Intent:
    """
    Route a query to an intent by keyword.

    Parameters
    ----------
    text : str
        User query

    Returns
    -------
    Intent
        Matched intent, or UNKNOWN. Callers may still treat an UNKNOWN query
        that names a known token as a price query.

    """
    lowered = text.lower().strip()
    if not lowered:
        return Intent.UNKNOWN

    for intent, pattern in _KEYWORD_PATTERNS:
        if pattern.search(lowered):
            return intent
    return Intent.UNKNOWN
