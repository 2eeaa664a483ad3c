"""Map free-text token names and tickers to price-feed identifiers."""

import re

from defi_portfolio_agent.core.models import TokenAliasEntry, TokenAliasTable, TokenIdentifier
from defi_portfolio_agent.data.loader import load_token_aliases

# Conversational phrasings that carry a token name
CANDIDATE_PATTERNS = (
    re.compile(r"\b(?:price of|get|check)\s+([a-z0-9]+)\b"),
    re.compile(r"\b([a-z0-9]+)\s+(?:price|cost|value)\b"),
)

# Words the candidate patterns pick up that are never tokens
FILLER_WORDS = frozenset(
    {
        "a",
        "an",
        "current",
        "latest",
        "me",
        "my",
        "of",
        "price",
        "the",
        "this",
        "today",
        "todays",
        "what",
        "whats",
        "your",
    }
)

_TOKEN_CODE_RE = re.compile(r"^[a-z0-9]+$")


class SymbolResolver:
    """
    Resolves token names, tickers, and price queries to a ``TokenIdentifier``.

    Parameters
    ----------
    table : TokenAliasTable | None
        Alias table. Loads the bundled tokens.yaml if None.

    """

    def __init__(self, table: TokenAliasTable | None = None) -> None:
        self.table = table or load_token_aliases()
        self.quote_currency = self.table.quote_currency.upper()
        self._by_alias: dict[str, TokenAliasEntry] = {}
        self._patterns: list[tuple[re.Pattern[str], TokenAliasEntry]] = []

        for entry in self.table.tokens:
            for alias in entry.aliases:
                self._by_alias[alias.lower()] = entry
            # Longest alias first so "usd coin" wins over shorter overlaps
            aliases = sorted((a.lower() for a in entry.aliases), key=len, reverse=True)
            pattern = re.compile(r"\b(?:" + "|".join(re.escape(a) for a in aliases) + r")\b")
            self._patterns.append((pattern, entry))

    def resolve(self, text: str) -> TokenIdentifier | None:
        """
        Resolve a free-text query to a token identifier.

        Parameters
        ----------
        text : str
            User query (e.g., "what's solana worth?")

        Returns
        -------
        TokenIdentifier | None
            Identifier, or None if no token could be identified

        Examples
        --------
        >>> SymbolResolver().resolve("what's the price of bitcoin").feed_id
        'BTCUSDT'

        """
        lowered = text.lower()

        for pattern, entry in self._patterns:
            if pattern.search(lowered):
                return self._from_entry(entry)

        candidate = self.extract_candidate(lowered)
        if candidate is None:
            # A bare token code such as "wbtc"
            word = lowered.strip()
            if not _TOKEN_CODE_RE.match(word) or word in FILLER_WORDS:
                return None
            candidate = word
        return self.resolve_symbol(candidate)

    def resolve_symbol(self, symbol: str) -> TokenIdentifier | None:
        """
        Resolve an explicit token code (e.g., a balance's ticker).

        Parameters
        ----------
        symbol : str
            Token ticker or name

        Returns
        -------
        TokenIdentifier | None
            Curated identifier if the code is in the alias table, otherwise a
            constructed trading pair. None for empty or non-alphanumeric codes.

        """
        key = symbol.strip().lower()
        if not key:
            return None

        entry = self._by_alias.get(key)
        if entry:
            return self._from_entry(entry)

        if not _TOKEN_CODE_RE.match(key):
            return None
        return self._constructed(key)

    def extract_candidate(self, text: str) -> str | None:
        """
        Pull a token name out of conversational phrasing.

        Parameters
        ----------
        text : str
            Lower-cased query

        Returns
        -------
        str | None
            Candidate token string, or None

        """
        for pattern in CANDIDATE_PATTERNS:
            for match in pattern.finditer(text):
                candidate = match.group(1)
                if candidate not in FILLER_WORDS:
                    return candidate
        return None

    def is_stablecoin(self, symbol: str) -> bool:
        """Whether a ticker belongs to a stablecoin entry."""
        entry = self._by_alias.get(symbol.strip().lower())
        return bool(entry and entry.stablecoin)

    def _from_entry(self, entry: TokenAliasEntry) -> TokenIdentifier:
        return TokenIdentifier(
            symbol=entry.symbol,
            display_name=entry.name,
            feed_id=f"{entry.symbol}{self.quote_currency}",
            coingecko_id=entry.coingecko_id,
            stablecoin=entry.stablecoin,
        )

    def _constructed(self, candidate: str) -> TokenIdentifier:
        symbol = candidate.upper()
        return TokenIdentifier(
            symbol=symbol,
            display_name=symbol,
            feed_id=f"{symbol}{self.quote_currency}",
            curated=False,
        )
