"""Data models for prices, balances, positions, and portfolio snapshots."""

from datetime import UTC, datetime
from decimal import Decimal
from enum import StrEnum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field

T = TypeVar("T")


class FetchStatus(StrEnum):
    """Outcome of a call to an external data source."""

    OK = "ok"
    NOT_CONFIGURED = "not_configured"
    TRANSIENT_FAILURE = "transient_failure"
    NOT_FOUND = "not_found"


class FetchResult(BaseModel, Generic[T]):
    """
    Tagged result of a fetch.

    ``value`` always holds something usable: the live value when ``status`` is
    OK, otherwise the well-defined fallback (zero price record, demo balances,
    demo snapshot).

    Attributes
    ----------
    status : FetchStatus
        Outcome of the fetch
    value : T
        Live value or fallback value
    detail : str | None
        Human-readable reason for a non-OK status

    """

    status: FetchStatus
    value: T
    detail: str | None = None

    @property
    def ok(self) -> bool:
        """Whether the value came from a successful live fetch."""
        return self.status == FetchStatus.OK


class NetworkType(StrEnum):
    """Deployment tier of a network."""

    DEVNET = "devnet"
    TESTNET = "testnet"
    MAINNET = "mainnet"


class NetworkProfile(BaseModel):
    """
    Static chain parameters.

    Attributes
    ----------
    key : str
        Table key (e.g., 'mainnet', 'polygon_mainnet')
    name : str
        Display name
    network_type : NetworkType
        Deployment tier
    chain_id : int
        Numeric chain ID
    rpc_url : str
        Default RPC endpoint
    explorer_url : str
        Block explorer base URL
    native_currency_name : str
        Native coin name (e.g., 'Ether')
    native_currency_symbol : str
        Native coin ticker (e.g., 'ETH')
    native_decimals : int
        Decimal places of the native coin's base unit
    is_testnet : bool
        Whether funds on this network are test funds
    alchemy_url : str | None
        Chain-data provider base URL, None when unsupported

    """

    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    network_type: NetworkType
    chain_id: int
    rpc_url: str
    explorer_url: str
    native_currency_name: str
    native_currency_symbol: str
    native_decimals: int = 18
    is_testnet: bool
    alchemy_url: str | None = None


class TokenAliasEntry(BaseModel):
    """One row of the token alias table."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    name: str
    coingecko_id: str | None = None
    aliases: tuple[str, ...]
    stablecoin: bool = False


class TokenAliasTable(BaseModel):
    """
    Token alias table loaded from ``tokens.yaml``.

    Attributes
    ----------
    quote_currency : str
        Suffix appended to build trading pairs (e.g., 'USDT')
    tokens : list[TokenAliasEntry]
        Curated entries, matched in order

    """

    quote_currency: str
    tokens: list[TokenAliasEntry]

    def stablecoin_symbols(self) -> set[str]:
        """Return the tickers of all stablecoin entries."""
        return {entry.symbol for entry in self.tokens if entry.stablecoin}


class TokenIdentifier(BaseModel):
    """
    Canonical price-feed identifier for a token.

    Attributes
    ----------
    symbol : str
        Token ticker (e.g., 'BTC')
    display_name : str
        Human-readable name (e.g., 'Bitcoin')
    feed_id : str
        Exchange trading pair (e.g., 'BTCUSDT')
    coingecko_id : str | None
        Aggregator coin ID, None for constructed identifiers
    stablecoin : bool
        Whether the token is priced at a fixed 1.00 USD
    curated : bool
        False when the identifier was constructed from an unknown token

    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    display_name: str
    feed_id: str
    coingecko_id: str | None = None
    stablecoin: bool = False
    curated: bool = True


class TokenPriceRecord(BaseModel):
    """
    Price snapshot for a single token.

    Percentages are provider-native (1.2 means 1.2%). No rounding is applied.

    Attributes
    ----------
    symbol : str
        Token ticker
    display_name : str
        Human-readable name
    price_usd : Decimal
        Spot price in USD
    change_24h_percent : Decimal
        24h price change in percent
    volume_24h_usd : Decimal
        24h traded volume in USD
    market_cap_usd : Decimal
        Market capitalisation in USD (0 when the provider has none)
    fetched_at : datetime
        When the record was created

    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    display_name: str
    price_usd: Decimal = Field(ge=0)
    change_24h_percent: Decimal = Decimal("0")
    volume_24h_usd: Decimal = Field(default=Decimal("0"), ge=0)
    market_cap_usd: Decimal = Field(default=Decimal("0"), ge=0)
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class TokenBalance(BaseModel):
    """
    Held quantity of one asset.

    Attributes
    ----------
    symbol : str
        Token ticker
    quantity : Decimal
        Amount held, in whole units
    price_usd : Decimal
        USD price used for valuation (0 when unknown)
    contract_address : str | None
        Token contract, None for the native coin

    """

    symbol: str
    quantity: Decimal = Field(ge=0)
    price_usd: Decimal = Field(ge=0)
    contract_address: str | None = None

    @computed_field
    @property
    def value_usd(self) -> Decimal:
        """USD value of the holding."""
        return self.quantity * self.price_usd


class PositionType(StrEnum):
    """Type of protocol position."""

    LIQUIDITY_POOL = "liquidity_pool"
    LENDING = "lending"
    OTHER = "other"


class ProtocolPosition(BaseModel):
    """
    Position held inside a DeFi protocol.

    Attributes
    ----------
    protocol_name : str
        Protocol display name (e.g., 'Uniswap V3')
    position_type : PositionType
        Type of position
    pair_label : str | None
        Pool pair (e.g., 'ETH/USDC')
    value_usd : Decimal
        Position value in USD
    apy_percent : Decimal | None
        Annual percentage yield
    fee_tier : str | None
        Pool fee tier (e.g., '0.3%')

    """

    protocol_name: str
    position_type: PositionType
    pair_label: str | None = None
    value_usd: Decimal = Field(ge=0)
    apy_percent: Decimal | None = None
    fee_tier: str | None = None


class PortfolioSnapshot(BaseModel):
    """
    Aggregated portfolio view.

    Totals are computed from the constituent lists on every access.

    Attributes
    ----------
    address : str | None
        Wallet address, None for demo data
    balances : list[TokenBalance]
        Wallet holdings
    positions : list[ProtocolPosition]
        Protocol positions
    risk_score : int
        Concentration risk score from 1 to 10

    """

    address: str | None = None
    balances: list[TokenBalance] = Field(default_factory=list)
    positions: list[ProtocolPosition] = Field(default_factory=list)
    risk_score: int = Field(ge=1, le=10)

    @computed_field
    @property
    def total_value_usd(self) -> Decimal:
        """Sum of all balance and position values."""
        balance_value = sum((b.value_usd for b in self.balances), Decimal("0"))
        position_value = sum((p.value_usd for p in self.positions), Decimal("0"))
        return balance_value + position_value

    @computed_field
    @property
    def allocation(self) -> dict[str, Decimal]:
        """USD value per asset symbol and per protocol."""
        by_asset: dict[str, Decimal] = {}
        for balance in self.balances:
            by_asset[balance.symbol] = by_asset.get(balance.symbol, Decimal("0")) + balance.value_usd
        for position in self.positions:
            by_asset[position.protocol_name] = by_asset.get(position.protocol_name, Decimal("0")) + position.value_usd
        return by_asset


class ConcentrationLevel(StrEnum):
    """Qualitative concentration risk."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RiskAssessment(BaseModel):
    """
    Risk breakdown for a portfolio.

    Attributes
    ----------
    risk_score : int
        Score from 1 to 10
    native_percent : Decimal
        Share of the native coin, in percent
    stablecoin_percent : Decimal
        Share of stablecoins, in percent
    defi_percent : Decimal
        Share held in protocol positions, in percent
    concentration : ConcentrationLevel
        Qualitative concentration level
    recommendations : list[str]
        Suggested actions

    """

    risk_score: int = Field(ge=1, le=10)
    native_percent: Decimal
    stablecoin_percent: Decimal
    defi_percent: Decimal
    concentration: ConcentrationLevel
    recommendations: list[str] = Field(default_factory=list)


class RebalanceAction(StrEnum):
    """Direction of a rebalancing suggestion."""

    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"


class RebalanceSuggestion(BaseModel):
    """
    Suggested change for one allocation bucket.

    Attributes
    ----------
    bucket : str
        Allocation bucket ('native', 'stablecoin', 'defi', 'other')
    current_percent : Decimal
        Current share in percent
    target_percent : Decimal
        Target share in percent
    delta_usd : Decimal
        USD amount to add (positive) or remove (negative) to reach target
    action : RebalanceAction
        Buy, sell, or hold

    """

    bucket: str
    current_percent: Decimal
    target_percent: Decimal
    delta_usd: Decimal
    action: RebalanceAction


class MarketOverview(BaseModel):
    """
    Global crypto market figures.

    Attributes
    ----------
    total_market_cap_usd : Decimal
        Total market capitalisation
    total_volume_usd : Decimal
        Total 24h volume
    btc_dominance : Decimal
        Bitcoin share of market cap, in percent
    eth_dominance : Decimal
        Ether share of market cap, in percent

    """

    total_market_cap_usd: Decimal
    total_volume_usd: Decimal
    btc_dominance: Decimal
    eth_dominance: Decimal
