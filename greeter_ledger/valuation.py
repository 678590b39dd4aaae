"""
Portfolio Valuation Module

Turns raw 18-decimal balances into unit amounts and USD values for a list
of quoted assets. Prices are Decimal; never float.
"""

from decimal import Decimal, ROUND_HALF_UP
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .address import Address, ZERO_ADDRESS
from .portfolio import PortfolioOracle, UNITS_PER_ASSET

CENT = Decimal("0.01")


@dataclass(frozen=True)
class AssetQuote:
    """An asset and its USD price; the zero address is the native currency"""
    symbol: str
    name: str
    address: Address
    price: Decimal

    def __post_init__(self):
        if not isinstance(self.price, Decimal):
            object.__setattr__(self, 'price', Decimal(str(self.price)))
        if not self.price.is_finite():
            raise ValueError(f"Price for {self.symbol} must be finite")
        if self.price < 0:
            raise ValueError(f"Price for {self.symbol} cannot be negative")

    @property
    def is_native(self) -> bool:
        return self.address.is_zero()


DEFAULT_QUOTES = (
    AssetQuote("ETH", "Ethereum", ZERO_ADDRESS, Decimal("3200")),
    AssetQuote("USDC", "USD Coin", Address.from_hex("0x1234567890123456789012345678901234567890"), Decimal("1")),
    AssetQuote("WBTC", "Wrapped Bitcoin", Address.from_hex("0x2345678901234567890123456789012345678901"), Decimal("95000")),
    AssetQuote("ARB", "Arbitrum", Address.from_hex("0x3456789012345678901234567890123456789012"), Decimal("0.85")),
)


@dataclass(frozen=True)
class Holding:
    quote: AssetQuote
    raw_balance: int
    units: Decimal
    usd_value: Decimal


@dataclass
class PortfolioSummary:
    """Valued holdings of one account"""
    account: Address
    holdings: List[Holding] = field(default_factory=list)

    @property
    def total_value(self) -> Decimal:
        return sum((h.usd_value for h in self.holdings), Decimal("0.00"))

    @property
    def largest_holding(self) -> Optional[Holding]:
        if not self.holdings:
            return None
        # First of equal values wins
        largest = self.holdings[0]
        for holding in self.holdings[1:]:
            if holding.usd_value > largest.usd_value:
                largest = holding
        return largest

    @property
    def largest_share_percent(self) -> int:
        """Largest holding as whole percent of total; 0 for an empty portfolio"""
        total = self.total_value
        largest = self.largest_holding
        if largest is None or total <= 0:
            return 0
        share = largest.usd_value / total * 100
        return int(share.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_units(raw_balance: int) -> Decimal:
    """Raw 18-decimal integer to a unit Decimal"""
    return Decimal(raw_balance) / Decimal(UNITS_PER_ASSET)


def value_portfolio(oracle: PortfolioOracle, account: Address,
                    quotes: Sequence[AssetQuote] = DEFAULT_QUOTES) -> PortfolioSummary:
    """Value every quoted asset held by account"""
    summary = PortfolioSummary(account=account)
    for quote in quotes:
        if quote.is_native:
            raw = oracle.get_balance(account)
        else:
            raw = oracle.get_mock_asset_balance(quote.address, account)
        units = to_units(raw)
        usd_value = (units * quote.price).quantize(CENT, rounding=ROUND_HALF_UP)
        summary.holdings.append(Holding(quote=quote, raw_balance=raw, units=units, usd_value=usd_value))
    return summary


def format_usd(value: Decimal) -> str:
    """Compact dollar display: $12.34, $5.60K, $7.89M"""
    if value >= Decimal("1000000"):
        return f"${(value / Decimal('1000000')).quantize(CENT, rounding=ROUND_HALF_UP)}M"
    if value >= Decimal("1000"):
        return f"${(value / Decimal('1000')).quantize(CENT, rounding=ROUND_HALF_UP)}K"
    return f"${Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)}"
