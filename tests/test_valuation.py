"""
Tests for portfolio valuation
"""

import pytest
from decimal import Decimal

from greeter_ledger.address import Address, ZERO_ADDRESS
from greeter_ledger.environment import InMemoryHost
from greeter_ledger.portfolio import PortfolioOracle
from greeter_ledger.valuation import (
    AssetQuote, DEFAULT_QUOTES, value_portfolio, to_units, format_usd
)


ONES = Address.repeat(0x01)
ACCOUNT = ZERO_ADDRESS


@pytest.fixture
def oracle():
    host = InMemoryHost(Address.repeat(0xaa), balances={ACCOUNT: 2 * 10 ** 18})
    return PortfolioOracle(host)


@pytest.fixture
def quotes():
    return [
        AssetQuote("ETH", "Ethereum", ZERO_ADDRESS, Decimal("3200")),
        AssetQuote("ONE", "Ones Token", ONES, Decimal("100")),
    ]


class TestValuePortfolio:

    def test_values_native_and_mock_assets(self, oracle, quotes):
        summary = value_portfolio(oracle, ACCOUNT, quotes)

        eth, ones = summary.holdings
        assert eth.raw_balance == 2 * 10 ** 18
        assert eth.units == Decimal("2")
        assert eth.usd_value == Decimal("6400.00")
        # Generator gives 16 whole units for (0x0101..01, zero address)
        assert ones.raw_balance == 16 * 10 ** 18
        assert ones.usd_value == Decimal("1600.00")

    def test_summary_figures(self, oracle, quotes):
        summary = value_portfolio(oracle, ACCOUNT, quotes)

        assert summary.total_value == Decimal("8000.00")
        assert summary.largest_holding.quote.symbol == "ETH"
        assert summary.largest_share_percent == 80

    def test_empty_portfolio(self, oracle):
        summary = value_portfolio(oracle, ACCOUNT, [])
        assert summary.total_value == Decimal("0")
        assert summary.largest_holding is None
        assert summary.largest_share_percent == 0

    def test_default_catalog(self, oracle):
        summary = value_portfolio(oracle, ACCOUNT)
        assert [h.quote.symbol for h in summary.holdings] == ["ETH", "USDC", "WBTC", "ARB"]
        assert DEFAULT_QUOTES[0].is_native


class TestQuotes:

    def test_price_coerced_to_decimal(self):
        quote = AssetQuote("X", "X", ONES, "0.85")
        assert quote.price == Decimal("0.85")

    def test_negative_price_rejected(self):
        with pytest.raises(ValueError):
            AssetQuote("X", "X", ONES, Decimal("-1"))

    @pytest.mark.parametrize("price", ["Infinity", "-Infinity", "NaN"])
    def test_non_finite_price_rejected(self, price):
        with pytest.raises(ValueError, match="finite"):
            AssetQuote("X", "X", ONES, Decimal(price))


class TestFormatting:

    def test_to_units(self):
        assert to_units(1500000000000000000) == Decimal("1.5")

    @pytest.mark.parametrize("value, expected", [
        (Decimal("12.3"), "$12.30"),
        (Decimal("8000.00"), "$8.00K"),
        (Decimal("2500000"), "$2.50M"),
    ])
    def test_format_usd(self, value, expected):
        assert format_usd(value) == expected
