"""
Portfolio Oracle Module

Batch balance queries. Native balances come from the host; asset balances
come from a deterministic generator keyed on the (asset, account) address
pair, so every run and every implementation returns the same numbers.
"""

from typing import List, Sequence, Tuple

from .address import Address, ADDRESS_LENGTH
from .environment import HostEnvironment

ASSET_DECIMALS = 18
UNITS_PER_ASSET = 10 ** ASSET_DECIMALS
MOCK_BALANCE_RANGE = 10000

_U64_MASK = 2 ** 64 - 1


def mock_asset_balance(asset: Address, account: Address) -> int:
    """
    Deterministic pseudo-balance for an (asset, account) pair.

    XOR-folds both address byte strings into a 64-bit accumulator, byte i of
    the asset shifted by i % 8 and byte i of the account by (i + 4) % 8,
    then maps the accumulator to 1..10000 whole units of 18 decimals.
    """
    asset_bytes = asset.raw
    account_bytes = account.raw

    accumulator = 0
    for i in range(ADDRESS_LENGTH):
        accumulator ^= asset_bytes[i] << (i % 8)
        accumulator ^= account_bytes[i] << ((i + 4) % 8)
    accumulator &= _U64_MASK

    amount = (accumulator % MOCK_BALANCE_RANGE) + 1
    return amount * UNITS_PER_ASSET


class PortfolioOracle:
    """Read-only balance queries over host accounts"""

    def __init__(self, host: HostEnvironment):
        self.host = host

    def get_balance(self, account: Address) -> int:
        return self.host.balance_of(account)

    def get_balances(self, accounts: Sequence[Address]) -> List[int]:
        """One balance per address, input order and duplicates kept"""
        return [self.get_balance(account) for account in accounts]

    def get_mock_asset_balance(self, asset: Address, account: Address) -> int:
        return mock_asset_balance(asset, account)

    def get_mock_asset_balances(self, assets: Sequence[Address], account: Address) -> List[int]:
        return [mock_asset_balance(asset, account) for asset in assets]

    def get_portfolio(self, account: Address, assets: Sequence[Address]) -> Tuple[int, List[int]]:
        """Native balance plus asset balances for one account"""
        return self.get_balance(account), self.get_mock_asset_balances(assets, account)

    def get_multiple_portfolios(self, accounts: Sequence[Address],
                                assets: Sequence[Address]) -> Tuple[List[int], List[List[int]]]:
        """Native balances and an accounts x assets balance matrix"""
        balances = self.get_balances(accounts)
        matrix = [self.get_mock_asset_balances(assets, account) for account in accounts]
        return balances, matrix
