"""
Greeter Contract

Facade over the ownership guard, greeting service, withdrawal service and
portfolio oracle. Every public operation holds one re-entrant lock, so
invocations never interleave.
"""

import logging
import threading
from functools import wraps
from typing import List, Optional, Sequence, Tuple

from .address import Address
from .config import GreeterConfig, get_config
from .environment import ExecutionContext, HostEnvironment, InMemoryHost
from .events import EventDispatcher, GreetingChange, get_global_dispatcher
from .greeting import GreetingService
from .ownable import OwnershipGuard
from .portfolio import PortfolioOracle
from .state import LedgerState
from .storage import StorageInterface, InMemoryStorage, create_storage
from .valuation import AssetQuote, DEFAULT_QUOTES, PortfolioSummary, value_portfolio
from .withdrawal import WithdrawalService, WithdrawalResult

DEFAULT_GREETING = "Building Unstoppable Apps!!!"


def invocation(method):
    """Run a contract operation under the contract lock"""
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


def initialized_only(method):
    """Reject mutations until initialize has installed the owner"""
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            if not self.is_initialized:
                raise ValueError("Contract not initialized")
            return method(self, *args, **kwargs)
    return wrapper


class GreeterContract:
    """Greeting ledger with single-owner access control"""

    def __init__(self, host: HostEnvironment, storage: Optional[StorageInterface] = None,
                 event_dispatcher: Optional[EventDispatcher] = None,
                 strict_withdrawals: bool = False,
                 initial_greeting: str = DEFAULT_GREETING):
        self.host = host
        self.storage = storage or InMemoryStorage()
        self.events = event_dispatcher or get_global_dispatcher()
        self.address = host.self_address()
        self.initial_greeting = initial_greeting
        self._lock = threading.RLock()
        self.logger = logging.getLogger("greeter.contract")

        self.state = LedgerState(self.storage, default_greeting=initial_greeting)
        self.ownable = OwnershipGuard(self.storage, self.address, self.events)
        self.greetings = GreetingService(self.state, self.address, self.events)
        self.treasury = WithdrawalService(self.ownable, host, strict=strict_withdrawals,
                                          event_dispatcher=self.events)
        self.portfolio = PortfolioOracle(host)

    @classmethod
    def deploy(cls, host: HostEnvironment, initial_owner: Address, **kwargs) -> 'GreeterContract':
        """Construct and initialize in one step"""
        contract = cls(host, **kwargs)
        contract.initialize(initial_owner)
        return contract

    @classmethod
    def from_config(cls, config: Optional[GreeterConfig] = None,
                    host: Optional[HostEnvironment] = None) -> 'GreeterContract':
        """Build from configuration; bootstraps the owner if configured and not yet stored"""
        config = config or get_config()
        storage = create_storage(config.storage_backend, config.sqlite_path)
        contract = cls(
            host or InMemoryHost(config.contract_address),
            storage=storage,
            strict_withdrawals=config.strict_withdrawals,
            initial_greeting=config.initial_greeting,
        )
        if config.initial_owner and not contract.is_initialized:
            contract.initialize(Address.from_hex(config.initial_owner))
        return contract

    @property
    def is_initialized(self) -> bool:
        return self.state.is_initialized()

    # Construction

    @invocation
    def initialize(self, initial_owner: Address) -> None:
        """Install the owner and the initial greeting state; only once"""
        if self.is_initialized:
            raise ValueError("Contract already initialized")
        with self.storage.atomic():
            self.ownable.initialize(initial_owner)
            self.state.initialize(self.initial_greeting)
        self.logger.info(f"Contract {self.address} initialized with owner {initial_owner}")

    # Ownership

    @invocation
    def owner(self) -> Address:
        return self.ownable.current_owner()

    @initialized_only
    def transfer_ownership(self, ctx: ExecutionContext, new_owner: Address) -> None:
        self.ownable.transfer_ownership(ctx.caller, new_owner)

    @initialized_only
    def renounce_ownership(self, ctx: ExecutionContext) -> None:
        self.ownable.renounce_ownership(ctx.caller)

    # Greeting

    @invocation
    def greeting(self) -> str:
        return self.greetings.get_greeting()

    @invocation
    def premium(self) -> bool:
        return self.greetings.is_premium()

    @invocation
    def total_counter(self) -> int:
        return self.greetings.total_counter()

    @invocation
    def user_greeting_counter(self, account: Address) -> int:
        return self.greetings.user_counter(account)

    @initialized_only
    def set_greeting(self, ctx: ExecutionContext, new_greeting: str) -> GreetingChange:
        # A credit that would fail must fail before any greeting write
        self.host.check_value(ctx)
        event = self.greetings.set_greeting(ctx, new_greeting)
        self.host.accept_value(ctx)
        return event

    # Treasury

    @initialized_only
    def withdraw(self, ctx: ExecutionContext) -> WithdrawalResult:
        return self.treasury.withdraw(ctx)

    @initialized_only
    def receive_funds(self, ctx: ExecutionContext) -> None:
        self.treasury.receive_funds(ctx)

    # Portfolio

    @invocation
    def get_balance(self, account: Address) -> int:
        return self.portfolio.get_balance(account)

    @invocation
    def get_balances(self, accounts: Sequence[Address]) -> List[int]:
        return self.portfolio.get_balances(accounts)

    def get_mock_asset_balance(self, asset: Address, account: Address) -> int:
        # Pure; no lock needed
        return self.portfolio.get_mock_asset_balance(asset, account)

    def get_mock_asset_balances(self, assets: Sequence[Address], account: Address) -> List[int]:
        return self.portfolio.get_mock_asset_balances(assets, account)

    @invocation
    def get_portfolio(self, account: Address, assets: Sequence[Address]) -> Tuple[int, List[int]]:
        return self.portfolio.get_portfolio(account, assets)

    @invocation
    def get_multiple_portfolios(self, accounts: Sequence[Address],
                                assets: Sequence[Address]) -> Tuple[List[int], List[List[int]]]:
        return self.portfolio.get_multiple_portfolios(accounts, assets)

    @invocation
    def value_portfolio(self, account: Address,
                        quotes: Sequence[AssetQuote] = DEFAULT_QUOTES) -> PortfolioSummary:
        return value_portfolio(self.portfolio, account, quotes)
