"""
Host Environment Module

The contract never reads ambient globals. Who is calling and how much value
is attached travel in an ExecutionContext; balance lookups and transfers go
through a HostEnvironment. InMemoryHost is the bundled implementation used
by the API and the tests.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional, Union
import logging
import threading

from .address import Address, ensure_uint256, checked_add


@dataclass(frozen=True)
class ExecutionContext:
    """Identity of the caller and the value attached to one invocation"""
    caller: Address
    value: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'caller', Address.parse(self.caller))
        ensure_uint256(self.value, "attached value")

    @classmethod
    def of(cls, caller: Union[Address, str, bytes], value: int = 0) -> 'ExecutionContext':
        return cls(caller=Address.parse(caller), value=value)


class HostEnvironment(ABC):
    """Abstract interface for the execution host"""

    @abstractmethod
    def self_address(self) -> Address:
        """Address the contract is deployed at"""
        pass

    @abstractmethod
    def balance_of(self, account: Address) -> int:
        """Native-currency balance of an account"""
        pass

    @abstractmethod
    def transfer(self, recipient: Address, amount: int) -> bool:
        """Move amount from the contract to recipient; False if refused"""
        pass

    def check_value(self, ctx: ExecutionContext) -> None:
        """Raise if accept_value would refuse ctx.value (default no-op)"""
        pass

    def accept_value(self, ctx: ExecutionContext) -> None:
        """Credit the value attached to an invocation (default no-op)"""
        pass


class InMemoryHost(HostEnvironment):
    """In-memory host with a balance table, for tests and local serving"""

    def __init__(self, contract_address: Union[Address, str], balances: Optional[Dict[Address, int]] = None):
        self._address = Address.parse(contract_address)
        self._balances: Dict[Address, int] = {}
        self._lock = threading.RLock()
        self.fail_transfers = False
        self.logger = logging.getLogger("greeter.host")
        for account, amount in (balances or {}).items():
            self.set_balance(account, amount)

    def self_address(self) -> Address:
        return self._address

    def balance_of(self, account: Address) -> int:
        with self._lock:
            return self._balances.get(Address.parse(account), 0)

    def set_balance(self, account: Union[Address, str], amount: int) -> None:
        with self._lock:
            self._balances[Address.parse(account)] = ensure_uint256(amount, "balance")

    def credit(self, account: Union[Address, str], amount: int) -> None:
        """Add amount to an account's balance"""
        account = Address.parse(account)
        with self._lock:
            self._balances[account] = checked_add(self.balance_of(account), ensure_uint256(amount, "amount"))

    def check_value(self, ctx: ExecutionContext) -> None:
        if ctx.value > 0:
            checked_add(self.balance_of(self._address), ctx.value)

    def accept_value(self, ctx: ExecutionContext) -> None:
        if ctx.value > 0:
            self.credit(self._address, ctx.value)

    def transfer(self, recipient: Address, amount: int) -> bool:
        with self._lock:
            if self.fail_transfers:
                self.logger.debug(f"Refusing transfer of {amount} to {recipient}")
                return False
            available = self.balance_of(self._address)
            if amount > available:
                return False
            self._balances[self._address] = available - amount
            self.credit(recipient, amount)
            return True
