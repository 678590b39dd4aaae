"""
Ledger State Module

Persistent fields of the contract: greeting text, premium flag, global
greeting counter and the per-caller counter map. Counters are stored as
decimal strings so the full uint256 range survives any backend.
"""

from dataclasses import dataclass
from typing import Dict

from .address import Address
from .storage import StorageInterface


@dataclass(frozen=True)
class GreetingSnapshot:
    """Consistent read of the scalar greeting fields"""
    greeting: str
    premium: bool
    total_counter: int


class LedgerState:
    """Storage-backed greeting state"""

    STATE_TABLE = "greeting_state"
    COUNTER_TABLE = "greeting_counters"
    STATE_ID = "state"

    def __init__(self, storage: StorageInterface, default_greeting: str = ""):
        self.storage = storage
        self.default_greeting = default_greeting

    def initialize(self, greeting: str) -> None:
        """Write construction-time values: premium off, counter at zero"""
        self.storage.save(self.STATE_TABLE, self.STATE_ID, {
            'greeting': greeting,
            'premium': False,
            'total_counter': "0",
        })

    def is_initialized(self) -> bool:
        return self.storage.exists(self.STATE_TABLE, self.STATE_ID)

    def snapshot(self) -> GreetingSnapshot:
        data = self.storage.load(self.STATE_TABLE, self.STATE_ID)
        if data is None:
            return GreetingSnapshot(greeting=self.default_greeting, premium=False, total_counter=0)
        return GreetingSnapshot(
            greeting=data['greeting'],
            premium=bool(data['premium']),
            total_counter=int(data['total_counter'])
        )

    def get_greeting(self) -> str:
        return self.snapshot().greeting

    def is_premium(self) -> bool:
        return self.snapshot().premium

    def total_counter(self) -> int:
        return self.snapshot().total_counter

    def user_counter(self, account: Address) -> int:
        """Greetings set by account; zero for addresses never seen"""
        data = self.storage.load(self.COUNTER_TABLE, account.to_hex())
        if data is None:
            return 0
        return int(data['count'])

    def user_counters(self) -> Dict[Address, int]:
        return {
            Address.from_hex(record['address']): int(record['count'])
            for record in self.storage.load_all(self.COUNTER_TABLE)
        }

    def write_greeting(self, greeting: str, premium: bool, total_counter: int,
                       caller: Address, caller_counter: int) -> None:
        """Persist one greeting mutation in a single transaction"""
        with self.storage.atomic():
            self.storage.save(self.STATE_TABLE, self.STATE_ID, {
                'greeting': greeting,
                'premium': premium,
                'total_counter': str(total_counter),
            })
            self.storage.save(self.COUNTER_TABLE, caller.to_hex(), {
                'address': caller.to_hex(),
                'count': str(caller_counter),
            })
