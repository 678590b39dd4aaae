"""
Test suite for the greeting service

Tests greeting replacement, counter invariants, the premium flag and the
GreetingChange event.
"""

import random

import pytest
from unittest.mock import Mock

from greeter_ledger.address import Address, MAX_UINT256
from greeter_ledger.environment import ExecutionContext
from greeter_ledger.events import EventDispatcher, ContractEvent, GreetingChange
from greeter_ledger.greeting import GreetingService
from greeter_ledger.state import LedgerState
from greeter_ledger.storage import InMemoryStorage


ALICE = Address.repeat(0x11)
BOB = Address.repeat(0x22)
CONTRACT = Address.repeat(0xaa)


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def state(storage):
    state = LedgerState(storage)
    state.initialize("Building Unstoppable Apps!!!")
    return state


@pytest.fixture
def dispatcher():
    return EventDispatcher()


@pytest.fixture
def service(state, dispatcher):
    return GreetingService(state, CONTRACT, dispatcher)


class TestInitialState:

    def test_initial_values(self, service):
        assert service.get_greeting() == "Building Unstoppable Apps!!!"
        assert service.is_premium() is False
        assert service.total_counter() == 0

    def test_unseen_address_counter_is_zero(self, service):
        assert service.user_counter(ALICE) == 0


class TestSetGreeting:

    def test_replaces_greeting_and_counts(self, service):
        service.set_greeting(ExecutionContext(ALICE, 0), "Hello World")

        assert service.get_greeting() == "Hello World"
        assert service.total_counter() == 1
        assert service.user_counter(ALICE) == 1
        assert service.user_counter(BOB) == 0

    def test_empty_greeting_allowed(self, service):
        service.set_greeting(ExecutionContext(ALICE, 0), "")
        assert service.get_greeting() == ""
        assert service.total_counter() == 1

    def test_greeting_stored_verbatim(self, service):
        text = "  héllo\nwörld  "
        service.set_greeting(ExecutionContext(ALICE, 0), text)
        assert service.get_greeting() == text

    def test_non_string_rejected_without_state_change(self, service):
        with pytest.raises(TypeError):
            service.set_greeting(ExecutionContext(ALICE, 0), 42)
        assert service.total_counter() == 0

    def test_premium_follows_latest_call_only(self, service):
        service.set_greeting(ExecutionContext(ALICE, 100), "paid")
        assert service.is_premium() is True

        service.set_greeting(ExecutionContext(ALICE, 0), "free")
        assert service.is_premium() is False

        service.set_greeting(ExecutionContext(BOB, 1), "paid again")
        assert service.is_premium() is True

    def test_emits_one_event_per_call(self, service, dispatcher):
        handler = Mock()
        dispatcher.subscribe(ContractEvent.GREETING_CHANGE, handler)

        returned = service.set_greeting(ExecutionContext(ALICE, 7), "Hi")

        handler.assert_called_once()
        payload = handler.call_args[0][0]
        assert payload.record == returned
        assert payload.record == GreetingChange(
            greeting_setter=ALICE, new_greeting="Hi", premium=True, value=7
        )
        assert payload.data == {
            'greeting_setter': ALICE.to_hex(),
            'new_greeting': "Hi",
            'premium': True,
            'value': "7",
        }
        assert payload.contract == CONTRACT.to_hex()

    def test_counters_sum_to_total(self, service):
        rng = random.Random(1234)
        callers = [Address.repeat(b) for b in (0x11, 0x22, 0x33, 0x44)]
        expected = {caller: 0 for caller in callers}

        for n in range(1, 41):
            caller = rng.choice(callers)
            value = rng.choice([0, 0, 1, 10 ** 18])
            service.set_greeting(ExecutionContext(caller, value), f"greeting {n}")
            expected[caller] += 1

            assert service.total_counter() == n
            assert service.is_premium() == (value > 0)

        for caller in callers:
            assert service.user_counter(caller) == expected[caller]
        assert sum(service.state.user_counters().values()) == service.total_counter()

    def test_counter_overflow_fails_loudly_without_writes(self, service, storage):
        storage.save(LedgerState.STATE_TABLE, LedgerState.STATE_ID, {
            'greeting': "full",
            'premium': False,
            'total_counter': str(MAX_UINT256),
        })

        with pytest.raises(OverflowError):
            service.set_greeting(ExecutionContext(ALICE, 5), "one more")

        assert service.get_greeting() == "full"
        assert service.total_counter() == MAX_UINT256
        assert service.user_counter(ALICE) == 0
