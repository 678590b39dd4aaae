"""
Test suite for the ownership guard

Tests initialization, the only-owner check, ownership transfer and
renounce, including the events each change emits.
"""

import pytest
from unittest.mock import Mock

from greeter_ledger.address import Address, ZERO_ADDRESS
from greeter_ledger.errors import UnauthorizedAccount, InvalidOwner, OwnableError
from greeter_ledger.events import EventDispatcher, ContractEvent
from greeter_ledger.ownable import OwnershipGuard
from greeter_ledger.storage import InMemoryStorage


OWNER = Address.repeat(1)
OTHER = Address.repeat(2)
CONTRACT = Address.repeat(0xaa)


@pytest.fixture
def dispatcher():
    return EventDispatcher()


@pytest.fixture
def guard(dispatcher):
    """Guard initialized with OWNER"""
    guard = OwnershipGuard(InMemoryStorage(), CONTRACT, dispatcher)
    guard.initialize(OWNER)
    return guard


class TestInitialize:

    def test_owner_is_zero_before_initialize(self, dispatcher):
        guard = OwnershipGuard(InMemoryStorage(), CONTRACT, dispatcher)
        assert guard.current_owner() == ZERO_ADDRESS

    def test_initialize_sets_owner(self, guard):
        assert guard.current_owner() == OWNER

    def test_initialize_rejects_zero_address(self, dispatcher):
        guard = OwnershipGuard(InMemoryStorage(), CONTRACT, dispatcher)
        with pytest.raises(InvalidOwner) as exc_info:
            guard.initialize(ZERO_ADDRESS)
        assert exc_info.value.owner == ZERO_ADDRESS
        assert guard.current_owner() == ZERO_ADDRESS

    def test_initialize_emits_transfer_from_zero(self, dispatcher):
        handler = Mock()
        dispatcher.subscribe(ContractEvent.OWNERSHIP_TRANSFERRED, handler)
        guard = OwnershipGuard(InMemoryStorage(), CONTRACT, dispatcher)
        guard.initialize(OWNER)

        handler.assert_called_once()
        record = handler.call_args[0][0].record
        assert record.previous_owner == ZERO_ADDRESS
        assert record.new_owner == OWNER


class TestOnlyOwner:

    def test_owner_passes(self, guard):
        guard.only_owner(OWNER)

    def test_non_owner_rejected_with_caller(self, guard):
        with pytest.raises(UnauthorizedAccount) as exc_info:
            guard.only_owner(OTHER)
        assert exc_info.value.account == OTHER

    def test_errors_are_value_errors(self, guard):
        with pytest.raises(ValueError):
            guard.only_owner(OTHER)
        assert issubclass(UnauthorizedAccount, OwnableError)
        assert issubclass(InvalidOwner, OwnableError)

    def test_uninitialized_guard_rejects_zero_caller(self, dispatcher):
        guard = OwnershipGuard(InMemoryStorage(), CONTRACT, dispatcher)
        with pytest.raises(UnauthorizedAccount):
            guard.only_owner(ZERO_ADDRESS)


class TestTransferOwnership:

    def test_non_owner_cannot_transfer(self, guard):
        with pytest.raises(UnauthorizedAccount):
            guard.transfer_ownership(OTHER, OTHER)
        assert guard.current_owner() == OWNER

    def test_owner_cannot_transfer_to_zero(self, guard):
        with pytest.raises(InvalidOwner):
            guard.transfer_ownership(OWNER, ZERO_ADDRESS)
        assert guard.current_owner() == OWNER

    def test_authorization_checked_before_address(self, guard):
        # Non-owner with zero target reports the caller, not the address
        with pytest.raises(UnauthorizedAccount):
            guard.transfer_ownership(OTHER, ZERO_ADDRESS)

    def test_owner_transfers(self, guard, dispatcher):
        handler = Mock()
        dispatcher.subscribe(ContractEvent.OWNERSHIP_TRANSFERRED, handler)

        guard.transfer_ownership(OWNER, OTHER)

        assert guard.current_owner() == OTHER
        record = handler.call_args[0][0].record
        assert record.previous_owner == OWNER
        assert record.new_owner == OTHER

        # The old owner has lost its rights
        with pytest.raises(UnauthorizedAccount):
            guard.only_owner(OWNER)
        guard.only_owner(OTHER)


class TestRenounceOwnership:

    def test_non_owner_cannot_renounce(self, guard):
        with pytest.raises(UnauthorizedAccount):
            guard.renounce_ownership(OTHER)
        assert guard.current_owner() == OWNER

    def test_renounce_zeroes_owner(self, guard, dispatcher):
        handler = Mock()
        dispatcher.subscribe(ContractEvent.OWNERSHIP_TRANSFERRED, handler)

        guard.renounce_ownership(OWNER)

        assert guard.current_owner() == ZERO_ADDRESS
        assert handler.call_args[0][0].record.new_owner == ZERO_ADDRESS

    def test_renounce_is_permanent(self, guard):
        guard.renounce_ownership(OWNER)

        for caller in (OWNER, OTHER, ZERO_ADDRESS):
            with pytest.raises(UnauthorizedAccount):
                guard.transfer_ownership(caller, OTHER)
            with pytest.raises(UnauthorizedAccount):
                guard.renounce_ownership(caller)
        assert guard.current_owner() == ZERO_ADDRESS
