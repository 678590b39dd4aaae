"""
Ownership Guard Module

Single-owner access control. Exactly one address may call guarded
operations; ownership can be handed over or renounced. After a renounce the
owner is the zero address and every guarded operation is unreachable for
good.
"""

import logging
from typing import Optional

from .address import Address, ZERO_ADDRESS
from .errors import UnauthorizedAccount, InvalidOwner
from .events import EventDispatcher, EventPublisherMixin, OwnershipTransferred
from .logging_config import log_action
from .storage import StorageInterface


class OwnershipGuard(EventPublisherMixin):
    """Owner-gated access control backed by storage"""

    TABLE = "ownable"
    RECORD_ID = "owner"

    def __init__(self, storage: StorageInterface, contract_address: Address,
                 event_dispatcher: Optional[EventDispatcher] = None):
        self.storage = storage
        self.contract_address = contract_address
        self.logger = logging.getLogger("greeter.ownable")
        if event_dispatcher is not None:
            self.set_event_dispatcher(event_dispatcher)

    def current_owner(self) -> Address:
        """Current owner, the zero address if unset or renounced"""
        data = self.storage.load(self.TABLE, self.RECORD_ID)
        if data is None:
            return ZERO_ADDRESS
        return Address.from_hex(data['owner'])

    def _set_owner(self, new_owner: Address) -> None:
        previous = self.current_owner()
        self.storage.save(self.TABLE, self.RECORD_ID, {'owner': new_owner.to_hex()})
        log_action(
            self.logger, "info", "Ownership transferred",
            action="ownership_transferred", resource="owner",
            extra={'previous_owner': previous.to_hex(), 'new_owner': new_owner.to_hex()}
        )
        self.publish_event(OwnershipTransferred(previous_owner=previous, new_owner=new_owner))

    def initialize(self, initial_owner: Address) -> None:
        """Install the first owner; the zero address is rejected"""
        if initial_owner.is_zero():
            raise InvalidOwner(initial_owner)
        self._set_owner(initial_owner)

    def only_owner(self, caller: Address) -> None:
        """Raise UnauthorizedAccount unless caller is the owner"""
        owner = self.current_owner()
        # An ownerless contract authorizes nobody, not even a zero caller
        if owner.is_zero() or caller != owner:
            self.logger.debug(f"Rejected non-owner caller {caller}")
            raise UnauthorizedAccount(caller)

    def transfer_ownership(self, caller: Address, new_owner: Address) -> None:
        self.only_owner(caller)
        if new_owner.is_zero():
            raise InvalidOwner(new_owner)
        self._set_owner(new_owner)

    def renounce_ownership(self, caller: Address) -> None:
        """Leave the contract without an owner; irreversible"""
        self.only_owner(caller)
        self._set_owner(ZERO_ADDRESS)
