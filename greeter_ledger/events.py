"""
Event System Module

Contract notifications (greeting changes, ownership transfers, withdrawals)
are immutable records published through a dispatcher using the Observer
pattern. Events are emitted, never stored.
"""

from enum import Enum
from typing import Callable, Dict, List, Any, Optional, Union
from dataclasses import dataclass, field
from datetime import datetime, timezone
import uuid
import logging
from threading import RLock

from .address import Address


class ContractEvent(Enum):
    """Notifications the contract can emit"""
    GREETING_CHANGE = "greeting.change"
    OWNERSHIP_TRANSFERRED = "ownership.transferred"
    FUNDS_WITHDRAWN = "treasury.withdrawn"


@dataclass(frozen=True)
class GreetingChange:
    """Emitted exactly once per set_greeting call"""
    greeting_setter: Address
    new_greeting: str
    premium: bool
    value: int

    event_type = ContractEvent.GREETING_CHANGE

    def to_data(self) -> Dict[str, Any]:
        return {
            'greeting_setter': self.greeting_setter.to_hex(),
            'new_greeting': self.new_greeting,
            'premium': self.premium,
            'value': str(self.value),
        }


@dataclass(frozen=True)
class OwnershipTransferred:
    """Owner changed; new_owner is the zero address after a renounce"""
    previous_owner: Address
    new_owner: Address

    event_type = ContractEvent.OWNERSHIP_TRANSFERRED

    def to_data(self) -> Dict[str, Any]:
        return {
            'previous_owner': self.previous_owner.to_hex(),
            'new_owner': self.new_owner.to_hex(),
        }


@dataclass(frozen=True)
class FundsWithdrawn:
    """Owner withdrawal attempt and whether the host accepted the transfer"""
    recipient: Address
    amount: int
    transferred: bool

    event_type = ContractEvent.FUNDS_WITHDRAWN

    def to_data(self) -> Dict[str, Any]:
        return {
            'recipient': self.recipient.to_hex(),
            'amount': str(self.amount),
            'transferred': self.transferred,
        }


ContractEventRecord = Union[GreetingChange, OwnershipTransferred, FundsWithdrawn]


@dataclass
class EventPayload:
    """Envelope carrying an event record to subscribers"""
    event_type: ContractEvent
    contract: str
    record: Optional[ContractEventRecord]
    data: Dict[str, Any]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @classmethod
    def wrap(cls, contract: Address, record: ContractEventRecord) -> 'EventPayload':
        return cls(
            event_type=record.event_type,
            contract=contract.to_hex(),
            record=record,
            data=record.to_data()
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'event_type': self.event_type.value,
            'contract': self.contract,
            'data': self.data,
            'timestamp': self.timestamp.isoformat(),
            'event_id': self.event_id
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EventPayload':
        """Create from dictionary; the typed record is not reconstructed"""
        return cls(
            event_type=ContractEvent(data['event_type']),
            contract=data['contract'],
            record=None,
            data=data['data'],
            timestamp=datetime.fromisoformat(data['timestamp']) if isinstance(data['timestamp'], str) else data['timestamp'],
            event_id=data['event_id']
        )


def _handler_name(handler: Callable) -> str:
    return getattr(handler, '__name__', repr(handler))


class EventDispatcher:
    """Central event dispatcher, publish/subscribe pattern"""

    def __init__(self):
        self._handlers: Dict[ContractEvent, List[Callable]] = {}
        self._global_handlers: List[Callable] = []  # catch-all handlers
        self._lock = RLock()
        self.logger = logging.getLogger("greeter.events")

    def subscribe(self, event_type: ContractEvent, handler: Callable) -> None:
        """Subscribe to a specific event type"""
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)
            self.logger.debug(f"Subscribed handler {_handler_name(handler)} to {event_type.value}")

    def subscribe_all(self, handler: Callable) -> None:
        """Subscribe to ALL events"""
        with self._lock:
            self._global_handlers.append(handler)
            self.logger.debug(f"Subscribed global handler {_handler_name(handler)}")

    def unsubscribe(self, event_type: ContractEvent, handler: Callable) -> None:
        """Unsubscribe from a specific event type"""
        with self._lock:
            try:
                self._handlers.get(event_type, []).remove(handler)
                self.logger.debug(f"Unsubscribed handler {_handler_name(handler)} from {event_type.value}")
            except ValueError:
                self.logger.warning(f"Handler {_handler_name(handler)} was not subscribed to {event_type.value}")

    def unsubscribe_all(self, handler: Callable) -> None:
        """Remove a catch-all handler"""
        with self._lock:
            try:
                self._global_handlers.remove(handler)
            except ValueError:
                self.logger.warning(f"Global handler {_handler_name(handler)} was not subscribed")

    def publish(self, event: EventPayload) -> None:
        """Publish event to all subscribers"""
        with self._lock:
            self.logger.debug(f"Publishing event {event.event_type.value} from {event.contract}")

            for handler in list(self._handlers.get(event.event_type, [])):
                try:
                    handler(event)
                except Exception as e:
                    # Log but don't break the main operation
                    self.logger.error(f"Error in event handler {_handler_name(handler)} for {event.event_type.value}: {e}")

            for handler in list(self._global_handlers):
                try:
                    handler(event)
                except Exception as e:
                    self.logger.error(f"Error in global event handler {_handler_name(handler)} for {event.event_type.value}: {e}")

    def clear(self) -> None:
        """Clear all handlers"""
        with self._lock:
            self._handlers.clear()
            self._global_handlers.clear()

    def get_handler_count(self, event_type: Optional[ContractEvent] = None) -> int:
        """Get count of handlers for a specific event type or all"""
        with self._lock:
            if event_type:
                return len(self._handlers.get(event_type, []))
            total = sum(len(handlers) for handlers in self._handlers.values())
            return total + len(self._global_handlers)


# Global event dispatcher instance
_global_dispatcher: Optional[EventDispatcher] = None


def get_global_dispatcher() -> EventDispatcher:
    """Get the global event dispatcher instance"""
    global _global_dispatcher
    if _global_dispatcher is None:
        _global_dispatcher = EventDispatcher()
    return _global_dispatcher


def set_global_dispatcher(dispatcher: EventDispatcher) -> None:
    """Set a custom global event dispatcher"""
    global _global_dispatcher
    _global_dispatcher = dispatcher


class EventPublisherMixin:
    """Mixin to add event publishing to contract components"""

    _event_dispatcher: Optional[EventDispatcher] = None
    contract_address: Address

    def set_event_dispatcher(self, event_dispatcher: EventDispatcher) -> None:
        """Set the event dispatcher for this instance"""
        self._event_dispatcher = event_dispatcher

    def publish_event(self, record: ContractEventRecord) -> EventPayload:
        """Wrap a record and publish it"""
        dispatcher = self._event_dispatcher or get_global_dispatcher()
        payload = EventPayload.wrap(self.contract_address, record)
        dispatcher.publish(payload)
        return payload
