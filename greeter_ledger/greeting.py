"""
Greeting Service Module

Anyone may replace the greeting. Every call bumps the global counter and
the caller's own counter by one, recomputes the premium flag from the
attached value and emits exactly one GreetingChange.
"""

import logging
from typing import Optional

from .address import Address, checked_add
from .environment import ExecutionContext
from .events import EventDispatcher, EventPublisherMixin, GreetingChange
from .logging_config import log_action
from .state import LedgerState


class GreetingService(EventPublisherMixin):
    """Greeting mutations and reads"""

    def __init__(self, state: LedgerState, contract_address: Address,
                 event_dispatcher: Optional[EventDispatcher] = None):
        self.state = state
        self.contract_address = contract_address
        self.logger = logging.getLogger("greeter.greeting")
        if event_dispatcher is not None:
            self.set_event_dispatcher(event_dispatcher)

    def set_greeting(self, ctx: ExecutionContext, new_greeting: str) -> GreetingChange:
        """
        Replace the greeting and update counters.

        Args:
            ctx: Caller identity and attached value
            new_greeting: Stored verbatim, empty string allowed

        Returns:
            The emitted GreetingChange record
        """
        if not isinstance(new_greeting, str):
            raise TypeError(f"Greeting must be a string, got {type(new_greeting).__name__}")

        current = self.state.snapshot()
        # Both increments are computed before any write so an overflow leaves state untouched
        total = checked_add(current.total_counter, 1)
        caller_count = checked_add(self.state.user_counter(ctx.caller), 1)
        premium = ctx.value > 0

        self.state.write_greeting(new_greeting, premium, total, ctx.caller, caller_count)

        log_action(
            self.logger, "debug", "Greeting changed",
            caller=ctx.caller.to_hex(), action="set_greeting", resource="greeting",
            extra={'premium': premium, 'value': str(ctx.value), 'total_counter': str(total)}
        )

        event = GreetingChange(
            greeting_setter=ctx.caller,
            new_greeting=new_greeting,
            premium=premium,
            value=ctx.value
        )
        self.publish_event(event)
        return event

    def get_greeting(self) -> str:
        return self.state.get_greeting()

    def is_premium(self) -> bool:
        return self.state.is_premium()

    def total_counter(self) -> int:
        return self.state.total_counter()

    def user_counter(self, account: Address) -> int:
        return self.state.user_counter(account)
