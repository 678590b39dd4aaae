"""
Withdrawal Service Module

The owner sweeps the contract's whole native balance to the current owner
address. By default the outcome of the host transfer is not checked: a
refused transfer still returns normally and is only logged. Strict mode
raises TransferFailed instead.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .address import Address
from .environment import ExecutionContext, HostEnvironment
from .errors import TransferFailed
from .events import EventDispatcher, EventPublisherMixin, FundsWithdrawn
from .logging_config import log_action
from .ownable import OwnershipGuard


@dataclass(frozen=True)
class WithdrawalResult:
    """What a withdraw call attempted"""
    recipient: Address
    amount: int
    transferred: bool


class WithdrawalService(EventPublisherMixin):
    """Owner-gated balance sweep and value receipt"""

    def __init__(self, guard: OwnershipGuard, host: HostEnvironment,
                 strict: bool = False, event_dispatcher: Optional[EventDispatcher] = None):
        self.guard = guard
        self.host = host
        self.strict = strict
        self.contract_address = host.self_address()
        self.logger = logging.getLogger("greeter.withdrawal")
        if event_dispatcher is not None:
            self.set_event_dispatcher(event_dispatcher)

    def withdraw(self, ctx: ExecutionContext) -> WithdrawalResult:
        self.guard.only_owner(ctx.caller)

        owner = self.guard.current_owner()
        balance = self.host.balance_of(self.contract_address)
        if balance <= 0:
            return WithdrawalResult(recipient=owner, amount=0, transferred=False)

        transferred = self.host.transfer(owner, balance)
        if not transferred:
            if self.strict:
                raise TransferFailed(owner, balance)
            log_action(
                self.logger, "warning", "Withdrawal transfer failed, continuing",
                caller=ctx.caller.to_hex(), action="withdraw", resource="balance",
                extra={'recipient': owner.to_hex(), 'amount': str(balance)}
            )
        else:
            log_action(
                self.logger, "info", "Balance withdrawn",
                caller=ctx.caller.to_hex(), action="withdraw", resource="balance",
                extra={'recipient': owner.to_hex(), 'amount': str(balance)}
            )

        self.publish_event(FundsWithdrawn(recipient=owner, amount=balance, transferred=transferred))
        return WithdrawalResult(recipient=owner, amount=balance, transferred=transferred)

    def receive_funds(self, ctx: ExecutionContext) -> None:
        """Accept attached value; no contract state changes"""
        self.host.accept_value(ctx)
        self.logger.debug(f"Received {ctx.value} from {ctx.caller}")
