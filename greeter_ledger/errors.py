"""
Contract error types.

Ownership failures subclass ValueError so code that already treats
ValueError as "rejected input" keeps working.
"""

from .address import Address


class LedgerError(Exception):
    """Base class for contract errors"""


class OwnableError(LedgerError, ValueError):
    """Base class for ownership guard failures"""


class UnauthorizedAccount(OwnableError):
    """The caller is not the owner of the contract"""

    def __init__(self, account: Address):
        self.account = account
        super().__init__(f"Unauthorized account: {account}")


class InvalidOwner(OwnableError):
    """The zero address was given where an owner is required"""

    def __init__(self, owner: Address):
        self.owner = owner
        super().__init__(f"Invalid owner: {owner}")


class TransferFailed(LedgerError):
    """A native-currency transfer was refused (strict withdrawals only)"""

    def __init__(self, recipient: Address, amount: int):
        self.recipient = recipient
        self.amount = amount
        super().__init__(f"Transfer of {amount} to {recipient} failed")
