"""
Address and Wide Integer Module

Account addresses are 20 raw bytes with a 0x-prefixed hex text form.
Amounts and counters are unsigned 256-bit integers held in plain ints;
arithmetic that would leave the range raises instead of wrapping.
"""

from dataclasses import dataclass
from typing import Union
import re

ADDRESS_LENGTH = 20
MAX_UINT256 = 2 ** 256 - 1

_HEX_ADDRESS = re.compile(r"^0x[0-9a-fA-F]{40}$")


@dataclass(frozen=True)
class Address:
    """
    Immutable 20-byte account address.
    Compares and hashes by its raw bytes, so it can key a dict.
    """
    raw: bytes

    def __post_init__(self):
        if not isinstance(self.raw, (bytes, bytearray)):
            raise TypeError(f"Address bytes expected, got {type(self.raw).__name__}")
        if len(self.raw) != ADDRESS_LENGTH:
            raise ValueError(f"Address must be {ADDRESS_LENGTH} bytes, got {len(self.raw)}")
        object.__setattr__(self, 'raw', bytes(self.raw))

    @classmethod
    def from_hex(cls, value: str) -> 'Address':
        """Parse a 0x-prefixed, 40 hex digit address (any case)"""
        if not isinstance(value, str) or not _HEX_ADDRESS.match(value):
            raise ValueError(f"Invalid address: {value!r}")
        return cls(bytes.fromhex(value[2:]))

    @classmethod
    def parse(cls, value: Union['Address', str, bytes]) -> 'Address':
        """Accept an Address, its hex text or its raw bytes"""
        if isinstance(value, Address):
            return value
        if isinstance(value, str):
            return cls.from_hex(value)
        return cls(value)

    @classmethod
    def repeat(cls, byte: int) -> 'Address':
        """Address made of one repeated byte, e.g. repeat(1) == 0x0101...01"""
        return cls(bytes([byte]) * ADDRESS_LENGTH)

    def to_hex(self) -> str:
        return "0x" + self.raw.hex()

    def is_zero(self) -> bool:
        return self.raw == ZERO_BYTES

    def __str__(self) -> str:
        return self.to_hex()

    def __repr__(self) -> str:
        return f"Address({self.to_hex()})"


ZERO_BYTES = bytes(ADDRESS_LENGTH)
ZERO_ADDRESS = Address(ZERO_BYTES)


def ensure_uint256(value: int, name: str = "value") -> int:
    """Validate that value is an int in the unsigned 256-bit range"""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0 or value > MAX_UINT256:
        raise ValueError(f"{name} out of uint256 range: {value}")
    return value


def checked_add(a: int, b: int) -> int:
    """Add two uint256 values, raising OverflowError past 2**256 - 1"""
    result = a + b
    if result > MAX_UINT256:
        raise OverflowError(f"uint256 overflow: {a} + {b}")
    return result
