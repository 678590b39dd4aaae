"""
Contract and caller dependencies
"""

from typing import Optional
from fastapi import Header, HTTPException

from ..address import Address
from ..contract import GreeterContract
from ..environment import ExecutionContext


_contract: Optional[GreeterContract] = None


def get_contract() -> GreeterContract:
    """Process-wide contract, built from configuration on first use"""
    global _contract
    if _contract is None:
        _contract = GreeterContract.from_config()
    return _contract


def set_contract(contract: Optional[GreeterContract]) -> None:
    """Replace the process-wide contract (None rebuilds it on next use)"""
    global _contract
    _contract = contract


def parse_address(value: str) -> Address:
    try:
        return Address.from_hex(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def parse_amount(value: str) -> int:
    try:
        amount = int(value)
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail=f"Invalid amount: {value!r}")
    if amount < 0:
        raise HTTPException(status_code=400, detail="Amount cannot be negative")
    return amount


def get_context(
    x_caller: str = Header(..., description="Address of the calling account"),
    x_value: str = Header("0", description="Attached native value, decimal string")
) -> ExecutionContext:
    """Caller identity and attached value from request headers"""
    caller = parse_address(x_caller)
    value = parse_amount(x_value)
    try:
        return ExecutionContext(caller=caller, value=value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
