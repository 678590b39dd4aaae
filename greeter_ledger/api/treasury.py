"""
Treasury endpoints
"""

from fastapi import APIRouter, Depends

from .deps import get_contract, get_context
from .schemas import WithdrawalResponse
from ..contract import GreeterContract
from ..environment import ExecutionContext


router = APIRouter()


@router.get("/balance")
async def get_contract_balance(contract: GreeterContract = Depends(get_contract)):
    return {"address": contract.address.to_hex(), "balance": str(contract.get_balance(contract.address))}


@router.post("/withdraw", response_model=WithdrawalResponse)
async def withdraw(
    ctx: ExecutionContext = Depends(get_context),
    contract: GreeterContract = Depends(get_contract)
):
    """Sweep the contract balance to the owner (owner only)"""
    result = contract.withdraw(ctx)
    return WithdrawalResponse(
        recipient=result.recipient.to_hex(),
        amount=str(result.amount),
        transferred=result.transferred
    )


@router.post("/receive")
async def receive_funds(
    ctx: ExecutionContext = Depends(get_context),
    contract: GreeterContract = Depends(get_contract)
):
    contract.receive_funds(ctx)
    return {"received": str(ctx.value), "balance": str(contract.get_balance(contract.address))}
