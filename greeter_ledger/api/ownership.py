"""
Ownership endpoints
"""

from fastapi import APIRouter, Depends

from .deps import get_contract, get_context, parse_address
from .schemas import TransferOwnershipRequest
from ..contract import GreeterContract
from ..environment import ExecutionContext


router = APIRouter()


@router.get("/owner")
async def get_owner(contract: GreeterContract = Depends(get_contract)):
    """Current owner; the zero address once renounced"""
    return {"owner": contract.owner().to_hex()}


@router.post("/transfer")
async def transfer_ownership(
    request: TransferOwnershipRequest,
    ctx: ExecutionContext = Depends(get_context),
    contract: GreeterContract = Depends(get_contract)
):
    new_owner = parse_address(request.new_owner)
    contract.transfer_ownership(ctx, new_owner)
    return {"owner": contract.owner().to_hex(), "message": "Ownership transferred"}


@router.post("/renounce")
async def renounce_ownership(
    ctx: ExecutionContext = Depends(get_context),
    contract: GreeterContract = Depends(get_contract)
):
    contract.renounce_ownership(ctx)
    return {"owner": contract.owner().to_hex(), "message": "Ownership renounced"}
