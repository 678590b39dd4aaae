"""
Greeting endpoints
"""

from fastapi import APIRouter, Depends, status

from .deps import get_contract, get_context, parse_address
from .schemas import SetGreetingRequest, GreetingStateResponse, GreetingChangeResponse
from ..contract import GreeterContract
from ..environment import ExecutionContext


router = APIRouter()


@router.get("", response_model=GreetingStateResponse)
async def get_greeting(contract: GreeterContract = Depends(get_contract)):
    """Greeting text, premium flag and global counter"""
    return GreetingStateResponse(
        greeting=contract.greeting(),
        premium=contract.premium(),
        total_counter=str(contract.total_counter())
    )


@router.post("", response_model=GreetingChangeResponse, status_code=status.HTTP_201_CREATED)
async def set_greeting(
    request: SetGreetingRequest,
    ctx: ExecutionContext = Depends(get_context),
    contract: GreeterContract = Depends(get_contract)
):
    """Replace the greeting; any attached value makes it premium"""
    event = contract.set_greeting(ctx, request.greeting)
    return GreetingChangeResponse(**event.to_data())


@router.get("/counters/{address}")
async def get_user_counter(address: str, contract: GreeterContract = Depends(get_contract)):
    account = parse_address(address)
    return {"address": account.to_hex(), "counter": str(contract.user_greeting_counter(account))}
