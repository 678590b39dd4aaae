"""
Pydantic schemas for API requests and responses

Wide integers travel as decimal strings; addresses as 0x-prefixed hex.
"""

from typing import List, Optional
from pydantic import BaseModel, Field


class TransferOwnershipRequest(BaseModel):
    new_owner: str = Field(..., description="Address of the new owner")


class SetGreetingRequest(BaseModel):
    greeting: str = Field(..., description="New greeting text, stored verbatim")


class GreetingStateResponse(BaseModel):
    greeting: str
    premium: bool
    total_counter: str


class GreetingChangeResponse(BaseModel):
    greeting_setter: str
    new_greeting: str
    premium: bool
    value: str


class WithdrawalResponse(BaseModel):
    recipient: str
    amount: str
    transferred: bool


class AccountsRequest(BaseModel):
    accounts: List[str]


class AssetBalancesRequest(BaseModel):
    assets: List[str]
    account: str


class PortfolioRequest(BaseModel):
    account: str
    assets: List[str]


class MultiplePortfoliosRequest(BaseModel):
    accounts: List[str]
    assets: List[str]


class QuoteModel(BaseModel):
    symbol: str
    name: str
    address: str
    price: str = Field(..., description="USD price as decimal string")


class ValuationRequest(BaseModel):
    account: str
    quotes: Optional[List[QuoteModel]] = None  # None = default catalog
