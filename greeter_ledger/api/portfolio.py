"""
Portfolio query endpoints
"""

from decimal import Decimal, InvalidOperation
from fastapi import APIRouter, Depends, HTTPException

from .deps import get_contract, parse_address
from .schemas import (
    AccountsRequest, AssetBalancesRequest, PortfolioRequest,
    MultiplePortfoliosRequest, ValuationRequest
)
from ..contract import GreeterContract
from ..valuation import AssetQuote, DEFAULT_QUOTES, format_usd


router = APIRouter()


def _amounts(values):
    return [str(v) for v in values]


@router.get("/balances/{address}")
async def get_balance(address: str, contract: GreeterContract = Depends(get_contract)):
    account = parse_address(address)
    return {"address": account.to_hex(), "balance": str(contract.get_balance(account))}


@router.post("/balances")
async def get_balances(request: AccountsRequest, contract: GreeterContract = Depends(get_contract)):
    """Balances in request order, duplicates included"""
    accounts = [parse_address(a) for a in request.accounts]
    return {"balances": _amounts(contract.get_balances(accounts))}


@router.post("/assets")
async def get_asset_balances(request: AssetBalancesRequest, contract: GreeterContract = Depends(get_contract)):
    assets = [parse_address(a) for a in request.assets]
    account = parse_address(request.account)
    return {"account": account.to_hex(), "balances": _amounts(contract.get_mock_asset_balances(assets, account))}


@router.post("/portfolio")
async def get_portfolio(request: PortfolioRequest, contract: GreeterContract = Depends(get_contract)):
    account = parse_address(request.account)
    assets = [parse_address(a) for a in request.assets]
    balance, asset_balances = contract.get_portfolio(account, assets)
    return {"account": account.to_hex(), "balance": str(balance), "asset_balances": _amounts(asset_balances)}


@router.post("/portfolios")
async def get_multiple_portfolios(request: MultiplePortfoliosRequest,
                                  contract: GreeterContract = Depends(get_contract)):
    accounts = [parse_address(a) for a in request.accounts]
    assets = [parse_address(a) for a in request.assets]
    balances, matrix = contract.get_multiple_portfolios(accounts, assets)
    return {"balances": _amounts(balances), "asset_balances": [_amounts(row) for row in matrix]}


@router.post("/valuation")
async def value_portfolio(request: ValuationRequest, contract: GreeterContract = Depends(get_contract)):
    """USD valuation of an account's holdings"""
    account = parse_address(request.account)
    if request.quotes is None:
        quotes = DEFAULT_QUOTES
    else:
        try:
            quotes = [
                AssetQuote(q.symbol, q.name, parse_address(q.address), Decimal(q.price))
                for q in request.quotes
            ]
        except InvalidOperation:
            raise HTTPException(status_code=400, detail="Invalid price")

    summary = contract.value_portfolio(account, quotes)
    largest = summary.largest_holding
    return {
        "account": account.to_hex(),
        "total_value": str(summary.total_value),
        "total_display": format_usd(summary.total_value),
        "largest_holding": largest.quote.symbol if largest else None,
        "largest_share_percent": summary.largest_share_percent,
        "holdings": [
            {
                "symbol": h.quote.symbol,
                "address": h.quote.address.to_hex(),
                "raw_balance": str(h.raw_balance),
                "units": str(h.units),
                "usd_value": str(h.usd_value),
            }
            for h in summary.holdings
        ]
    }
