# routers/funds_routes.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from schemas.portfolio_analysis import FundHolding, Holding
from services.holdings.fund_holdings_service import get_fund_holdings, list_catalog_funds

router = APIRouter()


class FundIn(BaseModel):
    """A fund as submitted by the client. Holdings are looked up by name when omitted."""
    name: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    holdings: Optional[List[Holding]] = None


def resolve_funds(funds: List[FundIn]) -> List[FundHolding]:
    resolved: List[FundHolding] = []
    for f in funds:
        holdings = f.holdings if f.holdings is not None else get_fund_holdings(f.name)
        if holdings is None:
            raise HTTPException(status_code=404, detail=f"No holdings data for fund '{f.name}'")
        resolved.append(FundHolding(name=f.name, amount=f.amount, holdings=holdings))
    return resolved


@router.get("/catalog")
def catalog() -> dict:
    return {"funds": list_catalog_funds()}


@router.get("/catalog/{fund_name}")
def catalog_fund(fund_name: str) -> dict:
    holdings = get_fund_holdings(fund_name)
    if holdings is None:
        raise HTTPException(status_code=404, detail="Fund not found")
    return {"name": fund_name, "holdings": [h.model_dump() for h in holdings]}
