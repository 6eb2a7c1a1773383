# services/holdings/fund_holdings_service.py
"""
Sample top-10 holdings for a handful of Indian equity funds.

Stands in for a real holdings feed so portfolios can be submitted by fund
name only. Unknown funds return None; nothing is synthesized.
"""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

from schemas.portfolio_analysis import Holding

logger = logging.getLogger(__name__)


def _h(company: str, sector: str, weight: float) -> Holding:
    return Holding(company=company, sector=sector, weight=weight)


FUND_HOLDINGS_CATALOG: Mapping[str, Tuple[Holding, ...]] = MappingProxyType({
    "Axis Bluechip Fund": (
        _h("Reliance Industries", "Energy", 8.2),
        _h("HDFC Bank", "Banking", 7.8),
        _h("Infosys", "IT", 6.5),
        _h("ICICI Bank", "Banking", 5.9),
        _h("TCS", "IT", 5.4),
        _h("Bharti Airtel", "Telecom", 4.8),
        _h("HUL", "FMCG", 4.2),
        _h("ITC", "FMCG", 3.9),
        _h("Larsen & Toubro", "Engineering", 3.5),
        _h("Kotak Bank", "Banking", 3.2),
    ),
    "HDFC Mid-Cap Opportunities": (
        _h("Avenue Supermarts", "Retail", 6.8),
        _h("PI Industries", "Agro Chemicals", 5.9),
        _h("Coforge", "IT", 5.4),
        _h("Tata Consumer", "FMCG", 5.1),
        _h("Jubilant FoodWorks", "Food Service", 4.8),
        _h("Muthoot Finance", "NBFC", 4.5),
        _h("Cholamandalam Investment", "Finance", 4.2),
        _h("Tata Elxsi", "IT", 3.9),
        _h("Godrej Consumer", "FMCG", 3.6),
        _h("Aubank", "NBFC", 3.3),
    ),
    "SBI Small Cap Fund": (
        _h("Solar Industries", "Defense", 5.2),
        _h("Fine Organic", "Chemicals", 4.8),
        _h("Capri Global", "NBFC", 4.5),
        _h("Ratnamani Metals", "Metals", 4.2),
        _h("Kirloskar Oil Engines", "Engineering", 3.9),
        _h("Shakti Pumps", "Industrial", 3.6),
        _h("Vardhman Textiles", "Textiles", 3.3),
        _h("Time Technoplast", "Packaging", 3.0),
        _h("Jindal Steel", "Steel", 2.8),
        _h("Apar Industries", "Energy", 2.5),
    ),
    "Mirae Asset Large Cap Fund": (
        _h("Reliance Industries", "Energy", 9.1),
        _h("TCS", "IT", 8.3),
        _h("HDFC Bank", "Banking", 7.8),
        _h("Infosys", "IT", 6.9),
        _h("ICICI Bank", "Banking", 6.2),
        _h("HUL", "FMCG", 5.4),
        _h("Bharti Airtel", "Telecom", 4.8),
        _h("Kotak Bank", "Banking", 4.1),
        _h("ITC", "FMCG", 3.7),
        _h("Larsen & Toubro", "Engineering", 3.3),
    ),
    "Parag Parikh Flexi Cap Fund": (
        _h("HDFC Bank", "Banking", 8.5),
        _h("Reliance Industries", "Energy", 7.2),
        _h("Infosys", "IT", 6.8),
        _h("TCS", "IT", 5.9),
        _h("ICICI Bank", "Banking", 5.3),
        _h("HUL", "FMCG", 4.8),
        _h("Bharti Airtel", "Telecom", 4.2),
        _h("Kotak Bank", "Banking", 3.7),
        _h("ITC", "FMCG", 3.4),
        _h("Larsen & Toubro", "Engineering", 3.0),
    ),
})


def list_catalog_funds() -> List[str]:
    return list(FUND_HOLDINGS_CATALOG)


def get_fund_holdings(fund_name: str) -> Optional[List[Holding]]:
    holdings = FUND_HOLDINGS_CATALOG.get((fund_name or "").strip())
    if holdings is None:
        logger.info("fund_holdings_not_found catalog_size=%d", len(FUND_HOLDINGS_CATALOG))
        return None
    return list(holdings)
