"""POST /v1/yield - gross and net rental yield"""

import time
from fastapi import APIRouter, Request

from propcalc.api.v1.schemas import PortfolioYieldRequest, PortfolioYieldResponse, YieldRequest, YieldResponse
from propcalc.api.dependencies import get_request_id
from propcalc.domain.rental_yield import calculate_gross_yield, calculate_net_yield, summarise_portfolio_yields
from propcalc.infrastructure.observability.metrics import record_calculation
from propcalc.infrastructure.observability.logging import log_calculation
from propcalc.utils.date_utils import round_money

router = APIRouter()


def _yields(item: YieldRequest) -> YieldResponse:
    return YieldResponse(
        gross_yield=round_money(calculate_gross_yield(item.annual_rent, item.property_value)),
        net_yield=round_money(calculate_net_yield(item.annual_rent, item.annual_expenses, item.property_value)),
    )


@router.post("/yield", response_model=YieldResponse)
def property_yield(request_body: YieldRequest, request: Request):
    start_time = time.time()

    response = _yields(request_body)

    record_calculation("yield")
    log_calculation(
        get_request_id(request), "yield", (time.time() - start_time) * 1000,
        gross_yield=response.gross_yield,
        net_yield=response.net_yield,
    )
    return response


@router.post("/yield/portfolio", response_model=PortfolioYieldResponse)
def portfolio_yield(request_body: PortfolioYieldRequest, request: Request):
    """Per-property yields plus portfolio averages"""
    start_time = time.time()

    summary = summarise_portfolio_yields(
        (p.annual_rent, p.annual_expenses, p.property_value) for p in request_body.properties
    )

    record_calculation("yield_portfolio")
    log_calculation(
        get_request_id(request), "yield_portfolio", (time.time() - start_time) * 1000,
        properties=len(request_body.properties),
    )

    return PortfolioYieldResponse(
        properties=[_yields(p) for p in request_body.properties],
        **summary,
    )
