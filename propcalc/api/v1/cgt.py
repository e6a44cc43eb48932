"""POST /v1/cgt/* - cost base and capital gain calculators"""

import time
import logging
from fastapi import APIRouter, HTTPException, Request

from propcalc.api.v1.schemas import (
    CapitalGainRequest,
    CapitalGainResponse,
    CostBaseRequest,
    CostBaseResponse,
)
from propcalc.api.dependencies import get_request_id
from propcalc.domain.cgt import CAPITAL_CATEGORIES, calculate_capital_gain, calculate_cost_base, months_held
from propcalc.domain.models import CapitalGainInput, CapitalTransaction, SellingCosts
from propcalc.infrastructure.observability.metrics import record_calculation
from propcalc.infrastructure.observability.logging import log_calculation

router = APIRouter()


@router.post("/cgt/cost-base", response_model=CostBaseResponse)
def cost_base(request_body: CostBaseRequest, request: Request):
    """Purchase price plus acquisition costs; other categories are ignored"""
    start_time = time.time()
    request_id = get_request_id(request)

    transactions = [CapitalTransaction(**t.model_dump()) for t in request_body.transactions]
    total_cost_base = calculate_cost_base(request_body.purchase_price, transactions)
    acquisition_costs = [t for t in request_body.transactions if t.category in CAPITAL_CATEGORIES]

    record_calculation("cgt_cost_base")
    log_calculation(
        request_id, "cgt_cost_base", (time.time() - start_time) * 1000,
        total_cost_base=total_cost_base,
    )

    return CostBaseResponse(
        purchase_price=request_body.purchase_price,
        acquisition_costs=acquisition_costs,
        total_acquisition_costs=total_cost_base - request_body.purchase_price,
        total_cost_base=total_cost_base,
    )


@router.post("/cgt/capital-gain", response_model=CapitalGainResponse)
def capital_gain(request_body: CapitalGainRequest, request: Request):
    """
    Capital gain on sale with the 50% discount for assets held 12+ months.

    Losses are reported undiscounted.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    if request_body.settlement_date < request_body.purchase_date:
        logging.warning("Settlement before purchase", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail="settlement_date must not precede purchase_date")

    result = calculate_capital_gain(CapitalGainInput(
        cost_base=request_body.cost_base,
        sale_price=request_body.sale_price,
        selling_costs=SellingCosts(**request_body.selling_costs.model_dump()),
        purchase_date=request_body.purchase_date,
        settlement_date=request_body.settlement_date,
    ))

    record_calculation("cgt_capital_gain")
    log_calculation(
        request_id, "cgt_capital_gain", (time.time() - start_time) * 1000,
        capital_gain=result.capital_gain,
        discounted=result.held_over_twelve_months,
    )

    return CapitalGainResponse(
        total_selling_costs=result.total_selling_costs,
        net_proceeds=result.net_proceeds,
        capital_gain=result.capital_gain,
        discounted_gain=result.discounted_gain,
        held_over_twelve_months=result.held_over_twelve_months,
        months_held=months_held(request_body.purchase_date, request_body.settlement_date),
    )
