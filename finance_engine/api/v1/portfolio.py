"""POST /v1/portfolio/* - allocation, rebalancing, recommendation and performance endpoints"""

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Request

from finance_engine.api.dependencies import get_request_id, get_settings
from finance_engine.api.v1.schemas import (
    AllocationRecommendationResponse,
    AllocationRequest,
    AllocationResponse,
    DriftEntrySchema,
    HoldingsRequest,
    PerformanceResponse,
    RebalancePlanResponse,
    RecommendationRequest,
)
from finance_engine.config import Settings
from finance_engine.domain.allocation import (
    calculate_drift,
    calculate_performance,
    current_allocation,
    generate_rebalance_plan,
)
from finance_engine.domain.exceptions import DomainException
from finance_engine.domain.recommendation import recommend_allocation
from finance_engine.infrastructure.observability.logging import log_rebalance_plan
from finance_engine.infrastructure.observability.metrics import (
    record_allocation_recommendation,
    record_rebalance_plan,
)

router = APIRouter()


def _threshold(request_body: AllocationRequest, config: Settings) -> float:
    if request_body.threshold_percent is None:
        return config.default_rebalance_threshold_percent
    return request_body.threshold_percent


@router.post("/portfolio/allocation", response_model=AllocationResponse)
def get_allocation(
    request_body: AllocationRequest,
    request: Request,
    config: Settings = Depends(get_settings),
):
    """Current allocation by asset class and its drift from the target"""
    try:
        current = current_allocation([h.to_domain() for h in request_body.holdings])
        analysis = calculate_drift(
            current.allocation, request_body.target_allocation, _threshold(request_body, config)
        )
    except DomainException as e:
        logging.warning(f"Invalid allocation request: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))

    return AllocationResponse(
        current_allocation=current.allocation,
        target_allocation=request_body.target_allocation,
        total_value_cents=current.total_value_cents,
        drifts=[DriftEntrySchema.model_validate(d) for d in analysis.drifts],
        needs_rebalancing=analysis.needs_rebalancing,
        max_drift=analysis.max_drift,
        threshold=analysis.threshold,
    )


@router.post("/portfolio/rebalance", response_model=RebalancePlanResponse)
def create_rebalance_plan(
    request_body: AllocationRequest,
    request: Request,
    config: Settings = Depends(get_settings),
):
    """
    Generate buy/sell trades that restore the target allocation.

    Returns:
        status "within_tolerance" with no trades when no class drifts past
        the threshold; otherwise the trades, largest first
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        plan = generate_rebalance_plan(
            [h.to_domain() for h in request_body.holdings],
            request_body.target_allocation,
            _threshold(request_body, config),
        )
    except DomainException as e:
        logging.warning(f"Invalid rebalance request: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    record_rebalance_plan(plan.status.value)
    log_rebalance_plan(
        request_id,
        plan.status.value,
        len(plan.trades),
        max((abs(d.drift) for d in plan.drifts), default=0.0),
        (time.time() - start_time) * 1000,
    )

    return RebalancePlanResponse.model_validate(plan)


@router.post("/portfolio/recommendation", response_model=AllocationRecommendationResponse)
def get_recommended_allocation(request_body: RecommendationRequest, request: Request):
    """Target allocation for a risk score, age and investment horizon"""
    try:
        recommendation = recommend_allocation(
            request_body.risk_score,
            age=request_body.age,
            horizon=request_body.investment_horizon,
        )
    except DomainException as e:
        logging.warning(f"Invalid risk profile: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))

    record_allocation_recommendation(recommendation.model_key)
    return AllocationRecommendationResponse.model_validate(recommendation)


@router.post("/portfolio/performance", response_model=PerformanceResponse)
def get_performance(request_body: HoldingsRequest, request: Request):
    """Cost basis, market value and unrealized gain per holding and overall"""
    try:
        performance = calculate_performance([h.to_domain() for h in request_body.holdings])
    except DomainException as e:
        logging.warning(f"Invalid holdings: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))

    return PerformanceResponse.model_validate(performance)
