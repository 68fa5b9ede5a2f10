"""POST /v1/debts/* - debt payoff simulation and strategy comparison endpoints"""

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Request

from finance_engine.api.dependencies import get_request_id, get_settings
from finance_engine.api.v1.schemas import (
    DebtListRequest,
    DebtOverviewResponse,
    PayoffScheduleRequest,
    PayoffScheduleResponse,
    StrategyComparisonResponse,
)
from finance_engine.config import Settings
from finance_engine.domain.comparison import compare_strategies, debt_overview
from finance_engine.domain.exceptions import DomainException
from finance_engine.domain.payoff import generate_payoff_schedule
from finance_engine.infrastructure.observability.logging import log_simulation
from finance_engine.infrastructure.observability.metrics import record_recommendation, record_simulation

router = APIRouter()


@router.post("/debts/payoff-schedule", response_model=PayoffScheduleResponse)
def create_payoff_schedule(
    request_body: PayoffScheduleRequest,
    request: Request,
    config: Settings = Depends(get_settings),
):
    """
    Simulate month-by-month payoff of a debt list under one strategy.

    Returns:
        Full monthly schedule plus summary; summary.status is "exhausted"
        when the debts would not be cleared within the simulation horizon
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        result = generate_payoff_schedule(
            [debt.to_domain() for debt in request_body.debts],
            monthly_extra_cents=request_body.monthly_extra_cents,
            strategy=request_body.strategy,
            max_months=config.max_simulation_months,
            cascade_extra=config.cascade_extra_payments,
            start_date=request_body.start_date,
        )
    except DomainException as e:
        logging.warning(f"Invalid payoff request: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    summary = result.summary
    record_simulation(summary.strategy.value, summary.status.value, summary.total_months)
    log_simulation(
        request_id,
        "payoff_schedule",
        summary.strategy.value,
        summary.status.value,
        summary.total_months,
        (time.time() - start_time) * 1000,
    )

    return PayoffScheduleResponse.model_validate(result)


@router.post("/debts/compare", response_model=StrategyComparisonResponse)
def compare_payoff_strategies(
    request_body: DebtListRequest,
    request: Request,
    config: Settings = Depends(get_settings),
):
    """
    Compare Snowball and Avalanche against a minimum-payments-only baseline.

    Flow:
    1. Simulate Snowball and Avalanche with the monthly extra
    2. Simulate Avalanche with no extra as the baseline
    3. Derive savings, quick wins and a recommended strategy
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        comparison = compare_strategies(
            [debt.to_domain() for debt in request_body.debts],
            monthly_extra_cents=request_body.monthly_extra_cents,
            max_months=config.max_simulation_months,
            cascade_extra=config.cascade_extra_payments,
            start_date=request_body.start_date,
        )
    except DomainException as e:
        logging.warning(f"Invalid comparison request: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    for summary in (comparison.snowball, comparison.avalanche):
        record_simulation(summary.strategy.value, summary.status.value, summary.total_months)
    record_recommendation(comparison.recommendation.strategy.value)
    log_simulation(
        request_id,
        "strategy_comparison",
        comparison.recommendation.strategy.value,
        comparison.avalanche.status.value,
        comparison.avalanche.total_months,
        (time.time() - start_time) * 1000,
    )

    return StrategyComparisonResponse.model_validate(comparison)


@router.post("/debts/overview", response_model=DebtOverviewResponse)
def get_debt_overview(
    request_body: DebtListRequest,
    request: Request,
    config: Settings = Depends(get_settings),
):
    """Totals for a debt list and its projected debt-free date under Avalanche"""
    try:
        overview = debt_overview(
            [debt.to_domain() for debt in request_body.debts],
            monthly_extra_cents=request_body.monthly_extra_cents,
            max_months=config.max_simulation_months,
            start_date=request_body.start_date,
        )
    except DomainException as e:
        logging.warning(f"Invalid overview request: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))

    return DebtOverviewResponse.model_validate(overview)
