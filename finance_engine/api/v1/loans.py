"""POST /v1/loans/* - single-loan amortization endpoints"""

import logging

from fastapi import APIRouter, HTTPException, Request

from finance_engine.api.dependencies import get_request_id
from finance_engine.api.v1.schemas import (
    AmortizationResponse,
    AmortizationRowSchema,
    LoanRequest,
    MonthsToPayoffRequest,
    MonthsToPayoffResponse,
)
from finance_engine.domain.amortization import (
    amortization_schedule,
    monthly_payment,
    months_to_payoff,
)
from finance_engine.domain.exceptions import DomainException
from finance_engine.domain.models import Nonconvergent

router = APIRouter()


@router.post("/loans/amortization", response_model=AmortizationResponse)
def create_amortization_schedule(request_body: LoanRequest, request: Request):
    """
    Amortize a fixed-term loan.

    Returns:
        Scheduled monthly payment, lifetime interest at that payment and the
        row-by-row schedule (shorter when an extra payment is supplied)
    """
    try:
        rows = amortization_schedule(
            request_body.principal_cents,
            request_body.annual_rate_percent,
            request_body.term_months,
            extra_payment_cents=request_body.extra_payment_cents,
        )
        payment = monthly_payment(
            request_body.principal_cents, request_body.annual_rate_percent, request_body.term_months
        )
    except DomainException as e:
        logging.warning(f"Invalid loan terms: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))

    return AmortizationResponse(
        monthly_payment_cents=payment,
        total_interest_cents=rows[-1].total_interest_cents if rows else 0,
        months=len(rows),
        schedule=[AmortizationRowSchema.model_validate(row) for row in rows],
    )


@router.post("/loans/months-to-payoff", response_model=MonthsToPayoffResponse)
def get_months_to_payoff(request_body: MonthsToPayoffRequest):
    """Closed-form payoff time; converges=false when the payment never covers interest"""
    result = months_to_payoff(
        request_body.balance_cents, request_body.annual_rate_percent, request_body.payment_cents
    )

    if isinstance(result, Nonconvergent):
        return MonthsToPayoffResponse(converges=False, monthly_interest_cents=result.monthly_interest_cents)
    return MonthsToPayoffResponse(converges=True, months=result)
