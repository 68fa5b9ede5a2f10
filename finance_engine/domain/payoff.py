"""Month-by-month debt payoff simulation for the Snowball and Avalanche strategies"""

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence

from finance_engine.domain.amortization import monthly_interest
from finance_engine.domain.exceptions import InvalidDebtError
from finance_engine.domain.models import (
    Debt,
    DebtPayment,
    DebtPayoffOrder,
    DebtState,
    PayoffResult,
    PayoffScheduleEntry,
    PayoffStatus,
    PayoffStrategy,
    StrategySummary,
)
from finance_engine.utils.date_utils import add_months

logger = logging.getLogger(__name__)

# 30-year horizon; deployments override it through settings.max_simulation_months
DEFAULT_MAX_MONTHS = 360


@dataclass
class _MonthPayment:
    """Accumulates one debt's payments while its month is still open"""

    state: DebtState
    payment_cents: int
    interest_cents: int
    is_extra: bool = False

    def freeze(self) -> DebtPayment:
        return DebtPayment(
            debt_id=self.state.debt_id,
            debt_name=self.state.name,
            payment_cents=self.payment_cents,
            interest_cents=self.interest_cents,
            principal_cents=self.payment_cents - self.interest_cents,
            balance_after_cents=self.state.balance_cents,
            is_extra=self.is_extra,
        )


def validate_debts(debts: Sequence[Debt]) -> None:
    for debt in debts:
        if debt.current_balance_cents < 0:
            raise InvalidDebtError(f"Debt {debt.id} has a negative balance")
        if not math.isfinite(debt.annual_rate_percent) or debt.annual_rate_percent < 0:
            raise InvalidDebtError(f"Debt {debt.id} has an invalid interest rate")
        if debt.minimum_payment_cents < 0:
            raise InvalidDebtError(f"Debt {debt.id} has a negative minimum payment")
        if debt.original_balance_cents is not None and debt.original_balance_cents < 0:
            raise InvalidDebtError(f"Debt {debt.id} has a negative original balance")


def generate_payoff_schedule(
    debts: Sequence[Debt],
    monthly_extra_cents: int = 0,
    strategy: PayoffStrategy = PayoffStrategy.AVALANCHE,
    max_months: int = DEFAULT_MAX_MONTHS,
    cascade_extra: bool = False,
    start_date: Optional[date] = None,
) -> PayoffResult:
    """
    Simulate paying down debts one month at a time.

    Each month:
    1. Every active debt accrues interest, then pays its minimum
       (never more than the balance). Minimums of paid-off debts are freed.
    2. The extra pool (monthly extra + freed minimums) goes to the focus
       debt, the first active debt in strategy order.
    3. Without cascade_extra, pool money the focus debt cannot absorb is
       not spent this month. With it, the remainder flows to the next
       active debt in order.

    The ordering is fixed before the first month. The simulation stops when
    every debt is paid off or after max_months, in which case the summary
    status is EXHAUSTED and unpaid debts have no payoff month.

    Args:
        debts: Caller-owned debt records (not modified)
        monthly_extra_cents: Discretionary amount on top of all minimums
        strategy: Ordering policy
        max_months: Simulation horizon
        cascade_extra: Spend leftover extra on subsequent debts within a month
        start_date: Month 0 for payoff dates (default: today)

    Returns:
        PayoffResult with the monthly schedule and a StrategySummary
    """
    if monthly_extra_cents < 0:
        raise InvalidDebtError("Monthly extra payment cannot be negative")
    if max_months <= 0:
        raise InvalidDebtError("Simulation horizon must be at least one month")
    validate_debts(debts)

    if start_date is None:
        start_date = date.today()

    states = [DebtState.from_debt(debt) for debt in strategy.order(debts)]
    for state in states:
        state.settle_if_paid(month=0)

    schedule: List[PayoffScheduleEntry] = []
    total_interest = 0
    total_paid = 0
    month = 0

    while any(state.active for state in states) and month < max_months:
        month += 1
        month_payments: List[_MonthPayment] = []
        freed_minimums = 0

        # Interest first, then minimum payments
        for state in states:
            if not state.active:
                freed_minimums += state.minimum_payment_cents
                continue

            interest = monthly_interest(state.balance_cents, state.annual_rate_percent)
            state.balance_cents += interest
            total_interest += interest

            payment = min(state.minimum_payment_cents, state.balance_cents)
            state.balance_cents -= payment
            total_paid += payment
            month_payments.append(_MonthPayment(state=state, payment_cents=payment, interest_cents=interest))

            if state.settle_if_paid(month):
                freed_minimums += state.minimum_payment_cents

        # Extra pool to the focus debt
        extra_pool = monthly_extra_cents + freed_minimums
        for entry in month_payments:
            if extra_pool <= 0:
                break
            state = entry.state
            if not state.active:
                continue

            extra = min(extra_pool, state.balance_cents)
            state.balance_cents -= extra
            total_paid += extra
            extra_pool -= extra
            entry.payment_cents += extra
            entry.is_extra = True
            state.settle_if_paid(month)

            if not cascade_extra:
                break

        payments = [entry.freeze() for entry in month_payments]
        schedule.append(
            PayoffScheduleEntry(
                month=month,
                payments=payments,
                total_payment_cents=sum(p.payment_cents for p in payments),
                remaining_debt_count=sum(1 for state in states if state.active),
                total_remaining_cents=sum(state.balance_cents for state in states),
            )
        )

    status = PayoffStatus.PAID_OFF
    if any(state.active for state in states):
        status = PayoffStatus.EXHAUSTED
        logger.warning(
            "Payoff simulation reached horizon with debt remaining",
            extra={
                "strategy": strategy.value,
                "max_months": max_months,
                "unpaid_debts": [state.debt_id for state in states if state.active],
            },
        )

    summary = StrategySummary(
        strategy=strategy,
        status=status,
        total_months=month,
        total_interest_cents=total_interest,
        total_paid_cents=total_paid,
        original_total_cents=sum(state.starting_balance_cents for state in states),
        payoff_date=add_months(start_date, month) if status is PayoffStatus.PAID_OFF else None,
        debt_payoff_order=[
            DebtPayoffOrder(
                debt_id=state.debt_id,
                name=state.name,
                original_balance_cents=state.original_balance_cents,
                payoff_month=state.payoff_month,
                payoff_date=add_months(start_date, state.payoff_month) if state.payoff_month is not None else None,
            )
            for state in states
        ],
    )

    return PayoffResult(schedule=schedule, summary=summary)


def snowball_schedule(debts: Sequence[Debt], monthly_extra_cents: int = 0, **kwargs) -> PayoffResult:
    """Payoff schedule prioritizing the smallest balances first"""
    return generate_payoff_schedule(debts, monthly_extra_cents, PayoffStrategy.SNOWBALL, **kwargs)


def avalanche_schedule(debts: Sequence[Debt], monthly_extra_cents: int = 0, **kwargs) -> PayoffResult:
    """Payoff schedule prioritizing the highest interest rates first"""
    return generate_payoff_schedule(debts, monthly_extra_cents, PayoffStrategy.AVALANCHE, **kwargs)
