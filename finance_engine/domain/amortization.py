"""Loan amortization math shared by the payoff simulator and loan endpoints"""

import math
from decimal import Decimal
from typing import List, Union

from finance_engine.domain.exceptions import InvalidLoanTermsError
from finance_engine.domain.models import PAID_OFF_EPSILON_CENTS, AmortizationRow, Nonconvergent
from finance_engine.utils.money import HUNDREDTH, percent_of, round_cents, round_percent, to_decimal


def _monthly_rate(annual_rate_percent: float) -> Decimal:
    return to_decimal(annual_rate_percent) / Decimal(1200)


def monthly_interest(balance_cents: int, annual_rate_percent: float) -> int:
    """
    Interest accrued on a balance over one month, rounded half-up to the cent.

    Rounding happens here, at every monthly step, so that long simulations
    reproduce the same totals regardless of how many months they run.
    """
    if balance_cents <= 0 or annual_rate_percent <= 0:
        return 0
    return round_cents(Decimal(balance_cents) * _monthly_rate(annual_rate_percent))


def monthly_payment(principal_cents: int, annual_rate_percent: float, term_months: int) -> int:
    """
    Fixed monthly payment that amortizes principal over term_months.

    Uses the standard annuity formula P * r(1+r)^n / ((1+r)^n - 1); a zero
    rate degrades to an even split of the principal.
    """
    if principal_cents <= 0:
        return 0
    if term_months <= 0:
        raise InvalidLoanTermsError(f"Loan term must be positive, got {term_months}")
    if annual_rate_percent <= 0:
        return round_cents(Decimal(principal_cents) / term_months)

    rate = _monthly_rate(annual_rate_percent)
    growth = (1 + rate) ** term_months
    return round_cents(Decimal(principal_cents) * rate * growth / (growth - 1))


def months_to_payoff(
    balance_cents: int, annual_rate_percent: float, payment_cents: int
) -> Union[int, Nonconvergent]:
    """
    Months needed to clear a balance with a fixed payment.

    Returns Nonconvergent instead of a number when the payment does not
    exceed the first month's interest: such a loan never amortizes.
    """
    if balance_cents <= 0:
        return 0

    interest = monthly_interest(balance_cents, annual_rate_percent)
    if payment_cents <= interest:
        return Nonconvergent(monthly_interest_cents=interest, payment_cents=payment_cents)

    if annual_rate_percent <= 0:
        return math.ceil(balance_cents / payment_cents)

    rate = float(_monthly_rate(annual_rate_percent))
    coverage = balance_cents * rate / payment_cents
    if coverage >= 1:
        # Rounded interest hid an unrounded shortfall
        return Nonconvergent(monthly_interest_cents=interest, payment_cents=payment_cents)

    months = -math.log(1 - coverage) / math.log(1 + rate)
    return math.ceil(round(months, 9))


def amortization_schedule(
    principal_cents: int,
    annual_rate_percent: float,
    term_months: int,
    extra_payment_cents: int = 0,
) -> List[AmortizationRow]:
    """
    Generate the payment-by-payment schedule of a fixed-term loan.

    Requirements:
    - Interest is computed on the opening balance of every month
    - An extra payment shortens the schedule but never overpays the balance
    - The final scheduled payment absorbs any cent left by payment rounding
    - Safety limit of twice the term
    """
    if principal_cents <= 0:
        return []
    if extra_payment_cents < 0:
        raise InvalidLoanTermsError("Extra payment cannot be negative")

    scheduled_payment = monthly_payment(principal_cents, annual_rate_percent, term_months)
    payment_target = scheduled_payment + extra_payment_cents

    rows: List[AmortizationRow] = []
    balance = principal_cents
    total_interest = 0
    total_principal = 0
    month = 0

    while balance > PAID_OFF_EPSILON_CENTS and month < term_months * 2:
        month += 1
        interest = monthly_interest(balance, annual_rate_percent)
        principal = min(payment_target - interest, balance)
        if month >= term_months or balance - principal <= PAID_OFF_EPSILON_CENTS:
            principal = balance

        balance -= principal
        total_interest += interest
        total_principal += principal

        rows.append(
            AmortizationRow(
                month=month,
                payment_cents=interest + principal,
                principal_cents=principal,
                interest_cents=interest,
                balance_cents=balance,
                total_interest_cents=total_interest,
                total_principal_cents=total_principal,
            )
        )

    return rows


def total_interest(principal_cents: int, annual_rate_percent: float, term_months: int) -> int:
    """Interest paid over the life of a loan at its scheduled payment"""
    payment = monthly_payment(principal_cents, annual_rate_percent, term_months)
    return max(payment * term_months - principal_cents, 0)


def compound_interest(
    principal_cents: int,
    annual_rate_percent: float,
    years: float,
    periods_per_year: int = 12,
) -> int:
    """Future value of principal compounded periods_per_year times a year"""
    if principal_cents <= 0 or annual_rate_percent < 0 or years < 0:
        return principal_cents
    if periods_per_year <= 0:
        raise InvalidLoanTermsError("Compounding periods per year must be positive")

    rate = annual_rate_percent / 100 / periods_per_year
    return round_cents(principal_cents * (1 + rate) ** (periods_per_year * years))


def debt_to_income_ratio(total_monthly_debt_cents: int, monthly_income_cents: int) -> float:
    """Monthly debt service as a percentage of gross monthly income"""
    if monthly_income_cents <= 0:
        return 0.0
    return round_percent(percent_of(total_monthly_debt_cents, monthly_income_cents), HUNDREDTH)
