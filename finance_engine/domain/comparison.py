"""Strategy comparison and recommendation engine"""

from datetime import date
from typing import Optional, Sequence

from finance_engine.domain.models import (
    Debt,
    DebtOverview,
    PayoffStatus,
    PayoffStrategy,
    StrategyComparison,
    StrategyRecommendation,
    StrategySummary,
)
from finance_engine.domain.payoff import DEFAULT_MAX_MONTHS, generate_payoff_schedule, validate_debts

# Interest-savings bands (in cents) that settle the recommendation outright
MINIMAL_SAVINGS_CENTS = 10_000  # $100
SIGNIFICANT_SAVINGS_CENTS = 50_000  # $500


def count_quick_wins(snowball: StrategySummary, avalanche: StrategySummary) -> int:
    """Debts that Snowball clears strictly earlier than Avalanche does"""
    avalanche_months = {entry.debt_id: entry.payoff_month for entry in avalanche.debt_payoff_order}
    wins = 0
    for entry in snowball.debt_payoff_order:
        if entry.payoff_month is None:
            continue
        rival = avalanche_months.get(entry.debt_id)
        if rival is None or entry.payoff_month < rival:
            wins += 1
    return wins


def get_recommendation(
    interest_saved_with_avalanche_cents: int, snowball_quick_wins: int, debt_count: int
) -> StrategyRecommendation:
    """
    Pick a strategy from the Avalanche interest advantage.

    Bands:
    - under $100 saved: Snowball, the motivation of early wins outweighs the money
    - over $500 saved: Avalanche, the mathematical advantage dominates
    - in between: Snowball only if it wins more than half the debts earlier
    """
    if interest_saved_with_avalanche_cents < MINIMAL_SAVINGS_CENTS:
        return StrategyRecommendation(
            strategy=PayoffStrategy.SNOWBALL,
            reason=(
                "Interest savings are minimal. Snowball provides faster psychological wins "
                "to keep you motivated."
            ),
        )

    if interest_saved_with_avalanche_cents > SIGNIFICANT_SAVINGS_CENTS:
        dollars = interest_saved_with_avalanche_cents / 100
        return StrategyRecommendation(
            strategy=PayoffStrategy.AVALANCHE,
            reason=f"Avalanche saves you ${dollars:,.2f} in interest. The mathematical advantage is significant.",
        )

    if snowball_quick_wins > debt_count / 2:
        return StrategyRecommendation(
            strategy=PayoffStrategy.SNOWBALL,
            reason="Snowball pays off more debts quickly, providing motivation to stay on track.",
        )

    return StrategyRecommendation(
        strategy=PayoffStrategy.AVALANCHE,
        reason="Avalanche minimizes total interest paid while still making steady progress.",
    )


def compare_strategies(
    debts: Sequence[Debt],
    monthly_extra_cents: int = 0,
    max_months: int = DEFAULT_MAX_MONTHS,
    cascade_extra: bool = False,
    start_date: Optional[date] = None,
) -> StrategyComparison:
    """
    Run Snowball and Avalanche with the extra payment, plus an Avalanche
    minimum-only baseline, and recommend one strategy.
    """
    options = dict(max_months=max_months, cascade_extra=cascade_extra, start_date=start_date)
    snowball = generate_payoff_schedule(debts, monthly_extra_cents, PayoffStrategy.SNOWBALL, **options).summary
    avalanche = generate_payoff_schedule(debts, monthly_extra_cents, PayoffStrategy.AVALANCHE, **options).summary
    minimum_only = generate_payoff_schedule(debts, 0, PayoffStrategy.AVALANCHE, **options).summary

    interest_saved_with_avalanche = snowball.total_interest_cents - avalanche.total_interest_cents
    quick_wins = count_quick_wins(snowball, avalanche)

    return StrategyComparison(
        snowball=snowball,
        avalanche=avalanche,
        minimum_only=minimum_only,
        interest_saved_with_avalanche_cents=interest_saved_with_avalanche,
        interest_saved_vs_minimum_cents=minimum_only.total_interest_cents - avalanche.total_interest_cents,
        time_saved_vs_minimum_months=minimum_only.total_months - avalanche.total_months,
        snowball_quick_wins=quick_wins,
        recommendation=get_recommendation(interest_saved_with_avalanche, quick_wins, len(debts)),
    )


def debt_overview(
    debts: Sequence[Debt],
    monthly_extra_cents: int = 0,
    max_months: int = DEFAULT_MAX_MONTHS,
    start_date: Optional[date] = None,
) -> DebtOverview:
    """Headline numbers for a debt list, projected under Avalanche"""
    if not debts:
        return DebtOverview(
            total_debts=0,
            total_balance_cents=0,
            total_minimum_payments_cents=0,
            highest_rate_percent=0.0,
            lowest_balance_cents=0,
            months_to_payoff=0,
            debt_free_date=start_date or date.today(),
            total_interest_projected_cents=0,
            status=PayoffStatus.PAID_OFF,
        )

    validate_debts(debts)
    summary = generate_payoff_schedule(
        debts,
        monthly_extra_cents,
        PayoffStrategy.AVALANCHE,
        max_months=max_months,
        start_date=start_date,
    ).summary

    return DebtOverview(
        total_debts=len(debts),
        total_balance_cents=sum(d.current_balance_cents for d in debts),
        total_minimum_payments_cents=sum(d.minimum_payment_cents for d in debts),
        highest_rate_percent=max(d.annual_rate_percent for d in debts),
        lowest_balance_cents=min(d.current_balance_cents for d in debts),
        months_to_payoff=summary.total_months,
        debt_free_date=summary.payoff_date,
        total_interest_projected_cents=summary.total_interest_cents,
        status=summary.status,
    )
