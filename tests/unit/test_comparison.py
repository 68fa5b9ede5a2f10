"""Unit tests for strategy comparison and recommendation"""

import pytest
from datetime import date
from finance_engine.domain.comparison import (
    compare_strategies,
    count_quick_wins,
    debt_overview,
    get_recommendation,
)
from finance_engine.domain.models import (
    Debt,
    DebtPayoffOrder,
    PayoffStatus,
    PayoffStrategy,
    StrategySummary,
)


def _summary(strategy: PayoffStrategy, payoff_months: dict) -> StrategySummary:
    return StrategySummary(
        strategy=strategy,
        status=PayoffStatus.PAID_OFF,
        total_months=max((m or 0) for m in payoff_months.values()),
        total_interest_cents=0,
        total_paid_cents=0,
        original_total_cents=0,
        payoff_date=None,
        debt_payoff_order=[
            DebtPayoffOrder(debt_id=debt_id, name=debt_id, original_balance_cents=0, payoff_month=month, payoff_date=None)
            for debt_id, month in payoff_months.items()
        ],
    )


@pytest.mark.parametrize(
    "saved_cents,expected",
    [
        (5000, PayoffStrategy.SNOWBALL),  # $50: minimal savings
        (9999, PayoffStrategy.SNOWBALL),  # just under $100
        (10000, PayoffStrategy.AVALANCHE),  # $100 is not "minimal"; no quick wins
        (50000, PayoffStrategy.AVALANCHE),  # $500 is not "significant"; no quick wins
        (50001, PayoffStrategy.AVALANCHE),  # just over $500
        (60000, PayoffStrategy.AVALANCHE),  # $600: significant savings
    ],
)
def test_recommendation_savings_bands(saved_cents, expected):
    """Threshold boundaries at $100 and $500 on both sides"""
    recommendation = get_recommendation(saved_cents, snowball_quick_wins=0, debt_count=3)
    assert recommendation.strategy is expected


def test_recommendation_quick_wins_decide_middle_band():
    """Between $100 and $500, Snowball wins only with quick wins on more than half the debts"""
    assert get_recommendation(30000, snowball_quick_wins=2, debt_count=3).strategy is PayoffStrategy.SNOWBALL
    assert get_recommendation(30000, snowball_quick_wins=1, debt_count=2).strategy is PayoffStrategy.AVALANCHE
    assert get_recommendation(10000, snowball_quick_wins=3, debt_count=4).strategy is PayoffStrategy.SNOWBALL


def test_recommendation_quick_wins_ignored_outside_middle_band():
    assert get_recommendation(60000, snowball_quick_wins=5, debt_count=5).strategy is PayoffStrategy.AVALANCHE
    assert get_recommendation(5000, snowball_quick_wins=0, debt_count=5).strategy is PayoffStrategy.SNOWBALL


def test_recommendation_reason_mentions_savings():
    recommendation = get_recommendation(123456, snowball_quick_wins=0, debt_count=2)
    assert "$1,234.56" in recommendation.reason


def test_count_quick_wins():
    """Only strictly earlier Snowball payoffs count"""
    snowball = _summary(PayoffStrategy.SNOWBALL, {"a": 3, "b": 10, "c": 20})
    avalanche = _summary(PayoffStrategy.AVALANCHE, {"a": 5, "b": 10, "c": 18})

    assert count_quick_wins(snowball, avalanche) == 1


def test_count_quick_wins_unresolved_payoffs():
    """A debt Snowball never clears is not a win; one only Avalanche misses is"""
    snowball = _summary(PayoffStrategy.SNOWBALL, {"a": None, "b": 12})
    avalanche = _summary(PayoffStrategy.AVALANCHE, {"a": 4, "b": None})

    assert count_quick_wins(snowball, avalanche) == 1


def test_compare_strategies(sample_debts):
    """Derived figures are consistent with the three simulations"""
    comparison = compare_strategies(sample_debts, monthly_extra_cents=20000)

    assert comparison.snowball.strategy is PayoffStrategy.SNOWBALL
    assert comparison.avalanche.strategy is PayoffStrategy.AVALANCHE
    assert comparison.minimum_only.strategy is PayoffStrategy.AVALANCHE
    assert comparison.interest_saved_with_avalanche_cents == (
        comparison.snowball.total_interest_cents - comparison.avalanche.total_interest_cents
    )
    assert comparison.interest_saved_vs_minimum_cents == (
        comparison.minimum_only.total_interest_cents - comparison.avalanche.total_interest_cents
    )
    assert comparison.interest_saved_vs_minimum_cents > 0
    assert comparison.time_saved_vs_minimum_months > 0
    assert comparison.recommendation == get_recommendation(
        comparison.interest_saved_with_avalanche_cents, comparison.snowball_quick_wins, len(sample_debts)
    )


def test_compare_single_debt_prefers_snowball():
    """One debt: both strategies are identical, so savings are zero"""
    debt = Debt(id="d1", name="Card", current_balance_cents=300000, annual_rate_percent=19.0, minimum_payment_cents=9000)

    comparison = compare_strategies([debt], monthly_extra_cents=5000)

    assert comparison.interest_saved_with_avalanche_cents == 0
    assert comparison.snowball_quick_wins == 0
    assert comparison.recommendation.strategy is PayoffStrategy.SNOWBALL


def test_compare_empty_debts():
    comparison = compare_strategies([], monthly_extra_cents=5000)

    assert comparison.interest_saved_with_avalanche_cents == 0
    assert comparison.time_saved_vs_minimum_months == 0
    assert comparison.snowball.total_months == 0


def test_debt_overview(sample_debts, start_date: date):
    overview = debt_overview(sample_debts, monthly_extra_cents=20000, start_date=start_date)

    assert overview.total_debts == 3
    assert overview.total_balance_cents == 1780000
    assert overview.total_minimum_payments_cents == 48500
    assert overview.highest_rate_percent == 26.99
    assert overview.lowest_balance_cents == 80000
    assert overview.status is PayoffStatus.PAID_OFF
    assert overview.months_to_payoff > 0
    assert overview.debt_free_date > start_date
    assert overview.total_interest_projected_cents > 0


def test_debt_overview_empty(start_date: date):
    overview = debt_overview([], start_date=start_date)

    assert overview.total_debts == 0
    assert overview.total_balance_cents == 0
    assert overview.months_to_payoff == 0
    assert overview.debt_free_date == start_date
