"""Unit tests for allocation, drift and rebalancing"""

import pytest
from finance_engine.domain.allocation import (
    calculate_drift,
    calculate_performance,
    current_allocation,
    generate_rebalance_plan,
    holding_value,
)
from finance_engine.domain.exceptions import InvalidAllocationError, InvalidHoldingError
from finance_engine.domain.models import Holding, PlanStatus, TradeAction


def test_current_allocation(sample_holdings):
    """$7000 stocks / $3000 bonds"""
    result = current_allocation(sample_holdings)

    assert result.total_value_cents == 1000000
    assert result.allocation == {"us_stocks": 70.0, "bonds": 30.0}


def test_current_allocation_groups_by_class():
    holdings = [
        Holding(asset_class="us_stocks", quantity=1, purchase_price_cents=10000),
        Holding(asset_class="us_stocks", quantity=1, purchase_price_cents=10000),
        Holding(asset_class="bonds", quantity=2, purchase_price_cents=10000),
    ]

    assert current_allocation(holdings).allocation == {"us_stocks": 50.0, "bonds": 50.0}


def test_current_allocation_rounds_to_one_decimal():
    """Thirds round to 33.3"""
    holdings = [
        Holding(asset_class=name, quantity=1, purchase_price_cents=10000)
        for name in ("us_stocks", "bonds", "real_estate")
    ]

    assert current_allocation(holdings).allocation == {"us_stocks": 33.3, "bonds": 33.3, "real_estate": 33.3}


def test_current_price_falls_back_to_purchase_price():
    holding = Holding(asset_class="bonds", quantity=10, purchase_price_cents=10000)
    assert holding_value(holding) == 100000

    priced = Holding(asset_class="bonds", quantity=10, purchase_price_cents=10000, current_price_cents=9000)
    assert holding_value(priced) == 90000


def test_fractional_quantity_value():
    """0.5 shares at $123.45 rounds half-up to the cent"""
    holding = Holding(asset_class="us_stocks", quantity=0.5, purchase_price_cents=12345)
    assert holding_value(holding) == 6173


def test_zero_value_portfolio_is_all_cash():
    """No value means 100% cash, not a division by zero"""
    assert current_allocation([]).allocation == {"cash": 100.0}

    worthless = [Holding(asset_class="us_stocks", quantity=0, purchase_price_cents=10000)]
    result = current_allocation(worthless)
    assert result.allocation == {"cash": 100.0}
    assert result.total_value_cents == 0


def test_blank_asset_class_is_other():
    holdings = [Holding(asset_class="", quantity=1, purchase_price_cents=10000)]
    assert current_allocation(holdings).allocation == {"other": 100.0}


def test_negative_holding_rejected():
    with pytest.raises(InvalidHoldingError):
        current_allocation([Holding(asset_class="bonds", quantity=-1, purchase_price_cents=100)])
    with pytest.raises(InvalidHoldingError):
        current_allocation([Holding(asset_class="bonds", quantity=float("nan"), purchase_price_cents=100)])


def test_drift_sell_when_overweight():
    """70% held vs 50% target with a 5 point threshold"""
    analysis = calculate_drift({"stocks": 70}, {"stocks": 50}, 5)

    entry = analysis.drifts[0]
    assert entry.drift == 20.0
    assert entry.needs_rebalance is True
    assert entry.action is TradeAction.SELL
    assert analysis.needs_rebalancing is True
    assert analysis.max_drift == 20.0


def test_drift_buy_when_underweight():
    entry = calculate_drift({"bonds": 20}, {"bonds": 40}).drifts[0]
    assert entry.drift == -20.0
    assert entry.action is TradeAction.BUY


def test_drift_at_threshold_holds():
    """Exactly the threshold is not beyond it"""
    analysis = calculate_drift({"stocks": 55, "bonds": 45}, {"stocks": 50, "bonds": 50}, 5)

    assert all(d.action is TradeAction.HOLD for d in analysis.drifts)
    assert analysis.needs_rebalancing is False


def test_drift_uses_union_of_classes_sorted_by_size():
    """Classes missing on either side count as 0%"""
    analysis = calculate_drift(
        {"us_stocks": 60, "crypto": 10, "bonds": 30},
        {"us_stocks": 50, "bonds": 38, "cash": 12},
    )

    by_class = {d.asset_class: d for d in analysis.drifts}
    assert set(by_class) == {"us_stocks", "crypto", "bonds", "cash"}
    assert by_class["crypto"].target == 0.0
    assert by_class["cash"].current == 0.0
    assert by_class["cash"].action is TradeAction.BUY
    assert [abs(d.drift) for d in analysis.drifts] == sorted((abs(d.drift) for d in analysis.drifts), reverse=True)
    assert analysis.max_drift == 12.0


def test_drift_empty_maps():
    analysis = calculate_drift({}, {})
    assert analysis.drifts == []
    assert analysis.needs_rebalancing is False
    assert analysis.max_drift == 0.0


def test_drift_invalid_inputs():
    with pytest.raises(InvalidAllocationError):
        calculate_drift({"stocks": 50}, {"stocks": -5})
    with pytest.raises(InvalidAllocationError):
        calculate_drift({"stocks": 50}, {"stocks": 50}, threshold=-1)


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_target_rejected(bad):
    """NaN or infinite targets fail validation instead of reaching the drift math"""
    holdings = [Holding(asset_class="us_stocks", quantity=10, purchase_price_cents=10000)]

    with pytest.raises(InvalidAllocationError):
        generate_rebalance_plan(holdings, {"us_stocks": bad}, 5)
    with pytest.raises(InvalidAllocationError):
        calculate_drift({"us_stocks": 100.0}, {"us_stocks": 100.0}, threshold=bad)


def test_rebalance_plan_trades(sample_holdings):
    """70/30 to 50/50 on $10,000: sell $2000 stocks, buy $2000 bonds"""
    plan = generate_rebalance_plan(sample_holdings, {"us_stocks": 50, "bonds": 50}, 5)

    assert plan.status is PlanStatus.REBALANCE
    assert plan.needs_rebalancing is True
    trades = {t.asset_class: t for t in plan.trades}

    assert trades["us_stocks"].action is TradeAction.SELL
    assert trades["us_stocks"].amount_cents == 200000  # 0.20 x total value
    assert trades["us_stocks"].current_value_cents == 700000
    assert trades["us_stocks"].target_value_cents == 500000
    assert trades["bonds"].action is TradeAction.BUY
    assert trades["bonds"].amount_cents == 200000


def test_rebalance_plan_sorted_by_amount(sample_holdings):
    plan = generate_rebalance_plan(sample_holdings, {"us_stocks": 40, "bonds": 40, "intl_stocks": 20})

    amounts = [t.amount_cents for t in plan.trades]
    assert amounts == sorted(amounts, reverse=True)
    assert plan.trades[0].asset_class == "us_stocks"
    assert plan.trades[0].amount_cents == 300000


def test_rebalance_plan_within_tolerance(sample_holdings):
    """Small drift gives an explicit within-tolerance result"""
    plan = generate_rebalance_plan(sample_holdings, {"us_stocks": 68, "bonds": 32})

    assert plan.status is PlanStatus.WITHIN_TOLERANCE
    assert plan.needs_rebalancing is False
    assert plan.trades == []
    assert "tolerance" in plan.message


def test_rebalance_plan_zero_value_portfolio():
    """Drift on an empty portfolio cannot be traded"""
    plan = generate_rebalance_plan([], {"us_stocks": 60, "bonds": 40})

    assert plan.status is PlanStatus.NO_HOLDINGS_VALUE
    assert plan.trades == []
    assert plan.current_allocation == {"cash": 100.0}


def test_performance(sample_holdings):
    performance = calculate_performance(sample_holdings)

    vti, bnd = performance.holdings
    assert vti.cost_cents == 600000
    assert vti.value_cents == 700000
    assert vti.gain_cents == 100000
    assert vti.gain_percent == 16.67
    assert bnd.gain_cents == -20000
    assert bnd.gain_percent == -6.25

    assert performance.total_cost_cents == 920000
    assert performance.total_value_cents == 1000000
    assert performance.total_gain_cents == 80000
    assert performance.total_gain_percent == 8.7


def test_performance_empty():
    performance = calculate_performance([])
    assert performance.total_value_cents == 0
    assert performance.total_gain_percent == 0.0
    assert performance.holdings == []
