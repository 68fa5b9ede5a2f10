"""Portfolio allocation, drift analysis and rebalancing"""

import math
from decimal import Decimal
from typing import Dict, List, Mapping, Sequence

from finance_engine.domain.exceptions import InvalidAllocationError, InvalidHoldingError
from finance_engine.domain.models import (
    AllocationMap,
    CurrentAllocation,
    DriftAnalysis,
    DriftEntry,
    Holding,
    HoldingPerformance,
    PlanStatus,
    PortfolioPerformance,
    RebalancePlan,
    Trade,
    TradeAction,
)
from finance_engine.utils.money import (
    HUNDREDTH,
    cents_for_percent,
    percent_of,
    round_cents,
    round_percent,
    to_decimal,
)

DEFAULT_THRESHOLD_PERCENT = 5.0
EMPTY_PORTFOLIO_CLASS = "cash"
UNCLASSIFIED = "other"


def _validate_holdings(holdings: Sequence[Holding]) -> None:
    for holding in holdings:
        if not math.isfinite(holding.quantity) or holding.quantity < 0:
            raise InvalidHoldingError(f"Holding in {holding.asset_class!r} has an invalid quantity")
        if holding.purchase_price_cents < 0 or holding.price_cents < 0:
            raise InvalidHoldingError(f"Holding in {holding.asset_class!r} has a negative price")


def holding_value(holding: Holding) -> int:
    """Market value in cents, using purchase price when no current price is known"""
    return round_cents(to_decimal(holding.quantity) * holding.price_cents)


def current_allocation(holdings: Sequence[Holding]) -> CurrentAllocation:
    """
    Percentage of total market value held in each asset class.

    A portfolio worth nothing (including an empty one) is reported as
    100% cash rather than dividing by zero.
    """
    _validate_holdings(holdings)

    value_by_class: Dict[str, int] = {}
    for holding in holdings:
        asset_class = holding.asset_class or UNCLASSIFIED
        value_by_class[asset_class] = value_by_class.get(asset_class, 0) + holding_value(holding)

    total_value = sum(value_by_class.values())
    if total_value == 0:
        return CurrentAllocation(allocation={EMPTY_PORTFOLIO_CLASS: 100.0}, total_value_cents=0)

    allocation = {
        asset_class: round_percent(percent_of(value, total_value))
        for asset_class, value in value_by_class.items()
    }
    return CurrentAllocation(allocation=allocation, total_value_cents=total_value)


def _validate_target(target: Mapping[str, float], threshold: float) -> None:
    if not math.isfinite(threshold) or threshold < 0:
        raise InvalidAllocationError("Drift threshold must be a non-negative number")
    for asset_class, percent in target.items():
        if not math.isfinite(percent) or percent < 0 or percent > 100:
            raise InvalidAllocationError(f"Target for {asset_class!r} must be between 0 and 100")


def calculate_drift(
    current: Mapping[str, float],
    target: Mapping[str, float],
    threshold: float = DEFAULT_THRESHOLD_PERCENT,
) -> DriftAnalysis:
    """
    Compare current and target allocation class by class.

    A class missing from either map counts as 0%. Drift is current minus
    target; beyond +threshold the class is sold down, beyond -threshold it is
    bought up. Entries come back largest absolute drift first.
    """
    _validate_target(target, threshold)

    asset_classes = list(dict.fromkeys([*current.keys(), *target.keys()]))
    drifts: List[DriftEntry] = []
    for asset_class in asset_classes:
        current_pct = to_decimal(current.get(asset_class, 0))
        target_pct = to_decimal(target.get(asset_class, 0))
        drift = current_pct - target_pct

        if drift > threshold:
            action = TradeAction.SELL
        elif drift < -threshold:
            action = TradeAction.BUY
        else:
            action = TradeAction.HOLD

        drifts.append(
            DriftEntry(
                asset_class=asset_class,
                current=round_percent(current_pct),
                target=round_percent(target_pct),
                drift=round_percent(drift),
                needs_rebalance=action is not TradeAction.HOLD,
                action=action,
            )
        )

    drifts.sort(key=lambda d: abs(d.drift), reverse=True)

    return DriftAnalysis(
        drifts=drifts,
        needs_rebalancing=any(d.needs_rebalance for d in drifts),
        max_drift=abs(drifts[0].drift) if drifts else 0.0,
        threshold=threshold,
    )


def generate_rebalance_plan(
    holdings: Sequence[Holding],
    target: Mapping[str, float],
    threshold: float = DEFAULT_THRESHOLD_PERCENT,
) -> RebalancePlan:
    """
    Turn allocation drift into currency trades.

    For every class beyond the threshold, the trade is the gap between its
    value at target weight and its value at current weight, both taken from
    the portfolio total. Positive gaps are buys, negative gaps are sells;
    trades come back largest first.
    """
    allocation = current_allocation(holdings)
    analysis = calculate_drift(allocation.allocation, target, threshold)
    total_value = allocation.total_value_cents
    target_allocation: AllocationMap = dict(target)

    if not analysis.needs_rebalancing:
        return RebalancePlan(
            status=PlanStatus.WITHIN_TOLERANCE,
            message="Portfolio is within acceptable drift tolerance",
            current_allocation=allocation.allocation,
            target_allocation=target_allocation,
            total_value_cents=total_value,
            drifts=analysis.drifts,
            trades=[],
        )

    trades: List[Trade] = []
    for entry in analysis.drifts:
        if not entry.needs_rebalance:
            continue

        current_value = cents_for_percent(total_value, entry.current)
        target_value = cents_for_percent(total_value, entry.target)
        difference = target_value - current_value
        if difference == 0:
            continue

        trades.append(
            Trade(
                asset_class=entry.asset_class,
                action=TradeAction.BUY if difference > 0 else TradeAction.SELL,
                amount_cents=abs(difference),
                current_value_cents=current_value,
                target_value_cents=target_value,
                current_percent=entry.current,
                target_percent=entry.target,
            )
        )

    trades.sort(key=lambda t: t.amount_cents, reverse=True)

    if total_value == 0:
        status = PlanStatus.NO_HOLDINGS_VALUE
        message = "Portfolio has no market value to rebalance"
    else:
        status = PlanStatus.REBALANCE
        message = f"{len(trades)} trade(s) needed to restore target allocation"

    return RebalancePlan(
        status=status,
        message=message,
        current_allocation=allocation.allocation,
        target_allocation=target_allocation,
        total_value_cents=total_value,
        drifts=analysis.drifts,
        trades=trades,
    )


def _gain_percent(gain_cents: int, cost_cents: int) -> float:
    if cost_cents <= 0:
        return 0.0
    return round_percent(Decimal(gain_cents) * 100 / Decimal(cost_cents), HUNDREDTH)


def calculate_performance(holdings: Sequence[Holding]) -> PortfolioPerformance:
    """Cost basis, market value and unrealized gain per holding and overall"""
    _validate_holdings(holdings)

    rows: List[HoldingPerformance] = []
    for holding in holdings:
        cost = round_cents(to_decimal(holding.quantity) * holding.purchase_price_cents)
        value = holding_value(holding)
        rows.append(
            HoldingPerformance(
                asset_class=holding.asset_class or UNCLASSIFIED,
                symbol=holding.symbol,
                quantity=holding.quantity,
                cost_cents=cost,
                value_cents=value,
                gain_cents=value - cost,
                gain_percent=_gain_percent(value - cost, cost),
            )
        )

    total_value = sum(row.value_cents for row in rows)
    total_cost = sum(row.cost_cents for row in rows)
    return PortfolioPerformance(
        total_value_cents=total_value,
        total_cost_cents=total_cost,
        total_gain_cents=total_value - total_cost,
        total_gain_percent=_gain_percent(total_value - total_cost, total_cost),
        holdings=rows,
    )
