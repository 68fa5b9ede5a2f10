"""Domain models - pure Python dataclasses representing engine inputs and results

All monetary amounts are integer cents. Rates and allocation shares are
percentages (18.0 means 18%).
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Sequence

# A debt whose balance falls to this many cents or fewer is considered paid off
PAID_OFF_EPSILON_CENTS = 1

AllocationMap = Dict[str, float]


class PayoffStrategy(str, Enum):
    """Debt ordering policy used to pick the focus debt"""

    SNOWBALL = "snowball"  # smallest balance first
    AVALANCHE = "avalanche"  # highest rate first

    def order(self, debts: Sequence["Debt"]) -> List["Debt"]:
        """Return a new list in payoff priority; ties keep input order"""
        if self is PayoffStrategy.SNOWBALL:
            return sorted(debts, key=lambda d: d.current_balance_cents)
        return sorted(debts, key=lambda d: d.annual_rate_percent, reverse=True)


class PayoffStatus(str, Enum):
    PAID_OFF = "paid_off"
    EXHAUSTED = "exhausted"  # simulation horizon reached with debt remaining


class TradeAction(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


class PlanStatus(str, Enum):
    WITHIN_TOLERANCE = "within_tolerance"
    REBALANCE = "rebalance"
    NO_HOLDINGS_VALUE = "no_holdings_value"


class InvestmentHorizon(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"
    VERY_LONG = "very_long"


# --- Debt payoff ---


@dataclass(frozen=True)
class Debt:
    """Liability supplied by the caller; never mutated by the engine"""

    id: str
    name: str
    current_balance_cents: int
    annual_rate_percent: float
    minimum_payment_cents: int
    # Balance when the debt was opened; defaults to current_balance_cents
    original_balance_cents: Optional[int] = None


@dataclass
class DebtState:
    """Mutable per-simulation copy of a debt"""

    debt_id: str
    name: str
    starting_balance_cents: int
    balance_cents: int
    annual_rate_percent: float
    minimum_payment_cents: int
    original_balance_cents: int
    paid_off: bool = False
    payoff_month: Optional[int] = None

    @classmethod
    def from_debt(cls, debt: Debt) -> "DebtState":
        return cls(
            debt_id=debt.id,
            name=debt.name,
            starting_balance_cents=debt.current_balance_cents,
            balance_cents=debt.current_balance_cents,
            annual_rate_percent=debt.annual_rate_percent,
            minimum_payment_cents=debt.minimum_payment_cents,
            original_balance_cents=(
                debt.current_balance_cents if debt.original_balance_cents is None else debt.original_balance_cents
            ),
        )

    @property
    def active(self) -> bool:
        return not self.paid_off

    def settle_if_paid(self, month: int) -> bool:
        """Clamp a near-zero balance and mark the debt paid off"""
        if self.paid_off or self.balance_cents > PAID_OFF_EPSILON_CENTS:
            return False
        self.balance_cents = 0
        self.paid_off = True
        self.payoff_month = month
        return True


@dataclass(frozen=True)
class DebtPayment:
    """One debt's activity within a simulated month"""

    debt_id: str
    debt_name: str
    payment_cents: int
    interest_cents: int
    principal_cents: int
    balance_after_cents: int
    is_extra: bool


@dataclass(frozen=True)
class PayoffScheduleEntry:
    """Snapshot of a single simulated month"""

    month: int
    payments: List[DebtPayment]
    total_payment_cents: int
    remaining_debt_count: int
    total_remaining_cents: int


@dataclass(frozen=True)
class DebtPayoffOrder:
    debt_id: str
    name: str
    original_balance_cents: int
    payoff_month: Optional[int]
    payoff_date: Optional[date]


@dataclass(frozen=True)
class StrategySummary:
    """Totals for one simulated strategy"""

    strategy: PayoffStrategy
    status: PayoffStatus
    total_months: int
    total_interest_cents: int
    total_paid_cents: int
    original_total_cents: int
    payoff_date: Optional[date]
    debt_payoff_order: List[DebtPayoffOrder] = field(default_factory=list)

    @property
    def reached_payoff(self) -> bool:
        return self.status is PayoffStatus.PAID_OFF


@dataclass(frozen=True)
class PayoffResult:
    schedule: List[PayoffScheduleEntry]
    summary: StrategySummary


@dataclass(frozen=True)
class StrategyRecommendation:
    strategy: PayoffStrategy
    reason: str


@dataclass(frozen=True)
class StrategyComparison:
    """Snowball vs Avalanche vs minimum-only baseline"""

    snowball: StrategySummary
    avalanche: StrategySummary
    minimum_only: StrategySummary
    interest_saved_with_avalanche_cents: int
    interest_saved_vs_minimum_cents: int
    time_saved_vs_minimum_months: int
    snowball_quick_wins: int
    recommendation: StrategyRecommendation


@dataclass(frozen=True)
class DebtOverview:
    """Quick totals plus the projected Avalanche payoff"""

    total_debts: int
    total_balance_cents: int
    total_minimum_payments_cents: int
    highest_rate_percent: float
    lowest_balance_cents: int
    months_to_payoff: int
    debt_free_date: Optional[date]
    total_interest_projected_cents: int
    status: PayoffStatus


@dataclass(frozen=True)
class Nonconvergent:
    """Payment never exceeds the interest it accrues, so the loan cannot amortize"""

    monthly_interest_cents: int
    payment_cents: int


@dataclass(frozen=True)
class AmortizationRow:
    """Single payment in a fixed-term loan schedule"""

    month: int
    payment_cents: int
    principal_cents: int
    interest_cents: int
    balance_cents: int
    total_interest_cents: int
    total_principal_cents: int


# --- Portfolio ---


@dataclass(frozen=True)
class Holding:
    """Position supplied by the caller"""

    asset_class: str
    quantity: float
    purchase_price_cents: int
    current_price_cents: Optional[int] = None
    symbol: Optional[str] = None

    @property
    def price_cents(self) -> int:
        """Current price, falling back to purchase price when unknown"""
        if self.current_price_cents is None:
            return self.purchase_price_cents
        return self.current_price_cents


@dataclass(frozen=True)
class CurrentAllocation:
    allocation: AllocationMap
    total_value_cents: int


@dataclass(frozen=True)
class DriftEntry:
    asset_class: str
    current: float
    target: float
    drift: float
    needs_rebalance: bool
    action: TradeAction


@dataclass(frozen=True)
class DriftAnalysis:
    drifts: List[DriftEntry]
    needs_rebalancing: bool
    max_drift: float
    threshold: float


@dataclass(frozen=True)
class Trade:
    asset_class: str
    action: TradeAction
    amount_cents: int
    current_value_cents: int
    target_value_cents: int
    current_percent: float
    target_percent: float


@dataclass(frozen=True)
class RebalancePlan:
    """Trades needed to bring a portfolio back to its target allocation"""

    status: PlanStatus
    message: str
    current_allocation: AllocationMap
    target_allocation: AllocationMap
    total_value_cents: int
    drifts: List[DriftEntry]
    trades: List[Trade]

    @property
    def needs_rebalancing(self) -> bool:
        return self.status is PlanStatus.REBALANCE


@dataclass(frozen=True)
class AssetClassInfo:
    key: str
    name: str
    suggested_etfs: List[str]


@dataclass(frozen=True)
class AssetClassTarget:
    asset_class: str
    name: str
    suggested_etfs: List[str]
    target_percentage: float


@dataclass(frozen=True)
class ModelPortfolio:
    key: str
    name: str
    description: str
    allocation: Dict[str, int]


@dataclass(frozen=True)
class AllocationRecommendation:
    model_key: str
    model_name: str
    description: str
    allocation: AllocationMap
    asset_classes: List[AssetClassTarget]


@dataclass(frozen=True)
class HoldingPerformance:
    asset_class: str
    symbol: Optional[str]
    quantity: float
    cost_cents: int
    value_cents: int
    gain_cents: int
    gain_percent: float


@dataclass(frozen=True)
class PortfolioPerformance:
    total_value_cents: int
    total_cost_cents: int
    total_gain_cents: int
    total_gain_percent: float
    holdings: List[HoldingPerformance]
