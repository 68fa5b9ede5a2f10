"""Pydantic schemas for API request/response validation"""

from datetime import date
from typing import Annotated, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from finance_engine.domain.models import (
    Debt,
    Holding,
    InvestmentHorizon,
    PayoffStatus,
    PayoffStrategy,
    PlanStatus,
    TradeAction,
)


TargetPercent = Annotated[float, Field(ge=0, le=100, allow_inf_nan=False)]


class ResultModel(BaseModel):
    """Response models are read straight off domain dataclasses"""

    model_config = ConfigDict(from_attributes=True)


# --- Requests ---


class DebtSchema(BaseModel):
    """Single debt in a payoff request"""

    id: str = Field(..., min_length=1, description="Debt identifier")
    name: str = Field("Unnamed Debt", description="Display name")
    current_balance_cents: int = Field(..., ge=0, description="Outstanding balance in cents")
    annual_rate_percent: float = Field(..., ge=0, le=1000, allow_inf_nan=False, description="APR, 18.0 for 18%")
    minimum_payment_cents: int = Field(..., ge=0, description="Required monthly payment in cents")
    original_balance_cents: Optional[int] = Field(None, ge=0)

    def to_domain(self) -> Debt:
        return Debt(
            id=self.id,
            name=self.name,
            current_balance_cents=self.current_balance_cents,
            annual_rate_percent=self.annual_rate_percent,
            minimum_payment_cents=self.minimum_payment_cents,
            original_balance_cents=self.original_balance_cents,
        )


class DebtListRequest(BaseModel):
    """Request body for POST /v1/debts/compare and /v1/debts/overview"""

    debts: List[DebtSchema] = Field(default_factory=list)
    monthly_extra_cents: int = Field(0, ge=0, description="Extra paid each month on top of minimums")
    start_date: Optional[date] = Field(None, description="Month 0 for projected dates (default today)")


class PayoffScheduleRequest(DebtListRequest):
    """Request body for POST /v1/debts/payoff-schedule"""

    strategy: PayoffStrategy = PayoffStrategy.AVALANCHE


class LoanRequest(BaseModel):
    """Request body for POST /v1/loans/amortization"""

    principal_cents: int = Field(..., gt=0)
    annual_rate_percent: float = Field(..., ge=0, le=1000, allow_inf_nan=False)
    term_months: int = Field(..., gt=0, le=1200)
    extra_payment_cents: int = Field(0, ge=0)


class MonthsToPayoffRequest(BaseModel):
    """Request body for POST /v1/loans/months-to-payoff"""

    balance_cents: int = Field(..., ge=0)
    annual_rate_percent: float = Field(..., ge=0, le=1000, allow_inf_nan=False)
    payment_cents: int = Field(..., ge=0)


class HoldingSchema(BaseModel):
    """Single portfolio position"""

    asset_class: str = Field(..., description="Asset class key, e.g. us_stocks")
    symbol: Optional[str] = None
    quantity: float = Field(..., ge=0, allow_inf_nan=False)
    purchase_price_cents: int = Field(..., ge=0)
    current_price_cents: Optional[int] = Field(None, ge=0, description="Falls back to purchase price")

    def to_domain(self) -> Holding:
        return Holding(
            asset_class=self.asset_class,
            quantity=self.quantity,
            purchase_price_cents=self.purchase_price_cents,
            current_price_cents=self.current_price_cents,
            symbol=self.symbol,
        )


class HoldingsRequest(BaseModel):
    """Request body for POST /v1/portfolio/performance"""

    holdings: List[HoldingSchema] = Field(default_factory=list)


class AllocationRequest(HoldingsRequest):
    """Request body for POST /v1/portfolio/allocation and /v1/portfolio/rebalance"""

    target_allocation: Dict[str, TargetPercent] = Field(default_factory=dict)
    threshold_percent: Optional[float] = Field(None, ge=0, le=100, allow_inf_nan=False)


class RecommendationRequest(BaseModel):
    """Request body for POST /v1/portfolio/recommendation"""

    risk_score: int = Field(..., ge=1, le=10)
    age: int = Field(30, ge=0, le=120)
    investment_horizon: InvestmentHorizon = InvestmentHorizon.LONG


# --- Debt responses ---


class DebtPaymentSchema(ResultModel):
    debt_id: str
    debt_name: str
    payment_cents: int
    interest_cents: int
    principal_cents: int
    balance_after_cents: int
    is_extra: bool


class ScheduleEntrySchema(ResultModel):
    month: int
    payments: List[DebtPaymentSchema]
    total_payment_cents: int
    remaining_debt_count: int
    total_remaining_cents: int


class DebtPayoffOrderSchema(ResultModel):
    debt_id: str
    name: str
    original_balance_cents: int
    payoff_month: Optional[int]
    payoff_date: Optional[date]


class StrategySummarySchema(ResultModel):
    strategy: PayoffStrategy
    status: PayoffStatus
    reached_payoff: bool
    total_months: int
    total_interest_cents: int
    total_paid_cents: int
    original_total_cents: int
    payoff_date: Optional[date]
    debt_payoff_order: List[DebtPayoffOrderSchema]


class PayoffScheduleResponse(ResultModel):
    """Response for POST /v1/debts/payoff-schedule"""

    schedule: List[ScheduleEntrySchema]
    summary: StrategySummarySchema


class RecommendationSchema(ResultModel):
    strategy: PayoffStrategy
    reason: str


class StrategyComparisonResponse(ResultModel):
    """Response for POST /v1/debts/compare"""

    snowball: StrategySummarySchema
    avalanche: StrategySummarySchema
    minimum_only: StrategySummarySchema
    interest_saved_with_avalanche_cents: int
    interest_saved_vs_minimum_cents: int
    time_saved_vs_minimum_months: int
    snowball_quick_wins: int
    recommendation: RecommendationSchema


class DebtOverviewResponse(ResultModel):
    """Response for POST /v1/debts/overview"""

    total_debts: int
    total_balance_cents: int
    total_minimum_payments_cents: int
    highest_rate_percent: float
    lowest_balance_cents: int
    months_to_payoff: int
    debt_free_date: Optional[date]
    total_interest_projected_cents: int
    status: PayoffStatus


# --- Loan responses ---


class AmortizationRowSchema(ResultModel):
    month: int
    payment_cents: int
    principal_cents: int
    interest_cents: int
    balance_cents: int
    total_interest_cents: int
    total_principal_cents: int


class AmortizationResponse(BaseModel):
    """Response for POST /v1/loans/amortization"""

    monthly_payment_cents: int
    total_interest_cents: int
    months: int
    schedule: List[AmortizationRowSchema]


class MonthsToPayoffResponse(BaseModel):
    """Response for POST /v1/loans/months-to-payoff"""

    converges: bool
    months: Optional[int] = None
    monthly_interest_cents: Optional[int] = None


# --- Portfolio responses ---


class DriftEntrySchema(ResultModel):
    asset_class: str
    current: float
    target: float
    drift: float
    needs_rebalance: bool
    action: TradeAction


class AllocationResponse(BaseModel):
    """Response for POST /v1/portfolio/allocation"""

    current_allocation: Dict[str, float]
    target_allocation: Dict[str, float]
    total_value_cents: int
    drifts: List[DriftEntrySchema]
    needs_rebalancing: bool
    max_drift: float
    threshold: float


class TradeSchema(ResultModel):
    asset_class: str
    action: TradeAction
    amount_cents: int
    current_value_cents: int
    target_value_cents: int
    current_percent: float
    target_percent: float


class RebalancePlanResponse(ResultModel):
    """Response for POST /v1/portfolio/rebalance"""

    status: PlanStatus
    needs_rebalancing: bool
    message: str
    current_allocation: Dict[str, float]
    target_allocation: Dict[str, float]
    total_value_cents: int
    drifts: List[DriftEntrySchema]
    trades: List[TradeSchema]


class AssetClassTargetSchema(ResultModel):
    asset_class: str
    name: str
    suggested_etfs: List[str]
    target_percentage: float


class AllocationRecommendationResponse(ResultModel):
    """Response for POST /v1/portfolio/recommendation"""

    model_config = ConfigDict(from_attributes=True, protected_namespaces=())

    model_key: str
    model_name: str
    description: str
    allocation: Dict[str, float]
    asset_classes: List[AssetClassTargetSchema]


class HoldingPerformanceSchema(ResultModel):
    asset_class: str
    symbol: Optional[str]
    quantity: float
    cost_cents: int
    value_cents: int
    gain_cents: int
    gain_percent: float


class PerformanceResponse(ResultModel):
    """Response for POST /v1/portfolio/performance"""

    total_value_cents: int
    total_cost_cents: int
    total_gain_cents: int
    total_gain_percent: float
    holdings: List[HoldingPerformanceSchema]
