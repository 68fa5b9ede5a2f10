"""Risk-based target allocation recommender"""

from decimal import Decimal
from typing import Dict, List, Union

from finance_engine.domain.exceptions import InvalidRiskProfileError
from finance_engine.domain.models import (
    AllocationRecommendation,
    AssetClassInfo,
    AssetClassTarget,
    InvestmentHorizon,
    ModelPortfolio,
)
from finance_engine.utils.money import TENTH, round_percent, to_decimal

MODEL_PORTFOLIOS: Dict[str, ModelPortfolio] = {
    "conservative": ModelPortfolio(
        key="conservative",
        name="Conservative",
        description="Focus on capital preservation with modest growth",
        allocation={"us_stocks": 20, "intl_stocks": 10, "bonds": 50, "real_estate": 10, "cash": 10},
    ),
    "moderately_conservative": ModelPortfolio(
        key="moderately_conservative",
        name="Moderately Conservative",
        description="Balance between stability and growth",
        allocation={"us_stocks": 30, "intl_stocks": 15, "bonds": 40, "real_estate": 10, "cash": 5},
    ),
    "moderate": ModelPortfolio(
        key="moderate",
        name="Moderate",
        description="Balanced approach for long-term growth",
        allocation={"us_stocks": 40, "intl_stocks": 20, "bonds": 30, "real_estate": 7, "cash": 3},
    ),
    "moderately_aggressive": ModelPortfolio(
        key="moderately_aggressive",
        name="Moderately Aggressive",
        description="Growth-focused with some stability",
        allocation={"us_stocks": 50, "intl_stocks": 25, "bonds": 15, "real_estate": 7, "cash": 3},
    ),
    "aggressive": ModelPortfolio(
        key="aggressive",
        name="Aggressive",
        description="Maximum growth potential, higher volatility",
        allocation={"us_stocks": 55, "intl_stocks": 30, "bonds": 5, "real_estate": 5, "alternatives": 5},
    ),
}

ASSET_CLASSES: Dict[str, AssetClassInfo] = {
    info.key: info
    for info in [
        AssetClassInfo("us_stocks", "US Stocks", ["VTI", "SPY", "IVV", "VOO", "ITOT"]),
        AssetClassInfo("intl_stocks", "International Stocks", ["VXUS", "VEU", "IXUS", "VWO", "IEFA"]),
        AssetClassInfo("bonds", "Bonds", ["BND", "AGG", "VBTLX", "TLT", "VCIT"]),
        AssetClassInfo("real_estate", "Real Estate", ["VNQ", "SCHH", "IYR", "XLRE"]),
        AssetClassInfo("cash", "Cash & Equivalents", ["SGOV", "BIL", "SHV", "VMFXX"]),
        AssetClassInfo("alternatives", "Alternatives", ["GLD", "IAU", "PDBC", "DBC"]),
        AssetClassInfo("crypto", "Cryptocurrency", ["BITO", "GBTC", "ETHE"]),
    ]
}

MIN_RISK_SCORE = 1
MAX_RISK_SCORE = 10

# Age adjustment: bonds gain (age - 30) / 2 points, up to 20
AGE_BASELINE = 30
MAX_AGE_SHIFT = Decimal(20)


def select_model(risk_score: Union[int, float]) -> ModelPortfolio:
    """Bucket a 1-10 risk score into one of the five model portfolios"""
    if risk_score < MIN_RISK_SCORE or risk_score > MAX_RISK_SCORE:
        raise InvalidRiskProfileError(
            f"Risk score must be between {MIN_RISK_SCORE} and {MAX_RISK_SCORE}, got {risk_score}"
        )

    if risk_score <= 2:
        return MODEL_PORTFOLIOS["conservative"]
    if risk_score <= 4:
        return MODEL_PORTFOLIOS["moderately_conservative"]
    if risk_score <= 6:
        return MODEL_PORTFOLIOS["moderate"]
    if risk_score <= 8:
        return MODEL_PORTFOLIOS["moderately_aggressive"]
    return MODEL_PORTFOLIOS["aggressive"]


def _apply_age(allocation: Dict[str, Decimal], age: int) -> None:
    shift = min(max((Decimal(age) - AGE_BASELINE) / 2, Decimal(0)), MAX_AGE_SHIFT)
    if shift <= 0 or "bonds" not in allocation:
        return

    us = allocation.get("us_stocks", Decimal(0))
    intl = allocation.get("intl_stocks", Decimal(0))
    stocks = us + intl
    if stocks > 0:
        # Split the reduction by each bucket's weight in the stock sleeve
        if "us_stocks" in allocation:
            allocation["us_stocks"] = max(Decimal(10), us - shift * us / stocks)
        if "intl_stocks" in allocation:
            allocation["intl_stocks"] = max(Decimal(5), intl - shift * intl / stocks)
    allocation["bonds"] = min(Decimal(70), allocation["bonds"] + shift)


def _apply_horizon(allocation: Dict[str, Decimal], horizon: InvestmentHorizon) -> None:
    def held(key: str) -> Decimal:
        return allocation.get(key, Decimal(0))

    if horizon is InvestmentHorizon.SHORT:
        allocation["bonds"] = min(Decimal(60), held("bonds") + 15)
        allocation["cash"] = min(Decimal(20), held("cash") + 5)
        allocation["us_stocks"] = max(Decimal(15), held("us_stocks") - 15)
        allocation["intl_stocks"] = max(Decimal(5), held("intl_stocks") - 5)
    elif horizon is InvestmentHorizon.VERY_LONG:
        allocation["us_stocks"] = min(Decimal(65), held("us_stocks") + 5)
        allocation["intl_stocks"] = min(Decimal(35), held("intl_stocks") + 5)
        allocation["bonds"] = max(Decimal(5), held("bonds") - 10)


def normalize_allocation(allocation: Dict[str, Decimal]) -> Dict[str, float]:
    """
    Scale percentages proportionally so they sum to exactly 100.

    Each share is rounded to one decimal after scaling; whatever the rounding
    leaves over is assigned to the largest share.
    """
    total = sum(allocation.values())
    if total <= 0:
        raise InvalidRiskProfileError("Allocation has no positive weight to normalize")

    factor = Decimal(100) / total
    scaled = {key: to_decimal(round_percent(value * factor)) for key, value in allocation.items()}

    residue = Decimal(100) - sum(scaled.values())
    if residue:
        largest = max(scaled, key=lambda key: scaled[key])
        scaled[largest] = (scaled[largest] + residue).quantize(TENTH)

    return {key: float(value) for key, value in scaled.items()}


def recommend_allocation(
    risk_score: Union[int, float],
    age: int = AGE_BASELINE,
    horizon: InvestmentHorizon = InvestmentHorizon.LONG,
) -> AllocationRecommendation:
    """
    Derive a target allocation from risk tolerance, age and horizon.

    Steps:
    1. Pick the model portfolio for the risk score
    2. Age: move (age - 30) / 2 points (max 20) from stocks into bonds
    3. Horizon: short tilts toward bonds and cash, very_long toward stocks
    4. Normalize to exactly 100%
    """
    if age < 0:
        raise InvalidRiskProfileError(f"Age cannot be negative, got {age}")
    try:
        horizon = InvestmentHorizon(horizon)
    except ValueError as e:
        raise InvalidRiskProfileError(f"Unknown investment horizon: {horizon!r}") from e

    model = select_model(risk_score)
    allocation = {key: Decimal(value) for key, value in model.allocation.items()}

    _apply_age(allocation, age)
    _apply_horizon(allocation, horizon)
    normalized = normalize_allocation(allocation)

    asset_classes: List[AssetClassTarget] = []
    for key, percent in normalized.items():
        info = ASSET_CLASSES.get(key, AssetClassInfo(key, key, []))
        asset_classes.append(
            AssetClassTarget(
                asset_class=key,
                name=info.name,
                suggested_etfs=list(info.suggested_etfs),
                target_percentage=percent,
            )
        )

    return AllocationRecommendation(
        model_key=model.key,
        model_name=model.name,
        description=model.description,
        allocation=normalized,
        asset_classes=asset_classes,
    )
