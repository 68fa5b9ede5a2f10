"""Pytest fixtures for testing"""

import pytest
from datetime import date
from fastapi.testclient import TestClient
from finance_engine.api.main import create_app
from finance_engine.domain.models import Debt, Holding


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def start_date() -> date:
    """Fixed month 0 so projected dates are deterministic"""
    return date(2025, 1, 15)


@pytest.fixture
def sample_debts() -> list[Debt]:
    """Typical household debts: a card, a store card and a car loan"""
    return [
        Debt(
            id="visa",
            name="Visa",
            current_balance_cents=500000,  # $5000
            annual_rate_percent=22.99,
            minimum_payment_cents=15000,  # $150
        ),
        Debt(
            id="store",
            name="Store Card",
            current_balance_cents=80000,  # $800
            annual_rate_percent=26.99,
            minimum_payment_cents=3500,  # $35
        ),
        Debt(
            id="car",
            name="Car Loan",
            current_balance_cents=1200000,  # $12000
            annual_rate_percent=6.5,
            minimum_payment_cents=30000,  # $300
        ),
    ]


@pytest.fixture
def sample_holdings() -> list[Holding]:
    """$10,000 portfolio: 70% US stocks, 30% bonds"""
    return [
        Holding(asset_class="us_stocks", symbol="VTI", quantity=20, purchase_price_cents=30000, current_price_cents=35000),
        Holding(asset_class="bonds", symbol="BND", quantity=40, purchase_price_cents=8000, current_price_cents=7500),
    ]
