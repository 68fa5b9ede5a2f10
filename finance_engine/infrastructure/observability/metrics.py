"""Prometheus metrics for monitoring simulations, recommendations and rebalancing"""

from prometheus_client import Counter, Histogram

# Debt payoff metrics
simulation_counter = Counter(
    "engine_payoff_simulations_total",
    "Debt payoff simulations run",
    ["strategy", "status"],  # snowball | avalanche, paid_off | exhausted
)

simulation_months_histogram = Histogram(
    "engine_payoff_months",
    "Simulated months until payoff",
    buckets=[6, 12, 24, 36, 60, 120, 240, 360],
)

recommendation_counter = Counter(
    "engine_strategy_recommendations_total",
    "Strategy recommendations issued",
    ["strategy"],
)

# Portfolio metrics
rebalance_plan_counter = Counter(
    "engine_rebalance_plans_total",
    "Rebalance plans generated",
    ["status"],  # within_tolerance | rebalance | no_holdings_value
)

allocation_recommendation_counter = Counter(
    "engine_allocation_recommendations_total",
    "Target allocation recommendations by model portfolio",
    ["model"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_simulation(strategy: str, status: str, total_months: int) -> None:
    """Record outcome and length of a payoff simulation"""
    simulation_counter.labels(strategy=strategy, status=status).inc()
    simulation_months_histogram.observe(total_months)


def record_recommendation(strategy: str) -> None:
    recommendation_counter.labels(strategy=strategy).inc()


def record_rebalance_plan(status: str) -> None:
    rebalance_plan_counter.labels(status=status).inc()


def record_allocation_recommendation(model_key: str) -> None:
    allocation_recommendation_counter.labels(model=model_key).inc()
