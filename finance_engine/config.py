"""Configuration management using Pydantic Settings"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Service
    service_name: str = "finance-strategy-engine"
    log_level: str = "INFO"

    # Debt payoff simulation
    max_simulation_months: int = Field(default=360, gt=0)  # 30-year horizon
    cascade_extra_payments: bool = False  # spend leftover extra on the next debt within a month

    # Portfolio rebalancing
    default_rebalance_threshold_percent: float = Field(default=5.0, ge=0)


settings = Settings()
