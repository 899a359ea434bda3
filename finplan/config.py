from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = "FinPlan"
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Forecast defaults (used when the user has no stored settings)
    forecast_default_days: int = 90
    default_low_balance_threshold: Decimal = Decimal("100.00")
    default_alert_days_ahead: int = 7
    default_include_variable_spending: bool = True

    # Debt planning
    default_safety_buffer: Decimal = Decimal("500")
    scenario_extra_payments: list[Decimal] = [
        Decimal("0"), Decimal("50"), Decimal("100"), Decimal("200"),
    ]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "FINPLAN_"}

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


settings = Settings()
