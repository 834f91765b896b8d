"""Configuration management using Pydantic Settings"""

from typing import List, Optional, Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ledger_insights.domain.models import ClassificationConfig, ExcludedTransaction


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LEDGER_INSIGHTS_",
        extra="ignore",
    )

    # Ledger API
    ledger_api_base: str = "http://localhost:8080/api"
    ledger_api_token: str = ""

    # Service
    service_name: str = "ledger-insights"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 10.0
    http_max_retries: int = 3
    http_backoff_base: float = 0.5  # Exponential backoff base in seconds

    # Bill cache
    bill_cache_ttl_seconds: float = 300.0

    # Classification
    no_name_expense_account_id: str = "5"
    disposable_income_tag: str = "Disposable Income"
    bills_tag: str = "Bills"
    paycheck_tag: str = "Paycheck"

    # Calculators
    expected_monthly_paycheck: Optional[float] = None
    valid_expense_accounts: List[str] = Field(default_factory=list)
    valid_transfers: List[Tuple[str, str]] = Field(default_factory=list)
    valid_destination_accounts: List[str] = Field(default_factory=list)
    excluded_additional_income_patterns: List[str] = Field(default_factory=list)
    exclude_disposable_income: bool = True
    excluded_transactions: List[ExcludedTransaction] = Field(default_factory=list)

    def classification_config(self) -> ClassificationConfig:
        return ClassificationConfig(
            no_name_expense_account_id=self.no_name_expense_account_id,
            disposable_income_tag=self.disposable_income_tag,
            bills_tag=self.bills_tag,
            paycheck_tag=self.paycheck_tag,
        )


settings = Settings()
