"""Configuration for the outbound market-data and record-store clients."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class YahooFinanceConfig:
    """
    Configuration for the Yahoo Finance quote client.

    Attributes:
        base_url: Host serving the chart (quote) and symbol search APIs
        timeout: Per-request timeout in seconds
        max_retries: Retry attempts for transient failures
        retry_delay: Initial delay between retries (seconds)
        user_agent: Browser-like User-Agent; the endpoints reject bare clients
    """

    base_url: str = "https://query1.finance.yahoo.com"
    timeout: float = 5.0
    max_retries: int = 0
    retry_delay: float = 0.5
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
    )

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.timeout <= 0:
            raise ValueError("Timeout must be positive")

        if self.max_retries < 0:
            raise ValueError("Max retries cannot be negative")

        if self.retry_delay <= 0:
            raise ValueError("Retry delay must be positive")


@dataclass
class RecordAPIConfig:
    """
    Configuration for the external PostgREST-style record API.

    Attributes:
        base_url: Project URL (the ``/rest/v1`` suffix is appended)
        api_key: Key sent as both ``apikey`` and bearer token
        table: Table holding one row per portfolio
        timeout: Per-request timeout in seconds
        max_retries: Retry attempts for transient failures
    """

    base_url: str
    api_key: str
    table: str = "portfolios"
    timeout: float = 10.0
    max_retries: int = 2
    retry_delay: float = 0.5

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.base_url:
            raise ValueError("Record API URL cannot be empty")

        if not self.api_key:
            raise ValueError("Record API key cannot be empty")

        if self.timeout <= 0:
            raise ValueError("Timeout must be positive")

    @property
    def rest_url(self) -> str:
        """Base URL of the REST endpoints."""
        return f"{self.base_url.rstrip('/')}/rest/v1"

    @classmethod
    def from_values(
        cls, base_url: Optional[str], api_key: Optional[str], table: str = "portfolios"
    ) -> "RecordAPIConfig":
        """Build a config from optional settings values, failing loudly if unset."""
        if not base_url or not api_key:
            raise ValueError(
                "Record API backend requires both a URL and an API key "
                "(FOLIOSHARE_REST_URL / FOLIOSHARE_REST_API_KEY)"
            )
        return cls(base_url=base_url, api_key=api_key, table=table)
