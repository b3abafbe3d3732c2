"""Configuration management for the FastAPI server.

Settings are read from ``FOLIOSHARE_*`` environment variables, with
defaults suitable for local development: an in-process primary store and
no secondary backend.
"""

import logging
import os
from typing import Literal, Optional

from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application configuration settings.

    Attributes:
        app_name: Application name
        version: Application version
        debug: Debug mode flag
        host: Server host address
        port: Server port number
        cors_origins: Allowed CORS origins
        public_base_url: Base URL for view/edit links; request URL when unset
        secondary_backend: Durable backend behind the in-process cache
        database_path: SQLite file for the "database" backend
        rest_url: Project URL of the external record API ("rest" backend)
        rest_api_key: API key for the external record API
        rest_table: Table name on the external record API
        memory_max_entries: Bound on the in-process cache (0 = unbounded)
        price_timeout: Per-ticker quote timeout in seconds
        price_max_workers: Upper bound on concurrent quote lookups
        quote_base_url: Host serving the quote and symbol search APIs
    """

    app_name: str = "Folioshare API"
    version: str = "1.0.0"
    debug: bool = False

    host: str = "0.0.0.0"
    port: int = 8000

    cors_origins: list[str] = ["*"]
    public_base_url: Optional[str] = None

    # Storage configuration
    secondary_backend: Literal["none", "database", "rest"] = "none"
    database_path: str = "~/.folioshare/portfolios.db"
    rest_url: Optional[str] = None
    rest_api_key: Optional[str] = None
    rest_table: str = "portfolios"
    memory_max_entries: int = 0

    # Market data configuration
    price_timeout: float = 5.0
    price_max_workers: int = 16
    quote_base_url: str = "https://query1.finance.yahoo.com"

    class Config:
        """Pydantic configuration."""
        env_prefix = "FOLIOSHARE_"
        case_sensitive = False

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL for the database backend."""
        expanded_path = os.path.expanduser(self.database_path)
        return f"sqlite:///{expanded_path}"


# Global settings instance
settings = Settings()
