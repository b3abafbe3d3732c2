"""Database models for the durable backend.

Models:
    PortfolioRecordRow: One serialized portfolio per row, with a TTL column
"""

from .portfolio_record import PortfolioRecordRow

__all__ = ["PortfolioRecordRow"]
