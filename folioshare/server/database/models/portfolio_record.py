"""Portfolio record database model.

Rows hold the full JSON form of a portfolio. Only the key and the
native TTL live in their own columns; the portfolio's own ``expiresAt``
inside the payload stays authoritative.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Text

from folioshare.server.database.session import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PortfolioRecordRow(Base):
    """Serialized portfolio keyed by its public identifier.

    Attributes:
        id: Public portfolio identifier
        payload: JSON document of the portfolio record
        expires_at: Backend TTL deadline (NULL = keep forever)
        created_at: When the row was first written
        updated_at: When the row was last written
    """

    __tablename__ = "portfolio_records"

    id = Column(String, primary_key=True)
    payload = Column(Text, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<PortfolioRecordRow(id={self.id}, expires_at={self.expires_at})>"
