"""SQLAlchemy ORM models for the audit trail.

Tables:
- alpha_signals: every classified signal that passed the quality filter
- system_events: launch, token and system lifecycle events
"""

from sqlalchemy import Column, DateTime, Float, Index, Integer, String, Text, func
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class AlphaSignalRecord(Base):
    """Classified alpha signal."""

    __tablename__ = "alpha_signals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    source = Column(String(20), nullable=False, index=True)
    source_id = Column(String(128), nullable=False)
    channel = Column(String(200))
    author = Column(String(200))
    content = Column(Text)
    category = Column(String(30), nullable=False, index=True)
    priority = Column(String(10), nullable=False)
    confidence = Column(Float, nullable=False)
    risk = Column(Float, nullable=False)
    tickers = Column(Text)  # JSON array
    contract_addresses = Column(Text)  # JSON array
    created_at = Column(DateTime(timezone=True))
    recorded_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("ix_alpha_signals_source_source_id", "source", "source_id"),
    )


class SystemEventRecord(Base):
    """Bus event mirrored for audit."""

    __tablename__ = "system_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(String(32), nullable=False, unique=True)
    event_type = Column(String(40), nullable=False, index=True)
    payload = Column(Text)  # JSON object
    occurred_at = Column(DateTime(timezone=True), nullable=False)
    recorded_at = Column(DateTime(timezone=True), server_default=func.now())
