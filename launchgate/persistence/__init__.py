"""Best-effort audit persistence (SQLAlchemy)."""

from launchgate.persistence.models import Base, AlphaSignalRecord, SystemEventRecord
from launchgate.persistence.sink import AuditSink, AUDITED_EVENT_TYPES

__all__ = [
    "Base",
    "AlphaSignalRecord",
    "SystemEventRecord",
    "AuditSink",
    "AUDITED_EVENT_TYPES",
]
