"""Audit sink.

Best-effort persistence of classified signals and lifecycle events. Every
``SQLAlchemyError`` is logged and swallowed: the decision pipeline never
depends on the database being reachable. Writes triggered from the event
bus run in a worker thread so a slow database never blocks the loop.
"""

from dataclasses import asdict
from typing import Any, Optional
from contextlib import nullcontext
import asyncio
import json
import logging
import threading

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from launchgate.classifier.models import ClassifiedSignal
from launchgate.event_bus import Event, EventBus, EventType
from launchgate.persistence.models import AlphaSignalRecord, Base, SystemEventRecord

logger = logging.getLogger(__name__)

AUDITED_EVENT_TYPES = (
    EventType.LAUNCH_DETECTED,
    EventType.TOKEN_CREATING,
    EventType.TOKEN_CREATED,
    EventType.TOKEN_FAILED,
    EventType.SYSTEM_STARTED,
    EventType.SYSTEM_STOPPED,
    EventType.SYSTEM_ERROR,
)


def _engine_for(database_url: str):
    in_memory = database_url == "sqlite://" or (
        database_url.startswith("sqlite") and ":memory:" in database_url
    )
    if in_memory:
        # One shared connection so worker threads see the same in-memory database
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(database_url, pool_pre_ping=True)


class AuditSink:
    """Writes classified signals and bus events to a SQL database.

    Example:
        sink = AuditSink("sqlite:///launchgate.db")
        sink.create_schema()
        sink.attach(bus)
        await sink.record_signal_async(classified)
    """

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url
        self._engine = _engine_for(database_url)
        self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        self._writes = 0
        self._errors = 0
        self._pending: set[asyncio.Task] = set()
        # In-memory databases share one connection across threads
        self._conn_lock = threading.Lock() if isinstance(self._engine.pool, StaticPool) else nullcontext()

    def create_schema(self) -> bool:
        try:
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            self._errors += 1
            logger.error("Audit schema creation failed: %s", e)
            return False
        return True

    def record_signal(self, classified: ClassifiedSignal) -> Optional[int]:
        """Persist a classified signal. Returns the record id, or None on failure."""
        signal = classified.signal
        rec = AlphaSignalRecord(
            source=signal.source.value,
            source_id=signal.source_id,
            channel=signal.channel,
            author=signal.author,
            content=signal.content,
            category=classified.category.value,
            priority=classified.priority.value,
            confidence=classified.confidence,
            risk=classified.risk,
            tickers=json.dumps(list(classified.tickers)),
            contract_addresses=json.dumps(list(classified.contract_addresses)),
            created_at=signal.created_at,
        )
        return self._write(rec, f"signal {signal.source.value}:{signal.source_id}")

    async def record_signal_async(self, classified: ClassifiedSignal) -> Optional[int]:
        return await asyncio.to_thread(self.record_signal, classified)

    def record_event(self, event: Event) -> Optional[int]:
        rec = SystemEventRecord(
            event_id=event.id,
            event_type=event.type.value,
            payload=json.dumps(asdict(event.data), default=str),
            occurred_at=event.timestamp,
        )
        return self._write(rec, f"event {event.type.value}")

    def _write(self, rec: Any, label: str) -> Optional[int]:
        try:
            with self._conn_lock, self._session_factory() as session:
                session.add(rec)
                session.commit()
                self._writes += 1
                return rec.id
        except SQLAlchemyError as e:
            self._errors += 1
            logger.error("Audit write of %s failed: %s", label, e)
            return None

    def attach(self, bus: EventBus) -> None:
        """Mirror launch, token and system lifecycle events into system_events."""
        for event_type in AUDITED_EVENT_TYPES:
            bus.on(event_type, self._on_event)

    def _on_event(self, event: Event) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.record_event(event)
            return
        task = loop.create_task(asyncio.to_thread(self.record_event, event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for event writes scheduled by the bus handler."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def recent_signals(self, limit: int = 50) -> list[dict]:
        """Load recent signals (newest first)."""
        try:
            with self._conn_lock, self._session_factory() as session:
                rows = (
                    session.query(AlphaSignalRecord)
                    .order_by(AlphaSignalRecord.id.desc())
                    .limit(limit)
                    .all()
                )
        except SQLAlchemyError as e:
            self._errors += 1
            logger.error("Audit read failed: %s", e)
            return []
        out = []
        for r in rows:
            out.append({
                "id": r.id,
                "source": r.source,
                "source_id": r.source_id,
                "channel": r.channel,
                "author": r.author,
                "content": r.content,
                "category": r.category,
                "priority": r.priority,
                "confidence": r.confidence,
                "risk": r.risk,
                "tickers": json.loads(r.tickers or "[]"),
                "contract_addresses": json.loads(r.contract_addresses or "[]"),
                "created_at": r.created_at,
                "recorded_at": r.recorded_at,
            })
        return out

    def recent_events(self, event_type: Optional[EventType] = None, limit: int = 50) -> list[dict]:
        try:
            with self._conn_lock, self._session_factory() as session:
                query = session.query(SystemEventRecord)
                if event_type is not None:
                    query = query.filter(SystemEventRecord.event_type == event_type.value)
                rows = query.order_by(SystemEventRecord.id.desc()).limit(limit).all()
        except SQLAlchemyError as e:
            self._errors += 1
            logger.error("Audit read failed: %s", e)
            return []
        return [
            {
                "id": r.id,
                "event_id": r.event_id,
                "event_type": r.event_type,
                "payload": json.loads(r.payload or "{}"),
                "occurred_at": r.occurred_at,
            }
            for r in rows
        ]

    def dispose(self) -> None:
        self._engine.dispose()

    def get_stats(self) -> dict[str, Any]:
        return {"writes": self._writes, "errors": self._errors, "pending": len(self._pending)}
