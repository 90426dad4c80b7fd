"""Launch Coordinator.

Owns the action path: acquire the idempotency key, call the executor,
record the outcome in the cache, and publish the token lifecycle events.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional
import logging

from launchgate.errors import LaunchGateError
from launchgate.event_bus import EventBus, EventType, token_event_data
from launchgate.launch.cache import CandidateCache
from launchgate.launch.config import LaunchStatus
from launchgate.launch.dedup import IdempotencyStore, InMemoryIdempotencyStore
from launchgate.launch.executor import LaunchExecutor, LaunchRequest, LaunchResult
from launchgate.logging_config import log_performance

logger = logging.getLogger(__name__)


class OutcomeStatus(str, Enum):
    LAUNCHED = "launched"
    DUPLICATE = "duplicate"
    FAILED = "failed"


@dataclass(frozen=True)
class LaunchOutcome:
    """Result of one launch attempt."""
    key: str
    status: OutcomeStatus
    result: Optional[LaunchResult] = None
    error: Optional[str] = None

    @property
    def launched(self) -> bool:
        return self.status == OutcomeStatus.LAUNCHED


class LaunchCoordinator:
    """At-most-once launch execution per candidate key.

    The key is acquired synchronously before the first ``await``; a failed
    launch releases it before the failure is reported, so a retry can
    acquire it again. Executor errors never propagate to the caller.

    Example:
        coordinator = LaunchCoordinator(bus, cache, InMemoryIdempotencyStore(), executor)
        outcome = await coordinator.launch("PEPE2-123", LaunchRequest("PEPE2", "Pepe Two"))
    """

    def __init__(
        self,
        bus: EventBus,
        cache: CandidateCache,
        store: Optional[IdempotencyStore],
        executor: LaunchExecutor,
    ) -> None:
        self.bus = bus
        self.cache = cache
        self.store = store if store is not None else InMemoryIdempotencyStore()
        self.executor = executor
        self._launched = 0
        self._duplicates = 0
        self._failed = 0

    async def launch(self, key: str, request: LaunchRequest) -> LaunchOutcome:
        if not self.store.try_acquire(key):
            self._duplicates += 1
            logger.info("Skipping duplicate launch for %s", key)
            return LaunchOutcome(key=key, status=OutcomeStatus.DUPLICATE)

        self.bus.emit(
            EventType.TOKEN_CREATING,
            token_event_data(request.ticker, request.name, candidate_key=key),
        )
        try:
            result = await self._execute(request)
        except Exception as e:
            self.store.release(key)
            self.cache.update_status(key, LaunchStatus.FAILED)
            self._failed += 1
            details = e.details if isinstance(e, LaunchGateError) else {}
            logger.error("Launch of %s failed: %s", key, e, extra={"extra_data": details})
            self.bus.emit(
                EventType.TOKEN_FAILED,
                token_event_data(request.ticker, request.name, candidate_key=key, error=str(e)),
            )
            return LaunchOutcome(key=key, status=OutcomeStatus.FAILED, error=str(e))

        self.cache.update_status(key, LaunchStatus.LAUNCHED)
        self._launched += 1
        logger.info("Launched %s: mint=%s", key, result.mint)
        self.bus.emit(
            EventType.TOKEN_CREATED,
            token_event_data(
                request.ticker,
                request.name,
                candidate_key=key,
                mint=result.mint,
                signature=result.signature,
            ),
        )
        return LaunchOutcome(key=key, status=OutcomeStatus.LAUNCHED, result=result)

    @log_performance()
    async def _execute(self, request: LaunchRequest) -> LaunchResult:
        return await self.executor.create_token(request)

    async def retry(self, key: str) -> Optional[LaunchOutcome]:
        """Re-arm a failed candidate and launch it again.

        Returns None when the key is unknown or not in ``failed``.
        """
        candidate = self.cache.get(key)
        if candidate is None or candidate.status != LaunchStatus.FAILED:
            logger.warning("Retry refused for %s: not a failed candidate", key)
            return None
        self.cache.update_status(key, LaunchStatus.CANDIDATE)
        self.cache.update_status(key, LaunchStatus.QUEUED)
        return await self.launch(key, LaunchRequest.from_command(candidate.source_command))

    def get_stats(self) -> dict[str, Any]:
        return {
            "launched": self._launched,
            "duplicates": self._duplicates,
            "failed": self._failed,
        }
