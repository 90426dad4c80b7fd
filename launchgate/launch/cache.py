"""Candidate Cache.

In-memory map from candidate key to LaunchCandidate. Lost on restart.
"""

from collections import Counter
from dataclasses import replace
from typing import Optional
import logging

from launchgate.ingestion.parser import ParsedLaunchCommand
from launchgate.launch.candidate import LaunchCandidate
from launchgate.launch.config import LaunchStatus

logger = logging.getLogger(__name__)


class CandidateCache:
    """Keyed store of launch candidates and their current status.

    Status transitions are not validated: any status may follow any
    other. Entries are never evicted.
    """

    def __init__(self) -> None:
        self._entries: dict[str, LaunchCandidate] = {}

    def upsert(
        self,
        key: str,
        candidate: LaunchCandidate,
        command: ParsedLaunchCommand,
        status: LaunchStatus = LaunchStatus.CANDIDATE,
    ) -> LaunchCandidate:
        """Insert or replace the entry for ``key``; always refreshes ``updated_at``."""
        stored = replace(candidate, key=key, source_command=command, status=status)
        stored.touch()
        self._entries[key] = stored
        return stored

    def update_status(self, key: str, status: LaunchStatus) -> bool:
        """Set the status of an existing entry. Returns False when absent."""
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Status update for unknown candidate %s ignored", key)
            return False
        if entry.status != status:
            logger.debug("Candidate %s: %s -> %s", key, entry.status.value, status.value)
        entry.status = status
        entry.touch()
        return True

    def get(self, key: str) -> Optional[LaunchCandidate]:
        return self._entries.get(key)

    def list(self, status: Optional[LaunchStatus] = None) -> list[LaunchCandidate]:
        entries = list(self._entries.values())
        if status is not None:
            entries = [e for e in entries if e.status == status]
        return entries

    def count_by_status(self) -> dict[str, int]:
        return dict(Counter(e.status.value for e in self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
