"""Launch Executor interface.

The executor performs the irreversible external action (token creation).
It raises on failure, typically ``LaunchExecutionError``. The coordinator
owns all retry and status logic.
"""

from dataclasses import asdict, dataclass
from typing import Any, Optional, Protocol, runtime_checkable
import hashlib
import logging

from launchgate.ingestion.parser import ParsedLaunchCommand

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LaunchRequest:
    """Everything the executor needs to create a token."""
    ticker: str
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    website: Optional[str] = None
    twitter_handle: Optional[str] = None
    proof: Optional[str] = None
    public_signals: Optional[tuple[str, ...]] = None

    @classmethod
    def from_command(cls, command: ParsedLaunchCommand) -> "LaunchRequest":
        return cls(
            ticker=command.ticker,
            name=command.name,
            description=command.description,
            image_url=command.image_url,
            website=command.website,
            twitter_handle=command.twitter_handle,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class LaunchResult:
    """Identifiers returned by a successful launch."""
    mint: str
    signature: str

    @property
    def explorer_url(self) -> str:
        return f"https://pump.fun/{self.mint}"


@runtime_checkable
class LaunchExecutor(Protocol):
    """External action boundary."""

    async def create_token(self, request: LaunchRequest) -> LaunchResult:
        """Create the token; raise on failure."""
        ...


class DryRunLaunchExecutor:
    """Executor that performs no external action.

    Logs each request and returns identifiers derived from it, so the rest
    of the pipeline behaves exactly as in live operation.
    """

    def __init__(self) -> None:
        self.requests: list[LaunchRequest] = []

    async def create_token(self, request: LaunchRequest) -> LaunchResult:
        self.requests.append(request)
        digest = hashlib.sha256(
            f"{request.ticker}:{request.name}:{len(self.requests)}".encode()
        ).hexdigest()
        logger.info("Dry run: would create %s (%s)", request.ticker, request.name)
        return LaunchResult(mint=f"dryrun{digest[:38]}", signature=digest)
