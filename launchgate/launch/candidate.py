"""Launch candidates."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from launchgate.analysis.models import LaunchAnalysis
from launchgate.ingestion.base import Signal
from launchgate.ingestion.parser import ParsedLaunchCommand
from launchgate.ingestion.twitter_adapter import tweet_urls
from launchgate.launch.config import LaunchStatus


def candidate_key(ticker: str, source_id: str) -> str:
    """Identity of a launch candidate: ``TICKER-sourceId``."""
    return f"{ticker}-{source_id}"


def tweet_url(author: str, tweet_id: str) -> str:
    return f"https://twitter.com/{author}/status/{tweet_id}"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class LaunchCandidate:
    """A parsed launch command together with the analysis that judged it.

    ``status`` and ``updated_at`` are the only fields mutated after the
    candidate is stored in the cache.
    """
    key: str
    source_command: ParsedLaunchCommand
    analysis: Optional[LaunchAnalysis] = None
    status: LaunchStatus = LaunchStatus.CANDIDATE
    updated_at: datetime = field(default_factory=_now)

    # Tweet metadata
    source: str = "twitter"
    tweet_id: str = ""
    tweet_url: str = ""
    tweet_text: str = ""
    author_id: str = ""
    author_handle: str = ""
    urls: tuple[str, ...] = ()
    media_urls: tuple[str, ...] = ()
    created_at: Optional[datetime] = None

    @property
    def ticker(self) -> str:
        return self.source_command.ticker

    @property
    def name(self) -> str:
        return self.source_command.name

    def touch(self) -> None:
        self.updated_at = _now()

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "status": self.status.value,
            "updated_at": self.updated_at.isoformat(),
            "command": self.source_command.to_dict(),
            "analysis": self.analysis.to_dict() if self.analysis is not None else None,
            "source": self.source,
            "tweet_id": self.tweet_id,
            "tweet_url": self.tweet_url,
            "tweet_text": self.tweet_text,
            "author_id": self.author_id,
            "author_handle": self.author_handle,
            "urls": list(self.urls),
            "media_urls": list(self.media_urls),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


def build_launch_candidate(
    signal: Signal,
    command: ParsedLaunchCommand,
    analysis: Optional[LaunchAnalysis] = None,
    status: LaunchStatus = LaunchStatus.CANDIDATE,
) -> LaunchCandidate:
    """Assemble a candidate from the tweet signal it came from."""
    return LaunchCandidate(
        key=candidate_key(command.ticker, signal.source_id),
        source_command=command,
        analysis=analysis,
        status=status,
        source=signal.source.value,
        tweet_id=signal.source_id,
        tweet_url=tweet_url(signal.author, signal.source_id),
        tweet_text=signal.content,
        author_id=signal.author_id,
        author_handle=signal.author,
        urls=tuple(tweet_urls(signal)),
        media_urls=signal.media_urls,
        created_at=signal.created_at,
    )
