"""Signal Normalizer Base.

Canonical Signal shape shared by every source adapter, the adapter
protocol, and the defensive field readers adapters use so that partial
or malformed payloads degrade to safe defaults instead of raising.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Protocol, runtime_checkable
import logging
import uuid

logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = "unknown"


class SourceType(str, Enum):
    """Supported signal sources."""
    TWITTER = "twitter"
    DISCORD = "discord"
    TELEGRAM = "telegram"
    REDDIT = "reddit"


@dataclass(frozen=True)
class Signal:
    """Canonical representation of one inbound message from any source."""
    source: SourceType
    source_id: str
    content: str = ""
    channel: str = ""
    author: str = UNKNOWN_AUTHOR
    author_id: str = ""
    raw_payload: dict = field(default_factory=dict, compare=False, hash=False)
    has_media: bool = False
    media_urls: tuple[str, ...] = ()
    engagement_score: float = 0.0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def identity(self) -> tuple[str, str]:
        return (self.source.value, self.source_id)

    def to_dict(self) -> dict:
        return {
            "source": self.source.value,
            "source_id": self.source_id,
            "channel": self.channel,
            "author": self.author,
            "author_id": self.author_id,
            "content": self.content,
            "has_media": self.has_media,
            "media_urls": list(self.media_urls),
            "engagement_score": self.engagement_score,
            "created_at": self.created_at.isoformat(),
        }


@runtime_checkable
class SignalAdapter(Protocol):
    """Protocol that every source adapter implements."""

    @property
    def source(self) -> SourceType:
        """The source this adapter handles."""
        ...

    def to_signal(self, payload: Any) -> Signal:
        """Convert a source-native message into a Signal. Never raises."""
        ...


# ═══════════════════════════════════════════════════════════════════════
# Defensive field readers
# ═══════════════════════════════════════════════════════════════════════


def as_dict(value: Any) -> dict:
    """Return value if it is a dict, else an empty dict."""
    return value if isinstance(value, dict) else {}


def as_list(value: Any) -> list:
    """Return value if it is a list or tuple, else an empty list."""
    return list(value) if isinstance(value, (list, tuple)) else []


def as_str(value: Any, default: str = "") -> str:
    """Coerce scalars to str; None and containers become ``default``."""
    if value is None or isinstance(value, (dict, list, tuple, set)):
        return default
    text = str(value)
    return text if text else default


def as_number(value: Any, default: float = 0.0) -> float:
    """Coerce to float, falling back on bad input (bools count as bad)."""
    if isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def parse_timestamp(value: Any) -> datetime:
    """Parse ISO-8601 strings, unix seconds, or datetimes into aware UTC.

    Anything unparseable becomes the current time.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(float(value), tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return datetime.now(timezone.utc)
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return datetime.now(timezone.utc)
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return datetime.now(timezone.utc)


def fallback_id(source: SourceType) -> str:
    """Generate an id for payloads that arrive without one."""
    generated = f"{source.value}-{uuid.uuid4().hex[:12]}"
    logger.warning("Payload from %s has no id, using %s", source.value, generated)
    return generated


def coerce_payload(payload: Any) -> dict:
    """Wrap non-dict payloads so the original is still preserved for audit."""
    if isinstance(payload, dict):
        return payload
    if payload is None:
        return {}
    return {"value": payload}


def first_present(mapping: dict, *keys: str, default: Optional[Any] = None) -> Any:
    """Return the first non-None value among keys (handles camel/snake aliases)."""
    for key in keys:
        value = mapping.get(key)
        if value is not None:
            return value
    return default
