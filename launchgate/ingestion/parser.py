"""Launch command parser.

Extracts an explicit launch command (ticker, name, description, image)
from post text. Recognised forms, tried in order:

    "$LAUNCH PEPE2 My Pepe Token"   -> PEPE2, name "My Pepe Token"
    "#LAUNCH ROCKET"                -> ROCKET
    "Launching $DOGE2 - next gen"   -> DOGE2
    "launch $MOON to the moon!"     -> MOON
    any $TICKER when "launch" appears anywhere in the text
"""

from dataclasses import dataclass
from typing import Optional
import re

from launchgate.ingestion.base import Signal

_LAUNCH_KEYWORD_RE = re.compile(r"launch|launching|\$launch|#launch", re.IGNORECASE)

_LAUNCH_PATTERNS = [
    re.compile(r"\$LAUNCH\s+([A-Z0-9]{1,10})(?:\s+(.+?))?(?:\n|$|[.!?])", re.IGNORECASE),
    re.compile(r"#LAUNCH\s+([A-Z0-9]{1,10})(?:\s+(.+?))?(?:\n|$|[.!?])", re.IGNORECASE),
    re.compile(r"launching\s+\$([A-Z0-9]{1,10})", re.IGNORECASE),
    re.compile(r"launch\s+\$([A-Z0-9]{1,10})", re.IGNORECASE),
    re.compile(r"\$(?!launch\b)([A-Z0-9]{1,10})", re.IGNORECASE),
]

_IMAGE_URL_RE = re.compile(r"https?://\S+\.(?:jpg|jpeg|png|gif|webp)", re.IGNORECASE)
_URL_RE = re.compile(r"https?://\S+")
_TICKER_RE = re.compile(r"^[A-Z0-9]{1,10}$")
_HASHTAG_RE = re.compile(r"#[A-Za-z0-9_]+")

MAX_DESCRIPTION_LENGTH = 200


@dataclass(frozen=True)
class ParsedLaunchCommand:
    """A launch request extracted from a post (or suggested by the analyzer)."""
    ticker: str
    name: str
    source_id: str
    source_author: str
    source_text: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    website: Optional[str] = None
    twitter_handle: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "ticker": self.ticker,
            "name": self.name,
            "description": self.description,
            "image_url": self.image_url,
            "website": self.website,
            "twitter_handle": self.twitter_handle,
            "source_id": self.source_id,
            "source_author": self.source_author,
        }


def parse_launch_command(signal: Signal) -> Optional[ParsedLaunchCommand]:
    """Parse a launch command from a signal's content.

    Returns None when the text has no launch keyword or no ticker.
    """
    text = signal.content
    if not text or not _LAUNCH_KEYWORD_RE.search(text):
        return None

    ticker: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None

    for pattern in _LAUNCH_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        ticker = match.group(1).upper()
        extra = match.group(2) if match.lastindex and match.lastindex >= 2 else None
        if extra:
            words = extra.strip().split()
            if words:
                name = " ".join(words[:4])
                if len(words) > 4:
                    description = extra.strip()
        break

    if not ticker:
        return None

    image_match = _IMAGE_URL_RE.search(text)

    return ParsedLaunchCommand(
        ticker=ticker,
        name=name or f"{ticker} Token",
        description=description or clean_description(text, ticker, signal.author),
        image_url=image_match.group(0) if image_match else None,
        source_id=signal.source_id,
        source_author=signal.author,
        source_text=text,
    )


def clean_description(text: str, ticker: str, author: str = "") -> str:
    """Turn post text into a token description (URLs and launch markers stripped)."""
    cleaned = _URL_RE.sub("", text)
    cleaned = re.sub(r"[$#]LAUNCH\s+", "", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()

    if len(cleaned) > MAX_DESCRIPTION_LENGTH:
        cleaned = cleaned[:MAX_DESCRIPTION_LENGTH - 3] + "..."

    if len(cleaned) < 10:
        by = f" by @{author}" if author else ""
        cleaned = f"{ticker} - launched from a community post{by}"

    return cleaned


def is_valid_ticker(ticker: str) -> bool:
    """Ticker must be 1-10 uppercase alphanumerics."""
    return bool(_TICKER_RE.match(ticker))


def extract_hashtags(text: str) -> list[str]:
    """Lower-cased hashtags without the leading '#'."""
    return [tag[1:].lower() for tag in _HASHTAG_RE.findall(text)]
