"""Signal Normalizer.

Converts source-native messages from X/Twitter, Discord, Telegram, and
Reddit into one canonical Signal shape. Pure shape adaptation: no
scoring happens here, and malformed input degrades to safe defaults.

Example:
    from launchgate.ingestion import SignalNormalizer, parse_launch_command

    normalizer = SignalNormalizer()
    signal = normalizer.normalize("telegram", update["message"])
    command = parse_launch_command(signal)
"""

from launchgate.ingestion.base import (
    SourceType,
    Signal,
    SignalAdapter,
    UNKNOWN_AUTHOR,
    parse_timestamp,
)
from launchgate.ingestion.twitter_adapter import TwitterAdapter, tweet_urls
from launchgate.ingestion.discord_adapter import DiscordAdapter
from launchgate.ingestion.telegram_adapter import TelegramAdapter
from launchgate.ingestion.reddit_adapter import RedditAdapter
from launchgate.ingestion.normalizer import SignalNormalizer
from launchgate.ingestion.parser import (
    ParsedLaunchCommand,
    parse_launch_command,
    clean_description,
    is_valid_ticker,
    extract_hashtags,
)

__all__ = [
    # Base
    "SourceType",
    "Signal",
    "SignalAdapter",
    "UNKNOWN_AUTHOR",
    "parse_timestamp",
    # Adapters
    "TwitterAdapter",
    "DiscordAdapter",
    "TelegramAdapter",
    "RedditAdapter",
    "tweet_urls",
    # Normalizer
    "SignalNormalizer",
    # Parser
    "ParsedLaunchCommand",
    "parse_launch_command",
    "clean_description",
    "is_valid_ticker",
    "extract_hashtags",
]
