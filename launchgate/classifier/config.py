"""Classifier configuration: categories, priorities, keyword lists, thresholds."""

from dataclasses import dataclass, field
from enum import Enum
import re


class SignalCategory(str, Enum):
    """What a classified signal is about."""
    TOKEN_MENTION = "token_mention"
    LAUNCH_ALERT = "launch_alert"
    WHALE_MOVEMENT = "whale_movement"
    NEWS = "news"
    SENTIMENT = "sentiment"
    TECHNICAL = "technical"
    OTHER = "other"


class SignalPriority(str, Enum):
    """Priority tiers, lowest first."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    SignalPriority.LOW: 0,
    SignalPriority.MEDIUM: 1,
    SignalPriority.HIGH: 2,
    SignalPriority.URGENT: 3,
}


DEFAULT_LAUNCH_KEYWORDS = [
    "launch", "launching", "stealth", "fair launch", "presale",
    "mint", "minting", "deploy", "deployed", "live now",
    "just launched", "gem", "100x", "1000x", "moonshot",
    "alpha", "call", "buy signal", "entry", "dyor",
]

DEFAULT_SPAM_KEYWORDS = [
    "giveaway", "airdrop", "free", "claim now", "dm me",
    "send sol", "double your", "guaranteed", "no risk",
    "act fast", "limited time", "hurry", "last chance",
]

DEFAULT_RISK_PATTERNS = [
    r"send\s+\d+(?:\.\d+)?\s*sol",
    r"click\s+(?:here|link)",
    r"dm\s+(?:me|us)",
    r"t\.me/\w+",
    r"discord\.gg/\w+",
]

# Keyword families checked in order after launch/mention categories
DEFAULT_CATEGORY_KEYWORDS = {
    SignalCategory.WHALE_MOVEMENT: ["whale", "large transfer", "whale alert"],
    SignalCategory.NEWS: ["news", "announced", "announcement", "partnership", "listing"],
    SignalCategory.SENTIMENT: ["bullish", "bearish", "sentiment"],
    SignalCategory.TECHNICAL: ["chart", "ta", "support", "resistance", "breakout"],
}

TICKER_PATTERN = r"\$([A-Z]{2,10})\b"
CONTRACT_PATTERN = r"\b([1-9A-HJ-NP-Za-km-z]{32,44})\b"


@dataclass
class ClassifierConfig:
    """Configuration for keyword scoring and the caller-side quality filter.

    Keyword lists are matched as lower-case substrings of the content;
    category keyword families are matched as whole words. Trusted channels
    and users are matched as case-insensitive substrings of the channel
    and author names.
    """
    launch_keywords: list[str] = field(default_factory=lambda: list(DEFAULT_LAUNCH_KEYWORDS))
    spam_keywords: list[str] = field(default_factory=lambda: list(DEFAULT_SPAM_KEYWORDS))
    risk_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_RISK_PATTERNS))
    category_keywords: dict = field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_CATEGORY_KEYWORDS.items()}
    )
    ticker_pattern: str = TICKER_PATTERN
    contract_pattern: str = CONTRACT_PATTERN

    # Quality filter
    min_confidence_threshold: float = 0.5
    max_risk_threshold: float = 0.7

    # Trusted sources
    trusted_channels: list[str] = field(default_factory=list)
    trusted_users: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._compile()

    def _compile(self) -> None:
        self._ticker_re = re.compile(self.ticker_pattern)
        self._contract_re = re.compile(self.contract_pattern)
        self._risk_res = [re.compile(p, re.IGNORECASE) for p in self.risk_patterns]
        self._category_res = {
            SignalCategory(category): re.compile(
                r"\b(?:" + "|".join(re.escape(w.lower()) for w in words) + r")\b"
            )
            for category, words in self.category_keywords.items()
            if words
        }

    def recompile(self) -> None:
        """Rebuild compiled patterns after mutating pattern or keyword fields."""
        self._compile()

    @property
    def ticker_re(self) -> re.Pattern:
        return self._ticker_re

    @property
    def contract_re(self) -> re.Pattern:
        return self._contract_re

    @property
    def risk_res(self) -> list[re.Pattern]:
        return self._risk_res

    @property
    def category_res(self) -> dict[SignalCategory, re.Pattern]:
        return self._category_res
