"""Unified launch analysis.

The Policy Gate consumes any object satisfying ``LaunchAnalysis``; the
pipeline produces either an ``LLMAnalysis`` (from the LLM analyzer) or a
``KeywordAnalysis`` (derived from the keyword classifier) depending on
whether an analyzer is configured.
"""

from dataclasses import dataclass
from typing import Any, Optional, Protocol, runtime_checkable
import math
import re

from launchgate.classifier.config import SignalCategory
from launchgate.classifier.models import ClassifiedSignal
from launchgate.ingestion.parser import ParsedLaunchCommand

MAX_TOKEN_NAME_LENGTH = 80
MAX_TOKEN_TICKER_LENGTH = 8
DEFAULT_REASON = "No reason provided"

_NON_ALNUM_RE = re.compile(r"[^A-Za-z0-9]")


@runtime_checkable
class LaunchAnalysis(Protocol):
    """Fields the Policy Gate reads from an analysis."""
    should_launch: bool
    confidence: float
    score_1to10: int
    risk_flags: tuple[str, ...]
    nsfw_or_sensitive: bool
    token_name: str
    token_ticker: str
    reason: str

    def to_dict(self) -> dict[str, Any]:
        ...


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    """Round to the nearest integer and clamp to 1..10."""
    return max(1, min(10, _round_half_up(value)))


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1")
    return False


def to_float(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(number) else number


def to_str_tuple(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(str(v) for v in value if v is not None and str(v))


def sanitize_ticker(value: Any, max_length: int = MAX_TOKEN_TICKER_LENGTH) -> str:
    return _NON_ALNUM_RE.sub("", str(value or "")).upper()[:max_length]


@dataclass(frozen=True)
class LLMAnalysis:
    """Structured verdict returned by the LLM analyzer."""
    should_launch: bool
    confidence: float
    score_1to10: int
    reason: str = DEFAULT_REASON
    token_name: str = ""
    token_ticker: str = ""
    theme: str = "general"
    tone: str = "neutral"
    keywords_detected: tuple[str, ...] = ()
    risk_flags: tuple[str, ...] = ()
    nsfw_or_sensitive: bool = False

    kind = "llm"

    @classmethod
    def from_response(cls, parsed: dict[str, Any]) -> "LLMAnalysis":
        """Leniently normalize the model's JSON object.

        Accepts alias keys (``confidence_score``, ``score``, ``name``,
        ``ticker``, ``keywords``, ``risks``, ``nsfw``/``sensitive``) and
        string booleans. A model that answers ``isLaunch`` instead of
        ``shouldLaunch`` counts as launching only at confidence >= 0.5.
        """
        confidence_raw = to_float(
            parsed.get("confidence", parsed.get("confidence_score", 0))
        )
        if "score1to10" in parsed or "score" in parsed:
            score_raw = to_float(parsed.get("score1to10", parsed.get("score")))
        else:
            score_raw = confidence_raw * 10

        should_launch = to_bool(parsed.get("shouldLaunch")) or (
            to_bool(parsed.get("isLaunch")) and confidence_raw >= 0.5
        )
        return cls(
            should_launch=should_launch,
            confidence=max(0.0, min(1.0, confidence_raw)),
            score_1to10=clamp_score(score_raw),
            reason=str(parsed.get("reason") or DEFAULT_REASON),
            token_name=str(parsed.get("tokenName") or parsed.get("name") or "")[:MAX_TOKEN_NAME_LENGTH],
            token_ticker=sanitize_ticker(parsed.get("tokenTicker") or parsed.get("ticker")),
            theme=str(parsed.get("theme") or "general"),
            tone=str(parsed.get("tone") or "neutral"),
            keywords_detected=to_str_tuple(parsed.get("keywordsDetected") or parsed.get("keywords")),
            risk_flags=to_str_tuple(parsed.get("riskFlags") or parsed.get("risks")),
            nsfw_or_sensitive=to_bool(
                parsed.get("nsfwOrSensitive") or parsed.get("nsfw") or parsed.get("sensitive")
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "should_launch": self.should_launch,
            "confidence": self.confidence,
            "score_1to10": self.score_1to10,
            "reason": self.reason,
            "token_name": self.token_name,
            "token_ticker": self.token_ticker,
            "theme": self.theme,
            "tone": self.tone,
            "keywords_detected": list(self.keywords_detected),
            "risk_flags": list(self.risk_flags),
            "nsfw_or_sensitive": self.nsfw_or_sensitive,
        }


SPAM_RISK_FLAG_THRESHOLD = 0.5
_ACTIONABLE_CATEGORIES = (SignalCategory.LAUNCH_ALERT, SignalCategory.TOKEN_MENTION)


@dataclass(frozen=True)
class KeywordAnalysis:
    """Analysis derived from keyword classification when no LLM is configured."""
    should_launch: bool
    confidence: float
    score_1to10: int
    reason: str
    token_name: str = ""
    token_ticker: str = ""
    risk_flags: tuple[str, ...] = ()
    nsfw_or_sensitive: bool = False
    category: str = SignalCategory.OTHER.value

    kind = "keyword"

    @classmethod
    def from_classified(
        cls,
        classified: ClassifiedSignal,
        command: Optional[ParsedLaunchCommand] = None,
    ) -> "KeywordAnalysis":
        actionable = classified.category in _ACTIONABLE_CATEGORIES and command is not None

        flags = []
        if classified.risk >= SPAM_RISK_FLAG_THRESHOLD:
            flags.append("spam")
        if not classified.contract_addresses:
            flags.append("no_contract")

        if actionable:
            reason = f"{classified.category.value} with launch command for {command.ticker}"
        elif command is None:
            reason = "no launch command"
        else:
            reason = f"category {classified.category.value} is not actionable"

        return cls(
            should_launch=actionable,
            confidence=classified.confidence,
            score_1to10=clamp_score(classified.confidence * 10),
            reason=reason,
            token_name=command.name if command else "",
            token_ticker=command.ticker if command else "",
            risk_flags=tuple(flags),
            category=classified.category.value,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "should_launch": self.should_launch,
            "confidence": self.confidence,
            "score_1to10": self.score_1to10,
            "reason": self.reason,
            "token_name": self.token_name,
            "token_ticker": self.token_ticker,
            "risk_flags": list(self.risk_flags),
            "nsfw_or_sensitive": self.nsfw_or_sensitive,
            "category": self.category,
        }
