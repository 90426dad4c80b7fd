"""Classifier data models."""

from dataclasses import dataclass
from typing import Any

from launchgate.classifier.config import SignalCategory, SignalPriority
from launchgate.ingestion.base import Signal, SourceType


@dataclass(frozen=True)
class ScoreBreakdown:
    """Raw component scores behind a classification."""
    launch: float = 0.0
    spam: float = 0.0
    mention: float = 0.0
    launch_keywords: tuple[str, ...] = ()
    spam_keywords: tuple[str, ...] = ()
    risk_patterns_matched: int = 0
    trusted_channel: bool = False
    trusted_author: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "launch": round(self.launch, 4),
            "spam": round(self.spam, 4),
            "mention": round(self.mention, 4),
            "launch_keywords": list(self.launch_keywords),
            "spam_keywords": list(self.spam_keywords),
            "risk_patterns_matched": self.risk_patterns_matched,
            "trusted_channel": self.trusted_channel,
            "trusted_author": self.trusted_author,
        }


@dataclass(frozen=True)
class ClassifiedSignal:
    """A Signal plus its category, priority, confidence, and risk."""
    signal: Signal
    category: SignalCategory
    priority: SignalPriority
    confidence: float
    risk: float
    tickers: tuple[str, ...] = ()
    contract_addresses: tuple[str, ...] = ()
    scores: ScoreBreakdown = ScoreBreakdown()

    @property
    def source(self) -> SourceType:
        return self.signal.source

    @property
    def source_id(self) -> str:
        return self.signal.source_id

    @property
    def content(self) -> str:
        return self.signal.content

    @property
    def author(self) -> str:
        return self.signal.author

    @property
    def channel(self) -> str:
        return self.signal.channel

    @property
    def is_launch(self) -> bool:
        return self.category == SignalCategory.LAUNCH_ALERT

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.signal.to_dict(),
            "category": self.category.value,
            "priority": self.priority.value,
            "confidence": round(self.confidence, 4),
            "risk": round(self.risk, 4),
            "tickers": list(self.tickers),
            "contract_addresses": list(self.contract_addresses),
            "scores": self.scores.to_dict(),
        }
