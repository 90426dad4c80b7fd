"""Alpha Signal Scorer.

Keyword and pattern scoring of normalized signals. Produces a bounded
confidence (how actionable) and risk (how spam-like) plus a category and
priority. Pure functions: no I/O, no shared state.
"""

import logging
from typing import Optional

from launchgate.classifier.config import (
    ClassifierConfig,
    SignalCategory,
    SignalPriority,
)
from launchgate.classifier.models import ClassifiedSignal, ScoreBreakdown
from launchgate.ingestion.base import Signal

logger = logging.getLogger(__name__)

LAUNCH_KEYWORD_WEIGHT = 0.15
CONTRACT_BONUS = 0.25
SPAM_KEYWORD_WEIGHT = 0.2
RISK_PATTERN_WEIGHT = 0.15
TICKER_WEIGHT = 0.2
MAX_SCORED_TICKERS = 3

TRUSTED_CHANNEL_LAUNCH_BONUS = 0.2
TRUSTED_CHANNEL_SPAM_RELIEF = 0.3
TRUSTED_AUTHOR_LAUNCH_BONUS = 0.15
TRUSTED_AUTHOR_SPAM_RELIEF = 0.2

# Checked in this order after launch_alert / token_mention
_FAMILY_ORDER = (
    SignalCategory.WHALE_MOVEMENT,
    SignalCategory.NEWS,
    SignalCategory.SENTIMENT,
    SignalCategory.TECHNICAL,
)


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def _unique(items) -> tuple[str, ...]:
    return tuple(dict.fromkeys(items))


def extract_tickers(content: str, config: Optional[ClassifierConfig] = None) -> tuple[str, ...]:
    """Cashtags in first-seen order, without the ``$``."""
    config = config or ClassifierConfig()
    return _unique(config.ticker_re.findall(content or ""))


def extract_contract_addresses(
    content: str, config: Optional[ClassifierConfig] = None
) -> tuple[str, ...]:
    """Base58 strings of contract-address length, first-seen order."""
    config = config or ClassifierConfig()
    return _unique(config.contract_re.findall(content or ""))


def _matches_any(value: str, needles: list[str]) -> bool:
    value = (value or "").lower()
    return any(n and n.lower() in value for n in needles)


def assign_priority(
    category: SignalCategory, confidence: float, risk: float
) -> SignalPriority:
    """Map a category and scores onto a priority tier.

    Monotone non-decreasing in confidence for fixed category and risk.
    """
    if category == SignalCategory.LAUNCH_ALERT and confidence >= 0.7 and risk < 0.3:
        return SignalPriority.URGENT
    if confidence >= 0.6 and risk < 0.4:
        return SignalPriority.HIGH
    if confidence >= 0.4:
        return SignalPriority.MEDIUM
    return SignalPriority.LOW


def _categorize(
    lowered: str,
    launch_score: float,
    tickers: tuple[str, ...],
    contracts: tuple[str, ...],
    config: ClassifierConfig,
) -> SignalCategory:
    if launch_score >= 0.3 and contracts:
        return SignalCategory.LAUNCH_ALERT
    if launch_score >= 0.2 or tickers:
        return SignalCategory.TOKEN_MENTION
    for category in _FAMILY_ORDER:
        pattern = config.category_res.get(category)
        if pattern is not None and pattern.search(lowered):
            return category
    return SignalCategory.OTHER


def classify(signal: Signal, config: Optional[ClassifierConfig] = None) -> ClassifiedSignal:
    """Score and categorize a single signal.

    Args:
        signal: Normalized signal.
        config: Keyword lists, patterns, and trusted sources.

    Returns:
        ClassifiedSignal with confidence and risk clamped to [0, 1].
    """
    config = config or ClassifierConfig()
    content = signal.content or ""
    lowered = content.lower()

    tickers = extract_tickers(content, config)
    contracts = extract_contract_addresses(content, config)

    launch_hits = tuple(k for k in config.launch_keywords if k.lower() in lowered)
    spam_hits = tuple(k for k in config.spam_keywords if k.lower() in lowered)
    risk_hits = sum(1 for pattern in config.risk_res if pattern.search(content))

    launch = LAUNCH_KEYWORD_WEIGHT * len(launch_hits)
    if contracts:
        launch += CONTRACT_BONUS
    spam = SPAM_KEYWORD_WEIGHT * len(spam_hits) + RISK_PATTERN_WEIGHT * risk_hits
    mention = TICKER_WEIGHT * min(len(tickers), MAX_SCORED_TICKERS)

    trusted_channel = _matches_any(signal.channel, config.trusted_channels)
    if trusted_channel:
        launch += TRUSTED_CHANNEL_LAUNCH_BONUS
        spam -= TRUSTED_CHANNEL_SPAM_RELIEF

    trusted_author = _matches_any(signal.author, config.trusted_users)
    if trusted_author:
        launch += TRUSTED_AUTHOR_LAUNCH_BONUS
        spam -= TRUSTED_AUTHOR_SPAM_RELIEF

    confidence = _clamp01(launch + mention)
    risk = _clamp01(spam)
    category = _categorize(lowered, launch, tickers, contracts, config)
    priority = assign_priority(category, confidence, risk)

    return ClassifiedSignal(
        signal=signal,
        category=category,
        priority=priority,
        confidence=confidence,
        risk=risk,
        tickers=tickers,
        contract_addresses=contracts,
        scores=ScoreBreakdown(
            launch=launch,
            spam=spam,
            mention=mention,
            launch_keywords=launch_hits,
            spam_keywords=spam_hits,
            risk_patterns_matched=risk_hits,
            trusted_channel=trusted_channel,
            trusted_author=trusted_author,
        ),
    )


def is_filtered(classified: ClassifiedSignal, config: Optional[ClassifierConfig] = None) -> bool:
    """True when the signal should be dropped by the quality filter."""
    config = config or ClassifierConfig()
    return (
        classified.confidence < config.min_confidence_threshold
        or classified.risk > config.max_risk_threshold
    )
